"""Service layer for ShipRisk.

Clients for the external collaborators: the text-completion service,
the shipment store and the SLA prediction endpoint.
"""

from src.services.prediction_endpoint import HttpPredictionEndpoint, PredictionEndpoint
from src.services.shipment_store import HttpShipmentStore, ShipmentStore
from src.services.sla_prediction import SlaPredictionAdapter
from src.services.text_completion import (
    AnthropicTextCompletionService,
    TextCompletionService,
)

__all__ = [
    "AnthropicTextCompletionService",
    "TextCompletionService",
    "HttpShipmentStore",
    "ShipmentStore",
    "HttpPredictionEndpoint",
    "PredictionEndpoint",
    "SlaPredictionAdapter",
]
