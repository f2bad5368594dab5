"""Pydantic models for the orchestration layer.

This module exports the filter, time frame, intent, shipment and result
models shared by the pipeline and the service clients.
"""

from src.orchestrator.models.filter_set import (
    ALIAS_RECORD_FIELDS,
    FILTER_ALIASES,
    RECORD_FIELDS,
    RISK_SCORE_FIELDS,
    SHIPMENT_FIELDS,
    TIME_PHRASE_FIELDS,
    FilterSet,
    ParameterizedQuery,
    ShipmentTimeFrames,
    TimeFrame,
)
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.result import PipelineResult
from src.orchestrator.models.shipment import (
    PredictionResult,
    ShipmentFetchResult,
    ShipmentRecord,
    ShipmentRisk,
)

__all__ = [
    # Filter models
    "ALIAS_RECORD_FIELDS",
    "FILTER_ALIASES",
    "RECORD_FIELDS",
    "RISK_SCORE_FIELDS",
    "SHIPMENT_FIELDS",
    "TIME_PHRASE_FIELDS",
    "FilterSet",
    "ParameterizedQuery",
    "ShipmentTimeFrames",
    "TimeFrame",
    # Intent
    "QueryIntent",
    # Shipment models
    "PredictionResult",
    "ShipmentFetchResult",
    "ShipmentRecord",
    "ShipmentRisk",
    # Result
    "PipelineResult",
]
