"""Factory wiring concrete services into a PipelineOrchestrator.

The API lifespan and the CLI both go through here, so neither imports
concrete service implementations directly.
"""

from src.cli.config import AppConfig
from src.orchestrator.pipeline import PipelineOrchestrator
from src.services.prediction_endpoint import HttpPredictionEndpoint
from src.services.shipment_store import HttpShipmentStore
from src.services.sla_prediction import SlaPredictionAdapter
from src.services.text_completion import AnthropicTextCompletionService


def build_orchestrator(config: AppConfig) -> PipelineOrchestrator:
    """Create a PipelineOrchestrator from validated configuration.

    Args:
        config: Loaded config. Validated with ``require_runtime`` first.

    Returns:
        Orchestrator backed by the Anthropic completion service, the
        shipment HTTP API and the configured prediction mode.

    Raises:
        ConfigurationError: If a required setting is missing.
    """
    config.require_runtime()

    completion = AnthropicTextCompletionService(
        api_key=config.completion.api_key,
        model=config.completion.model,
        max_tokens=config.completion.max_tokens,
        timeout_seconds=config.completion.timeout_seconds,
    )
    store = HttpShipmentStore(
        url=config.shipment_api.url,
        timeout_seconds=config.shipment_api.timeout_seconds,
    )

    prediction = config.prediction
    endpoint = None
    if not prediction.use_mock_predictions:
        endpoint = HttpPredictionEndpoint(
            endpoint=prediction.endpoint,
            api_key=prediction.api_key,
            timeout_seconds=prediction.timeout_seconds,
        )
    predictor = SlaPredictionAdapter(
        endpoint=endpoint,
        use_mock=prediction.use_mock_predictions,
        mock_predictions_path=prediction.mock_predictions_path,
    )

    return PipelineOrchestrator(
        completion=completion,
        store=store,
        predictor=predictor,
        query_mode=config.shipment_api.query_mode,
    )
