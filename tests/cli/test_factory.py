"""Tests for the orchestrator factory."""

import pytest

from src.cli.config import AppConfig
from src.cli.factory import build_orchestrator
from src.errors import ConfigurationError
from src.orchestrator.pipeline import PipelineOrchestrator
from src.services.prediction_endpoint import HttpPredictionEndpoint
from src.services.shipment_store import HttpShipmentStore
from src.services.text_completion import AnthropicTextCompletionService


def _config(**prediction) -> AppConfig:
    return AppConfig(
        completion={"api_key": "sk-test"},
        shipment_api={"url": "https://shipments.example.test", "query_mode": "parameterized"},
        prediction=prediction or {"endpoint": "https://ml.example.test", "api_key": "ml-key"},
    )


class TestBuildOrchestrator:
    """Tests for build_orchestrator."""

    def test_missing_settings_fail_fast(self):
        with pytest.raises(ConfigurationError):
            build_orchestrator(AppConfig())

    def test_live_wiring(self):
        orchestrator = build_orchestrator(_config())
        assert isinstance(orchestrator, PipelineOrchestrator)
        assert isinstance(orchestrator._completion, AnthropicTextCompletionService)
        assert isinstance(orchestrator._store, HttpShipmentStore)
        assert isinstance(orchestrator._predictor._endpoint, HttpPredictionEndpoint)
        assert orchestrator._query_mode == "parameterized"
        assert not orchestrator._predictor.uses_mock

    def test_mock_wiring(self, tmp_path):
        orchestrator = build_orchestrator(
            _config(use_mock_predictions=True, mock_predictions_path=str(tmp_path / "mock.json"))
        )
        assert orchestrator._predictor.uses_mock
        assert orchestrator._predictor._endpoint is None
