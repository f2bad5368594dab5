"""Pytest fixtures for API tests.

Provides a test client whose app is wired to an orchestrator built from
the in-memory fakes, so no external service is ever contacted.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.orchestrator.models.shipment import PredictionResult
from src.orchestrator.pipeline import PipelineOrchestrator
from src.services.sla_prediction import SlaPredictionAdapter


@pytest.fixture
def orchestrator(completion, store, prediction_endpoint, fixed_now) -> PipelineOrchestrator:
    """Orchestrator over the shared fakes with a fixed clock."""
    prediction_endpoint.result = PredictionResult(prediction=[1, 0, 0], probability=[0.9, 0.2, 0.1])
    return PipelineOrchestrator(
        completion=completion,
        store=store,
        predictor=SlaPredictionAdapter(endpoint=prediction_endpoint),
        clock=lambda: fixed_now,
    )


@pytest.fixture
def client(orchestrator) -> Generator[TestClient, None, None]:
    """Test client for the app with the fake-backed orchestrator.

    Server exceptions are turned into responses so the 500 handler can
    be asserted on.
    """
    app = create_app(orchestrator=orchestrator)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
