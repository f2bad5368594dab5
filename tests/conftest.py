"""Root-level pytest fixtures for all tests.

Provides shared fixtures:
- A fixed reference clock for time-phrase resolution
- Sample shipment records
- Scripted fakes for the completion service, shipment store and
  prediction endpoint
"""

import os
from datetime import datetime

import pytest

from tests.helpers import FakeCompletionService, FakePredictionEndpoint, FakeShipmentStore

# Wednesday. The surrounding week runs Sunday 2026-10-18 to Saturday 2026-10-24.
FIXED_NOW = datetime(2026, 10, 21, 14, 30, 0)


# ============================================================================
# Pytest Markers
# ============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external services"
    )


# ============================================================================
# Skip Conditions
# ============================================================================

requires_anthropic_key = pytest.mark.skipif(
    not os.environ.get("ANTHROPIC_API_KEY"),
    reason="ANTHROPIC_API_KEY not set"
)


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _isolate_shiprisk_env(monkeypatch):
    """Keep a developer's SHIPRISK_* variables out of config tests."""
    for key in list(os.environ):
        if key.startswith("SHIPRISK_"):
            monkeypatch.delenv(key, raising=False)


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Reference instant used wherever a clock is injected."""
    return FIXED_NOW


@pytest.fixture
def sample_shipments() -> list[dict]:
    """Shipment records in the shape the shipment API returns."""
    return [
        {
            "id": "1",
            "upsShipmentNumber": "1Z0001",
            "shipmentMode": "Air",
            "originCity": "Tokyo",
            "destinationCity": "Chicago",
            "shipmentCreationDatetime": "2026-10-19T08:00:00",
            "pickupDatetime": "2026-10-20T10:00:00",
            "deliveryETADatetime": "2026-10-22T09:00:00",
            "isAtRisk": "true",
            "airRisk": "4",
        },
        {
            "id": "2",
            "upsShipmentNumber": "1Z0002",
            "shipmentMode": "Ocean",
            "originCity": "Osaka",
            "destinationCity": "Chicago",
            "shipmentCreationDatetime": "2026-10-01T08:00:00",
            "pickupDatetime": "2026-10-03T12:00:00",
            "deliveryETADatetime": "2026-11-05T17:00:00",
            "isAtRisk": "false",
            "oceanRisk": "2",
        },
        {
            "id": "3",
            "upsShipmentNumber": "1Z0003",
            "shipmentMode": "Surface",
            "originCity": "Dallas",
            "destinationCity": "New York",
            "shipmentCreationDatetime": "2026-10-18T06:00:00",
            "pickupDatetime": "2026-10-18T09:00:00",
            "deliveryETADatetime": "2026-10-23T12:00:00",
            "isAtRisk": "false",
            "surfaceRisk": "1",
        },
    ]


# ============================================================================
# Collaborator Fakes
# ============================================================================


@pytest.fixture
def completion() -> FakeCompletionService:
    """Scripted completion service with no responses configured."""
    return FakeCompletionService()


@pytest.fixture
def store(sample_shipments) -> FakeShipmentStore:
    """Shipment store serving ``sample_shipments``."""
    return FakeShipmentStore(sample_shipments)


@pytest.fixture
def prediction_endpoint() -> FakePredictionEndpoint:
    """Prediction endpoint returning an empty result."""
    return FakePredictionEndpoint()
