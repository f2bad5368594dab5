"""Test helper utilities."""

from tests.helpers.fakes import (
    CompletionCall,
    FakeCompletionService,
    FakePredictionEndpoint,
    FakeShipmentStore,
)

__all__ = [
    "CompletionCall",
    "FakeCompletionService",
    "FakePredictionEndpoint",
    "FakeShipmentStore",
]
