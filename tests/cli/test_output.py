"""Tests for CLI output formatters."""

import json

import pytest
from rich.console import Console

from src.cli import output
from src.cli.output import format_result, format_shipment_table
from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.result import PipelineResult
from src.orchestrator.models.shipment import ShipmentRisk


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Render wide enough that cell text is never wrapped."""
    monkeypatch.setattr(output, "console", Console(width=200, color_system=None))


def _shipment_result() -> PipelineResult:
    return PipelineResult(
        intent=QueryIntent.SHIPMENT,
        message="Fetched 1 shipment record(s)",
        shipments=[{"upsShipmentNumber": "1Z0001", "originCity": "Tokyo", "destinationCity": "Chicago"}],
        risk_assessment=[ShipmentRisk(upsShipmentNumber="1Z0001", RiskLevel="High", RiskReason="weather")],
    )


class TestFormatResult:
    """Tests for format_result."""

    def test_json_matches_api_response(self):
        result = _shipment_result()
        assert json.loads(format_result(result, as_json=True)) == result.to_response()

    def test_shipment_tables(self):
        output = format_result(_shipment_result())
        assert "1Z0001" in output
        assert "Chicago" in output
        assert "weather" in output

    def test_sla_summary(self):
        result = PipelineResult(
            intent=QueryIntent.SLA,
            message="Analyzed 2 shipment(s) for SLA risk",
            summary="1Z0001 will be late",
        )
        output = format_result(result)
        assert "1Z0001 will be late" in output

    def test_general(self):
        output = format_result(PipelineResult(intent=QueryIntent.GENERAL, message="Try asking"))
        assert "Try asking" in output


class TestFormatShipmentTable:
    """Tests for format_shipment_table."""

    def test_empty(self):
        assert format_shipment_table([]) == "No shipments found."
