"""CLI output formatters for Rich tables and JSON.

Provides human-readable Rich output (default) and machine-parseable
JSON output (--json flag). All formatting goes through these functions
so the CLI commands stay clean.
"""

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.result import PipelineResult

console = Console()

# Risk level color map
RISK_COLORS = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
}

# Columns shown in the shipment table, in order.
SHIPMENT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("upsShipmentNumber", "Shipment"),
    ("shipmentMode", "Mode"),
    ("originCity", "Origin"),
    ("destinationCity", "Destination"),
    ("milestoneStatus", "Milestone"),
    ("deliveryETADatetime", "ETA"),
    ("isAtRisk", "At Risk"),
)


def _render(renderable: Any) -> str:
    with console.capture() as capture:
        console.print(renderable)
    return capture.get()


def _cell(value: Any) -> str:
    if value is None or value == "":
        return "—"
    return str(value)


def format_shipment_table(shipments: list[dict[str, Any]]) -> str:
    """Format shipment records as a Rich table.

    Args:
        shipments: Records as returned by the shipment store.

    Returns:
        Rendered table, or a one-line notice when there are none.
    """
    if not shipments:
        return "No shipments found."

    table = Table(title="Shipments", show_lines=True)
    for _, heading in SHIPMENT_COLUMNS:
        table.add_column(heading, no_wrap=heading == "Shipment")
    for record in shipments:
        table.add_row(*(_cell(record.get(field)) for field, _ in SHIPMENT_COLUMNS))
    return _render(table)


def format_risk_table(result: PipelineResult) -> str:
    """Format the risk assessment of a shipment answer as a Rich table."""
    risks = result.risk_assessment or []
    if not risks:
        return "No risk assessment available."

    table = Table(title="Risk Assessment", show_lines=True)
    table.add_column("Shipment", style="cyan", no_wrap=True)
    table.add_column("Risk")
    table.add_column("Reason", style="white")
    for risk in risks:
        level = risk.risk_level or "—"
        color = RISK_COLORS.get(level.lower(), "white")
        table.add_row(
            _cell(risk.ups_shipment_number),
            f"[{color}]{level}[/{color}]",
            _cell(risk.risk_reason),
        )
    return _render(table)


def format_result(result: PipelineResult, as_json: bool = False) -> str:
    """Format a pipeline result for the terminal.

    Args:
        result: Outcome of ``PipelineOrchestrator.run``.
        as_json: If True, return the API response body as JSON.

    Returns:
        Formatted string output.
    """
    if as_json:
        return json.dumps(result.to_response(), indent=2, default=str)

    if result.intent == QueryIntent.SHIPMENT:
        return "\n".join(
            [
                f"[bold]{result.message}[/bold]",
                format_shipment_table(result.shipments or []),
                format_risk_table(result),
            ]
        )
    if result.intent == QueryIntent.SLA:
        return _render(
            Panel(result.summary or "—", title=result.message, border_style="blue")
        )
    return _render(Panel(result.message, title="ShipRisk", border_style="dim"))
