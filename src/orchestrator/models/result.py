"""Pipeline result model and response shaping."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.orchestrator.models.intent import QueryIntent
from src.orchestrator.models.shipment import ShipmentRisk


class PipelineResult(BaseModel):
    """Outcome of one request through the pipeline.

    Attributes:
        intent: Intent the request was dispatched on.
        message: Short status line (or help text for GENERAL).
        shipments: Matching records (SHIPMENT branch).
        risk_assessment: Per-shipment risk verdicts (SHIPMENT branch).
        summary: Narrative SLA risk summary (SLA branch).
    """

    intent: QueryIntent
    message: str
    shipments: Optional[list[dict[str, Any]]] = None
    risk_assessment: Optional[list[ShipmentRisk]] = None
    summary: Optional[str] = None

    def to_response(self) -> dict[str, Any]:
        """Render the caller-facing response shape for this intent."""
        if self.intent == QueryIntent.SHIPMENT:
            return {
                "message": self.message,
                "shipments": self.shipments or [],
                "riskAssessment": [
                    risk.model_dump(by_alias=True) for risk in self.risk_assessment or []
                ],
            }
        if self.intent == QueryIntent.SLA:
            return {"message": self.message, "summary": self.summary or ""}
        return {"message": self.message}
