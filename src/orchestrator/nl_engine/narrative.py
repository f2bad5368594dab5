"""Completion-backed risk assessment and SLA summaries."""

import json
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from src.errors import UpstreamParseError
from src.orchestrator.models.shipment import ShipmentRisk
from src.orchestrator.nl_engine.json_cleanup import parse_json_array
from src.orchestrator.nl_engine.prompts import RISK_ASSESSMENT_PROMPT, SLA_SUMMARY_PROMPT
from src.services.text_completion import TextCompletionService

logger = logging.getLogger(__name__)


def _to_json(shipments: Sequence[dict[str, Any]]) -> str:
    return json.dumps(list(shipments), default=str)


async def assess_shipment_risks(
    completion: TextCompletionService,
    shipments: Sequence[dict[str, Any]],
) -> list[ShipmentRisk]:
    """Ask the completion service for a per-shipment risk verdict.

    An empty shipment list skips the call. Unparseable output yields an
    empty assessment.

    Raises:
        ExternalServiceError: If the completion call itself fails.
    """
    if not shipments:
        return []

    text = await completion.complete(RISK_ASSESSMENT_PROMPT, {"shipments": _to_json(shipments)})
    try:
        items = parse_json_array(text)
    except UpstreamParseError as e:
        logger.warning("Risk assessment output unreadable: %s", e.detail)
        return []

    risks = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            risks.append(ShipmentRisk.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed risk entry: %s", item)
    return risks


async def summarize_sla_risk(
    completion: TextCompletionService,
    user_message: str,
    shipments: Sequence[dict[str, Any]],
) -> str:
    """Produce the narrative SLA risk summary.

    Raises:
        ExternalServiceError: If the completion call fails.
    """
    summary = await completion.complete(
        SLA_SUMMARY_PROMPT,
        {"user_message": user_message, "shipments": _to_json(shipments)},
    )
    return summary.strip()
