"""Filter extraction from natural language via the completion service.

Two extraction flavors exist:

- ``extract_shipment_filters``: open-ended, any whitelisted field.
- ``extract_sla_criteria``: the narrow criteria set used for SLA
  questions (mode, cities, at-risk flag, creation/ETA time phrases).

Unparseable completion output is logged and replaced with an empty
filter set; it never propagates as a crash.
"""

import logging
from typing import Any

from src.errors import UpstreamParseError
from src.orchestrator.filter_normalizer import normalize_filters
from src.orchestrator.models.filter_set import FilterSet
from src.orchestrator.nl_engine.json_cleanup import parse_json_object
from src.orchestrator.nl_engine.prompts import EXTRACT_FILTERS_PROMPT, EXTRACT_SLA_CRITERIA_PROMPT
from src.services.text_completion import TextCompletionService

logger = logging.getLogger(__name__)

SLA_CRITERIA_FIELDS: tuple[str, ...] = (
    "shipmentMode",
    "originCity",
    "destinationCity",
    "shipmentCreationDateTime",
    "deliveryETADateTime",
)


async def _extract_raw(completion: TextCompletionService, prompt: str, user_message: str) -> dict[str, Any]:
    text = await completion.complete(prompt, {"user_message": user_message})
    try:
        return parse_json_object(text)
    except UpstreamParseError as e:
        logger.warning("Failed to parse AI result: %s", e.detail)
        return {}


async def extract_shipment_filters(completion: TextCompletionService, user_message: str) -> FilterSet:
    """Extract an open-ended filter set from a shipment question.

    Raises:
        ExternalServiceError: If the completion call itself fails.
    """
    raw = await _extract_raw(completion, EXTRACT_FILTERS_PROMPT, user_message)
    filters = normalize_filters(raw)
    logger.info("Extracted shipment filters: %s", sorted(filters))
    return filters


def criteria_to_filters(criteria: dict[str, Any]) -> FilterSet:
    """Reduce SLA criteria JSON to a filter set.

    Only the known criteria fields are kept, and ``atRisk`` contributes
    only when it is true.
    """
    raw = {key: criteria.get(key) for key in SLA_CRITERIA_FIELDS}
    at_risk = criteria.get("atRisk")
    if at_risk is True or (isinstance(at_risk, str) and at_risk.strip().lower() == "true"):
        raw["atRisk"] = "true"
    return normalize_filters({k: v for k, v in raw.items() if v not in (None, "")})


async def extract_sla_criteria(completion: TextCompletionService, user_message: str) -> FilterSet:
    """Extract the SLA criteria filter set from an SLA question.

    Raises:
        ExternalServiceError: If the completion call itself fails.
    """
    raw = await _extract_raw(completion, EXTRACT_SLA_CRITERIA_PROMPT, user_message)
    filters = criteria_to_filters(raw)
    logger.info("Extracted SLA criteria: %s", sorted(filters))
    return filters
