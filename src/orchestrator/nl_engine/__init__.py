"""Natural language steps backed by the text-completion service.

This module provides intent classification, filter and SLA criteria
extraction, risk assessment and SLA summarization, plus the cleanup
applied to completion output before it is parsed as JSON.
"""

from src.orchestrator.nl_engine.filter_extractor import (
    criteria_to_filters,
    extract_shipment_filters,
    extract_sla_criteria,
)
from src.orchestrator.nl_engine.intent_classifier import classify_intent
from src.orchestrator.nl_engine.json_cleanup import (
    clean_json_response,
    parse_json_array,
    parse_json_object,
)
from src.orchestrator.nl_engine.narrative import (
    assess_shipment_risks,
    summarize_sla_risk,
)

__all__ = [
    "classify_intent",
    "extract_shipment_filters",
    "extract_sla_criteria",
    "criteria_to_filters",
    "assess_shipment_risks",
    "summarize_sla_risk",
    "clean_json_response",
    "parse_json_object",
    "parse_json_array",
]
