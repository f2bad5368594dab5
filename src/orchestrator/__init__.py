"""Orchestration layer for ShipRisk.

This package turns a natural-language question into shipment lookups,
risk assessments and SLA risk summaries.

Main Entry Point:
    src.orchestrator.pipeline.PipelineOrchestrator, imported from its
    module directly since the service clients depend on these models.

Supporting Modules:
    time_frame: Relative time phrases to absolute ranges.
    query_builder: Filter sets to shipment store queries.
    shipment_matcher: In-process record filtering.
    risk_scores: Risk level words to numeric scores.
"""

from src.orchestrator.models import (
    FilterSet,
    ParameterizedQuery,
    PipelineResult,
    QueryIntent,
    ShipmentRisk,
    TimeFrame,
)
from src.orchestrator.query_builder import build_query, select_combinator
from src.orchestrator.risk_scores import map_risk_level
from src.orchestrator.shipment_matcher import filter_shipments, matches
from src.orchestrator.time_frame import resolve_time_frame

__all__ = [
    "FilterSet",
    "ParameterizedQuery",
    "PipelineResult",
    "QueryIntent",
    "ShipmentRisk",
    "TimeFrame",
    "build_query",
    "select_combinator",
    "map_risk_level",
    "filter_shipments",
    "matches",
    "resolve_time_frame",
]
