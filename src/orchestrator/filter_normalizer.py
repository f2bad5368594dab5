"""Normalization of extracted filters into a FilterSet.

Completion output is untrusted: it may use unknown field names, nulls,
booleans or numbers, and qualitative risk words. This module turns it
into the whitelisted, string-valued FilterSet the rest of the pipeline
relies on, and pulls the relative time phrases out into TimeFrames.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from src.orchestrator.models.filter_set import (
    ALIAS_RECORD_FIELDS,
    RISK_SCORE_FIELDS,
    SHIPMENT_FIELDS,
    TIME_PHRASE_FIELDS,
    FilterSet,
    ShipmentTimeFrames,
)
from src.orchestrator.risk_scores import map_risk_level
from src.orchestrator.time_frame import is_time_phrase, resolve_time_frame
from src.orchestrator.value_parsing import parse_datetime, parse_int

logger = logging.getLogger(__name__)


def _stringify(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        text = str(value).strip()
        return text or None
    return None


def _normalize_risk_score(field: str, value: str) -> Optional[str]:
    if parse_int(value) is not None:
        return value
    score = map_risk_level(value)
    if score is None:
        logger.warning("Dropping %s filter with unrecognized risk value %r", field, value)
        return None
    return str(score)


def normalize_filters(raw: Mapping[str, Any] | None) -> FilterSet:
    """Build a FilterSet from raw extracted key/value pairs.

    Args:
        raw: Parsed completion output.

    Returns:
        Whitelisted filters with string values. Unknown keys, empty
        values and unmappable risk words are dropped.
    """
    filters: FilterSet = {}
    for key, value in (raw or {}).items():
        if key not in SHIPMENT_FIELDS:
            logger.warning("Dropping unknown filter field %r", key)
            continue
        text = _stringify(value)
        if text is None:
            continue
        if key in RISK_SCORE_FIELDS:
            text = _normalize_risk_score(key, text)
            if text is None:
                continue
        filters[key] = text
    logger.debug("Normalized filters: %s", filters)
    return filters


def split_time_phrases(
    filters: Mapping[str, str],
    now: Optional[datetime] = None,
) -> tuple[ShipmentTimeFrames, FilterSet]:
    """Separate relative time phrases from the other filters.

    A time-field filter counts as a phrase only if its value contains a
    recognized phrase. A literal timestamp stays in the remaining filters
    so it can still be used as an equality condition. Any other value
    constrains nothing and is dropped.

    Args:
        filters: Normalized filter set.
        now: Reference instant for resolution.

    Returns:
        Tuple of (resolved frames, remaining filters).
    """
    creation = None
    delivery = None
    remaining: FilterSet = {}
    for key, value in filters.items():
        target = TIME_PHRASE_FIELDS.get(key)
        if target is None:
            remaining[key] = value
            continue
        if not is_time_phrase(value):
            if parse_datetime(value) is not None:
                remaining[key] = value
            else:
                logger.warning("Ignoring %s filter with unrecognized time phrase %r", key, value)
            continue
        frame = resolve_time_frame(value, now)
        if target == "shipmentCreationDatetime":
            creation = frame
        else:
            delivery = frame

    frames = ShipmentTimeFrames(
        **{k: v for k, v in (("creation", creation), ("delivery", delivery)) if v is not None}
    )
    return frames, remaining


def to_record_fields(filters: Mapping[str, str]) -> FilterSet:
    """Rename filter-only aliases to the record fields they stand for."""
    return {ALIAS_RECORD_FIELDS.get(key, key): value for key, value in filters.items()}


__all__ = [
    "normalize_filters",
    "split_time_phrases",
    "to_record_fields",
]
