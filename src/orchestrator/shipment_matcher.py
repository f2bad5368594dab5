"""In-process evaluation of a filter set against shipment records.

Matching is always conjunctive, whatever combinator a generated query
would use. Each supplied filter contributes one predicate:

- ``shipmentMode``: case-insensitive equality
- ``originCity`` / ``destinationCity``: case-insensitive substring
- ``atRisk``: boolean equality against the record's ``isAtRisk``
- creation / ETA datetimes: inclusive range against the resolved frames

A predicate is skipped, not failed, when the record lacks the field,
the field has the wrong type, the value does not parse, or the frame is
unbounded. Malformed optional data never excludes a record on its own.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.orchestrator.models.filter_set import ShipmentTimeFrames, TimeFrame
from src.orchestrator.value_parsing import parse_bool, parse_datetime

logger = logging.getLogger(__name__)

# Filter keys this module knows how to evaluate in-process.
MATCHER_FIELDS: frozenset[str] = frozenset(
    {
        "shipmentMode",
        "originCity",
        "destinationCity",
        "atRisk",
        "shipmentCreationDateTime",
        "shipmentCreationDatetime",
        "deliveryETADateTime",
        "deliveryETADatetime",
    }
)


def _string_field(record: Mapping[str, Any], field: str) -> str | None:
    value = record.get(field)
    return value if isinstance(value, str) else None


def _mode_matches(record: Mapping[str, Any], wanted: str) -> bool:
    mode = _string_field(record, "shipmentMode")
    if mode is None:
        return True
    return mode.casefold() == wanted.casefold()


def _city_matches(record: Mapping[str, Any], field: str, wanted: str) -> bool:
    city = _string_field(record, field)
    if city is None:
        return True
    return wanted.casefold() in city.casefold()


def _risk_matches(record: Mapping[str, Any], wanted: str) -> bool:
    wanted_flag = parse_bool(wanted)
    if wanted_flag is None:
        return True
    actual = parse_bool(record.get("isAtRisk"))
    if actual is None:
        return True
    return actual == wanted_flag


def _in_frame(record: Mapping[str, Any], field: str, frame: TimeFrame) -> bool:
    if not frame.is_bounded:
        return True
    moment = parse_datetime(record.get(field))
    if moment is None:
        return True
    return frame.contains(moment)


def matches(
    record: Mapping[str, Any],
    filters: Mapping[str, str],
    frames: ShipmentTimeFrames | None = None,
) -> bool:
    """Check whether a single record satisfies every supplied filter.

    Args:
        record: Shipment record from the store.
        filters: Filter set. Keys outside ``MATCHER_FIELDS`` are ignored.
        frames: Resolved creation/delivery frames. Time predicates only
            apply when the corresponding frame is bounded.

    Returns:
        True if no active predicate rejected the record.
    """
    frames = frames or ShipmentTimeFrames()
    include = True

    mode = filters.get("shipmentMode")
    if mode:
        include &= _mode_matches(record, mode)

    origin = filters.get("originCity")
    if include and origin:
        include &= _city_matches(record, "originCity", origin)

    destination = filters.get("destinationCity")
    if include and destination:
        include &= _city_matches(record, "destinationCity", destination)

    at_risk = filters.get("atRisk")
    if include and at_risk:
        include &= _risk_matches(record, at_risk)

    if include:
        include &= _in_frame(record, "shipmentCreationDatetime", frames.creation)

    if include:
        include &= _in_frame(record, "deliveryETADatetime", frames.delivery)

    return include


def filter_shipments(
    records: Iterable[Mapping[str, Any]],
    filters: Mapping[str, str],
    frames: ShipmentTimeFrames | None = None,
) -> list[dict[str, Any]]:
    """Return the records that match, preserving input order."""
    kept = [dict(record) for record in records if matches(record, filters, frames)]
    logger.info("Matcher kept %d shipment(s)", len(kept))
    return kept


__all__ = [
    "MATCHER_FIELDS",
    "filter_shipments",
    "matches",
]
