"""Lenient parsing of string-typed record attributes.

Shipment records carry every attribute as an optional string. These
helpers turn them into Python values and return None on anything they
cannot read, so callers can skip the predicate or feature that needed it.
"""

from datetime import datetime
from typing import Any, Optional

from dateutil import parser as date_parser


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-ish datetime string to a naive local datetime.

    Offset-aware values are converted to the local timezone and then
    made naive, so they compare with frames built from the local clock.

    Args:
        value: Raw attribute value.

    Returns:
        Parsed datetime, or None if the value is not a parseable string.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_bool(value: Any) -> Optional[bool]:
    """Parse "true"/"false" (any case, surrounding whitespace allowed).

    Native booleans pass through. Everything else is unparseable.
    """
    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_int(value: Any) -> Optional[int]:
    """Parse a whole number from a string or int. Decimals are rejected."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None
