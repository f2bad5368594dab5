"""Relative time-phrase resolution.

Maps phrases like "this week" or "tomorrow" to an absolute, inclusive
datetime range on the local wall clock. Matching is a case-insensitive
substring search over a fixed, ordered list of phrases; the first phrase
found wins. Unknown phrases resolve to an unbounded frame, never an error.

No timezone normalization is performed: "today" means today according to
the machine running the pipeline.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Optional

from src.orchestrator.models.filter_set import TimeFrame

ONE_SECOND = timedelta(seconds=1)


def _midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day)


def _first_of_month(day: date, months_ahead: int = 0) -> datetime:
    """Midnight on the first day of the month ``months_ahead`` after ``day``."""
    month_index = day.month - 1 + months_ahead
    return datetime(day.year + month_index // 12, month_index % 12 + 1, 1)


def _sunday_offset(day: date) -> int:
    """Days since the most recent Sunday (Sunday = 0)."""
    return (day.weekday() + 1) % 7


def _days(start: datetime, count: int) -> TimeFrame:
    return TimeFrame(start=start, end=start + timedelta(days=count) - ONE_SECOND)


def _today(day: date) -> TimeFrame:
    return _days(_midnight(day), 1)


def _tomorrow(day: date) -> TimeFrame:
    return _days(_midnight(day) + timedelta(days=1), 1)


def _yesterday(day: date) -> TimeFrame:
    return _days(_midnight(day) - timedelta(days=1), 1)


def _this_week(day: date) -> TimeFrame:
    return _days(_midnight(day) - timedelta(days=_sunday_offset(day)), 7)


def _next_week(day: date) -> TimeFrame:
    return _days(_midnight(day) + timedelta(days=7 - _sunday_offset(day)), 7)


def _this_month(day: date) -> TimeFrame:
    return TimeFrame(
        start=_first_of_month(day),
        end=_first_of_month(day, 1) - ONE_SECOND,
    )


def _next_month(day: date) -> TimeFrame:
    return TimeFrame(
        start=_first_of_month(day, 1),
        end=_first_of_month(day, 2) - ONE_SECOND,
    )


# Order matters: the first phrase contained in the input wins.
PHRASE_RESOLVERS: tuple[tuple[str, Callable[[date], TimeFrame]], ...] = (
    ("today", _today),
    ("tomorrow", _tomorrow),
    ("yesterday", _yesterday),
    ("this week", _this_week),
    ("next week", _next_week),
    ("this month", _this_month),
    ("next month", _next_month),
)

RECOGNIZED_PHRASES: tuple[str, ...] = tuple(phrase for phrase, _ in PHRASE_RESOLVERS)


def resolve_time_frame(phrase: Optional[str], now: Optional[datetime] = None) -> TimeFrame:
    """Resolve a relative time phrase to an absolute range.

    Args:
        phrase: Free-text phrase such as "due this week". None or blank
            input constrains nothing.
        now: Reference instant. Defaults to the local wall clock.

    Returns:
        Inclusive TimeFrame ending one second before the next unit starts,
        or an unbounded frame when no known phrase is present.

    Example:
        >>> resolve_time_frame("today", now=datetime(2026, 10, 19, 15, 30))
        TimeFrame(start=datetime.datetime(2026, 10, 19, 0, 0), end=datetime.datetime(2026, 10, 19, 23, 59, 59))
    """
    if phrase is None or not phrase.strip():
        return TimeFrame.unbounded()

    lowered = phrase.lower()
    today = (now or datetime.now()).date()
    for needle, resolver in PHRASE_RESOLVERS:
        if needle in lowered:
            return resolver(today)

    return TimeFrame.unbounded()


def is_time_phrase(phrase: Optional[str]) -> bool:
    """True when ``phrase`` contains one of the recognized relative phrases."""
    if not phrase:
        return False
    lowered = phrase.lower()
    return any(needle in lowered for needle in RECOGNIZED_PHRASES)


__all__ = [
    "RECOGNIZED_PHRASES",
    "is_time_phrase",
    "resolve_time_frame",
]
