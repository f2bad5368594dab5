"""Qualitative risk words to numeric risk scores."""

from typing import Optional

RISK_LEVEL_SCORES: dict[str, int] = {
    "low": 1,
    "medium": 3,
    "high": 5,
}


def map_risk_level(value: Optional[str]) -> Optional[int]:
    """Map "low"/"medium"/"high" (any case) to 1/3/5.

    Returns:
        The score, or None for anything else. Callers pick the default.
    """
    if value is None:
        return None
    return RISK_LEVEL_SCORES.get(value.strip().lower())
