"""Tests for risk level to score mapping."""

import pytest

from src.orchestrator.risk_scores import RISK_LEVEL_SCORES, map_risk_level


class TestMapRiskLevel:
    """Tests for map_risk_level."""

    @pytest.mark.parametrize(
        "word,score",
        [("low", 1), ("medium", 3), ("high", 5), ("HIGH", 5), ("Medium", 3), (" low ", 1)],
    )
    def test_known_levels(self, word, score):
        assert map_risk_level(word) == score

    @pytest.mark.parametrize("word", ["critical", "", "3", None])
    def test_unknown_levels(self, word):
        """Unrecognized input maps to nothing; the caller picks a default."""
        assert map_risk_level(word) is None

    def test_scale(self):
        assert RISK_LEVEL_SCORES == {"low": 1, "medium": 3, "high": 5}
