"""
Tests for mandi_forecaster/insights/summarizer.py.

What we test
------------
seasonal_highlights():
  - Best months = excellent/good, worst = poor, price range.
  - Empty patterns → empty highlights.

FallbackSummarizer:
  - Always returns a valid SummaryResult with confidence 0.5.
  - Names the best months in the recommendation when there are any.

summarize_with_fallback():
  - No collaborator → fallback.
  - Collaborator result returned unchanged.
  - Collaborator exception → warning logged, fallback returned.
"""

from __future__ import annotations

import logging
from datetime import date

import pytest

from mandi_forecaster.insights.summarizer import (
    FallbackSummarizer,
    Summarizer,
    seasonal_highlights,
    summarize_with_fallback,
)
from mandi_forecaster.models.insight import SummaryResult
from mandi_forecaster.seasonality.patterns import analyze_seasonal_patterns


@pytest.fixture
def patterns(make_points):
    points = make_points([(date(2024, 1, 1), 100.0), (date(2024, 2, 1), 200.0)])
    return analyze_seasonal_patterns(points)


class _StaticSummarizer(Summarizer):
    def summarize(self, variety, patterns, forecasts):
        return SummaryResult(summary=f"{variety} looks firm.", recommendation="Hold.", confidence=0.9)


class _BrokenSummarizer(Summarizer):
    def summarize(self, variety, patterns, forecasts):
        raise ConnectionError("service unavailable")


class TestSeasonalHighlights:
    def test_best_and_worst(self, patterns):
        h = seasonal_highlights(patterns)
        assert h.best_months == ["February"]
        assert h.worst_months == ["January"]
        assert h.price_min == 100.0
        assert h.price_max == 200.0

    def test_empty(self):
        h = seasonal_highlights([])
        assert h.best_months == []
        assert h.price_min is None


class TestFallbackSummarizer:
    def test_with_best_months(self, patterns):
        result = FallbackSummarizer().summarize("Onion", patterns, [])
        assert result.confidence == 0.5
        assert "Onion" in result.summary
        assert "February" in result.recommendation
        assert len(result.key_points) == 4
        assert result.risk_factors and result.opportunities

    def test_without_patterns(self):
        result = FallbackSummarizer().summarize("", [], [])
        assert result.summary.startswith("This crop")
        assert "peak price months" in result.recommendation


class TestSummarizeWithFallback:
    def test_no_collaborator(self, patterns):
        result = summarize_with_fallback(None, "Onion", patterns, [])
        assert result == FallbackSummarizer().summarize("Onion", patterns, [])

    def test_collaborator_result(self, patterns):
        result = summarize_with_fallback(_StaticSummarizer(), "Onion", patterns, [])
        assert result.summary == "Onion looks firm."
        assert result.confidence == 0.9

    def test_collaborator_failure_falls_back(self, patterns, caplog):
        with caplog.at_level(logging.WARNING, logger="mandi_forecaster.insights.summarizer"):
            result = summarize_with_fallback(_BrokenSummarizer(), "Onion", patterns, [])
        assert result.confidence == 0.5
        assert "_BrokenSummarizer failed" in caplog.text

    def test_abstract_base_not_instantiable(self):
        with pytest.raises(TypeError):
            Summarizer()
