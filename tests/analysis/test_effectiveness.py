"""
Tests for the bounded ad effectiveness score.
"""

import math

import pytest

from adinsight.analysis.effectiveness import score_effectiveness
from adinsight.core.config import ScoringWeights
from adinsight.core.models import EngagementMetrics, SentimentSummary


def _engagement(score):
    return EngagementMetrics(ad_effectiveness_score=score)


def _sentiment(positive=0.0, negative=0.0):
    return SentimentSummary(
        positive_percentage=positive,
        negative_percentage=negative,
        neutral_percentage=100.0 - positive - negative,
        total_comments=10,
    )


class TestScoreEffectiveness:

    def test_blend(self):
        # normalized engagement 38, sentiment term (50 - 25 + 100) / 2 = 62.5
        score = score_effectiveness(_engagement(3.8), _sentiment(50, 25))
        assert score == pytest.approx(0.5 * 38 + 0.5 * 62.5)

    def test_engagement_capped_at_100(self):
        score = score_effectiveness(_engagement(1000), _sentiment(100, 0))
        assert score == pytest.approx(100.0)

    def test_no_engagement_all_negative(self):
        assert score_effectiveness(_engagement(0), _sentiment(0, 100)) == pytest.approx(0.0)

    def test_empty_sentiment_is_neutral_midpoint(self):
        score = score_effectiveness(_engagement(0), SentimentSummary())
        assert score == pytest.approx(25.0)

    def test_nan_engagement_clamps_to_zero(self):
        score = score_effectiveness(_engagement(math.nan), SentimentSummary())
        assert score == pytest.approx(25.0)

    def test_infinite_engagement_is_capped(self):
        score = score_effectiveness(_engagement(math.inf), _sentiment(100, 0))
        assert score == pytest.approx(100.0)

    def test_custom_weights(self):
        weights = ScoringWeights(engagement_weight=1.0, sentiment_weight=0.0)
        score = score_effectiveness(_engagement(2.0), _sentiment(0, 100), weights)
        assert score == pytest.approx(20.0)

    @pytest.mark.parametrize("raw", [0.0, 0.01, 1.5, 9.99, 10.0, 55.0, 1e9])
    @pytest.mark.parametrize("positive,negative", [(0, 0), (100, 0), (0, 100), (33.3, 33.3), (70, 30)])
    def test_always_within_bounds(self, raw, positive, negative):
        score = score_effectiveness(_engagement(raw), _sentiment(positive, negative))
        assert 0.0 <= score <= 100.0
