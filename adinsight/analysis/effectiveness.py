"""
Bounded ad effectiveness score blending engagement with comment sentiment.
"""

import math
from typing import Optional

from ..core.config import ScoringWeights
from ..core.models import EngagementMetrics, SentimentSummary


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def score_effectiveness(
    engagement: EngagementMetrics,
    sentiment: SentimentSummary,
    weights: Optional[ScoringWeights] = None
) -> float:
    """
    Score ad effectiveness on a 0-100 scale.

    The raw engagement score is rescaled by engagement_scale (raw values
    rarely exceed 10) and capped at 100. The sentiment term maps all-positive
    comments to 100, all-negative to 0 and balanced/neutral to 50.

    Args:
        engagement: Engagement metrics carrying the raw ad_effectiveness_score
        sentiment: Comment sentiment summary
        weights: Scoring weights (defaults to a 0.5 / 0.5 blend)

    Returns:
        Score clamped to [0, 100]
    """
    weights = weights or ScoringWeights()

    normalized_engagement = _clamp(engagement.ad_effectiveness_score * weights.engagement_scale)
    sentiment_term = (sentiment.positive_percentage - sentiment.negative_percentage + 100) / 2

    score = (
        normalized_engagement * weights.engagement_weight +
        sentiment_term * weights.sentiment_weight
    )
    return _clamp(score)
