"""
Engagement ratios from raw view/like/comment counts.
"""

from typing import Optional

from ..core.config import ScoringWeights
from ..core.models import EngagementMetrics


def compute_engagement(
    view_count: int,
    like_count: int,
    comment_count: int,
    weights: Optional[ScoringWeights] = None
) -> EngagementMetrics:
    """
    Compute engagement percentages for a video.

    ad_effectiveness_score is an engagement-only proxy
    (like_weight * like ratio + comment_weight * comment ratio) and is not
    bounded; see effectiveness.score_effectiveness for the bounded score.

    Args:
        view_count: Total views
        like_count: Total likes
        comment_count: Total comments
        weights: Scoring weights (defaults to 0.7 likes / 0.3 comments)

    Returns:
        EngagementMetrics, all zero when view_count <= 0
    """
    if view_count <= 0:
        return EngagementMetrics()

    weights = weights or ScoringWeights()

    like_ratio = 100 * like_count / view_count
    comment_ratio = 100 * comment_count / view_count

    return EngagementMetrics(
        like_to_view_ratio=like_ratio,
        comment_to_view_ratio=comment_ratio,
        overall_engagement_rate=100 * (like_count + comment_count) / view_count,
        ad_effectiveness_score=like_ratio * weights.like_weight + comment_ratio * weights.comment_weight,
    )
