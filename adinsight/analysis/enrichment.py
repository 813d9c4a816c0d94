"""
Attach engagement metrics and sponsorship signals to a fetched video.
"""

from typing import Optional

from ..core.config import ScoringWeights
from ..core.models import VideoRecord
from .engagement import compute_engagement
from .sponsorship import SponsorshipDetector


def enrich_video(
    video: VideoRecord,
    detector: Optional[SponsorshipDetector] = None,
    weights: Optional[ScoringWeights] = None
) -> VideoRecord:
    """
    Return a copy of video with engagement_metrics and sponsorship_info set.

    Args:
        video: Fetched video
        detector: Sponsorship detector (default rules if None)
        weights: Engagement weights (defaults if None)

    Returns:
        Enriched copy; the input is left untouched
    """
    detector = detector or SponsorshipDetector()
    return video.model_copy(update={
        "engagement_metrics": compute_engagement(
            video.view_count, video.like_count, video.comment_count, weights
        ),
        "sponsorship_info": detector.detect(video.description, video.tags),
    })
