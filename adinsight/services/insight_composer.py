"""
InsightComposer - Turns an enriched video and its comments into AI insights.

Combines the free-text model reply with the heuristic signals:
- ad style (from the sponsorship segment length, else from the reply wording)
- comment sentiment
- bounded ad effectiveness score
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional, Sequence

from ..analysis.effectiveness import score_effectiveness
from ..analysis.enrichment import enrich_video
from ..analysis.sentiment import SentimentAnalyzer
from ..analysis.sponsorship import SponsorshipDetector
from ..core.config import ScoringWeights
from ..core.models import (
    ANALYSIS_FAILED,
    AdStyle,
    CompositionResult,
    SentimentSummary,
    SponsorshipInfo,
    VideoComment,
    VideoRecord,
)

logger = logging.getLogger(__name__)

TextGenerator = Callable[[str], Awaitable[str]]

INSIGHT_PROMPT = """You are an expert at analyzing YouTube video content and providing insights about advertising and sponsorship.

Analyze this YouTube video content for ad insights:

Title: {title}
Description: {description}
Tags: {tags}
Has Sponsorship: {has_sponsorship}
Sponsorship Details: {sponsorship_details}
Engagement Rate: {engagement_rate:.2f}%

Comment Samples:
{comment_samples}

Provide insights on:
1. Ad Style (long-form vs short-form, narrative style, CTAs)
2. Brand Mentions and Product Placements
3. Audience Engagement with Ads
4. Effectiveness of Ad Placement
5. Recommendations for Improving Ad Performance"""


class InsightComposer:
    """
    Composes AI insights for one video.

    Example usage:
        gemini = GeminiService()
        composer = InsightComposer(gemini.generate_text)
        result = await composer.compose(video, comments)
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        weights: Optional[ScoringWeights] = None,
        detector: Optional[SponsorshipDetector] = None
    ):
        """
        Args:
            text_generator: Async callable returning the model reply for a prompt
            sentiment_analyzer: Comment sentiment analyzer (default lexicon if None)
            weights: Scoring weights and thresholds
            detector: Sponsorship detector for videos that arrive unenriched
        """
        self.text_generator = text_generator
        self.weights = weights or ScoringWeights()
        self.sentiment_analyzer = sentiment_analyzer or SentimentAnalyzer(weights=self.weights)
        self.detector = detector or SponsorshipDetector()

    def _ensure_enriched(self, video: VideoRecord) -> VideoRecord:
        if video.sponsorship_info is not None and video.engagement_metrics is not None:
            return video
        return enrich_video(video, self.detector, self.weights)

    def build_prompt(self, video: VideoRecord, comments: Sequence[VideoComment]) -> str:
        """Build the insight prompt for a video."""
        video = self._ensure_enriched(video)
        sponsorship = video.sponsorship_info
        engagement = video.engagement_metrics
        samples = comments[:self.weights.comment_sample_size]

        return INSIGHT_PROMPT.format(
            title=video.title,
            description=(video.description or "")[:self.weights.description_limit],
            tags=", ".join(video.tags),
            has_sponsorship=str(sponsorship.has_sponsorship).lower(),
            sponsorship_details=sponsorship.sponsorship_details,
            engagement_rate=engagement.overall_engagement_rate,
            comment_samples="\n".join(comment.text for comment in samples),
        )

    async def compose(self, video: VideoRecord, comments: List[VideoComment]) -> CompositionResult:
        """
        Generate insights for an enriched video.

        Never raises: any failure yields the "Analysis failed" result with
        succeeded=False.

        Args:
            video: Video carrying engagement_metrics and sponsorship_info
            comments: Comment sample (may be empty)

        Returns:
            CompositionResult
        """
        try:
            logger.info(f"Generating AI insights for video: {video.title}")
            video = self._ensure_enriched(video)
            reply = await self.text_generator(self.build_prompt(video, comments))
            ai_insights = (reply or "").strip()
            logger.info(f"AI response received for video: {video.title}")

            sponsorship = video.sponsorship_info
            engagement = video.engagement_metrics

            ad_sentiment = self.sentiment_analyzer.analyze(comments)

            return CompositionResult(
                ai_insights=ai_insights,
                ad_style=self.classify_ad_style(sponsorship, ai_insights),
                ad_effectiveness=score_effectiveness(engagement, ad_sentiment, self.weights),
                ad_sentiment=ad_sentiment,
                last_analyzed=datetime.now(timezone.utc),
            )

        except Exception as e:
            logger.error(f"Error generating AI insights for video {video.video_id}: {e}")
            return CompositionResult(
                ai_insights=ANALYSIS_FAILED,
                ad_style=AdStyle.UNKNOWN,
                ad_effectiveness=0.0,
                ad_sentiment=SentimentSummary(),
                last_analyzed=datetime.now(timezone.utc),
                succeeded=False,
            )

    def classify_ad_style(self, sponsorship: SponsorshipInfo, ai_insights: str) -> AdStyle:
        """Classify the sponsorship segment as long- or short-form."""
        if not sponsorship.has_sponsorship:
            return AdStyle.UNKNOWN

        if sponsorship.ad_duration is not None:
            if sponsorship.ad_duration > self.weights.long_form_threshold_sec:
                return AdStyle.LONG_FORM
            return AdStyle.SHORT_FORM

        reply = ai_insights.lower()
        if "long-form" in reply:
            return AdStyle.LONG_FORM
        if "short-form" in reply:
            return AdStyle.SHORT_FORM
        return AdStyle.UNKNOWN
