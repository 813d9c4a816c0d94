"""
AdInsightService - Report orchestration for single videos and channel batches.

Pipeline per video:
1. Fetch video metadata
2. Enrich with engagement metrics and sponsorship signals
3. Fetch comments (best effort)
4. Compose AI insights (never raises)
5. Assemble the AdInsightReport
6. Persist (best effort)

refresh_comments re-fetches a catalog video's comments and stores each one
with its own sentiment and ad keywords.

Public operations return result models and never raise.
"""

import logging
from collections import Counter
from typing import Iterable, List, Optional, Protocol, Sequence

from ..analysis.engagement import compute_engagement
from ..analysis.enrichment import enrich_video
from ..analysis.sentiment import SentimentAnalyzer, load_lexicon
from ..analysis.sponsorship import SponsorshipDetector
from ..core.config import Config, ScoringWeights, load_analysis_config
from ..core.exceptions import ExternalServiceError
from ..core.models import (
    AdData,
    AdInsightReport,
    BatchItemOutcome,
    BatchResult,
    CommentRefreshResult,
    EngagementMetrics,
    ErrorKind,
    ReportEngagement,
    ReportResult,
    SentimentSummary,
    SponsorshipInfo,
    VideoComment,
    VideoRecord,
)
from .insight_composer import InsightComposer

logger = logging.getLogger(__name__)

VIDEO_NOT_FOUND = "Video not found"
NO_CHANNEL_VIDEOS = "No videos found for this channel"


class VideoSource(Protocol):
    async def get_video(self, video_id: str) -> Optional[VideoRecord]: ...


class CommentSource(Protocol):
    async def get_comments(self, video_id: str, max_results: int = 100) -> List[VideoComment]: ...


class AdInsightService:
    """
    Orchestrates ad insight reports.

    Example usage:
        service = build_default_service()
        result = await service.generate_report("dQw4w9WgXcQ")
        if result.success:
            print(result.report.ad_effectiveness)
    """

    def __init__(
        self,
        video_source: VideoSource,
        comment_source: CommentSource,
        composer: InsightComposer,
        store,
        detector: Optional[SponsorshipDetector] = None,
        analyzer: Optional[SentimentAnalyzer] = None,
        weights: Optional[ScoringWeights] = None,
        max_comments: int = Config.MAX_COMMENTS
    ):
        """
        Args:
            video_source: Provides get_video (e.g. YouTubeService)
            comment_source: Provides get_comments (e.g. YouTubeService)
            composer: InsightComposer
            store: InsightStoreService
            detector: Sponsorship detector (default rules if None)
            analyzer: Sentiment analyzer for analyze_sentiment
            weights: Scoring weights
            max_comments: Comment sample size requested per video
        """
        self.video_source = video_source
        self.comment_source = comment_source
        self.composer = composer
        self.store = store
        self.weights = weights or ScoringWeights()
        self.detector = detector or SponsorshipDetector()
        self.analyzer = analyzer or composer.sentiment_analyzer
        self.max_comments = max_comments

    # =========================================================================
    # HEURISTICS
    # =========================================================================

    def detect_sponsorship(self, description: Optional[str], tags: Optional[Iterable[str]]) -> SponsorshipInfo:
        return self.detector.detect(description, tags)

    def compute_engagement(self, view_count: int, like_count: int, comment_count: int) -> EngagementMetrics:
        return compute_engagement(view_count, like_count, comment_count, self.weights)

    def analyze_sentiment(self, comments: Optional[Sequence[VideoComment]]) -> SentimentSummary:
        return self.analyzer.analyze(comments)

    def enrich(self, video: VideoRecord) -> VideoRecord:
        """Return a copy of video with engagement metrics and sponsorship info attached."""
        return enrich_video(video, self.detector, self.weights)

    # =========================================================================
    # REPORTS
    # =========================================================================

    async def generate_report(self, video_id: str) -> ReportResult:
        """
        Run the full pipeline for one video.

        Args:
            video_id: YouTube video ID

        Returns:
            ReportResult; failures carry error and error_kind
        """
        try:
            logger.info(f"Generating ad insights for video: {video_id}")

            try:
                video = await self.video_source.get_video(video_id)
            except ExternalServiceError as e:
                logger.error(f"Failed to fetch video {video_id}: {e}")
                return ReportResult.failure(str(e), ErrorKind.UPSTREAM_FAILURE)

            if video is None:
                return ReportResult.failure(VIDEO_NOT_FOUND, ErrorKind.NOT_FOUND)

            video = self.enrich(video)
            comments = await self._fetch_comments(video_id)
            composition = await self.composer.compose(video, comments)

            report = self._assemble_report(video, composition)
            persisted = await self._persist(report)

            return ReportResult(
                success=True,
                report=report,
                degraded=not composition.succeeded,
                persisted=persisted,
            )

        except Exception as e:
            logger.error(f"Error generating ad insights report for {video_id}: {e}", exc_info=True)
            return ReportResult.failure(str(e), ErrorKind.INTERNAL)

    async def generate_channel_reports(self, channel_id: str) -> BatchResult:
        """
        Generate reports for every stored video of a channel, one at a time.

        A failing video is recorded and does not stop the batch.

        Args:
            channel_id: YouTube channel ID

        Returns:
            BatchResult with per-video outcomes
        """
        try:
            try:
                videos = await self.store.list_channel_videos(channel_id)
            except ExternalServiceError as e:
                logger.error(f"Failed to list videos for channel {channel_id}: {e}")
                return BatchResult(
                    success=False, channel_id=channel_id,
                    error=str(e), error_kind=ErrorKind.UPSTREAM_FAILURE
                )

            if not videos:
                return BatchResult(
                    success=False, channel_id=channel_id,
                    error=NO_CHANNEL_VIDEOS, error_kind=ErrorKind.NOT_FOUND
                )

            logger.info(f"Generating ad insights for {len(videos)} videos from channel {channel_id}")

            outcomes = []
            for row in videos:
                video_id = row["video_id"]
                result = await self.generate_report(video_id)
                outcomes.append(BatchItemOutcome(
                    video_id=video_id,
                    title=row.get("title"),
                    success=result.success,
                    error=result.error,
                    error_kind=result.error_kind,
                ))

            processed = sum(1 for outcome in outcomes if outcome.success)
            logger.info(f"Channel {channel_id}: {processed}/{len(outcomes)} reports generated")

            return BatchResult(
                success=True,
                channel_id=channel_id,
                total=len(outcomes),
                processed=processed,
                failed=len(outcomes) - processed,
                reports=outcomes,
            )

        except Exception as e:
            logger.error(f"Error generating channel ad insights for {channel_id}: {e}", exc_info=True)
            return BatchResult(
                success=False, channel_id=channel_id,
                error=str(e), error_kind=ErrorKind.INTERNAL
            )

    # =========================================================================
    # COMMENTS
    # =========================================================================

    async def refresh_comments(self, video_id: str, max_results: Optional[int] = None) -> CommentRefreshResult:
        """
        Re-fetch a catalog video's comments and store them scored.

        Args:
            video_id: YouTube video ID (must already be in the catalog)
            max_results: Comments to fetch (defaults to max_comments)

        Returns:
            CommentRefreshResult with per-class counts
        """
        try:
            try:
                exists = await self.store.video_exists(video_id)
            except ExternalServiceError as e:
                logger.error(f"Failed to look up video {video_id}: {e}")
                return CommentRefreshResult(
                    success=False, video_id=video_id,
                    error=str(e), error_kind=ErrorKind.UPSTREAM_FAILURE
                )

            if not exists:
                return CommentRefreshResult(
                    success=False, video_id=video_id,
                    error=VIDEO_NOT_FOUND, error_kind=ErrorKind.NOT_FOUND
                )

            try:
                comments = await self.comment_source.get_comments(
                    video_id, max_results=max_results or self.max_comments
                )
                if not comments:
                    logger.info(f"No comments found for video {video_id}")
                    return CommentRefreshResult(success=True, video_id=video_id)

                scored = [self.analyzer.score_comment(video_id, comment) for comment in comments]
                saved = await self.store.save_comments(scored)
            except ExternalServiceError as e:
                logger.error(f"Failed to refresh comments for video {video_id}: {e}")
                return CommentRefreshResult(
                    success=False, video_id=video_id,
                    error=str(e), error_kind=ErrorKind.UPSTREAM_FAILURE
                )

            classes = Counter(comment.sentiment.classification for comment in scored)
            logger.info(f"Comments refreshed for video {video_id}: {saved}")

            return CommentRefreshResult(
                success=True,
                video_id=video_id,
                count=saved,
                positive=classes["positive"],
                negative=classes["negative"],
                neutral=classes["neutral"],
                ad_related=sum(1 for comment in scored if comment.ad_related.is_ad_related),
            )

        except Exception as e:
            logger.error(f"Error refreshing comments for {video_id}: {e}", exc_info=True)
            return CommentRefreshResult(
                success=False, video_id=video_id,
                error=str(e), error_kind=ErrorKind.INTERNAL
            )

    # =========================================================================
    # PIPELINE STEPS
    # =========================================================================

    async def _fetch_comments(self, video_id: str) -> List[VideoComment]:
        try:
            return await self.comment_source.get_comments(video_id, max_results=self.max_comments)
        except Exception as e:
            logger.warning(f"Comments unavailable for video {video_id}, continuing without: {e}")
            return []

    async def _persist(self, report: AdInsightReport) -> bool:
        try:
            await self.store.upsert_report(report)
            return True
        except Exception as e:
            logger.error(f"Failed to save ad insights report for {report.video_id}: {e}")
            return False

    @staticmethod
    def _assemble_report(video: VideoRecord, composition) -> AdInsightReport:
        sponsorship = video.sponsorship_info or SponsorshipInfo()
        engagement = video.engagement_metrics or EngagementMetrics()

        return AdInsightReport(
            video_id=video.video_id,
            title=video.title,
            channel_id=video.channel_id,
            channel_title=video.channel_title,
            published_at=video.published_at,
            view_count=video.view_count,
            ad_data=AdData(
                has_sponsorship=sponsorship.has_sponsorship,
                sponsorship_details=sponsorship.sponsorship_details,
                ad_indicators=sponsorship.ad_indicators,
                detected_brands=sponsorship.detected_brands,
                ad_duration=sponsorship.ad_duration,
            ),
            engagement=ReportEngagement(
                like_count=video.like_count,
                comment_count=video.comment_count,
                like_to_view_ratio=engagement.like_to_view_ratio,
                comment_to_view_ratio=engagement.comment_to_view_ratio,
                overall_engagement_rate=engagement.overall_engagement_rate,
            ),
            sentiment_analysis=composition.ad_sentiment,
            ad_style=composition.ad_style,
            ad_effectiveness=composition.ad_effectiveness,
            ai_insights=composition.ai_insights,
            generated_at=composition.last_analyzed,
        )


def build_default_service(with_insights: bool = True) -> AdInsightService:
    """
    Wire AdInsightService to YouTube, Gemini and Supabase from Config.

    Args:
        with_insights: Build the Gemini client. Without it GEMINI_API_KEY is
            not needed and any report comes back degraded; used for comment
            refreshes.
    """
    from .gemini_service import GeminiService
    from .insight_store_service import InsightStoreService
    from .youtube_service import YouTubeService

    analysis_config = load_analysis_config()
    analyzer = SentimentAnalyzer(
        lexicon=load_lexicon(analysis_config.lexicon_path),
        rules=analysis_config.rules,
        weights=analysis_config.weights,
    )

    detector = SponsorshipDetector(analysis_config.rules)
    youtube = YouTubeService()
    text_generator = GeminiService().generate_text if with_insights else _insights_disabled

    return AdInsightService(
        video_source=youtube,
        comment_source=youtube,
        composer=InsightComposer(text_generator, analyzer, analysis_config.weights, detector),
        store=InsightStoreService(),
        detector=detector,
        analyzer=analyzer,
        weights=analysis_config.weights,
    )


async def _insights_disabled(prompt: str) -> str:
    raise ExternalServiceError("gemini", "Insight generation disabled")
