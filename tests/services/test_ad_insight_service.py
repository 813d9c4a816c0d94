"""
Tests for AdInsightService: the single-video pipeline, channel batches and
the heuristic pass-throughs.

Video/comment sources, the composer and the store are mocked.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from pydantic import ValidationError

from adinsight.analysis.sentiment import SentimentAnalyzer
from adinsight.core.exceptions import ExternalServiceError
from adinsight.core.models import (
    ANALYSIS_FAILED,
    AdStyle,
    CompositionResult,
    ErrorKind,
    SentimentSummary,
    VideoComment,
    VideoRecord,
)
from adinsight.services.ad_insight_service import (
    AdInsightService,
    NO_CHANNEL_VIDEOS,
    VIDEO_NOT_FOUND,
)


def _video(video_id="vid1", **overrides):
    defaults = dict(
        video_id=video_id,
        channel_id="UC1",
        channel_title="Setups",
        title=f"Video {video_id}",
        description="Thanks to Nord for sponsoring this video. Chapters: 0:30 - 1:45 sponsor",
        tags=["desk"],
        view_count=1000,
        like_count=50,
        comment_count=10,
    )
    defaults.update(overrides)
    return VideoRecord(**defaults)


def _composition(succeeded=True):
    if not succeeded:
        return CompositionResult(ai_insights=ANALYSIS_FAILED, succeeded=False)
    return CompositionResult(
        ai_insights="Long-form host read.",
        ad_style=AdStyle.LONG_FORM,
        ad_effectiveness=64.5,
        ad_sentiment=SentimentSummary(positive_percentage=100.0, total_comments=1),
    )


@pytest.fixture
def source():
    source = MagicMock()
    source.get_video = AsyncMock(return_value=_video())
    source.get_comments = AsyncMock(return_value=[VideoComment(comment_id="c1", text="love it")])
    return source


@pytest.fixture
def composer():
    composer = MagicMock()
    composer.compose = AsyncMock(return_value=_composition())
    return composer


@pytest.fixture
def store():
    store = MagicMock()
    store.upsert_report = AsyncMock(return_value={})
    store.list_channel_videos = AsyncMock(return_value=[])
    return store


@pytest.fixture
def service(source, composer, store):
    return AdInsightService(
        video_source=source,
        comment_source=source,
        composer=composer,
        store=store,
        analyzer=SentimentAnalyzer(lexicon={"love": 3, "hate": -3}),
        max_comments=50,
    )


# ============================================================================
# Single video
# ============================================================================

class TestGenerateReport:

    @pytest.mark.asyncio
    async def test_full_pipeline(self, service, source, composer, store):
        result = await service.generate_report("vid1")

        assert result.success is True
        assert result.persisted is True
        assert result.degraded is False

        report = result.report
        assert report.video_id == "vid1"
        assert report.channel_title == "Setups"
        assert report.view_count == 1000
        assert report.ad_data.has_sponsorship is True
        assert "Nord" in report.ad_data.detected_brands
        assert report.ad_data.ad_duration == 75
        assert report.engagement.like_count == 50
        assert report.engagement.overall_engagement_rate == 6.0
        assert report.ad_style == AdStyle.LONG_FORM
        assert report.ad_effectiveness == 64.5
        assert report.ai_insights == "Long-form host read."

        source.get_comments.assert_awaited_once_with("vid1", max_results=50)
        store.upsert_report.assert_awaited_once_with(report)

    @pytest.mark.asyncio
    async def test_returned_report_cannot_be_modified(self, service):
        result = await service.generate_report("vid1")
        report = result.report

        with pytest.raises(ValidationError):
            report.sentiment_analysis.positive_percentage = -999.0
        with pytest.raises(AttributeError):
            report.ad_data.ad_indicators.append("injected")

        assert report.sentiment_analysis.positive_percentage == 100.0
        assert "injected" not in report.to_row()["ad_indicators"]

    @pytest.mark.asyncio
    async def test_composer_receives_enriched_copy(self, service, composer):
        await service.generate_report("vid1")

        video, comments = composer.compose.await_args.args
        assert video.engagement_metrics.like_to_view_ratio == 5.0
        assert video.sponsorship_info.has_sponsorship is True
        assert comments[0].text == "love it"

    @pytest.mark.asyncio
    async def test_video_not_found(self, service, source, composer, store):
        source.get_video.return_value = None

        result = await service.generate_report("missing")

        assert result.success is False
        assert result.error == VIDEO_NOT_FOUND
        assert result.error_kind == ErrorKind.NOT_FOUND
        composer.compose.assert_not_awaited()
        store.upsert_report.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_video_fetch_failure(self, service, source):
        source.get_video.side_effect = ExternalServiceError("youtube", "HTTP 403: quotaExceeded")

        result = await service.generate_report("vid1")

        assert result.success is False
        assert result.error_kind == ErrorKind.UPSTREAM_FAILURE
        assert "quotaExceeded" in result.error

    @pytest.mark.asyncio
    async def test_comment_failure_continues_without_comments(self, service, source, composer):
        source.get_comments.side_effect = ExternalServiceError("youtube", "commentsDisabled")

        result = await service.generate_report("vid1")

        assert result.success is True
        _, comments = composer.compose.await_args.args
        assert comments == []

    @pytest.mark.asyncio
    async def test_degraded_analysis(self, service, composer):
        composer.compose.return_value = _composition(succeeded=False)

        result = await service.generate_report("vid1")

        assert result.success is True
        assert result.degraded is True
        assert result.report.ai_insights == ANALYSIS_FAILED
        assert result.report.ad_style == AdStyle.UNKNOWN
        assert result.report.ad_effectiveness == 0.0

    @pytest.mark.asyncio
    async def test_persist_failure_still_returns_report(self, service, store):
        store.upsert_report.side_effect = ExternalServiceError("supabase", "timeout")

        result = await service.generate_report("vid1")

        assert result.success is True
        assert result.persisted is False
        assert result.report is not None

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, service, composer):
        composer.compose.side_effect = RuntimeError("boom")

        result = await service.generate_report("vid1")

        assert result.success is False
        assert result.error_kind == ErrorKind.INTERNAL
        assert result.error == "boom"


# ============================================================================
# Channel batch
# ============================================================================

class TestGenerateChannelReports:

    @pytest.mark.asyncio
    async def test_one_failure_in_three(self, service, source, store):
        store.list_channel_videos.return_value = [
            {"video_id": "vid1", "title": "One"},
            {"video_id": "vid2", "title": "Two"},
            {"video_id": "vid3", "title": "Three"},
        ]

        async def get_video(video_id):
            if video_id == "vid2":
                raise ExternalServiceError("youtube", "HTTP 500: backendError")
            return _video(video_id)

        source.get_video.side_effect = get_video

        result = await service.generate_channel_reports("UC1")

        assert result.success is True
        assert result.total == 3
        assert result.processed == 2
        assert result.failed == 1
        assert [item.video_id for item in result.reports] == ["vid1", "vid2", "vid3"]

        failed = result.reports[1]
        assert failed.success is False
        assert failed.title == "Two"
        assert "backendError" in failed.error
        assert failed.error_kind == ErrorKind.UPSTREAM_FAILURE

    @pytest.mark.asyncio
    async def test_processed_sequentially(self, service, source, store):
        store.list_channel_videos.return_value = [{"video_id": f"vid{i}"} for i in range(4)]
        async def get_video(video_id):
            return _video(video_id)

        source.get_video.side_effect = get_video

        await service.generate_channel_reports("UC1")

        fetched = [c.args[0] for c in source.get_video.await_args_list]
        assert fetched == ["vid0", "vid1", "vid2", "vid3"]

    @pytest.mark.asyncio
    async def test_no_videos(self, service, store):
        result = await service.generate_channel_reports("UC1")

        assert result.success is False
        assert result.error == NO_CHANNEL_VIDEOS
        assert result.error_kind == ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_store_failure(self, service, store):
        store.list_channel_videos.side_effect = ExternalServiceError("supabase", "unreachable")

        result = await service.generate_channel_reports("UC1")

        assert result.success is False
        assert result.error_kind == ErrorKind.UPSTREAM_FAILURE


# ============================================================================
# Heuristic pass-throughs
# ============================================================================

class TestHeuristics:

    def test_detect_sponsorship(self, service):
        info = service.detect_sponsorship("Big thanks to Acme® for sponsoring!", [])
        assert info.has_sponsorship is True
        assert "Acme" in info.detected_brands

    def test_compute_engagement(self, service):
        metrics = service.compute_engagement(1000, 50, 10)
        assert metrics.overall_engagement_rate == 6.0

    def test_analyze_sentiment(self, service):
        summary = service.analyze_sentiment([VideoComment(text="love"), VideoComment(text="hate")])
        assert summary.positive_percentage == 50.0
        assert summary.negative_percentage == 50.0

    def test_enrich_does_not_mutate_input(self, service):
        video = _video()
        enriched = service.enrich(video)

        assert video.engagement_metrics is None
        assert enriched.sponsorship_info.has_sponsorship is True


# ============================================================================
# Comment refresh
# ============================================================================

class TestRefreshComments:

    @pytest.fixture
    def catalog_store(self, store):
        store.video_exists = AsyncMock(return_value=True)
        store.save_comments = AsyncMock(side_effect=lambda comments: len(comments))
        return store

    @pytest.mark.asyncio
    async def test_scores_and_saves_each_comment(self, service, source, catalog_store):
        source.get_comments.return_value = [
            VideoComment(comment_id="c1", text="love this sponsor"),
            VideoComment(comment_id="c2", text="hate it"),
            VideoComment(comment_id="c3", text="first"),
        ]

        result = await service.refresh_comments("vid1", max_results=3)

        source.get_comments.assert_awaited_once_with("vid1", max_results=3)
        saved = catalog_store.save_comments.await_args.args[0]
        assert [comment.comment.comment_id for comment in saved] == ["c1", "c2", "c3"]
        assert saved[0].video_id == "vid1"
        assert saved[0].sentiment.classification == "positive"
        assert saved[0].ad_related.ad_keywords == ["sponsor"]
        assert saved[1].sentiment.classification == "negative"

        assert result.success is True
        assert result.count == 3
        assert (result.positive, result.negative, result.neutral) == (1, 1, 1)
        assert result.ad_related == 1

    @pytest.mark.asyncio
    async def test_defaults_to_max_comments(self, service, source, catalog_store):
        await service.refresh_comments("vid1")

        source.get_comments.assert_awaited_once_with("vid1", max_results=50)

    @pytest.mark.asyncio
    async def test_video_not_in_catalog(self, service, source, catalog_store):
        catalog_store.video_exists.return_value = False

        result = await service.refresh_comments("missing")

        assert result.success is False
        assert result.error == VIDEO_NOT_FOUND
        assert result.error_kind == ErrorKind.NOT_FOUND
        source.get_comments.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_comments(self, service, source, catalog_store):
        source.get_comments.return_value = []

        result = await service.refresh_comments("vid1")

        assert result.success is True
        assert result.count == 0
        catalog_store.save_comments.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_comments_disabled(self, service, source, catalog_store):
        source.get_comments.side_effect = ExternalServiceError("youtube", "HTTP 403: commentsDisabled")

        result = await service.refresh_comments("vid1")

        assert result.success is False
        assert result.error_kind == ErrorKind.UPSTREAM_FAILURE

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, service, catalog_store):
        catalog_store.video_exists.side_effect = RuntimeError("boom")

        result = await service.refresh_comments("vid1")

        assert result.success is False
        assert result.error_kind == ErrorKind.INTERNAL
