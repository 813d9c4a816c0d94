"""
Tests for report and pipeline outcome models.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from adinsight.core.exceptions import AdInsightError, ExternalServiceError
from adinsight.core.models import (
    AdData,
    AdInsightReport,
    AdStyle,
    BatchItemOutcome,
    BatchResult,
    CommentSentiment,
    ErrorKind,
    EngagementMetrics,
    KeywordSentiment,
    ReportEngagement,
    ReportResult,
    SentimentSummary,
    ScoredComment,
    SponsorshipInfo,
    VideoComment,
    VideoRecord,
)


def _report(**overrides):
    defaults = dict(
        video_id="vid123",
        title="Desk setup tour",
        channel_id="UC1",
        channel_title="Setups",
        published_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        view_count=1000,
        ad_data=AdData(
            has_sponsorship=True,
            sponsorship_details="Sponsored by Nord.",
            ad_indicators=["sponsor", "sponsored by"],
            detected_brands=["Nord"],
            ad_duration=75,
        ),
        engagement=ReportEngagement(
            like_count=50, comment_count=10,
            like_to_view_ratio=5.0, comment_to_view_ratio=1.0, overall_engagement_rate=6.0,
        ),
        sentiment_analysis=SentimentSummary(positive_percentage=100.0, total_comments=1),
        ad_style=AdStyle.LONG_FORM,
        ad_effectiveness=69.0,
        ai_insights="Strong integration.",
        generated_at=datetime(2024, 5, 2, tzinfo=timezone.utc),
    )
    defaults.update(overrides)
    return AdInsightReport(**defaults)


class TestAdInsightReport:

    def test_to_row(self):
        row = _report().to_row()

        assert row["video_id"] == "vid123"
        assert row["has_sponsorship"] is True
        assert row["ad_indicators"] == ["sponsor", "sponsored by"]
        assert row["ad_duration"] == 75
        assert row["ad_style"] == "Long-form"
        assert row["like_count"] == 50
        assert row["engagement_rate"] == 6.0
        assert row["sentiment_analysis"]["positive_percentage"] == 100.0
        assert row["published_at"] == "2024-05-01T00:00:00+00:00"
        assert row["generated_at"] == "2024-05-02T00:00:00+00:00"

    def test_frozen(self):
        report = _report()
        with pytest.raises(ValidationError):
            report.ai_insights = "changed"

    def test_nested_sentiment_is_frozen(self):
        report = _report(sentiment_analysis=SentimentSummary(
            positive_percentage=100.0,
            total_comments=1,
            keyword_sentiment={"sponsor": KeywordSentiment(count=1, total_sentiment=0.5, average_sentiment=0.5)},
        ))

        with pytest.raises(ValidationError):
            report.sentiment_analysis.positive_percentage = -999.0
        with pytest.raises(ValidationError):
            report.sentiment_analysis.keyword_sentiment["sponsor"].count = 5
        assert report.sentiment_analysis.positive_percentage == 100.0

    def test_ad_data_sequences_are_immutable(self):
        report = _report()

        assert report.ad_data.ad_indicators == ("sponsor", "sponsored by")
        with pytest.raises(AttributeError):
            report.ad_data.ad_indicators.append("injected")
        with pytest.raises(ValidationError):
            report.ad_data.detected_brands = ("Other",)

    def test_effectiveness_bounds(self):
        with pytest.raises(ValidationError):
            _report(ad_effectiveness=101.0)
        with pytest.raises(ValidationError):
            _report(ad_effectiveness=-1.0)

    def test_generated_at_defaults_to_utc_now(self):
        report = AdInsightReport(
            video_id="v",
            ad_data=AdData(),
            engagement=ReportEngagement(),
            sentiment_analysis=SentimentSummary(),
        )
        assert report.generated_at.tzinfo is not None
        assert report.ad_style == AdStyle.UNKNOWN


class TestVideoRecord:

    def test_counts_must_be_non_negative(self):
        with pytest.raises(ValidationError):
            VideoRecord(video_id="abc", view_count=-1)

    def test_to_row_flattens_enrichment(self):
        video = VideoRecord(
            video_id="abc",
            tags=["a"],
            engagement_metrics=EngagementMetrics(overall_engagement_rate=2.0),
            sponsorship_info=SponsorshipInfo(has_sponsorship=True),
        )
        row = video.to_row()

        assert row["engagement_metrics"]["overall_engagement_rate"] == 2.0
        assert row["sponsorship_info"]["has_sponsorship"] is True
        assert row["source"] == "video"

    def test_to_row_without_enrichment(self):
        row = VideoRecord(video_id="abc").to_row()
        assert row["engagement_metrics"] is None
        assert row["sponsorship_info"] is None


class TestSponsorshipInfo:

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            SponsorshipInfo(ad_duration=-5)


class TestOutcomes:

    def test_report_failure(self):
        result = ReportResult.failure("Video not found", ErrorKind.NOT_FOUND)

        assert result.success is False
        assert result.report is None
        assert result.error_kind == ErrorKind.NOT_FOUND

    def test_batch_markdown(self):
        batch = BatchResult(
            success=True, channel_id="UC1", total=2, processed=1, failed=1,
            reports=[
                BatchItemOutcome(video_id="v1", title="One", success=True),
                BatchItemOutcome(video_id="v2", title="Two", success=False, error="boom"),
            ],
        )
        markdown = batch.to_markdown()

        assert markdown.startswith("# Ad Insight Batch: UC1")
        assert "- Processed: 1" in markdown
        assert "`v2` Two: failed (boom)" in markdown


class TestExceptions:

    def test_external_service_error(self):
        error = ExternalServiceError("youtube", "HTTP 403: quota")

        assert isinstance(error, AdInsightError)
        assert error.service == "youtube"
        assert error.message == "HTTP 403: quota"
        assert str(error) == "youtube: HTTP 403: quota"


class TestScoredComment:

    def test_to_row(self):
        scored = ScoredComment(
            video_id="vid1",
            comment=VideoComment(
                comment_id="c1", text="love the sponsor",
                published_at=datetime(2024, 5, 3, tzinfo=timezone.utc),
            ),
            sentiment=CommentSentiment(score=1.0, comparative=0.33, classification="positive"),
        )

        row = scored.to_row()

        assert row["comment_id"] == "c1"
        assert row["video_id"] == "vid1"
        assert row["published_at"].startswith("2024-05-03T00:00:00")
        assert row["sentiment"]["classification"] == "positive"
        assert row["ad_related"] == {"is_ad_related": False, "ad_keywords": [], "brand_mentions": []}
