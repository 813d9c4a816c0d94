"""
Pydantic models for AdInsight.

These models provide validated data structures for:
- Raw platform data (VideoRecord, VideoComment)
- Heuristic analysis output (SponsorshipInfo, EngagementMetrics, SentimentSummary)
- The persisted report (AdInsightReport)
- Per-comment scoring (ScoredComment)
- Pipeline outcomes (CompositionResult, ReportResult, BatchResult, CommentRefreshResult, SyncResult)
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================

class AdStyle(str, Enum):
    """Coarse classification of a sponsorship segment's length"""
    LONG_FORM = "Long-form"
    SHORT_FORM = "Short-form"
    UNKNOWN = "Unknown"


class ErrorKind(str, Enum):
    """Why a pipeline reached a failure terminal state"""
    NOT_FOUND = "not_found"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL = "internal"


ANALYSIS_FAILED = "Analysis failed"


# ============================================================================
# Analysis Output
# ============================================================================

class SponsorshipInfo(BaseModel):
    """Sponsorship signals detected in a video's description and tags."""
    has_sponsorship: bool = False
    sponsorship_details: str = ""
    ad_indicators: List[str] = Field(default_factory=list)
    detected_brands: List[str] = Field(default_factory=list)
    ad_duration: Optional[int] = Field(None, ge=0, description="Ad segment length in seconds")


class EngagementMetrics(BaseModel):
    """Engagement ratios (percentages) and the raw weighted engagement score."""
    like_to_view_ratio: float = 0.0
    comment_to_view_ratio: float = 0.0
    overall_engagement_rate: float = 0.0
    ad_effectiveness_score: float = Field(
        0.0, description="Unbounded weighted engagement; bounded later by the effectiveness scorer"
    )


class KeywordSentiment(BaseModel):
    """Sentiment of comments mentioning one ad-related keyword."""
    count: int = 0
    total_sentiment: float = 0.0
    average_sentiment: float = 0.0

    model_config = {"frozen": True}


class SentimentSummary(BaseModel):
    """Aggregate polarity of a comment sample."""
    average_sentiment: float = 0.0
    positive_percentage: float = 0.0
    negative_percentage: float = 0.0
    neutral_percentage: float = 0.0
    total_comments: int = 0
    keyword_sentiment: Dict[str, KeywordSentiment] = Field(default_factory=dict)

    model_config = {"frozen": True}


# ============================================================================
# Platform Data
# ============================================================================

class VideoComment(BaseModel):
    """Top-level YouTube comment."""
    comment_id: str = ""
    text: str = ""
    author_name: Optional[str] = None
    author_profile_url: Optional[str] = None
    like_count: int = Field(default=0, ge=0)
    published_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentSentiment(BaseModel):
    """Polarity of a single comment."""
    score: float = 0.0
    comparative: float = Field(0.0, description="score divided by token count")
    classification: str = Field("neutral", description="positive, negative or neutral")
    keywords: List[str] = Field(default_factory=list, description="Leading tokens of the comment")


class CommentAdSignals(BaseModel):
    """Ad-related keywords found in a single comment."""
    is_ad_related: bool = False
    ad_keywords: List[str] = Field(default_factory=list)
    brand_mentions: List[str] = Field(default_factory=list)


class ScoredComment(BaseModel):
    """A fetched comment with its own sentiment, stored in the `comments` table."""
    video_id: str
    comment: VideoComment
    sentiment: CommentSentiment = Field(default_factory=CommentSentiment)
    ad_related: CommentAdSignals = Field(default_factory=CommentAdSignals)

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the `comments` table shape."""
        row = self.comment.model_dump(mode="json")
        row["video_id"] = self.video_id
        row["sentiment"] = self.sentiment.model_dump(mode="json")
        row["ad_related"] = self.ad_related.model_dump(mode="json")
        return row


class VideoRecord(BaseModel):
    """
    YouTube video metadata and statistics.

    engagement_metrics and sponsorship_info are empty until the record is
    enriched by the analysis pipeline.
    """
    video_id: str = Field(..., description="YouTube video ID")
    channel_id: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[datetime] = None

    # Descriptive fields
    title: str = ""
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    default_language: Optional[str] = None
    default_audio_language: Optional[str] = None
    live_broadcast_content: Optional[str] = None
    thumbnail_url: Optional[str] = None

    # Statistics
    view_count: int = Field(default=0, ge=0)
    like_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    favorite_count: int = Field(default=0, ge=0)

    # Content details
    duration: Optional[str] = Field(None, description="ISO-8601 duration, e.g. PT10M5S")
    definition: Optional[str] = None
    dimension: Optional[str] = None
    caption: bool = False
    licensed_content: bool = False
    content_rating: Dict[str, Any] = Field(default_factory=dict)

    # Discovery metadata
    source: str = Field(default="video", description="video, channel or search")
    keyword: Optional[str] = None

    # Enrichment
    engagement_metrics: Optional[EngagementMetrics] = None
    sponsorship_info: Optional[SponsorshipInfo] = None

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the `videos` table shape."""
        row = self.model_dump(mode="json", exclude={"engagement_metrics", "sponsorship_info"})
        row["engagement_metrics"] = (
            self.engagement_metrics.model_dump(mode="json") if self.engagement_metrics else None
        )
        row["sponsorship_info"] = (
            self.sponsorship_info.model_dump(mode="json") if self.sponsorship_info else None
        )
        return row


# ============================================================================
# Report
# ============================================================================

class AdData(BaseModel):
    """Sponsorship fields copied into a report."""
    has_sponsorship: bool = False
    sponsorship_details: str = ""
    ad_indicators: Tuple[str, ...] = ()
    detected_brands: Tuple[str, ...] = ()
    ad_duration: Optional[int] = None

    model_config = {"frozen": True}


class ReportEngagement(BaseModel):
    """Engagement fields copied into a report."""
    like_count: int = 0
    comment_count: int = 0
    like_to_view_ratio: float = 0.0
    comment_to_view_ratio: float = 0.0
    overall_engagement_rate: float = 0.0

    model_config = {"frozen": True}


class AdInsightReport(BaseModel):
    """
    Advertising intelligence for one video.

    Created once per analysis run and never mutated afterwards; a new run
    produces a new report that replaces the stored one by video_id.
    """
    video_id: str
    title: str = ""
    channel_id: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[datetime] = None
    view_count: int = 0

    ad_data: AdData
    engagement: ReportEngagement
    sentiment_analysis: SentimentSummary
    ad_style: AdStyle = AdStyle.UNKNOWN
    ad_effectiveness: float = Field(0.0, ge=0.0, le=100.0)
    ai_insights: str = ""
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the `ad_insights` table shape."""
        return {
            "video_id": self.video_id,
            "channel_id": self.channel_id,
            "title": self.title,
            "channel_title": self.channel_title,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "has_sponsorship": self.ad_data.has_sponsorship,
            "sponsorship_details": self.ad_data.sponsorship_details,
            "ad_indicators": list(self.ad_data.ad_indicators),
            "detected_brands": list(self.ad_data.detected_brands),
            "ad_duration": self.ad_data.ad_duration,
            "ad_style": self.ad_style.value,
            "view_count": self.view_count,
            "like_count": self.engagement.like_count,
            "comment_count": self.engagement.comment_count,
            "engagement_rate": self.engagement.overall_engagement_rate,
            "ad_effectiveness": self.ad_effectiveness,
            "sentiment_analysis": self.sentiment_analysis.model_dump(mode="json"),
            "ai_insights": self.ai_insights,
            "generated_at": self.generated_at.isoformat(),
        }


# ============================================================================
# Pipeline Outcomes
# ============================================================================

class CompositionResult(BaseModel):
    """Output of the insight composition stage."""
    ai_insights: str
    ad_style: AdStyle = AdStyle.UNKNOWN
    ad_effectiveness: float = 0.0
    ad_sentiment: SentimentSummary = Field(default_factory=SentimentSummary)
    last_analyzed: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    succeeded: bool = True


class ReportResult(BaseModel):
    """Terminal state of a single-video pipeline run."""
    success: bool
    report: Optional[AdInsightReport] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    degraded: bool = Field(False, description="AI analysis failed but a report was produced")
    persisted: bool = False

    @classmethod
    def failure(cls, error: str, error_kind: ErrorKind) -> "ReportResult":
        return cls(success=False, error=error, error_kind=error_kind)


class BatchItemOutcome(BaseModel):
    """Per-video outcome inside a channel batch."""
    video_id: str
    title: Optional[str] = None
    success: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


class BatchResult(BaseModel):
    """Terminal state of a channel batch run."""
    success: bool
    channel_id: str
    total: int = 0
    processed: int = 0
    failed: int = 0
    reports: List[BatchItemOutcome] = Field(default_factory=list)
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def to_markdown(self) -> str:
        """Render the batch outcome as a Markdown summary."""
        lines = [
            f"# Ad Insight Batch: {self.channel_id}",
            "",
            f"- Total: {self.total}",
            f"- Processed: {self.processed}",
            f"- Failed: {self.failed}",
        ]
        if self.error:
            lines.append(f"- Error: {self.error}")
        if self.reports:
            lines.append("")
            for item in self.reports:
                status = "ok" if item.success else f"failed ({item.error})"
                lines.append(f"- `{item.video_id}` {item.title or ''}: {status}")
        return "\n".join(lines)


class CommentRefreshResult(BaseModel):
    """Outcome of re-fetching and scoring a stored video's comments."""
    success: bool
    video_id: str
    count: int = 0
    positive: int = 0
    negative: int = 0
    neutral: int = 0
    ad_related: int = 0
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


class SyncResult(BaseModel):
    """Outcome of a catalog sync run."""
    channels: int = 0
    keywords: int = 0
    fetched: int = 0
    saved: int = 0
    failed_sources: List[str] = Field(default_factory=list)
