"""
InsightStoreService - Supabase persistence for reports and the video catalog.

Tables:
- ad_insights: one row per video_id (upserted on every analysis run)
- videos: catalog of fetched videos, one row per video_id
- comments: scored comments, one row per comment_id

Part of the Service Layer - contains data access, no pipeline logic.
"""

import logging
from collections import Counter, defaultdict
from typing import Any, Dict, List, Optional, Sequence

from supabase import Client

from ..core.database import (
    AD_INSIGHTS_TABLE,
    COMMENTS_TABLE,
    VIDEOS_TABLE,
    get_supabase_client,
    run_query,
)
from ..core.models import AdInsightReport, ScoredComment, VideoRecord

logger = logging.getLogger(__name__)


class InsightStoreService:
    """
    Service for ad insight and video catalog storage.

    Example usage:
        store = InsightStoreService()
        await store.upsert_report(report)
        summary = await store.sponsorship_summary(channel_id="UC...")
    """

    def __init__(self, supabase: Optional[Client] = None):
        """
        Initialize the store.

        Args:
            supabase: Supabase client (uses the shared client if None)
        """
        self.supabase = supabase or get_supabase_client()
        logger.info("InsightStoreService initialized")

    # =========================================================================
    # REPORTS
    # =========================================================================

    async def upsert_report(self, report: AdInsightReport) -> Dict[str, Any]:
        """
        Insert or replace the stored report for report.video_id.

        Returns:
            The stored row

        Raises:
            ExternalServiceError: If the write fails
        """
        row = report.to_row()
        result = await run_query(
            "report upsert",
            lambda: self.supabase.table(AD_INSIGHTS_TABLE)
            .upsert(row, on_conflict="video_id")
            .execute()
        )
        logger.info(f"Ad insights report saved for video {report.video_id}")
        return result.data[0] if result.data else row

    async def get_report(self, video_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored report row for a video, or None."""
        result = await run_query(
            "report lookup",
            lambda: self.supabase.table(AD_INSIGHTS_TABLE)
            .select("*")
            .eq("video_id", video_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    async def count_reports(self, channel_id: Optional[str] = None) -> int:
        """Count stored reports, optionally for one channel."""
        def query():
            q = self.supabase.table(AD_INSIGHTS_TABLE).select("video_id", count="exact")
            if channel_id:
                q = q.eq("channel_id", channel_id)
            return q.execute()

        result = await run_query("report count", query)
        return result.count or 0

    async def sponsorship_summary(self, channel_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Aggregate stored reports for dashboards.

        Returns:
            Dict with total_reports, sponsored_reports, sponsorship_rate (%),
            average_effectiveness, ad_styles (style -> count), top_brands
            (brand, count, average_effectiveness; ten most frequent) and
            sentiment (average positive/negative/neutral percentages)
        """
        def query():
            q = self.supabase.table(AD_INSIGHTS_TABLE).select(
                "has_sponsorship, ad_effectiveness, ad_style, detected_brands, sentiment_analysis"
            )
            if channel_id:
                q = q.eq("channel_id", channel_id)
            return q.execute()

        result = await run_query("report aggregate", query)
        rows = result.data or []

        total = len(rows)
        sponsored = sum(1 for row in rows if row.get("has_sponsorship"))
        effectiveness = [float(row["ad_effectiveness"]) for row in rows if row.get("ad_effectiveness") is not None]
        styles = Counter(row.get("ad_style") or "Unknown" for row in rows)

        brand_counts: Counter = Counter()
        brand_scores = defaultdict(list)
        for row in rows:
            for brand in row.get("detected_brands") or []:
                brand_counts[brand] += 1
                if row.get("ad_effectiveness") is not None:
                    brand_scores[brand].append(float(row["ad_effectiveness"]))

        return {
            "total_reports": total,
            "sponsored_reports": sponsored,
            "sponsorship_rate": 100 * sponsored / total if total else 0.0,
            "average_effectiveness": _mean(effectiveness),
            "ad_styles": dict(styles),
            "top_brands": [
                {"brand": brand, "count": count, "average_effectiveness": _mean(brand_scores[brand])}
                for brand, count in brand_counts.most_common(10)
            ],
            "sentiment": {
                f"average_{polarity}": _mean([
                    float(row["sentiment_analysis"][f"{polarity}_percentage"])
                    for row in rows
                    if (row.get("sentiment_analysis") or {}).get(f"{polarity}_percentage") is not None
                ])
                for polarity in ("positive", "negative", "neutral")
            },
        }

    async def recent_reports(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Most recently generated reports (video_id, title, ad_effectiveness, generated_at)."""
        result = await run_query(
            "recent report listing",
            lambda: self.supabase.table(AD_INSIGHTS_TABLE)
            .select("video_id, title, ad_style, ad_effectiveness, generated_at")
            .order("generated_at", desc=True)
            .limit(limit)
            .execute()
        )
        return result.data or []

    # =========================================================================
    # CHANNELS
    # =========================================================================

    async def channel_status(self, channel_id: str) -> Dict[str, Any]:
        """
        Report coverage of a channel's catalog videos.

        Returns:
            Dict with total_videos, processed_videos, progress (%),
            is_complete and last_processed (generated_at of the newest report)
        """
        videos = await run_query(
            "channel video count",
            lambda: self.supabase.table(VIDEOS_TABLE)
            .select("video_id", count="exact")
            .eq("channel_id", channel_id)
            .execute()
        )
        total_videos = videos.count or 0
        processed_videos = await self.count_reports(channel_id)

        latest = await run_query(
            "latest channel report",
            lambda: self.supabase.table(AD_INSIGHTS_TABLE)
            .select("generated_at")
            .eq("channel_id", channel_id)
            .order("generated_at", desc=True)
            .limit(1)
            .execute()
        )

        return {
            "channel_id": channel_id,
            "total_videos": total_videos,
            "processed_videos": processed_videos,
            "progress": 100 * processed_videos / total_videos if total_videos else 0.0,
            "is_complete": processed_videos >= total_videos,
            "last_processed": latest.data[0]["generated_at"] if latest.data else None,
        }

    async def compare_channels(self, channel_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Compare ad metrics across channels, in the given order.

        A channel with no catalog videos gets zeroed metrics, title "Unknown"
        and top_ad_style "N/A".

        Returns:
            One dict per channel: channel_id, channel_title, video_count and
            ad_data (has_ads, ad_frequency, average_effectiveness,
            top_ad_style, average_sentiment)
        """
        comparisons = []
        for channel_id in channel_ids:
            videos = await run_query(
                "channel video listing",
                lambda: self.supabase.table(VIDEOS_TABLE)
                .select("channel_title, sponsorship_info")
                .eq("channel_id", channel_id)
                .execute()
            )
            video_rows = videos.data or []

            if not video_rows:
                comparisons.append({
                    "channel_id": channel_id,
                    "channel_title": "Unknown",
                    "video_count": 0,
                    "ad_data": {
                        "has_ads": False,
                        "ad_frequency": 0.0,
                        "average_effectiveness": 0.0,
                        "top_ad_style": "N/A",
                        "average_sentiment": 0.0,
                    },
                })
                continue

            insights = await run_query(
                "channel report listing",
                lambda: self.supabase.table(AD_INSIGHTS_TABLE)
                .select("ad_effectiveness, ad_style, sentiment_analysis")
                .eq("channel_id", channel_id)
                .execute()
            )
            insight_rows = insights.data or []

            video_count = len(video_rows)
            with_ads = sum(
                1 for row in video_rows if (row.get("sponsorship_info") or {}).get("has_sponsorship")
            )
            styles = Counter(row["ad_style"] for row in insight_rows if row.get("ad_style"))

            comparisons.append({
                "channel_id": channel_id,
                "channel_title": video_rows[0].get("channel_title") or "Unknown",
                "video_count": video_count,
                "ad_data": {
                    "has_ads": with_ads > 0,
                    "ad_frequency": 100 * with_ads / video_count,
                    "average_effectiveness": _mean(
                        [float(row.get("ad_effectiveness") or 0.0) for row in insight_rows]
                    ),
                    "top_ad_style": styles.most_common(1)[0][0] if styles else "N/A",
                    "average_sentiment": _mean([
                        float((row.get("sentiment_analysis") or {}).get("average_sentiment") or 0.0)
                        for row in insight_rows
                    ]),
                },
            })

        return comparisons

    # =========================================================================
    # VIDEO CATALOG
    # =========================================================================

    async def save_videos(self, videos: Sequence[VideoRecord]) -> int:
        """
        Upsert fetched videos into the catalog.

        Duplicate video_ids in one batch keep the last occurrence.

        Returns:
            Number of rows written
        """
        if not videos:
            return 0

        rows_by_id = {video.video_id: video.to_row() for video in videos}
        rows = list(rows_by_id.values())

        await run_query(
            "video upsert",
            lambda: self.supabase.table(VIDEOS_TABLE)
            .upsert(rows, on_conflict="video_id")
            .execute()
        )
        logger.info(f"Videos saved to database: {len(rows)}")
        return len(rows)

    async def list_channel_videos(self, channel_id: str) -> List[Dict[str, Any]]:
        """List catalog videos (video_id, title) known for a channel."""
        result = await run_query(
            "channel video listing",
            lambda: self.supabase.table(VIDEOS_TABLE)
            .select("video_id, title")
            .eq("channel_id", channel_id)
            .order("published_at", desc=True)
            .execute()
        )
        return result.data or []

    async def catalog_summary(self) -> Dict[str, Any]:
        """
        Catalog-wide counts: total_videos, videos_with_ads, total_channels
        and ad_frequency (% of videos with sponsorship).
        """
        result = await run_query(
            "catalog aggregate",
            lambda: self.supabase.table(VIDEOS_TABLE)
            .select("channel_id, sponsorship_info")
            .execute()
        )
        rows = result.data or []

        total = len(rows)
        with_ads = sum(1 for row in rows if (row.get("sponsorship_info") or {}).get("has_sponsorship"))
        channels = {row["channel_id"] for row in rows if row.get("channel_id")}

        return {
            "total_videos": total,
            "videos_with_ads": with_ads,
            "total_channels": len(channels),
            "ad_frequency": 100 * with_ads / total if total else 0.0,
        }

    async def video_exists(self, video_id: str) -> bool:
        """Whether the video is in the catalog."""
        result = await run_query(
            "video lookup",
            lambda: self.supabase.table(VIDEOS_TABLE)
            .select("video_id")
            .eq("video_id", video_id)
            .limit(1)
            .execute()
        )
        return bool(result.data)

    # =========================================================================
    # COMMENTS
    # =========================================================================

    async def save_comments(self, comments: Sequence[ScoredComment]) -> int:
        """
        Upsert scored comments.

        Duplicate comment_ids in one batch keep the last occurrence.

        Returns:
            Number of rows written
        """
        if not comments:
            return 0

        rows_by_id = {comment.comment.comment_id: comment.to_row() for comment in comments}
        rows = list(rows_by_id.values())

        await run_query(
            "comment upsert",
            lambda: self.supabase.table(COMMENTS_TABLE)
            .upsert(rows, on_conflict="comment_id")
            .execute()
        )
        logger.info(f"Comments saved to database: {len(rows)}")
        return len(rows)

    async def list_comments(self, video_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """Stored comments for a video, newest first."""
        result = await run_query(
            "comment listing",
            lambda: self.supabase.table(COMMENTS_TABLE)
            .select("*")
            .eq("video_id", video_id)
            .order("published_at", desc=True)
            .limit(limit)
            .execute()
        )
        return result.data or []


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0
