"""
VideoSyncService - Keeps the video catalog fresh for channel batches.

Fetches the latest uploads of configured channels and recent search results
for configured keywords, enriches them with engagement and sponsorship
signals, and upserts them into the `videos` table.
"""

import logging
from typing import List, Optional

from ..analysis.enrichment import enrich_video
from ..analysis.sponsorship import SponsorshipDetector
from ..core.config import Config, ScoringWeights
from ..core.exceptions import ExternalServiceError
from ..core.models import SyncResult, VideoRecord

logger = logging.getLogger(__name__)


class VideoSyncService:
    """
    Sequential catalog sync.

    Example usage:
        sync = VideoSyncService(YouTubeService(), InsightStoreService())
        result = await sync.sync_all()
        print(f"Saved {result.saved} videos")
    """

    def __init__(
        self,
        youtube,
        store,
        channels: Optional[List[str]] = None,
        keywords: Optional[List[str]] = None,
        channel_max_results: Optional[int] = None,
        search_max_results: Optional[int] = None,
        detector: Optional[SponsorshipDetector] = None,
        weights: Optional[ScoringWeights] = None
    ):
        """
        Args:
            youtube: YouTubeService (get_channel_videos, search_videos)
            store: InsightStoreService (save_videos)
            channels: Channel IDs (if None, uses Config.YOUTUBE_CHANNELS)
            keywords: Search keywords (if None, uses Config.SEARCH_KEYWORDS)
            channel_max_results: Uploads per channel (if None, uses Config.CHANNEL_MAX_RESULTS)
            search_max_results: Results per keyword (if None, uses Config.SEARCH_MAX_RESULTS)
            detector: Sponsorship detector
            weights: Scoring weights for engagement
        """
        self.youtube = youtube
        self.store = store
        self.channels = list(Config.YOUTUBE_CHANNELS if channels is None else channels)
        self.keywords = list(Config.SEARCH_KEYWORDS if keywords is None else keywords)
        self.channel_max_results = channel_max_results or Config.CHANNEL_MAX_RESULTS
        self.search_max_results = search_max_results or Config.SEARCH_MAX_RESULTS
        self.detector = detector or SponsorshipDetector()
        self.weights = weights or ScoringWeights()

    async def sync_all(self) -> SyncResult:
        """
        Fetch, enrich and store videos from every configured source.

        A failing source, whatever the error, is logged and recorded in
        failed_sources; the remaining sources still run.

        Returns:
            SyncResult
        """
        result = SyncResult(channels=len(self.channels), keywords=len(self.keywords))
        videos: List[VideoRecord] = []

        for channel_id in self.channels:
            try:
                fetched = await self.youtube.get_channel_videos(
                    channel_id, max_results=self.channel_max_results
                )
                logger.info(f"Fetched {len(fetched)} videos from channel {channel_id}")
                videos.extend(fetched)
            except Exception as e:
                logger.error(f"Error fetching videos from channel {channel_id}: {e}")
                result.failed_sources.append(f"channel:{channel_id}")

        for keyword in self.keywords:
            try:
                fetched = await self.youtube.search_videos(
                    keyword, max_results=self.search_max_results
                )
                logger.info(f"Fetched {len(fetched)} videos for keyword '{keyword}'")
                videos.extend(fetched)
            except Exception as e:
                logger.error(f"Error searching videos for keyword '{keyword}': {e}")
                result.failed_sources.append(f"search:{keyword}")

        result.fetched = len(videos)
        if not videos:
            logger.info("No videos fetched, nothing to save")
            return result

        enriched = [enrich_video(video, self.detector, self.weights) for video in videos]

        try:
            result.saved = await self.store.save_videos(enriched)
        except ExternalServiceError as e:
            logger.error(f"Error saving videos to database: {e}")
            result.failed_sources.append("store")

        logger.info(f"Sync complete: fetched {result.fetched}, saved {result.saved}")
        return result
