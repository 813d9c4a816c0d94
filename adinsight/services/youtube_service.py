"""
YouTubeService - Video and comment source backed by the YouTube Data API v3.

Provides async interfaces for:
- Fetching one video's metadata and statistics
- Fetching a video's most relevant comments
- Listing a channel's latest uploads
- Searching recent videos by keyword

The googleapiclient SDK is blocking, so requests run in the default executor.
"""

import logging
import asyncio
from typing import Any, Callable, Dict, List, Optional

from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..core.config import Config
from ..core.exceptions import ExternalServiceError
from ..core.models import VideoComment, VideoRecord

logger = logging.getLogger(__name__)

VIDEO_PARTS = "snippet,statistics,contentDetails"

# Maximum page size accepted by commentThreads.list and playlistItems.list
MAX_PAGE_SIZE = 100


def _is_transient(error: BaseException) -> bool:
    """Retry rate limits, server errors and network failures, not client errors."""
    if isinstance(error, HttpError):
        return error.resp.status == 429 or error.resp.status >= 500
    return isinstance(error, OSError)


def _dig(data: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a level is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _to_int(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


class YouTubeService:
    """
    Service for YouTube Data API operations.

    Example usage:
        service = YouTubeService()
        video = await service.get_video("dQw4w9WgXcQ")
        comments = await service.get_comments("dQw4w9WgXcQ", max_results=50)
    """

    def __init__(self, api_key: Optional[str] = None, service: Optional[Resource] = None):
        """
        Initialize YouTube service.

        Args:
            api_key: YouTube Data API key (if None, uses Config.YOUTUBE_API_KEY)
            service: Prebuilt API resource (built lazily from api_key if None)
        """
        self.api_key = api_key or Config.YOUTUBE_API_KEY
        self._service = service
        logger.info("YouTubeService initialized")

    def _get_service(self) -> Resource:
        """Get or create the API resource (lazy initialization)."""
        if self._service is None:
            if not self.api_key:
                raise ExternalServiceError("youtube", "YOUTUBE_API_KEY not found in environment")
            self._service = build("youtube", "v3", developerKey=self.api_key, cache_discovery=False)
        return self._service

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=8),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    )
    def _execute(self, make_request: Callable[[Resource], Any]) -> Dict[str, Any]:
        return make_request(self._get_service()).execute()

    async def _call(self, make_request: Callable[[Resource], Any]) -> Dict[str, Any]:
        """Run an API request in the executor, mapping failures to ExternalServiceError."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, lambda: self._execute(make_request))
        except ExternalServiceError:
            raise
        except HttpError as e:
            raise ExternalServiceError("youtube", f"HTTP {e.resp.status}: {e}") from e
        except Exception as e:
            raise ExternalServiceError("youtube", str(e)) from e

    async def get_video(self, video_id: str) -> Optional[VideoRecord]:
        """
        Get detailed video metadata and statistics.

        Args:
            video_id: YouTube video ID

        Returns:
            VideoRecord, or None if the video doesn't exist

        Raises:
            ExternalServiceError: If the API call fails
        """
        response = await self._call(
            lambda yt: yt.videos().list(part=VIDEO_PARTS, id=video_id)
        )

        items = response.get("items") or []
        if not items:
            logger.info(f"No details found for video {video_id}")
            return None

        return self._parse_video(items[0], video_id)

    async def get_comments(self, video_id: str, max_results: int = 100) -> List[VideoComment]:
        """
        Get a video's top-level comments, most relevant first.

        Args:
            video_id: YouTube video ID
            max_results: Maximum number of comments (capped at one page of 100)

        Returns:
            List of VideoComment (empty if the video has none)

        Raises:
            ExternalServiceError: If the API call fails (including disabled comments)
        """
        response = await self._call(
            lambda yt: yt.commentThreads().list(
                part="snippet",
                videoId=video_id,
                maxResults=min(max_results, MAX_PAGE_SIZE),
                order="relevance",
                textFormat="plainText",
            )
        )

        items = response.get("items") or []
        if not items:
            logger.info(f"No comments found for video {video_id}")
            return []

        comments = []
        for item in items:
            snippet = _dig(item, "snippet", "topLevelComment", "snippet")
            if not isinstance(snippet, dict):
                logger.warning(f"Skipping malformed comment thread on video {video_id}")
                continue
            comments.append(VideoComment(
                comment_id=item.get("id", ""),
                text=snippet.get("textDisplay") or "",
                author_name=snippet.get("authorDisplayName"),
                author_profile_url=snippet.get("authorProfileImageUrl"),
                like_count=_to_int(snippet.get("likeCount")),
                published_at=snippet.get("publishedAt"),
                updated_at=snippet.get("updatedAt"),
            ))

        logger.info(f"Fetched {len(comments)} comments for video {video_id}")
        return comments

    async def get_channel_videos(self, channel_id: str, max_results: int = 10) -> List[VideoRecord]:
        """
        Get a channel's latest uploads with full details.

        Videos are fetched one at a time to stay gentle on the API quota.

        Args:
            channel_id: YouTube channel ID
            max_results: Maximum number of uploads

        Returns:
            List of VideoRecord (source="channel")

        Raises:
            ExternalServiceError: If the API call fails
        """
        channel_response = await self._call(
            lambda yt: yt.channels().list(part="contentDetails", id=channel_id)
        )

        channels = channel_response.get("items") or []
        if not channels:
            logger.info(f"No channel found with ID: {channel_id}")
            return []

        uploads_playlist_id = _dig(channels[0], "contentDetails", "relatedPlaylists", "uploads")
        if not uploads_playlist_id:
            raise ExternalServiceError("youtube", f"Channel {channel_id} reply has no uploads playlist")

        playlist_response = await self._call(
            lambda yt: yt.playlistItems().list(
                part="snippet,contentDetails",
                playlistId=uploads_playlist_id,
                maxResults=min(max_results, MAX_PAGE_SIZE),
            )
        )

        video_ids = [
            video_id
            for video_id in (
                _dig(item, "contentDetails", "videoId")
                for item in playlist_response.get("items") or []
            )
            if video_id
        ]
        if not video_ids:
            logger.info(f"No videos found for channel: {channel_id}")
            return []

        return await self._fetch_details(video_ids, source="channel")

    async def search_videos(self, keyword: str, max_results: int = 10) -> List[VideoRecord]:
        """
        Search the most recent videos for a keyword.

        Args:
            keyword: Search query
            max_results: Maximum number of results

        Returns:
            List of VideoRecord (source="search", keyword set)

        Raises:
            ExternalServiceError: If the API call fails
        """
        search_response = await self._call(
            lambda yt: yt.search().list(
                part="snippet",
                q=keyword,
                type="video",
                maxResults=min(max_results, MAX_PAGE_SIZE),
                order="date",
            )
        )

        video_ids = [
            video_id
            for video_id in (
                _dig(item, "id", "videoId")
                for item in search_response.get("items") or []
            )
            if video_id
        ]
        if not video_ids:
            logger.info(f"No videos found for keyword: {keyword}")
            return []

        return await self._fetch_details(video_ids, source="search", keyword=keyword)

    async def _fetch_details(
        self,
        video_ids: List[str],
        source: str,
        keyword: Optional[str] = None
    ) -> List[VideoRecord]:
        videos = []
        for video_id in video_ids:
            video = await self.get_video(video_id)
            if video is None:
                continue
            videos.append(video.model_copy(update={"source": source, "keyword": keyword}))
        return videos

    @staticmethod
    def _parse_video(item: Dict[str, Any], video_id: str) -> VideoRecord:
        """Convert a videos.list item into a VideoRecord; missing parts default to empty."""
        snippet = item.get("snippet") or {}
        statistics = item.get("statistics") or {}
        content = item.get("contentDetails") or {}
        thumbnails = snippet.get("thumbnails") or {}
        thumbnail = thumbnails.get("high") or thumbnails.get("default") or {}

        return VideoRecord(
            video_id=item.get("id") or video_id,
            channel_id=snippet.get("channelId"),
            channel_title=snippet.get("channelTitle"),
            published_at=snippet.get("publishedAt"),
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            tags=snippet.get("tags") or [],
            category_id=snippet.get("categoryId"),
            default_language=snippet.get("defaultLanguage"),
            default_audio_language=snippet.get("defaultAudioLanguage"),
            live_broadcast_content=snippet.get("liveBroadcastContent"),
            thumbnail_url=thumbnail.get("url"),
            view_count=_to_int(statistics.get("viewCount")),
            like_count=_to_int(statistics.get("likeCount")),
            comment_count=_to_int(statistics.get("commentCount")),
            favorite_count=_to_int(statistics.get("favoriteCount")),
            duration=content.get("duration"),
            definition=content.get("definition"),
            dimension=content.get("dimension"),
            caption=str(content.get("caption", "")).lower() == "true",
            licensed_content=bool(content.get("licensedContent", False)),
            content_rating=content.get("contentRating") or {},
        )
