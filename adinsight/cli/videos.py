"""
Videos CLI Commands

Commands for syncing the video catalog, refreshing scored comments and
running ad detection ad hoc.
"""

import asyncio
import logging
from typing import Optional, Tuple

import click

from ..analysis.sponsorship import SponsorshipDetector
from ..core.config import load_analysis_config
from ..services.ad_insight_service import build_default_service
from ..services.insight_store_service import InsightStoreService
from ..services.video_sync_service import VideoSyncService
from ..services.youtube_service import YouTubeService

logger = logging.getLogger(__name__)


@click.group(name="videos")
def videos_group():
    """Video catalog"""
    pass


@videos_group.command(name="sync")
@click.option('--channels', help='Comma-separated channel IDs (default: YOUTUBE_CHANNELS)')
@click.option('--keywords', help='Comma-separated search keywords (default: SEARCH_KEYWORDS)')
@click.option('--max-results', type=int, help='Max videos per channel/keyword (optional)')
def videos_sync(channels: Optional[str], keywords: Optional[str], max_results: Optional[int]):
    """
    Fetch channel uploads and keyword searches into the video catalog

    Examples:
        adinsight videos sync
        adinsight videos sync --channels UC_x5XG1OV2P6uZZ5FSM9Ttw --max-results 5
        adinsight videos sync --keywords "tech review,unboxing"
    """
    channel_list = [c.strip() for c in channels.split(',') if c.strip()] if channels else None
    keyword_list = [k.strip() for k in keywords.split(',') if k.strip()] if keywords else None

    try:
        analysis_config = load_analysis_config()
        sync = VideoSyncService(
            youtube=YouTubeService(),
            store=InsightStoreService(),
            channels=channel_list,
            keywords=keyword_list,
            channel_max_results=max_results,
            search_max_results=max_results,
            detector=SponsorshipDetector(analysis_config.rules),
            weights=analysis_config.weights,
        )

        if not sync.channels and not sync.keywords:
            click.echo("❌ Error: No channels or keywords configured", err=True)
            raise click.Abort()

        click.echo(f"\n🔄 Syncing {len(sync.channels)} channels and {len(sync.keywords)} keywords...")
        result = asyncio.run(sync.sync_all())

    except click.Abort:
        raise
    except Exception as e:
        click.echo(f"\n❌ Sync failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(f"\n📊 Results:")
    click.echo(f"   Videos fetched: {result.fetched}")
    click.echo(f"   Videos saved: {result.saved}")

    if result.failed_sources:
        click.echo(f"\n⚠️  Failed sources: {', '.join(result.failed_sources)}")


@videos_group.command(name="detect")
@click.option('--description', '-d', default='', help='Video description text')
@click.option('--tag', '-t', 'tags', multiple=True, help='Video tag (repeatable)')
def videos_detect(description: str, tags: Tuple[str, ...]):
    """
    Run sponsorship detection on a description and tags

    Examples:
        adinsight videos detect -d "Sponsored by Acme®. Use code SAVE10" -t Acme -t review
    """
    detector = SponsorshipDetector(load_analysis_config().rules)
    info = detector.detect(description, list(tags))
    click.echo(info.model_dump_json(indent=2))


@videos_group.command(name="comments")
@click.argument('video_id')
@click.option('--max-results', type=int, help='Comments to fetch (default: MAX_COMMENTS)')
def videos_comments(video_id: str, max_results: Optional[int]):
    """
    Re-fetch a catalog video's comments and store them with their sentiment

    Examples:
        adinsight videos comments dQw4w9WgXcQ --max-results 50
    """
    try:
        service = build_default_service(with_insights=False)
        result = asyncio.run(service.refresh_comments(video_id, max_results))
    except Exception as e:
        click.echo(f"\n❌ Comment refresh failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    if not result.success:
        click.echo(f"❌ Error: {result.error} ({result.error_kind.value})", err=True)
        raise click.Abort()

    if result.count == 0:
        click.echo(f"No comments found for video {video_id}")
        return

    click.echo(f"\n💬 Comments stored: {result.count}")
    click.echo(f"   Positive: {result.positive}")
    click.echo(f"   Negative: {result.negative}")
    click.echo(f"   Neutral: {result.neutral}")
    click.echo(f"   Ad-related: {result.ad_related}")


@videos_group.command(name="stats")
def videos_stats():
    """
    Catalog-wide sponsorship counts

    Examples:
        adinsight videos stats
    """
    try:
        stats = asyncio.run(InsightStoreService().catalog_summary())
    except Exception as e:
        click.echo(f"\n❌ Stats failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(f"\n📊 Catalog:")
    click.echo(f"   Videos: {stats['total_videos']}")
    click.echo(f"   Channels: {stats['total_channels']}")
    click.echo(f"   Videos with ads: {stats['videos_with_ads']} ({stats['ad_frequency']:.1f}%)")
