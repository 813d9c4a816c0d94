"""
Report CLI Commands

Commands for generating and reading ad insight reports.
"""

import asyncio
import json
import logging
from typing import Optional, Tuple

import click

from ..core.models import ReportResult
from ..services.ad_insight_service import build_default_service
from ..services.insight_store_service import InsightStoreService

logger = logging.getLogger(__name__)


def _print_report(result: ReportResult) -> None:
    report = result.report

    click.echo(f"\n{'='*60}")
    click.echo(f"📺 {report.title}")
    click.echo(f"{'='*60}\n")

    click.echo(f"Video: {report.video_id}")
    if report.channel_title:
        click.echo(f"Channel: {report.channel_title}")
    click.echo(f"Views: {report.view_count:,}")

    click.echo(f"\n🏷️  Sponsorship:")
    click.echo(f"   Sponsored: {'yes' if report.ad_data.has_sponsorship else 'no'}")
    if report.ad_data.ad_indicators:
        click.echo(f"   Indicators: {', '.join(report.ad_data.ad_indicators)}")
    if report.ad_data.detected_brands:
        click.echo(f"   Brands: {', '.join(report.ad_data.detected_brands)}")
    if report.ad_data.ad_duration is not None:
        click.echo(f"   Ad duration: {report.ad_data.ad_duration}s")
    click.echo(f"   Ad style: {report.ad_style.value}")

    sentiment = report.sentiment_analysis
    click.echo(f"\n📊 Engagement:")
    click.echo(f"   Engagement rate: {report.engagement.overall_engagement_rate:.2f}%")
    click.echo(f"   Comments analyzed: {sentiment.total_comments}")
    click.echo(
        f"   Sentiment: {sentiment.positive_percentage:.1f}% positive, "
        f"{sentiment.negative_percentage:.1f}% negative, "
        f"{sentiment.neutral_percentage:.1f}% neutral"
    )
    click.echo(f"   Ad effectiveness: {report.ad_effectiveness:.1f}/100")

    click.echo(f"\n🤖 AI Insights:\n")
    click.echo(report.ai_insights)

    if result.degraded:
        click.echo("\n⚠️  AI analysis failed; heuristic results only")
    if not result.persisted:
        click.echo("\n⚠️  Report was not saved to the database")

    click.echo(f"\n{'='*60}\n")


@click.group(name="report")
def report_group():
    """Ad insight reports"""
    pass


@report_group.command(name="video")
@click.argument('video_id')
@click.option('--json', 'as_json', is_flag=True, help='Print the report as JSON')
def report_video(video_id: str, as_json: bool):
    """
    Generate an ad insight report for one video

    Examples:
        adinsight report video dQw4w9WgXcQ
        adinsight report video dQw4w9WgXcQ --json
    """
    try:
        service = build_default_service()
        result = asyncio.run(service.generate_report(video_id))
    except Exception as e:
        click.echo(f"\n❌ Report failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    if not result.success:
        click.echo(f"❌ Error: {result.error} ({result.error_kind.value})", err=True)
        raise click.Abort()

    if as_json:
        click.echo(result.report.model_dump_json(indent=2))
    else:
        _print_report(result)


@report_group.command(name="channel")
@click.argument('channel_id')
def report_channel(channel_id: str):
    """
    Generate reports for every stored video of a channel

    Videos must be synced first (adinsight videos sync).

    Examples:
        adinsight report channel UC_x5XG1OV2P6uZZ5FSM9Ttw
    """
    try:
        service = build_default_service()
        result = asyncio.run(service.generate_channel_reports(channel_id))
    except Exception as e:
        click.echo(f"\n❌ Channel report failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(result.to_markdown())

    if not result.success:
        raise click.Abort()


@report_group.command(name="show")
@click.argument('video_id')
def report_show(video_id: str):
    """
    Show the stored report for a video

    Examples:
        adinsight report show dQw4w9WgXcQ
    """
    try:
        row = asyncio.run(InsightStoreService().get_report(video_id))
    except Exception as e:
        click.echo(f"\n❌ Lookup failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    if row is None:
        click.echo(f"❌ Error: No report stored for video '{video_id}'", err=True)
        raise click.Abort()

    click.echo(json.dumps(row, indent=2, default=str))


@report_group.command(name="summary")
@click.option('--channel', '-c', 'channel_id', help='Restrict to one channel (optional)')
def report_summary(channel_id: Optional[str]):
    """
    Summarize stored reports

    Examples:
        adinsight report summary
        adinsight report summary --channel UC_x5XG1OV2P6uZZ5FSM9Ttw
    """
    async def load(store):
        summary = await store.sponsorship_summary(channel_id)
        recent = [] if channel_id else await store.recent_reports()
        return summary, recent

    try:
        summary, recent = asyncio.run(load(InsightStoreService()))
    except Exception as e:
        click.echo(f"\n❌ Summary failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(f"\n{'='*60}")
    click.echo(f"📊 Sponsorship Summary" + (f" ({channel_id})" if channel_id else ""))
    click.echo(f"{'='*60}\n")

    click.echo(f"Reports: {summary['total_reports']}")
    click.echo(f"Sponsored: {summary['sponsored_reports']} ({summary['sponsorship_rate']:.1f}%)")
    click.echo(f"Average effectiveness: {summary['average_effectiveness']:.1f}/100")

    if summary['ad_styles']:
        click.echo(f"\nAd styles:")
        for style, count in sorted(summary['ad_styles'].items()):
            click.echo(f"   {style}: {count}")

    if summary['top_brands']:
        click.echo(f"\nTop brands:")
        for brand in summary['top_brands']:
            click.echo(
                f"   {brand['brand']}: {brand['count']} "
                f"(avg effectiveness {brand['average_effectiveness']:.1f})"
            )

    sentiment = summary['sentiment']
    click.echo(
        f"\nAverage sentiment: {sentiment['average_positive']:.1f}% positive, "
        f"{sentiment['average_negative']:.1f}% negative, "
        f"{sentiment['average_neutral']:.1f}% neutral"
    )

    if recent:
        click.echo(f"\nRecent reports:")
        for row in recent:
            click.echo(f"   {row['video_id']} {row.get('title') or ''}: {row.get('ad_effectiveness') or 0:.1f}/100")

    click.echo(f"\n{'='*60}\n")


@report_group.command(name="status")
@click.argument('channel_id')
def report_status(channel_id: str):
    """
    Show how many of a channel's catalog videos have reports

    Examples:
        adinsight report status UC_x5XG1OV2P6uZZ5FSM9Ttw
    """
    try:
        status = asyncio.run(InsightStoreService().channel_status(channel_id))
    except Exception as e:
        click.echo(f"\n❌ Status failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(f"\n📺 Channel {channel_id}")
    click.echo(f"   Reports: {status['processed_videos']}/{status['total_videos']} ({status['progress']:.1f}%)")
    click.echo(f"   Complete: {'yes' if status['is_complete'] else 'no'}")
    click.echo(f"   Last processed: {status['last_processed'] or 'never'}")


@report_group.command(name="compare")
@click.argument('channel_ids', nargs=-1, required=True)
def report_compare(channel_ids: Tuple[str, ...]):
    """
    Compare ad metrics across two or more channels

    Examples:
        adinsight report compare UC_x5XG1OV2P6uZZ5FSM9Ttw UCBJycsmduvYEL83R_U4JriQ
    """
    if len(channel_ids) < 2:
        raise click.BadParameter("Provide at least two channel IDs", param_hint="CHANNEL_IDS")

    try:
        comparisons = asyncio.run(InsightStoreService().compare_channels(channel_ids))
    except Exception as e:
        click.echo(f"\n❌ Comparison failed: {e}", err=True)
        logger.exception(e)
        raise click.Abort()

    click.echo(f"\n{'='*60}")
    click.echo(f"📊 Channel Comparison")
    click.echo(f"{'='*60}")

    for item in comparisons:
        ad_data = item['ad_data']
        click.echo(f"\n{item['channel_title']} ({item['channel_id']})")
        click.echo(f"   Videos: {item['video_count']}")
        click.echo(f"   Ad frequency: {ad_data['ad_frequency']:.1f}%")
        click.echo(f"   Average effectiveness: {ad_data['average_effectiveness']:.1f}/100")
        click.echo(f"   Top ad style: {ad_data['top_ad_style']}")
        click.echo(f"   Average sentiment: {ad_data['average_sentiment']:.3f}")

    click.echo(f"\n{'='*60}\n")
