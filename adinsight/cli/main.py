"""
Main CLI entry point for AdInsight
"""

import click

from .. import __version__
from ..core.observability import setup_logging, setup_logfire
from .report import report_group
from .videos import videos_group


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None, help='Log level (default: LOG_LEVEL env var or INFO)')
def cli(log_level):
    """
    AdInsight - YouTube advertising intelligence

    Detect sponsorships, measure engagement and comment sentiment, and
    generate AI ad insight reports for YouTube videos and channels.
    """
    setup_logging(log_level)
    setup_logfire()


# Register command groups
cli.add_command(report_group)
cli.add_command(videos_group)


if __name__ == '__main__':
    cli()
