"""
Supabase client, table names and the async query helper
"""

import asyncio
import logging
from typing import Any, Callable, Optional

from supabase import create_client, Client

from .config import Config
from .exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

AD_INSIGHTS_TABLE = "ad_insights"
VIDEOS_TABLE = "videos"
COMMENTS_TABLE = "comments"

_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get or create the shared Supabase client.

    Raises:
        ValueError: If Supabase credentials are not configured
    """
    global _supabase_client

    if _supabase_client is None:
        Config.validate()
        _supabase_client = create_client(
            Config.SUPABASE_URL,
            Config.SUPABASE_SERVICE_KEY
        )
        logger.debug("Supabase client created")

    return _supabase_client


def reset_supabase_client():
    """Drop the shared client so the next call rebuilds it (tests, key rotation)"""
    global _supabase_client
    _supabase_client = None


async def run_query(description: str, query: Callable[[], Any]) -> Any:
    """
    Run a blocking Supabase query in the default executor.

    Args:
        description: Short label used in logs and errors, e.g. "report upsert"
        query: Zero-argument callable that builds and executes the query

    Returns:
        The query response

    Raises:
        ExternalServiceError: If the query fails for any reason
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, query)
    except Exception as e:
        logger.error(f"Supabase {description} failed: {e}")
        raise ExternalServiceError("supabase", f"{description} failed: {e}") from e
