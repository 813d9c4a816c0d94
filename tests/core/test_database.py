"""
Tests for the Supabase client singleton and the async query helper.
"""

import pytest
from unittest.mock import MagicMock, patch

from adinsight.core import database
from adinsight.core.config import Config
from adinsight.core.exceptions import ExternalServiceError


@pytest.fixture(autouse=True)
def fresh_client():
    database.reset_supabase_client()
    yield
    database.reset_supabase_client()


class TestGetSupabaseClient:

    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(Config, "SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setattr(Config, "SUPABASE_SERVICE_KEY", "key")

        with patch("adinsight.core.database.create_client", return_value=MagicMock()) as mock_create:
            first = database.get_supabase_client()
            second = database.get_supabase_client()

        assert first is second
        mock_create.assert_called_once_with("https://example.supabase.co", "key")

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(Config, "SUPABASE_URL", "")

        with pytest.raises(ValueError, match="SUPABASE_URL"):
            database.get_supabase_client()


class TestRunQuery:

    @pytest.mark.asyncio
    async def test_returns_response(self):
        response = MagicMock(data=[{"video_id": "vid1"}])

        assert await database.run_query("lookup", lambda: response) is response

    @pytest.mark.asyncio
    async def test_wraps_errors(self):
        def failing():
            raise ConnectionError("refused")

        with pytest.raises(ExternalServiceError, match="lookup failed: refused") as exc_info:
            await database.run_query("lookup", failing)

        assert exc_info.value.service == "supabase"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
