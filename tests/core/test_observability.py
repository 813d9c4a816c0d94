"""
Tests for logging and Logfire setup.
"""

import logging

import pytest
from unittest.mock import MagicMock, patch

from adinsight.core import observability


@pytest.fixture(autouse=True)
def clean_handler():
    observability.teardown_logfire()
    yield
    observability.teardown_logfire()


class TestSetupLogfire:

    def test_skipped_without_token(self, monkeypatch):
        monkeypatch.delenv("LOGFIRE_TOKEN", raising=False)

        with patch("adinsight.core.observability.logfire") as mock_logfire:
            assert observability.setup_logfire() is False

        mock_logfire.configure.assert_not_called()

    def test_configures_and_attaches_handler(self, monkeypatch):
        monkeypatch.setenv("LOGFIRE_TOKEN", "token")
        handler = logging.NullHandler()

        with patch("adinsight.core.observability.logfire") as mock_logfire:
            mock_logfire.LogfireLoggingHandler.return_value = handler
            assert observability.setup_logfire(environment="test") is True
            assert observability.setup_logfire() is True

        mock_logfire.configure.assert_called_once()
        assert mock_logfire.configure.call_args.kwargs["environment"] == "test"
        mock_logfire.instrument_pydantic.assert_called_once()
        assert handler in logging.getLogger().handlers

    def test_configuration_failure(self, monkeypatch):
        monkeypatch.setenv("LOGFIRE_TOKEN", "token")

        with patch("adinsight.core.observability.logfire") as mock_logfire:
            mock_logfire.configure.side_effect = RuntimeError("bad token")
            assert observability.setup_logfire() is False

        mock_logfire.LogfireLoggingHandler.assert_not_called()


class TestSetupLogging:

    def test_level_from_argument(self):
        with patch("adinsight.core.observability.logging.basicConfig") as mock_basic:
            observability.setup_logging("debug")

        assert mock_basic.call_args.kwargs["level"] == logging.DEBUG
        assert mock_basic.call_args.kwargs["format"] == observability.LOG_FORMAT
