"""Tests for user-facing error messages."""

import sqlite3

from telegram.error import BadRequest, NetworkError, TimedOut

from hydronag.db.models import InvalidSettingsError
from hydronag.utils.error_handler import DEFAULT_ERROR_MESSAGE, user_message_for


def test_settings_errors_are_shown_verbatim():
    message = user_message_for(InvalidSettingsError("Work hours start and end must differ"))
    assert message == "❌ Work hours start and end must differ"


def test_telegram_errors():
    """Timeouts get their own message even though they are network errors."""
    assert "timed out" in user_message_for(TimedOut())
    assert "Network error" in user_message_for(NetworkError("connection reset"))
    assert "rejected" in user_message_for(BadRequest("message is not modified"))


def test_database_errors():
    assert "hydration log" in user_message_for(sqlite3.OperationalError("database is locked"))


def test_unknown_errors():
    assert user_message_for(RuntimeError("boom")) == DEFAULT_ERROR_MESSAGE
    assert user_message_for(None) == DEFAULT_ERROR_MESSAGE
