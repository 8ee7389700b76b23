"""Global error handler for the bot."""

import logging
import sqlite3

from telegram import Update
from telegram.error import BadRequest, NetworkError, TimedOut
from telegram.ext import ContextTypes

from hydronag.db.models import InvalidSettingsError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = (
    "😅 Oops! Something went wrong.\n\n"
    "Your reminders keep running. Please try again or use /help."
)


def user_message_for(error: BaseException | None) -> str:
    """Pick the reply shown to the user for a handler exception."""
    if isinstance(error, InvalidSettingsError):
        return f"❌ {error}"
    # TimedOut and BadRequest both subclass NetworkError
    if isinstance(error, TimedOut):
        return "⏱️ Telegram timed out.\n\nPlease try again in a moment."
    if isinstance(error, BadRequest):
        return "❌ Telegram rejected that request. Use /help for command syntax."
    if isinstance(error, NetworkError):
        return "🌐 Network error.\n\nPlease check your connection and try again."
    if isinstance(error, sqlite3.Error):
        return (
            "💾 Couldn't write to the hydration log.\n\n"
            "The reminder schedule was still updated."
        )
    return DEFAULT_ERROR_MESSAGE


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log handler exceptions and tell the owner what happened."""
    logger.error("Exception while handling an update:", exc_info=context.error)

    if not isinstance(update, Update) or not update.effective_message:
        return

    try:
        await update.effective_message.reply_text(user_message_for(context.error))
    except Exception as e:
        logger.error(f"Failed to send error message to user: {e}")
