"""Telegram notification sink for due reminders."""

import logging

from telegram import Bot
from telegram.error import TelegramError

from hydronag.bot.formatters import format_reminder_message
from hydronag.bot.keyboards import reminder_keyboard

logger = logging.getLogger(__name__)


class TelegramNotifier:
    """Sends each due reminder to the owner's chat."""

    def __init__(self, bot: Bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id

    async def on_reminder_due(self, message: str, escalation_level: int) -> None:
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=format_reminder_message(message, escalation_level),
                parse_mode="HTML",
                reply_markup=reminder_keyboard(),
            )
        except TelegramError as e:
            # The engine already counted the reminder; the next one will retry delivery
            logger.error(f"Failed to send reminder to chat {self.chat_id}: {e}")
