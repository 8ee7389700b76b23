"""Callback query handlers for inline buttons."""

import logging
from datetime import timedelta

from telegram import Update
from telegram.ext import ContextTypes

from hydronag.bot.handlers import is_owner, log_drink
from hydronag.bot.keyboards import paused_keyboard
from hydronag.engine.scheduler import ReminderEngine
from hydronag.utils.time_utils import format_duration

logger = logging.getLogger(__name__)


async def handle_drink_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE, amount: int
) -> None:
    """Handle a '💧 NNNml' button press."""
    query = update.callback_query

    engine = await log_drink(context, amount, source=f"reminder_{amount}ml")
    if engine is None:
        await query.answer("Invalid amount")
        return

    state = await engine.get_state()

    if query.message:
        await query.message.edit_text(
            f"✓ <b>Logged {amount}ml</b>\n\n"
            f"Next reminder at {state.next_reminder_at.strftime('%H:%M')}",
            parse_mode="HTML",
        )
    await query.answer(f"💧 {amount}ml logged")


async def handle_dismiss_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle 'Dismiss' button press."""
    query = update.callback_query
    engine: ReminderEngine = context.bot_data["engine"]

    await engine.record_dismissed()

    if query.message:
        await query.message.edit_text("✗ Reminder dismissed.")
    await query.answer("Dismissed")


async def handle_pause_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE, minutes: int
) -> None:
    """Handle 'Pause' button press."""
    query = update.callback_query
    engine: ReminderEngine = context.bot_data["engine"]

    await engine.pause(timedelta(minutes=minutes))

    if query.message:
        await query.message.edit_text(
            f"⏸ Reminders paused for {format_duration(minutes)}",
            reply_markup=paused_keyboard(),
        )
    await query.answer("Paused")


async def handle_resume_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle 'Resume now' button press."""
    query = update.callback_query
    engine: ReminderEngine = context.bot_data["engine"]

    await engine.resume()

    if query.message:
        await query.message.edit_text("▶ Reminders resumed.")
    await query.answer("Resumed")


async def callback_router(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Route callback queries to appropriate handlers."""
    if not update.callback_query:
        return

    query = update.callback_query
    data = query.data

    if not data:
        return

    if not is_owner(update):
        await query.answer("Sorry, this bot is private.")
        return

    # Parse callback data
    parts = data.split(":")

    if parts[0] == "drink":
        await handle_drink_callback(update, context, int(parts[1]))

    elif parts[0] == "dismiss":
        await handle_dismiss_callback(update, context)

    elif parts[0] == "pause":
        await handle_pause_callback(update, context, int(parts[1]))

    elif parts[0] == "resume":
        await handle_resume_callback(update, context)

    else:
        await query.answer("Unknown action")
