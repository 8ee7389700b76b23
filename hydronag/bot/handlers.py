"""Command handlers."""

import logging
from dataclasses import replace
from datetime import timedelta

from telegram import Update
from telegram.ext import ContextTypes

from hydronag.bot.formatters import (
    format_help_message,
    format_settings,
    format_status,
    format_welcome_message,
)
from hydronag.bot.keyboards import paused_keyboard
from hydronag.bot.stats import format_stats_message, get_daily_stats
from hydronag.config import Config
from hydronag.db.models import IntakeEvent, InvalidSettingsError, ReminderSettings
from hydronag.db.repository import Repository
from hydronag.engine.scheduler import ReminderEngine
from hydronag.utils.constants import MAX_INTAKE_ML
from hydronag.utils.time_utils import format_duration, now_in

logger = logging.getLogger(__name__)


def is_owner(update: Update) -> bool:
    """Only the configured chat may drive the engine."""
    return update.effective_chat is not None and update.effective_chat.id == Config.TELEGRAM_CHAT_ID


async def log_drink(
    context: ContextTypes.DEFAULT_TYPE, amount: int, source: str = "manual"
) -> ReminderEngine | None:
    """Tell the engine about the drink, then add it to the intake log.

    Returns None without recording anything when the amount is out of range.
    """
    repo: Repository = context.bot_data["repo"]
    engine: ReminderEngine = context.bot_data["engine"]

    event = IntakeEvent(
        amount_ml=amount,
        timestamp=now_in(engine.settings.timezone),
        source=source,
    )
    if not event.is_valid():
        return None

    await engine.record_intake(amount)
    await repo.log_intake(event)
    return engine


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command."""
    if not update.message:
        return

    if not is_owner(update):
        await update.message.reply_text("Sorry, this bot is private.")
        return

    await update.message.reply_html(format_welcome_message())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    if not update.message or not is_owner(update):
        return

    await update.message.reply_html(format_help_message())


async def drink_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /drink [ml] command."""
    if not update.message or not is_owner(update):
        return

    amount = Config.DEFAULT_INTAKE_ML
    if context.args:
        try:
            amount = int(context.args[0].lower().removesuffix("ml"))
        except ValueError:
            await update.message.reply_text("Invalid amount. Usage: /drink 250")
            return

    engine = await log_drink(context, amount)
    if engine is None:
        await update.message.reply_text(f"Amount must be between 1 and {MAX_INTAKE_ML}ml.")
        return

    state = await engine.get_state()

    await update.message.reply_html(
        f"✓ Logged <b>{amount}ml</b>\n\n"
        f"Next reminder at {state.next_reminder_at.strftime('%H:%M')}"
    )


async def dismiss_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dismiss command."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]
    await engine.record_dismissed()
    state = await engine.get_state()

    await update.message.reply_html(
        f"Reminder dismissed. Next one at {state.next_reminder_at.strftime('%H:%M')}"
    )


async def pause_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /pause [minutes] command."""
    if not update.message or not is_owner(update):
        return

    minutes = Config.DEFAULT_PAUSE_MINUTES
    if context.args:
        try:
            minutes = int(context.args[0])
        except ValueError:
            await update.message.reply_text("Invalid duration. Usage: /pause 60")
            return

    if minutes <= 0:
        await update.message.reply_text("Duration must be a positive number of minutes.")
        return

    engine: ReminderEngine = context.bot_data["engine"]
    await engine.pause(timedelta(minutes=minutes))

    await update.message.reply_html(
        f"⏸ Reminders paused for <b>{format_duration(minutes)}</b>",
        reply_markup=paused_keyboard(),
    )


async def resume_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /resume command."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]
    await engine.resume()
    state = await engine.get_state()

    await update.message.reply_html(
        f"▶ Reminders resumed. Next one at {state.next_reminder_at.strftime('%H:%M')}"
    )


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /status command."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]
    state = await engine.get_state()

    await update.message.reply_html(
        format_status(state, engine.settings, now_in(engine.settings.timezone))
    )


async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stats command - today's hydration summary."""
    if not update.message or not is_owner(update):
        return

    repo: Repository = context.bot_data["repo"]
    engine: ReminderEngine = context.bot_data["engine"]

    state = await engine.get_state()
    today = now_in(engine.settings.timezone).date()
    stats = await get_daily_stats(repo, state, engine.settings, today)

    await update.message.reply_html(format_stats_message(stats))


async def settings_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /settings command - show current settings."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]
    await update.message.reply_html(format_settings(engine.settings))


async def interval_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /interval <minutes> command."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]

    if not context.args:
        await update.message.reply_html(
            f"<b>Current base interval:</b> {engine.settings.base_interval_minutes} minutes\n\n"
            "To change: <code>/interval 45</code>"
        )
        return

    try:
        minutes = int(context.args[0])
    except ValueError:
        await update.message.reply_text("Invalid interval. Must be a number of minutes.")
        return

    await _apply_settings(update, context, replace(engine.settings, base_interval_minutes=minutes))


async def workhours_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /workhours <start> <end> command."""
    if not update.message or not is_owner(update):
        return

    engine: ReminderEngine = context.bot_data["engine"]

    if not context.args or len(context.args) < 2:
        await update.message.reply_html(
            f"<b>Current work hours:</b> {engine.settings.work_hours_start} - "
            f"{engine.settings.work_hours_end}\n\n"
            "To change: <code>/workhours 09:00 17:00</code>"
        )
        return

    new_settings = replace(
        engine.settings, work_hours_start=context.args[0], work_hours_end=context.args[1]
    )
    await _apply_settings(update, context, new_settings)


async def _apply_settings(
    update: Update, context: ContextTypes.DEFAULT_TYPE, settings: ReminderSettings
) -> None:
    """Validate via the engine, then persist."""
    repo: Repository = context.bot_data["repo"]
    engine: ReminderEngine = context.bot_data["engine"]

    try:
        await engine.update_settings(settings)
    except InvalidSettingsError as e:
        await update.message.reply_text(f"❌ {e}")
        return

    await repo.save_settings(settings)
    await update.message.reply_html("✓ Settings updated\n\n" + format_settings(settings))
