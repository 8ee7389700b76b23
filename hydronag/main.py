"""Main entry point for the HydroNag bot."""

import logging
import sys

from telegram.ext import Application, CallbackQueryHandler, CommandHandler

from hydronag.bot.callbacks import callback_router
from hydronag.bot.handlers import (
    dismiss_command,
    drink_command,
    help_command,
    interval_command,
    pause_command,
    resume_command,
    settings_command,
    start_command,
    stats_command,
    status_command,
    workhours_command,
)
from hydronag.bot.notifier import TelegramNotifier
from hydronag.config import Config
from hydronag.db.migrations import run_migrations
from hydronag.db.repository import Repository, SqliteSettingsProvider, SqliteStateStore
from hydronag.engine.scheduler import ReminderEngine
from hydronag.engine.suppression import SmartSuppressionOracle
from hydronag.utils.error_handler import error_handler

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, Config.LOG_LEVEL),
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)


async def post_init(application: Application) -> None:
    """Initialize resources and start the reminder engine."""
    await run_migrations(Config.DATABASE_PATH)

    repo = Repository(Config.DATABASE_PATH)
    await repo.connect()
    application.bot_data["repo"] = repo

    engine: ReminderEngine | None = None

    # Idle/presentation probes are platform specific and not wired here
    oracle = SmartSuppressionOracle(settings=lambda: engine.settings)

    engine = ReminderEngine(
        settings_provider=SqliteSettingsProvider(repo, defaults=Config.default_settings()),
        persistence=SqliteStateStore(repo),
        sink=TelegramNotifier(application.bot, Config.TELEGRAM_CHAT_ID),
        oracle=oracle,
    )
    application.bot_data["engine"] = engine

    await engine.start()

    logger.info("HydroNag initialized successfully")


async def post_shutdown(application: Application) -> None:
    """Stop the engine and close the database."""
    engine: ReminderEngine | None = application.bot_data.get("engine")
    if engine:
        await engine.stop()

    repo: Repository | None = application.bot_data.get("repo")
    if repo:
        await repo.close()

    logger.info("HydroNag shut down")


def main() -> None:
    """Start the bot."""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    application = (
        Application.builder()
        .token(Config.TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    # Commands
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("drink", drink_command))
    application.add_handler(CommandHandler("dismiss", dismiss_command))
    application.add_handler(CommandHandler("pause", pause_command))
    application.add_handler(CommandHandler("resume", resume_command))
    application.add_handler(CommandHandler("status", status_command))
    application.add_handler(CommandHandler("stats", stats_command))

    # Settings commands
    application.add_handler(CommandHandler("settings", settings_command))
    application.add_handler(CommandHandler("interval", interval_command))
    application.add_handler(CommandHandler("workhours", workhours_command))

    # Callback queries (buttons)
    application.add_handler(CallbackQueryHandler(callback_router))

    # Error handler
    application.add_error_handler(error_handler)

    logger.info("Starting HydroNag bot...")
    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()
