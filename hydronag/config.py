"""Configuration management from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from hydronag.db.models import ReminderSettings

load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: int = int(os.getenv("TELEGRAM_CHAT_ID", "0"))

    # Database
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "./data/hydronag.db"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Defaults used until the user changes them
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")
    BASE_INTERVAL_MINUTES: int = int(os.getenv("BASE_INTERVAL_MINUTES", "60"))
    WORK_HOURS_START: str = os.getenv("WORK_HOURS_START", "09:00")
    WORK_HOURS_END: str = os.getenv("WORK_HOURS_END", "17:00")

    # Bot shortcuts
    DEFAULT_INTAKE_ML: int = int(os.getenv("DEFAULT_INTAKE_ML", "250"))
    DEFAULT_PAUSE_MINUTES: int = int(os.getenv("DEFAULT_PAUSE_MINUTES", "60"))

    @classmethod
    def default_settings(cls) -> ReminderSettings:
        """Settings seeded from the environment."""
        return ReminderSettings(
            base_interval_minutes=cls.BASE_INTERVAL_MINUTES,
            work_hours_start=cls.WORK_HOURS_START,
            work_hours_end=cls.WORK_HOURS_END,
            timezone=cls.TIMEZONE,
        )

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        if not cls.TELEGRAM_BOT_TOKEN:
            raise ValueError("TELEGRAM_BOT_TOKEN environment variable is required")

        if not cls.TELEGRAM_CHAT_ID:
            raise ValueError("TELEGRAM_CHAT_ID environment variable is required")

        # Raises InvalidSettingsError (a ValueError) on bad defaults
        cls.default_settings().validate()

        # Ensure database directory exists
        cls.DATABASE_PATH.parent.mkdir(parents=True, exist_ok=True)
