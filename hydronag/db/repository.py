"""Database repository - all SQL queries."""

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List

import aiosqlite

from hydronag.db.models import IntakeEvent, ReminderSettings
from hydronag.engine.state import ReminderState

logger = logging.getLogger(__name__)


class Repository:
    """Database access layer."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open database connection."""
        self._db = await aiosqlite.connect(self.db_path)
        self._db.row_factory = aiosqlite.Row
        logger.info(f"Connected to database at {self.db_path}")

    async def close(self) -> None:
        """Close database connection."""
        if self._db:
            await self._db.close()
            self._db = None
            logger.info("Database connection closed")

    @property
    def db(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if self._db is None:
            raise RuntimeError("Database not connected")
        return self._db

    # Reminder state

    async def get_state(self) -> ReminderState | None:
        """Load the persisted reminder state, if any."""
        async with self.db.execute("SELECT * FROM reminder_state WHERE id = 1") as cursor:
            row = await cursor.fetchone()
            if row:
                return self._row_to_state(row)
            return None

    async def save_state(self, state: ReminderState) -> None:
        """Insert or replace the single reminder state row."""
        await self.db.execute(
            """
            INSERT OR REPLACE INTO reminder_state (
                id, last_intake_at, next_reminder_at, last_updated,
                escalation_level, consecutive_missed, consecutive_complied,
                current_interval_minutes, paused, paused_at, pause_seconds,
                pause_reason, today_shown, today_complied, weekly_adherence
            ) VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                state.last_intake_at.isoformat(),
                state.next_reminder_at.isoformat(),
                state.last_updated.isoformat(),
                state.escalation_level,
                state.consecutive_missed,
                state.consecutive_complied,
                state.current_interval_minutes,
                1 if state.paused else 0,
                state.paused_at.isoformat() if state.paused_at else None,
                state.pause_duration.total_seconds() if state.pause_duration else None,
                state.pause_reason,
                state.today_shown,
                state.today_complied,
                state.weekly_adherence,
            ),
        )
        await self.db.commit()

    # Settings

    async def get_settings(self) -> ReminderSettings | None:
        """Load stored settings, if any."""
        async with self.db.execute("SELECT * FROM settings WHERE id = 1") as cursor:
            row = await cursor.fetchone()
            if row:
                return ReminderSettings(
                    base_interval_minutes=row["base_interval_minutes"],
                    work_hours_start=row["work_hours_start"],
                    work_hours_end=row["work_hours_end"],
                    max_disruption_level=row["max_disruption_level"],
                    smart_pause_enabled=bool(row["smart_pause_enabled"]),
                    circadian_enabled=bool(row["circadian_enabled"]),
                    weather_enabled=bool(row["weather_enabled"]),
                    body_weight_kg=row["body_weight_kg"],
                    custom_daily_goal_ml=row["custom_daily_goal_ml"],
                    timezone=row["timezone"],
                )
            return None

    async def save_settings(self, settings: ReminderSettings) -> None:
        """Insert or replace the single settings row."""
        await self.db.execute(
            """
            INSERT OR REPLACE INTO settings (
                id, base_interval_minutes, work_hours_start, work_hours_end,
                max_disruption_level, smart_pause_enabled, circadian_enabled,
                weather_enabled, body_weight_kg, custom_daily_goal_ml, timezone
            ) VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                settings.base_interval_minutes,
                settings.work_hours_start,
                settings.work_hours_end,
                settings.max_disruption_level,
                1 if settings.smart_pause_enabled else 0,
                1 if settings.circadian_enabled else 0,
                1 if settings.weather_enabled else 0,
                settings.body_weight_kg,
                settings.custom_daily_goal_ml,
                settings.timezone,
            ),
        )
        await self.db.commit()
        logger.info("Settings saved")

    # Intake log

    async def log_intake(self, event: IntakeEvent) -> IntakeEvent:
        """Record a drink."""
        async with self.db.execute(
            """
            INSERT INTO intake_log (amount_ml, logged_at, day, source, notes)
            VALUES (?, ?, ?, ?, ?)
            RETURNING *
            """,
            (
                event.amount_ml,
                event.timestamp.isoformat(),
                event.timestamp.date().isoformat(),
                event.source,
                event.notes,
            ),
        ) as cursor:
            row = await cursor.fetchone()
            await self.db.commit()
            return self._row_to_intake(row)

    async def get_intake_for_day(self, day: date) -> List[IntakeEvent]:
        """All drinks logged on a (local) calendar day, oldest first."""
        async with self.db.execute(
            "SELECT * FROM intake_log WHERE day = ? ORDER BY logged_at",
            (day.isoformat(),),
        ) as cursor:
            rows = await cursor.fetchall()
            return [self._row_to_intake(row) for row in rows]

    # Helpers

    @staticmethod
    def _row_to_state(row: aiosqlite.Row) -> ReminderState:
        return ReminderState(
            last_intake_at=datetime.fromisoformat(row["last_intake_at"]),
            next_reminder_at=datetime.fromisoformat(row["next_reminder_at"]),
            last_updated=datetime.fromisoformat(row["last_updated"]),
            escalation_level=row["escalation_level"],
            consecutive_missed=row["consecutive_missed"],
            consecutive_complied=row["consecutive_complied"],
            current_interval_minutes=row["current_interval_minutes"],
            paused=bool(row["paused"]),
            paused_at=datetime.fromisoformat(row["paused_at"]) if row["paused_at"] else None,
            pause_duration=(
                timedelta(seconds=row["pause_seconds"])
                if row["pause_seconds"] is not None
                else None
            ),
            pause_reason=row["pause_reason"],
            today_shown=row["today_shown"],
            today_complied=row["today_complied"],
            weekly_adherence=row["weekly_adherence"],
        )

    @staticmethod
    def _row_to_intake(row: aiosqlite.Row) -> IntakeEvent:
        return IntakeEvent(
            id=row["id"],
            amount_ml=row["amount_ml"],
            timestamp=datetime.fromisoformat(row["logged_at"]),
            source=row["source"],
            notes=row["notes"],
        )


class SqliteStateStore:
    """StatePersistence backed by the repository."""

    def __init__(self, repo: Repository):
        self.repo = repo

    async def save(self, state: ReminderState) -> None:
        await self.repo.save_state(state)

    async def load(self) -> ReminderState | None:
        return await self.repo.get_state()


class SqliteSettingsProvider:
    """SettingsProvider backed by the repository, with fallback defaults."""

    def __init__(self, repo: Repository, defaults: ReminderSettings | None = None):
        self.repo = repo
        self.defaults = defaults or ReminderSettings()

    async def load(self) -> ReminderSettings:
        settings = await self.repo.get_settings()
        if settings is None:
            return self.defaults
        return settings
