"""Data models."""

from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from hydronag.utils.constants import (
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_TIMEZONE,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
    MAX_BASE_INTERVAL_MINUTES,
    MAX_BODY_WEIGHT_KG,
    MAX_DAILY_GOAL_ML,
    MAX_ESCALATION_LEVEL,
    MAX_INTAKE_ML,
    MIN_BASE_INTERVAL_MINUTES,
    MIN_BODY_WEIGHT_KG,
    MIN_DAILY_GOAL_ML,
    MIN_ESCALATION_LEVEL,
    ML_PER_KG,
)
from hydronag.utils.time_utils import parse_hhmm


class InvalidSettingsError(ValueError):
    """Raised when reminder settings fail validation."""


@dataclass
class ReminderSettings:
    """User preferences that drive the scheduler."""

    base_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    work_hours_start: str = DEFAULT_WORK_START  # HH:MM format
    work_hours_end: str = DEFAULT_WORK_END  # HH:MM format
    max_disruption_level: int = 3  # 1=toast ... 4=full screen
    smart_pause_enabled: bool = True
    circadian_enabled: bool = True
    weather_enabled: bool = False
    body_weight_kg: float = 70.0
    custom_daily_goal_ml: int | None = None
    timezone: str = DEFAULT_TIMEZONE

    @property
    def effective_daily_goal_ml(self) -> int:
        """Custom goal if set, otherwise 33 ml per kg of body weight."""
        if self.custom_daily_goal_ml is not None:
            return self.custom_daily_goal_ml
        return int(self.body_weight_kg * ML_PER_KG)

    def validate(self) -> None:
        """Raise InvalidSettingsError describing the first invalid field."""
        if not MIN_BASE_INTERVAL_MINUTES <= self.base_interval_minutes <= MAX_BASE_INTERVAL_MINUTES:
            raise InvalidSettingsError(
                f"Reminder interval must be between {MIN_BASE_INTERVAL_MINUTES} "
                f"and {MAX_BASE_INTERVAL_MINUTES} minutes"
            )

        if not MIN_ESCALATION_LEVEL <= self.max_disruption_level <= MAX_ESCALATION_LEVEL:
            raise InvalidSettingsError(
                f"Disruption level must be between {MIN_ESCALATION_LEVEL} and {MAX_ESCALATION_LEVEL}"
            )

        if not MIN_BODY_WEIGHT_KG <= self.body_weight_kg <= MAX_BODY_WEIGHT_KG:
            raise InvalidSettingsError(
                f"Body weight must be between {MIN_BODY_WEIGHT_KG}kg and {MAX_BODY_WEIGHT_KG}kg"
            )

        if self.custom_daily_goal_ml is not None and not (
            MIN_DAILY_GOAL_ML <= self.custom_daily_goal_ml <= MAX_DAILY_GOAL_ML
        ):
            raise InvalidSettingsError(
                f"Daily goal must be between {MIN_DAILY_GOAL_ML}ml and {MAX_DAILY_GOAL_ML}ml"
            )

        for label, value in (("start", self.work_hours_start), ("end", self.work_hours_end)):
            try:
                parse_hhmm(value)
            except (TypeError, ValueError):
                raise InvalidSettingsError(f"Invalid work hours {label}: {value!r} (use HH:MM)")

        if self.work_hours_start == self.work_hours_end:
            raise InvalidSettingsError("Work hours start and end must differ")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise InvalidSettingsError(f"Unknown timezone: {self.timezone}")


@dataclass
class IntakeEvent:
    """A single logged drink."""

    amount_ml: int
    timestamp: datetime
    source: str = "manual"  # manual, reminder_200ml, reminder_300ml, ...
    notes: str | None = None
    id: int | None = None

    def is_valid(self) -> bool:
        return 0 < self.amount_ml <= MAX_INTAKE_ML and bool(self.source.strip())
