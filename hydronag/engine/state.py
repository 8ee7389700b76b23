"""Reminder state and its transitions."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from hydronag.engine.escalation import get_interval_factor
from hydronag.utils.constants import (
    ADHERENCE_HISTORY_WEIGHT,
    ADHERENCE_RECENT_WEIGHT,
    COMPLIANCE_REWARD_MINUTES,
    COMPLIANCE_REWARD_STREAK,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_WEEKLY_ADHERENCE,
    MAX_ESCALATION_LEVEL,
    MAX_INTERVAL_MINUTES,
    MIN_ESCALATION_LEVEL,
    MIN_INTERVAL_MINUTES,
    MISSED_ESCALATION_STREAK,
    MISSED_PENALTY_MINUTES,
)


def clamp_interval(minutes: int) -> int:
    """Clamp an interval to the adaptive bounds."""
    return max(MIN_INTERVAL_MINUTES, min(MAX_INTERVAL_MINUTES, minutes))


@dataclass
class ReminderState:
    """Escalation, adherence and pause state for one user.

    Only the scheduler mutates this, and only through the methods below.
    Every mutating method that affects timing recomputes next_reminder_at.
    """

    last_intake_at: datetime
    next_reminder_at: datetime
    last_updated: datetime
    escalation_level: int = 1
    consecutive_missed: int = 0
    consecutive_complied: int = 0
    current_interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    paused: bool = False
    paused_at: datetime | None = None
    pause_duration: timedelta | None = None
    pause_reason: str | None = None
    today_shown: int = 0
    today_complied: int = 0
    weekly_adherence: float = DEFAULT_WEEKLY_ADHERENCE

    @classmethod
    def create_default(
        cls, now: datetime, interval_minutes: int = DEFAULT_INTERVAL_MINUTES
    ) -> "ReminderState":
        """Fresh state: last intake assumed one hour ago, level 1."""
        state = cls(
            last_intake_at=now - timedelta(hours=1),
            next_reminder_at=now,
            last_updated=now,
            current_interval_minutes=clamp_interval(interval_minutes),
        )
        state.next_reminder_at = state.compute_next_fire_time(now)
        return state

    # Derived values

    def minutes_since_last_intake(self, now: datetime) -> float:
        return (now - self.last_intake_at).total_seconds() / 60

    @property
    def today_compliance_rate(self) -> float:
        """Reminders complied / reminders shown today, capped at 1.0 (1.0 when none shown)."""
        if self.today_shown == 0:
            return 1.0
        return min(1.0, self.today_complied / self.today_shown)

    @property
    def pause_ends_at(self) -> datetime | None:
        if not self.paused or self.paused_at is None or self.pause_duration is None:
            return None
        return self.paused_at + self.pause_duration

    def is_pause_expired(self, now: datetime) -> bool:
        ends_at = self.pause_ends_at
        if ends_at is None:
            return False
        return now >= ends_at

    def needs_attention(self, now: datetime) -> bool:
        """Overdue, or escalated enough to be worth surfacing."""
        return (
            now >= self.next_reminder_at
            or self.escalation_level >= 3
            or self.consecutive_missed >= 2
        )

    def compute_next_fire_time(self, now: datetime) -> datetime:
        """Adaptive interval shortened by the escalation factor, from now."""
        factor = get_interval_factor(self.escalation_level)
        return now + timedelta(minutes=self.current_interval_minutes * factor)

    # Transitions

    def record_intake(self, amount: int, now: datetime) -> None:
        """User drank: reset escalation, extend the interval on a streak."""
        self.last_intake_at = now
        self.escalation_level = MIN_ESCALATION_LEVEL
        self.consecutive_missed = 0
        self.consecutive_complied += 1
        self.today_complied += 1

        if self.consecutive_complied >= COMPLIANCE_REWARD_STREAK:
            self.current_interval_minutes = clamp_interval(
                self.current_interval_minutes + COMPLIANCE_REWARD_MINUTES
            )

        self.next_reminder_at = self.compute_next_fire_time(now)
        self.last_updated = now

    def record_missed(self, now: datetime) -> None:
        """Reminder ignored or dismissed: escalate and shorten together."""
        self.consecutive_missed += 1
        self.consecutive_complied = 0
        self.today_shown += 1

        if self.consecutive_missed >= MISSED_ESCALATION_STREAK:
            self.escalation_level = min(self.escalation_level + 1, MAX_ESCALATION_LEVEL)
            self.current_interval_minutes = clamp_interval(
                self.current_interval_minutes - MISSED_PENALTY_MINUTES
            )

        self.next_reminder_at = self.compute_next_fire_time(now)
        self.last_updated = now

    def record_shown(self, now: datetime) -> None:
        self.today_shown += 1
        self.last_updated = now

    def pause(self, duration: timedelta, reason: str, now: datetime) -> None:
        self.paused = True
        self.paused_at = now
        self.pause_duration = duration
        self.pause_reason = reason
        self.next_reminder_at = now + duration
        self.last_updated = now

    def resume(self, now: datetime) -> None:
        self.paused = False
        self.paused_at = None
        self.pause_duration = None
        self.pause_reason = None
        self.next_reminder_at = self.compute_next_fire_time(now)
        self.last_updated = now

    def update_weekly_adherence(self, recent_compliance_rate: float, now: datetime) -> None:
        """Fold a day's compliance into the moving average."""
        rate = (
            self.weekly_adherence * ADHERENCE_HISTORY_WEIGHT
            + recent_compliance_rate * ADHERENCE_RECENT_WEIGHT
        )
        self.weekly_adherence = max(0.0, min(1.0, rate))
        self.last_updated = now

    def reset_daily_counters(self, now: datetime) -> None:
        self.today_shown = 0
        self.today_complied = 0
        self.last_updated = now
