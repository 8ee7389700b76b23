"""Reminder engine - decides when to interrupt the user next."""

import asyncio
import copy
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable

from hydronag.db.models import InvalidSettingsError, ReminderSettings
from hydronag.engine.escalation import cap_disruption, get_grace_period, select_message
from hydronag.engine.interfaces import (
    NoSuppression,
    NotificationSink,
    SettingsProvider,
    StatePersistence,
    SuppressionOracle,
)
from hydronag.engine.state import ReminderState
from hydronag.utils.constants import (
    ERROR_RETRY_MINUTES,
    MIN_FIRE_DELAY_MINUTES,
    SUPPRESSED_RETRY_MINUTES,
)
from hydronag.utils.time_utils import is_within_window, next_work_start, now_in
from hydronag.utils.timers import OneShotTimer

logger = logging.getLogger(__name__)


class EngineStatus(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    RUNNING_PAUSED = "running_paused"


class ReminderEngine:
    """Adaptive reminder scheduler for a single user.

    Owns the user's ReminderState and two one-shot timers: the main fire
    timer and the auto-escalation timer armed after each reminder. Every
    command runs its mutate/reschedule/persist sequence under one lock.
    """

    def __init__(
        self,
        settings_provider: SettingsProvider,
        persistence: StatePersistence,
        sink: NotificationSink,
        oracle: SuppressionOracle | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._settings_provider = settings_provider
        self._persistence = persistence
        self._sink = sink
        self._oracle = oracle or NoSuppression()
        self._clock = clock or (lambda: now_in(self._settings.timezone))

        self._settings = ReminderSettings()
        self._state: ReminderState | None = None
        self._lock = asyncio.Lock()

        self.main_timer = OneShotTimer("hydronag-main")
        self.escalation_timer = OneShotTimer("hydronag-escalation")
        self.status = EngineStatus.STOPPED

    @property
    def settings(self) -> ReminderSettings:
        return self._settings

    @property
    def is_running(self) -> bool:
        return self.status != EngineStatus.STOPPED

    @property
    def is_paused(self) -> bool:
        return self._state is not None and self._state.paused

    # Lifecycle

    async def start(self) -> None:
        """Load settings and state, then arm the first reminder."""
        async with self._lock:
            if self.status != EngineStatus.STOPPED:
                logger.warning("Reminder engine is already running")
                return

            self._settings = await self._load_settings()
            state = await self._ensure_state()
            now = self._clock()
            self._roll_over_day(now)

            if state.paused:
                self.status = EngineStatus.RUNNING_PAUSED
            else:
                self.status = EngineStatus.RUNNING
            await self._reschedule(now)
            await self._save()

        logger.info(f"Reminder engine started. Next reminder at {state.next_reminder_at}")

    async def stop(self) -> None:
        """Cancel both timers and persist the state."""
        async with self._lock:
            if self.status == EngineStatus.STOPPED:
                logger.warning("Reminder engine is not running")
                return

            self.main_timer.cancel()
            self.escalation_timer.cancel()
            self.status = EngineStatus.STOPPED
            await self._save()

        logger.info("Reminder engine stopped")

    # Commands

    async def pause(self, duration: timedelta, reason: str = "User request") -> None:
        """Hold reminders back for a while. Cancels a pending auto-escalation."""
        async with self._lock:
            state = await self._ensure_state()
            now = self._clock()
            state.pause(duration, reason, now)

            if self.is_running:
                check_at = state.pause_ends_at
                # Wake at the escalation check that was pending, if sooner
                if self.escalation_timer.pending and self.escalation_timer.due_at:
                    check_at = min(check_at, self.escalation_timer.due_at)
                self.escalation_timer.cancel()
                self._arm_main(check_at, now)
                self.status = EngineStatus.RUNNING_PAUSED

            await self._save()

        logger.info(f"Reminders paused for {duration.total_seconds() / 60:.0f} minutes ({reason})")

    async def resume(self) -> None:
        """End a pause early. Does nothing when reminders are not paused."""
        async with self._lock:
            state = await self._ensure_state()
            if not state.paused:
                logger.debug("Resume requested but reminders are not paused")
                return

            now = self._clock()
            state.resume(now)

            if self.is_running:
                self.status = EngineStatus.RUNNING
                await self._reschedule(now)

            await self._save()

        logger.info("Reminders resumed")

    async def record_intake(self, amount: int) -> None:
        """User drank water: reset escalation and push the next reminder out."""
        async with self._lock:
            state = await self._ensure_state()
            now = self._clock()
            self._roll_over_day(now)

            state.record_intake(amount, now)
            self.escalation_timer.cancel()
            if self.is_running:
                await self._reschedule(now)

            await self._save()

        logger.debug(
            f"Water intake recorded: {amount}ml. Next reminder at {state.next_reminder_at}"
        )

    async def record_dismissed(self) -> None:
        """User dismissed or ignored a reminder: escalate and bring it closer."""
        async with self._lock:
            await self._record_missed()

    async def get_state(self) -> ReminderState:
        """A detached copy of the current state."""
        async with self._lock:
            state = await self._ensure_state()
            return copy.deepcopy(state)

    async def calculate_next_fire_time(self) -> datetime:
        """When the next reminder would fire if rescheduled now."""
        state = await self._ensure_state()
        return await self._next_fire_time(state, self._clock())

    async def update_settings(self, settings: ReminderSettings) -> None:
        """Swap in new settings. Invalid settings leave the old ones in place."""
        try:
            settings.validate()
        except InvalidSettingsError as e:
            logger.warning(f"Rejected settings update: {e}")
            raise

        async with self._lock:
            self._settings = settings
            if self.status == EngineStatus.RUNNING:
                await self._reschedule(self._clock())
                await self._save()

        logger.info(
            f"Reminder settings updated. Work hours {settings.work_hours_start}-"
            f"{settings.work_hours_end}, max disruption {settings.max_disruption_level}"
        )

    # Timer callbacks

    async def handle_timer_fire(self, generation: int | None = None) -> None:
        """Main timer callback: suppress, wait out a pause, or show a reminder.

        generation is the main timer arm this call belongs to; a call whose
        arm was replaced while it waited for the lock does nothing.
        """
        due: tuple[str, int] | None = None

        try:
            async with self._lock:
                if not self.is_running:
                    return
                if generation is not None and not self.main_timer.is_current(generation):
                    logger.debug("Stale reminder timer fire ignored")
                    return

                state = await self._ensure_state()
                now = self._clock()
                self._roll_over_day(now)

                if self._settings.smart_pause_enabled and await self._is_suppressed():
                    self._arm_main(now + timedelta(minutes=SUPPRESSED_RETRY_MINUTES), now)
                    logger.debug("Reminder postponed due to system state")
                    return

                if state.paused:
                    if state.is_pause_expired(now):
                        state.resume(now)
                        self.status = EngineStatus.RUNNING
                        logger.info("Pause expired, reminders resumed")
                    else:
                        self._arm_main(state.pause_ends_at, now)
                        return

                settings = self._settings
                if not is_within_window(now, settings.work_hours_start, settings.work_hours_end):
                    next_start = next_work_start(now, settings.work_hours_start)
                    state.next_reminder_at = next_start
                    self._arm_main(next_start, now)
                    await self._save()
                    logger.debug(f"Reminder postponed until work hours: {next_start}")
                    return

                message = select_message(
                    state.escalation_level, state.minutes_since_last_intake(now)
                )
                level = cap_disruption(state.escalation_level, settings.max_disruption_level)
                state.record_shown(now)

                await self._reschedule(now)
                self.escalation_timer.arm(
                    get_grace_period(state.escalation_level),
                    self.handle_grace_expired,
                    due_at=now + get_grace_period(state.escalation_level),
                )
                await self._save()
                due = (message, level)

        except Exception as e:
            logger.error(f"Error in reminder timer callback: {e}")
            if self.is_running:
                now = self._clock()
                self._arm_main(now + timedelta(minutes=ERROR_RETRY_MINUTES), now)
            return

        if due:
            message, level = due
            await self._notify(message, level)
            logger.info(f"Reminder triggered. Level: {level}, Message: {message}")

    async def handle_grace_expired(self, generation: int | None = None) -> None:
        """No response within the grace period: count the reminder as missed."""
        async with self._lock:
            if not self.is_running or self.is_paused:
                return
            if generation is not None and not self.escalation_timer.is_current(generation):
                return
            logger.debug("No response to reminder, escalating")
            await self._record_missed()

    # Internals (call with the lock held)

    async def _record_missed(self) -> None:
        state = await self._ensure_state()
        now = self._clock()
        self._roll_over_day(now)

        state.record_missed(now)
        self.escalation_timer.cancel()
        if self.is_running:
            await self._reschedule(now)

        await self._save()

        logger.debug(
            f"Reminder missed. Escalation level: {state.escalation_level}, "
            f"Next reminder at {state.next_reminder_at}"
        )

    async def _reschedule(self, now: datetime) -> None:
        """Recompute next_reminder_at and arm the main timer for it."""
        state = self._state
        if state is None:
            return

        if state.paused and state.pause_ends_at is not None:
            state.next_reminder_at = state.pause_ends_at
        else:
            state.next_reminder_at = await self._next_fire_time(state, now)

        self._arm_main(state.next_reminder_at, now)

    async def _next_fire_time(self, state: ReminderState, now: datetime) -> datetime:
        """Escalated interval, weather factor, work hours, then the floor."""
        wait = state.compute_next_fire_time(now) - now

        if self._settings.weather_enabled:
            wait = wait * await self._interval_factor()

        next_fire = now + wait

        settings = self._settings
        if not is_within_window(next_fire, settings.work_hours_start, settings.work_hours_end):
            next_fire = next_work_start(now, settings.work_hours_start)

        floor = now + timedelta(minutes=MIN_FIRE_DELAY_MINUTES)
        if next_fire <= floor:
            next_fire = floor

        return next_fire

    def _arm_main(self, fire_at: datetime, now: datetime) -> None:
        self.main_timer.arm(fire_at - now, self.handle_timer_fire, due_at=fire_at)
        logger.debug(
            f"Next check scheduled for {fire_at} "
            f"(in {(fire_at - now).total_seconds() / 60:.1f} minutes)"
        )

    def _roll_over_day(self, now: datetime) -> None:
        """Reset daily counters when the date changed since the last update."""
        state = self._state
        if state is None:
            return

        last = state.last_updated
        if last.tzinfo is not None and now.tzinfo is not None:
            last = last.astimezone(now.tzinfo)

        if last.date() == now.date():
            return

        if state.today_shown > 0:
            state.update_weekly_adherence(state.today_compliance_rate, now)
        state.reset_daily_counters(now)
        logger.debug("Daily counters reset for new day")

    async def _is_suppressed(self) -> bool:
        try:
            return await self._oracle.should_suppress()
        except Exception as e:
            logger.warning(f"Error checking system state, not suppressing: {e}")
            return False

    async def _interval_factor(self) -> float:
        try:
            factor = await self._oracle.interval_factor()
        except Exception as e:
            logger.warning(f"Error reading interval adjustment, ignoring: {e}")
            return 1.0
        if factor <= 0:
            return 1.0
        return factor

    async def _notify(self, message: str, level: int) -> None:
        try:
            await self._sink.on_reminder_due(message, level)
        except Exception as e:
            logger.error(f"Notification sink failed: {e}")

    async def _ensure_state(self) -> ReminderState:
        if self._state is None:
            self._state = await self._load_state()
        return self._state

    async def _load_state(self) -> ReminderState:
        try:
            state = await self._persistence.load()
        except Exception as e:
            logger.warning(f"Failed to load reminder state, using defaults: {e}")
            state = None

        if state is None:
            state = ReminderState.create_default(
                self._clock(), self._settings.base_interval_minutes
            )
            logger.info("Created default reminder state")
        return state

    async def _load_settings(self) -> ReminderSettings:
        try:
            settings = await self._settings_provider.load()
            settings.validate()
            return settings
        except Exception as e:
            logger.warning(f"Failed to load user settings, using defaults: {e}")
            return ReminderSettings()

    async def _save(self) -> None:
        if self._state is None:
            return
        try:
            await self._persistence.save(self._state)
        except Exception as e:
            logger.error(f"Failed to save reminder state: {e}")
