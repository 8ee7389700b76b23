"""Collaborators the scheduler talks to. Implemented by the surrounding app."""

from typing import Protocol

from hydronag.db.models import ReminderSettings
from hydronag.engine.state import ReminderState


class SettingsProvider(Protocol):
    async def load(self) -> ReminderSettings: ...


class StatePersistence(Protocol):
    async def save(self, state: ReminderState) -> None: ...

    async def load(self) -> ReminderState | None: ...


class SuppressionOracle(Protocol):
    """Aggregated idle/focus/circadian/weather signals. Opaque to the engine."""

    async def should_suppress(self) -> bool: ...

    async def interval_factor(self) -> float:
        """Multiplier on the wait before the next reminder (1.0 = unchanged)."""
        ...


class NotificationSink(Protocol):
    """Receives a signal each time a reminder is due."""

    async def on_reminder_due(self, message: str, escalation_level: int) -> None: ...


class NoSuppression:
    """Oracle that never suppresses and never adjusts the interval."""

    async def should_suppress(self) -> bool:
        return False

    async def interval_factor(self) -> float:
        return 1.0
