"""Shared fakes for engine tests."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio

from hydronag.db.models import ReminderSettings
from hydronag.engine.scheduler import ReminderEngine

UTC = ZoneInfo("UTC")


class FakeClock:
    """Settable clock."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeSettingsProvider:
    def __init__(self, settings: ReminderSettings | None = None):
        self.settings = settings or ReminderSettings()

    async def load(self) -> ReminderSettings:
        return self.settings


class FakePersistence:
    def __init__(self, state=None, fail_saves: bool = False):
        self.state = state
        self.saves = 0
        self.fail_saves = fail_saves

    async def save(self, state) -> None:
        if self.fail_saves:
            raise OSError("disk full")
        self.saves += 1
        self.state = state

    async def load(self):
        return self.state


class RecordingSink:
    def __init__(self):
        self.reminders: list[tuple[str, int]] = []

    async def on_reminder_due(self, message: str, escalation_level: int) -> None:
        self.reminders.append((message, escalation_level))


class FakeOracle:
    def __init__(self, suppress: bool = False, factor: float = 1.0, error: bool = False):
        self.suppress = suppress
        self.factor = factor
        self.error = error
        self.calls = 0

    async def should_suppress(self) -> bool:
        self.calls += 1
        if self.error:
            raise RuntimeError("probe exploded")
        return self.suppress

    async def interval_factor(self) -> float:
        if self.error:
            raise RuntimeError("weather exploded")
        return self.factor


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 10, 0, tzinfo=UTC))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def persistence():
    return FakePersistence()


@pytest.fixture
def oracle():
    return FakeOracle()


@pytest_asyncio.fixture
async def make_engine(clock, sink, persistence, oracle):
    """Build engines that are stopped again after the test."""
    engines = []

    def _make(settings: ReminderSettings | None = None, **overrides) -> ReminderEngine:
        engine = ReminderEngine(
            settings_provider=overrides.get("settings_provider", FakeSettingsProvider(settings)),
            persistence=overrides.get("persistence", persistence),
            sink=overrides.get("sink", sink),
            oracle=overrides.get("oracle", oracle),
            clock=overrides.get("clock", clock),
        )
        engines.append(engine)
        return engine

    yield _make

    for engine in engines:
        engine.main_timer.cancel()
        engine.escalation_timer.cancel()
