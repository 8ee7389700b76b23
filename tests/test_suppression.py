"""Tests for smart pause suppression and weather adjustment."""

from datetime import datetime

import pytest

from hydronag.db.models import ReminderSettings
from hydronag.engine.suppression import (
    SmartSuppressionOracle,
    WeatherData,
    is_circadian_night,
    weather_hydration_factor,
)

from conftest import UTC, FakeClock


class Probe:
    """Mutable probe value that counts reads."""

    def __init__(self, value):
        self.value = value
        self.reads = 0

    def __call__(self):
        self.reads += 1
        if isinstance(self.value, Exception):
            raise self.value
        return self.value


def make_oracle(settings=None, clock=None, **probes) -> SmartSuppressionOracle:
    settings = settings or ReminderSettings()
    return SmartSuppressionOracle(
        settings=lambda: settings,
        clock=clock or FakeClock(datetime(2026, 3, 2, 10, 0, tzinfo=UTC)),
        **probes,
    )


def test_weather_factor_hot():
    """Hot weather raises hydration needs."""
    weather = WeatherData(temperature_c=30, humidity=50, heat_index_c=31)
    assert weather_hydration_factor(weather) == pytest.approx(1.10)


def test_weather_factor_cold():
    """Cold weather lowers hydration needs slightly."""
    weather = WeatherData(temperature_c=10, humidity=50, heat_index_c=10)
    assert weather_hydration_factor(weather) == pytest.approx(0.95)


def test_weather_factor_heat_index_and_dry_air():
    weather = WeatherData(temperature_c=20, humidity=20, heat_index_c=24)
    assert weather_hydration_factor(weather) == pytest.approx(1.15)


def test_weather_factor_clamped():
    """Extreme readings stay within 0.7 and 2.0."""
    assert weather_hydration_factor(WeatherData(100, 50, 100)) == 2.0
    assert weather_hydration_factor(WeatherData(-50, 50, -50)) == 0.7
    assert weather_hydration_factor(None) == 1.0


def test_circadian_night():
    """Night runs from 18:00 to 06:00."""
    assert is_circadian_night(datetime(2026, 3, 2, 18, 0, tzinfo=UTC))
    assert is_circadian_night(datetime(2026, 3, 2, 2, 0, tzinfo=UTC))
    assert not is_circadian_night(datetime(2026, 3, 2, 12, 0, tzinfo=UTC))


@pytest.mark.asyncio
async def test_no_probes_no_suppression():
    """Without probes, daytime reminders are never suppressed."""
    assert not await make_oracle().should_suppress()


@pytest.mark.asyncio
async def test_idle_suppresses():
    """Fifteen minutes of idle time suppresses reminders."""
    assert await make_oracle(idle_seconds=Probe(15 * 60)).should_suppress()
    assert not await make_oracle(idle_seconds=Probe(14 * 60)).should_suppress()


@pytest.mark.asyncio
async def test_unknown_idle_is_not_idle():
    """A negative or failing idle probe is treated as active."""
    assert not await make_oracle(idle_seconds=Probe(-1)).should_suppress()
    assert not await make_oracle(idle_seconds=Probe(OSError("no display"))).should_suppress()


@pytest.mark.asyncio
async def test_presentation_suppresses():
    assert await make_oracle(presentation_active=Probe(True)).should_suppress()
    assert not await make_oracle(
        presentation_active=Probe(RuntimeError("no api"))
    ).should_suppress()


@pytest.mark.asyncio
async def test_circadian_suppresses_at_night():
    """Evening reminders are suppressed only when circadian mode is on."""
    evening = FakeClock(datetime(2026, 3, 2, 20, 0, tzinfo=UTC))

    assert await make_oracle(clock=evening).should_suppress()
    assert not await make_oracle(
        settings=ReminderSettings(circadian_enabled=False), clock=evening
    ).should_suppress()


@pytest.mark.asyncio
async def test_smart_pause_disabled():
    """With smart pause off, no probe is consulted."""
    idle = Probe(3600)
    oracle = make_oracle(settings=ReminderSettings(smart_pause_enabled=False), idle_seconds=idle)

    assert not await oracle.should_suppress()
    assert idle.reads == 0


@pytest.mark.asyncio
async def test_result_cached_for_a_minute():
    """Checks within a minute reuse the previous answer."""
    clock = FakeClock(datetime(2026, 3, 2, 10, 0, tzinfo=UTC))
    idle = Probe(3600)
    oracle = make_oracle(clock=clock, idle_seconds=idle)

    assert await oracle.should_suppress()

    idle.value = 0
    clock.advance(seconds=30)
    assert await oracle.should_suppress()
    assert idle.reads == 1

    clock.advance(seconds=31)
    assert not await oracle.should_suppress()
    assert idle.reads == 2


@pytest.mark.asyncio
async def test_interval_factor_needs_weather_enabled():
    """Weather only shortens waits when enabled."""
    hot = WeatherData(temperature_c=30, humidity=50, heat_index_c=31)

    async def fetch():
        return hot

    disabled = make_oracle(weather=fetch)
    assert await disabled.interval_factor() == 1.0

    enabled = make_oracle(settings=ReminderSettings(weather_enabled=True), weather=fetch)
    assert await enabled.interval_factor() == pytest.approx(1 / 1.10)


@pytest.mark.asyncio
async def test_weather_cached_for_thirty_minutes():
    clock = FakeClock(datetime(2026, 3, 2, 10, 0, tzinfo=UTC))
    fetches = []

    async def fetch():
        fetches.append(clock.now)
        return WeatherData(temperature_c=20, humidity=50, heat_index_c=20)

    oracle = make_oracle(
        settings=ReminderSettings(weather_enabled=True), clock=clock, weather=fetch
    )

    await oracle.current_weather()
    clock.advance(minutes=29)
    await oracle.current_weather()
    assert len(fetches) == 1

    clock.advance(minutes=2)
    await oracle.current_weather()
    assert len(fetches) == 2


@pytest.mark.asyncio
async def test_weather_failure_means_no_adjustment():
    async def fetch():
        raise ConnectionError("api down")

    oracle = make_oracle(settings=ReminderSettings(weather_enabled=True), weather=fetch)

    assert await oracle.current_weather() is None
    assert await oracle.interval_factor() == 1.0
