"""Tests for the SQLite repository."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import aiosqlite
import pytest
import pytest_asyncio

from hydronag.bot.stats import get_daily_stats
from hydronag.db.migrations import SCHEMA_VERSION, run_migrations
from hydronag.db.models import IntakeEvent, ReminderSettings
from hydronag.db.repository import Repository, SqliteSettingsProvider, SqliteStateStore
from hydronag.engine.state import ReminderState

UTC = ZoneInfo("UTC")
NOW = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


@pytest_asyncio.fixture
async def repo(tmp_path):
    db_path = tmp_path / "hydronag.db"
    await run_migrations(db_path)

    repository = Repository(db_path)
    await repository.connect()
    yield repository
    await repository.close()


@pytest.mark.asyncio
async def test_migrations_are_idempotent(tmp_path):
    """Running migrations twice leaves the schema at the current version."""
    db_path = tmp_path / "twice.db"
    await run_migrations(db_path)
    await run_migrations(db_path)

    async with aiosqlite.connect(db_path) as db:
        async with db.execute("PRAGMA user_version") as cursor:
            (version,) = await cursor.fetchone()
    assert version == SCHEMA_VERSION


@pytest.mark.asyncio
async def test_state_round_trip(repo):
    """Saved state loads back field for field."""
    assert await repo.get_state() is None

    state = ReminderState.create_default(NOW)
    state.record_missed(NOW)
    state.record_missed(NOW)
    state.pause(timedelta(minutes=30), "Meeting", NOW)
    state.weekly_adherence = 0.65

    await repo.save_state(state)
    loaded = await repo.get_state()

    assert loaded == state
    assert loaded.pause_ends_at == NOW + timedelta(minutes=30)


@pytest.mark.asyncio
async def test_state_saved_as_single_row(repo):
    state = ReminderState.create_default(NOW)
    await repo.save_state(state)

    state.record_intake(250, NOW + timedelta(minutes=5))
    await repo.save_state(state)

    async with repo.db.execute("SELECT COUNT(*) FROM reminder_state") as cursor:
        (count,) = await cursor.fetchone()
    assert count == 1
    assert (await repo.get_state()).today_complied == 1


@pytest.mark.asyncio
async def test_settings_round_trip(repo):
    settings = ReminderSettings(
        base_interval_minutes=45,
        work_hours_start="08:30",
        work_hours_end="18:00",
        max_disruption_level=4,
        weather_enabled=True,
        body_weight_kg=82.5,
        custom_daily_goal_ml=2500,
        timezone="Europe/Berlin",
    )

    await repo.save_settings(settings)

    assert await repo.get_settings() == settings


@pytest.mark.asyncio
async def test_settings_provider_defaults(repo):
    """Without stored settings the provider hands out its defaults."""
    defaults = ReminderSettings(base_interval_minutes=90)
    provider = SqliteSettingsProvider(repo, defaults=defaults)

    assert await provider.load() == defaults

    await repo.save_settings(ReminderSettings())
    assert await provider.load() == ReminderSettings()


@pytest.mark.asyncio
async def test_state_store(repo):
    store = SqliteStateStore(repo)
    assert await store.load() is None

    state = ReminderState.create_default(NOW)
    await store.save(state)

    assert await store.load() == state


@pytest.mark.asyncio
async def test_intake_log(repo):
    """Drinks are returned per day, oldest first."""
    first = await repo.log_intake(IntakeEvent(amount_ml=300, timestamp=NOW))
    await repo.log_intake(
        IntakeEvent(amount_ml=200, timestamp=NOW - timedelta(hours=2), source="reminder_200ml")
    )
    await repo.log_intake(IntakeEvent(amount_ml=500, timestamp=NOW + timedelta(days=1)))

    assert first.id is not None
    assert first.amount_ml == 300

    today = await repo.get_intake_for_day(date(2026, 3, 2))
    assert [e.amount_ml for e in today] == [200, 300]
    assert today[0].source == "reminder_200ml"
    assert today[0].timestamp == NOW - timedelta(hours=2)


@pytest.mark.asyncio
async def test_daily_stats_from_log(repo):
    await repo.log_intake(IntakeEvent(amount_ml=300, timestamp=NOW))
    await repo.log_intake(IntakeEvent(amount_ml=300, timestamp=NOW + timedelta(hours=3)))

    state = ReminderState.create_default(NOW)
    state.today_shown = 2
    state.today_complied = 2
    settings = ReminderSettings(body_weight_kg=60)

    stats = await get_daily_stats(repo, state, settings, date(2026, 3, 2))

    assert stats.total_intake_ml == 600
    assert stats.daily_goal_ml == 1980
    assert stats.longest_gap_hours == 3.0
    assert stats.reminder_compliance_rate == 1.0
