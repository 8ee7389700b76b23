"""Tests for settings validation and intake events."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from hydronag.db.models import IntakeEvent, InvalidSettingsError, ReminderSettings

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=ZoneInfo("UTC"))


def test_intake_amount_bounds():
    """Drinks must be between 1 and 2000ml."""
    assert IntakeEvent(amount_ml=1, timestamp=NOW).is_valid()
    assert IntakeEvent(amount_ml=2000, timestamp=NOW).is_valid()
    assert not IntakeEvent(amount_ml=0, timestamp=NOW).is_valid()
    assert not IntakeEvent(amount_ml=-250, timestamp=NOW).is_valid()
    assert not IntakeEvent(amount_ml=2001, timestamp=NOW).is_valid()


def test_intake_needs_a_source():
    assert not IntakeEvent(amount_ml=250, timestamp=NOW, source="  ").is_valid()


def test_default_settings_are_valid():
    ReminderSettings().validate()


def test_daily_goal_from_body_weight():
    """The goal is 33ml per kg unless a custom goal is set."""
    assert ReminderSettings(body_weight_kg=80).effective_daily_goal_ml == 2640
    assert ReminderSettings(custom_daily_goal_ml=1800).effective_daily_goal_ml == 1800


@pytest.mark.parametrize(
    "overrides",
    [
        {"base_interval_minutes": 10},
        {"base_interval_minutes": 200},
        {"max_disruption_level": 0},
        {"body_weight_kg": 20},
        {"custom_daily_goal_ml": 100},
        {"work_hours_start": "9am"},
        {"work_hours_start": "09:00", "work_hours_end": "09:00"},
        {"timezone": "Mars/Olympus_Mons"},
    ],
)
def test_invalid_settings(overrides):
    with pytest.raises(InvalidSettingsError):
        ReminderSettings(**overrides).validate()


def test_overnight_work_hours_allowed():
    ReminderSettings(work_hours_start="22:00", work_hours_end="06:00").validate()
