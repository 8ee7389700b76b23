"""Smart pause: idle, presentation, circadian and weather signals.

The probes are injected callables; nothing here talks to the OS or a
weather service.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable

from hydronag.db.models import ReminderSettings
from hydronag.utils.constants import (
    IDLE_THRESHOLD_MINUTES,
    NIGHT_END,
    NIGHT_START,
    SUPPRESSION_CACHE_SECONDS,
    WEATHER_CACHE_MINUTES,
)
from hydronag.utils.time_utils import is_within_window, now_in

logger = logging.getLogger(__name__)


@dataclass
class WeatherData:
    """Weather sample used for hydration adjustments."""

    temperature_c: float
    humidity: float
    heat_index_c: float
    condition: str = ""


def weather_hydration_factor(weather: WeatherData | None) -> float:
    """Hydration need multiplier (1.0 normal, >1.0 drink more).

    Examples:
        30°C, 50% humidity, heat index 31 -> 1.10
        10°C, 50% humidity -> 0.95
    """
    if weather is None:
        return 1.0

    factor = 1.0

    if weather.temperature_c > 25:
        factor += (weather.temperature_c - 25) * 0.02
    elif weather.temperature_c < 15:
        factor -= (15 - weather.temperature_c) * 0.01

    if weather.heat_index_c > weather.temperature_c + 3:
        factor += 0.1

    if weather.humidity < 30:
        factor += 0.05

    return max(0.7, min(2.0, factor))


def is_circadian_night(dt: datetime) -> bool:
    """Evening and early morning, when reminders are held back."""
    return is_within_window(dt, NIGHT_START, NIGHT_END)


class SmartSuppressionOracle:
    """Combines the smart pause probes into one suppression decision."""

    def __init__(
        self,
        settings: Callable[[], ReminderSettings],
        idle_seconds: Callable[[], int] | None = None,
        presentation_active: Callable[[], bool] | None = None,
        weather: Callable[[], Awaitable[WeatherData | None]] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._settings = settings
        self._idle_seconds = idle_seconds
        self._presentation_active = presentation_active
        self._weather = weather
        self._clock = clock or (lambda: now_in(self._settings().timezone))

        self._last_check: datetime | None = None
        self._last_result = False
        self._cached_weather: WeatherData | None = None
        self._weather_fetched_at: datetime | None = None

    def is_system_idle(self, threshold_minutes: int = IDLE_THRESHOLD_MINUTES) -> bool:
        if self._idle_seconds is None:
            return False
        try:
            idle = self._idle_seconds()
        except Exception as e:
            logger.warning(f"Failed to read idle time: {e}")
            return False
        # Negative means the probe couldn't tell
        if idle < 0:
            return False
        return idle >= threshold_minutes * 60

    def is_presentation_active(self) -> bool:
        if self._presentation_active is None:
            return False
        try:
            return bool(self._presentation_active())
        except Exception as e:
            logger.warning(f"Failed to detect presentation mode: {e}")
            return False

    async def should_suppress(self) -> bool:
        """Whether the next reminder should be quietly deferred.

        Cached for a minute so a burst of timer checks costs one probe round.
        """
        settings = self._settings()
        if not settings.smart_pause_enabled:
            return False

        now = self._clock()
        if (
            self._last_check is not None
            and (now - self._last_check).total_seconds() < SUPPRESSION_CACHE_SECONDS
        ):
            return self._last_result

        self._last_check = now

        if self.is_system_idle():
            logger.debug("Smart pause: system is idle")
            self._last_result = True
        elif self.is_presentation_active():
            logger.debug("Smart pause: presentation mode active")
            self._last_result = True
        elif settings.circadian_enabled and is_circadian_night(now):
            logger.debug("Smart pause: circadian night mode")
            self._last_result = True
        else:
            self._last_result = False

        return self._last_result

    async def current_weather(self) -> WeatherData | None:
        """Latest weather sample, refreshed at most every 30 minutes."""
        if self._weather is None:
            return None

        now = self._clock()
        if (
            self._weather_fetched_at is not None
            and now - self._weather_fetched_at < timedelta(minutes=WEATHER_CACHE_MINUTES)
        ):
            return self._cached_weather

        try:
            self._cached_weather = await self._weather()
            self._weather_fetched_at = now
        except Exception as e:
            logger.error(f"Failed to get weather data: {e}")
            return None

        if self._cached_weather:
            logger.info(
                f"Weather updated: {self._cached_weather.temperature_c}°C, "
                f"{self._cached_weather.humidity}% humidity"
            )
        return self._cached_weather

    async def interval_factor(self) -> float:
        """Shorter waits when the weather raises hydration needs."""
        if not self._settings().weather_enabled:
            return 1.0

        weather = await self.current_weather()
        return 1.0 / weather_hydration_factor(weather)
