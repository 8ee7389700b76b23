"""Daily hydration statistics derived from intake events."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable

from hydronag.db.models import IntakeEvent

GOAL_WEIGHT = 0.4
CONSISTENCY_WEIGHT = 0.3
COMPLIANCE_WEIGHT = 0.3

# Gaps this long or longer zero the gap score; intake spread over this many
# distinct hours maxes the distribution score.
GAP_PENALTY_HOURS = 12.0
IDEAL_DISTINCT_HOURS = 12.0


class PerformanceCategory(Enum):
    NEEDS_IMPROVEMENT = "needs_improvement"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"


@dataclass
class SourceStats:
    """Intake totals for one source."""

    count: int
    total_ml: int
    average_ml: int


@dataclass
class DailyStats:
    """Hydration metrics for one day. Always recomputable from events."""

    date: date
    daily_goal_ml: int
    total_intake_ml: int = 0
    entry_count: int = 0
    first_intake_time: time | None = None
    last_intake_time: time | None = None
    longest_gap_hours: float = 0.0
    reminders_shown: int = 0
    reminders_complied: int = 0
    intake_by_source: dict[str, SourceStats] = field(default_factory=dict)
    intake_by_hour: dict[int, int] = field(default_factory=dict)

    @property
    def average_intake_ml(self) -> int:
        if self.entry_count == 0:
            return 0
        return self.total_intake_ml // self.entry_count

    @property
    def goal_completion_percentage(self) -> float:
        """Fraction of the goal reached (can exceed 1.0)."""
        if self.daily_goal_ml == 0:
            return 0.0
        return self.total_intake_ml / self.daily_goal_ml

    @property
    def goal_achieved(self) -> bool:
        return self.total_intake_ml >= self.daily_goal_ml

    @property
    def intake_duration(self) -> timedelta | None:
        """Span between the first and last drink of the day."""
        if self.first_intake_time is None or self.last_intake_time is None:
            return None
        duration = _time_delta(self.first_intake_time, self.last_intake_time)
        if duration < timedelta(0):
            duration += timedelta(days=1)
        return duration

    @property
    def reminder_compliance_rate(self) -> float:
        """Complied / shown, capped at 1.0 (drinks without a reminder also count)."""
        if self.reminders_shown == 0:
            return 1.0
        return min(1.0, self.reminders_complied / self.reminders_shown)

    @property
    def peak_intake_hour(self) -> int | None:
        if not self.intake_by_hour:
            return None
        return max(self.intake_by_hour.items(), key=lambda kv: kv[1])[0]

    @property
    def consistency_score(self) -> float:
        """Mean of the long-gap penalty and the spread across hours."""
        if not self.intake_by_hour:
            return 0.0

        gap_score = max(0.0, 1.0 - self.longest_gap_hours / GAP_PENALTY_HOURS)
        distribution_score = min(1.0, len(self.intake_by_hour) / IDEAL_DISTINCT_HOURS)

        return (gap_score + distribution_score) / 2.0

    @property
    def quality_score(self) -> float:
        """Weighted blend of goal, consistency and compliance, 0.0 to 1.0."""
        if self.entry_count == 0:
            return 0.0

        goal_score = min(1.0, self.goal_completion_percentage)

        return (
            goal_score * GOAL_WEIGHT
            + self.consistency_score * CONSISTENCY_WEIGHT
            + self.reminder_compliance_rate * COMPLIANCE_WEIGHT
        )

    @property
    def category(self) -> PerformanceCategory:
        score = self.quality_score
        if score >= 0.8:
            return PerformanceCategory.EXCELLENT
        elif score >= 0.6:
            return PerformanceCategory.GOOD
        elif score >= 0.4:
            return PerformanceCategory.FAIR
        return PerformanceCategory.NEEDS_IMPROVEMENT

    def summary_message(self) -> str:
        goal_text = (
            "Goal achieved!"
            if self.goal_achieved
            else f"{self.goal_completion_percentage:.0%} of goal"
        )
        quality_text = {
            PerformanceCategory.EXCELLENT: "Excellent hydration!",
            PerformanceCategory.GOOD: "Good hydration habits",
            PerformanceCategory.FAIR: "Room for improvement",
            PerformanceCategory.NEEDS_IMPROVEMENT: "Let's focus on consistent hydration",
        }[self.category]
        return f"{goal_text} - {quality_text}"

    def recommendations(self) -> list[str]:
        """Actionable tips for the day."""
        tips = []

        if not self.goal_achieved:
            remaining = self.daily_goal_ml - self.total_intake_ml
            tips.append(f"Drink {remaining}ml more to reach your daily goal")

        if self.longest_gap_hours > 4:
            tips.append("Try to drink water more consistently throughout the day")

        if self.reminder_compliance_rate < 0.7:
            tips.append("Respond to more reminders to build better habits")

        if self.entry_count > 0 and self.average_intake_ml < 200:
            tips.append("Consider drinking larger amounts less frequently")

        return tips


def _time_delta(earlier: time, later: time) -> timedelta:
    anchor = date.min
    return datetime.combine(anchor, later) - datetime.combine(anchor, earlier)


def longest_gap_hours(times: list[time]) -> float:
    """Longest gap between consecutive times of day, in hours.

    A negative step (crossing midnight) wraps once by adding 24 hours.
    """
    if len(times) <= 1:
        return 0.0

    ordered = sorted(times)
    max_gap = 0.0
    for previous, current in zip(ordered, ordered[1:]):
        gap = _time_delta(previous, current).total_seconds() / 3600
        if gap < 0:
            gap += 24
        max_gap = max(max_gap, gap)

    return max_gap


def calculate_daily_stats(
    events: Iterable[IntakeEvent],
    goal_ml: int,
    reminders_shown: int = 0,
    reminders_complied: int = 0,
    day: date | None = None,
) -> DailyStats:
    """Build DailyStats from one day's intake events.

    With no events the result carries zero totals and the given goal.
    """
    records = list(events)

    if not records:
        return DailyStats(
            date=day or date.today(),
            daily_goal_ml=goal_ml,
            reminders_shown=reminders_shown,
            reminders_complied=reminders_complied,
        )

    times = sorted(r.timestamp.time().replace(tzinfo=None) for r in records)

    by_source: dict[str, list[int]] = {}
    by_hour: dict[int, int] = {}
    for record in records:
        by_source.setdefault(record.source, []).append(record.amount_ml)
        hour = record.timestamp.hour
        by_hour[hour] = by_hour.get(hour, 0) + record.amount_ml

    return DailyStats(
        date=day or records[0].timestamp.date(),
        daily_goal_ml=goal_ml,
        total_intake_ml=sum(r.amount_ml for r in records),
        entry_count=len(records),
        first_intake_time=times[0],
        last_intake_time=times[-1],
        longest_gap_hours=longest_gap_hours(times),
        reminders_shown=reminders_shown,
        reminders_complied=reminders_complied,
        intake_by_source={
            source: SourceStats(
                count=len(amounts),
                total_ml=sum(amounts),
                average_ml=int(sum(amounts) / len(amounts)),
            )
            for source, amounts in by_source.items()
        },
        intake_by_hour=by_hour,
    )
