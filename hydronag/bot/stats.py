"""Statistics gathering and formatting."""

from datetime import date

from hydronag.db.models import ReminderSettings
from hydronag.db.repository import Repository
from hydronag.engine.state import ReminderState
from hydronag.engine.stats import DailyStats, calculate_daily_stats


async def get_daily_stats(
    repo: Repository, state: ReminderState, settings: ReminderSettings, day: date
) -> DailyStats:
    """Compute today's stats from the intake log and reminder counters."""
    events = await repo.get_intake_for_day(day)
    return calculate_daily_stats(
        events,
        settings.effective_daily_goal_ml,
        reminders_shown=state.today_shown,
        reminders_complied=state.today_complied,
        day=day,
    )


def format_stats_message(stats: DailyStats) -> str:
    """Format daily statistics into a readable message."""
    lines = [f"<b>📊 Hydration for {stats.date.strftime('%b %d')}</b>\n"]

    # Overview
    lines.append("<b>💧 Intake</b>")
    lines.append(
        f"Total: {stats.total_intake_ml}ml of {stats.daily_goal_ml}ml "
        f"({stats.goal_completion_percentage:.0%})"
    )
    lines.append(f"Drinks: {stats.entry_count} (avg {stats.average_intake_ml}ml)")
    if stats.first_intake_time and stats.last_intake_time:
        lines.append(
            f"First / last: {stats.first_intake_time.strftime('%H:%M')} / "
            f"{stats.last_intake_time.strftime('%H:%M')}"
        )
    if stats.peak_intake_hour is not None:
        lines.append(f"Peak hour: {stats.peak_intake_hour:02d}:00")
    lines.append(f"Longest gap: {stats.longest_gap_hours:.1f}h\n")

    # Reminders
    lines.append("<b>🔔 Reminders</b>")
    lines.append(f"Shown: {stats.reminders_shown}, complied: {stats.reminders_complied}")
    lines.append(f"Compliance: {stats.reminder_compliance_rate:.0%}\n")

    # Sources
    if stats.intake_by_source:
        lines.append("<b>📥 Sources</b>")
        for source, source_stats in sorted(stats.intake_by_source.items()):
            lines.append(f"{source}: {source_stats.count}× ({source_stats.total_ml}ml)")
        lines.append("")

    # Score
    lines.append("<b>🎯 Quality</b>")
    lines.append(f"Score: {stats.quality_score:.2f} - {stats.summary_message()}")

    tips = stats.recommendations()
    if tips:
        lines.append("")
        lines.extend(f"• {tip}" for tip in tips)

    return "\n".join(lines)
