"""Message text formatters."""

from datetime import datetime

from hydronag.db.models import ReminderSettings
from hydronag.engine.escalation import get_tier
from hydronag.engine.state import ReminderState
from hydronag.utils.time_utils import format_duration, format_relative_time

URGENCY_EMOJI = {
    "gentle": "💧",
    "moderate": "⚠️",
    "urgent": "🚨",
    "critical": "🆘",
}


def format_reminder_message(message: str, escalation_level: int) -> str:
    """Format a due reminder with urgency."""
    tier = get_tier(escalation_level)
    emoji = URGENCY_EMOJI.get(tier.name, "💧")
    tier_text = tier.name.upper() if tier.name in ["urgent", "critical"] else tier.name.title()

    return f"{emoji} <b>{tier_text} Reminder</b> {emoji}\n\n{message}"


def format_status(state: ReminderState, settings: ReminderSettings, now: datetime) -> str:
    """Format the current reminder state."""
    tier = get_tier(state.escalation_level)
    since = int(state.minutes_since_last_intake(now))

    lines = ["<b>💧 Hydration Status</b>\n"]
    lines.append(f"Last drink: {format_duration(since)} ago")

    if state.paused and state.pause_ends_at:
        lines.append(
            f"⏸ Paused until {state.pause_ends_at.strftime('%H:%M')}"
            + (f" ({state.pause_reason})" if state.pause_reason else "")
        )
    else:
        lines.append(
            f"Next reminder: {state.next_reminder_at.strftime('%H:%M')} "
            f"({format_relative_time(state.next_reminder_at, now)})"
        )

    lines.append(f"Escalation: {URGENCY_EMOJI.get(tier.name, '')} {tier.name} (level {tier.level})")
    lines.append(f"Interval: {format_duration(state.current_interval_minutes)}")
    lines.append("")
    lines.append(f"Today: {state.today_complied} drinks / {state.today_shown} reminders")
    lines.append(f"Streak: {state.consecutive_complied} in a row")
    lines.append(f"Weekly adherence: {state.weekly_adherence:.0%}")
    lines.append(f"Work hours: {settings.work_hours_start} - {settings.work_hours_end}")

    return "\n".join(lines)


def format_settings(settings: ReminderSettings) -> str:
    """Format the current settings with the commands to change them."""

    def on_off(flag: bool) -> str:
        return "on" if flag else "off"

    goal = settings.effective_daily_goal_ml
    goal_source = "custom" if settings.custom_daily_goal_ml else f"{settings.body_weight_kg:g}kg × 33ml"

    return (
        f"<b>Your Settings</b>\n\n"
        f"⏱ Base interval: {format_duration(settings.base_interval_minutes)}\n"
        f"🕘 Work hours: {settings.work_hours_start} - {settings.work_hours_end}\n"
        f"📈 Max disruption level: {settings.max_disruption_level}\n"
        f"🎯 Daily goal: {goal}ml ({goal_source})\n"
        f"🌍 Timezone: <code>{settings.timezone}</code>\n"
        f"🤫 Smart pause: {on_off(settings.smart_pause_enabled)}\n"
        f"🌙 Circadian adjustment: {on_off(settings.circadian_enabled)}\n"
        f"☀️ Weather adjustment: {on_off(settings.weather_enabled)}\n\n"
        "<b>Commands to change:</b>\n"
        "• /interval <code>45</code>\n"
        "• /workhours <code>09:00 17:00</code>"
    )


def format_welcome_message() -> str:
    """Format the welcome message for /start."""
    return """
<b>Welcome to HydroNag!</b> 💧

I'll remind you to drink water during your work hours. Ignore me and I get
more insistent; keep drinking and I'll back off.

<b>Quick Start:</b>
• /drink 250 - Log a drink
• /status - When's the next reminder?
• /help - Full command list
""".strip()


def format_help_message() -> str:
    """Format the help message."""
    return """
<b>HydroNag Commands 💧</b>

<b>Drinking:</b>
/drink [ml] - Log a drink (default 250ml)
/dismiss - Skip the current reminder

<b>Reminders:</b>
/pause [minutes] - Pause reminders (default 60)
/resume - Resume reminders now
/status - Current escalation and next reminder

<b>Stats & Settings:</b>
/stats - Today's hydration summary
/settings - View settings
/interval &lt;minutes&gt; - Set the base reminder interval
/workhours &lt;start&gt; &lt;end&gt; - Set work hours (e.g., 09:00 17:00)

<b>Tips:</b>
• Use the buttons on a reminder to log a drink in one tap
• Three drinks in a row and reminders get further apart
• Ignore two in a row and they get closer and louder
""".strip()
