"""Time and work-hours utilities."""

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from dateutil.rrule import DAILY, rrule


def now_in(tz: str) -> datetime:
    """Current time in the given timezone."""
    return datetime.now(ZoneInfo(tz))


def parse_hhmm(value: str) -> time:
    """Parse a HH:MM string (24-hour). Raises ValueError on bad input."""
    return time.fromisoformat(value)


def is_within_window(dt: datetime, start_hhmm: str, end_hhmm: str) -> bool:
    """Check if a local datetime falls within a daily HH:MM window.

    Both ends are inclusive. Overnight windows (e.g. 22:00 to 06:00)
    wrap around midnight.
    """
    local_time = dt.time().replace(tzinfo=None)

    start = parse_hhmm(start_hhmm)
    end = parse_hhmm(end_hhmm)

    if start <= end:
        return start <= local_time <= end
    else:
        return local_time >= start or local_time <= end


def next_work_start(now: datetime, work_start: str) -> datetime:
    """Get the next time work hours begin.

    Returns today's start if it is still ahead, otherwise tomorrow's.
    Weekends are not skipped.
    """
    start = parse_hhmm(work_start)
    today_start = datetime.combine(now.date(), start, tzinfo=now.tzinfo)

    rule = rrule(DAILY, dtstart=today_start, count=2)
    next_start = rule.after(now)

    if next_start is None:
        # rrule exhausted its two occurrences, can't happen for a same-day now
        next_start = today_start + timedelta(days=1)

    return next_start


def format_duration(minutes: int) -> str:
    """Format minutes into a human-readable duration.

    Examples:
        15 -> "15 minutes"
        60 -> "1 hour"
        90 -> "1.5 hours"
        1440 -> "1 day"
    """
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes != 1 else ''}"
    elif minutes < 1440:
        hours = minutes / 60
        if hours == int(hours):
            return f"{int(hours)} hour{'s' if hours != 1 else ''}"
        return f"{hours:.1f} hours"
    else:
        days = minutes / 1440
        if days == int(days):
            return f"{int(days)} day{'s' if days != 1 else ''}"
        return f"{days:.1f} days"


def format_relative_time(dt: datetime, now: datetime) -> str:
    """Format a datetime relative to now.

    Examples:
        "in 5 minutes"
        "in 2 hours"
        "40 minutes ago"
    """
    delta = dt - now
    total_seconds = delta.total_seconds()

    if total_seconds < 0:
        abs_seconds = abs(total_seconds)
        if abs_seconds < 3600:
            minutes = int(abs_seconds / 60)
            return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
        elif abs_seconds < 86400:
            hours = int(abs_seconds / 3600)
            return f"{hours} hour{'s' if hours != 1 else ''} ago"
        else:
            days = int(abs_seconds / 86400)
            return f"{days} day{'s' if days != 1 else ''} ago"
    else:
        if total_seconds < 3600:
            minutes = int(total_seconds / 60)
            return f"in {minutes} minute{'s' if minutes != 1 else ''}"
        elif total_seconds < 86400:
            hours = int(total_seconds / 3600)
            return f"in {hours} hour{'s' if hours != 1 else ''}"
        elif total_seconds < 172800:  # 2 days
            return "tomorrow"
        else:
            days = int(total_seconds / 86400)
            return f"in {days} days"
