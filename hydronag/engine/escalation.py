"""Escalation tier lookups: wait factors, grace periods and reminder messages."""

from datetime import timedelta

from hydronag.utils.constants import (
    ESCALATION_TIERS,
    MAX_ESCALATION_LEVEL,
    MIN_ESCALATION_LEVEL,
    EscalationTier,
)


def get_tier(level: int) -> EscalationTier:
    """Get the tier for an escalation level, clamping out-of-range levels."""
    level = max(MIN_ESCALATION_LEVEL, min(MAX_ESCALATION_LEVEL, level))
    return ESCALATION_TIERS[level]


def get_interval_factor(level: int) -> float:
    """Multiplier on the adaptive interval (shorter waits as urgency rises)."""
    return get_tier(level).interval_factor


def get_grace_period(level: int) -> timedelta:
    """How long the user has to act on a reminder before it counts as missed."""
    return timedelta(minutes=get_tier(level).grace_minutes)


def select_message(level: int, minutes_since_intake: float) -> str:
    """Pick the reminder text for a level and time since the last drink.

    Each tier has a "recent" and an "overdue" variant; the tier's
    elapsed-time threshold decides between them.
    """
    tier = get_tier(level)

    if tier.elapsed_threshold_minutes is None:
        return tier.overdue_message

    if minutes_since_intake < tier.elapsed_threshold_minutes:
        return tier.recent_message
    return tier.overdue_message


def cap_disruption(level: int, max_disruption_level: int) -> int:
    """Escalation level as presented to the notification sink."""
    return max(MIN_ESCALATION_LEVEL, min(level, max_disruption_level))
