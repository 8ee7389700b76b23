"""Constants and default values."""

from dataclasses import dataclass


@dataclass
class EscalationTier:
    """Defines a single escalation level."""

    level: int
    name: str
    interval_factor: float  # Multiplier applied to the adaptive interval
    grace_minutes: int  # Time to respond before the reminder counts as missed
    elapsed_threshold_minutes: int | None  # None: one message regardless of elapsed time
    recent_message: str
    overdue_message: str


# Level -> tier. Message choice: elapsed < threshold -> recent, otherwise overdue.
ESCALATION_TIERS = {
    1: EscalationTier(
        1, "gentle", 1.0, 10, 90,
        "Time for a hydration break! 💧",
        "Remember to drink some water 🚰",
    ),
    2: EscalationTier(
        2, "moderate", 0.8, 7, 120,
        "Your body needs water - take a quick sip! 💙",
        "Hydration reminder: Please drink water soon 🥤",
    ),
    3: EscalationTier(
        3, "urgent", 0.6, 5, 150,
        "Important: You haven't had water in a while! ⚠️💧",
        "Health Alert: Please prioritize hydration now! 🚨💙",
    ),
    4: EscalationTier(
        4, "critical", 0.5, 3, None,
        "URGENT: Extended dehydration detected - drink water immediately! 🆘🚰",
        "URGENT: Extended dehydration detected - drink water immediately! 🆘🚰",
    ),
}

MIN_ESCALATION_LEVEL = 1
MAX_ESCALATION_LEVEL = 4

# Adaptive interval bounds (minutes)
MIN_INTERVAL_MINUTES = 20
MAX_INTERVAL_MINUTES = 120
DEFAULT_INTERVAL_MINUTES = 60
COMPLIANCE_REWARD_MINUTES = 5
COMPLIANCE_REWARD_STREAK = 3
MISSED_PENALTY_MINUTES = 10
MISSED_ESCALATION_STREAK = 2

# Scheduler timings (minutes)
MIN_FIRE_DELAY_MINUTES = 15
SUPPRESSED_RETRY_MINUTES = 10
ERROR_RETRY_MINUTES = 5

# Weekly adherence EMA weights
ADHERENCE_HISTORY_WEIGHT = 0.7
ADHERENCE_RECENT_WEIGHT = 0.3
DEFAULT_WEEKLY_ADHERENCE = 0.5

# Settings bounds
MIN_BASE_INTERVAL_MINUTES = 15
MAX_BASE_INTERVAL_MINUTES = 180
MIN_BODY_WEIGHT_KG = 30
MAX_BODY_WEIGHT_KG = 300
MIN_DAILY_GOAL_ML = 500
MAX_DAILY_GOAL_ML = 5000
ML_PER_KG = 33
MAX_INTAKE_ML = 2000

# Default work hours (24-hour format)
DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"

# Smart pause
IDLE_THRESHOLD_MINUTES = 15
NIGHT_START = "18:00"
NIGHT_END = "06:00"
SUPPRESSION_CACHE_SECONDS = 60
WEATHER_CACHE_MINUTES = 30

# Default timezone
DEFAULT_TIMEZONE = "UTC"
