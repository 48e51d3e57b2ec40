import os

# Environment variable -> AnalyticsConfig field.
ANALYTICS_ENV_VARS = {
    "RISK_RECENCY_HALF_LIFE_DAYS": "recency_half_life_days",
    "RISK_RECENT_WINDOW_DAYS": "recent_window_days",
    "RISK_WEEKLY_WINDOW_DAYS": "weekly_window_days",
    "RISK_MIN_EFFECTIVE_DAYS": "min_effective_days",
    "RISK_MIN_DAYS_PATTERN": "min_days_pattern",
    "RISK_MIN_DAYS_SEQUENCE": "min_days_sequence",
    "RISK_MIN_DAYS_MOMENTUM": "min_days_momentum",
    "RISK_EXTENDED_STREAK": "extended_streak_threshold",
    "RISK_SUPPRESS_MIN_ENGAGEMENT": "suppress_min_engagement",
    "RISK_SUPPRESS_MIN_ATTENDANCE_RATE": "suppress_min_attendance_rate",
    "RISK_SUPPRESS_MAX_RECENT_STREAK": "suppress_max_recent_streak",
}


def get_settings_module() -> str:
    # APP_ENV selects the settings module, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def analytics_from_env() -> dict:
    """Engine overrides present in the environment; unset keys keep defaults."""
    return {field: os.environ[var] for var, field in ANALYTICS_ENV_VARS.items() if os.environ.get(var)}
