"""Constants and defaults.

Note: Keep scoring numbers here so they can be tuned and tested without
touching control flow. The values were calibrated by hand against
historical dashboards and may need recalibration by domain experts.
"""

from .enums import AttendanceStatus

# --- Ingestion -------------------------------------------------------------

# Status vocabulary used by the attendance store, mapped to canonical values.
STATUS_ALIASES = {
    "attended": AttendanceStatus.ATTENDED,
    "present": AttendanceStatus.ATTENDED,
    "on time": AttendanceStatus.ATTENDED,
    "on_time": AttendanceStatus.ATTENDED,
    "late": AttendanceStatus.LATE,
    "absent": AttendanceStatus.ABSENT,
    "excused": AttendanceStatus.EXCUSED,
    "not enrolled": AttendanceStatus.EXCUSED,
    "vacation": AttendanceStatus.VACATION,
    "unmarked": AttendanceStatus.UNMARKED,
}

# --- Engine defaults (exposed through AnalyticsConfig) -----------------------

DEFAULT_RECENCY_HALF_LIFE_DAYS = 30.0
DEFAULT_RECENT_WINDOW_DAYS = 21
DEFAULT_WEEKLY_WINDOW_DAYS = 7
DEFAULT_MIN_EFFECTIVE_DAYS = 3
DEFAULT_MIN_DAYS_PATTERN = 8
DEFAULT_MIN_DAYS_SEQUENCE = 10
DEFAULT_MIN_DAYS_MOMENTUM = 12
DEFAULT_EXTENDED_STREAK = 4

DEFAULT_SUPPRESS_MIN_ENGAGEMENT = 85.0
DEFAULT_SUPPRESS_MIN_ATTENDANCE_RATE = 85.0
DEFAULT_SUPPRESS_MAX_RECENT_STREAK = 1

# Recency score: sum of exp(-days/half_life), scaled then capped.
RECENCY_SCALE = 10.0
SCORE_CEILING = 100.0

# --- Trend -----------------------------------------------------------------

TREND_WINDOW_MIN = 6
TREND_WINDOW_MAX = 12
TREND_WINDOW_FRACTION = 0.3
TREND_R_SQUARED_FLOOR = 0.3
# Slope thresholds in percentage points per index.
TREND_SLOPE_THRESHOLD = 2.0
TREND_SENSITIVE_SLOPE_THRESHOLD = 1.0
# Below this baseline a smaller rise counts as improving.
TREND_LOW_BASELINE_RATE = 70.0
# Above this baseline a smaller drop counts as declining.
TREND_HIGH_BASELINE_RATE = 80.0

MOMENTUM_WINDOW_FRACTION = 0.3
MOMENTUM_WINDOW_MIN = 4
MOMENTUM_WINDOW_MAX = 10
MOMENTUM_VERY_RECENT_MAX = 4

# --- Patterns --------------------------------------------------------------

DOW_MIN_ABSENCES = 3
DOW_MIN_ABSENCE_RATE = 0.7
DOW_MIN_OCCURRENCES = 4

SPIKE_WINDOW = 5
SPIKE_MIN_ABSENCES = 3
SPIKE_MIN_INCREASE = 2

INTERMITTENT_MIN_ABSENCES = 5
INTERMITTENT_MAX_MEAN_GAP_DAYS = 3.0
CLUSTER_MAX_MEAN_GAP_DAYS = 7.0

LATENESS_MIN_LATE_DAYS = 3
LATENESS_MIN_RATE = 0.3

SHARP_DECLINE_SLOPE = 5.0
SHARP_DECLINE_MAX_RATE = 70.0

# --- Risk score (0-100, higher is worse) -------------------------------------

# (minimum absence rate, points), most severe first.
ABSENCE_SEVERITY_STEPS = (
    (0.5, 35.0),
    (0.4, 30.0),
    (0.3, 22.0),
    (0.2, 15.0),
)
ABSENCE_SEVERITY_CAP = 35.0

# (minimum streak, points), most severe first.
ONGOING_STREAK_POINTS = (
    (4, 30.0),
    (3, 25.0),
    (2, 18.0),
)
RECENT_STREAK_POINTS = (
    (3, 20.0),
    (2, 12.0),
)
WEEKLY_ABSENCE_POINTS = (
    (2, 10.0),
    (1, 5.0),
)
RECENCY_ADDON_WEIGHT = 0.15

TREND_POINTS_DECLINING = 15.0
TREND_POINTS_ACCELERATION = 5.0
TREND_POINTS_STABLE = 8.0
TREND_POINTS_VOLATILE = 10.0
TREND_POINTS_IMPROVING_MAX = 5.0
TREND_POINTS_CAP = 20.0
MOMENTUM_ACCELERATION = -0.2

PATTERN_POINTS_PER_LABEL = 4.0
PATTERN_LATENESS_BONUS = 3.0
PATTERN_POINTS_CAP = 15.0

# --- Engagement score (0-100, higher is better) ------------------------------

LATE_QUALITY_PENALTY = 0.3
ENGAGEMENT_QUALITY_WEIGHT = 0.40
ENGAGEMENT_RECENCY_WEIGHT = 0.25
ENGAGEMENT_TREND_IMPROVING_BASE = 15.0
ENGAGEMENT_TREND_IMPROVING_MAX = 20.0
ENGAGEMENT_TREND_DECLINE_PER_POINT = 3.0
ENGAGEMENT_TREND_DECLINE_MAX = 30.0
ENGAGEMENT_TREND_STABLE = 10.0
ENGAGEMENT_TREND_VOLATILE = 5.0
ENGAGEMENT_CONSISTENCY_MAX = 15.0
ENGAGEMENT_STREAK_PENALTY = 3.0
ENGAGEMENT_PATTERN_PENALTY = 5.0
ENGAGEMENT_MOMENTUM_WEIGHT = 10.0

# --- Tier mapping ------------------------------------------------------------

CRITICAL_SCORE = 70.0
CRITICAL_ONGOING_STREAK = 5
CRITICAL_MAX_RATE = 35.0
CRITICAL_RECENT_STREAK = 4
CRITICAL_RECENT_STREAK_RATE = 50.0

HIGH_SCORE = 50.0
HIGH_ONGOING_STREAK = 3
HIGH_MAX_RATE = 50.0
HIGH_DECLINE_RECENT_STREAK = 2
HIGH_DECLINE_RATE = 60.0

MEDIUM_SCORE = 30.0
MEDIUM_ONGOING_STREAK = 2
MEDIUM_MAX_RATE = 65.0
MEDIUM_PATTERN_COUNT = 2
MEDIUM_PATTERN_RATE = 75.0

WATCH_SCORE = 15.0
WATCH_MAX_RATE = 85.0
WATCH_MIN_ENGAGEMENT = 70.0

# --- Reports ---------------------------------------------------------------

# Default history window pulled from the store when no start date is given.
DEFAULT_REPORT_DAYS = 120
