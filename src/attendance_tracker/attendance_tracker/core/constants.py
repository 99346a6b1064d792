"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LOCATION = "Office"

WEEKLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_DAYS = 30

ANOMALY_THRESHOLD_HOURS = 3
LOW_ATTENDANCE_MIN_EVENTS = 5
DEFAULT_EXPECTED_USER_COUNT = 10
ANALYTICS_CACHE_TTL_SECONDS = 300
DEFAULT_PEAK_HOURS = 5
DEFAULT_TREND_DAYS = 7
MAX_TREND_DAYS = 366
MAX_PEAK_HOURS = 24

PRODUCTIVITY_BASE_SCORE = 75
PRODUCTIVITY_MAX_BONUS = 25
PRODUCTIVITY_POINTS_PER_EVENT = 2
STANDARD_WORK_HOURS = 8

MAX_LOGIN_ATTEMPTS = 5
LOGIN_LOCKOUT_SECONDS = 15 * 60

MAX_BACKUPS = 24
BACKUP_VERSION = "1.0.0"

# Collections in the JSON store
USERS = "users"
ATTENDANCE = "attendance"
TASKS = "tasks"
DEVICES = "devices"
LOGS = "logs"
ALL_COLLECTIONS = (USERS, ATTENDANCE, TASKS, DEVICES, LOGS)
