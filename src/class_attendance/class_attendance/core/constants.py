"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PERIOD_DURATION_MINUTES = 45
MAX_PERIODS_PER_DAY = 14
DEFAULT_HOLIDAY_REASON = "Holiday"
UNKNOWN_SUBJECT_NAME = "Unknown"

# Shared by every percentage display (dashboard, calendar, predictions).
SAFE_THRESHOLD = 75
WARNING_THRESHOLD = 65

LOCAL_KEY_SETTINGS = "attendance_settings_v2"
LOCAL_KEY_SUBJECTS = "attendance_subjects_v2"
LOCAL_KEY_TIMETABLE = "attendance_timetable_v2"
LOCAL_KEY_ATTENDANCE = "attendance_records"
