"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_RECORDED_HOURS = 0.01
HOURS_PRECISION = 2

DEFAULT_PROJECT = "General"
DEFAULT_TASK = "General Work"
ASSIGNED_PROJECT_FALLBACK = "Assigned Tasks"
UNTITLED_WORK_ITEM = "Untitled"

LEAVE_PROJECT = "Leave"
LEAVE_HOURS_PER_DAY = 8

TIMESHEET_DEFAULT_STATUS = "draft"
ACTIVITY_COMMENT_PREVIEW_CHARS = 100

DEFAULT_HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 500

# Column limits of timesheet_entries and leave_requests
MAX_CELL_HOURS = 999.99
MAX_LABEL_CHARS = 255
MAX_LEAVE_TYPE_CHARS = 50
MAX_NOTE_CHARS = 500
