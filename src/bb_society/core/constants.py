"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DAYS_PER_WEEK = 7
MIN_SCORE = 0
MAX_SCORE = 100
MIN_RUBRIC_LEVEL = 1
MAX_RUBRIC_LEVEL = 4
DEFAULT_DURATION_MINUTES = 60
DEFAULT_CELL_PREVIEW = 3
DEFAULT_UPCOMING_LIMIT = 3
DEFAULT_RECENT_LIMIT = 3
DEFAULT_DASHBOARD_WORKERS = 4
