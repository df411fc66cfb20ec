"""
Time-scaling constants, timestamp patterns and defaults for log volume estimation.
"""

import re

# =============================================================================
# TIME SCALING
# =============================================================================

SECONDS_PER_HOUR = 3600.0
HOURS_PER_DAY = 24.0
DAYS_PER_WEEK = 7.0
# 52 weeks spread over 12 months
WEEKS_PER_MONTH = 52.0 / 12.0

# Published averages are rounded to this many decimal places
ROUND_PLACES = 2

# =============================================================================
# PATTERNS FOR BOUNDARY RECORD PARSING
# =============================================================================

# Timestamp pattern: 2025-01-04T21:06:38.339-08:00, 2025-01-04 21:06:38Z
TIMESTAMP_PATTERN = re.compile(
    r'^(\d{4}-\d{2}-\d{2})[T ](\d{2}:\d{2}:\d{2})(\.\d{1,6})?(Z|[+-]\d{2}:?\d{2})?'
)

# Serialized form used by the history file
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_HISTORY_FILENAME = "log_volume_history.json"
HISTORY_PATH_ENV = "LOG_VOLUME_HISTORY"
KEEP_HISTORY_ENV = "LOG_VOLUME_KEEP_HISTORY"

# Chunk size for newline counting in text log files
READ_CHUNK_SIZE = 1024 * 1024
# How far from either end of a file to look for a boundary record
BOUNDARY_WINDOW_SIZE = 64 * 1024
