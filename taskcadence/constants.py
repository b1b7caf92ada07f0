"""
Global constants for taskcadence.

This module centralizes magic strings, scan bounds, and default values
to improve maintainability and make configuration easier.
"""

# ============================================================================
# File Paths and Directories
# ============================================================================

CONFIG_FILENAME = "_config.yaml"
CALENDAR_FILENAME = "_calendar.yaml"
CHECKLIST_FILE_PATTERN = "*.yaml"
DEFAULT_CHECKLISTS_DIR = "checklists"
DEFAULT_CHECKLISTS_FILE = "checklists.yaml"
CHECKLIST_FILE_VERSION = "1.0"

# Environment variables for checklist location discovery
ENV_CHECKLISTS_DIR = "TASKCADENCE_DIR"
ENV_CHECKLISTS_FILE = "TASKCADENCE_FILE"

# ============================================================================
# Projection Bounds
# ============================================================================

DEFAULT_LOOKAHEAD_DAYS = 30  # Forward scan budget for upcoming schedule
DEFAULT_BACKLOG_SCAN_DAYS = 1000  # Scan budget for backlog catch-up
DEFAULT_UPCOMING_COUNT = 5
DEFAULT_BACKLOG_COUNT = 30

# ============================================================================
# Validation Constraints
# ============================================================================

MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
MIN_DAY_OF_WEEK = 0  # Sunday
MAX_DAY_OF_WEEK = 6  # Saturday

# ============================================================================
# Frequency Period Constants
# ============================================================================

QUARTERLY_MONTHS = 3
HALF_YEARLY_MONTHS = 6
YEARLY_MONTHS = 12

# ============================================================================
# Time Filter Windows
# ============================================================================

NEXT_WEEK_WINDOW_DAYS = 7

# ============================================================================
# Status Labels
# ============================================================================

STATUS_ALL_DONE = "ALL DONE"
STATUS_DUE_TODAY = "DUE TODAY"
STATUS_UPCOMING = "UPCOMING"
STATUS_OVERDUE_TEMPLATE = "{count} Over due"

# ============================================================================
# Display/Formatting Constants
# ============================================================================

MAX_TABLE_COLUMN_WIDTH = 30  # Max width for table columns in CLI
