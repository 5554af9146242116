"""
Configuration constants for the break-scheduling engine.

All adjustable parameters are centralized here for easy tuning.
"""

import os
from pathlib import Path
from typing import Final

# =============================================================================
# TIMER
# =============================================================================

TICK_SECONDS: Final[int] = 1  # Fixed tick granularity for every countdown
SECONDS_PER_MINUTE: Final[int] = 60

# =============================================================================
# EXERCISE SELECTION
# =============================================================================

EXERCISES_PER_BREAK: Final[int] = 2  # Upper bound on exercises offered per break
COOLDOWN_CAPACITY: Final[int] = 20  # Most-recent ids kept in cooldown memory

# =============================================================================
# EXERCISES
# =============================================================================

DEFAULT_EXERCISE_DURATION: Final[int] = 30  # seconds
DEFAULT_NEW_EXERCISE_CATEGORY: Final[str] = "Stretch"

# =============================================================================
# DEFAULT SETTINGS
# =============================================================================

DEFAULT_INTERVAL_MINUTES: Final[int] = 30
DEFAULT_SELECTED_CATEGORY: Final[str] = "All"
DEFAULT_SOUND_ENABLED: Final[bool] = True
DEFAULT_SOUND_VOLUME: Final[float] = 0.5
DEFAULT_AUTO_START: Final[bool] = False
DEFAULT_COOLDOWN_EXERCISES: Final[int] = 5
DEFAULT_NOTIFICATIONS_ENABLED: Final[bool] = True

# =============================================================================
# NOTIFICATIONS
# =============================================================================

BREAK_DUE_TITLE: Final[str] = "Time for a break!"
BREAK_DUE_BODY: Final[str] = "Your micro-break is ready. Click to start exercises."

# =============================================================================
# HISTORY EXPORT
# =============================================================================

CSV_HEADER: Final[tuple[str, ...]] = (
    "Date",
    "Time",
    "Category",
    "Exercise",
    "Status",
    "Duration",
)
# Every CSV row reports this duration regardless of the exercise's own duration.
CSV_DURATION_PLACEHOLDER: Final[str] = "30"

# =============================================================================
# STORAGE
# =============================================================================

HOME_ENV_VAR: Final[str] = "OFFICE_DRILLS_HOME"

BACKUP_FILENAME_TEMPLATE: Final[str] = "office-drills-backup-{date}.json"

KEY_EXERCISES: Final[str] = "exercises"
KEY_RECENT: Final[str] = "recent"
KEY_SESSIONS: Final[str] = "sessions"
KEY_SETTINGS: Final[str] = "settings"


def get_default_data_dir() -> Path:
    """
    Return the data directory for stored catalog, settings and history.

    ``$OFFICE_DRILLS_HOME`` wins when set, otherwise ``~/.office-drills``.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".office-drills"
