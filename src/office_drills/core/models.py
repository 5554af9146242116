"""
Data models for office-drills.

All core dataclasses representing exercises, settings, timer snapshots and
recorded break sessions.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, get_args

from .config import (
    COOLDOWN_CAPACITY,
    DEFAULT_AUTO_START,
    DEFAULT_COOLDOWN_EXERCISES,
    DEFAULT_INTERVAL_MINUTES,
    DEFAULT_NOTIFICATIONS_ENABLED,
    DEFAULT_SELECTED_CATEGORY,
    DEFAULT_SOUND_ENABLED,
    DEFAULT_SOUND_VOLUME,
)

Category = Literal[
    "Neck",
    "Shoulders",
    "Back",
    "Hips",
    "Legs",
    "Feet",
    "Hands",
    "Full-Body",
    "Stretch",
    "Strength",
]
CategoryFilter = Category | Literal["All"]
TimerPhase = Literal["idle", "running", "paused", "expired"]
OutcomeStatus = Literal["Completed", "Skipped", "Incomplete"]

CATEGORIES: tuple[str, ...] = get_args(Category)
ALL_CATEGORIES = "All"


def is_category(value: object) -> bool:
    """Return True if value is one of the fixed exercise categories."""
    return isinstance(value, str) and value in CATEGORIES


def is_category_filter(value: object) -> bool:
    """Return True if value is a category or the 'All' wildcard."""
    return value == ALL_CATEGORIES or is_category(value)


@dataclass(frozen=True)
class Exercise:
    """
    A single micro-break exercise.

    Sessions keep copies of ``id`` and ``name`` rather than references, so an
    exercise can be edited or deleted without rewriting history.
    """

    id: str
    name: str
    description: str
    duration: int  # seconds
    category: Category
    instructions: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.id:
            raise ValueError("Exercise id must be non-empty")
        if not self.name or not self.name.strip():
            raise ValueError("Exercise name must be non-empty")
        if self.duration <= 0:
            raise ValueError("duration must be positive")
        if not is_category(self.category):
            raise ValueError(f"Invalid category: {self.category!r}")


@dataclass
class Settings:
    """User preferences that drive the timer and the selector."""

    interval: int = DEFAULT_INTERVAL_MINUTES  # minutes between breaks
    selected_category: CategoryFilter = DEFAULT_SELECTED_CATEGORY  # type: ignore[assignment]
    sound_enabled: bool = DEFAULT_SOUND_ENABLED
    sound_volume: float = DEFAULT_SOUND_VOLUME
    auto_start: bool = DEFAULT_AUTO_START
    cooldown_exercises: int = DEFAULT_COOLDOWN_EXERCISES
    notifications_enabled: bool = DEFAULT_NOTIFICATIONS_ENABLED

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.interval <= 0:
            raise ValueError("interval must be positive")
        if not is_category_filter(self.selected_category):
            raise ValueError(f"Invalid selected_category: {self.selected_category!r}")
        if not 0.0 <= self.sound_volume <= 1.0:
            raise ValueError("sound_volume must be between 0 and 1")
        if self.cooldown_exercises < 0:
            raise ValueError("cooldown_exercises must be non-negative")


@dataclass
class CooldownMemory:
    """
    Bounded recency list of exercise ids, most recent first.

    Only ``record_seen`` changes it, and each change replaces ``ids`` with a
    new list rather than editing it in place.
    """

    ids: list[str] = field(default_factory=list)
    capacity: int = COOLDOWN_CAPACITY

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.ids = list(self.ids)[: self.capacity]

    def recent(self, count: int) -> list[str]:
        """Return the ``count`` most recently seen ids."""
        if count <= 0:
            return []
        return self.ids[:count]

    def record_seen(self, exercise_ids: list[str]) -> None:
        """Prepend ids in the given order and drop everything past capacity."""
        self.ids = (list(exercise_ids) + self.ids)[: self.capacity]

    def __len__(self) -> int:
        return len(self.ids)


@dataclass(frozen=True)
class ExerciseOutcome:
    """What happened to one offered exercise during a break."""

    exercise_id: str
    exercise_name: str
    completed: bool = False
    skipped: bool = False

    def __post_init__(self) -> None:
        if self.completed and self.skipped:
            raise ValueError("An exercise cannot be both completed and skipped")

    @property
    def status(self) -> OutcomeStatus:
        if self.completed:
            return "Completed"
        if self.skipped:
            return "Skipped"
        return "Incomplete"


@dataclass(frozen=True)
class BreakSession:
    """
    A finished break, as stored in history.

    ``total_duration`` counts the configured duration of every offered
    exercise, skipped ones included.
    """

    id: str
    date: str  # ISO format: YYYY-MM-DD
    timestamp: datetime
    category: CategoryFilter
    exercises: list[ExerciseOutcome] = field(default_factory=list)
    total_duration: int = 0  # seconds

    def __post_init__(self) -> None:
        """Validate session data."""
        if not re.match(r"^\d{4}-\d{2}-\d{2}$", self.date):
            raise ValueError(f"Invalid date format: {self.date}. Expected YYYY-MM-DD")
        try:
            datetime.strptime(self.date, "%Y-%m-%d")
        except ValueError as e:
            raise ValueError(f"Invalid date: {self.date}") from e
        if not is_category_filter(self.category):
            raise ValueError(f"Invalid category: {self.category!r}")
        if self.total_duration < 0:
            raise ValueError("total_duration must be non-negative")

    @property
    def completed_count(self) -> int:
        return sum(1 for e in self.exercises if e.completed)

    @property
    def skipped_count(self) -> int:
        return sum(1 for e in self.exercises if e.skipped)


@dataclass(frozen=True)
class TimerState:
    """
    Immutable snapshot of a countdown.

    ``next_break_time`` is set only while running and not paused. A paused
    timer still reports ``is_running=True``.
    """

    phase: TimerPhase
    time_remaining: int  # seconds
    next_break_time: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.phase in ("running", "paused")

    @property
    def is_paused(self) -> bool:
        return self.phase == "paused"

    @property
    def is_expired(self) -> bool:
        return self.phase == "expired"
