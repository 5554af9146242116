"""
JSON and CSV serialization for office-drills models.

Handles conversion between dataclasses and JSON-compatible dicts, the
catalog import/export format and the history CSV export.
"""

import csv
import io
import json
import re
from datetime import datetime
from typing import Any, Callable

from ..core.config import CSV_DURATION_PLACEHOLDER, CSV_HEADER, DEFAULT_EXERCISE_DURATION
from ..core.models import (
    BreakSession,
    Exercise,
    ExerciseOutcome,
    Settings,
    is_category,
    is_category_filter,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


class CatalogImportError(ValidationError):
    """Raised when an exercise import file is not a JSON array of objects."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


# =============================================================================
# Exercises
# =============================================================================


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert Exercise to JSON-compatible dict."""
    return {
        "id": exercise.id,
        "name": exercise.name,
        "description": exercise.description,
        "duration": exercise.duration,
        "category": exercise.category,
        "instructions": list(exercise.instructions),
    }


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    """
    Convert a stored dict to Exercise.

    Raises:
        ValidationError: If data is invalid
    """
    if not data.get("id"):
        raise ValidationError("Exercise id is required")
    if not str(data.get("name") or "").strip():
        raise ValidationError("Exercise name is required")
    if not is_category(data.get("category")):
        raise ValidationError(f"Invalid category: {data.get('category')!r}")
    validate_positive(data.get("duration", 0), "duration")

    return Exercise(
        id=str(data["id"]),
        name=str(data["name"]),
        description=str(data.get("description", "")),
        duration=int(data["duration"]),
        category=data["category"],
        instructions=[str(s) for s in data.get("instructions") or []],
    )


def _import_duration(raw: Any) -> int:
    """Positive integer duration, or the default for anything else."""
    if isinstance(raw, bool):
        return DEFAULT_EXERCISE_DURATION
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_EXERCISE_DURATION
    return value if value > 0 else DEFAULT_EXERCISE_DURATION


def parse_exercise_import(
    text: str,
    id_factory: Callable[[], str],
) -> tuple[list[Exercise], int]:
    """
    Parse an exercise import file.

    Each record needs a non-empty ``name`` and a valid ``category``; records
    without them are skipped. Accepted records get a new id from
    ``id_factory`` (ids in the file are ignored).

    Args:
        text: File contents (JSON array)
        id_factory: Produces a fresh id per accepted record

    Returns:
        (accepted exercises, number of rejected records)

    Raises:
        CatalogImportError: If the text is not JSON or not an array
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogImportError(f"Invalid JSON file format: {e}") from e

    if not isinstance(data, list):
        raise CatalogImportError("Invalid JSON file format: expected an array of exercises")

    accepted: list[Exercise] = []
    rejected = 0
    for record in data:
        if (
            not isinstance(record, dict)
            or not isinstance(record.get("name"), str)
            or not record["name"].strip()
            or not is_category(record.get("category"))
        ):
            rejected += 1
            continue

        instructions = record.get("instructions")
        accepted.append(
            Exercise(
                id=id_factory(),
                name=record["name"],
                description=str(record.get("description") or ""),
                duration=_import_duration(record.get("duration")),
                category=record["category"],
                instructions=[str(s) for s in instructions] if isinstance(instructions, list) else [],
            )
        )

    return accepted, rejected


def exercises_to_json(exercises: list[Exercise]) -> str:
    """Pretty-printed JSON array of exercises (catalog export format)."""
    return json.dumps([exercise_to_dict(e) for e in exercises], indent=2)


# =============================================================================
# Settings
# =============================================================================


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Convert Settings to JSON-compatible dict."""
    return {
        "interval": settings.interval,
        "selected_category": settings.selected_category,
        "sound_enabled": settings.sound_enabled,
        "sound_volume": settings.sound_volume,
        "auto_start": settings.auto_start,
        "cooldown_exercises": settings.cooldown_exercises,
        "notifications_enabled": settings.notifications_enabled,
    }


def dict_to_settings(data: dict[str, Any]) -> Settings:
    """
    Convert dict to Settings.

    Missing keys take their defaults; unknown keys are ignored.

    Raises:
        ValidationError: If a present value is invalid
    """
    defaults = Settings()
    category = data.get("selected_category", defaults.selected_category)
    if not is_category_filter(category):
        raise ValidationError(f"Invalid selected_category: {category!r}")

    try:
        interval = int(data.get("interval", defaults.interval))
        volume = float(data.get("sound_volume", defaults.sound_volume))
        cooldown = int(data.get("cooldown_exercises", defaults.cooldown_exercises))
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid settings value: {e}") from e

    validate_positive(interval, "interval")
    validate_non_negative(cooldown, "cooldown_exercises")
    if not 0.0 <= volume <= 1.0:
        raise ValidationError(f"sound_volume must be between 0 and 1, got {volume}")

    flags = {}
    for field_name in ("sound_enabled", "auto_start", "notifications_enabled"):
        value = data.get(field_name, getattr(defaults, field_name))
        if not isinstance(value, bool):
            raise ValidationError(f"{field_name} must be true or false, got {value!r}")
        flags[field_name] = value

    return Settings(
        interval=interval,
        selected_category=category,
        sound_volume=volume,
        cooldown_exercises=cooldown,
        **flags,
    )


# =============================================================================
# Sessions
# =============================================================================


def outcome_to_dict(outcome: ExerciseOutcome) -> dict[str, Any]:
    return {
        "exercise_id": outcome.exercise_id,
        "exercise_name": outcome.exercise_name,
        "completed": outcome.completed,
        "skipped": outcome.skipped,
    }


def dict_to_outcome(data: dict[str, Any]) -> ExerciseOutcome:
    if data.get("completed") and data.get("skipped"):
        raise ValidationError("Outcome cannot be both completed and skipped")
    return ExerciseOutcome(
        exercise_id=str(data["exercise_id"]),
        exercise_name=str(data.get("exercise_name", "")),
        completed=bool(data.get("completed", False)),
        skipped=bool(data.get("skipped", False)),
    )


def session_to_dict(session: BreakSession) -> dict[str, Any]:
    """
    Convert BreakSession to JSON-compatible dict.

    Args:
        session: BreakSession to convert

    Returns:
        Dict representation (timestamp as ISO 8601)
    """
    return {
        "id": session.id,
        "date": session.date,
        "timestamp": session.timestamp.isoformat(),
        "category": session.category,
        "exercises": [outcome_to_dict(e) for e in session.exercises],
        "total_duration": session.total_duration,
    }


def _parse_timestamp(raw: Any) -> datetime:
    """ISO 8601 string, or epoch milliseconds as written by older exports."""
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return datetime.fromtimestamp(raw / 1000)
    if isinstance(raw, str):
        try:
            return datetime.fromisoformat(raw)
        except ValueError as e:
            raise ValidationError(f"Invalid timestamp: {raw}") from e
    raise ValidationError(f"Invalid timestamp: {raw!r}")


def dict_to_session(data: dict[str, Any]) -> BreakSession:
    """
    Convert dict to BreakSession.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date", ""))
    if not is_category_filter(data.get("category")):
        raise ValidationError(f"Invalid category: {data.get('category')!r}")
    validate_non_negative(data.get("total_duration", 0), "total_duration")

    try:
        exercises = [dict_to_outcome(e) for e in data.get("exercises", [])]
    except (KeyError, TypeError, AttributeError) as e:
        raise ValidationError(f"Invalid exercise outcome: {e}") from e

    return BreakSession(
        id=str(data["id"]),
        date=data["date"],
        timestamp=_parse_timestamp(data.get("timestamp")),
        category=data["category"],
        exercises=exercises,
        total_duration=int(data.get("total_duration", 0)),
    )


def sessions_to_csv(sessions: list[BreakSession]) -> str:
    """
    Render history as CSV, one row per exercise outcome.

    The Duration column always holds the same placeholder value, whatever
    the exercise's configured duration.

    Args:
        sessions: Sessions in display order

    Returns:
        CSV text with header row
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for session in sessions:
        time_str = session.timestamp.strftime("%H:%M:%S")
        for outcome in session.exercises:
            writer.writerow(
                [
                    session.date,
                    time_str,
                    session.category,
                    outcome.exercise_name,
                    outcome.status,
                    CSV_DURATION_PLACEHOLDER,
                ]
            )
    return buf.getvalue()


# =============================================================================
# Full backup
# =============================================================================


def backup_to_json(
    settings: Settings,
    exercises: list[Exercise],
    sessions: list[BreakSession],
) -> str:
    """Render settings, catalog and history as one pretty-printed JSON object."""
    return json.dumps(
        {
            "settings": settings_to_dict(settings),
            "exercises": [exercise_to_dict(e) for e in exercises],
            "sessions": [session_to_dict(s) for s in sessions],
        },
        indent=2,
    )
