"""
Exercise catalog and cooldown memory storage.

The catalog is stored under the ``exercises`` key and the cooldown ids under
``recent``. Both are replaced as whole values on every change.
"""

import uuid
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable

from ..core.config import KEY_EXERCISES, KEY_RECENT
from ..core.exercises import default_exercises
from ..core.models import CooldownMemory, Exercise
from ..utils.logging import get_logger
from .serializers import (
    CatalogImportError,
    ValidationError,
    dict_to_exercise,
    exercise_to_dict,
    exercises_to_json,
    parse_exercise_import,
)
from .store import KeyValueStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImportSummary:
    """Result of an exercise import."""

    accepted: int
    rejected: int


def new_exercise_id() -> str:
    return uuid.uuid4().hex


class ExerciseCatalog:
    """
    Manages the live exercise catalog.

    Until something is saved the catalog is the bundled default set.

    Args:
        store: Persistence port
        defaults: Returns the default catalog (default: bundled YAML catalog)
        id_factory: Produces ids for new and imported exercises
    """

    def __init__(
        self,
        store: KeyValueStore,
        defaults: Callable[[], list[Exercise]] = default_exercises,
        id_factory: Callable[[], str] = new_exercise_id,
    ):
        self.store = store
        self._defaults = defaults
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def load(self) -> list[Exercise]:
        """
        Load the catalog.

        Returns:
            Stored exercises in stored order, or the defaults if none are stored

        Raises:
            ValidationError: If a stored record is invalid
        """
        raw = self.store.get(KEY_EXERCISES)
        if raw is None:
            return self._defaults()
        if not isinstance(raw, list):
            raise ValidationError("Stored exercise catalog is not a list")

        exercises: list[Exercise] = []
        for i, item in enumerate(raw, 1):
            try:
                exercises.append(dict_to_exercise(item))
            except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
                raise ValidationError(f"Error parsing stored exercise #{i}: {e}") from e
        return exercises

    def save(self, exercises: list[Exercise]) -> None:
        self.store.set(KEY_EXERCISES, [exercise_to_dict(e) for e in exercises])

    def get(self, exercise_id: str) -> Exercise:
        """Raises KeyError if no exercise has this id."""
        for exercise in self.load():
            if exercise.id == exercise_id:
                return exercise
        raise KeyError(exercise_id)

    def add(self, exercise: Exercise) -> Exercise:
        """Append an exercise; a fresh id is assigned when ``exercise.id`` is taken."""
        exercises = self.load()
        if any(e.id == exercise.id for e in exercises):
            exercise = replace(exercise, id=self._id_factory())
        self.save(exercises + [exercise])
        return exercise

    def create(
        self,
        name: str,
        category: str,
        duration: int,
        description: str = "",
        instructions: list[str] | None = None,
    ) -> Exercise:
        """Build a new exercise with a generated id and append it."""
        exercise = Exercise(
            id=self._id_factory(),
            name=name,
            description=description,
            duration=duration,
            category=category,  # type: ignore[arg-type]
            instructions=list(instructions or []),
        )
        return self.add(exercise)

    def update(self, exercise: Exercise) -> None:
        """
        Replace the exercise with the same id.

        Raises:
            KeyError: If no exercise has this id
        """
        exercises = self.load()
        for i, existing in enumerate(exercises):
            if existing.id == exercise.id:
                exercises[i] = exercise
                self.save(exercises)
                return
        raise KeyError(exercise.id)

    def delete(self, exercise_id: str) -> None:
        """
        Remove the exercise with this id.

        Raises:
            KeyError: If no exercise has this id
        """
        exercises = self.load()
        remaining = [e for e in exercises if e.id != exercise_id]
        if len(remaining) == len(exercises):
            raise KeyError(exercise_id)
        self.save(remaining)

    def reset_to_defaults(self) -> None:
        """Restore the bundled catalog and clear the cooldown memory."""
        self.save(self._defaults())
        self.save_cooldown(CooldownMemory())

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_json(self, text: str) -> ImportSummary:
        """
        Append exercises from an import file.

        Valid records are added even when others in the same file are
        rejected. Re-importing the same file adds the records again.

        Raises:
            CatalogImportError: If the file is not a JSON array (catalog untouched)
        """
        accepted, rejected = parse_exercise_import(text, self._id_factory)
        if accepted:
            self.save(self.load() + accepted)
        logger.info("Imported %d exercises (%d rejected)", len(accepted), rejected)
        return ImportSummary(accepted=len(accepted), rejected=rejected)

    def import_file(self, path: Path) -> ImportSummary:
        """
        Import exercises from a UTF-8 JSON file.

        Raises:
            CatalogImportError: If the file cannot be read or decoded
        """
        try:
            text = Path(path).read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CatalogImportError(f"Could not read {path}: {e}") from e
        return self.import_json(text)

    def export_json(self) -> str:
        return exercises_to_json(self.load())

    # ------------------------------------------------------------------
    # Cooldown memory
    # ------------------------------------------------------------------

    def load_cooldown(self) -> CooldownMemory:
        raw = self.store.get(KEY_RECENT, [])
        if not isinstance(raw, list):
            logger.warning("Stored cooldown memory is not a list; starting empty")
            return CooldownMemory()
        return CooldownMemory(ids=[str(i) for i in raw])

    def save_cooldown(self, memory: CooldownMemory) -> None:
        self.store.set(KEY_RECENT, list(memory.ids))
