"""
YAML → Exercise loader for the default catalog.

The default catalog ships as one YAML file per category in the bundled
``src/office_drills/exercises/`` directory. Each file looks like::

    category: Neck
    exercises:
      - id: neck-1
        name: Neck Rolls
        description: Gentle circular neck movements to relieve tension
        duration: 30
        instructions:
          - Sit up straight with shoulders relaxed

User overrides: place files in ``~/.office-drills/exercises/``.  A user file
with the same stem as a bundled one replaces that category's list; any other
user file adds its exercises to the catalog.

Usage (internal, called by the catalog package):
    from .loader import load_default_catalog
    exercises = load_default_catalog()
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..config import DEFAULT_EXERCISE_DURATION, get_default_data_dir
from ..models import CATEGORIES, Exercise, is_category

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset({"id", "name"})


def exercise_from_dict(d: dict, category: str | None = None) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    ``category`` is used when the entry does not name its own.
    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    cat = d.get("category", category)
    if not is_category(cat):
        raise ValueError(f"Exercise {d['id']!r} has invalid category {cat!r}")

    return Exercise(
        id=str(d["id"]),
        name=str(d["name"]),
        description=str(d.get("description", "")),
        duration=int(d.get("duration", DEFAULT_EXERCISE_DURATION)),
        category=cat,
        instructions=[str(step) for step in d.get("instructions") or []],
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; return {} (with a warning) on any parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"office-drills: cannot read {path.name}: {exc}", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def get_bundled_exercises_dir() -> Path | None:
    """Return path to the bundled exercises/ data directory, or None if not found."""
    # loader.py lives at src/office_drills/core/exercises/loader.py
    # three levels up → src/office_drills/
    candidate = Path(__file__).parent.parent.parent / "exercises"
    return candidate if candidate.is_dir() else None


def get_user_exercises_dir() -> Path | None:
    """Return ~/.office-drills/exercises/ if it exists, else None."""
    p = get_default_data_dir() / "exercises"
    return p if p.is_dir() else None


def _file_exercises(path: Path) -> list[Exercise]:
    raw = _load_yaml_file(path)
    if not raw:
        return []
    category = raw.get("category")
    result: list[Exercise] = []
    for entry in raw.get("exercises") or []:
        if not isinstance(entry, dict):
            continue
        try:
            result.append(exercise_from_dict(entry, category))
        except (ValueError, TypeError) as exc:
            warnings.warn(
                f"office-drills: skipping exercise in '{path.stem}': {exc}",
                stacklevel=2,
            )
    return result


def _category_rank(exercises: list[Exercise]) -> int:
    if not exercises:
        return len(CATEGORIES)
    return CATEGORIES.index(exercises[0].category)


def load_default_catalog(
    bundled_dir: Path | None = None,
    user_dir: Path | None = None,
) -> list[Exercise]:
    """Return the default exercise catalog in category order.

    Args:
        bundled_dir: Directory of bundled YAML files (default: package data)
        user_dir: Directory of user overrides (default: ~/.office-drills/exercises)

    Returns:
        Exercises grouped by category in the fixed category order; empty
        list if no files could be read.
    """
    bundled_dir = bundled_dir or get_bundled_exercises_dir()
    user_dir = user_dir or get_user_exercises_dir()

    sources: dict[str, Path] = {}
    if bundled_dir is not None:
        for p in sorted(bundled_dir.glob("*.yaml")):
            sources[p.stem] = p
    if user_dir is not None:
        for p in sorted(user_dir.glob("*.yaml")):
            sources[p.stem] = p  # same stem replaces bundled

    groups = [_file_exercises(p) for p in sources.values()]
    groups.sort(key=_category_rank)

    catalog: list[Exercise] = []
    seen: set[str] = set()
    for group in groups:
        for exercise in group:
            if exercise.id in seen:
                warnings.warn(
                    f"office-drills: duplicate exercise id '{exercise.id}' ignored",
                    stacklevel=2,
                )
                continue
            seen.add(exercise.id)
            catalog.append(exercise)
    return catalog
