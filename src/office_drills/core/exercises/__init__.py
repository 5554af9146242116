"""
Default exercise catalog for office-drills.

The bundled catalog is defined in per-category YAML files and loaded once
on first use.
"""

from ..models import Exercise
from .loader import exercise_from_dict, load_default_catalog

_DEFAULT_CATALOG: list[Exercise] | None = None


def default_exercises() -> list[Exercise]:
    """
    Return a copy of the bundled default catalog.

    Raises:
        RuntimeError: If no exercise definitions could be loaded
    """
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        loaded = load_default_catalog()
        if not loaded:
            raise RuntimeError(
                "office-drills: no exercise definitions could be loaded from YAML. "
                "Check that src/office_drills/exercises/*.yaml files are present and valid."
            )
        _DEFAULT_CATALOG = loaded
    return list(_DEFAULT_CATALOG)


__all__ = [
    "default_exercises",
    "exercise_from_dict",
    "load_default_catalog",
]
