"""
Exercise selection for the next break.

Selection is a pure function of (category, settings, cooldown memory,
catalog, random source): it never records what it picked, so a preview that
is never run leaves future selections unaffected.
"""

from __future__ import annotations

import random

from ..utils.logging import get_logger
from .config import EXERCISES_PER_BREAK
from .models import ALL_CATEGORIES, CategoryFilter, CooldownMemory, Exercise, Settings

logger = get_logger(__name__)


class ExerciseSelector:
    """
    Picks up to two exercises for a break.

    Args:
        rng: Random source; pass ``random.Random(seed)`` for reproducible picks
        count: Maximum number of exercises per break
    """

    def __init__(self, rng: random.Random | None = None, count: int = EXERCISES_PER_BREAK):
        self.rng = rng or random.Random()
        self.count = count

    def candidate_pool(
        self,
        category: CategoryFilter,
        settings: Settings,
        cooldown: CooldownMemory,
        catalog: list[Exercise],
    ) -> list[Exercise]:
        """
        Filter the catalog by category and cooldown, preserving catalog order.

        Args:
            category: Category to draw from, or "All"
            settings: Supplies ``cooldown_exercises``
            cooldown: Recently seen exercise ids
            catalog: Full exercise list

        Returns:
            Exercises eligible for selection (may be empty)
        """
        pool = [e for e in catalog if category == ALL_CATEGORIES or e.category == category]
        if settings.cooldown_exercises > 0:
            blocked = set(cooldown.recent(settings.cooldown_exercises))
            pool = [e for e in pool if e.id not in blocked]
        return pool

    def select(
        self,
        category: CategoryFilter,
        settings: Settings,
        cooldown: CooldownMemory,
        catalog: list[Exercise],
    ) -> list[Exercise]:
        """
        Choose exercises for the next break.

        When the filtered pool is empty the first exercises of the unfiltered
        catalog are returned instead, ignoring both category and cooldown.
        An empty catalog yields an empty list.

        Returns:
            Between 0 and ``count`` distinct exercises
        """
        pool = self.candidate_pool(category, settings, cooldown, catalog)

        if not pool:
            if catalog:
                logger.warning(
                    "No %s exercises outside cooldown; falling back to catalog head",
                    category,
                )
            return list(catalog[: self.count])

        if category == ALL_CATEGORIES:
            return self._select_diverse(pool)
        return self.rng.sample(pool, min(self.count, len(pool)))

    def _select_diverse(self, pool: list[Exercise]) -> list[Exercise]:
        """One exercise per category bucket first, then fill from the remainder."""
        buckets: dict[str, list[Exercise]] = {}
        for exercise in pool:
            buckets.setdefault(exercise.category, []).append(exercise)

        order = list(buckets)
        self.rng.shuffle(order)

        selected: list[Exercise] = []
        for cat in order:
            if len(selected) >= self.count:
                break
            selected.append(self.rng.choice(buckets[cat]))

        # Fewer buckets than slots: allow same-category picks.
        while len(selected) < self.count:
            chosen_ids = {e.id for e in selected}
            remaining = [e for e in pool if e.id not in chosen_ids]
            if not remaining:
                break
            selected.append(self.rng.choice(remaining))

        return selected
