"""
Exercise selection tests.

Selection is random, so most properties are checked across many seeds.
"""

import random

import pytest

from office_drills.core.models import CooldownMemory, Exercise, Settings
from office_drills.core.selector import ExerciseSelector

SEEDS = range(50)


def _ex(ex_id: str, category: str = "Neck", duration: int = 30) -> Exercise:
    return Exercise(
        id=ex_id,
        name=f"Exercise {ex_id}",
        description="",
        duration=duration,
        category=category,  # type: ignore[arg-type]
    )


@pytest.fixture
def catalog() -> list[Exercise]:
    return [
        _ex("n1", "Neck"),
        _ex("n2", "Neck"),
        _ex("n3", "Neck"),
        _ex("s1", "Shoulders"),
        _ex("s2", "Shoulders"),
        _ex("b1", "Back"),
        _ex("l1", "Legs"),
    ]


def _selector(seed: int) -> ExerciseSelector:
    return ExerciseSelector(random.Random(seed))


class TestSpecificCategory:
    def test_two_distinct_from_category(self, catalog):
        settings = Settings(cooldown_exercises=0)
        for seed in SEEDS:
            picked = _selector(seed).select("Neck", settings, CooldownMemory(), catalog)
            assert len(picked) == 2
            assert len({e.id for e in picked}) == 2
            assert all(e.category == "Neck" for e in picked)

    def test_single_eligible_exercise(self, catalog):
        picked = _selector(0).select("Back", Settings(), CooldownMemory(), catalog)
        assert [e.id for e in picked] == ["b1"]

    def test_same_seed_same_pick(self, catalog):
        settings = Settings(cooldown_exercises=0)
        a = _selector(7).select("Neck", settings, CooldownMemory(), catalog)
        b = _selector(7).select("Neck", settings, CooldownMemory(), catalog)
        assert a == b


class TestAllCategories:
    def test_picks_from_different_categories(self, catalog):
        """With several categories available, "All" never doubles up on one."""
        settings = Settings(cooldown_exercises=0)
        for seed in SEEDS:
            picked = _selector(seed).select("All", settings, CooldownMemory(), catalog)
            assert len(picked) == 2
            assert picked[0].category != picked[1].category

    def test_every_category_can_be_chosen(self, catalog):
        settings = Settings(cooldown_exercises=0)
        seen = set()
        for seed in range(200):
            for e in _selector(seed).select("All", settings, CooldownMemory(), catalog):
                seen.add(e.category)
        assert seen == {"Neck", "Shoulders", "Back", "Legs"}

    def test_single_category_pool_fills_without_repeats(self):
        catalog = [_ex("n1"), _ex("n2"), _ex("n3")]
        for seed in SEEDS:
            picked = _selector(seed).select("All", Settings(cooldown_exercises=0), CooldownMemory(), catalog)
            assert len(picked) == 2
            assert picked[0].id != picked[1].id

    def test_single_exercise_pool(self):
        catalog = [_ex("only", "Feet")]
        picked = _selector(0).select("All", Settings(), CooldownMemory(), catalog)
        assert [e.id for e in picked] == ["only"]


class TestCooldown:
    def test_recent_exercises_excluded(self, catalog):
        settings = Settings(cooldown_exercises=2)
        cooldown = CooldownMemory(ids=["n1", "n2", "n3"])
        for seed in SEEDS:
            picked = _selector(seed).select("Neck", settings, cooldown, catalog)
            # Only the two most recent ids are blocked.
            assert [e.id for e in picked] == ["n3"]

    def test_zero_cooldown_ignores_memory(self, catalog):
        settings = Settings(cooldown_exercises=0)
        cooldown = CooldownMemory(ids=["n1", "n2", "n3"])
        pool = _selector(0).candidate_pool("Neck", settings, cooldown, catalog)
        assert [e.id for e in pool] == ["n1", "n2", "n3"]

    def test_candidate_pool_preserves_catalog_order(self, catalog):
        settings = Settings(cooldown_exercises=5)
        cooldown = CooldownMemory(ids=["s1", "n2"])
        pool = _selector(0).candidate_pool("All", settings, cooldown, catalog)
        assert [e.id for e in pool] == ["n1", "n3", "s2", "b1", "l1"]


class TestFallback:
    def test_empty_pool_falls_back_to_catalog_head(self, catalog):
        """Everything in the category is cooling down: the first two catalog entries are used."""
        settings = Settings(cooldown_exercises=5)
        cooldown = CooldownMemory(ids=["b1"])
        for seed in SEEDS:
            picked = _selector(seed).select("Back", settings, cooldown, catalog)
            assert [e.id for e in picked] == ["n1", "n2"]

    def test_fallback_ignores_category(self):
        catalog = [_ex("n1", "Neck"), _ex("s1", "Shoulders")]
        picked = _selector(0).select("Feet", Settings(), CooldownMemory(), catalog)
        assert [e.id for e in picked] == ["n1", "s1"]

    def test_fallback_logs_warning(self, catalog, caplog):
        settings = Settings(cooldown_exercises=5)
        with caplog.at_level("WARNING", logger="office_drills"):
            _selector(0).select("Back", settings, CooldownMemory(ids=["b1"]), catalog)
        assert "falling back" in caplog.text

    def test_empty_catalog_returns_empty(self):
        assert _selector(0).select("All", Settings(), CooldownMemory(), []) == []


class TestPurity:
    def test_select_does_not_mutate_inputs(self, catalog):
        settings = Settings(cooldown_exercises=3)
        cooldown = CooldownMemory(ids=["n1"])
        before_catalog = list(catalog)
        before_ids = list(cooldown.ids)

        for seed in SEEDS:
            _selector(seed).select("All", settings, cooldown, catalog)

        assert catalog == before_catalog
        assert cooldown.ids == before_ids
        assert settings == Settings(cooldown_exercises=3)


class TestCooldownMemory:
    def test_record_seen_prepends_in_order(self):
        memory = CooldownMemory(ids=["a"])
        memory.record_seen(["b", "c"])
        assert memory.ids == ["b", "c", "a"]

    def test_capacity_is_twenty(self):
        memory = CooldownMemory()
        for i in range(15):
            memory.record_seen([f"x{i}", f"y{i}"])
        assert len(memory) == 20
        assert memory.ids[0] == "x14"

    def test_record_seen_replaces_list(self):
        memory = CooldownMemory(ids=["a"])
        old = memory.ids
        memory.record_seen(["b"])
        assert old == ["a"]
        assert memory.ids is not old

    def test_recent_non_positive(self):
        assert CooldownMemory(ids=["a"]).recent(0) == []
