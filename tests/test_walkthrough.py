"""Break walkthrough tests: progression, outcomes and cancellation."""

from datetime import datetime

import pytest

from office_drills.core.models import Exercise
from office_drills.core.scheduler import ManualScheduler
from office_drills.core.walkthrough import BreakWalkthrough


def _ex(ex_id: str, duration: int = 30, category: str = "Neck") -> Exercise:
    return Exercise(
        id=ex_id,
        name=f"Exercise {ex_id}",
        description="",
        duration=duration,
        category=category,  # type: ignore[arg-type]
    )


@pytest.fixture
def scheduler():
    return ManualScheduler(start=datetime(2024, 3, 5, 14, 30, 0))


@pytest.fixture
def walk(scheduler):
    return BreakWalkthrough([_ex("a", 30), _ex("b", 30)], "All", scheduler, id_factory=lambda: "s1")


class TestProgression:
    def test_starts_on_first_exercise_idle(self, walk):
        assert walk.index == 0
        assert walk.current.id == "a"
        assert walk.countdown.phase == "idle"
        assert walk.countdown.time_remaining == 30

    def test_complete_then_skip_finishes(self, walk):
        walk.complete()
        assert walk.current.id == "b"
        walk.skip()

        assert walk.status == "finished"
        assert walk.current is None
        session = walk.outcome.session
        assert [(r.exercise_id, r.completed, r.skipped) for r in session.exercises] == [
            ("a", True, False),
            ("b", False, True),
        ]

    def test_forward_only(self, walk):
        walk.complete()
        walk.complete()
        walk.complete()
        walk.skip()
        assert len(walk.results) == 2

    def test_empty_exercise_list_rejected(self, scheduler):
        with pytest.raises(ValueError):
            BreakWalkthrough([], "All", scheduler)


class TestCountdown:
    def test_expiry_completes_exercise(self, walk, scheduler):
        walk.play()
        scheduler.advance(30)
        assert walk.index == 1
        assert walk.results[0].completed

    def test_next_exercise_waits_for_play(self, walk, scheduler):
        walk.play()
        scheduler.advance(30)
        scheduler.advance(100)
        assert walk.index == 1
        assert walk.countdown.phase == "idle"

    def test_pause_and_resume(self, walk, scheduler):
        walk.play()
        scheduler.advance(10)
        walk.pause()
        scheduler.advance(50)
        assert walk.countdown.time_remaining == 20
        walk.toggle()
        scheduler.advance(20)
        assert walk.index == 1

    def test_manual_complete_cancels_pending_tick(self, walk, scheduler):
        walk.play()
        scheduler.advance(5)
        walk.complete()
        scheduler.advance(30)
        assert walk.index == 1
        assert len(walk.results) == 1

    def test_subscribers_follow_each_exercise(self, walk, scheduler):
        seen = []
        walk.subscribe(lambda s: seen.append(s.time_remaining))
        walk.play()
        scheduler.advance(30)
        walk.play()
        scheduler.advance(1)
        assert seen[-1] == 29
        assert 30 in seen

    def test_whole_break_by_countdown(self, walk, scheduler):
        finished = []
        walk.on_finish(finished.append)
        walk.play()
        scheduler.advance(30)
        walk.play()
        scheduler.advance(30)
        assert walk.status == "finished"
        assert len(finished) == 1
        assert finished[0].seen_ids == ["a", "b"]


class TestOutcome:
    def test_total_duration_counts_skipped(self, walk):
        """Two 30 s exercises, one skipped: still 60 s total."""
        walk.complete()
        walk.skip()
        assert walk.outcome.session.total_duration == 60

    def test_session_metadata(self, walk, scheduler):
        walk.skip()
        walk.skip()
        session = walk.outcome.session
        assert session.id == "s1"
        assert session.date == "2024-03-05"
        assert session.timestamp == datetime(2024, 3, 5, 14, 30, 0)
        assert session.category == "All"

    def test_skipped_not_in_seen_ids(self, walk):
        walk.complete()
        walk.skip()
        assert walk.outcome.seen_ids == ["a"]

    def test_all_skipped_has_no_seen_ids(self, walk):
        walk.skip()
        walk.skip()
        assert walk.outcome.seen_ids == []
        assert walk.outcome.session.completed_count == 0
        assert walk.outcome.session.skipped_count == 2

    def test_category_passed_through(self, scheduler):
        walk = BreakWalkthrough([_ex("a")], "Neck", scheduler)
        walk.complete()
        assert walk.outcome.session.category == "Neck"


class TestCancel:
    def test_cancel_discards_results(self, walk):
        finished = []
        walk.on_finish(finished.append)
        walk.complete()
        walk.cancel()

        assert walk.status == "cancelled"
        assert walk.outcome is None
        assert walk.results == []
        assert finished == []

    def test_cancel_stops_countdown(self, walk, scheduler):
        walk.play()
        scheduler.advance(5)
        walk.cancel()
        assert scheduler.pending == 0
        scheduler.advance(60)
        assert walk.status == "cancelled"

    def test_controls_ignored_after_cancel(self, walk):
        walk.cancel()
        walk.complete()
        walk.play()
        assert walk.results == []
        assert walk.status == "cancelled"
