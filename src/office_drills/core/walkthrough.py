"""
Break walkthrough: steps through the offered exercises and records outcomes.

The walk is forward-only. Each exercise runs its own Countdown; the current
exercise ends by completion (manual or countdown expiry) or skip, and the
whole walk can be cancelled at any point. Finishing the last exercise
produces a BreakOutcome; cancelling produces nothing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Callable, Literal

from ..utils.logging import get_logger
from .models import BreakSession, CategoryFilter, Exercise, ExerciseOutcome, TimerState
from .scheduler import Scheduler
from .timer import Countdown

logger = get_logger(__name__)

WalkthroughStatus = Literal["active", "finished", "cancelled"]


@dataclass(frozen=True)
class BreakOutcome:
    """A finished break plus the exercise ids that should enter cooldown."""

    session: BreakSession
    seen_ids: list[str] = field(default_factory=list)


class BreakWalkthrough:
    """
    Drives one break through its exercises.

    Args:
        exercises: Exercises offered for this break, in order
        category: Category the exercises were selected for
        scheduler: Tick source for the per-exercise countdown
        id_factory: Produces the session id (default: uuid4 hex)
    """

    def __init__(
        self,
        exercises: list[Exercise],
        category: CategoryFilter,
        scheduler: Scheduler,
        id_factory: Callable[[], str] | None = None,
    ):
        if not exercises:
            raise ValueError("A break needs at least one exercise")
        self.exercises = list(exercises)
        self.category = category
        self._scheduler = scheduler
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._index = 0
        self._results: list[ExerciseOutcome] = []
        self._status: WalkthroughStatus = "active"
        self._outcome: BreakOutcome | None = None
        self._finish_listeners: list[Callable[[BreakOutcome], None]] = []
        self._state_listeners: list[Callable[[TimerState], None]] = []
        self._countdown = self._make_countdown(self.exercises[0])

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def status(self) -> WalkthroughStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status == "active"

    @property
    def index(self) -> int:
        """0-based position of the current exercise."""
        return self._index

    @property
    def current(self) -> Exercise | None:
        return self.exercises[self._index] if self.is_active else None

    @property
    def countdown(self) -> TimerState:
        return self._countdown.state

    @property
    def results(self) -> list[ExerciseOutcome]:
        """Outcomes recorded so far (empty after cancel)."""
        return list(self._results)

    @property
    def outcome(self) -> BreakOutcome | None:
        """Set once the last exercise has been completed or skipped."""
        return self._outcome

    def on_finish(self, listener: Callable[[BreakOutcome], None]) -> None:
        self._finish_listeners.append(listener)

    def subscribe(self, listener: Callable[[TimerState], None]) -> None:
        """Follow the countdown of every exercise in turn."""
        self._state_listeners.append(listener)
        self._countdown.subscribe(listener)

    # ------------------------------------------------------------------
    # Per-exercise controls
    # ------------------------------------------------------------------

    def play(self) -> None:
        """Start or resume the current exercise's countdown."""
        if not self.is_active:
            return
        if self._countdown.phase == "paused":
            self._countdown.resume()
        else:
            self._countdown.start()

    def pause(self) -> None:
        if self.is_active:
            self._countdown.pause()

    def toggle(self) -> None:
        if self._countdown.phase == "running":
            self.pause()
        else:
            self.play()

    def complete(self) -> None:
        """Mark the current exercise done and move on."""
        self._exit_current(completed=True)

    def skip(self) -> None:
        """Mark the current exercise skipped and move on."""
        self._exit_current(completed=False)

    def cancel(self) -> None:
        """Abandon the break; nothing recorded so far is kept."""
        if not self.is_active:
            return
        self._countdown.stop()
        self._results = []
        self._status = "cancelled"
        logger.debug("walkthrough cancelled at exercise %d", self._index + 1)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _make_countdown(self, exercise: Exercise) -> Countdown:
        countdown = Countdown(exercise.duration, self._scheduler, name=f"exercise:{exercise.id}")
        countdown.on_expire(lambda _state: self.complete())
        for listener in self._state_listeners:
            countdown.subscribe(listener)
        return countdown

    def _exit_current(self, completed: bool) -> None:
        if not self.is_active:
            return
        exercise = self.exercises[self._index]
        self._countdown.stop()
        self._results.append(
            ExerciseOutcome(
                exercise_id=exercise.id,
                exercise_name=exercise.name,
                completed=completed,
                skipped=not completed,
            )
        )
        if self._index + 1 < len(self.exercises):
            self._index += 1
            self._countdown = self._make_countdown(self.exercises[self._index])
        else:
            self._finish()

    def _finish(self) -> None:
        now = self._scheduler.now()
        session = BreakSession(
            id=self._id_factory(),
            date=now.strftime("%Y-%m-%d"),
            timestamp=now,
            category=self.category,
            exercises=list(self._results),
            total_duration=sum(e.duration for e in self.exercises),
        )
        self._status = "finished"
        self._outcome = BreakOutcome(
            session=session,
            seen_ids=[r.exercise_id for r in self._results if r.completed],
        )
        logger.debug(
            "walkthrough finished: %d completed, %d skipped",
            session.completed_count,
            session.skipped_count,
        )
        for listener in list(self._finish_listeners):
            listener(self._outcome)
