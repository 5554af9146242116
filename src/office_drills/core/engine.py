"""
Break engine: wires the timer, the selector and the walkthrough together.

Control flow for one cycle:

    timer expires -> notification -> begin_break() selects exercises and
    returns a walkthrough -> caller drives it -> record_completion() stores
    the session, feeds completed ids into cooldown memory and resets the
    timer (restarting it when auto-start is on).
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from ..utils.logging import get_logger
from .config import BREAK_DUE_BODY, BREAK_DUE_TITLE
from .models import CategoryFilter, CooldownMemory, Exercise, Settings, TimerState
from .scheduler import Scheduler
from .selector import ExerciseSelector
from .timer import TimerController
from .walkthrough import BreakOutcome, BreakWalkthrough

if TYPE_CHECKING:
    from ..io.catalog_store import ExerciseCatalog
    from ..io.history_store import HistoryStore
    from ..io.notifier import Notifier
    from ..io.settings_store import SettingsStore

logger = get_logger(__name__)


class NoExercisesAvailable(Exception):
    """Raised when a break is requested but the catalog is empty."""

    pass


class BreakEngine:
    """
    Owns the break timer and the cooldown memory for one user.

    Args:
        settings_store: Settings persistence
        catalog: Exercise catalog (also persists cooldown memory)
        history: Session history
        notifier: Notification port
        scheduler: Tick source shared by the timer and walkthroughs
        rng: Random source for exercise selection
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        catalog: ExerciseCatalog,
        history: HistoryStore,
        notifier: Notifier,
        scheduler: Scheduler,
        rng: random.Random | None = None,
    ):
        self.settings_store = settings_store
        self.catalog = catalog
        self.history = history
        self.notifier = notifier
        self.scheduler = scheduler
        self.selector = ExerciseSelector(rng)

        self.settings: Settings = settings_store.load()
        self.cooldown: CooldownMemory = catalog.load_cooldown()
        self.timer = TimerController(self.settings.interval, scheduler)
        self.timer.on_expire(self._on_break_due)
        self.break_due = False

    # ------------------------------------------------------------------
    # Timer events
    # ------------------------------------------------------------------

    def _on_break_due(self, state: TimerState) -> None:
        self.break_due = True
        logger.info("Break due")
        if self.settings.notifications_enabled:
            self.notifier.fire(BREAK_DUE_TITLE, BREAK_DUE_BODY)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def preview(self, category: CategoryFilter | None = None) -> list[Exercise]:
        """Select exercises without starting a break or touching cooldown."""
        category = category or self.settings.selected_category
        return self.selector.select(category, self.settings, self.cooldown, self.catalog.load())

    def begin_break(self, category: CategoryFilter | None = None) -> BreakWalkthrough:
        """
        Select exercises and start a walkthrough for them.

        Args:
            category: Override the configured category for this break

        Returns:
            A new walkthrough positioned on the first exercise

        Raises:
            NoExercisesAvailable: If the catalog has no exercises at all
        """
        category = category or self.settings.selected_category
        exercises = self.preview(category)
        if not exercises:
            raise NoExercisesAvailable(
                "No exercises available. Add some exercises or change your category selection."
            )
        self.break_due = False
        return BreakWalkthrough(exercises, category, self.scheduler)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_completion(self, outcome: BreakOutcome) -> None:
        """
        Store a finished break and prepare the next cycle.

        Only ``outcome.seen_ids`` (completed exercises) enter cooldown.
        """
        self.history.append_session(outcome.session)
        self.cooldown.record_seen(outcome.seen_ids)
        self.catalog.save_cooldown(self.cooldown)
        logger.info(
            "Recorded break %s: %d completed, %d skipped",
            outcome.session.id,
            outcome.session.completed_count,
            outcome.session.skipped_count,
        )

        self.timer.reset()
        if self.settings.auto_start:
            self.timer.start()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def apply_settings(self, settings: Settings) -> None:
        """Persist new settings and resize the timer when it is idle."""
        self.settings_store.save(settings)
        self.settings = settings
        self.timer.configure(settings.interval)
        if self.timer.phase == "idle":
            self.timer.reset()

    def reload_cooldown(self) -> None:
        """Re-read cooldown memory (e.g. after a catalog reset)."""
        self.cooldown = self.catalog.load_cooldown()
