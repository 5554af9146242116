"""Break commands: start, break-now, preview, and the interactive walkthrough."""

from typing import Annotated, Optional

import typer

from ...core.engine import BreakEngine, NoExercisesAvailable
from ...core.models import CATEGORIES, ALL_CATEGORIES, TimerState, is_category_filter
from ...core.scheduler import RealtimeScheduler
from ...core.timer import TimerController
from ...core.walkthrough import BreakOutcome, BreakWalkthrough
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, app, get_engine

CategoryOption = Annotated[
    Optional[str],
    typer.Option(
        "--category",
        "-c",
        help=f"Category for this break: {ALL_CATEGORIES}, {', '.join(CATEGORIES)}",
    ),
]


def _check_category(category: str | None) -> None:
    if category is not None and not is_category_filter(category):
        views.print_error(
            f"Unknown category: {category}. Valid: {ALL_CATEGORIES}, {', '.join(CATEGORIES)}"
        )
        raise typer.Exit(1)


def _load_engine(data_dir, scheduler=None, seed=None) -> BreakEngine:
    try:
        return get_engine(data_dir, scheduler=scheduler, seed=seed)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def run_walkthrough(walk: BreakWalkthrough, scheduler: RealtimeScheduler) -> BreakOutcome | None:
    """
    Drive a walkthrough from the terminal.

    Each exercise offers: run its countdown (auto-completes when it ends),
    mark it done, skip it, or cancel the whole break. Ctrl+C while a
    countdown runs pauses it.

    Returns:
        The outcome, or None if the break was cancelled
    """
    status_holder: dict = {"status": None}

    def show(state: TimerState) -> None:
        status = status_holder["status"]
        if status is not None:
            status.update(f"{views.format_clock(state.time_remaining)} remaining")

    walk.subscribe(show)

    while walk.is_active:
        exercise = walk.current
        position = walk.index
        views.print_exercise_card(exercise, position, len(walk.exercises))
        choice = views.console.input(
            "\\[t] start timer  \\[d] done  \\[s] skip  \\[c] cancel session  (default t): "
        ).strip().lower() or "t"

        if choice in ("t", "timer", "start"):
            walk.play()
            try:
                with views.console.status(
                    f"{views.format_clock(walk.countdown.time_remaining)} remaining"
                ) as status:
                    status_holder["status"] = status
                    scheduler.run_until(lambda: walk.index != position or not walk.is_active)
            except KeyboardInterrupt:
                walk.pause()
                views.print_info("Paused.")
            finally:
                status_holder["status"] = None
            if walk.index != position or not walk.is_active:
                views.print_success(f"Time! {exercise.name} completed.")
        elif choice in ("d", "done"):
            walk.complete()
        elif choice in ("s", "skip"):
            walk.skip()
        elif choice in ("c", "cancel"):
            if views.confirm_action("Cancel this break? Nothing will be recorded."):
                walk.cancel()
        else:
            views.print_error(f"Unknown choice: {choice}")

    return walk.outcome


def _run_break(engine: BreakEngine, scheduler: RealtimeScheduler, category: str | None) -> bool:
    """Run one break interactively; returns True if it was recorded."""
    try:
        walk = engine.begin_break(category)  # type: ignore[arg-type]
    except NoExercisesAvailable as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    outcome = run_walkthrough(walk, scheduler)
    if outcome is None:
        views.print_info("Break cancelled. Nothing recorded.")
        return False

    engine.record_completion(outcome)
    views.print_session_summary(outcome.session)
    return True


def _prompt_break_due() -> int | None:
    """Ask what to do when a break is due; returns snooze minutes or None to start."""
    while True:
        raw = views.console.input(
            "Start break now? \\[Enter] start, or snooze minutes (e.g. 5): "
        ).strip()
        if not raw:
            return None
        try:
            minutes = int(raw)
        except ValueError:
            views.print_error("Enter a number of minutes or press Enter")
            continue
        if minutes <= 0:
            views.print_error("Snooze minutes must be positive")
            continue
        return minutes


def _prompt_timer_control(timer: TimerController) -> bool:
    """
    Pause the break timer and ask how to continue.

    Returns:
        True to keep the timer loop going, False to quit
    """
    timer.pause()
    views.print_info(f"Paused with {views.format_clock(timer.time_remaining)} left.")
    while True:
        try:
            choice = views.console.input(
                "\\[r] resume  \\[s] reset  \\[q] quit  (default r): "
            ).strip().lower() or "r"
        except (KeyboardInterrupt, EOFError):
            choice = "q"

        if choice in ("r", "resume"):
            timer.resume()
            return True
        if choice in ("s", "reset"):
            timer.reset()
            timer.start()
            views.print_info("Timer reset.")
            return True
        if choice in ("q", "quit"):
            timer.stop()
            views.print_info("Timer stopped.")
            return False
        views.print_error(f"Unknown choice: {choice}")


@app.command()
def start(
    data_dir: DataDirOption = None,
    interval: Annotated[
        Optional[int],
        typer.Option("--interval", "-i", help="Minutes until the break (overrides settings)"),
    ] = None,
    category: CategoryOption = None,
    once: Annotated[
        bool,
        typer.Option("--once", help="Exit after the first break"),
    ] = False,
) -> None:
    """
    Run the break timer and walk through exercises when a break is due.
    """
    _check_category(category)
    if interval is not None and interval <= 0:
        views.print_error("--interval must be positive")
        raise typer.Exit(1)

    scheduler = RealtimeScheduler()
    engine = _load_engine(data_dir, scheduler=scheduler)
    timer = engine.timer

    if interval is not None:
        timer.configure(interval)
        timer.reset()

    timer.start()
    views.print_info("Break timer started. Press Ctrl+C to pause, reset or quit.")

    while True:
        try:
            with views.console.status(views.format_timer_status(timer.state)) as status:
                unsubscribe = timer.subscribe(
                    lambda state: status.update(views.format_timer_status(state))
                )
                try:
                    scheduler.run_until(lambda: engine.break_due)
                finally:
                    unsubscribe()
        except KeyboardInterrupt:
            if _prompt_timer_control(timer):
                continue
            raise typer.Exit(0)

        snooze_minutes = _prompt_break_due()
        if snooze_minutes is not None:
            engine.break_due = False
            timer.snooze(snooze_minutes)
            views.print_info(f"Snoozed for {snooze_minutes} min.")
            continue

        _run_break(engine, scheduler, category)
        if once:
            return

        if timer.phase != "running":
            timer.reset()
            timer.start()


@app.command("break-now")
def break_now(
    data_dir: DataDirOption = None,
    category: CategoryOption = None,
) -> None:
    """
    Start a break immediately without waiting for the timer.
    """
    _check_category(category)
    scheduler = RealtimeScheduler()
    engine = _load_engine(data_dir, scheduler=scheduler)
    _run_break(engine, scheduler, category)


@app.command()
def preview(
    data_dir: DataDirOption = None,
    category: CategoryOption = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for a reproducible pick"),
    ] = None,
) -> None:
    """
    Show which exercises the next break would offer, without recording anything.
    """
    _check_category(category)
    engine = _load_engine(data_dir, seed=seed)
    exercises = engine.preview(category)  # type: ignore[arg-type]
    if not exercises:
        views.print_error("No exercises available. Add some exercises or change your category selection.")
        raise typer.Exit(1)
    views.print_exercises(exercises, title="Next break")
