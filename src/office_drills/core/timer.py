"""
Countdown state machines.

Countdown implements the shared one-second countdown used both for the
break timer and for each exercise inside a break walkthrough.
TimerController adds the break-timer extras: configurable interval and
snooze.

Transition table (any pair not listed is a logged no-op):

    start   idle | expired  -> running
    pause   running         -> paused
    resume  paused          -> running
    stop    running | paused | expired -> idle
    reset   any             -> idle
    snooze  any             -> running   (TimerController only)

Out-of-range arguments are rejected with ValueError and leave the state
untouched: a negative ``reset(new_time)`` or a non-positive ``snooze(minutes)``.

Every transition cancels the pending tick and bumps a generation counter
before scheduling a new one, so a tick queued under an older state is
ignored when it fires.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Callable

from ..utils.logging import get_logger
from .config import SECONDS_PER_MINUTE, TICK_SECONDS
from .models import TimerPhase, TimerState
from .scheduler import Scheduler, TickHandle

logger = get_logger(__name__)

StateListener = Callable[[TimerState], None]


class Countdown:
    """
    One-second countdown with explicit idle/running/paused/expired phases.

    Listeners registered with ``subscribe`` receive a TimerState after every
    change (ticks included). Listeners registered with ``on_expire`` are
    called exactly once per expiry.
    """

    def __init__(self, seconds: int, scheduler: Scheduler, name: str = "countdown"):
        if seconds <= 0:
            raise ValueError("Countdown length must be positive")
        self.name = name
        self._scheduler = scheduler
        self._length = seconds
        self._phase: TimerPhase = "idle"
        self._remaining = seconds
        self._deadline = None
        self._handle: TickHandle | None = None
        self._generation = 0
        self._listeners: list[StateListener] = []
        self._expiry_listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return TimerState(
            phase=self._phase,
            time_remaining=self._remaining,
            next_break_time=self._deadline,
        )

    @property
    def phase(self) -> TimerPhase:
        return self._phase

    @property
    def time_remaining(self) -> int:
        return self._remaining

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns a function that unregisters it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_expire(self, listener: StateListener) -> Callable[[], None]:
        """Register an expiry listener; returns a function that unregisters it."""
        self._expiry_listeners.append(listener)
        return lambda: self._expiry_listeners.remove(listener)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._phase not in ("idle", "expired"):
            self._ignored("start")
            return
        if self._remaining <= 0:
            self._remaining = self._length
        self._run()

    def pause(self) -> None:
        if self._phase != "running":
            self._ignored("pause")
            return
        self._cancel_tick()
        self._phase = "paused"
        self._deadline = None
        self._notify()

    def resume(self) -> None:
        if self._phase != "paused":
            self._ignored("resume")
            return
        self._run()

    def stop(self) -> None:
        if self._phase == "idle":
            self._ignored("stop")
            return
        self._cancel_tick()
        self._phase = "idle"
        self._deadline = None
        self._notify()

    def reset(self, new_time: int | None = None) -> None:
        """Return to idle with ``new_time`` seconds (default: the full length)."""
        if new_time is not None and new_time < 0:
            raise ValueError("new_time must be non-negative")
        self._cancel_tick()
        self._phase = "idle"
        self._remaining = self._length if new_time is None else new_time
        self._deadline = None
        self._notify()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run(self) -> None:
        self._cancel_tick()
        self._phase = "running"
        self._deadline = self._scheduler.now() + timedelta(seconds=self._remaining)
        self._schedule_tick()
        self._notify()

    def _schedule_tick(self) -> None:
        generation = self._generation
        self._handle = self._scheduler.call_later(
            TICK_SECONDS, lambda: self._tick(generation)
        )

    def _cancel_tick(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation += 1

    def _tick(self, generation: int) -> None:
        if generation != self._generation or self._phase != "running":
            logger.debug("%s: stale tick dropped", self.name)
            return
        self._handle = None
        if self._remaining <= 1:
            self._remaining = 0
            self._phase = "expired"
            self._deadline = None
            self._generation += 1
            logger.debug("%s: expired", self.name)
            self._notify()
            snapshot = self.state
            for listener in list(self._expiry_listeners):
                listener(snapshot)
            return
        self._remaining -= 1
        self._schedule_tick()
        self._notify()

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)

    def _ignored(self, operation: str) -> None:
        logger.debug("%s: %s ignored while %s", self.name, operation, self._phase)


class TimerController(Countdown):
    """
    Break timer: counts down the configured interval and signals a due break.

    Args:
        interval_minutes: Minutes between breaks
        scheduler: Tick source and clock
    """

    def __init__(self, interval_minutes: int, scheduler: Scheduler):
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        super().__init__(interval_minutes * SECONDS_PER_MINUTE, scheduler, name="break-timer")

    @property
    def interval_minutes(self) -> int:
        return self._length // SECONDS_PER_MINUTE

    def configure(self, interval_minutes: int) -> None:
        """
        Change the configured interval.

        The current countdown is left alone; the new interval applies from
        the next ``reset()`` (or the next start after expiry).
        """
        if interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")
        self._length = interval_minutes * SECONDS_PER_MINUTE

    def snooze(self, minutes: int) -> None:
        """Restart the countdown at ``minutes`` and force it to run."""
        if minutes <= 0:
            raise ValueError("snooze minutes must be positive")
        self._remaining = minutes * SECONDS_PER_MINUTE
        self._run()
