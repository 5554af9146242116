"""
Timer state machine tests.

All tests drive virtual time through ManualScheduler, so a 25-minute
countdown runs instantly and tick counts are exact.
"""

from datetime import datetime, timedelta

import pytest

from office_drills.core.models import TimerState
from office_drills.core.scheduler import ManualScheduler, RealtimeScheduler
from office_drills.core.timer import Countdown, TimerController

START = datetime(2024, 1, 1, 9, 0, 0)


@pytest.fixture
def scheduler():
    return ManualScheduler(start=START)


@pytest.fixture
def timer(scheduler):
    return TimerController(25, scheduler)


class TestInitialState:
    def test_starts_idle_with_full_interval(self, timer):
        state = timer.state
        assert state.phase == "idle"
        assert state.time_remaining == 1500
        assert state.next_break_time is None
        assert not state.is_running
        assert not state.is_paused

    def test_rejects_non_positive_interval(self, scheduler):
        with pytest.raises(ValueError):
            TimerController(0, scheduler)

    def test_countdown_rejects_non_positive_length(self, scheduler):
        with pytest.raises(ValueError):
            Countdown(0, scheduler)


class TestCountdown:
    def test_expires_on_the_1500th_tick(self, timer, scheduler):
        """A 25-minute timer expires after exactly 1500 one-second ticks."""
        expiries: list[TimerState] = []
        timer.on_expire(expiries.append)
        timer.start()

        scheduler.advance(1499)
        assert timer.phase == "running"
        assert timer.time_remaining == 1
        assert expiries == []

        scheduler.advance(1)
        assert timer.phase == "expired"
        assert timer.time_remaining == 0
        assert len(expiries) == 1
        assert expiries[0].is_expired

    def test_expiry_event_fires_once(self, timer, scheduler):
        fired = []
        timer.on_expire(fired.append)
        timer.start()
        scheduler.advance(3000)
        assert len(fired) == 1
        assert scheduler.pending == 0

    def test_next_break_time_set_on_start(self, timer):
        timer.start()
        assert timer.state.next_break_time == START + timedelta(seconds=1500)

    def test_time_remaining_decreases_one_per_tick(self, timer, scheduler):
        timer.start()
        scheduler.advance(10)
        assert timer.time_remaining == 1490

    def test_subscribers_see_every_tick(self, timer, scheduler):
        seen: list[int] = []
        timer.subscribe(lambda s: seen.append(s.time_remaining))
        timer.start()
        scheduler.advance(3)
        assert seen == [1500, 1499, 1498, 1497]

    def test_unsubscribe_stops_updates(self, timer, scheduler):
        seen = []
        unsubscribe = timer.subscribe(seen.append)
        timer.start()
        unsubscribe()
        scheduler.advance(5)
        assert len(seen) == 1


class TestPauseResume:
    def test_pause_keeps_remaining_and_clears_deadline(self, timer, scheduler):
        timer.start()
        scheduler.advance(100)
        timer.pause()

        state = timer.state
        assert state.phase == "paused"
        assert state.is_running
        assert state.is_paused
        assert state.time_remaining == 1400
        assert state.next_break_time is None

    def test_paused_timer_does_not_tick(self, timer, scheduler):
        timer.start()
        scheduler.advance(100)
        timer.pause()
        scheduler.advance(500)
        assert timer.time_remaining == 1400

    def test_resume_recomputes_deadline(self, timer, scheduler):
        """After pausing at 1400 s and waiting 10 minutes, the deadline moves out."""
        timer.start()
        scheduler.advance(100)
        timer.pause()
        scheduler.advance(600)
        timer.resume()

        assert timer.phase == "running"
        assert timer.state.next_break_time == START + timedelta(seconds=700 + 1400)

    def test_resume_then_expire(self, timer, scheduler):
        fired = []
        timer.on_expire(fired.append)
        timer.start()
        scheduler.advance(100)
        timer.pause()
        scheduler.advance(60)
        timer.resume()
        scheduler.advance(1400)
        assert timer.phase == "expired"
        assert len(fired) == 1


class TestNoOpTransitions:
    def test_pause_when_idle(self, timer):
        timer.pause()
        assert timer.phase == "idle"

    def test_resume_when_running(self, timer, scheduler):
        timer.start()
        scheduler.advance(5)
        timer.resume()
        assert timer.time_remaining == 1495
        assert scheduler.pending == 1

    def test_start_when_running_does_not_double_tick(self, timer, scheduler):
        timer.start()
        timer.start()
        scheduler.advance(10)
        assert timer.time_remaining == 1490

    def test_start_when_paused_is_ignored(self, timer, scheduler):
        timer.start()
        scheduler.advance(10)
        timer.pause()
        timer.start()
        assert timer.phase == "paused"

    def test_stop_when_idle(self, timer):
        timer.stop()
        assert timer.state == TimerState(phase="idle", time_remaining=1500)


class TestStopReset:
    def test_stop_keeps_remaining(self, timer, scheduler):
        timer.start()
        scheduler.advance(30)
        timer.stop()
        assert timer.phase == "idle"
        assert timer.time_remaining == 1470
        scheduler.advance(100)
        assert timer.time_remaining == 1470

    def test_start_after_stop_continues(self, timer, scheduler):
        timer.start()
        scheduler.advance(30)
        timer.stop()
        timer.start()
        scheduler.advance(30)
        assert timer.time_remaining == 1440

    def test_reset_refills_interval(self, timer, scheduler):
        timer.start()
        scheduler.advance(30)
        timer.reset()
        assert timer.state == TimerState(phase="idle", time_remaining=1500)

    def test_reset_with_explicit_time(self, timer):
        timer.reset(90)
        assert timer.time_remaining == 90
        assert timer.phase == "idle"

    def test_reset_rejects_negative(self, timer, scheduler):
        timer.start()
        scheduler.advance(5)
        with pytest.raises(ValueError):
            timer.reset(-1)
        assert timer.phase == "running"
        assert timer.time_remaining == 1495

    def test_start_from_expired_refills(self, timer, scheduler):
        timer.start()
        scheduler.advance(1500)
        assert timer.phase == "expired"
        timer.start()
        assert timer.phase == "running"
        assert timer.time_remaining == 1500

    def test_configure_applies_on_next_reset(self, timer, scheduler):
        timer.start()
        scheduler.advance(10)
        timer.configure(5)
        assert timer.time_remaining == 1490
        timer.reset()
        assert timer.time_remaining == 300
        assert timer.interval_minutes == 5


class TestSnooze:
    def test_snooze_from_expired(self, timer, scheduler):
        timer.start()
        scheduler.advance(1500)
        timer.snooze(10)
        assert timer.phase == "running"
        assert timer.time_remaining == 600
        assert timer.state.next_break_time == START + timedelta(seconds=1500 + 600)

    def test_snooze_from_idle_and_paused(self, timer, scheduler):
        timer.snooze(5)
        assert timer.phase == "running"
        assert timer.time_remaining == 300

        timer.pause()
        timer.snooze(2)
        assert timer.phase == "running"
        assert timer.time_remaining == 120

    def test_snoozed_timer_expires_again(self, timer, scheduler):
        fired = []
        timer.on_expire(fired.append)
        timer.start()
        scheduler.advance(1500)
        timer.snooze(10)
        scheduler.advance(600)
        assert len(fired) == 2

    def test_snooze_while_running_leaves_single_tick(self, timer, scheduler):
        timer.start()
        scheduler.advance(10)
        timer.snooze(1)
        assert scheduler.pending == 1
        scheduler.advance(60)
        assert timer.phase == "expired"

    def test_snooze_rejects_non_positive(self, timer, scheduler):
        timer.start()
        scheduler.advance(1500)
        with pytest.raises(ValueError):
            timer.snooze(0)
        with pytest.raises(ValueError):
            timer.snooze(-5)
        assert timer.phase == "expired"
        assert scheduler.pending == 0


class TestStaleTicks:
    def test_rapid_transitions_leave_one_pending_tick(self, timer, scheduler):
        timer.start()
        timer.pause()
        timer.resume()
        timer.pause()
        timer.resume()
        assert scheduler.pending == 1
        scheduler.advance(1)
        assert timer.time_remaining == 1499

    def test_stopped_timer_never_expires(self, timer, scheduler):
        fired = []
        timer.on_expire(fired.append)
        timer.start()
        scheduler.advance(1499)
        timer.stop()
        scheduler.advance(10)
        assert fired == []
        assert timer.phase == "idle"


class TestRealtimeScheduler:
    def test_run_until_uses_injected_clock(self):
        """Callbacks fire in due order; sleeping advances the fake clock."""
        clock = {"t": 0.0}

        def sleep(seconds):
            clock["t"] += seconds

        sched = RealtimeScheduler(clock=lambda: clock["t"], sleep=sleep)
        countdown = Countdown(3, sched)
        countdown.start()

        assert sched.run_until(lambda: countdown.phase == "expired")
        assert clock["t"] == pytest.approx(3.0)

    def test_run_until_returns_false_when_queue_empty(self):
        sched = RealtimeScheduler(clock=lambda: 0.0, sleep=lambda s: None)
        assert sched.run_until(lambda: False) is False

    def test_run_until_timeout(self):
        clock = {"t": 0.0}
        sched = RealtimeScheduler(
            clock=lambda: clock["t"],
            sleep=lambda s: clock.__setitem__("t", clock["t"] + s),
        )
        Countdown(100, sched).start()
        assert sched.run_until(lambda: False, timeout=5) is False
