"""
Aggregate history metrics.

Counts and rates over recorded break sessions, used by the history views.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .models import BreakSession


@dataclass(frozen=True)
class HistoryStats:
    """Aggregate counts over a set of sessions."""

    total_sessions: int
    total_exercises: int
    completed_exercises: int
    total_duration_minutes: int  # rounded
    completion_rate: int  # rounded percent, 0-100


def compute_stats(sessions: list[BreakSession]) -> HistoryStats:
    """
    Summarize a list of sessions.

    Durations are the sessions' ``total_duration`` (skipped time included),
    converted to whole minutes. Completion rate is completed outcomes over
    all outcomes.

    Args:
        sessions: Sessions to summarize

    Returns:
        HistoryStats (all zeros for an empty list)
    """
    total_exercises = sum(len(s.exercises) for s in sessions)
    completed = sum(s.completed_count for s in sessions)
    total_seconds = sum(s.total_duration for s in sessions)
    rate = (completed / total_exercises) * 100 if total_exercises > 0 else 0.0

    return HistoryStats(
        total_sessions=len(sessions),
        total_exercises=total_exercises,
        completed_exercises=completed,
        total_duration_minutes=round(total_seconds / 60),
        completion_rate=round(rate),
    )


def sessions_since(sessions: list[BreakSession], start: date) -> list[BreakSession]:
    """Sessions whose calendar day is on or after ``start``."""
    return [
        s for s in sessions
        if datetime.strptime(s.date, "%Y-%m-%d").date() >= start
    ]


def stats_by_period(
    sessions: list[BreakSession],
    today: date | None = None,
) -> dict[str, HistoryStats]:
    """
    Stats for today, the last 7 days, the last 30 days and all time.

    Day windows include today, so "week" starts six days before ``today``.
    Stats for today, the last 7 days, the last 30 days and all time.

    Args:
        sessions: All recorded sessions
        today: Reference day (default: local today)

    Returns:
        Ordered dict keyed "today", "week", "month", "all"
    """
    today = today or date.today()
    today_str = today.strftime("%Y-%m-%d")
    return {
        "today": compute_stats([s for s in sessions if s.date == today_str]),
        "week": compute_stats(sessions_since(sessions, today - timedelta(days=6))),
        "month": compute_stats(sessions_since(sessions, today - timedelta(days=29))),
        "all": compute_stats(sessions),
    }
