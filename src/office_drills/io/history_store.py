"""
Break session history storage.

Sessions are stored newest first as a single JSON array under the
``sessions`` key; every change rewrites the whole array.
"""

from datetime import date

from ..core.config import KEY_SESSIONS
from ..core.metrics import sessions_since
from ..core.models import BreakSession
from .serializers import ValidationError, dict_to_session, session_to_dict, sessions_to_csv
from .store import KeyValueStore


class HistoryStore:
    """
    Manages recorded break sessions.

    Args:
        store: Persistence port
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load_history(self) -> list[BreakSession]:
        """
        Load all sessions.

        Returns:
            Sessions, newest first

        Raises:
            ValidationError: If a stored record is invalid
        """
        raw = self.store.get(KEY_SESSIONS, [])
        if not isinstance(raw, list):
            raise ValidationError("Stored history is not a list")

        sessions: list[BreakSession] = []
        for i, item in enumerate(raw, 1):
            try:
                sessions.append(dict_to_session(item))
            except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
                raise ValidationError(f"Error parsing stored session #{i}: {e}") from e
        return sessions

    def _write_sessions(self, sessions: list[BreakSession]) -> None:
        self.store.set(KEY_SESSIONS, [session_to_dict(s) for s in sessions])

    def append_session(self, session: BreakSession) -> None:
        """Record a finished session at the front of the history."""
        self._write_sessions([session] + self.load_history())

    def sessions_on(self, day: date) -> list[BreakSession]:
        """Sessions recorded on the given calendar day."""
        target = day.strftime("%Y-%m-%d")
        return [s for s in self.load_history() if s.date == target]

    def sessions_since(self, day: date) -> list[BreakSession]:
        """Sessions recorded on or after the given calendar day."""
        return sessions_since(self.load_history(), day)

    def delete_session_at(self, index: int) -> BreakSession:
        """
        Delete the session at the given 0-based index (newest first).

        Returns:
            The deleted session

        Raises:
            IndexError: If index is out of range
        """
        sessions = self.load_history()
        if index < 0 or index >= len(sessions):
            raise IndexError(f"Session index {index} out of range (0-{len(sessions) - 1})")
        removed = sessions.pop(index)
        self._write_sessions(sessions)
        return removed

    def clear_history(self) -> None:
        """
        Clear all history (dangerous - use with caution).
        """
        self._write_sessions([])

    def export_csv(self) -> str:
        return sessions_to_csv(self.load_history())
