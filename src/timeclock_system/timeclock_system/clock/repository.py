from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SessionStatus
from .model import ClockSession, Location, SessionHistoryRow


class ClockSessionRepository(Protocol):
    def get_active_for_user(self, user_id: int) -> Optional[ClockSession]:
        """The user's clocked-in or paused session, if any."""

        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        user_id: int,
        clock_in: datetime,
        issue_id: Optional[int] = None,
        project_name: Optional[str] = None,
        location: Location = Location(),
        location_timestamp: Optional[datetime] = None,
    ) -> ClockSession:
        """Insert an active session.

        Raises ``DuplicateKeyError`` when the user already has one.
        """

        raise NotImplementedError

    def mark_paused(self, *, session_id: int, pause_start: datetime, reason: str) -> ClockSession:
        raise NotImplementedError

    def mark_resumed(self, *, session_id: int, paused_duration_hours: float) -> ClockSession:
        raise NotImplementedError

    def mark_clocked_out(
        self,
        *,
        session_id: int,
        clock_out: datetime,
        paused_duration_hours: float,
        total_hours: float,
    ) -> ClockSession:
        raise NotImplementedError

    def list_history(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[SessionStatus] = None,
        limit: int = 100,
    ) -> Sequence[SessionHistoryRow]:
        """Newest first; ``user_id=None`` means every user."""

        raise NotImplementedError

    def list_active(self) -> Sequence[SessionHistoryRow]:
        raise NotImplementedError
