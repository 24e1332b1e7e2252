from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import check_length, optional_coordinate, optional_string, optional_text
from ..core.constants import (
    ACTIVITY_COMMENT_PREVIEW_CHARS,
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    MAX_LABEL_CHARS,
    MAX_NOTE_CHARS,
)
from ..core.enums import SessionStatus
from ..core.exceptions import (
    AlreadyClockedIn,
    DuplicateKeyError,
    NoActiveSession,
    NoPausedSession,
    ReasonRequired,
    RepositoryError,
    ValidationError,
)
from ..timesheets.service import TimesheetService
from ..work_items.model import WorkItem
from ..work_items.repository import WorkItemRepository
from .hours import live_worked_hours, paused_hours_at, worked_hours
from .model import ClockOutResult, ClockSession, CurrentSession, Location, SessionHistoryRow
from .repository import ClockSessionRepository

logger = logging.getLogger(__name__)


class ClockService:
    """Clock-in / pause / resume / clock-out for one user at a time.

    Hours of a finished session are handed to ``TimesheetService``; that step
    and the work-item comment are best effort and never undo the clock-out.
    """

    def __init__(
        self,
        sessions: ClockSessionRepository,
        timesheets: TimesheetService,
        work_items: WorkItemRepository,
    ):
        self._sessions = sessions
        self._timesheets = timesheets
        self._work_items = work_items

    def clock_in(
        self,
        user_id: int,
        *,
        issue_id: Optional[int] = None,
        project_name: Optional[str] = None,
        latitude: Any = None,
        longitude: Any = None,
        location_address: Optional[str] = None,
        now: datetime | None = None,
    ) -> ClockSession:
        now = now or now_local()

        location = Location(
            latitude=optional_coordinate(latitude, "latitude", limit=90),
            longitude=optional_coordinate(longitude, "longitude", limit=180),
            address=check_length(optional_text(location_address), "location_address", MAX_NOTE_CHARS),
        )

        project_name = check_length(optional_text(project_name), "project_name", MAX_LABEL_CHARS)

        if self._sessions.get_active_for_user(int(user_id)):
            raise AlreadyClockedIn()

        try:
            session = self._sessions.create_clock_in(
                user_id=int(user_id),
                clock_in=now,
                issue_id=int(issue_id) if issue_id is not None else None,
                project_name=project_name,
                location=location,
                location_timestamp=None if location.is_empty else now,
            )
        except DuplicateKeyError:
            # Lost a race with another clock-in for the same user.
            raise AlreadyClockedIn()

        logger.info("User %s clocked in (session %s, issue %s)", user_id, session.session_id, issue_id)
        return session

    def pause(self, user_id: int, reason: Any, *, now: datetime | None = None) -> ClockSession:
        now = now or now_local()

        session = self._sessions.get_active_for_user(int(user_id))
        if not session or session.status != SessionStatus.CLOCKED_IN:
            raise NoActiveSession()

        reason = optional_string(reason, "reason", max_length=MAX_NOTE_CHARS)
        if not reason:
            raise ReasonRequired()

        paused = self._sessions.mark_paused(session_id=session.session_id, pause_start=now, reason=reason)
        logger.info("User %s paused session %s", user_id, session.session_id)
        return paused

    def resume(self, user_id: int, *, now: datetime | None = None) -> ClockSession:
        now = now or now_local()

        session = self._sessions.get_active_for_user(int(user_id))
        if not session or session.status != SessionStatus.PAUSED:
            raise NoPausedSession()

        resumed = self._sessions.mark_resumed(
            session_id=session.session_id,
            paused_duration_hours=paused_hours_at(session, now),
        )
        logger.info(
            "User %s resumed session %s (paused %.2fh total)",
            user_id,
            session.session_id,
            resumed.paused_duration_hours,
        )
        return resumed

    def clock_out(self, user_id: int, *, comment: Optional[str] = None, now: datetime | None = None) -> ClockOutResult:
        now = now or now_local()

        session = self._sessions.get_active_for_user(int(user_id))
        if not session:
            raise NoActiveSession()

        # A still-open pause is closed at ``now`` before the total is computed.
        paused = paused_hours_at(session, now)
        total = worked_hours(session.clock_in, now, paused)

        closed = self._sessions.mark_clocked_out(
            session_id=session.session_id,
            clock_out=now,
            paused_duration_hours=paused,
            total_hours=total,
        )
        logger.info("User %s clocked out of session %s after %.2fh", user_id, session.session_id, total)

        comment = optional_text(comment)
        if comment and closed.issue_id is not None:
            self._post_comment(closed, comment, total)

        timesheet_updated = False
        if total > 0:
            outcome = self._timesheets.record_clock_out(closed, total)
            timesheet_updated = outcome.updated
            if not outcome.updated:
                logger.warning("Session %s closed but timesheet not updated: %s", closed.session_id, outcome.error)

        return ClockOutResult(session=closed, total_hours=total, timesheet_updated=timesheet_updated)

    def _post_comment(self, session: ClockSession, comment: str, total: float) -> None:
        try:
            self._work_items.add_comment(issue_id=session.issue_id, user_id=session.user_id, comment=comment)
            self._work_items.add_activity(
                issue_id=session.issue_id,
                user_id=session.user_id,
                action="work_completed",
                details={"comment": comment[:ACTIVITY_COMMENT_PREVIEW_CHARS], "hours_worked": total},
            )
        except RepositoryError:
            logger.warning("Could not post clock-out comment to issue %s", session.issue_id, exc_info=True)

    def get_current_session(self, user_id: int, *, now: datetime | None = None) -> Optional[CurrentSession]:
        now = now or now_local()

        session = self._sessions.get_active_for_user(int(user_id))
        if not session:
            return None

        item: Optional[WorkItem] = None
        if session.issue_id is not None:
            try:
                item = self._work_items.get_by_id(session.issue_id)
            except RepositoryError:
                logger.warning("Work item %s lookup failed", session.issue_id, exc_info=True)

        return CurrentSession(session=session, work_item=item, worked_hours=live_worked_hours(session, now))

    def list_sessions(
        self,
        user_id: int,
        *,
        is_admin: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[SessionStatus] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[SessionHistoryRow]:
        """History newest first; admins see every user."""
        if start_date and end_date and end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")
        if int(limit) <= 0:
            raise ValidationError("limit must be positive")

        return self._sessions.list_history(
            user_id=None if is_admin else int(user_id),
            start_date=start_date,
            end_date=end_date,
            status=status,
            limit=min(int(limit), MAX_HISTORY_LIMIT),
        )

    def list_active_sessions(self) -> Sequence[SessionHistoryRow]:
        return self._sessions.list_active()
