from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import ACTIVE_STATUSES, SessionStatus
from ..core.exceptions import RepositoryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, as_optional_float, db_cursor, fetchall, fetchone
from .model import ClockSession, Location, SessionHistoryRow
from .repository import ClockSessionRepository

_SESSION_COLUMNS = """
    tc.session_id, tc.user_id, tc.issue_id, tc.project_name,
    tc.clock_in, tc.clock_out, tc.status,
    tc.pause_start, tc.pause_reason, tc.paused_duration_hours, tc.total_hours,
    tc.latitude, tc.longitude, tc.location_address, tc.location_timestamp
"""

_ACTIVE_VALUES = tuple(sorted(s.value for s in ACTIVE_STATUSES))


class MySQLClockSessionRepository(ClockSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> ClockSession:
        return ClockSession(
            session_id=int(r["session_id"]),
            user_id=int(r["user_id"]),
            issue_id=int(r["issue_id"]) if r.get("issue_id") is not None else None,
            project_name=r.get("project_name"),
            clock_in=r["clock_in"],
            clock_out=r.get("clock_out"),
            status=SessionStatus(r["status"]),
            pause_start=r.get("pause_start"),
            pause_reason=r.get("pause_reason"),
            paused_duration_hours=as_float(r.get("paused_duration_hours")),
            total_hours=as_optional_float(r.get("total_hours")),
            location=Location(
                latitude=as_optional_float(r.get("latitude")),
                longitude=as_optional_float(r.get("longitude")),
                address=r.get("location_address"),
            ),
            location_timestamp=r.get("location_timestamp"),
        )

    def _to_history_row(self, r: dict) -> SessionHistoryRow:
        return SessionHistoryRow(
            session=self._to_model(r),
            issue_title=r.get("issue_title"),
            issue_project=r.get("issue_project"),
            user_email=r.get("user_email"),
            user_full_name=r.get("user_full_name"),
        )

    def _get_by_id(self, cur, session_id: int) -> ClockSession:
        cur.execute(f"SELECT {_SESSION_COLUMNS} FROM time_clock tc WHERE tc.session_id=%s", (int(session_id),))
        r = fetchone(cur)
        if not r:
            raise RepositoryError(f"time_clock row {session_id} disappeared")
        return self._to_model(r)

    def get_active_for_user(self, user_id: int) -> Optional[ClockSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM time_clock tc
                WHERE tc.user_id=%s AND tc.status IN (%s, %s)
                ORDER BY tc.clock_in DESC
                LIMIT 1
                """,
                (int(user_id), *_ACTIVE_VALUES),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_clock(
                    user_id, issue_id, project_name, clock_in, status,
                    latitude, longitude, location_address, location_timestamp
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    issue_id,
                    project_name,
                    clock_in,
                    SessionStatus.CLOCKED_IN.value,
                    location.latitude,
                    location.longitude,
                    location.address,
                    location_timestamp,
                ),
            )
            return self._get_by_id(cur, int(cur.lastrowid))

    def mark_paused(self, *, session_id: int, pause_start: datetime, reason: str) -> ClockSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_clock
                SET status=%s, pause_start=%s, pause_reason=%s
                WHERE session_id=%s AND status=%s
                """,
                (
                    SessionStatus.PAUSED.value,
                    pause_start,
                    reason,
                    int(session_id),
                    SessionStatus.CLOCKED_IN.value,
                ),
            )
            return self._get_by_id(cur, session_id)

    def mark_resumed(self, *, session_id: int, paused_duration_hours: float) -> ClockSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_clock
                SET status=%s, paused_duration_hours=%s, pause_start=NULL, pause_reason=NULL
                WHERE session_id=%s AND status=%s
                """,
                (
                    SessionStatus.CLOCKED_IN.value,
                    float(paused_duration_hours),
                    int(session_id),
                    SessionStatus.PAUSED.value,
                ),
            )
            return self._get_by_id(cur, session_id)

    def mark_clocked_out(
        self,
        *,
        session_id: int,
        clock_out: datetime,
        paused_duration_hours: float,
        total_hours: float,
    ) -> ClockSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_clock
                SET status=%s, clock_out=%s, total_hours=%s, paused_duration_hours=%s,
                    pause_start=NULL, pause_reason=NULL
                WHERE session_id=%s AND status IN (%s, %s)
                """,
                (
                    SessionStatus.CLOCKED_OUT.value,
                    clock_out,
                    float(total_hours),
                    float(paused_duration_hours),
                    int(session_id),
                    *_ACTIVE_VALUES,
                ),
            )
            return self._get_by_id(cur, session_id)

    def list_history(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[SessionStatus] = None,
        limit: int = 100,
    ) -> Sequence[SessionHistoryRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("tc.user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("tc.clock_in >= %s")
            params.append(start_date)
        if end_date is not None:
            # end_date is inclusive of the whole day
            clauses.append("tc.clock_in < %s")
            params.append(end_date + timedelta(days=1))
        if status is not None:
            clauses.append("tc.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS},
                       i.title AS issue_title, i.project_name AS issue_project,
                       u.email AS user_email, u.full_name AS user_full_name
                FROM time_clock tc
                LEFT JOIN issues i ON i.id = tc.issue_id
                LEFT JOIN users u ON u.user_id = tc.user_id
                WHERE {where}
                ORDER BY tc.clock_in DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [self._to_history_row(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[SessionHistoryRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SESSION_COLUMNS},
                       i.title AS issue_title, i.project_name AS issue_project,
                       u.email AS user_email, u.full_name AS user_full_name
                FROM time_clock tc
                LEFT JOIN issues i ON i.id = tc.issue_id
                LEFT JOIN users u ON u.user_id = tc.user_id
                WHERE tc.status IN (%s, %s)
                ORDER BY tc.clock_in DESC
                """,
                _ACTIVE_VALUES,
            )
            return [self._to_history_row(r) for r in fetchall(cur)]
