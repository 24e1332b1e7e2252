from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, user_id, start_date, end_date, leave_type, reason,
    status, created_at, decided_by, decided_at, admin_note
"""


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> LeaveRequest:
        return LeaveRequest(
            request_id=int(r["request_id"]),
            user_id=int(r["user_id"]),
            start_date=r["start_date"],
            end_date=r["end_date"],
            leave_type=r["leave_type"],
            reason=r.get("reason"),
            status=RequestStatus(r["status"]),
            created_at=r.get("created_at"),
            decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
            decided_at=r.get("decided_at"),
            admin_note=r.get("admin_note"),
        )

    def list_approved_overlapping(self, *, user_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s AND status=%s AND start_date <= %s AND end_date >= %s
                ORDER BY start_date, request_id
                """,
                (int(user_id), RequestStatus.APPROVED.value, end, start),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, start_date, end_date, leave_type, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, leave_type, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE user_id=%s
                ORDER BY created_at DESC, request_id DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=%s, admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    decided_at,
                    admin_note,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
