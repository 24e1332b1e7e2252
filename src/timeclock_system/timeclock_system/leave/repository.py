from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def list_approved_overlapping(self, *, user_id: int, start: date, end: date) -> Sequence[LeaveRequest]:
        """Approved requests of ``user_id`` that share at least one day with [start, end]."""

        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: Optional[str],
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``; False when it was not pending."""

        raise NotImplementedError
