from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_string, require_non_empty
from ..core.constants import MAX_LEAVE_TYPE_CHARS, MAX_NOTE_CHARS
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def create_leave(
        self,
        *,
        current_role: Role,
        user_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: str,
    ) -> int:
        if current_role != Role.STAFF:
            raise AuthorizationError("Only staff can request leave")

        if end_date < start_date:
            raise ValidationError("end_date must be on or after start_date")

        leave_type = require_non_empty(leave_type, "leave_type", max_length=MAX_LEAVE_TYPE_CHARS)
        reason = require_non_empty(reason, "reason", max_length=MAX_NOTE_CHARS)
        request_id = self._leaves.create(
            user_id=int(user_id),
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
        )
        logger.info("Leave request %s created for user %s (%s..%s)", request_id, user_id, start_date, end_date)
        return request_id

    def approve_leave(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        request_id: int,
        admin_note: str = "",
        now: datetime | None = None,
    ) -> None:
        self._decide(
            current_role=current_role,
            admin_user_id=admin_user_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
            admin_note=admin_note,
            now=now,
        )

    def reject_leave(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        request_id: int,
        admin_note: str = "",
        now: datetime | None = None,
    ) -> None:
        self._decide(
            current_role=current_role,
            admin_user_id=admin_user_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            admin_note=admin_note,
            now=now,
        )

    def _decide(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        request_id: int,
        status: RequestStatus,
        admin_note: Optional[str],
        now: datetime | None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can decide leave requests")

        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError(f"Leave request {request_id} not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Leave request has already been decided")

        decided = self._leaves.decide(
            request_id=int(request_id),
            status=status,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
            admin_note=optional_string(admin_note, "admin_note", max_length=MAX_NOTE_CHARS),
        )
        if not decided:
            raise ValidationError("Leave request has already been decided")
        logger.info("Leave request %s %s by user %s", request_id, status.value.lower(), admin_user_id)

    def list_for_user(self, *, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(user_id=int(user_id))
