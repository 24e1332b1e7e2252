from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import HOURS_PRECISION
from ..core.enums import SessionStatus
from ..work_items.model import WorkItem


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Location:
    """Where the user clocked in; captured once and never changed."""

    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.latitude is None and self.longitude is None and not self.address


@dataclass(frozen=True)
class ClockSession:
    """Domain entity: one continuous clocked-in (or paused) period for a user."""

    session_id: int
    user_id: int
    clock_in: datetime
    status: SessionStatus
    issue_id: Optional[int] = None
    project_name: Optional[str] = None
    clock_out: Optional[datetime] = None
    pause_start: Optional[datetime] = None
    pause_reason: Optional[str] = None
    paused_duration_hours: float = 0.0
    total_hours: Optional[float] = None
    location: Location = field(default_factory=Location)
    location_timestamp: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "issue_id": self.issue_id,
            "project_name": self.project_name,
            "clock_in": _iso(self.clock_in),
            "clock_out": _iso(self.clock_out),
            "status": self.status.value,
            "pause_start": _iso(self.pause_start),
            "pause_reason": self.pause_reason,
            "paused_duration_hours": round(self.paused_duration_hours, HOURS_PRECISION),
            "total_hours": self.total_hours,
            "latitude": self.location.latitude,
            "longitude": self.location.longitude,
            "location_address": self.location.address,
            "location_timestamp": _iso(self.location_timestamp),
        }


@dataclass(frozen=True)
class CurrentSession:
    session: ClockSession
    work_item: Optional[WorkItem]
    worked_hours: float

    def to_dict(self) -> dict:
        data = self.session.to_dict()
        data["worked_hours"] = self.worked_hours
        data["issue_title"] = self.work_item.title if self.work_item else None
        data["issue_project"] = self.work_item.project_name if self.work_item else None
        return data


@dataclass(frozen=True)
class ClockOutResult:
    session: ClockSession
    total_hours: float
    timesheet_updated: bool

    def to_dict(self) -> dict:
        return {
            "session": self.session.to_dict(),
            "total_hours": self.total_hours,
            "timesheet_updated": self.timesheet_updated,
        }


@dataclass(frozen=True)
class SessionHistoryRow:
    """Read-model for history/admin listings (session joined with issue and user)."""

    session: ClockSession
    issue_title: Optional[str] = None
    issue_project: Optional[str] = None
    user_email: Optional[str] = None
    user_full_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.session.to_dict()
        data.update(
            issue_title=self.issue_title,
            issue_project=self.issue_project,
            user_email=self.user_email,
            user_full_name=self.user_full_name,
        )
        return data
