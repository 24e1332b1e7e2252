from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role supplied by the identity provider."""

    ADMIN = "admin"
    STAFF = "staff"


class SessionStatus(str, Enum):
    """Lifecycle state of a clock session as stored in the database."""

    CLOCKED_IN = "clocked_in"
    PAUSED = "paused"
    CLOCKED_OUT = "clocked_out"

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset({SessionStatus.CLOCKED_IN, SessionStatus.PAUSED})


class EntrySource(str, Enum):
    """Which subsystem owns a timesheet row."""

    MANUAL = "manual"
    TIME_CLOCK = "time_clock"
    LEAVE = "leave"

    @property
    def is_read_only(self) -> bool:
        return self is not EntrySource.MANUAL


class Weekday(str, Enum):
    """Day columns of a weekly timesheet, Monday first."""

    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"

    @property
    def column(self) -> str:
        return f"{self.value}_hours"


class RequestStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class WorkItemStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"

    @property
    def is_active(self) -> bool:
        return self in (WorkItemStatus.OPEN, WorkItemStatus.IN_PROGRESS)
