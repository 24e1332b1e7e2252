from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Mapping, Optional, Sequence

from ..core.constants import HOURS_PRECISION, TIMESHEET_DEFAULT_STATUS
from ..core.enums import EntrySource, Weekday


@dataclass(frozen=True)
class TimesheetWeek:
    """Header row of a user's week. ``timesheet_id`` is None until first written."""

    timesheet_id: Optional[int]
    user_id: int
    week_start: date
    week_end: date
    status: str = TIMESHEET_DEFAULT_STATUS

    @property
    def is_persisted(self) -> bool:
        return self.timesheet_id is not None


@dataclass(frozen=True)
class TimesheetEntry:
    project: str
    task: str
    source: EntrySource = EntrySource.MANUAL
    entry_id: Optional[int] = None
    timesheet_id: Optional[int] = None
    mon_hours: float = 0.0
    tue_hours: float = 0.0
    wed_hours: float = 0.0
    thu_hours: float = 0.0
    fri_hours: float = 0.0
    sat_hours: float = 0.0
    sun_hours: float = 0.0

    @property
    def key(self) -> tuple[str, str]:
        return (self.project, self.task)

    def hours_for(self, day: Weekday) -> float:
        return getattr(self, day.column)

    @property
    def total_hours(self) -> float:
        return round(sum(self.hours_for(day) for day in Weekday), HOURS_PRECISION)

    @property
    def is_editable(self) -> bool:
        return not self.source.is_read_only

    def with_hours(self, hours: Mapping[Weekday, float]) -> "TimesheetEntry":
        return replace(self, **{day.column: float(value) for day, value in hours.items()})

    def to_dict(self) -> dict:
        data = {
            "entry_id": self.entry_id,
            "timesheet_id": self.timesheet_id,
            "project": self.project,
            "task": self.task,
            "source": self.source.value,
            "editable": self.is_editable,
        }
        for day in Weekday:
            data[day.column] = round(self.hours_for(day), HOURS_PRECISION)
        data["total_hours"] = self.total_hours
        return data


@dataclass(frozen=True)
class WeeklyTimesheet:
    timesheet: TimesheetWeek
    entries: Sequence[TimesheetEntry] = field(default_factory=tuple)

    @property
    def total_hours(self) -> float:
        return round(sum(e.total_hours for e in self.entries), HOURS_PRECISION)

    def to_dict(self) -> dict:
        ts = self.timesheet
        return {
            "timesheet_id": ts.timesheet_id,
            "user_id": ts.user_id,
            "week_start": ts.week_start.isoformat(),
            "week_end": ts.week_end.isoformat(),
            "status": ts.status,
            "entries": [e.to_dict() for e in self.entries],
            "total_hours": self.total_hours,
        }


@dataclass(frozen=True)
class PostingOutcome:
    """Result of adding a finished session's hours to its week."""

    updated: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class ManualEntryInput:
    project: str
    task: str
    hours: Mapping[Weekday, float]
    source: EntrySource = EntrySource.MANUAL

    @property
    def total_hours(self) -> float:
        return sum(self.hours.values())


@dataclass(frozen=True)
class SaveResult:
    timesheet_id: int
    entries_saved: int
