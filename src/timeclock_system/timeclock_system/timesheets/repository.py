from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Weekday
from .model import ManualEntryInput, TimesheetEntry, TimesheetWeek


class TimesheetRepository(Protocol):
    def get_week(self, *, user_id: int, week_start: date) -> Optional[TimesheetWeek]:
        raise NotImplementedError

    def get_or_create_week(self, *, user_id: int, week_start: date, week_end: date) -> TimesheetWeek:
        """Find the (user, week) row, inserting it when absent. Safe under concurrent callers."""

        raise NotImplementedError

    def get_by_id(self, timesheet_id: int) -> Optional[TimesheetWeek]:
        raise NotImplementedError

    def list_entries(self, timesheet_id: int) -> Sequence[TimesheetEntry]:
        raise NotImplementedError

    def add_time_clock_hours(
        self,
        *,
        timesheet_id: int,
        project: str,
        task: str,
        day: Weekday,
        hours: float,
    ) -> None:
        """Add ``hours`` to the time_clock row for (project, task), creating it if needed."""

        raise NotImplementedError

    def replace_manual_entries(self, *, timesheet_id: int, entries: Sequence[ManualEntryInput]) -> int:
        """Delete the week's manual rows and insert ``entries`` in one transaction.

        Rows from other sources are left alone. Returns the number inserted.
        """

        raise NotImplementedError
