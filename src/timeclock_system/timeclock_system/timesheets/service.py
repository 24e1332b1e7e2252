from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from ..clock.model import ClockSession
from ..common.datetime_utils import day_column, now_local, parse_iso_date, week_days, week_end, week_start_monday
from ..common.validators import check_length, optional_text, parse_hours
from ..core.constants import DEFAULT_PROJECT, DEFAULT_TASK, MAX_CELL_HOURS, MAX_LABEL_CHARS
from ..core.enums import EntrySource, Weekday
from ..core.exceptions import NotFoundError, RepositoryError, ValidationError
from ..leave.repository import LeaveRepository
from ..work_items.model import WorkItem
from ..work_items.repository import WorkItemRepository
from .model import ManualEntryInput, PostingOutcome, SaveResult, TimesheetEntry, TimesheetWeek, WeeklyTimesheet
from .projection import derive_assigned_placeholders, derive_leave_entries, merge_entries
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)

WeekValue = Union[date, datetime, str]


def _label(value: Optional[str], fallback: str) -> str:
    return (value or "").strip() or fallback


class TimesheetService:
    def __init__(
        self,
        timesheets: TimesheetRepository,
        leaves: LeaveRepository,
        work_items: WorkItemRepository,
    ):
        self._timesheets = timesheets
        self._leaves = leaves
        self._work_items = work_items

    @staticmethod
    def _week_start(value: WeekValue) -> date:
        if isinstance(value, str):
            value = parse_iso_date(value)
        return week_start_monday(value)

    # ---- clock-out posting ----
    def _clock_labels(self, session: ClockSession) -> tuple[str, str]:
        fallback_project = _label(session.project_name, DEFAULT_PROJECT)
        if session.issue_id is None:
            return fallback_project, DEFAULT_TASK

        item: Optional[WorkItem] = None
        try:
            item = self._work_items.get_by_id(session.issue_id)
        except RepositoryError:
            logger.warning("Work item %s lookup failed, using bare issue label", session.issue_id, exc_info=True)

        if item is None:
            return fallback_project, f"Issue #{session.issue_id}"
        return _label(item.project_name, fallback_project), item.task_label.strip()

    def record_clock_out(self, session: ClockSession, worked_hours: float) -> PostingOutcome:
        """Add a finished session's hours to the matching time_clock row of its week.

        Never raises for storage problems; the outcome says whether the week changed.
        """
        if session.clock_out is None:
            return PostingOutcome(updated=False, error="session has no clock_out")

        ws = week_start_monday(session.clock_out)
        day = day_column(session.clock_out)
        project, task = self._clock_labels(session)

        try:
            week = self._timesheets.get_or_create_week(user_id=session.user_id, week_start=ws, week_end=week_end(ws))
            self._timesheets.add_time_clock_hours(
                timesheet_id=int(week.timesheet_id),
                project=project,
                task=task,
                day=day,
                hours=float(worked_hours),
            )
        except RepositoryError as e:
            logger.error(
                "Could not post %.2fh from session %s to week %s",
                worked_hours,
                session.session_id,
                ws,
                exc_info=True,
            )
            return PostingOutcome(updated=False, error=str(e))

        logger.info(
            "Posted %.2fh from session %s to timesheet %s (%s / %s, %s)",
            worked_hours,
            session.session_id,
            week.timesheet_id,
            project,
            task,
            day.value,
        )
        return PostingOutcome(updated=True)

    # ---- reads ----
    def _assigned_placeholders(self, user_id: int) -> list[TimesheetEntry]:
        try:
            items = self._work_items.list_assigned(int(user_id))
        except RepositoryError:
            logger.warning("Assigned work items unavailable for user %s", user_id, exc_info=True)
            return []
        return derive_assigned_placeholders(items)

    def get_week(self, user_id: int, week_start: WeekValue) -> WeeklyTimesheet:
        """Persisted rows plus approved leave and assigned-issue placeholders. Writes nothing."""
        ws = self._week_start(week_start)
        we = week_end(ws)

        week = self._timesheets.get_week(user_id=int(user_id), week_start=ws)
        persisted: Sequence[TimesheetEntry] = ()
        if week is None:
            week = TimesheetWeek(timesheet_id=None, user_id=int(user_id), week_start=ws, week_end=we)
        else:
            persisted = self._timesheets.list_entries(int(week.timesheet_id))

        leave_rows = derive_leave_entries(
            self._leaves.list_approved_overlapping(user_id=int(user_id), start=ws, end=we),
            ws,
        )
        entries = merge_entries(persisted, leave_rows, self._assigned_placeholders(user_id))
        return WeeklyTimesheet(timesheet=week, entries=entries)

    def get_timesheet(self, timesheet_id: int) -> WeeklyTimesheet:
        week = self._timesheets.get_by_id(int(timesheet_id))
        if not week:
            raise NotFoundError(f"Timesheet {timesheet_id} not found")
        return WeeklyTimesheet(timesheet=week, entries=list(self._timesheets.list_entries(int(week.timesheet_id))))

    # ---- manual save ----
    @staticmethod
    def _parse_entry(raw: Any, index: int) -> ManualEntryInput:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"entries[{index}] must be an object")

        source_value = optional_text(raw.get("source")) or EntrySource.MANUAL.value
        try:
            source = EntrySource(source_value)
        except ValueError:
            raise ValidationError(f"entries[{index}].source is not a known source")

        hours = {}
        for day in Weekday:
            value = raw.get(day.column, raw.get(day.value))
            hours[day] = parse_hours(value, f"entries[{index}].{day.column}", max_value=MAX_CELL_HOURS)

        project = check_length(optional_text(raw.get("project")), f"entries[{index}].project", MAX_LABEL_CHARS)
        task = check_length(optional_text(raw.get("task")), f"entries[{index}].task", MAX_LABEL_CHARS)

        return ManualEntryInput(
            project=project or "",
            task=task or "",
            hours=hours,
            source=source,
        )

    def parse_manual_entries(self, entries: Any) -> list[ManualEntryInput]:
        if entries is None:
            return []
        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
            raise ValidationError("entries must be a list")
        return [self._parse_entry(raw, i) for i, raw in enumerate(entries)]

    def save_manual_entries(self, user_id: int, week_start: WeekValue, entries: Any) -> SaveResult:
        """Replace the week's manual rows. Everything is validated before anything is written."""
        ws = self._week_start(week_start)
        parsed = self.parse_manual_entries(entries)

        to_save = [
            e
            for e in parsed
            if not e.source.is_read_only and e.project and e.task and e.total_hours > 0
        ]

        week = self._timesheets.get_or_create_week(user_id=int(user_id), week_start=ws, week_end=week_end(ws))
        saved = self._timesheets.replace_manual_entries(timesheet_id=int(week.timesheet_id), entries=to_save)
        logger.info(
            "Saved %s manual rows (%s submitted) to timesheet %s for user %s",
            saved,
            len(parsed),
            week.timesheet_id,
            user_id,
        )
        return SaveResult(timesheet_id=int(week.timesheet_id), entries_saved=saved)

    # ---- calendar ----
    def week_navigation(self, value: Optional[WeekValue] = None, *, now: datetime | None = None) -> dict:
        ws = self._week_start(value if value is not None else (now or now_local()))
        return {
            "week_start": ws.isoformat(),
            "week_end": week_end(ws).isoformat(),
            "previous_week_start": (ws - timedelta(days=7)).isoformat(),
            "next_week_start": (ws + timedelta(days=7)).isoformat(),
            "days": [{"day": day.value, "date": d.isoformat()} for day, d in week_days(ws)],
        }
