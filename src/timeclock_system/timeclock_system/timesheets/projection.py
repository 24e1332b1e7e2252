"""Rows shown on a weekly timesheet that are derived at read time, never stored.

Persisted rows always win: a derived row is dropped when a persisted row has
the same (project, task) key. Derived rows are never deduplicated against each
other, so every approved leave request keeps its own row.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import week_days
from ..core.constants import LEAVE_HOURS_PER_DAY, LEAVE_PROJECT
from ..core.enums import EntrySource
from ..leave.model import LeaveRequest
from ..work_items.model import WorkItem
from .model import TimesheetEntry


def leave_task_label(leave: LeaveRequest) -> str:
    kind = (leave.leave_type or "").strip().upper()
    reason = (leave.reason or "").strip()
    return f"{kind} - {reason}" if reason else kind


def derive_leave_entries(leaves: Iterable[LeaveRequest], week_start: date) -> list[TimesheetEntry]:
    """One row per leave request, 8h on each day of the week the leave covers."""
    days = week_days(week_start)
    rows = []

    for leave in leaves:
        covered = {day: float(LEAVE_HOURS_PER_DAY) for day, d in days if leave.covers(d)}
        if not covered:
            continue
        rows.append(
            TimesheetEntry(
                project=LEAVE_PROJECT,
                task=leave_task_label(leave),
                source=EntrySource.LEAVE,
            ).with_hours(covered)
        )

    return rows


def derive_assigned_placeholders(items: Iterable[WorkItem]) -> list[TimesheetEntry]:
    """Zero-hour editable rows for work items still open for the user."""
    return [
        TimesheetEntry(
            project=item.assigned_project_label,
            task=item.task_label,
            source=EntrySource.MANUAL,
        )
        for item in items
        if item.status.is_active
    ]


def merge_entries(
    persisted: Sequence[TimesheetEntry],
    *derived: Sequence[TimesheetEntry],
) -> list[TimesheetEntry]:
    merged = list(persisted)
    persisted_keys = {e.key for e in merged}
    for group in derived:
        merged.extend(e for e in group if e.key not in persisted_keys)
    return merged
