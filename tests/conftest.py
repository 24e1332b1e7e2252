from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from src.timeclock_system.timeclock_system.clock.model import ClockSession, SessionHistoryRow
from src.timeclock_system.timeclock_system.core.constants import HOURS_PRECISION
from src.timeclock_system.timeclock_system.core.enums import EntrySource, RequestStatus, SessionStatus
from src.timeclock_system.timeclock_system.core.exceptions import DuplicateKeyError, RepositoryError
from src.timeclock_system.timeclock_system.container import wire
from src.timeclock_system.timeclock_system.leave.model import LeaveRequest
from src.timeclock_system.timeclock_system.timesheets.model import TimesheetEntry, TimesheetWeek
from src.timeclock_system.timeclock_system.work_items.model import WorkItem


class FakeClockSessionRepo:
    def __init__(self):
        self._next_id = 1
        self.sessions: dict[int, ClockSession] = {}

    def get_active_for_user(self, user_id):
        for s in self.sessions.values():
            if s.user_id == user_id and s.is_active:
                return s
        return None

    def create_clock_in(self, *, user_id, clock_in, issue_id=None, project_name=None, location=None, location_timestamp=None):
        # Mirrors the unique index on active_user_id.
        if any(s.user_id == user_id and s.is_active for s in self.sessions.values()):
            raise DuplicateKeyError("Duplicate entry for key 'uq_time_clock_active_user'")
        sid = self._next_id
        self._next_id += 1
        session = ClockSession(
            session_id=sid,
            user_id=user_id,
            clock_in=clock_in,
            status=SessionStatus.CLOCKED_IN,
            issue_id=issue_id,
            project_name=project_name,
            location_timestamp=location_timestamp,
        )
        if location is not None:
            session = replace(session, location=location)
        self.sessions[sid] = session
        return session

    def mark_paused(self, *, session_id, pause_start, reason):
        self.sessions[session_id] = replace(
            self.sessions[session_id],
            status=SessionStatus.PAUSED,
            pause_start=pause_start,
            pause_reason=reason,
        )
        return self.sessions[session_id]

    def mark_resumed(self, *, session_id, paused_duration_hours):
        self.sessions[session_id] = replace(
            self.sessions[session_id],
            status=SessionStatus.CLOCKED_IN,
            paused_duration_hours=paused_duration_hours,
            pause_start=None,
            pause_reason=None,
        )
        return self.sessions[session_id]

    def mark_clocked_out(self, *, session_id, clock_out, paused_duration_hours, total_hours):
        self.sessions[session_id] = replace(
            self.sessions[session_id],
            status=SessionStatus.CLOCKED_OUT,
            clock_out=clock_out,
            paused_duration_hours=paused_duration_hours,
            total_hours=total_hours,
            pause_start=None,
            pause_reason=None,
        )
        return self.sessions[session_id]

    def list_history(self, *, user_id=None, start_date=None, end_date=None, status=None, limit=100):
        rows = [
            s
            for s in self.sessions.values()
            if (user_id is None or s.user_id == user_id)
            and (start_date is None or s.clock_in.date() >= start_date)
            and (end_date is None or s.clock_in.date() <= end_date)
            and (status is None or s.status == status)
        ]
        rows.sort(key=lambda s: s.clock_in, reverse=True)
        return [SessionHistoryRow(session=s) for s in rows[:limit]]

    def list_active(self):
        return [SessionHistoryRow(session=s) for s in self.sessions.values() if s.is_active]


class FakeTimesheetRepo:
    def __init__(self):
        self._next_week_id = 1
        self._next_entry_id = 1
        self.weeks: dict[tuple[int, date], TimesheetWeek] = {}
        self.entries: list[TimesheetEntry] = []
        self.writes = 0
        self.fail_writes = False

    def _write(self):
        if self.fail_writes:
            raise RepositoryError("simulated write failure")
        self.writes += 1

    def get_week(self, *, user_id, week_start):
        return self.weeks.get((user_id, week_start))

    def get_or_create_week(self, *, user_id, week_start, week_end):
        week = self.weeks.get((user_id, week_start))
        if week:
            return week
        self._write()
        week = TimesheetWeek(
            timesheet_id=self._next_week_id,
            user_id=user_id,
            week_start=week_start,
            week_end=week_end,
        )
        self._next_week_id += 1
        self.weeks[(user_id, week_start)] = week
        return week

    def get_by_id(self, timesheet_id):
        for week in self.weeks.values():
            if week.timesheet_id == timesheet_id:
                return week
        return None

    def list_entries(self, timesheet_id):
        return [e for e in self.entries if e.timesheet_id == timesheet_id]

    def add_time_clock_hours(self, *, timesheet_id, project, task, day, hours):
        self._write()
        for i, e in enumerate(self.entries):
            if e.timesheet_id == timesheet_id and e.source == EntrySource.TIME_CLOCK and e.key == (project, task):
                current = e.hours_for(day)
                self.entries[i] = e.with_hours({day: round(current + hours, HOURS_PRECISION)})
                return
        self.add_entry(
            TimesheetEntry(project=project, task=task, source=EntrySource.TIME_CLOCK, timesheet_id=timesheet_id).with_hours(
                {day: round(hours, HOURS_PRECISION)}
            )
        )

    def replace_manual_entries(self, *, timesheet_id, entries):
        self._write()
        self.entries = [
            e for e in self.entries if not (e.timesheet_id == timesheet_id and e.source == EntrySource.MANUAL)
        ]
        for e in entries:
            self.add_entry(
                TimesheetEntry(project=e.project, task=e.task, timesheet_id=timesheet_id).with_hours(e.hours)
            )
        return len(entries)

    def add_entry(self, entry: TimesheetEntry) -> TimesheetEntry:
        entry = replace(entry, entry_id=self._next_entry_id)
        self._next_entry_id += 1
        self.entries.append(entry)
        return entry


class FakeLeaveRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, LeaveRequest] = {}

    def add(self, *, user_id, start_date, end_date, leave_type="sick", reason=None, status=RequestStatus.APPROVED):
        rid = self.create(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
        )
        self.requests[rid] = replace(self.requests[rid], status=status)
        return self.requests[rid]

    def list_approved_overlapping(self, *, user_id, start, end):
        return [
            r
            for r in self.requests.values()
            if r.user_id == user_id and r.status == RequestStatus.APPROVED and r.overlaps(start, end)
        ]

    def create(self, *, user_id, start_date, end_date, leave_type, reason):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = LeaveRequest(
            request_id=rid,
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=datetime(2024, 1, 1, 8, 0, 0),
        )
        return rid

    def get_by_id(self, request_id):
        return self.requests.get(request_id)

    def list_for_user(self, *, user_id, limit=200):
        return [r for r in self.requests.values() if r.user_id == user_id][:limit]

    def decide(self, *, request_id, status, decided_by, decided_at, admin_note=None):
        req = self.requests.get(request_id)
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[request_id] = replace(
            req,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at,
            admin_note=admin_note,
        )
        return True


class FakeWorkItemRepo:
    def __init__(self):
        self.items: dict[int, WorkItem] = {}
        self.assignments: dict[int, list[int]] = {}
        self.comments: list[dict] = []
        self.activities: list[dict] = []
        self.fail = False

    def _check(self):
        if self.fail:
            raise RepositoryError("issue tracker unavailable")

    def add(self, item: WorkItem, *, assignee=None) -> WorkItem:
        self.items[item.issue_id] = item
        if assignee is not None:
            self.assignments.setdefault(assignee, []).append(item.issue_id)
        return item

    def get_by_id(self, issue_id):
        self._check()
        return self.items.get(issue_id)

    def list_assigned(self, user_id):
        self._check()
        return [
            self.items[i] for i in self.assignments.get(user_id, []) if self.items[i].status.is_active
        ]

    def add_comment(self, *, issue_id, user_id, comment):
        self._check()
        self.comments.append({"issue_id": issue_id, "user_id": user_id, "comment": comment})

    def add_activity(self, *, issue_id, user_id, action, details):
        self._check()
        self.activities.append({"issue_id": issue_id, "user_id": user_id, "action": action, "details": details})


@pytest.fixture
def fixed_now():
    # Monday
    return datetime(2024, 1, 15, 9, 0, 0)


@pytest.fixture
def sessions_repo():
    return FakeClockSessionRepo()


@pytest.fixture
def timesheets_repo():
    return FakeTimesheetRepo()


@pytest.fixture
def leave_repo():
    return FakeLeaveRepo()


@pytest.fixture
def work_items_repo():
    return FakeWorkItemRepo()


@pytest.fixture
def container(sessions_repo, timesheets_repo, leave_repo, work_items_repo):
    return wire(
        sessions_repo=sessions_repo,
        timesheets_repo=timesheets_repo,
        leave_repo=leave_repo,
        work_items_repo=work_items_repo,
    )
