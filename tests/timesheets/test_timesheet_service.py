from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timeclock_system.timeclock_system.clock.model import ClockSession
from src.timeclock_system.timeclock_system.core.enums import EntrySource, RequestStatus, SessionStatus, Weekday
from src.timeclock_system.timeclock_system.core.exceptions import NotFoundError, ValidationError
from src.timeclock_system.timeclock_system.timesheets.model import TimesheetEntry
from src.timeclock_system.timeclock_system.work_items.model import WorkItem

USER = 7
WEEK = date(2024, 1, 15)


def _clock_row(timesheets_repo, **hours):
    week = timesheets_repo.get_or_create_week(user_id=USER, week_start=WEEK, week_end=date(2024, 1, 21))
    return timesheets_repo.add_entry(
        TimesheetEntry(
            project="Portal",
            task="Issue #1: Build API",
            source=EntrySource.TIME_CLOCK,
            timesheet_id=week.timesheet_id,
            **hours,
        )
    )


def test_approved_leave_shows_up_but_is_never_stored(container, leave_repo, timesheets_repo):
    leave_repo.add(user_id=USER, start_date=date(2024, 1, 15), end_date=date(2024, 1, 16))

    sheet = container.timesheet_service.get_week(USER, "2024-01-15")

    [leave_row] = [e for e in sheet.entries if e.source == EntrySource.LEAVE]
    assert (leave_row.mon_hours, leave_row.tue_hours) == (8.0, 8.0)
    assert sum(leave_row.hours_for(d) for d in Weekday if d not in (Weekday.MON, Weekday.TUE)) == 0
    assert sheet.timesheet.timesheet_id is None
    assert timesheets_repo.writes == 0
    assert timesheets_repo.entries == []


def test_reading_a_week_twice_gives_the_same_rows(container, leave_repo, work_items_repo, timesheets_repo):
    leave_repo.add(user_id=USER, start_date=date(2024, 1, 15), end_date=date(2024, 1, 16), reason="Flu")
    leave_repo.add(user_id=USER, start_date=date(2024, 1, 18), end_date=date(2024, 1, 18), reason="Flu")
    work_items_repo.add(WorkItem(issue_id=2, title="Docs", project_name=None), assignee=USER)

    first = container.timesheet_service.get_week(USER, WEEK)
    second = container.timesheet_service.get_week(USER, WEEK)

    assert list(second.entries) == list(first.entries)
    assert [e.total_hours for e in first.entries if e.source == EntrySource.LEAVE] == [16.0, 8.0]
    assert timesheets_repo.writes == 0


def test_pending_leave_is_not_shown(container, leave_repo):
    leave_repo.add(user_id=USER, start_date=WEEK, end_date=WEEK, status=RequestStatus.PENDING)
    assert container.timesheet_service.get_week(USER, WEEK).entries == []


def test_mid_week_date_addresses_containing_week(container):
    sheet = container.timesheet_service.get_week(USER, date(2024, 1, 18))
    assert sheet.timesheet.week_start == WEEK
    assert sheet.timesheet.week_end == date(2024, 1, 21)


def test_week_merges_persisted_leave_and_placeholders(container, timesheets_repo, work_items_repo, leave_repo):
    _clock_row(timesheets_repo, mon_hours=2.0)
    work_items_repo.add(WorkItem(issue_id=1, title="Build API", project_name="Portal"), assignee=USER)
    work_items_repo.add(WorkItem(issue_id=2, title="Docs", project_name=None), assignee=USER)
    leave_repo.add(user_id=USER, start_date=date(2024, 1, 19), end_date=date(2024, 1, 19), reason="Doctor")

    sheet = container.timesheet_service.get_week(USER, WEEK)

    assert [(e.project, e.task, e.source) for e in sheet.entries] == [
        ("Portal", "Issue #1: Build API", EntrySource.TIME_CLOCK),
        ("Leave", "SICK - Doctor", EntrySource.LEAVE),
        ("Assigned Tasks", "Issue #2: Docs", EntrySource.MANUAL),
    ]
    assert sheet.total_hours == 10.0


def test_work_item_outage_drops_placeholders_only(container, timesheets_repo, work_items_repo):
    _clock_row(timesheets_repo, tue_hours=1.0)
    work_items_repo.add(WorkItem(issue_id=2, title="Docs", project_name=None), assignee=USER)
    work_items_repo.fail = True

    sheet = container.timesheet_service.get_week(USER, WEEK)

    assert [e.source for e in sheet.entries] == [EntrySource.TIME_CLOCK]


def test_save_replaces_manual_rows_and_ignores_clock_rows(container, timesheets_repo):
    clock_row = _clock_row(timesheets_repo, mon_hours=3.0)
    service = container.timesheet_service
    service.save_manual_entries(USER, WEEK, [{"project": "Ops", "task": "Old", "mon_hours": 1}])

    result = service.save_manual_entries(
        USER,
        "2024-01-17",
        [
            {"project": "Portal", "task": "Issue #1: Build API", "source": "time_clock", "mon_hours": 99},
            {"project": "Leave", "task": "SICK", "source": "leave", "tue_hours": 8},
            {"project": "Ops", "task": "Deploy", "wed_hours": "2.5", "thu_hours": ""},
            {"project": "Ops", "task": "Nothing", "fri_hours": 0},
            {"project": "  ", "task": "No project", "fri_hours": 4},
        ],
    )

    assert result.entries_saved == 1
    stored = {(e.project, e.task): e for e in timesheets_repo.entries}
    assert stored[("Portal", "Issue #1: Build API")] == clock_row
    assert ("Ops", "Old") not in stored
    assert stored[("Ops", "Deploy")].wed_hours == 2.5
    assert stored[("Ops", "Deploy")].source == EntrySource.MANUAL


def test_invalid_hours_abort_save_before_any_write(container, timesheets_repo):
    with pytest.raises(ValidationError):
        container.timesheet_service.save_manual_entries(
            USER,
            WEEK,
            [
                {"project": "Ops", "task": "Deploy", "mon_hours": 2},
                {"project": "Ops", "task": "Bad", "tue_hours": -1},
            ],
        )
    assert timesheets_repo.writes == 0
    assert timesheets_repo.weeks == {}


def test_bad_week_start_aborts_save(container, timesheets_repo):
    with pytest.raises(ValidationError):
        container.timesheet_service.save_manual_entries(USER, "next monday", [])
    assert timesheets_repo.writes == 0


def test_record_clock_out_uses_item_title_and_rounds(container, timesheets_repo, work_items_repo):
    work_items_repo.add(WorkItem(issue_id=8, title="  ", project_name=" Billing "))
    session = ClockSession(
        session_id=1,
        user_id=USER,
        clock_in=datetime(2024, 1, 17, 9, 0),
        clock_out=datetime(2024, 1, 17, 10, 0),
        status=SessionStatus.CLOCKED_OUT,
        issue_id=8,
        total_hours=1.0,
    )
    service = container.timesheet_service

    assert service.record_clock_out(session, 0.333).updated is True
    assert service.record_clock_out(session, 0.333).updated is True

    [entry] = timesheets_repo.entries
    assert (entry.project, entry.task) == ("Billing", "Issue #8: Untitled")
    assert entry.wed_hours == 0.66


def test_get_timesheet_returns_persisted_rows_only(container, timesheets_repo, leave_repo):
    row = _clock_row(timesheets_repo, mon_hours=1.0)
    leave_repo.add(user_id=USER, start_date=WEEK, end_date=WEEK)

    sheet = container.timesheet_service.get_timesheet(row.timesheet_id)

    assert list(sheet.entries) == [row]
    with pytest.raises(NotFoundError):
        container.timesheet_service.get_timesheet(999)


def test_week_navigation():
    from src.timeclock_system.timeclock_system.timesheets.service import TimesheetService

    nav = TimesheetService(None, None, None).week_navigation("2024-01-18")

    assert nav["week_start"] == "2024-01-15"
    assert nav["week_end"] == "2024-01-21"
    assert nav["previous_week_start"] == "2024-01-08"
    assert nav["next_week_start"] == "2024-01-22"
    assert nav["days"][6] == {"day": "sun", "date": "2024-01-21"}


@pytest.mark.parametrize(
    "entry",
    [
        {"project": "Ops", "task": "Deploy", "mon_hours": 999.999},
        {"project": "Ops", "task": "t" * 256, "mon_hours": 1},
        {"project": "p" * 256, "task": "Deploy", "mon_hours": 1},
    ],
)
def test_values_too_big_for_storage_are_rejected(container, timesheets_repo, entry):
    with pytest.raises(ValidationError):
        container.timesheet_service.save_manual_entries(USER, WEEK, [entry])
    assert timesheets_repo.writes == 0


def test_largest_storable_values_are_accepted(container, timesheets_repo):
    result = container.timesheet_service.save_manual_entries(
        USER, WEEK, [{"project": "p" * 255, "task": "Deploy", "mon_hours": 999.99}]
    )

    assert result.entries_saved == 1
    [stored] = timesheets_repo.entries
    assert stored.mon_hours == 999.99
