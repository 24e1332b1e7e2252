from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .clock.mysql_clock_repository import MySQLClockSessionRepository
from .clock.repository import ClockSessionRepository
from .clock.service import ClockService
from .database.connection import DBConfig, DatabaseConnection
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.repository import TimesheetRepository
from .timesheets.service import TimesheetService
from .work_items.mysql_work_item_repository import MySQLWorkItemRepository
from .work_items.repository import WorkItemRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    sessions_repo: ClockSessionRepository
    timesheets_repo: TimesheetRepository
    leave_repo: LeaveRepository
    work_items_repo: WorkItemRepository

    clock_service: ClockService
    timesheet_service: TimesheetService
    leave_service: LeaveService


def wire(
    *,
    sessions_repo: ClockSessionRepository,
    timesheets_repo: TimesheetRepository,
    leave_repo: LeaveRepository,
    work_items_repo: WorkItemRepository,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build the services on top of any set of repositories."""
    timesheet_service = TimesheetService(timesheets_repo, leave_repo, work_items_repo)
    clock_service = ClockService(sessions_repo, timesheet_service, work_items_repo)
    leave_service = LeaveService(leave_repo)

    return Container(
        conn=conn,
        sessions_repo=sessions_repo,
        timesheets_repo=timesheets_repo,
        leave_repo=leave_repo,
        work_items_repo=work_items_repo,
        clock_service=clock_service,
        timesheet_service=timesheet_service,
        leave_service=leave_service,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        sessions_repo=MySQLClockSessionRepository(conn),
        timesheets_repo=MySQLTimesheetRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        work_items_repo=MySQLWorkItemRepository(conn),
        conn=conn,
    )
