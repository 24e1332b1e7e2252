from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.constants import HOURS_PRECISION, TIMESHEET_DEFAULT_STATUS
from ..core.enums import EntrySource, Weekday
from ..core.exceptions import RepositoryError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_float, db_cursor, fetchall, fetchone
from .model import ManualEntryInput, TimesheetEntry, TimesheetWeek
from .repository import TimesheetRepository

_DAY_COLUMNS = ", ".join(day.column for day in Weekday)


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_week(r: dict) -> TimesheetWeek:
        return TimesheetWeek(
            timesheet_id=int(r["timesheet_id"]),
            user_id=int(r["user_id"]),
            week_start=r["week_start"],
            week_end=r["week_end"],
            status=r.get("status") or TIMESHEET_DEFAULT_STATUS,
        )

    @staticmethod
    def _to_entry(r: dict) -> TimesheetEntry:
        hours = {day.column: as_float(r.get(day.column)) for day in Weekday}
        return TimesheetEntry(
            entry_id=int(r["entry_id"]),
            timesheet_id=int(r["timesheet_id"]),
            project=r["project"],
            task=r["task"],
            source=EntrySource(r["source"]),
            **hours,
        )

    def get_week(self, *, user_id: int, week_start: date) -> Optional[TimesheetWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT timesheet_id, user_id, week_start, week_end, status
                FROM timesheets
                WHERE user_id=%s AND week_start=%s
                """,
                (int(user_id), week_start),
            )
            r = fetchone(cur)
            return self._to_week(r) if r else None

    def get_or_create_week(self, *, user_id: int, week_start: date, week_end: date) -> TimesheetWeek:
        with db_cursor(self._conn_factory) as (_, cur):
            # LAST_INSERT_ID(expr) makes lastrowid point at the existing row on conflict.
            cur.execute(
                """
                INSERT INTO timesheets(user_id, week_start, week_end, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE timesheet_id = LAST_INSERT_ID(timesheet_id)
                """,
                (int(user_id), week_start, week_end, TIMESHEET_DEFAULT_STATUS),
            )
            timesheet_id = int(cur.lastrowid)
            cur.execute(
                "SELECT timesheet_id, user_id, week_start, week_end, status FROM timesheets WHERE timesheet_id=%s",
                (timesheet_id,),
            )
            r = fetchone(cur)
            if not r:
                raise RepositoryError(f"timesheet for user {user_id} week {week_start} not found after upsert")
            return self._to_week(r)

    def get_by_id(self, timesheet_id: int) -> Optional[TimesheetWeek]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT timesheet_id, user_id, week_start, week_end, status FROM timesheets WHERE timesheet_id=%s",
                (int(timesheet_id),),
            )
            r = fetchone(cur)
            return self._to_week(r) if r else None

    def list_entries(self, timesheet_id: int) -> Sequence[TimesheetEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT entry_id, timesheet_id, project, task, source, {_DAY_COLUMNS}
                FROM timesheet_entries
                WHERE timesheet_id=%s
                ORDER BY entry_id
                """,
                (int(timesheet_id),),
            )
            return [self._to_entry(r) for r in fetchall(cur)]

    def add_time_clock_hours(
        self,
        *,
        timesheet_id: int,
        project: str,
        task: str,
        day: Weekday,
        hours: float,
    ) -> None:
        column = day.column
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO timesheet_entries(timesheet_id, project, task, source, {column})
                VALUES(%s,%s,%s,%s,ROUND(%s, {HOURS_PRECISION}))
                ON DUPLICATE KEY UPDATE {column} = ROUND({column} + %s, {HOURS_PRECISION})
                """,
                (
                    int(timesheet_id),
                    project,
                    task,
                    EntrySource.TIME_CLOCK.value,
                    float(hours),
                    float(hours),
                ),
            )

    def replace_manual_entries(self, *, timesheet_id: int, entries: Sequence[ManualEntryInput]) -> int:
        placeholders = ",".join(["%s"] * (4 + len(Weekday)))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM timesheet_entries WHERE timesheet_id=%s AND source=%s",
                (int(timesheet_id), EntrySource.MANUAL.value),
            )
            for e in entries:
                cur.execute(
                    f"""
                    INSERT INTO timesheet_entries(timesheet_id, project, task, source, {_DAY_COLUMNS})
                    VALUES({placeholders})
                    """,
                    (
                        int(timesheet_id),
                        e.project,
                        e.task,
                        EntrySource.MANUAL.value,
                        *(round(float(e.hours.get(day, 0.0)), HOURS_PRECISION) for day in Weekday),
                    ),
                )
            return len(entries)
