from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import WorkItemStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import WorkItem
from .repository import WorkItemRepository


class MySQLWorkItemRepository(WorkItemRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> WorkItem:
        return WorkItem(
            issue_id=int(r["id"]),
            title=r.get("title") or "",
            project_name=r.get("project_name"),
            status=WorkItemStatus(r["status"]),
        )

    def get_by_id(self, issue_id: int) -> Optional[WorkItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, title, project_name, status FROM issues WHERE id=%s",
                (int(issue_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_assigned(self, user_id: int) -> Sequence[WorkItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT i.id, i.title, i.project_name, i.status
                FROM issues i
                JOIN issue_assignees a ON a.issue_id = i.id
                WHERE a.user_id=%s AND i.status IN (%s, %s)
                ORDER BY i.id ASC
                """,
                (int(user_id), WorkItemStatus.OPEN.value, WorkItemStatus.IN_PROGRESS.value),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def add_comment(self, *, issue_id: int, user_id: int, comment: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO issue_comments(issue_id, user_id, comment) VALUES(%s,%s,%s)",
                (int(issue_id), int(user_id), comment),
            )

    def add_activity(self, *, issue_id: int, user_id: int, action: str, details: dict) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO issue_activity(issue_id, user_id, action, details) VALUES(%s,%s,%s,%s)",
                (int(issue_id), int(user_id), action, json.dumps(details)),
            )
