from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import ASSIGNED_PROJECT_FALLBACK, UNTITLED_WORK_ITEM
from ..core.enums import WorkItemStatus


@dataclass(frozen=True)
class WorkItem:
    """An issue from the tracker, as far as time tracking cares about it."""

    issue_id: int
    title: str
    project_name: Optional[str]
    status: WorkItemStatus = WorkItemStatus.OPEN

    @property
    def task_label(self) -> str:
        return f"Issue #{self.issue_id}: {(self.title or '').strip() or UNTITLED_WORK_ITEM}"

    @property
    def assigned_project_label(self) -> str:
        return (self.project_name or "").strip() or ASSIGNED_PROJECT_FALLBACK
