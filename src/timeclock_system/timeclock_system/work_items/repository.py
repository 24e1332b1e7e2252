from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkItem


class WorkItemRepository(Protocol):
    """Read/write surface of the issue tracker used by time tracking.

    Implementations raise ``RepositoryError`` when the store is unreachable;
    callers decide whether that is fatal.
    """

    def get_by_id(self, issue_id: int) -> Optional[WorkItem]:
        raise NotImplementedError

    def list_assigned(self, user_id: int) -> Sequence[WorkItem]:
        """Open and in-progress items assigned to ``user_id``."""

        raise NotImplementedError

    def add_comment(self, *, issue_id: int, user_id: int, comment: str) -> None:
        raise NotImplementedError

    def add_activity(self, *, issue_id: int, user_id: int, action: str, details: dict) -> None:
        raise NotImplementedError
