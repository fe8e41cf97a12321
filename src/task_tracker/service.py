"""Task service: validation and CRUD over a :class:`TaskRepository`.

This is the single entry point the HTTP layer uses.  It owns every rule about
what a valid task looks like; the repository only stores documents.
"""

from __future__ import annotations

from typing import Any, Optional

from loguru import logger

from .errors import TaskNotFoundError
from .model import Task, TaskStatus, check_task_id, check_title
from .store import TaskRepository


class TaskService:
    """Create, query, update, and delete tasks.

    Parameters
    ----------
    store:
        The collection backing this service.  Its lifetime is owned by the
        caller (normally the application factory).
    """

    def __init__(self, store: TaskRepository) -> None:
        self.store = store

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_task(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Task:
        """Validate and persist a new task, returning it with ID and timestamps."""
        task = Task(
            title=check_title(title),
            description=description or "",
            status=TaskStatus.parse(status) if status else TaskStatus.PENDING,
        )
        self.store.insert(task)
        logger.info("Created task {}: {}", task.id, task.title)
        return task

    def list_tasks(
        self,
        *,
        keyword: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Task]:
        """Return tasks matching the filters, newest first.

        Empty-string filters count as absent.
        """
        wanted = TaskStatus.parse(status) if status else None
        tasks = [t for t in self.store.list() if t.matches(keyword=keyword or None, status=wanted)]
        # reversed() first so equal timestamps keep newest-inserted first
        return sorted(reversed(tasks), key=lambda t: t.created_at, reverse=True)

    def get_task(self, task_id: str) -> Task:
        check_task_id(task_id)
        task = self.store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def update_task(self, task_id: str, changes: dict[str, Any]) -> Task:
        """Apply partial updates.  ``None`` values leave the field unchanged.

        Validation happens before anything is written, so a rejected update
        leaves the stored record untouched.
        """
        task = self.get_task(task_id)
        task.apply(changes)
        updated = self.store.replace(task)
        if updated is None:
            # deleted between read and write
            raise TaskNotFoundError(task_id)
        logger.info("Updated task {} ({})", task_id, ", ".join(sorted(k for k, v in changes.items() if v is not None)))
        return updated

    def delete_task(self, task_id: str) -> None:
        check_task_id(task_id)
        if not self.store.delete(task_id):
            raise TaskNotFoundError(task_id)
        logger.info("Deleted task {}", task_id)
