"""Client-side board state: the task form, the list, and its filters.

The board mirrors what the browser view holds.  It re-fetches the list after
every filter change and every successful mutation, and never keeps
optimistic state.  Request failures are logged and otherwise ignored; each
action reports success as a bool so callers can pick an exit code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx
from loguru import logger

from .client import TaskClient
from .model import TaskStatus


@dataclass
class TaskForm:
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING

    def clear(self) -> None:
        self.title = ""
        self.description = ""
        self.status = TaskStatus.PENDING


class TaskBoard:
    def __init__(self, client: TaskClient) -> None:
        self.client = client
        self.tasks: list[dict[str, Any]] = []
        self.form = TaskForm()
        self.keyword = ""
        self.status_filter = ""
        self.editing: Optional[dict[str, Any]] = None

    # -- list ---------------------------------------------------------------

    def mount(self) -> bool:
        return self.refresh()

    def refresh(self) -> bool:
        try:
            self.tasks = self.client.list_tasks(keyword=self.keyword, status=self.status_filter)
        except httpx.HTTPError as exc:
            logger.error("Error fetching tasks: {}", exc)
            return False
        return True

    def set_keyword(self, keyword: str) -> bool:
        self.keyword = keyword
        return self.refresh()

    def set_status_filter(self, status: str) -> bool:
        """Filter by status; ``""`` shows every task."""
        self.status_filter = TaskStatus(status).value if status else ""
        return self.refresh()

    # -- form ---------------------------------------------------------------

    def set_form(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[str] = None,
    ) -> None:
        """Update form fields.  An unknown status raises ``ValueError``."""
        if title is not None:
            self.form.title = title
        if description is not None:
            self.form.description = description
        if status is not None:
            self.form.status = TaskStatus(status)

    def edit(self, task: dict[str, Any]) -> None:
        self.editing = task
        self.form.title = task.get("title", "")
        self.form.description = task.get("description", "") or ""
        self.form.status = TaskStatus(task.get("status", TaskStatus.PENDING.value))

    def submit(self) -> bool:
        """Create, or update the task being edited, then reset and re-fetch."""
        body = {
            "title": self.form.title,
            "description": self.form.description,
            "status": self.form.status.value,
        }
        try:
            if self.editing is not None:
                self.client.update_task(self.editing["id"], **body)
                self.editing = None
            else:
                self.client.create_task(**body)
        except httpx.HTTPError as exc:
            logger.error("Error saving task: {}", exc)
            return False
        self.form.clear()
        self.refresh()
        return True

    def delete(self, task_id: str) -> bool:
        try:
            self.client.delete_task(task_id)
        except httpx.HTTPError as exc:
            logger.error("Error deleting task: {}", exc)
            return False
        self.refresh()
        return True
