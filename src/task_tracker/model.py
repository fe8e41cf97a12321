"""Task model for the tracker.

A task is a small document: identity, title, description, a status from a
closed set, and store-maintained timestamps.  The serialized form uses the
camelCase keys clients expect (``createdAt`` / ``updatedAt``).
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from .errors import InvalidTaskIdError, TaskValidationError


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TaskStatus(str, Enum):
    """Status of a task; any other value is rejected."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: Any) -> "TaskStatus":
        """Coerce *raw* to a status or raise :class:`TaskValidationError`."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw))
        except ValueError:
            valid = [e.value for e in cls]
            raise TaskValidationError(f"'status' must be one of {valid}, got '{raw}'") from None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ID_RE = re.compile(r"^task-[0-9a-f]{12}$")


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def generate_id() -> str:
    """Opaque task ID: ``task-<12hex>``."""
    return f"task-{uuid.uuid4().hex[:12]}"


def check_task_id(task_id: str) -> str:
    """Return *task_id* unchanged, or raise if it is not a well-formed ID."""
    if not isinstance(task_id, str) or not _ID_RE.match(task_id):
        raise InvalidTaskIdError(task_id)
    return task_id


def check_title(title: Optional[str]) -> str:
    if title is None or not str(title).strip():
        raise TaskValidationError("Title is required")
    return str(title)


# ---------------------------------------------------------------------------
# Task dataclass
# ---------------------------------------------------------------------------

@dataclass
class Task:
    """A single to-do item as stored in the document collection."""

    id: str = ""  # assigned by the store on insert
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the document shape used on disk and over HTTP."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Deserialize a stored document.

        Unknown statuses fall back to ``pending`` so one bad record cannot
        break listing.
        """
        raw_status = data.get("status")
        try:
            status = TaskStatus(str(raw_status)) if raw_status is not None else TaskStatus.PENDING
        except ValueError:
            status = TaskStatus.PENDING
        return cls(
            id=str(data.get("id") or ""),
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=status,
            created_at=str(data.get("createdAt") or ""),
            updated_at=str(data.get("updatedAt") or ""),
        )

    def apply(self, changes: dict[str, Any]) -> None:
        """Apply field changes in place; ``None`` values are skipped.

        Every value is validated before any field is touched.
        """
        title = changes.get("title")
        description = changes.get("description")
        status = changes.get("status")
        if title is not None:
            title = check_title(title)
        if status is not None:
            status = TaskStatus.parse(status)

        if title is not None:
            self.title = title
        if description is not None:
            self.description = str(description)
        if status is not None:
            self.status = status

    def touch(self) -> None:
        """Bump ``updated_at`` to now."""
        self.updated_at = now_iso()

    def matches(self, *, keyword: Optional[str] = None, status: Optional[TaskStatus] = None) -> bool:
        if status is not None and self.status != status:
            return False
        if keyword:
            q = keyword.casefold()
            if q not in self.title.casefold() and q not in self.description.casefold():
                return False
        return True
