"""Exception hierarchy shared by the store, service, and HTTP layer."""

from __future__ import annotations


class TaskTrackerError(Exception):
    """Base class for all tracker errors."""

    status_code = 500


class TaskValidationError(TaskTrackerError, ValueError):
    """A field failed validation (empty title, unknown status, ...)."""

    status_code = 400


class InvalidTaskIdError(TaskTrackerError, ValueError):
    """The identifier is not a well-formed task ID."""

    status_code = 400

    def __init__(self, task_id: object) -> None:
        super().__init__("Invalid Task ID")
        self.task_id = task_id


class TaskNotFoundError(TaskTrackerError, LookupError):
    """A well-formed ID that does not resolve to a stored task."""

    status_code = 404

    def __init__(self, task_id: str) -> None:
        super().__init__("Task not found")
        self.task_id = task_id


class StoreError(TaskTrackerError):
    """Unclassified persistence failure."""

    status_code = 500


class ConfigError(TaskTrackerError):
    """Settings could not be loaded or are malformed."""
