"""Provide the public `task_tracker` package exports."""

from __future__ import annotations

__version__ = "1.0.0"

from .model import Task, TaskStatus
from .service import TaskService

__all__ = ["Task", "TaskService", "TaskStatus", "__version__"]
