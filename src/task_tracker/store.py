"""Document collection for tasks.

:class:`TaskRepository` is the interface the service talks to.  Two
collections implement it:

* :class:`FileTaskRepository` keeps every task in one YAML document guarded by
  a ``filelock`` lock; writes go to a temp file and are renamed into place.
* :class:`MemoryTaskRepository` keeps tasks in a dict for the lifetime of the
  process.

:func:`open_store` picks one from a connection URL.
"""

from __future__ import annotations

import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlparse

import yaml
from filelock import FileLock, Timeout
from loguru import logger

from .errors import ConfigError, StoreError
from .model import Task, generate_id, now_iso

LOCK_TIMEOUT = 30  # seconds
COLLECTION_KEY = "tasks"


class TaskRepository(ABC):
    @abstractmethod
    def list(self) -> list[Task]:
        """Return every task in insertion order."""
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    def insert(self, task: Task) -> Task:
        """Persist a new task, assigning its ID and stamping ``created_at`` and ``updated_at``."""
        raise NotImplementedError

    @abstractmethod
    def replace(self, task: Task) -> Optional[Task]:
        """Overwrite the stored task with the same ID; ``None`` if it is gone."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        raise NotImplementedError

    def close(self) -> None:
        """Release any handle held by the collection."""


# ---------------------------------------------------------------------------
# In-memory collection
# ---------------------------------------------------------------------------

class MemoryTaskRepository(TaskRepository):
    def __init__(self) -> None:
        self._tasks: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    def list(self) -> list[Task]:
        with self._lock:
            return [Task.from_dict(d) for d in self._tasks.values()]

    def get(self, task_id: str) -> Optional[Task]:
        with self._lock:
            doc = self._tasks.get(task_id)
            return Task.from_dict(doc) if doc is not None else None

    def insert(self, task: Task) -> Task:
        with self._lock:
            if task.id in self._tasks:
                raise StoreError(f"Task {task.id} already exists")
            task.id = task.id or generate_id()
            task.created_at = now_iso()
            task.updated_at = task.created_at
            self._tasks[task.id] = task.to_dict()
        return task

    def replace(self, task: Task) -> Optional[Task]:
        with self._lock:
            if task.id not in self._tasks:
                return None
            task.touch()
            self._tasks[task.id] = task.to_dict()
        return task

    def delete(self, task_id: str) -> bool:
        with self._lock:
            return self._tasks.pop(task_id, None) is not None


# ---------------------------------------------------------------------------
# YAML file collection
# ---------------------------------------------------------------------------

class FileTaskRepository(TaskRepository):
    """Thread- and process-safe YAML collection.

    Parameters
    ----------
    path:
        The YAML document holding the collection.  Created on first write.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = FileLock(str(self.path.with_suffix(self.path.suffix + ".lock")), timeout=LOCK_TIMEOUT)
        self._thread_lock = threading.RLock()

    # -- low-level I/O ------------------------------------------------------

    def _load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise StoreError(f"Failed to read {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            return []
        items = raw.get(COLLECTION_KEY, [])
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    def _save(self, docs: list[dict[str, Any]]) -> None:
        payload = {"version": 1, COLLECTION_KEY: docs}
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as handle:
                yaml.safe_dump(payload, handle, sort_keys=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to write {self.path}: {exc}") from exc

    def _locked(self) -> Any:
        """Acquire the file lock; the returned proxy releases it on exit."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            return self._lock.acquire()
        except (OSError, Timeout) as exc:
            raise StoreError(f"Could not lock {self.path}: {exc}") from exc

    # -- public API ---------------------------------------------------------

    def list(self) -> list[Task]:
        with self._thread_lock:
            with self._locked():
                # records without an id cannot be addressed; leave them out
                return [Task.from_dict(d) for d in self._load() if d.get("id")]

    def get(self, task_id: str) -> Optional[Task]:
        for task in self.list():
            if task.id == task_id:
                return task
        return None

    def insert(self, task: Task) -> Task:
        with self._thread_lock:
            with self._locked():
                docs = self._load()
                if task.id and any(d.get("id") == task.id for d in docs):
                    raise StoreError(f"Task {task.id} already exists")
                task.id = task.id or generate_id()
                task.created_at = now_iso()
                task.updated_at = task.created_at
                docs.append(task.to_dict())
                self._save(docs)
        return task

    def replace(self, task: Task) -> Optional[Task]:
        with self._thread_lock:
            with self._locked():
                docs = self._load()
                for idx, doc in enumerate(docs):
                    if task.id and doc.get("id") == task.id:
                        task.touch()
                        docs[idx] = task.to_dict()
                        self._save(docs)
                        return task
        return None

    def delete(self, task_id: str) -> bool:
        if not task_id:
            return False
        with self._thread_lock:
            with self._locked():
                docs = self._load()
                keep = [d for d in docs if d.get("id") != task_id]
                if len(keep) == len(docs):
                    return False
                self._save(keep)
        return True


# ---------------------------------------------------------------------------
# Connection URLs
# ---------------------------------------------------------------------------

def open_store(url: str) -> TaskRepository:
    """Open the collection named by *url*.

    Accepted forms: ``memory://``, ``yaml://<path>``, ``file://<path>`` or a
    bare filesystem path.  Relative paths resolve against the working
    directory.
    """
    if not url:
        raise ConfigError("Store URL must not be empty")
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme == "memory":
        logger.debug("Using in-memory task store")
        return MemoryTaskRepository()
    if scheme in ("yaml", "file"):
        path = Path(parsed.netloc + parsed.path).expanduser()
    elif scheme == "" or len(scheme) == 1:
        # bare path (a single-letter scheme is a Windows drive)
        path = Path(url).expanduser()
    else:
        raise ConfigError(f"Unsupported store URL scheme: {scheme!r}")
    if not str(path) or str(path) == ".":
        raise ConfigError(f"Store URL has no path: {url!r}")
    logger.debug("Using YAML task store at {}", path)
    return FileTaskRepository(path)
