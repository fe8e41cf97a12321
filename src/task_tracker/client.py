"""HTTP client for the task API."""

from __future__ import annotations

from typing import Any, Optional

import httpx

DEFAULT_API_URL = "http://localhost:5000"
TASKS_PATH = "/api/tasks"


class TaskClient:
    """Thin wrapper over :class:`httpx.Client` speaking the task API.

    Non-2xx responses raise :class:`httpx.HTTPStatusError`; transport failures
    raise the usual :class:`httpx.RequestError` subclasses.

    Args:
        base_url: Server root, used only when *http* is not given.
        http: Pre-built client (e.g. FastAPI's ``TestClient``).
    """

    def __init__(self, base_url: str = DEFAULT_API_URL, http: Optional[httpx.Client] = None) -> None:
        self._owns_http = http is None
        self.http = http or httpx.Client(base_url=base_url, headers={"Content-Type": "application/json"})

    def close(self) -> None:
        if self._owns_http:
            self.http.close()

    def __enter__(self) -> "TaskClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        resp = self.http.request(method, path, **kwargs)
        resp.raise_for_status()
        return resp.json()

    def list_tasks(self, keyword: str = "", status: str = "") -> list[dict[str, Any]]:
        return self._send("GET", TASKS_PATH, params={"keyword": keyword, "status": status})

    def get_task(self, task_id: str) -> dict[str, Any]:
        return self._send("GET", f"{TASKS_PATH}/{task_id}")

    def create_task(self, title: str, description: str = "", status: str = "pending") -> dict[str, Any]:
        body = {"title": title, "description": description, "status": status}
        return self._send("POST", TASKS_PATH, json=body)

    def update_task(self, task_id: str, **fields: Any) -> dict[str, Any]:
        return self._send("PUT", f"{TASKS_PATH}/{task_id}", json=fields)

    def delete_task(self, task_id: str) -> dict[str, Any]:
        return self._send("DELETE", f"{TASKS_PATH}/{task_id}")
