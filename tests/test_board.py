"""Tests for the HTTP client and board state (client.py, board.py)."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient
from loguru import logger

from task_tracker.board import TaskBoard
from task_tracker.client import TaskClient
from task_tracker.model import TaskStatus
from task_tracker.server.api import create_app
from task_tracker.store import MemoryTaskRepository


@pytest.fixture
def client() -> TaskClient:
    app = create_app(store=MemoryTaskRepository(), enable_cors=False)
    return TaskClient(http=TestClient(app))


@pytest.fixture
def board(client: TaskClient) -> TaskBoard:
    b = TaskBoard(client)
    assert b.mount() is True
    return b


@pytest.fixture
def error_log():
    messages: list[str] = []
    sink_id = logger.add(lambda m: messages.append(str(m)), level="ERROR")
    yield messages
    logger.remove(sink_id)


def _offline_client() -> TaskClient:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    return TaskClient(http=httpx.Client(base_url="http://offline", transport=httpx.MockTransport(handler)))


class TestTaskClient:
    def test_crud(self, client: TaskClient) -> None:
        created = client.create_task("Buy milk", description="2L")
        assert created["status"] == "pending"
        assert client.get_task(created["id"]) == created

        updated = client.update_task(created["id"], status="completed")
        assert updated["status"] == "completed"

        assert client.list_tasks(status="completed")[0]["id"] == created["id"]
        assert client.delete_task(created["id"]) == {"message": "Task deleted successfully"}

    def test_errors_raise(self, client: TaskClient) -> None:
        with pytest.raises(httpx.HTTPStatusError) as info:
            client.get_task("task-000000000000")
        assert info.value.response.status_code == 404
        with pytest.raises(httpx.HTTPStatusError):
            client.create_task("")


class TestTaskBoard:
    def test_submit_creates_and_resets_form(self, board: TaskBoard) -> None:
        board.set_form(title="Write tests", description="for the board", status="in-progress")
        assert board.submit() is True
        assert [t["title"] for t in board.tasks] == ["Write tests"]
        assert board.tasks[0]["status"] == "in-progress"
        assert board.form.title == ""
        assert board.form.description == ""
        assert board.form.status is TaskStatus.PENDING

    def test_edit_then_submit_updates(self, board: TaskBoard) -> None:
        board.set_form(title="Draft")
        board.submit()
        task = board.tasks[0]

        board.edit(task)
        assert board.editing is task
        assert board.form.title == "Draft"
        board.set_form(title="Final", status="completed")
        assert board.submit() is True

        assert board.editing is None
        assert len(board.tasks) == 1
        assert board.tasks[0]["id"] == task["id"]
        assert board.tasks[0]["title"] == "Final"
        assert board.tasks[0]["status"] == "completed"

    def test_filters_refetch(self, board: TaskBoard) -> None:
        for title, status in (("milk", "pending"), ("bread", "completed"), ("milkshake", "completed")):
            board.set_form(title=title, status=status)
            board.submit()

        board.set_keyword("MILK")
        assert {t["title"] for t in board.tasks} == {"milk", "milkshake"}
        board.set_status_filter("completed")
        assert [t["title"] for t in board.tasks] == ["milkshake"]
        board.set_keyword("")
        board.set_status_filter("")
        assert len(board.tasks) == 3

    def test_delete_refetches(self, board: TaskBoard) -> None:
        board.set_form(title="temp")
        board.submit()
        assert board.delete(board.tasks[0]["id"]) is True
        assert board.tasks == []

    def test_invalid_status_rejected_in_form(self, board: TaskBoard) -> None:
        with pytest.raises(ValueError):
            board.set_form(status="archived")
        with pytest.raises(ValueError):
            board.set_status_filter("archived")
        assert board.form.status is TaskStatus.PENDING

    def test_server_rejection_is_logged_and_form_kept(self, board: TaskBoard, error_log) -> None:
        board.set_form(title="   ")
        assert board.submit() is False
        assert board.form.title == "   "
        assert board.tasks == []
        assert any("Error saving task" in m for m in error_log)


class TestOfflineBoard:
    def test_failures_are_logged_not_raised(self, error_log) -> None:
        board = TaskBoard(_offline_client())
        assert board.mount() is False
        assert board.tasks == []

        board.set_form(title="x")
        assert board.submit() is False
        assert board.delete("task-000000000000") is False
        assert len(error_log) == 3
