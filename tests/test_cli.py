from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from task_tracker import cli
from task_tracker.cli import main
from task_tracker.client import TaskClient
from task_tracker.server.api import create_app
from task_tracker.store import MemoryTaskRepository


@pytest.fixture
def api(monkeypatch: pytest.MonkeyPatch) -> TaskClient:
    client = TaskClient(http=TestClient(create_app(store=MemoryTaskRepository(), enable_cors=False)))
    monkeypatch.setattr(cli, "_build_client", lambda api_url: client)
    return client


def test_add_list_edit_delete(api: TaskClient, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["add", "Milk", "--description", "2L"]) == 0
    task_id = api.list_tasks()[0]["id"]

    assert main(["list", "--keyword", "milk"]) == 0
    assert "Milk" in capsys.readouterr().out

    assert main(["edit", task_id, "--status", "completed"]) == 0
    assert api.get_task(task_id)["status"] == "completed"
    assert api.get_task(task_id)["title"] == "Milk"
    capsys.readouterr()

    assert main(["list", "--status", "pending"]) == 0
    assert "Milk" not in capsys.readouterr().out

    assert main(["delete", task_id]) == 0
    assert api.list_tasks() == []


def test_failures_exit_nonzero(api: TaskClient) -> None:
    assert main(["edit", "task-000000000000", "--title", "x"]) == 1
    assert main(["delete", "task-000000000000"]) == 1
    assert main(["add", " "]) == 1


def test_rejects_unknown_status_choice() -> None:
    with pytest.raises(SystemExit):
        main(["list", "--status", "archived"])


def test_serve_rejects_bad_config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("port: nope\n", encoding="utf-8")
    monkeypatch.delenv("TASK_TRACKER_PORT", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    assert main(["serve", "--config", str(cfg)]) == 1


@pytest.mark.parametrize("port", ["0", "70000"])
def test_serve_rejects_out_of_range_port(port: str, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("TASK_TRACKER_CONFIG", raising=False)
    monkeypatch.delenv("TASK_TRACKER_PORT", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    assert main(["serve", "--port", port, "--store-url", "memory://"]) == 1
