"""Command-line entry point: run the API server or drive the task board."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
from loguru import logger
from rich.console import Console
from rich.table import Table

from .board import TaskBoard
from .client import DEFAULT_API_URL, TaskClient
from .config import load_settings, parse_port
from .errors import ConfigError
from .logging_setup import configure_logging
from .model import TaskStatus

_STATUS_STYLE = {
    TaskStatus.PENDING.value: "yellow",
    TaskStatus.IN_PROGRESS.value: "cyan",
    TaskStatus.COMPLETED.value: "green",
}

console = Console()


def _build_client(api_url: str) -> TaskClient:
    return TaskClient(base_url=api_url)


def render_tasks(tasks: list[dict[str, Any]], out: Optional[Console] = None) -> None:
    table = Table(title=f"Tasks ({len(tasks)})")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Description")
    table.add_column("Status")
    table.add_column("Created")
    for task in tasks:
        status = task.get("status", "")
        table.add_row(
            task.get("id", ""),
            task.get("title", ""),
            task.get("description", ""),
            f"[{_STATUS_STYLE.get(status, 'white')}]{status}[/]",
            task.get("createdAt", ""),
        )
    (out or console).print(table)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from .server import create_app

    try:
        settings = load_settings(args.config)
        if args.port is not None:
            settings.port = parse_port(args.port)
    except ConfigError as exc:
        logger.error("Invalid configuration: {}", exc)
        return 1
    if args.host:
        settings.host = args.host
    if args.store_url:
        settings.store_url = args.store_url
    configure_logging(args.log_level or settings.log_level)

    try:
        app = create_app(settings)
    except ConfigError as exc:
        logger.error("Invalid configuration: {}", exc)
        return 1
    logger.info("Serving tasks from {} at http://{}:{}", settings.store_url, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


def _list(args: argparse.Namespace) -> int:
    with _build_client(args.api_url) as client:
        board = TaskBoard(client)
        board.keyword = args.keyword
        if not board.set_status_filter(args.status):
            return 1
        render_tasks(board.tasks)
    return 0


def _add(args: argparse.Namespace) -> int:
    with _build_client(args.api_url) as client:
        board = TaskBoard(client)
        board.set_form(title=args.title, description=args.description, status=args.status)
        if not board.submit():
            return 1
        render_tasks(board.tasks)
    return 0


def _edit(args: argparse.Namespace) -> int:
    with _build_client(args.api_url) as client:
        board = TaskBoard(client)
        try:
            task = client.get_task(args.task_id)
        except httpx.HTTPError as exc:
            logger.error("Error fetching task {}: {}", args.task_id, exc)
            return 1
        board.edit(task)
        board.set_form(title=args.title, description=args.description, status=args.status)
        if not board.submit():
            return 1
        render_tasks(board.tasks)
    return 0


def _delete(args: argparse.Namespace) -> int:
    with _build_client(args.api_url) as client:
        board = TaskBoard(client)
        if not board.delete(args.task_id):
            return 1
        render_tasks(board.tasks)
    return 0


def build_parser() -> argparse.ArgumentParser:
    statuses = [s.value for s in TaskStatus]
    parser = argparse.ArgumentParser(description="Task Tracker - REST task API and command-line board")
    parser.add_argument("--api-url", default=DEFAULT_API_URL, help=f"Task API root (default: {DEFAULT_API_URL})")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Start the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", default=None, type=int)
    serve.add_argument("--store-url", default=None, help="memory://, yaml://<path>, or a file path")
    serve.add_argument("--config", default=None, type=Path, help="YAML settings file")
    serve.set_defaults(func=_serve)

    tlist = subparsers.add_parser("list", help="List tasks")
    tlist.add_argument("--keyword", default="")
    tlist.add_argument("--status", default="", choices=[""] + statuses)
    tlist.set_defaults(func=_list)

    add = subparsers.add_parser("add", help="Create a task")
    add.add_argument("title")
    add.add_argument("--description", default="")
    add.add_argument("--status", default=TaskStatus.PENDING.value, choices=statuses)
    add.set_defaults(func=_add)

    edit = subparsers.add_parser("edit", help="Update a task")
    edit.add_argument("task_id")
    edit.add_argument("--title", default=None)
    edit.add_argument("--description", default=None)
    edit.add_argument("--status", default=None, choices=statuses)
    edit.set_defaults(func=_edit)

    delete = subparsers.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id")
    delete.set_defaults(func=_delete)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command != "serve":
        configure_logging(args.log_level or "WARNING")
    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return int(handler(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
