"""Summary: Command-line interface for TaskPilot.

Importance: Provides a local-first entry point for classification and task workflows.
Alternatives: Build a web UI or desktop client first.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from pydantic import ValidationError

from taskpilot.app import build_services
from taskpilot.classifier import classify_task
from taskpilot.config import AppConfig
from taskpilot.models import CATEGORIES, PRIORITIES, STATUSES
from taskpilot.schemas import TaskCreateRequest, TaskUpdateRequest
from taskpilot.services import TaskNotFoundError


def build_parser() -> argparse.ArgumentParser:
    """Summary: Build the CLI argument parser.

    Importance: Defines supported commands for local operation.
    Alternatives: Use a CLI framework like Typer or Click.
    """

    parser = argparse.ArgumentParser(description="TaskPilot CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Classify task text without saving it")
    classify.add_argument("title", type=str)
    classify.add_argument("--description", type=str, default=None)

    add = subparsers.add_parser("add", help="Create a task")
    add.add_argument("title", type=str)
    _add_task_fields(add)

    list_tasks = subparsers.add_parser("list", help="List tasks")
    list_tasks.add_argument("--status", choices=STATUSES, default=None)
    list_tasks.add_argument("--category", choices=CATEGORIES, default=None)
    list_tasks.add_argument("--priority", choices=PRIORITIES, default=None)
    list_tasks.add_argument("--search", type=str, default=None)
    list_tasks.add_argument("--limit", type=_positive_int, default=None)
    list_tasks.add_argument("--offset", type=_non_negative_int, default=0)

    show = subparsers.add_parser("show", help="Show a task with its history")
    show.add_argument("task_id", type=int)

    update = subparsers.add_parser("update", help="Update a task")
    update.add_argument("task_id", type=int)
    update.add_argument("--title", type=str, default=None)
    _add_task_fields(update)

    delete = subparsers.add_parser("delete", help="Delete a task")
    delete.add_argument("task_id", type=int)

    subparsers.add_parser("stats", help="Show task statistics")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {value}")
    return number


def _add_task_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--description", type=str, default=None)
    parser.add_argument("--category", choices=CATEGORIES, default=None)
    parser.add_argument("--priority", choices=PRIORITIES, default=None)
    parser.add_argument("--status", choices=STATUSES, default=None)
    parser.add_argument("--assigned-to", dest="assigned_to", type=str, default=None)
    parser.add_argument("--due-date", dest="due_date", type=str, default=None)


def _provided_fields(args: argparse.Namespace, names: tuple[str, ...]) -> dict[str, Any]:
    return {name: getattr(args, name) for name in names if getattr(args, name, None) is not None}


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def run_cli(argv: list[str] | None = None) -> int:
    """Summary: Execute CLI commands based on arguments.

    Importance: Drives local task workflows without the HTTP layer.
    Alternatives: Invoke services via the HTTP API.
    """

    parser = build_parser()
    args = parser.parse_args(argv)
    config = AppConfig.from_env()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    if getattr(args, "limit", None) and args.limit > config.max_page_size:
        parser.error(f"--limit must be at most {config.max_page_size}")

    if args.command == "classify":
        _print_json(classify_task(args.title, args.description).to_dict())
        return 0

    if args.command == "serve":
        import uvicorn

        from taskpilot.api import create_app

        uvicorn.run(create_app(config), host=args.host or config.api_host, port=args.port or config.api_port)
        return 0

    services = build_services(config)
    field_names = ("title", "description", "category", "priority", "status", "assigned_to", "due_date")
    try:
        if args.command == "add":
            payload = TaskCreateRequest(**_provided_fields(args, field_names))
            task, classification = services.tasks.create_task(
                title=payload.title,
                description=payload.description,
                category=payload.category,
                priority=payload.priority,
                status=payload.status,
                assigned_to=payload.assigned_to,
                due_date=payload.due_date.isoformat() if payload.due_date else None,
            )
            print(f"Created task {task.id} ({task.category}/{task.priority}).")
            _print_json(classification.to_dict())
            return 0

        if args.command == "list":
            tasks, total = services.tasks.list_tasks(
                status=args.status,
                category=args.category,
                priority=args.priority,
                search=args.search,
                limit=args.limit if args.limit is not None else config.page_size,
                offset=args.offset,
            )
            for task in tasks:
                print(f"{task.id}: [{task.status}] {task.priority} {task.category} - {task.title}")
            print(f"Showing {len(tasks)} of {total} tasks.")
            return 0

        if args.command == "show":
            task, history = services.tasks.get_task(args.task_id)
            data = task.to_dict()
            data["history"] = [entry.to_dict() for entry in history]
            _print_json(data)
            return 0

        if args.command == "update":
            payload = TaskUpdateRequest(**_provided_fields(args, field_names))
            task = services.tasks.update_task(args.task_id, payload.changes())
            print(f"Updated task {task.id} ({task.status}).")
            return 0

        if args.command == "delete":
            services.tasks.delete_task(args.task_id)
            print(f"Deleted task {args.task_id}.")
            return 0

        if args.command == "stats":
            _print_json(services.tasks.stats())
            return 0
    except ValidationError as exc:
        parser.exit(2, f"Invalid task: {exc.errors()[0]['msg']}\n")
    except TaskNotFoundError as exc:
        parser.exit(1, f"{exc}\n")

    parser.error(f"Unknown command: {args.command}")
    return 2


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
