"""Summary: FastAPI application for TaskPilot.

Importance: Exposes HTTP endpoints for task CRUD, classification, and history.
Alternatives: Use a CLI-only workflow or a different web framework.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskpilot.app import build_services
from taskpilot.config import AppConfig
from taskpilot.schemas import (
    CategoryName,
    ClassifyRequest,
    PriorityName,
    StatusName,
    TaskCreateRequest,
    TaskUpdateRequest,
)
from taskpilot.services import TaskNotFoundError, utc_now


logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_message(exc: RequestValidationError) -> str:
    """Summary: Format the first validation error as a single message.

    Importance: Matches the one-line error body clients already expect.
    Alternatives: Return FastAPI's full error list.
    """

    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(location)
    message = str(first.get("msg", "Invalid value"))
    return f'"{field}" {message}' if field else message


def create_app(config: AppConfig) -> FastAPI:
    """Summary: Create a FastAPI app wired to TaskPilot services.

    Importance: Ensures the API layer shares the same configuration and storage.
    Alternatives: Instantiate services globally outside the factory.
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    app = FastAPI(title="TaskPilot API", version="0.1.0")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    services = build_services(config)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(TaskNotFoundError)
    async def task_not_found(request: Request, exc: TaskNotFoundError) -> JSONResponse:
        return _error(404, "Task not found")

    def require_api_key(x_api_key: str | None = Header(default=None)) -> None:
        """Summary: Enforce API key authentication when configured.

        Importance: Adds a minimal security layer for local and private deployments.
        Alternatives: Use OAuth or session-based authentication.
        """

        if not config.api_key:
            return
        if x_api_key != config.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")

    def storage_failure(operation: str) -> HTTPException:
        logger.exception("Error trying to %s.", operation)
        return HTTPException(status_code=500, detail=f"Failed to {operation}")

    @app.get("/health")
    def health() -> dict[str, str]:
        """Summary: Health check endpoint.

        Importance: Supports uptime checks in local and cloud deployments.
        Alternatives: Use a metrics endpoint only.
        """

        return {"status": "ok", "timestamp": utc_now()}

    @app.post("/api/tasks", status_code=201, dependencies=[Depends(require_api_key)])
    def create_task(payload: TaskCreateRequest) -> dict[str, Any]:
        """Summary: Create a task and auto-classify it.

        Importance: Returns the classification next to the stored row for transparency.
        Alternatives: Classify lazily on first read.
        """

        try:
            task, classification = services.tasks.create_task(
                title=payload.title,
                description=payload.description,
                category=payload.category,
                priority=payload.priority,
                status=payload.status,
                assigned_to=payload.assigned_to,
                due_date=payload.due_date.isoformat() if payload.due_date else None,
            )
        except sqlite3.Error as exc:
            raise storage_failure("create task") from exc
        return {"success": True, "data": task.to_dict(), "classification": classification.to_dict()}

    @app.get("/api/tasks", dependencies=[Depends(require_api_key)])
    def list_tasks(
        status: StatusName | None = None,
        category: CategoryName | None = None,
        priority: PriorityName | None = None,
        search: str | None = None,
        limit: int = Query(default=config.page_size, ge=1, le=config.max_page_size),
        offset: int = Query(default=0, ge=0),
    ) -> dict[str, Any]:
        """Summary: List tasks with filters and pagination.

        Importance: Backs filtered task queues in client apps.
        Alternatives: Return all tasks without pagination.
        """

        try:
            tasks, total = services.tasks.list_tasks(
                status=status,
                category=category,
                priority=priority,
                search=search,
                limit=limit,
                offset=offset,
            )
        except sqlite3.Error as exc:
            raise storage_failure("fetch tasks") from exc
        return {
            "success": True,
            "data": [task.to_dict() for task in tasks],
            "pagination": {"total": total, "limit": limit, "offset": offset},
        }

    @app.get("/api/tasks/{task_id}", dependencies=[Depends(require_api_key)])
    def get_task(task_id: int) -> dict[str, Any]:
        """Summary: Return a task with its history, newest change first."""

        try:
            task, history = services.tasks.get_task(task_id)
        except sqlite3.Error as exc:
            raise storage_failure("fetch task") from exc
        data = task.to_dict()
        data["history"] = [entry.to_dict() for entry in history]
        return {"success": True, "data": data}

    @app.patch("/api/tasks/{task_id}", dependencies=[Depends(require_api_key)])
    def update_task(task_id: int, payload: TaskUpdateRequest) -> dict[str, Any]:
        """Summary: Update a task and log the change.

        Importance: Status moves are logged separately from other edits.
        Alternatives: Use a dedicated status endpoint.
        """

        try:
            task = services.tasks.update_task(task_id, payload.changes())
        except sqlite3.Error as exc:
            raise storage_failure("update task") from exc
        return {"success": True, "data": task.to_dict()}

    @app.delete("/api/tasks/{task_id}", dependencies=[Depends(require_api_key)])
    def delete_task(task_id: int) -> dict[str, Any]:
        try:
            services.tasks.delete_task(task_id)
        except sqlite3.Error as exc:
            raise storage_failure("delete task") from exc
        return {"success": True, "message": "Task deleted successfully"}

    @app.post("/api/classify", dependencies=[Depends(require_api_key)])
    def classify(payload: ClassifyRequest) -> dict[str, Any]:
        """Summary: Classify task text without storing it.

        Importance: Lets clients preview category, priority, and entities.
        Alternatives: Create and delete a throwaway task.
        """

        result = services.tasks.classify(payload.title, payload.description)
        return {"success": True, "classification": result.to_dict()}

    @app.get("/api/stats", dependencies=[Depends(require_api_key)])
    def stats() -> dict[str, Any]:
        """Summary: Return task counts per status, category, and priority.

        Importance: Provides lightweight analytics for dashboards.
        Alternatives: Build a separate analytics service.
        """

        try:
            snapshot = services.tasks.stats()
        except sqlite3.Error as exc:
            raise storage_failure("fetch stats") from exc
        return {"success": True, "data": snapshot}

    return app
