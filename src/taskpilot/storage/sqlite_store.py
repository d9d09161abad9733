"""Summary: SQLite storage implementation for TaskPilot.

Importance: Provides a local-first persistence layer for tasks and their history.
Alternatives: Use an ORM or a hosted Postgres database.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from taskpilot.models import Task, TaskHistoryEntry

TASK_COLUMNS = (
    "id",
    "title",
    "description",
    "category",
    "priority",
    "status",
    "assigned_to",
    "due_date",
    "extracted_entities",
    "suggested_actions",
    "created_at",
    "updated_at",
)

UPDATABLE_COLUMNS = frozenset(TASK_COLUMNS) - {"id", "created_at"}
JSON_COLUMNS = frozenset({"extracted_entities", "suggested_actions"})


@dataclass(frozen=True)
class StoredTask:
    """Summary: Task record with database identifier and timestamps.

    Importance: Allows referencing tasks from history entries and API routes.
    Alternatives: Use the task title as a natural key.
    """

    id: int
    title: str
    description: str | None
    category: str
    priority: str
    status: str
    assigned_to: str | None
    due_date: str | None
    extracted_entities: dict[str, list[str]]
    suggested_actions: list[str]
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return {column: getattr(self, column) for column in TASK_COLUMNS}


@dataclass(frozen=True)
class StoredHistoryEntry:
    """Summary: History record with database identifier.

    Importance: Lets clients render a task timeline.
    Alternatives: Return only the latest change.
    """

    id: int
    task_id: int
    action: str
    old_value: dict[str, Any] | None
    new_value: dict[str, Any] | None
    changed_by: str
    changed_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "action": self.action,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "changed_by": self.changed_by,
            "changed_at": self.changed_at,
        }


class SqliteStore:
    """Summary: SQLite-backed storage for TaskPilot.

    Importance: Enables local-first persistence with minimal dependencies.
    Alternatives: Use Postgres and SQLAlchemy from day one.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready for task writes and queries.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    category TEXT NOT NULL,
                    priority TEXT NOT NULL,
                    status TEXT NOT NULL,
                    assigned_to TEXT,
                    due_date TEXT,
                    extracted_entities TEXT NOT NULL,
                    suggested_actions TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS task_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    task_id INTEGER NOT NULL,
                    action TEXT NOT NULL,
                    old_value TEXT,
                    new_value TEXT,
                    changed_by TEXT NOT NULL,
                    changed_at TEXT NOT NULL
                )
                """
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_task_history_task ON task_history (task_id)"
            )
            connection.commit()

    def create_task(self, task: Task, created_at: str) -> StoredTask:
        """Summary: Persist a task and return the stored row.

        Importance: Returns the database view so callers echo exactly what was saved.
        Alternatives: Return only the new identifier.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO tasks (
                    title, description, category, priority, status, assigned_to, due_date,
                    extracted_entities, suggested_actions, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.title,
                    task.description,
                    task.category,
                    task.priority,
                    task.status,
                    task.assigned_to,
                    task.due_date,
                    json.dumps(task.extracted_entities.to_dict()),
                    json.dumps(list(task.suggested_actions)),
                    created_at,
                    created_at,
                ),
            )
            task_id = cursor.lastrowid
            connection.commit()
        stored = self.get_task(int(task_id))
        if stored is None:
            raise sqlite3.DatabaseError(f"Task {task_id} vanished after insert")
        return stored

    def get_task(self, task_id: int) -> StoredTask | None:
        """Summary: Retrieve a task by database ID.

        Importance: Supports detail views, updates, and deletes.
        Alternatives: Filter tasks in memory after listing all.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                f"SELECT {', '.join(TASK_COLUMNS)} FROM tasks WHERE id = ?",
                (task_id,),
            )
            row = cursor.fetchone()
        return _task_from_row(row) if row else None

    def list_tasks(
        self,
        status: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[StoredTask], int]:
        """Summary: List tasks matching optional filters, newest first.

        Importance: Powers paginated task lists with an exact total count.
        Alternatives: Return every task and paginate on the client.
        """

        clauses: list[str] = []
        params: list[Any] = []
        for column, value in (("status", status), ("category", category), ("priority", priority)):
            if value:
                clauses.append(f"{column} = ?")
                params.append(value)
        if search:
            clauses.append("title LIKE ?")
            params.append(f"%{search}%")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(f"SELECT COUNT(*) FROM tasks {where}", params)
            total = int(cursor.fetchone()[0])
            cursor.execute(
                f"""
                SELECT {', '.join(TASK_COLUMNS)}
                FROM tasks
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = cursor.fetchall()
        return [_task_from_row(row) for row in rows], total

    def update_task(self, task_id: int, changes: dict[str, Any]) -> StoredTask | None:
        """Summary: Apply column changes to a task.

        Importance: Supports partial updates without rewriting the whole row.
        Alternatives: Delete and recreate tasks with new values.
        """

        unknown = set(changes) - UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown task columns: {', '.join(sorted(unknown))}")
        if changes:
            assignments = ", ".join(f"{column} = ?" for column in changes)
            values = [
                json.dumps(value) if column in JSON_COLUMNS else value
                for column, value in changes.items()
            ]
            with self._connection() as connection:
                cursor = connection.cursor()
                cursor.execute(
                    f"UPDATE tasks SET {assignments} WHERE id = ?",
                    [*values, task_id],
                )
                connection.commit()
        return self.get_task(task_id)

    def delete_task(self, task_id: int) -> bool:
        """Summary: Delete a task by ID.

        Importance: Lets clients remove tasks while history stays append-only.
        Alternatives: Soft-delete tasks with a status flag.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            deleted = cursor.rowcount > 0
            connection.commit()
        return deleted

    def add_history(self, entry: TaskHistoryEntry) -> int:
        """Summary: Append a history entry for a task.

        Importance: Records who changed what and when.
        Alternatives: Use structured logs instead of database storage.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                INSERT INTO task_history (task_id, action, old_value, new_value, changed_by, changed_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.task_id,
                    entry.action,
                    _dump_optional(entry.old_value),
                    _dump_optional(entry.new_value),
                    entry.changed_by,
                    entry.changed_at,
                ),
            )
            entry_id = cursor.lastrowid
            connection.commit()
        return int(entry_id)

    def list_history(self, task_id: int) -> list[StoredHistoryEntry]:
        """Summary: Retrieve history for a task, newest first.

        Importance: Backs the timeline shown on task detail views.
        Alternatives: Store history inside the task row as a JSON array.
        """

        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(
                """
                SELECT id, task_id, action, old_value, new_value, changed_by, changed_at
                FROM task_history
                WHERE task_id = ?
                ORDER BY changed_at DESC, id DESC
                """,
                (task_id,),
            )
            rows = cursor.fetchall()
        return [
            StoredHistoryEntry(
                id=row[0],
                task_id=row[1],
                action=row[2],
                old_value=_load_optional(row[3]),
                new_value=_load_optional(row[4]),
                changed_by=row[5],
                changed_at=row[6],
            )
            for row in rows
        ]

    def count_by(self, column: str) -> dict[str, int]:
        """Summary: Count tasks grouped by a label column.

        Importance: Provides lightweight analytics for dashboards.
        Alternatives: Build a separate analytics service.
        """

        if column not in {"status", "category", "priority"}:
            raise ValueError(f"Cannot group tasks by {column}")
        with self._connection() as connection:
            cursor = connection.cursor()
            cursor.execute(f"SELECT {column}, COUNT(*) FROM tasks GROUP BY {column}")
            rows = cursor.fetchall()
        return {row[0]: int(row[1]) for row in rows}

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()


def _task_from_row(row: tuple[Any, ...]) -> StoredTask:
    values = dict(zip(TASK_COLUMNS, row))
    for column in JSON_COLUMNS:
        values[column] = json.loads(values[column])
    return StoredTask(**values)


def _dump_optional(value: dict[str, Any] | None) -> str | None:
    return json.dumps(value) if value is not None else None


def _load_optional(raw: str | None) -> dict[str, Any] | None:
    return json.loads(raw) if raw is not None else None

