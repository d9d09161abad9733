"""Summary: Tests for SQLite storage layer.

Importance: Ensures persistence behaves as expected for tasks and history.
Alternatives: Rely on manual testing for storage operations.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from taskpilot.models import ExtractedEntities, Task, TaskHistoryEntry
from taskpilot.storage.sqlite_store import SqliteStore


def _store(tmp_path: Path) -> SqliteStore:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    return store


def _task(title: str, category: str = "general", priority: str = "low", status: str = "pending") -> Task:
    return Task(
        title=title,
        description=None,
        category=category,
        priority=priority,
        status=status,
        extracted_entities=ExtractedEntities(dates=["today"]),
        suggested_actions=["Review task"],
    )


def test_store_persists_tasks(tmp_path: Path) -> None:
    """Summary: Verify tasks are saved and read back with JSON fields decoded.

    Importance: Confirms classification output survives a round trip through SQLite.
    Alternatives: Store entities in separate tables.
    """

    store = _store(tmp_path)
    stored = store.create_task(_task("Hello"), created_at="2026-01-15T10:00:00+00:00")
    assert stored.id > 0
    assert stored.created_at == stored.updated_at
    fetched = store.get_task(stored.id)
    assert fetched == stored
    assert fetched.extracted_entities["dates"] == ["today"]
    assert fetched.extracted_entities["locations"] == []
    assert fetched.suggested_actions == ["Review task"]


def test_store_lists_with_filters_and_pagination(tmp_path: Path) -> None:
    """Summary: Verify filters, search, ordering, and total counts.

    Importance: Backs the paginated list endpoint.
    Alternatives: Filter tasks in memory.
    """

    store = _store(tmp_path)
    store.create_task(_task("Pay invoice", category="finance"), created_at="2026-01-01T00:00:00")
    store.create_task(_task("Fix bug", category="technical", priority="high"), created_at="2026-01-02T00:00:00")
    store.create_task(_task("Pay rent", category="finance", status="completed"), created_at="2026-01-03T00:00:00")

    tasks, total = store.list_tasks()
    assert total == 3
    assert [task.title for task in tasks] == ["Pay rent", "Fix bug", "Pay invoice"]

    tasks, total = store.list_tasks(category="finance", status="pending")
    assert total == 1
    assert tasks[0].title == "Pay invoice"

    tasks, total = store.list_tasks(search="PAY", limit=1, offset=1)
    assert total == 2
    assert [task.title for task in tasks] == ["Pay invoice"]

    tasks, total = store.list_tasks(priority="high")
    assert total == 1
    assert tasks[0].title == "Fix bug"


def test_store_updates_and_deletes(tmp_path: Path) -> None:
    store = _store(tmp_path)
    stored = store.create_task(_task("Hello"), created_at="2026-01-15T10:00:00")
    updated = store.update_task(
        stored.id,
        {"status": "completed", "suggested_actions": ["Update status"], "updated_at": "2026-01-16T10:00:00"},
    )
    assert updated.status == "completed"
    assert updated.suggested_actions == ["Update status"]
    assert updated.created_at == "2026-01-15T10:00:00"
    assert store.delete_task(stored.id) is True
    assert store.get_task(stored.id) is None
    assert store.delete_task(stored.id) is False
    assert store.update_task(stored.id, {"status": "pending"}) is None


def test_store_rejects_unknown_columns(tmp_path: Path) -> None:
    store = _store(tmp_path)
    stored = store.create_task(_task("Hello"), created_at="2026-01-15T10:00:00")
    with pytest.raises(ValueError):
        store.update_task(stored.id, {"id": 99})


def test_store_history_is_newest_first(tmp_path: Path) -> None:
    """Summary: Verify history entries are appended and listed newest first.

    Importance: Supports task timelines in detail views.
    Alternatives: Store history in a flat log file.
    """

    store = _store(tmp_path)
    store.add_history(
        TaskHistoryEntry(
            task_id=1,
            action="created",
            changed_by="system",
            changed_at="2026-01-15T10:00:00",
            new_value={"title": "Hello"},
        )
    )
    store.add_history(
        TaskHistoryEntry(
            task_id=1,
            action="status_changed",
            changed_by="alice",
            changed_at="2026-01-16T10:00:00",
            old_value={"status": "pending"},
            new_value={"status": "completed"},
        )
    )
    history = store.list_history(1)
    assert [entry.action for entry in history] == ["status_changed", "created"]
    assert history[0].old_value == {"status": "pending"}
    assert history[1].old_value is None
    assert store.list_history(2) == []


def test_store_counts_by_label(tmp_path: Path) -> None:
    store = _store(tmp_path)
    store.create_task(_task("A", category="finance"), created_at="2026-01-01T00:00:00")
    store.create_task(_task("B", category="finance"), created_at="2026-01-01T00:00:00")
    assert store.count_by("category") == {"finance": 2}
    with pytest.raises(ValueError):
        store.count_by("title")
