"""Summary: Core application services for TaskPilot.

Importance: Orchestrates classification, persistence, and history logging for tasks.
Alternatives: Build a full service layer with a dependency injection framework.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from datetime import datetime, timezone
from typing import Any

from taskpilot.classifier import RuleBasedClassifier
from taskpilot.models import (
    CATEGORIES,
    DEFAULT_STATUS,
    PRIORITIES,
    STATUSES,
    ClassificationResult,
    Task,
    TaskHistoryEntry,
)
from taskpilot.storage.sqlite_store import SqliteStore, StoredHistoryEntry, StoredTask


logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class TaskNotFoundError(ValueError):
    """Raised when a task ID does not exist in storage."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class TaskService:
    """Summary: Manages task creation, updates, and history.

    Importance: Keeps the classifier and datastore consistent for every write.
    Alternatives: Let HTTP handlers talk to storage directly.
    """

    store: SqliteStore
    classifier: RuleBasedClassifier = field(default_factory=RuleBasedClassifier)

    def classify(self, title: str, description: str | None = None) -> ClassificationResult:
        """Summary: Classify task text without persisting anything.

        Importance: Lets clients preview labels before creating a task.
        Alternatives: Expose the classifier only through task creation.
        """

        return self.classifier.classify(title, description)

    def create_task(
        self,
        title: str,
        description: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        status: str = DEFAULT_STATUS,
        assigned_to: str | None = None,
        due_date: str | None = None,
    ) -> tuple[StoredTask, ClassificationResult]:
        """Summary: Classify, store, and log a new task.

        Importance: Explicit category and priority win over the inferred labels.
        Alternatives: Reject tasks whose labels disagree with the classifier.
        """

        classification = self.classifier.classify(title, description)
        task = Task(
            title=title,
            description=description or None,
            category=category or classification.category,
            priority=priority or classification.priority,
            status=status or DEFAULT_STATUS,
            assigned_to=assigned_to or None,
            due_date=due_date or None,
            extracted_entities=classification.extracted_entities,
            suggested_actions=classification.suggested_actions,
        )
        now = utc_now()
        stored = self.store.create_task(task, created_at=now)
        new_value = stored.to_dict()
        new_value.pop("id")
        self.store.add_history(
            TaskHistoryEntry(
                task_id=stored.id,
                action="created",
                new_value=new_value,
                changed_by=assigned_to or SYSTEM_ACTOR,
                changed_at=now,
            )
        )
        logger.info("Created task %s as %s/%s.", stored.id, stored.category, stored.priority)
        return stored, classification

    def list_tasks(
        self,
        status: str | None = None,
        category: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[StoredTask], int]:
        """Summary: List tasks with filters and pagination.

        Importance: Supports dashboards and filtered queues.
        Alternatives: Return all tasks and filter on the client.
        """

        return self.store.list_tasks(
            status=status,
            category=category,
            priority=priority,
            search=search,
            limit=limit,
            offset=offset,
        )

    def get_task(self, task_id: int) -> tuple[StoredTask, list[StoredHistoryEntry]]:
        """Summary: Load a task with its change history.

        Importance: Gives detail views the full audit trail.
        Alternatives: Fetch history through a separate endpoint.
        """

        task = self.store.get_task(task_id)
        if not task:
            raise TaskNotFoundError(task_id)
        return task, self.store.list_history(task_id)

    def update_task(self, task_id: int, changes: dict[str, Any]) -> StoredTask:
        """Summary: Apply a partial update and record it in history.

        Importance: Text edits refresh entities and suggested actions but keep the stored labels.
        Alternatives: Reclassify category and priority on every text edit.
        """

        old_task = self.store.get_task(task_id)
        if not old_task:
            raise TaskNotFoundError(task_id)
        update_data = dict(changes)
        if "title" in changes or "description" in changes:
            title = changes.get("title", old_task.title)
            description = changes.get("description", old_task.description)
            classification = self.classifier.classify(title, description)
            update_data["extracted_entities"] = classification.extracted_entities.to_dict()
            update_data["suggested_actions"] = classification.suggested_actions
        now = utc_now()
        update_data["updated_at"] = now
        updated = self.store.update_task(task_id, update_data)
        if not updated:
            raise TaskNotFoundError(task_id)
        new_status = changes.get("status")
        action = "status_changed" if new_status and new_status != old_task.status else "updated"
        self.store.add_history(
            TaskHistoryEntry(
                task_id=task_id,
                action=action,
                old_value=old_task.to_dict(),
                new_value=update_data,
                changed_by=changes.get("assigned_to") or old_task.assigned_to or SYSTEM_ACTOR,
                changed_at=now,
            )
        )
        logger.info("Updated task %s (%s).", task_id, action)
        return updated

    def delete_task(self, task_id: int) -> None:
        """Summary: Delete a task and record the deletion.

        Importance: History survives the task so deletions stay auditable.
        Alternatives: Cascade-delete history with the task.
        """

        old_task = self.store.get_task(task_id)
        if not old_task or not self.store.delete_task(task_id):
            raise TaskNotFoundError(task_id)
        self.store.add_history(
            TaskHistoryEntry(
                task_id=task_id,
                action="deleted",
                old_value=old_task.to_dict(),
                changed_by=old_task.assigned_to or SYSTEM_ACTOR,
                changed_at=utc_now(),
            )
        )
        logger.info("Deleted task %s.", task_id)

    def stats(self) -> dict[str, Any]:
        """Summary: Count tasks per status, category, and priority.

        Importance: Provides lightweight analytics for dashboards.
        Alternatives: Build a separate analytics service.
        """

        by_status = self.store.count_by("status")
        return {
            "total": sum(by_status.values()),
            "by_status": _zero_filled(STATUSES, by_status),
            "by_category": _zero_filled(CATEGORIES, self.store.count_by("category")),
            "by_priority": _zero_filled(PRIORITIES, self.store.count_by("priority")),
        }


def _zero_filled(labels: tuple[str, ...], counts: dict[str, int]) -> dict[str, int]:
    return {label: counts.get(label, 0) for label in labels}
