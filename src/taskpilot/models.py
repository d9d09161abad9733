"""Summary: Domain model dataclasses for TaskPilot.

Importance: Defines the task, history, and classification records shared across layers.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

CATEGORIES = ("scheduling", "finance", "technical", "safety", "general")
PRIORITIES = ("high", "medium", "low")
STATUSES = ("pending", "in_progress", "completed")

DEFAULT_CATEGORY = "general"
DEFAULT_PRIORITY = "low"
DEFAULT_STATUS = "pending"


@dataclass(frozen=True)
class ExtractedEntities:
    """Summary: Structured facts pulled from task text.

    Importance: Gives clients dates, people, and verbs without re-parsing text.
    Alternatives: Return raw regex matches keyed by pattern.
    """

    dates: list[str] = field(default_factory=list)
    people: list[str] = field(default_factory=list)
    locations: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return asdict(self)


@dataclass(frozen=True)
class ClassificationResult:
    """Summary: Output of the rule-based task classifier.

    Importance: Travels with the stored task and back to the caller for transparency.
    Alternatives: Store only the category and priority labels.
    """

    category: str
    priority: str
    extracted_entities: ExtractedEntities
    suggested_actions: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "priority": self.priority,
            "extracted_entities": self.extracted_entities.to_dict(),
            "suggested_actions": list(self.suggested_actions),
        }


@dataclass(frozen=True)
class Task:
    """Summary: Represents a task ready to be persisted.

    Importance: Core unit for classification, listing, and history workflows.
    Alternatives: Persist request payloads without a domain record.
    """

    title: str
    description: str | None
    category: str
    priority: str
    status: str = DEFAULT_STATUS
    assigned_to: str | None = None
    due_date: str | None = None
    extracted_entities: ExtractedEntities = field(default_factory=ExtractedEntities)
    suggested_actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TaskHistoryEntry:
    """Summary: Append-only record of a change made to a task.

    Importance: Keeps an audit trail of creation, edits, and status moves.
    Alternatives: Rely on updated_at timestamps alone.
    """

    task_id: int
    action: str
    changed_by: str
    changed_at: str
    old_value: dict[str, Any] | None = None
    new_value: dict[str, Any] | None = None
