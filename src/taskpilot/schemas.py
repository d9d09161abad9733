"""Summary: Request payload schemas for the task API.

Importance: Rejects malformed task payloads before they reach the classifier or storage.
Alternatives: Validate dictionaries by hand inside each endpoint.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

CategoryName = Literal["scheduling", "finance", "technical", "safety", "general"]
PriorityName = Literal["high", "medium", "low"]
StatusName = Literal["pending", "in_progress", "completed"]

ISO_DATE_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _require_iso_date(value: Any) -> Any:
    # pydantic would otherwise read numbers as Unix timestamps
    if value is None or isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value):
        raise ValueError("must be an ISO 8601 date string")
    return value


IsoDateTime = Annotated[datetime, BeforeValidator(_require_iso_date)]


class TaskCreateRequest(BaseModel):
    """Summary: Request payload for task creation.

    Importance: Category and priority are optional overrides of the classifier.
    Alternatives: Always trust the classifier and ignore client labels.
    """

    model_config = ConfigDict(extra="forbid")

    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
    category: CategoryName | None = None
    priority: PriorityName | None = None
    status: StatusName = "pending"
    assigned_to: str | None = None
    due_date: IsoDateTime | None = None


class TaskUpdateRequest(BaseModel):
    """Summary: Request payload for partial task updates.

    Importance: Lets clients edit only the fields they send.
    Alternatives: Require full task replacement on every update.
    """

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = None
    category: CategoryName | None = None
    priority: PriorityName | None = None
    status: StatusName | None = None
    assigned_to: str | None = None
    due_date: IsoDateTime | None = None

    @model_validator(mode="after")
    def _require_one_field(self) -> "TaskUpdateRequest":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        for name in ("title", "category", "priority", "status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the client sent, with dates as ISO strings."""

        values = self.model_dump(exclude_unset=True)
        if values.get("due_date") is not None:
            values["due_date"] = values["due_date"].isoformat()
        return values


class ClassifyRequest(BaseModel):
    """Summary: Request payload for a dry-run classification.

    Importance: Lets clients preview labels without creating a task.
    Alternatives: Create and then delete a throwaway task.
    """

    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
