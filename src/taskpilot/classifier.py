"""Summary: Category and priority classification helpers.

Importance: Labels every task deterministically from its title and description.
Alternatives: Use an LLM-based classifier for higher accuracy.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

from taskpilot.entities import extract_entities
from taskpilot.models import DEFAULT_CATEGORY, DEFAULT_PRIORITY, ClassificationResult

# Declaration order is the tie-break: the first matching entry wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("scheduling", ("meeting", "schedule", "call", "appointment", "deadline")),
    ("finance", ("payment", "invoice", "bill", "budget", "cost", "expense")),
    ("technical", ("bug", "fix", "error", "install", "repair", "maintain")),
    ("safety", ("safety", "hazard", "inspection", "compliance", "ppe")),
)

PRIORITY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("high", ("urgent", "asap", "immediately", "today", "critical", "emergency")),
    ("medium", ("soon", "this week", "important")),
)

SUGGESTED_ACTIONS = MappingProxyType(
    {
        "scheduling": ("Block calendar", "Send invite", "Prepare agenda", "Set reminder"),
        "finance": ("Check budget", "Get approval", "Generate invoice", "Update records"),
        "technical": ("Diagnose issue", "Check resources", "Assign technician", "Document fix"),
        "safety": ("Conduct inspection", "File report", "Notify supervisor", "Update checklist"),
        "general": ("Review task", "Assign owner", "Set deadline", "Update status"),
    }
)


def normalize_text(title: str, description: str | None = None) -> str:
    """Summary: Join title and description into lowercase text.

    Importance: Gives keyword scans and entity extraction one shared input.
    Alternatives: Scan title and description separately.
    """

    return f"{title} {description or ''}".lower()


def first_match(text: str, table: tuple[tuple[str, tuple[str, ...]], ...], default: str) -> str:
    """Return the first label whose keywords occur in text, else the default."""

    for label, keywords in table:
        if any(keyword in text for keyword in keywords):
            return label
    return default


@dataclass(frozen=True)
class RuleBasedClassifier:
    """Summary: Simple keyword-based task classifier.

    Importance: Offers deterministic, fast categorization without AI.
    Alternatives: Use a supervised ML classifier or LLM-based categorizer.
    """

    category_keywords: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_KEYWORDS
    priority_keywords: tuple[tuple[str, tuple[str, ...]], ...] = PRIORITY_KEYWORDS

    def classify(self, title: str, description: str | None = None) -> ClassificationResult:
        """Summary: Classify a task from its title and optional description.

        Importance: Supplies category, priority, entities, and next steps in one call.
        Alternatives: Require users to label every task manually.
        """

        text = normalize_text(title, description)
        category = first_match(text, self.category_keywords, DEFAULT_CATEGORY)
        priority = first_match(text, self.priority_keywords, DEFAULT_PRIORITY)
        actions = SUGGESTED_ACTIONS.get(category, SUGGESTED_ACTIONS[DEFAULT_CATEGORY])
        return ClassificationResult(
            category=category,
            priority=priority,
            extracted_entities=extract_entities(text),
            suggested_actions=list(actions),
        )


def classify_task(title: str, description: str | None = None) -> ClassificationResult:
    """Classify with the default keyword tables."""

    return RuleBasedClassifier().classify(title, description)
