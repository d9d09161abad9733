"""Summary: Pattern-based entity extraction for task text.

Importance: Surfaces dates, people, and action verbs for every classified task.
Alternatives: Use an NLP library with named-entity recognition.
"""

from __future__ import annotations

import re

from taskpilot.models import ExtractedEntities

# Applied in order; every match of one family is appended before the next runs.
# ASCII only: digits are 0-9 and names are plain latin letters.
DATE_PATTERNS = (
    re.compile(
        r"today|tomorrow|monday|tuesday|wednesday|thursday|friday|saturday|sunday",
        re.IGNORECASE | re.ASCII,
    ),
    re.compile(r"\d{1,2}/\d{1,2}/\d{2,4}", re.ASCII),
    re.compile(r"\d{1,2}-\d{1,2}-\d{2,4}", re.ASCII),
)

PEOPLE_PATTERN = re.compile(
    r"(?:with|by|assign to)\s+([a-z]+(?:\s+[a-z]+)?)", re.IGNORECASE | re.ASCII
)

ACTION_VERBS = ("schedule", "call", "meet", "send", "review", "fix", "install", "pay", "check")


def extract_entities(text: str) -> ExtractedEntities:
    """Summary: Extract dates, people, and action verbs from text.

    Importance: Gives each task structured hints without an external model.
    Alternatives: Ask an LLM to return entities as JSON.
    """

    dates: list[str] = []
    for pattern in DATE_PATTERNS:
        dates.extend(match.group(0) for match in pattern.finditer(text))
    people = [match.group(1) for match in PEOPLE_PATTERN.finditer(text)]
    lowered = text.lower()
    actions = [verb for verb in ACTION_VERBS if verb in lowered]
    return ExtractedEntities(dates=dates, people=people, locations=[], actions=actions)
