"""Summary: Tests for pattern-based entity extraction.

Importance: Guards the date, people, and action pattern families and their ordering.
Alternatives: Validate extracted entities only through API responses.
"""

from __future__ import annotations

from taskpilot.entities import extract_entities
from taskpilot.models import ExtractedEntities


def test_extract_dates_in_family_order() -> None:
    """Summary: Keyword dates come before slash and dash dates.

    Importance: Keeps date ordering stable across calls.
    Alternatives: Sort dates by position in the text.
    """

    entities = extract_entities("meeting tomorrow and another on friday, also 12/25/2024")
    assert entities.dates == ["tomorrow", "friday", "12/25/2024"]

    entities = extract_entities("deadline on 01-15-2025 and follow-up on 3/20/25")
    assert entities.dates == ["3/20/25", "01-15-2025"]


def test_extract_dates_keeps_original_case() -> None:
    entities = extract_entities("Meeting on MONDAY and follow-up on Wednesday")
    assert entities.dates == ["MONDAY", "Wednesday"]


def test_extract_dates_matches_inside_words() -> None:
    assert extract_entities("sundays are off").dates == ["sunday"]


def test_extract_people_after_trigger_words() -> None:
    """Summary: Names follow "with", "by", or "assign to".

    Importance: Surfaces owners and collaborators mentioned in task text.
    Alternatives: Require an explicit assignee field only.
    """

    entities = extract_entities(
        "schedule meeting with john smith and assign to mary johnson, reviewed by bob"
    )
    assert entities.people == ["john smith", "mary johnson", "bob"]

    entities = extract_entities("assign to alice, work with bob, and reviewed by charlie")
    assert entities.people == ["alice", "bob", "charlie"]


def test_extract_people_truncates_to_two_words() -> None:
    assert extract_entities("assign to mary johnson and friends").people == ["mary johnson"]


def test_extract_people_is_case_insensitive() -> None:
    assert extract_entities("Sync With John").people == ["John"]


def test_extract_actions_in_declaration_order() -> None:
    """Summary: Verbs follow the fixed list order, not text order.

    Importance: Keeps action lists deterministic for clients.
    Alternatives: Report verbs in order of appearance.
    """

    entities = extract_entities(
        "send the email, meet with team, pay the invoice, check system, and install updates"
    )
    assert entities.actions == ["meet", "send", "install", "pay", "check"]

    entities = extract_entities("install first, then send")
    assert entities.actions == ["send", "install"]


def test_extract_actions_once_per_verb_with_substrings() -> None:
    entities = extract_entities("need to schedule a call, review the documents, and fix the installation")
    assert entities.actions == ["schedule", "call", "review", "fix", "install"]
    assert extract_entities("call call call").actions == ["call"]


def test_extract_entities_empty_results() -> None:
    """Summary: Unmatched and empty text return four empty lists."""

    expected = ExtractedEntities(dates=[], people=[], locations=[], actions=[])
    assert extract_entities("generic task description") == expected
    assert extract_entities("") == expected
    assert extract_entities("generic task description").to_dict() == {
        "dates": [],
        "people": [],
        "locations": [],
        "actions": [],
    }


def test_extract_entities_keeps_duplicates() -> None:
    entities = extract_entities("today with ann, today with ann")
    assert entities.dates == ["today", "today"]
    assert entities.people == ["ann", "ann"]
    assert entities.locations == []


def test_extract_entities_ignores_non_ascii_digits_and_letters() -> None:
    """Summary: Dates need 0-9 digits and names need plain latin letters.

    Importance: Unicode digits and case-folded lookalikes are not treated as entities.
    Alternatives: Accept any Unicode digit or letter.
    """

    assert extract_entities("due ١٢/٢٥/٢٠٢٤").dates == []
    assert extract_entities("due １２-２５-２４").dates == []
    assert extract_entities("with \u212aate").people == []
    assert extract_entities("by \u017fam").people == []
    assert extract_entities("\u017funday").dates == []
    assert extract_entities("due 12/25/2024 with kate").to_dict()["dates"] == ["12/25/2024"]
