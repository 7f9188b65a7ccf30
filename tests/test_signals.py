"""Tests for priority, assignee and action-verb signals."""

from __future__ import annotations

import pytest

from meeting_tasks.extraction.models import Priority
from meeting_tasks.extraction.signals import (
    clean_task_text,
    detect_priority,
    extract_assignee,
    has_action_verb,
    is_name,
    starts_with_action_verb,
)


class TestDetectPriority:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("URGENT: Fix production bug", Priority.HIGH),
            ("deploy asap", Priority.HIGH),
            ("Two bugs found in checkout", Priority.HIGH),
            ("Update README when possible", Priority.LOW),
            ("nice to have: dark mode", Priority.LOW),
            ("Review code", Priority.MEDIUM),
            ("pair on the debugging session", Priority.MEDIUM),
        ],
    )
    def test_levels(self, text: str, expected: Priority) -> None:
        assert detect_priority(text) is expected

    def test_high_beats_low(self) -> None:
        assert detect_priority("critical, but optional for the demo") is Priority.HIGH


class TestExtractAssignee:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("@john to review PR", "john"),
            ("Sarah will update docs", "Sarah"),
            ("Priya needs to send the deck", "Priya"),
            ("John to review PR #234", "John"),
            ("Ramya, this is your task", "Ramya"),
            ("I told John to finish it", "John"),
            ("Mike said he will check", "Mike"),
        ],
    )
    def test_patterns(self, text: str, expected: str) -> None:
        assert extract_assignee(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "Review the PR",
            "Monday will be busy",
            "Yesterday, we agreed to deploy the billing API",
            "Later, the team will sync",
            "Team will handle it",
            "They should check the logs",
            "mail ops@example.com about it",
        ],
    )
    def test_no_assignee(self, text: str) -> None:
        assert extract_assignee(text) is None


class TestActionVerbs:
    def test_has_action_verb(self) -> None:
        assert has_action_verb("please review the contract")
        assert not has_action_verb("the weather was nice")

    def test_multi_word_verbs(self) -> None:
        assert starts_with_action_verb("Set up the CI runners")
        assert starts_with_action_verb("Follow  up with legal")

    def test_leading_only(self) -> None:
        assert not starts_with_action_verb("We should review it")


class TestHelpers:
    def test_clean_task_text(self) -> None:
        assert clean_task_text("TODO: Update docs (high priority)") == "Update docs"
        assert clean_task_text("ACTION ITEM - send report") == "send report"
        assert clean_task_text("Plain task") == "Plain task"

    @pytest.mark.parametrize("word,expected", [("Priya", True), ("They", False), ("Friday", False), (None, False)])
    def test_is_name(self, word: str | None, expected: bool) -> None:
        assert is_name(word) is expected
