"""Tests for deduplication, normalization, scoring and the refinement policy."""

from __future__ import annotations

import pytest

from meeting_tasks.extraction.dedup import (
    deduplicate,
    is_duplicate,
    levenshtein_distance,
    normalize_key,
    similarity,
)
from meeting_tasks.extraction.models import DEFAULT_DESCRIPTION, Priority, TaskCandidate
from meeting_tasks.extraction.refine import (
    PLACEHOLDER_TITLE,
    bound_pool,
    cap_candidates,
    finalize_candidates,
    normalize_candidate,
    normalize_title,
    placeholder_task,
    refine_tasks,
    score_candidate,
)
from meeting_tasks.pipeline_config import RefinementConfig

# ---------------------------------------------------------------------------
# Deduplication
# ---------------------------------------------------------------------------


class TestEditDistance:
    @pytest.mark.parametrize(
        "a,b,expected",
        [("kitten", "sitting", 3), ("", "abc", 3), ("same", "same", 0), ("flaw", "lawn", 2)],
    )
    def test_levenshtein(self, a: str, b: str, expected: int) -> None:
        assert levenshtein_distance(a, b) == expected
        assert levenshtein_distance(b, a) == expected

    def test_similarity(self) -> None:
        assert similarity("", "") == 1.0
        assert similarity("abc", "abd") == pytest.approx(2 / 3)


class TestDuplicates:
    def test_normalize_key(self) -> None:
        assert normalize_key("  Fix: the Login-bug!! ") == "fix the loginbug"

    def test_prefix_containment(self) -> None:
        assert is_duplicate("Update documentation", "Sarah will update documentation")

    def test_reworded(self) -> None:
        assert is_duplicate("Deploy the staging server", "Deploy the staging servers")

    def test_distinct(self) -> None:
        assert not is_duplicate("Fix login bug", "Write release notes")

    def test_first_occurrence_wins(self) -> None:
        tasks = [
            TaskCandidate(title="Sarah will update documentation", assignee="Sarah"),
            TaskCandidate(title="Write release notes"),
            TaskCandidate(title="update documentation"),
        ]
        kept = deduplicate(tasks)
        assert [t.title for t in kept] == ["Sarah will update documentation", "Write release notes"]


# ---------------------------------------------------------------------------
# Normalization and scoring
# ---------------------------------------------------------------------------


class TestNormalize:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("  - review   the PR?  ", "Review the PR"),
            ("1. ship it.", "Ship it"),
            ("who owns this??", "Who owns this"),
            ("- Fix the login redirect!!", "Fix the login redirect"),
            ("deploy the billing API;", "Deploy the billing API"),
            ("send the notes, ", "Send the notes"),
            ("agenda items: ", "Agenda items"),
            ("", ""),
        ],
    )
    def test_title(self, raw: str, expected: str) -> None:
        assert normalize_title(raw) == expected

    def test_empty_title_discarded(self) -> None:
        assert normalize_candidate(TaskCandidate(title="  ?  ")) is None

    def test_fields_cleaned(self) -> None:
        raw = TaskCandidate(
            title="send the invoice",
            description="  ",
            assignee="  ",
            priority="URGENT",  # type: ignore[arg-type]
            due_date="2025-02-30",
        )
        task = normalize_candidate(raw)
        assert task is not None
        assert task.title == "Send the invoice"
        assert task.description == DEFAULT_DESCRIPTION
        assert task.assignee is None
        assert task.priority is Priority.MEDIUM
        assert task.due_date is None

    def test_valid_fields_kept(self) -> None:
        raw = TaskCandidate(title="Send", assignee=" Dana ", priority="high", due_date="2025-03-14")  # type: ignore[arg-type]
        task = normalize_candidate(raw)
        assert task is not None
        assert task.assignee == "Dana"
        assert task.priority is Priority.HIGH
        assert task.due_date == "2025-03-14"


class TestBoundPool:
    def test_exact_repeats_dropped(self) -> None:
        pool = bound_pool(
            [TaskCandidate(title="Send the report"), TaskCandidate(title="send the report."), TaskCandidate(title="Book the venue")],
            10,
        )
        assert [c.title for c in pool] == ["Send the report", "Book the venue"]

    def test_keeps_best_in_discovery_order(self) -> None:
        candidates = [
            TaskCandidate(title="Weather chat"),
            TaskCandidate(title="Send the report", due_date="2025-03-14"),
            TaskCandidate(title="Lunch options"),
            TaskCandidate(title="Book the venue", due_date="2025-03-20"),
        ]
        assert [c.title for c in bound_pool(candidates, 2)] == ["Send the report", "Book the venue"]


class TestScoring:
    def test_full_score(self) -> None:
        task = TaskCandidate(title="Review the quarterly report", assignee="Dana", due_date="2025-03-14")
        assert score_candidate(task) == 4.5

    def test_zero_score(self) -> None:
        assert score_candidate(TaskCandidate(title="Xyzzy")) == 0

    def test_cap_keeps_best_and_is_stable(self) -> None:
        tasks = [
            TaskCandidate(title="Lunch plans"),
            TaskCandidate(title="Review the contract", assignee="Ana"),
            TaskCandidate(title="Venue ideas"),
            TaskCandidate(title="Draft the memo", assignee="Bo"),
        ]
        capped = cap_candidates(tasks, 3)
        assert [t.title for t in capped] == ["Review the contract", "Draft the memo", "Lunch plans"]

    def test_cap_noop_under_limit(self) -> None:
        tasks = [TaskCandidate(title="One task")]
        assert cap_candidates(tasks, 5) == tasks


# ---------------------------------------------------------------------------
# Refinement policy
# ---------------------------------------------------------------------------


class TestPlaceholder:
    def test_empty_input(self) -> None:
        task = placeholder_task("")
        assert task.title == PLACEHOLDER_TITLE
        assert task.priority is Priority.LOW
        assert task.description == DEFAULT_DESCRIPTION

    def test_description_truncated(self) -> None:
        assert len(placeholder_task("x" * 300).description) == 200


class TestRefineTasks:
    def test_short_titles_dropped(self) -> None:
        config = RefinementConfig()
        tasks = finalize_candidates([TaskCandidate(title="Fix"), TaskCandidate(title="Fix the build")], config)
        assert [t.title for t in tasks] == ["Fix the build"]

    def test_capped_to_task_max(self) -> None:
        config = RefinementConfig(task_max=2)
        pool = [TaskCandidate(title=t) for t in ("Alpha rollout", "Budget review", "Customer survey")]
        assert len(finalize_candidates(pool, config)) == 2

    def test_merges_heuristics_for_thin_long_input(self) -> None:
        config = RefinementConfig(long_input_chars=10)
        fallback = [TaskCandidate(title="Write release notes"), TaskCandidate(title="Book the venue")]
        tasks, merged = refine_tasks("x" * 50, [TaskCandidate(title="Send the invoice")], config, lambda: fallback)
        assert merged
        assert [t.title for t in tasks] == ["Send the invoice", "Write release notes", "Book the venue"]

    def test_no_merge_for_short_input(self) -> None:
        config = RefinementConfig()
        called = []
        tasks, merged = refine_tasks(
            "short notes", [TaskCandidate(title="Send the invoice")], config, lambda: called.append(1) or []
        )
        assert not merged
        assert not called
        assert len(tasks) == 1

    def test_empty_pool_yields_placeholder(self) -> None:
        tasks, merged = refine_tasks("Nothing actionable here", [], RefinementConfig())
        assert not merged
        assert [t.title for t in tasks] == [PLACEHOLDER_TITLE]
        assert tasks[0].description == "Nothing actionable here"
