"""Normalization, scoring and capping of task candidates."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import replace

from meeting_tasks.extraction.dates import is_iso_date
from meeting_tasks.extraction.dedup import deduplicate, normalize_key
from meeting_tasks.extraction.models import DEFAULT_DESCRIPTION, Priority, TaskCandidate
from meeting_tasks.extraction.signals import has_action_verb
from meeting_tasks.pipeline_config import RefinementConfig

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Review meeting notes"
PLACEHOLDER_DESCRIPTION_CHARS = 200
MIN_TITLE_LENGTH = 5
# Distinct candidates per output slot carried into near-duplicate matching.
POOL_PER_TASK = 20

_MARKER_RE = re.compile(r"^(?:[-*•]\s*|\d+[.)]\s+)+")


def normalize_title(title: str | None) -> str:
    """Collapse whitespace, strip list markers and trailing punctuation, capitalize."""
    text = re.sub(r"\s+", " ", title or "").strip()
    text = _MARKER_RE.sub("", text).strip()
    text = text.rstrip("?.!,;: ")
    return text[:1].upper() + text[1:]


def normalize_candidate(candidate: TaskCandidate) -> TaskCandidate | None:
    """Return a cleaned copy of *candidate*, or ``None`` when its title is empty."""
    title = normalize_title(candidate.title)
    if not title:
        return None
    return replace(
        candidate,
        title=title,
        description=(candidate.description or "").strip() or DEFAULT_DESCRIPTION,
        assignee=(candidate.assignee or "").strip() or None,
        priority=Priority.coerce(candidate.priority),
        due_date=candidate.due_date if is_iso_date(candidate.due_date) else None,
    )


def score_candidate(candidate: TaskCandidate) -> float:
    """Completeness score used when the list has to be truncated."""
    score = 0.0
    if candidate.due_date:
        score += 2
    if candidate.assignee:
        score += 1
    if has_action_verb(candidate.title):
        score += 1
    if 10 <= len(candidate.title) <= 140:
        score += 0.5
    return score


def cap_candidates(candidates: list[TaskCandidate], limit: int) -> list[TaskCandidate]:
    """Keep the *limit* best candidates; ties keep discovery order."""
    if len(candidates) <= limit:
        return list(candidates)
    ranked = sorted(candidates, key=score_candidate, reverse=True)
    return ranked[:limit]


def bound_pool(candidates: list[TaskCandidate], limit: int) -> list[TaskCandidate]:
    """Drop exact repeats, then keep the *limit* best-scoring candidates in discovery order."""
    distinct: dict[str, TaskCandidate] = {}
    for candidate in candidates:
        distinct.setdefault(normalize_key(candidate.title), candidate)
    pool = list(distinct.values())
    if len(pool) <= limit:
        return pool
    best = sorted(range(len(pool)), key=lambda i: score_candidate(pool[i]), reverse=True)[:limit]
    return [pool[i] for i in sorted(best)]


def placeholder_task(notes: str | None) -> TaskCandidate:
    """The single low-priority task emitted when nothing else was found."""
    return TaskCandidate(
        title=PLACEHOLDER_TITLE,
        description=(notes or "")[:PLACEHOLDER_DESCRIPTION_CHARS].strip() or DEFAULT_DESCRIPTION,
        priority=Priority.LOW,
    )


def finalize_candidates(
    candidates: list[TaskCandidate],
    config: RefinementConfig,
    min_title_length: int = MIN_TITLE_LENGTH,
) -> list[TaskCandidate]:
    """Normalize, drop short titles, deduplicate and cap."""
    normalized: list[TaskCandidate] = []
    for candidate in candidates:
        cleaned = normalize_candidate(candidate)
        if cleaned is not None and len(cleaned.title) > min_title_length:
            normalized.append(cleaned)

    pool = bound_pool(normalized, config.task_max * POOL_PER_TASK)
    if len(pool) < len(normalized):
        logger.debug("Candidate pool bounded from %d to %d", len(normalized), len(pool))
    tasks = cap_candidates(deduplicate(pool), config.task_max)
    assert all(task.title for task in tasks), "empty title reached the output stage"
    return tasks


def refine_tasks(
    notes: str,
    candidates: list[TaskCandidate],
    config: RefinementConfig,
    fallback: Callable[[], list[TaskCandidate]] | None = None,
) -> tuple[list[TaskCandidate], bool]:
    """Produce the final task list from a candidate pool.

    Args:
        notes: The raw input the candidates came from.
        candidates: Candidates in discovery order.
        config: Refinement thresholds.
        fallback: Supplies heuristic candidates for the same input. Used when
            the pool is thin for a long input.

    Returns:
        ``(tasks, merged)`` where *merged* tells whether fallback candidates
        were pooled in. *tasks* is never empty.
    """
    tasks = finalize_candidates(candidates, config)
    merged = False

    if (
        fallback is not None
        and len(tasks) < config.merge_threshold
        and len(notes) > config.long_input_chars
    ):
        logger.info(
            "Only %d tasks for %d chars of input; merging heuristic candidates",
            len(tasks),
            len(notes),
        )
        tasks = finalize_candidates(tasks + fallback(), config)
        merged = True

    if not tasks:
        logger.debug("No tasks survived refinement; emitting placeholder")
        tasks = [placeholder_task(notes)]
    return tasks, merged
