"""Near-duplicate removal for task candidates (prefix containment + edit distance)."""

from __future__ import annotations

import re

from rapidfuzz.distance import Levenshtein

from meeting_tasks.extraction.models import TaskCandidate

PREFIX_WINDOW = 20
SIMILARITY_THRESHOLD = 0.8


def levenshtein_distance(a: str, b: str) -> int:
    """Single-character insert/delete/substitute edit distance."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """``1 - distance / len(longer)``; two empty strings are identical."""
    return Levenshtein.normalized_similarity(a, b)


def normalize_key(title: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    key = re.sub(r"[^\w\s]", "", title.lower())
    return re.sub(r"\s+", " ", key).strip()


def _prefix_contained(a: str, b: str, window: int) -> bool:
    if not a or not b:
        return a == b
    return b[: min(window, len(b))] in a or a[: min(window, len(a))] in b


def _keys_match(a: str, b: str, window: int, threshold: float) -> bool:
    if _prefix_contained(a, b, window):
        return True
    longer = max(len(a), len(b))
    # A length gap this wide bounds similarity at or below the threshold.
    if abs(len(a) - len(b)) >= (1 - threshold) * longer:
        return False
    return Levenshtein.normalized_similarity(a, b, score_cutoff=threshold) > threshold


def is_duplicate(
    a: str,
    b: str,
    window: int = PREFIX_WINDOW,
    threshold: float = SIMILARITY_THRESHOLD,
) -> bool:
    """True when titles *a* and *b* describe the same task."""
    return _keys_match(normalize_key(a), normalize_key(b), window, threshold)


def deduplicate(candidates: list[TaskCandidate]) -> list[TaskCandidate]:
    """Drop near-duplicate candidates; the first occurrence wins."""
    unique: list[TaskCandidate] = []
    seen: set[str] = set()
    kept_keys: list[str] = []
    for candidate in candidates:
        key = normalize_key(candidate.title)
        if key in seen:
            continue
        if any(_keys_match(key, kept, PREFIX_WINDOW, SIMILARITY_THRESHOLD) for kept in kept_keys):
            continue
        seen.add(key)
        kept_keys.append(key)
        unique.append(candidate)
    return unique
