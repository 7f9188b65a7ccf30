"""Rule-based extraction engine: fans strategy sets out over the input and pools results."""

from __future__ import annotations

import logging
from datetime import date

from meeting_tasks.extraction.models import ExtractionMetadata, ExtractionResult, TaskCandidate
from meeting_tasks.extraction.refine import refine_tasks
from meeting_tasks.extraction.segmenter import (
    MIN_SENTENCE_LENGTH,
    LineContext,
    has_speaker_lines,
    has_structured_format,
    is_filler,
    parse_speaker_line,
    split_lines,
    split_sentences,
)
from meeting_tasks.extraction.strategies import (
    LINE_STRATEGIES,
    NOTE_STRATEGIES,
    SENTENCE_STRATEGIES,
    TRANSCRIPT_STRATEGIES,
    Strategy,
)
from meeting_tasks.pipeline_config import ExtractionPath, RefinementConfig

logger = logging.getLogger(__name__)

HEURISTIC_MODEL = "rule-based"

_QUOTES = str.maketrans({"’": "'", "‘": "'", "“": '"', "”": '"'})


def _scan_lines(lines: list[str], strategies: tuple[Strategy, ...], today: date | None) -> list[TaskCandidate]:
    """Run *strategies* over each line, tracking the speaker and recent lines."""
    ctx = LineContext(today=today)
    found: list[TaskCandidate] = []

    for line in lines:
        parsed = parse_speaker_line(line)
        if parsed is not None:
            ctx.speaker = parsed.speaker
            if not parsed.content:
                continue
            unit = parsed.content
        else:
            unit = line

        unit = unit.translate(_QUOTES)
        if is_filler(unit):
            continue

        ctx.advance(unit)
        for strategy in strategies:
            found.extend(strategy(unit, ctx))
    return found


def _scan_sentences(notes: str, today: date | None) -> list[TaskCandidate]:
    """Run the sentence-level assignment strategies over every sentence."""
    ctx = LineContext(today=today)
    found: list[TaskCandidate] = []

    for sentence in split_sentences(notes):
        parsed = parse_speaker_line(sentence)
        unit = (parsed.content if parsed else sentence).translate(_QUOTES)
        if len(unit) < MIN_SENTENCE_LENGTH or is_filler(unit):
            continue

        # Sentences are independent; no context carries over.
        ctx.reset()
        ctx.speaker = parsed.speaker if parsed else None
        ctx.advance(unit)
        for strategy in SENTENCE_STRATEGIES:
            found.extend(strategy(unit, ctx))
    return found


def collect_candidates(notes: str, today: date | None = None) -> list[TaskCandidate]:
    """Pool raw candidates from every applicable strategy set, in discovery order.

    Bullet strategies join the line pass only when a bullet or ordinal marker
    is present. Sentence strategies always run. Transcript strategies run for
    timestamped speaker input, or when the line pass found at most one task.
    """
    lines = split_lines(notes)
    if not lines:
        return []

    structured = has_structured_format(lines)
    line_strategies = LINE_STRATEGIES + NOTE_STRATEGIES if structured else NOTE_STRATEGIES
    line_found = _scan_lines(lines, line_strategies, today)
    sentence_found = _scan_sentences(notes, today)

    pool = line_found + sentence_found
    transcript = has_speaker_lines(lines)
    if transcript or len(line_found) <= 1:
        pool += _scan_lines(lines, TRANSCRIPT_STRATEGIES, today)

    logger.debug(
        "Collected %d candidates (lines=%d, sentences=%d, structured=%s, transcript=%s)",
        len(pool),
        len(line_found),
        len(sentence_found),
        structured,
        transcript,
    )
    return pool


def extract_heuristic(
    notes: str,
    config: RefinementConfig | None = None,
    today: date | None = None,
    path: ExtractionPath = ExtractionPath.HEURISTIC,
) -> ExtractionResult:
    """Extract tasks with the rule-based engine alone.

    Always returns at least one task; empty input yields the placeholder.
    """
    config = config or RefinementConfig.from_settings()
    notes = notes or ""
    candidates = collect_candidates(notes, today) if notes.strip() else []
    tasks, _ = refine_tasks(notes, candidates, config)

    logger.info("Heuristic extraction produced %d tasks", len(tasks))
    return ExtractionResult(
        tasks=tasks,
        metadata=ExtractionMetadata(
            path=path,
            model=HEURISTIC_MODEL,
            transcript_length=len(notes),
        ),
    )
