"""Extraction orchestrator: external service first, rule-based engine as fallback."""

from __future__ import annotations

import logging
import time
from datetime import date
from functools import partial

from meeting_tasks.config import settings
from meeting_tasks.extraction.heuristic import collect_candidates, extract_heuristic
from meeting_tasks.extraction.llm import (
    ExtractionServiceError,
    RawTaskSource,
    candidates_from_records,
    get_provider,
    model_name,
)
from meeting_tasks.extraction.models import ExtractionMetadata, ExtractionResult, TaskCandidate
from meeting_tasks.extraction.refine import refine_tasks
from meeting_tasks.extraction.segmenter import split_into_chunks
from meeting_tasks.pipeline_config import ExtractionPath, ExtractionProvider, RefinementConfig

logger = logging.getLogger(__name__)


def _extract_single(notes: str, source: RawTaskSource, today: date | None) -> list[TaskCandidate]:
    return candidates_from_records(source(notes), today)


def _extract_chunked(
    notes: str,
    source: RawTaskSource,
    config: RefinementConfig,
    today: date | None,
) -> tuple[list[TaskCandidate], int, int]:
    """Call *source* once per chunk, serialized with a fixed delay.

    Returns:
        ``(candidates, chunks_processed, chunks_failed)``.

    Raises:
        ExtractionServiceError: If every chunk failed.
    """
    chunks = split_into_chunks(notes, config.chunk_size)
    logger.info("Splitting %d chars into %d chunks", len(notes), len(chunks))

    candidates: list[TaskCandidate] = []
    failed = 0
    for i, chunk in enumerate(chunks):
        if i > 0:
            time.sleep(config.chunk_delay_seconds)
        try:
            found = _extract_single(chunk, source, today)
        except Exception:
            failed += 1
            logger.warning("Chunk %d/%d failed", i + 1, len(chunks), exc_info=True)
            continue
        logger.debug("Chunk %d/%d produced %d candidates", i + 1, len(chunks), len(found))
        candidates.extend(found)

    if failed == len(chunks):
        raise ExtractionServiceError(f"All {failed} chunks failed")
    return candidates, len(chunks), failed


def extract_tasks(
    notes: str,
    provider: ExtractionProvider | str | None = None,
    *,
    source: RawTaskSource | None = None,
    config: RefinementConfig | None = None,
    today: date | None = None,
) -> ExtractionResult:
    """Extract a refined task list from meeting notes.

    With the heuristic provider (the default unless configured otherwise),
    the rule-based engine runs alone.  With an external provider, its records
    are refined and topped up with heuristic candidates when thin; any
    failure falls back to the rule-based engine.  Never raises for bad notes,
    an unknown provider name or service errors.

    Args:
        notes: Raw meeting text.
        provider: Extraction backend; defaults to ``settings.extraction_provider``.
        source: Overrides the provider's adapter (any ``str -> list[dict]`` callable).
        config: Refinement thresholds; defaults to the current settings.
        today: Reference date for resolving relative due dates.

    Returns:
        An ExtractionResult with at least one task.
    """
    config = config or RefinementConfig.from_settings()
    notes = notes or ""
    requested = provider or settings.extraction_provider
    try:
        provider = ExtractionProvider(requested)
    except ValueError:
        logger.warning("Unknown extraction provider %r; using heuristics", requested)
        return extract_heuristic(notes, config, today, path=ExtractionPath.HEURISTIC_FALLBACK)

    if (provider is ExtractionProvider.HEURISTIC and source is None) or not notes.strip():
        return extract_heuristic(notes, config, today)

    try:
        adapter = source or partial(get_provider(provider), config=config, today=today)
        chunks_processed: int | None = None
        chunks_failed = 0
        if len(notes) > config.chunk_size:
            candidates, chunks_processed, chunks_failed = _extract_chunked(notes, adapter, config, today)
            path = ExtractionPath.EXTERNAL_CHUNKED
        else:
            candidates = _extract_single(notes, adapter, today)
            path = ExtractionPath.EXTERNAL

        if not candidates:
            raise ExtractionServiceError("Extraction service returned no usable tasks")

        tasks, merged = refine_tasks(
            notes,
            candidates,
            config,
            fallback=lambda: collect_candidates(notes, today),
        )
    except Exception:
        logger.warning("External extraction via %s failed; using heuristics", provider, exc_info=True)
        return extract_heuristic(notes, config, today, path=ExtractionPath.HEURISTIC_FALLBACK)

    if merged:
        path = ExtractionPath.EXTERNAL_WITH_HEURISTIC
    logger.info("Extracted %d tasks via %s (path=%s)", len(tasks), provider, path)

    return ExtractionResult(
        tasks=tasks,
        metadata=ExtractionMetadata(
            path=path,
            model=model_name(provider) if source is None else "custom",
            transcript_length=len(notes),
            chunks_processed=chunks_processed,
            chunks_failed=chunks_failed,
        ),
    )
