"""Extraction endpoint: turn pasted meeting notes into tasks."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from meeting_tasks.api.models import (
    ExtractMetadataResponse,
    ExtractRequest,
    ExtractResponse,
    TaskResponse,
)
from meeting_tasks.config import settings
from meeting_tasks.extraction.pipeline import extract_tasks
from meeting_tasks.extraction.roster import TeamMember, match_member

router = APIRouter()


@router.post("/api/extract", response_model=ExtractResponse)
def extract(request: ExtractRequest) -> ExtractResponse:
    """Extract tasks from meeting notes.

    Uses the requested provider (or the configured default) and falls back
    to the rule-based engine when an external service fails. Assignees are
    matched against ``members`` when a roster is supplied.
    """
    if not request.notes.strip():
        raise HTTPException(status_code=400, detail="Notes must not be empty")
    if len(request.notes) > settings.max_notes_length:
        raise HTTPException(
            status_code=400,
            detail=f"Notes exceed the {settings.max_notes_length} character limit",
        )

    result = extract_tasks(request.notes, request.provider)

    roster = [TeamMember(**m.model_dump()) for m in request.members]
    tasks: list[TaskResponse] = []
    for task in result.tasks:
        member = match_member(task.assignee, roster)
        tasks.append(
            TaskResponse(
                **task.to_dict(),
                matched_member_id=member.id if member else None,
            )
        )

    meta = result.metadata
    return ExtractResponse(
        tasks=tasks,
        metadata=ExtractMetadataResponse(
            processed_at=meta.processed_at,
            path=meta.path,
            model=meta.model,
            transcript_length=meta.transcript_length,
            chunks_processed=meta.chunks_processed,
            chunks_failed=meta.chunks_failed,
        ),
    )
