"""Pydantic request/response schemas for the task extraction API."""

from __future__ import annotations

from pydantic import BaseModel

from meeting_tasks.extraction.models import Priority
from meeting_tasks.pipeline_config import ExtractionPath, ExtractionProvider


class TeamMemberModel(BaseModel):
    """A roster entry extracted assignees are matched against."""

    id: str
    full_name: str
    email: str | None = None
    username: str | None = None


class ExtractRequest(BaseModel):
    """Request body for the /api/extract endpoint."""

    notes: str
    provider: ExtractionProvider | None = None
    members: list[TeamMemberModel] = []


class TaskResponse(BaseModel):
    """A single extracted task."""

    title: str
    description: str
    assignee: str | None = None
    priority: Priority
    due_date: str | None = None
    confidence: str | None = None
    inferred: bool = False
    optional: bool = False
    source_text: str | None = None
    matched_member_id: str | None = None


class ExtractMetadataResponse(BaseModel):
    """Provenance of an extraction result."""

    processed_at: str
    path: ExtractionPath
    model: str
    transcript_length: int
    chunks_processed: int | None = None
    chunks_failed: int = 0


class ExtractResponse(BaseModel):
    """Response body for the /api/extract endpoint."""

    tasks: list[TaskResponse]
    metadata: ExtractMetadataResponse
