"""Data models for task extraction results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from meeting_tasks.pipeline_config import ExtractionPath

DEFAULT_DESCRIPTION = "Extracted from meeting notes"


class Priority(StrEnum):
    """Canonical task priorities."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def coerce(cls, value: Any) -> Priority:
        """Map any value onto a canonical priority; unknown values become medium."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MEDIUM


@dataclass
class TaskCandidate:
    """A single task extracted from meeting text."""

    title: str
    description: str = DEFAULT_DESCRIPTION
    assignee: str | None = None
    priority: Priority = Priority.MEDIUM
    due_date: str | None = None  # YYYY-MM-DD
    confidence: str | None = None  # "high", "medium", "low" from external services
    inferred: bool = False
    optional: bool = False
    source_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["priority"] = self.priority.value
        return data


@dataclass
class ExtractionMetadata:
    """Provenance for an extraction run."""

    path: ExtractionPath
    model: str
    transcript_length: int = 0
    processed_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    chunks_processed: int | None = None
    chunks_failed: int = 0


@dataclass
class ExtractionResult:
    """Final task list plus metadata."""

    tasks: list[TaskCandidate]
    metadata: ExtractionMetadata

    def to_dict(self) -> dict[str, Any]:
        meta = asdict(self.metadata)
        meta["path"] = self.metadata.path.value
        return {"tasks": [t.to_dict() for t in self.tasks], "metadata": meta}
