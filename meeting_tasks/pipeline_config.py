"""Pipeline configuration: provider/path enums and RefinementConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from meeting_tasks.config import Settings, settings


class ExtractionProvider(StrEnum):
    """Available extraction backends."""

    HEURISTIC = "heuristic"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GEMINI = "gemini"


class ExtractionPath(StrEnum):
    """Label recording which path produced an extraction result."""

    HEURISTIC = "heuristic"
    EXTERNAL = "external"
    EXTERNAL_CHUNKED = "external-chunked"
    EXTERNAL_WITH_HEURISTIC = "external+heuristic"
    HEURISTIC_FALLBACK = "heuristic-fallback"


@dataclass(frozen=True)
class RefinementConfig:
    """Immutable thresholds for the refinement stage.

    ``task_max`` caps the final list, ``task_min``/``fallback_floor`` decide
    when a short external-service answer on a long input (``long_input_chars``)
    gets topped up with heuristic candidates.
    """

    task_min: int = 9
    task_max: int = 11
    fallback_floor: int = 6
    long_input_chars: int = 2000
    chunk_size: int = 8000
    chunk_delay_seconds: float = 1.0

    @property
    def merge_threshold(self) -> int:
        """Result counts below this trigger the heuristic merge."""
        return min(self.fallback_floor, self.task_min - 2)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> RefinementConfig:
        source = source or settings
        return cls(
            task_min=source.task_min,
            task_max=source.task_max,
            fallback_floor=source.fallback_floor,
            long_input_chars=source.long_input_chars,
            chunk_size=source.chunk_size,
            chunk_delay_seconds=source.chunk_delay_seconds,
        )
