"""Split raw meeting text into lines and sentences and track transcript speakers."""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field
from datetime import date

from meeting_tasks.extraction.signals import is_name

CONTEXT_WINDOW = 3
MIN_SENTENCE_LENGTH = 10

# Acknowledgements, greetings and status narration that never carry a task.
FILLER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(?:hi|hello|hey|morning|good morning|good afternoon|yeah|yep|yes|sure|okay|ok|"
        r"noted|will do|all clear|looks good|fine|great|perfect|alright|cool|bye|thanks|"
        r"thank you|got it|right)[,.!\s]*$",
        re.IGNORECASE,
    ),
    re.compile(r"^all good\b", re.IGNORECASE),
    re.compile(r"^sounds good\b", re.IGNORECASE),
    re.compile(r"^no (?:blockers|issues)\b", re.IGNORECASE),
    re.compile(r"^on track\b", re.IGNORECASE),
    re.compile(r"^fine for qa\b", re.IGNORECASE),
    re.compile(r"what'?s the status", re.IGNORECASE),
    re.compile(r"any pending items", re.IGNORECASE),
    re.compile(r"let'?s (?:begin|get started)", re.IGNORECASE),
    re.compile(r"ending the call", re.IGNORECASE),
    re.compile(r"have a productive (?:sprint|day|week)", re.IGNORECASE),
    re.compile(r"meeting ended", re.IGNORECASE),
    re.compile(r"quick recap", re.IGNORECASE),
    re.compile(r"thanks,? everyone", re.IGNORECASE),
    # Metadata header lines
    re.compile(r"^(?:meeting|date|time|duration|attendees|participants|note|recording)\s*:", re.IGNORECASE),
    re.compile(r"^(?:recording|murmur|\*\*)", re.IGNORECASE),
)

_BULLET_RE = re.compile(r"^(?:[-*•]\s*|\d+[.)]\s+)")

_TIMESTAMP = r"\[?\d{1,2}:\d{2}(?::\d{2})?\]?"
_TIMESTAMP_RE = re.compile(_TIMESTAMP)
# "[00:22] Seenu: text" / "00:01:02 Seenu (PM): text"
_SPEAKER_LINE_RE = re.compile(
    rf"^{_TIMESTAMP}\s*(?:[—–-]\s*)?([A-Z][a-z]+)(?:\s*\([^)]*\))?:\s*(.+)$"
)
# "00:01:02 — Seenu" or "Seenu:" on its own line
_SPEAKER_HEADER_RE = re.compile(
    rf"^(?:{_TIMESTAMP}\s*(?:[—–-]\s*)?([A-Z][a-z]+)(?:\s*\([^)]*\))?:?|([A-Z][a-z]+)(?:\s*\([^)]*\))?:)\s*$"
)


@dataclass(frozen=True)
class SpeakerLine:
    """A transcript line attributed to a speaker; *content* is empty for header lines."""

    speaker: str
    content: str


@dataclass
class LineContext:
    """Per-call accumulator threaded through a line scan.

    Holds the current transcript speaker, the last few processed lines for
    resolving "that"/"it" references, and the reference date for due dates.
    """

    today: date | None = None
    speaker: str | None = None
    recent: deque[str] = field(default_factory=lambda: deque(maxlen=CONTEXT_WINDOW))
    speakers: deque[str | None] = field(default_factory=lambda: deque(maxlen=CONTEXT_WINDOW))

    def advance(self, line: str) -> None:
        self.recent.append(line)
        self.speakers.append(self.speaker)

    def reset(self) -> None:
        self.recent.clear()
        self.speakers.clear()

    @property
    def previous(self) -> str:
        """The line processed before the current one, or ``""``."""
        return self.recent[-2] if len(self.recent) >= 2 else ""

    @property
    def previous_speaker(self) -> str | None:
        return self.speakers[-2] if len(self.speakers) >= 2 else None

    def joined(self) -> str:
        return " ".join(self.recent)


def split_lines(text: str) -> list[str]:
    """Return trimmed, non-empty lines."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation and line breaks, dropping short fragments."""
    parts = re.split(r"[.!?]+(?=\s|$)|\n", text or "")
    return [p.strip() for p in parts if len(p.strip()) >= MIN_SENTENCE_LENGTH]


def is_filler(text: str) -> bool:
    """True for acknowledgement, greeting, status or header lines."""
    stripped = strip_bullet(text.strip())
    return not stripped or any(p.search(stripped) for p in FILLER_PATTERNS)


def is_bullet(line: str) -> bool:
    return bool(_BULLET_RE.match(line))


def strip_bullet(line: str) -> str:
    return _BULLET_RE.sub("", line, count=1).strip()


def has_structured_format(lines: list[str]) -> bool:
    """True when at least one line carries a bullet or ordinal marker."""
    return any(is_bullet(line) for line in lines)


def parse_speaker_line(line: str) -> SpeakerLine | None:
    """Parse a timestamped speaker line or a bare speaker header.

    Examples::

        "[00:22] Seenu: I can look into it"  -> SpeakerLine("Seenu", "I can look into it")
        "00:01:02 — Priya"                    -> SpeakerLine("Priya", "")
    """
    match = _SPEAKER_LINE_RE.match(line)
    if match and is_name(match.group(1)):
        return SpeakerLine(speaker=match.group(1), content=match.group(2).strip())

    if len(line) < 60:
        header = _SPEAKER_HEADER_RE.match(line)
        if header and is_name(header.group(1) or header.group(2)):
            return SpeakerLine(speaker=header.group(1) or header.group(2), content="")
    return None


def has_speaker_lines(lines: list[str]) -> bool:
    """True when the text looks like a timestamped multi-speaker transcript."""
    return any(_TIMESTAMP_RE.match(line) and parse_speaker_line(line) for line in lines)


def split_into_chunks(text: str, chunk_size: int) -> list[str]:
    """Split *text* into pieces of at most *chunk_size* chars, preferring line breaks."""
    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = min(start + chunk_size, len(text))
        if end < len(text):
            cut = text.rfind("\n", start, end)
            if cut > start:
                end = cut + 1
        chunks.append(text[start:end])
        start = end
    return chunks
