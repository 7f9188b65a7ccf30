"""Keyword signals shared by all extraction strategies: priority, assignee, action verbs."""

from __future__ import annotations

import re

from meeting_tasks.extraction.models import Priority

# Verbs and work nouns that indicate real work
ACTION_VERBS: tuple[str, ...] = (
    "implement", "finish", "complete", "start", "begin", "handle", "push", "fix",
    "prepare", "prep", "deploy", "integrate", "update", "design", "create", "build",
    "develop", "write", "review", "test", "testing", "schedule", "upload", "compile",
    "gather", "send", "confirm", "align", "meet", "document", "release", "close",
    "investigate", "look into", "check", "draft", "share", "set up", "setup", "migrate",
    "refactor", "add", "remove", "clean up", "follow up", "call", "email", "book",
    "organize", "plan", "submit", "publish", "merge", "ship", "verify", "analyze",
    "research", "resolve", "order", "contact", "present", "approve",
)

_ACTION_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(v).replace(r"\ ", r"\s+") for v in ACTION_VERBS) + r")\b",
    re.IGNORECASE,
)
_LEADING_ACTION_RE = re.compile(
    r"^(?:" + "|".join(re.escape(v).replace(r"\ ", r"\s+") for v in ACTION_VERBS) + r")\b",
    re.IGNORECASE,
)

_HIGH_PRIORITY_RE = re.compile(
    r"\b(?:urgent|urgently|asap|critical|high\s+priority|immediately|emergency|blocker|bugs?|fix)\b",
    re.IGNORECASE,
)
_LOW_PRIORITY_RE = re.compile(
    r"\b(?:low\s+priority|when\s+possible|nice\s+to\s+have|optional|if\s+time\s+permits|no\s+rush)\b",
    re.IGNORECASE,
)

# Capitalised words that open sentences but are never people.
NON_NAME_WORDS: frozenset[str] = frozenset(
    {
        "i", "we", "you", "he", "she", "they", "it", "this", "that", "these", "those",
        "there", "here", "someone", "somebody", "everyone", "everybody", "anyone",
        "nobody", "nothing", "team", "all", "both", "each", "who", "what", "which",
        "when", "where", "why", "how", "then", "also", "and", "but", "so", "if",
        "need", "needs", "want", "plan", "try", "time", "remember", "please", "maybe",
        "todo", "action", "task", "note", "notes", "next", "first", "finally", "meeting",
        "agenda", "update", "urgent", "important", "deadline", "status", "today",
        "tomorrow", "yesterday", "tonight", "later", "earlier", "afterwards", "afterward",
        "now", "soon", "meanwhile", "lastly", "overall", "anyway", "monday", "tuesday",
        "wednesday", "thursday", "friday", "saturday", "sunday", "january", "february",
        "march", "april", "may", "june", "july",
        "august", "september", "october", "november", "december", "qa", "ui", "api",
        "okay", "ok", "yes", "yeah", "sure", "great", "thanks", "hi", "hello",
        "going", "trying", "happy", "ready", "able", "glad", "due", "good", "nice",
        "summary", "decisions", "blockers", "actions", "topics", "discussion", "updates",
        "risks", "questions", "goals", "priorities", "recap", "attendees", "participants",
    }
)

_MENTION_RE = re.compile(r"(?<![\w.])@(\w+)")
_LEADING_ASSIGNMENT_RE = re.compile(r"^([A-Z][a-z]+)\s+(?:will|should|needs?\s+to|must|to)\b")
_LEADING_COMMA_RE = re.compile(r"^([A-Z][a-z]+),\s+")
_TOLD_RE = re.compile(r"\b(?i:told|asked|assigned)\s+([A-Z][a-z]+)\s+to\b")
_SAID_RE = re.compile(r"^([A-Z][a-z]+)\s+(?:mentioned|said)\s+(?:he|she|they)\b")

_KEYWORD_PREFIX_RE = re.compile(
    r"^(?:todo|action(?:\s+item)?|task|urgent|important|follow[\s-]?up)\s*[:\-]\s*",
    re.IGNORECASE,
)
_PRIORITY_NOTE_RE = re.compile(r"\([^)]*priority[^)]*\)", re.IGNORECASE)


def is_name(word: str | None) -> bool:
    """True when *word* can plausibly be a person's name."""
    return bool(word) and word.lower() not in NON_NAME_WORDS  # type: ignore[union-attr]


def has_action_verb(text: str) -> bool:
    return bool(_ACTION_RE.search(text))


def starts_with_action_verb(text: str) -> bool:
    return bool(_LEADING_ACTION_RE.match(text))


def detect_priority(text: str) -> Priority:
    """Detect priority from urgency keywords; high terms win over low ones."""
    if _HIGH_PRIORITY_RE.search(text):
        return Priority.HIGH
    if _LOW_PRIORITY_RE.search(text):
        return Priority.LOW
    return Priority.MEDIUM


def extract_assignee(text: str) -> str | None:
    """Extract an assignee from *text*, trying each pattern in order.

    Examples:
        - "@john to review PR"       -> "john"
        - "Sarah will update docs"   -> "Sarah"
        - "Ramya, this is your task" -> "Ramya"
        - "told John to finish it"   -> "John"
        - "Mike said he will check"  -> "Mike"
    """
    mention = _MENTION_RE.search(text)
    if mention:
        return mention.group(1)

    for pattern in (_LEADING_ASSIGNMENT_RE, _LEADING_COMMA_RE, _TOLD_RE, _SAID_RE):
        match = pattern.search(text)
        if match and is_name(match.group(1)):
            return match.group(1)

    return None


def clean_task_text(text: str) -> str:
    """Strip task keywords (``TODO:``, ``URGENT:``) and ``(... priority)`` notes."""
    cleaned = _KEYWORD_PREFIX_RE.sub("", text.strip())
    cleaned = _PRIORITY_NOTE_RE.sub("", cleaned)
    return re.sub(r"\s{2,}", " ", cleaned).strip()
