"""Pattern-matching strategies that turn a line or sentence into task candidates.

Every strategy is a plain function ``(unit, ctx) -> list[TaskCandidate]``.  The
heuristic engine applies fixed, ordered tuples of strategies to each unit and
pools the results; strategies only read the :class:`LineContext`.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from meeting_tasks.extraction.dates import resolve_due_date
from meeting_tasks.extraction.models import Priority, TaskCandidate
from meeting_tasks.extraction.segmenter import LineContext, is_bullet, is_filler, strip_bullet
from meeting_tasks.extraction.signals import (
    clean_task_text,
    detect_priority,
    extract_assignee,
    has_action_verb,
    is_name,
    starts_with_action_verb,
)

Strategy = Callable[[str, LineContext], list[TaskCandidate]]

_ASSIGNMENT_SIGNAL_RE = re.compile(
    r"\b(?:assigned|will|needs?\s+to|should|must|tasked|target|deadline|bug|release|testing)\b",
    re.IGNORECASE,
)
_LEADING_MENTION_RE = re.compile(r"^@\w+[,:]?\s+")
_NOT_IMPERATIVE_RE = re.compile(r"^\w+\s+(?:is|was|are|were|went|has|had|of)\b", re.IGNORECASE)
_POSSESSIVE_RE = re.compile(r"^(?:the|a|an|my|our|your|their)\s+", re.IGNORECASE)
_PRONOUN_ONLY_RE = re.compile(r"^\w+\s+(?:that|it|this)\W*$", re.IGNORECASE)
_DEADLINE_CLAUSE_RE = re.compile(r",\s*with\s+a\s+deadline.*$", re.IGNORECASE)

_WORK_NOUN = (
    r"(?:page|feature|module|component|dropdown|redesign|screen|flow|report|api|"
    r"integration|migration|dashboard|endpoint)"
)

# Sentence-level assignment
_DEADLINE_ASSIGNMENT_RE = re.compile(r"\b([A-Z][a-z]+)\s+to\s+(.+?)\s+by\s+(.+)$")
_DIRECT_ASSIGNMENT_RE = re.compile(
    r"\b([A-Z][a-z]+)\s+(?:will|needs?\s+to|should|must|has\s+to|is\s+going\s+to)\s+(.+)$"
)
_PASSIVE_ASSIGNMENT_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b([A-Z][a-z]+)\s+was\s+(?:assigned|scheduled)\s+to\s+(.+)$"),
    re.compile(r"\b([A-Z][a-z]+)\s+was\s+tasked\s+with\s+(.+)$"),
    re.compile(r"\b([A-Z][a-z]+)\s+was\s+given\s+(.+)$"),
    re.compile(r"\b([A-Z][a-z]+)\s+would\s+(?!like\b|love\b|be\b|have\b|prefer\b)(.+)$"),
)
_TEAM_AGREEMENT_RE = re.compile(
    r"\b(?:the\s+)?(?:team|everyone|everybody|all)\s+agreed\s+to\s+(\w+)\s+(.+)$", re.IGNORECASE
)
_WEAK_ACTION_RE = re.compile(r"^(?:be|not|never|probably|also)\b", re.IGNORECASE)

# Transcript-level commitments and requests
_FIRST_PERSON_RE = re.compile(
    r"^(?:(?:ok(?:ay)?|sure|yes|yeah|alright|so|and),?\s+)?I\s*(?:will|can|shall|'ll|’ll|\s+need\s+to)\s+(.+)$",
    re.IGNORECASE,
)
_FINISH_THAT_RE = re.compile(
    r"\bI(?:'ll|’ll|\s+will)\s+(finish|complete)\s+(?:that|it)\b(.*)$", re.IGNORECASE
)
_PLEASE_COMPLETE_RE = re.compile(r"\bplease\s+(complete|finish)\s+(?:that|it)\b(.*)$", re.IGNORECASE)
_NEEDS_COMPLETION_RE = re.compile(
    rf"((?:[\w-]+\s+){{0,4}}?{_WORK_NOUN})\s+needs\s+(?:completion|to\s+be\s+(?:completed|finished))\b(.*)$",
    re.IGNORECASE,
)
_NEEDS_RE = re.compile(rf"((?:[\w-]+\s+){{0,4}}?{_WORK_NOUN})\s+needs\b", re.IGNORECASE)
_PROGRESS_SUBJECT_RE = re.compile(
    rf"((?:[\w-]+\s+){{0,4}}?{_WORK_NOUN})\s+is\s+\d+%\s+(?:done|complete)", re.IGNORECASE
)
_THE_SUBJECT_RE = re.compile(rf"\bthe\s+((?:[\w-]+\s+){{0,4}}?{_WORK_NOUN})\b", re.IGNORECASE)

_REQUEST_RE = re.compile(
    r"\b([A-Z][a-z]+),\s+(?:(?i:after)\s+[^,]+,\s+)?(?i:can|could|would)\s+you\s+"
    r"(?:(?i:please)\s+)?(.+?)(?:\?|$)"
)
_BUG_LIST_RE = re.compile(
    r"\b(?:one|two|three|four|five|six|seven|eight|nine|ten|\d+)\s+bugs?\s+"
    r"(?:remain|remaining|left|open)\w*[^—–:]*?(?:[—–:]|\s-\s)\s*(.+)$",
    re.IGNORECASE,
)
_BUG_HANDOFF_RE = re.compile(
    r"\b([A-Z][a-z]+),\s+(?i:can|could)\s+you\s+take\s+the\s+(.+?)\s+and\s+(?:the\s+)?(.+?)\s+bugs?\b"
)
_SELF_BUG_RE = re.compile(
    r"\bI(?:'ll|’ll|\s+will)\s+(?:handle|take|fix)\s+the\s+(.+?)\s+bug\b", re.IGNORECASE
)
_YOULL_HANDLE_RE = re.compile(r"\byou(?:'ll|’ll|\s+will)\s+handle\s+the\s+(.+?)(?:[,.]|$)", re.IGNORECASE)
_ADDRESSEE_RE = re.compile(r"\b([A-Z][a-z]+),")
_FEATURE_CONTEXT_RE = re.compile(r"\bthe\s+((?:[\w-]+\s+){0,3}?[\w-]+)\s+feature\b", re.IGNORECASE)
_WHOS_RE = re.compile(
    r"\bwho'?s\s+(doing|updating|handling|owning|taking|writing|fixing)\s+(.+?)\?", re.IGNORECASE
)
_WE_NEED_RE = re.compile(r"\bwe\s+(?:still\s+)?need\s+(?:to\s+)?(.+?)(?:[.!]|$)", re.IGNORECASE)

_GERUND_TO_IMPERATIVE = {
    "doing": "Do",
    "updating": "Update",
    "handling": "Handle",
    "owning": "Own",
    "taking": "Take",
    "writing": "Write",
    "fixing": "Fix",
}


def _candidate(
    title: str,
    unit: str,
    ctx: LineContext,
    *,
    assignee: str | None = None,
    priority: Priority | None = None,
    due_date: str | None = None,
    description: str | None = None,
) -> TaskCandidate:
    """Build a candidate; priority and due date default to signals found in *unit*."""
    return TaskCandidate(
        title=title.strip(),
        description=description or f'Extracted from: "{unit}"',
        assignee=assignee,
        priority=priority or detect_priority(unit),
        due_date=due_date or resolve_due_date(unit, ctx.today),
    )


def _trim_action(text: str) -> str:
    """Cut an action clause at its first sentence boundary and drop trailing punctuation."""
    text = re.split(r"(?<=[.!?])\s+", text.strip(), maxsplit=1)[0]
    text = _DEADLINE_CLAUSE_RE.sub("", text)
    return text.rstrip(" .!?,;:").strip()


def _subject(text: str) -> str | None:
    """Find the work item ("the settings page") a pronoun refers to."""
    match = _PROGRESS_SUBJECT_RE.search(text) or _THE_SUBJECT_RE.search(text)
    if not match:
        return None
    return _POSSESSIVE_RE.sub("", match.group(1).strip())


# ---------------------------------------------------------------------------
# Structured notes
# ---------------------------------------------------------------------------


def bullet_item(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """A bulleted or numbered line is a task, verbatim after marker stripping."""
    if not is_bullet(unit):
        return []
    text = clean_task_text(strip_bullet(unit))
    if len(text) < 5 or is_filler(text) or "?" in text:
        return []
    if len(text) < 30 and not has_action_verb(text) and not _ASSIGNMENT_SIGNAL_RE.search(text):
        return []
    return [_candidate(text, unit, ctx, assignee=extract_assignee(text))]


def imperative_line(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """A plain line opening with an action verb ("Fix production bug", "@john review the PR")."""
    if is_bullet(unit) or "?" in unit:
        return []
    text = clean_task_text(unit)
    body = _LEADING_MENTION_RE.sub("", text)
    if len(body) < 8 or len(body) > 160:
        return []
    if not starts_with_action_verb(body) or _NOT_IMPERATIVE_RE.match(body):
        return []
    return [_candidate(body, unit, ctx, assignee=extract_assignee(text))]


# ---------------------------------------------------------------------------
# Sentence-level assignment
# ---------------------------------------------------------------------------


def deadline_assignment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``<Name> to <action> by <when>``."""
    match = _DEADLINE_ASSIGNMENT_RE.search(unit)
    if not match or not is_name(match.group(1)):
        return []
    action = _trim_action(match.group(2))
    if len(action) < 5:
        return []
    due = resolve_due_date(f"by {match.group(3)}", ctx.today)
    return [_candidate(action, unit, ctx, assignee=match.group(1), due_date=due)]


def direct_assignment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``<Name> will/needs to/should/must <action>``."""
    match = _DIRECT_ASSIGNMENT_RE.search(unit)
    if not match or not is_name(match.group(1)):
        return []
    action = _trim_action(match.group(2))
    if len(action) < 10 or _WEAK_ACTION_RE.match(action):
        return []
    return [_candidate(action, unit, ctx, assignee=match.group(1))]


def passive_assignment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``<Name> was assigned to / tasked with / given <work>``, ``<Name> would <action>``."""
    for pattern in _PASSIVE_ASSIGNMENT_RES:
        match = pattern.search(unit)
        if not match or not is_name(match.group(1)):
            continue
        action = _trim_action(match.group(2))
        if len(action) < 10:
            return []
        return [_candidate(action, unit, ctx, assignee=match.group(1))]
    return []


def team_assignment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``team/everyone/all agreed to <verb> <clause>`` is owned by the whole team."""
    match = _TEAM_AGREEMENT_RE.search(unit)
    if not match:
        return []
    action = _trim_action(f"{match.group(1)} {match.group(2)}")
    if len(action) < 10:
        return []
    return [_candidate(action, unit, ctx, assignee="Team")]


# ---------------------------------------------------------------------------
# Transcript commitments, requests and defect lists
# ---------------------------------------------------------------------------


def first_person_commitment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``I will/can/'ll/need to <action>`` from the tracked speaker."""
    if not ctx.speaker:
        return []
    if _FINISH_THAT_RE.search(unit) or _SELF_BUG_RE.search(unit):
        return []
    match = _FIRST_PERSON_RE.match(unit)
    if not match:
        return []
    action = _trim_action(match.group(1))
    if len(action) < 8 or _PRONOUN_ONLY_RE.match(action):
        return []
    return [
        _candidate(
            action,
            unit,
            ctx,
            assignee=ctx.speaker,
            due_date=resolve_due_date(action, ctx.today),
            description=f"Committed by {ctx.speaker}",
        )
    ]


def context_commitment(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """Resolve "that" in "I'll finish that today" against the recent context."""
    earlier = list(reversed(ctx.recent))[1:]

    finish = _FINISH_THAT_RE.search(unit)
    if finish and ctx.speaker:
        subject = next((s for s in map(_subject, earlier) if s), None)
        if subject:
            return [
                _candidate(
                    f"{finish.group(1).capitalize()} {subject}",
                    unit,
                    ctx,
                    assignee=ctx.speaker,
                    due_date=resolve_due_date(finish.group(2), ctx.today),
                    description=f"Committed by {ctx.speaker}",
                )
            ]

    please = _PLEASE_COMPLETE_RE.search(unit)
    if please:
        for line in earlier:
            needs = _NEEDS_COMPLETION_RE.search(line) or _NEEDS_RE.search(line)
            if needs:
                subject = _POSSESSIVE_RE.sub("", needs.group(1).strip())
                return [
                    _candidate(
                        f"{please.group(1).capitalize()} {subject}",
                        unit,
                        ctx,
                        assignee=ctx.previous_speaker or ctx.speaker,
                        due_date=resolve_due_date(please.group(2), ctx.today),
                        description="Assigned during meeting",
                    )
                ]

    completion = _NEEDS_COMPLETION_RE.search(unit)
    if completion and not please:
        subject = _POSSESSIVE_RE.sub("", completion.group(1).strip())
        if len(subject) >= 5:
            return [
                _candidate(
                    f"Complete {subject}",
                    unit,
                    ctx,
                    assignee=ctx.speaker,
                    due_date=resolve_due_date(completion.group(2), ctx.today),
                )
            ]
    return []


def request(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``<Name>, [after <clause>,] can you <action>?``."""
    if _BUG_HANDOFF_RE.search(unit):
        return []
    match = _REQUEST_RE.search(unit)
    if not match or not is_name(match.group(1)):
        return []
    action = _trim_action(match.group(2))
    if len(action) < 5 or _PRONOUN_ONLY_RE.match(action):
        return []
    return [
        _candidate(
            action,
            unit,
            ctx,
            assignee=match.group(1),
            due_date=resolve_due_date(action, ctx.today),
        )
    ]


def bug_list(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``three bugs remain — a, b, and c`` yields one high-priority fix per bug."""
    match = _BUG_LIST_RE.search(unit)
    if not match:
        return []
    found: list[TaskCandidate] = []
    for desc in re.split(r",\s*(?:and\s+)?|;\s*", match.group(1)):
        desc = desc.strip().rstrip(".").strip()
        if desc.lower().startswith("and "):
            desc = desc[4:]
        if len(desc) > 10:
            found.append(
                _candidate(
                    f"Fix: {desc}",
                    unit,
                    ctx,
                    priority=Priority.HIGH,
                    due_date=resolve_due_date(desc, ctx.today),
                    description="Bug reported in meeting",
                )
            )
    return found


def bug_handoff(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``<Name>, can you take the A and B bugs?`` yields two fixes for Name."""
    match = _BUG_HANDOFF_RE.search(unit)
    if not match or not is_name(match.group(1)):
        return []
    assignee = match.group(1)
    return [
        _candidate(
            f"Fix {bug.strip()} bug",
            unit,
            ctx,
            assignee=assignee,
            priority=Priority.HIGH,
            description=f"Assigned to {assignee}",
        )
        for bug in (match.group(2), match.group(3))
    ]


def self_assigned_bug(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``I'll handle the <X> bug``."""
    match = _SELF_BUG_RE.search(unit)
    if not match:
        return []
    return [
        _candidate(
            f"Fix {match.group(1).strip()} bug",
            unit,
            ctx,
            assignee=ctx.speaker,
            priority=Priority.HIGH,
            description=f"Assigned to {ctx.speaker}" if ctx.speaker else None,
        )
    ]


def delegated_handoff(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``you'll handle the <X>`` addressed to the person named on the previous line."""
    match = _YOULL_HANDLE_RE.search(unit)
    if not match:
        return []
    addressee = _ADDRESSEE_RE.search(unit) or _ADDRESSEE_RE.search(ctx.previous)
    if not addressee or not is_name(addressee.group(1)):
        return []
    what = match.group(1).strip()
    feature = _FEATURE_CONTEXT_RE.search(ctx.joined())
    if feature and re.search(r"\b(?:frontend|ui|backend|part)\b", what, re.IGNORECASE):
        what = f"{what} for the {feature.group(1).strip()} feature"
    if len(what) < 5:
        return []
    return [
        _candidate(
            f"Handle the {what}",
            unit,
            ctx,
            assignee=addressee.group(1),
            description=f"Assigned to {addressee.group(1)}",
        )
    ]


def open_ownership(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``who's updating the release notes?`` is an unassigned task."""
    match = _WHOS_RE.search(unit)
    if not match:
        return []
    what = _trim_action(match.group(2))
    if len(what) < 5:
        return []
    return [_candidate(f"{_GERUND_TO_IMPERATIVE[match.group(1).lower()]} {what}", unit, ctx)]


def implicit_need(unit: str, ctx: LineContext) -> list[TaskCandidate]:
    """``we need <clause>.`` is an unassigned task."""
    match = _WE_NEED_RE.search(unit)
    if not match:
        return []
    what = _trim_action(match.group(1))
    if len(what) < 10:
        return []
    return [_candidate(what, unit, ctx)]


LINE_STRATEGIES: tuple[Strategy, ...] = (bullet_item,)
NOTE_STRATEGIES: tuple[Strategy, ...] = (imperative_line,)
SENTENCE_STRATEGIES: tuple[Strategy, ...] = (
    deadline_assignment,
    direct_assignment,
    passive_assignment,
    team_assignment,
)
TRANSCRIPT_STRATEGIES: tuple[Strategy, ...] = (
    first_person_commitment,
    context_commitment,
    request,
    bug_list,
    bug_handoff,
    self_assigned_bug,
    delegated_handoff,
    open_ownership,
    implicit_need,
)
