"""External extraction services: Claude tool use, OpenAI JSON mode and Gemini.

Each adapter is a ``RawTaskSource``: it takes a chunk of meeting text and
returns raw task-like records, or raises.  ``candidates_from_records`` turns
those records into :class:`TaskCandidate` objects for the refinement stage.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from datetime import date
from typing import Any

from anthropic import Anthropic
from openai import OpenAI

from meeting_tasks.config import settings
from meeting_tasks.extraction.dates import is_iso_date, resolve_due_date
from meeting_tasks.extraction.models import DEFAULT_DESCRIPTION, Priority, TaskCandidate
from meeting_tasks.extraction.signals import detect_priority
from meeting_tasks.pipeline_config import ExtractionProvider, RefinementConfig

logger = logging.getLogger(__name__)

RawTaskSource = Callable[[str], list[dict[str, Any]]]


class ExtractionServiceError(RuntimeError):
    """An external extraction service was unavailable or returned unusable output."""


# Tool definition for Claude structured output
EXTRACTION_TOOL: dict[str, Any] = {
    "name": "store_extracted_tasks",
    "description": (
        "Store actionable tasks extracted from meeting notes or a transcript. "
        "Call this once with all extracted tasks."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "tasks": {
                "type": "array",
                "description": "Concrete tasks someone needs to complete.",
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {
                            "type": "string",
                            "description": "Clear, imperative task description (5-15 words).",
                        },
                        "description": {
                            "type": "string",
                            "description": "Context from the meeting.",
                        },
                        "assignee": {
                            "type": "string",
                            "description": "Person responsible (null if unassigned).",
                        },
                        "priority": {
                            "type": "string",
                            "enum": ["high", "medium", "low"],
                        },
                        "due_date": {
                            "type": "string",
                            "description": "Deadline as YYYY-MM-DD, or the spoken term (e.g. 'Friday').",
                        },
                        "source_text": {
                            "type": "string",
                            "description": "The original sentence the task came from.",
                        },
                        "confidence": {
                            "type": "string",
                            "enum": ["high", "medium", "low"],
                        },
                        "inferred": {
                            "type": "boolean",
                            "description": "True for implied tasks (suggestions, open questions).",
                        },
                        "optional": {
                            "type": "boolean",
                            "description": "True for nice-to-have work.",
                        },
                    },
                    "required": ["title"],
                },
            },
        },
        "required": ["tasks"],
    },
}

_SYSTEM_PROMPT_TEMPLATE = """\
You are an expert at extracting actionable tasks from meeting notes and transcripts.
Input may be timestamped speaker lines, paragraphs, bullets or a mix of formats.

EXTRACT:
- Specific work assignments ("John will review the PR", "Sarah needs to update docs")
- Action items with deadlines ("Fix the bug by Friday", "Deploy by EOD")
- Deliverables and bug fixes ("Complete the design mockups", "Fix the login issue")
Split sentences with several actions into separate tasks.

DO NOT EXTRACT questions, status updates, general statements or meeting logistics.

For each task give a title, the assignee if mentioned, a priority (high for
urgent or critical work, low for nice-to-have) and the due date as YYYY-MM-DD.
Today is {today}.

If there are more than {task_max} distinct tasks, return the {task_max} most important
(urgent, with owners or dates). If there are fewer than {task_min}, return exactly
what is present; do not invent tasks."""

_JSON_FORMAT_HINT = """\
Return valid JSON only, in this exact format:
{"tasks": [{"title": "...", "description": "...", "assignee": "Name or null",
"priority": "high|medium|low", "due_date": "YYYY-MM-DD or null",
"source_text": "...", "confidence": "high|medium|low",
"inferred": false, "optional": false}]}"""

_OPTIONAL_RE = re.compile(r"\b(?:optional|nice\s+to\s+have|if\s+possible)\b", re.IGNORECASE)


def build_system_prompt(today: date | None = None, config: RefinementConfig | None = None) -> str:
    """System prompt whose quantity guidance matches the cap *config* applies."""
    config = config or RefinementConfig.from_settings()
    return _SYSTEM_PROMPT_TEMPLATE.format(
        today=(today or date.today()).isoformat(),
        task_min=config.task_min,
        task_max=config.task_max,
    )


def _user_prompt(text: str) -> str:
    return f"Extract actionable tasks from this meeting content:\n\n{text}"


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------


def _records_from(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("tasks")
    if not isinstance(data, list):
        raise ExtractionServiceError("Response JSON has no task list")
    return [record for record in data if isinstance(record, dict)]


def _repair_json(text: str) -> str:
    """Fix trailing commas and missing commas between adjacent objects."""
    text = re.sub(r",(\s*[}\]])", r"\1", text)
    return re.sub(r"\}(\s*)\{", r"},\1{", text)


def parse_json_payload(text: str | None) -> list[dict[str, Any]]:
    """Parse a model's text response into raw task records.

    Accepts a bare JSON array or an object with a ``tasks`` array, optionally
    wrapped in markdown fences or surrounded by prose.

    Raises:
        ExtractionServiceError: If no task list can be recovered.
    """
    if not text or not text.strip():
        raise ExtractionServiceError("Empty response from extraction service")

    cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", text.strip())
    try:
        return _records_from(json.loads(cleaned))
    except json.JSONDecodeError:
        logger.debug("Initial JSON parse failed, attempting repair")

    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i >= 0]
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if not starts or end < min(starts):
        raise ExtractionServiceError("No JSON found in extraction service response")

    snippet = _repair_json(cleaned[min(starts) : end + 1])
    try:
        return _records_from(json.loads(snippet))
    except json.JSONDecodeError as exc:
        raise ExtractionServiceError(f"Invalid JSON in extraction service response: {exc}") from exc


def _parse_tool_response(response: Any) -> list[dict[str, Any]]:
    """Parse the Claude tool_use response into raw task records."""
    for block in response.content:
        if block.type != "tool_use" or block.name != EXTRACTION_TOOL["name"]:
            continue

        data = block.input
        if isinstance(data, str):
            data = json.loads(data)
        return _records_from(data)

    # No tool call; the model may still have answered with JSON text.
    text = "".join(block.text for block in response.content if block.type == "text")
    return parse_json_payload(text)


def _first(record: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _due_date(value: Any, today: date | None) -> str | None:
    if not isinstance(value, str) or not value.strip() or value.strip().lower() == "null":
        return None
    value = value.strip()
    if is_iso_date(value[:10]):
        return value[:10]
    return resolve_due_date(f"by {value}", today)


def candidates_from_records(records: list[dict[str, Any]], today: date | None = None) -> list[TaskCandidate]:
    """Convert raw service records with varying field names into candidates.

    Records without a usable title are skipped.
    """
    candidates: list[TaskCandidate] = []
    for record in records:
        title = _first(record, "task", "title")
        if not isinstance(title, str) or not title.strip():
            continue

        assignee = _first(record, "assignee", "owner")
        if not isinstance(assignee, str) or assignee.strip().lower() in ("null", "none", "unassigned"):
            assignee = None

        source_text = _first(record, "source_text", "sourceText")
        description = _first(record, "description", "source_text", "sourceText") or DEFAULT_DESCRIPTION
        optional = record.get("optional") is True or bool(_OPTIONAL_RE.search(title))
        inferred = record.get("inferred") is True

        raw_priority = str(record.get("priority") or "").strip().lower()
        if raw_priority in {p.value for p in Priority}:
            priority = Priority(raw_priority)
        elif optional:
            priority = Priority.LOW
        else:
            priority = detect_priority(title)

        confidence = record.get("confidence")
        candidates.append(
            TaskCandidate(
                title=title,
                description=str(description),
                assignee=assignee,
                priority=priority,
                due_date=_due_date(_first(record, "due_date", "dueDate", "deadline"), today),
                confidence=str(confidence) if confidence is not None else ("medium" if inferred else "high"),
                inferred=inferred,
                optional=optional,
                source_text=str(source_text) if source_text else None,
            )
        )
    return candidates


# ---------------------------------------------------------------------------
# Provider adapters
# ---------------------------------------------------------------------------


def extract_with_anthropic(
    text: str,
    *,
    config: RefinementConfig | None = None,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Extract raw task records with Claude tool use."""
    if not settings.anthropic_api_key:
        raise ExtractionServiceError("ANTHROPIC_API_KEY is not configured")

    client = Anthropic(api_key=settings.anthropic_api_key)
    response = client.messages.create(
        model=settings.anthropic_model,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        system=build_system_prompt(today, config),
        tools=[EXTRACTION_TOOL],
        tool_choice={"type": "tool", "name": EXTRACTION_TOOL["name"]},
        messages=[{"role": "user", "content": _user_prompt(text)}],
    )
    return _parse_tool_response(response)


def extract_with_openai(
    text: str,
    *,
    config: RefinementConfig | None = None,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Extract raw task records with an OpenAI JSON-mode chat completion."""
    if not settings.openai_api_key:
        raise ExtractionServiceError("OPENAI_API_KEY is not configured")

    client = OpenAI(api_key=settings.openai_api_key)
    response = client.chat.completions.create(
        model=settings.openai_model,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        response_format={"type": "json_object"},
        messages=[
            {"role": "system", "content": f"{build_system_prompt(today, config)}\n\n{_JSON_FORMAT_HINT}"},
            {"role": "user", "content": _user_prompt(text)},
        ],
    )
    return parse_json_payload(response.choices[0].message.content)


def extract_with_gemini(
    text: str,
    *,
    config: RefinementConfig | None = None,
    today: date | None = None,
) -> list[dict[str, Any]]:
    """Extract raw task records with a Gemini JSON response."""
    if not settings.gemini_api_key:
        raise ExtractionServiceError("GEMINI_API_KEY is not configured")

    import google.generativeai as genai

    genai.configure(api_key=settings.gemini_api_key)  # type: ignore[attr-defined]
    model = genai.GenerativeModel(  # type: ignore[attr-defined]
        settings.gemini_model,
        system_instruction=f"{build_system_prompt(today, config)}\n\n{_JSON_FORMAT_HINT}",
        generation_config={
            "temperature": settings.llm_temperature,
            "max_output_tokens": settings.llm_max_tokens,
            "response_mime_type": "application/json",
        },
    )
    response = model.generate_content(_user_prompt(text))
    return parse_json_payload(response.text)


_ADAPTERS: dict[ExtractionProvider, RawTaskSource] = {
    ExtractionProvider.ANTHROPIC: extract_with_anthropic,
    ExtractionProvider.OPENAI: extract_with_openai,
    ExtractionProvider.GEMINI: extract_with_gemini,
}


def get_provider(provider: ExtractionProvider) -> RawTaskSource:
    """Return the adapter for an external *provider*."""
    try:
        return _ADAPTERS[provider]
    except KeyError:
        raise ExtractionServiceError(f"No external adapter for provider {provider!r}") from None


def model_name(provider: ExtractionProvider) -> str:
    """Model id reported in result metadata."""
    return {
        ExtractionProvider.ANTHROPIC: settings.anthropic_model,
        ExtractionProvider.OPENAI: settings.openai_model,
        ExtractionProvider.GEMINI: settings.gemini_model,
    }.get(provider, str(provider))
