"""Turns a raw language-model response into an AnalysisResult.

Recovery order: the whole response as JSON, then the first balanced
``{...}`` span, then heuristic extraction from prose, then an empty result.
Parsing never raises.
"""

import json
import re
from typing import Any

from answerlens.analysis.models import (
    AnalysisResult,
    ModelMetadata,
    Suggestion,
    SuggestionCategory,
    SuggestionPriority,
)
from answerlens.logging.logger import Log

NO_SUMMARY = "No summary could be extracted from the analysis."

PARSE_JSON = "json"
PARSE_EMBEDDED_JSON = "embedded_json"
PARSE_TEXT = "text"
PARSE_EMPTY = "empty"

_LIST_ITEM = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s+(?P<content>.+?)\s*$")
_MAX_TEXT_SUGGESTIONS = 10


def parse_analysis_response(raw: str) -> AnalysisResult:
    """Parse a model response, degrading step by step instead of failing."""
    text = _strip_code_fences(raw or "")

    data = _loads_object(text)
    if data is not None:
        return _from_json(data, PARSE_JSON)

    span = find_balanced_object(text)
    if span is not None:
        data = _loads_object(span)
        if data is not None:
            Log.debug("Recovered JSON object embedded in model response")
            return _from_json(data, PARSE_EMBEDDED_JSON)

    Log.warning("Model response is not JSON, falling back to text extraction")
    result = _from_text(text)
    if result is not None:
        return result
    return empty_result()


def empty_result() -> AnalysisResult:
    return AnalysisResult(summary=NO_SUMMARY, metadata=ModelMetadata(parse_mode=PARSE_EMPTY))


def find_balanced_object(text: str) -> str | None:
    """Return the first balanced {...} span, ignoring braces inside strings."""
    start = text.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines).strip()
    return cleaned


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


def _from_json(data: dict[str, Any], parse_mode: str) -> AnalysisResult:
    summary = _as_text(data.get("summary")) or _as_text(data.get("analysis"))
    raw_suggestions = data.get("suggestions")
    if not isinstance(raw_suggestions, list):
        raw_suggestions = data.get("explanations")
    suggestions = [
        s for s in (_build_suggestion(item) for item in _as_list(raw_suggestions)) if s
    ]
    return AnalysisResult(
        summary=summary or NO_SUMMARY,
        suggestions=suggestions,
        insights=_string_list(data.get("insights")),
        study_tips=_string_list(data.get("study_tips")),
        related_concepts=_string_list(data.get("related_concepts")),
        metadata=ModelMetadata(parse_mode=parse_mode),
    )


def _build_suggestion(item: Any) -> Suggestion | None:
    if isinstance(item, str):
        content = item.strip()
        return _default_suggestion(content) if content else None
    if not isinstance(item, dict):
        return None
    content = ""
    for key in ("content", "suggestion", "explanation", "text"):
        content = _as_text(item.get(key))
        if content:
            break
    if not content:
        return None
    location = _as_text(item.get("location")) or None
    return Suggestion(
        category=SuggestionCategory.coerce(item.get("category")),
        priority=SuggestionPriority.coerce(item.get("priority")),
        content=content,
        location=location,
    )


def _from_text(text: str) -> AnalysisResult | None:
    summary_lines: list[str] = []
    suggestions: list[Suggestion] = []
    seen_list = False
    for line in text.splitlines():
        match = _LIST_ITEM.match(line)
        if match:
            seen_list = True
            if len(suggestions) < _MAX_TEXT_SUGGESTIONS:
                suggestions.append(_default_suggestion(match.group("content")))
        elif not seen_list:
            summary_lines.append(line.strip())

    summary = "\n".join(summary_lines).strip()
    if not summary and not suggestions:
        return None
    return AnalysisResult(
        summary=summary or NO_SUMMARY,
        suggestions=suggestions,
        metadata=ModelMetadata(parse_mode=PARSE_TEXT),
    )


def _default_suggestion(content: str) -> Suggestion:
    return Suggestion(
        category=SuggestionCategory.GENERAL,
        priority=SuggestionPriority.MEDIUM,
        content=content,
    )


def _as_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _string_list(value: Any) -> list[str]:
    return [v.strip() for v in _as_list(value) if isinstance(v, str) and v.strip()]
