"""Extraction and repair of model output.

Two modes:

* schedule mode (`extract_json` / `parse_json_payload`) isolates the JSON
  payload from fenced, chatty output and parses it, raising
  `MalformedResponseError` instead of leaking `json.JSONDecodeError`;
* feedback mode (`extract_feedback_text`) passes prose through, unwraps a
  JSON-shaped reply into its human-readable field, and bounds the length.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from weekplanner.core.errors import MalformedResponseError

logger = logging.getLogger(__name__)

FEEDBACK_TEXT_FIELDS = ("overview", "summary", "message")
FEEDBACK_FILLER = "AI returned structured data instead of text."
EMPTY_FEEDBACK = "No insights available."
ELLIPSIS = "..."
RAW_EXCERPT_CHARS = 500

_FENCE_RE = re.compile(r"```[a-zA-Z0-9_-]*")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text)


def extract_json(raw_text: str) -> str:
    """Return the substring from the first `{`/`[` to the last `}`/`]`."""
    cleaned = strip_code_fences(raw_text or "")
    openers = [idx for idx in (cleaned.find("{"), cleaned.find("[")) if idx != -1]
    if not openers:
        raise MalformedResponseError("no JSON payload found in model output", raw_text=raw_text)
    start = min(openers)
    end = max(cleaned.rfind("}"), cleaned.rfind("]"))
    if end < start:
        raise MalformedResponseError("JSON payload is not closed", raw_text=raw_text)
    return cleaned[start : end + 1].strip()


def parse_json_payload(raw_text: str) -> Any:
    """Extract and decode the JSON payload, converting parser errors to MalformedResponseError."""
    candidate = extract_json(raw_text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"model output is not valid JSON: {exc.msg}", raw_text=raw_text) from exc


def raw_excerpt(raw_text: str) -> str:
    """Bounded excerpt of model output for log lines."""
    text = raw_text or ""
    if len(text) <= RAW_EXCERPT_CHARS:
        return text
    return text[:RAW_EXCERPT_CHARS] + ELLIPSIS


def truncate_text(text: str, max_chars: int = 1000) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + ELLIPSIS
    return text


def extract_feedback_text(raw_text: str, *, max_chars: int = 1000) -> str:
    """Human-readable feedback from model output, always at most `max_chars` (+ ellipsis)."""
    text = (raw_text or "").strip()
    if text.startswith("```") and text.endswith("```"):
        text = strip_code_fences(text).strip()
    if not text:
        return EMPTY_FEEDBACK

    if text.startswith("{") and text.endswith("}"):
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            logger.info("Feedback reply looked like JSON but did not parse; using filler text")
            text = FEEDBACK_FILLER
        else:
            text = _pick_feedback_field(parsed, fallback=text)

    return truncate_text(text, max_chars)


def _pick_feedback_field(parsed: Any, *, fallback: str) -> str:
    if isinstance(parsed, dict):
        for field_name in FEEDBACK_TEXT_FIELDS:
            value = parsed.get(field_name)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return fallback
