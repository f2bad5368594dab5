"""Cleanup of completion output that should contain JSON.

Models sometimes wrap JSON in fenced code blocks or add a sentence
around it. These helpers strip that wrapping before parsing.
"""

import json
import re
from typing import Any

from src.errors import UpstreamParseError

_FENCE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def clean_json_response(text: str | None, opener: str = "{", closer: str = "}") -> str:
    """Extract the JSON payload from completion text.

    Args:
        text: Raw completion output.
        opener: First character of the expected JSON value.
        closer: Last character of the expected JSON value.

    Returns:
        The outermost ``opener...closer`` span, the fenced block content
        when no such span exists, or ``opener + closer`` for empty output.
    """
    cleaned = (text or "").strip()
    fenced = _FENCE.search(cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()

    start = cleaned.find(opener)
    end = cleaned.rfind(closer)
    if start >= 0 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned or opener + closer


def parse_json_object(text: str | None, code: str = "E-2001") -> dict[str, Any]:
    """Parse completion text as a JSON object.

    Raises:
        UpstreamParseError: If the text is not a JSON object.
    """
    payload = clean_json_response(text)
    try:
        value = json.loads(payload)
    except json.JSONDecodeError as e:
        raise UpstreamParseError(f"Completion is not valid JSON: {e.msg}", raw_text=text or "", code=code) from e
    if not isinstance(value, dict):
        raise UpstreamParseError("Completion JSON is not an object", raw_text=text or "", code=code)
    return value


def parse_json_array(text: str | None, code: str = "E-2002") -> list[Any]:
    """Parse completion text as a JSON array.

    Raises:
        UpstreamParseError: If the text is not a JSON array.
    """
    payload = clean_json_response(text, opener="[", closer="]")
    try:
        value = json.loads(payload)
    except json.JSONDecodeError as e:
        raise UpstreamParseError(f"Completion is not valid JSON: {e.msg}", raw_text=text or "", code=code) from e
    if not isinstance(value, list):
        raise UpstreamParseError("Completion JSON is not an array", raw_text=text or "", code=code)
    return value
