"""Lenient parsing of model text into JSON."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from brandlens.errors import ModelOutputError

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker.

    Text without fences comes back unchanged apart from surrounding
    whitespace.
    """
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def parse_json_response(text: str) -> Any:
    """Parse a model response as JSON.

    Raises ``ModelOutputError`` when the text is empty, does not start with
    ``{`` or ``[``, or cannot be parsed even after closing unbalanced braces
    on a truncated response.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise ModelOutputError("Model returned an empty response")
    if cleaned[0] not in "{[":
        raise ModelOutputError(f"Model response is not JSON: {cleaned[:80]!r}")

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        if cleaned.endswith(("}", "]")):
            raise ModelOutputError(f"Invalid JSON in model response: {exc}") from exc

        missing = cleaned.count("{") - cleaned.count("}")
        repaired = cleaned + "}" * max(missing, 0)
        logger.debug("Response looks truncated, appending %d closing brace(s)", missing)
        try:
            return json.loads(repaired)
        except json.JSONDecodeError:
            raise ModelOutputError(f"Invalid JSON in model response: {exc}") from exc


def unwrap_list(data: Any) -> list[Any]:
    """Coerce parsed output to a list of items.

    JSON-mode APIs only return objects, so a list often arrives wrapped as
    ``{"pillars": [...]}``.  The first list-valued field is used; a bare
    object becomes a one-item list.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for value in data.values():
            if isinstance(value, list):
                return value
        return [data]
    return []


def unwrap_object(data: Any) -> dict[str, Any]:
    """Coerce parsed output to a single object (first item of a list)."""
    if isinstance(data, dict):
        return data
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    raise ModelOutputError(f"Expected a JSON object, got {type(data).__name__}")
