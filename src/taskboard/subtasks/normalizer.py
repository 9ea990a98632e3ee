"""Canonicalize arbitrary subtask input into well-formed Subtask records.

normalize_subtasks() is total: anything it cannot make sense of becomes an
empty list or a default field value, never an exception. It is idempotent,
so feeding its own output back in changes nothing.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from ..models import MAX_TITLE_LENGTH, MAX_WEIGHT, MIN_WEIGHT, Subtask

_LEADING_INT = re.compile(r"^\s*([+-]?)0*(\d+)")
# Digit runs longer than this are out of range whatever their value
_MAX_WEIGHT_DIGITS = len(str(MAX_WEIGHT))


def _leading_int(text: str) -> int | None:
    """Leading integer of a string, capped in magnitude past the weight range."""
    match = _LEADING_INT.match(text)
    if not match:
        return None
    sign, digits = match.groups()
    magnitude = int(digits) if len(digits) <= _MAX_WEIGHT_DIGITS else MAX_WEIGHT + 1
    return -magnitude if sign == "-" else magnitude


def parse_weight(value: Any) -> int:
    """Parse a weight the way form input is parsed, then clamp it.

    Integers are taken as-is, floats are truncated, and strings contribute
    their leading integer ("12abc" -> 12, "3.7" -> 3). Anything else, and a
    parsed zero, falls back to 1. The result is clamped to [1, 100].
    """
    parsed: int | None = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        parsed = _leading_int(value)

    if not parsed:
        parsed = MIN_WEIGHT
    return max(MIN_WEIGHT, min(MAX_WEIGHT, parsed))


def _as_mapping(item: Any) -> Mapping[str, Any]:
    if isinstance(item, Subtask):
        return item.to_dict()
    if isinstance(item, Mapping):
        return item
    return {}


def _text(value: Any) -> str:
    # str() of an int past the interpreter's digit limit raises ValueError
    try:
        return str(value)
    except ValueError:
        return ""


def normalize_subtask(item: Any, position: int) -> Subtask:
    """Normalize one element found at a zero-based position."""
    data = _as_mapping(item)
    raw_id = _text(data.get("id") or "")
    raw_title = data.get("title")
    return Subtask(
        id=raw_id or f"S{position + 1}",
        title=_text(raw_title or "")[:MAX_TITLE_LENGTH],
        done=bool(data.get("done")),
        weight=parse_weight(data.get("weight")),
    )


def normalize_subtasks(raw: Any) -> list[Subtask]:
    """Turn a list, JSON text, or nothing into an ordered list of subtasks.

    Args:
        raw: None, a list/tuple of mappings or Subtasks, or JSON text of a list.

    Returns:
        Normalized subtasks in input order; [] for anything unparsable.
    """
    if not raw:
        return []

    items: Any = raw
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            items = json.loads(raw)
        except (ValueError, TypeError):
            return []

    if not isinstance(items, (list, tuple)):
        return []

    return [normalize_subtask(item, i) for i, item in enumerate(items)]


def serialize_subtasks(subtasks: list[Subtask]) -> str:
    """JSON text stored in the subtasks column."""
    return json.dumps([s.to_dict() for s in subtasks], ensure_ascii=False)
