"""Task projection handed to notification collaborators, and owner cleanup."""

from __future__ import annotations

import re
from typing import Any

from ..models import TaskProjection

_OWNER_SPLIT = re.compile(r"[\n,]")
_QUOTES = "\"'“”‘’"


def sanitize_owners(value: Any) -> str:
    """Normalize an owners field to "Name, Other Name".

    Splits on commas and newlines, trims whitespace and surrounding quotes,
    drops empty names, and removes case-insensitive duplicates keeping the
    first spelling.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(v) for v in value)

    seen: set[str] = set()
    names: list[str] = []
    for part in _OWNER_SPLIT.split(str(value)):
        name = part.strip().strip(_QUOTES).strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())
        names.append(name)
    return ", ".join(names)


def owner_list(owners: str) -> list[str]:
    return [name for name in sanitize_owners(owners).split(", ") if name]


def build_projection(task: dict[str, Any], *, status: str | None = None) -> TaskProjection:
    """Project a task row onto the fields the notifiers consume.

    Args:
        task: Task row as returned by the database.
        status: Status to report instead of the stored one.
    """
    try:
        progress = int(task.get("progress_percentage") or 0)
    except (TypeError, ValueError):
        progress = 0
    return TaskProjection(
        id=str(task.get("task_key") or ""),
        action_item=str(task.get("action_item") or ""),
        department=str(task.get("department") or ""),
        priority=str(task.get("priority_score") or ""),
        status=status or str(task.get("status") or ""),
        owners=sanitize_owners(task.get("owners")),
        progress=progress,
    )
