"""Weighted completion percentage."""

from __future__ import annotations

from typing import Any

from .normalizer import normalize_subtasks


def calculate_progress(subtasks: Any) -> int:
    """Percentage of subtask weight that is done, truncated to an integer.

    Uses integer arithmetic so the floor is exact: 1 of 3 equal subtasks is
    33, never 34, and no float error can pull a whole number down by one.

    Args:
        subtasks: Anything normalize_subtasks() accepts.

    Returns:
        An integer in [0, 100]; 0 for no subtasks.
    """
    items = normalize_subtasks(subtasks)
    if not items:
        return 0
    total = sum(s.weight for s in items)
    done = sum(s.weight for s in items if s.done)
    return done * 100 // total
