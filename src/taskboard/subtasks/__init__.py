"""Weighted subtasks and the progress derived from them."""

from __future__ import annotations

from .mode import ProgressModeController
from .mutations import add_subtask, remove_subtask, toggle_subtask
from .normalizer import normalize_subtask, normalize_subtasks, parse_weight, serialize_subtasks
from .plan import (
    PlanBuilder,
    PlanProvider,
    PlanSubtaskGenerator,
    StoredPlanProvider,
    plan_steps,
    step_title,
    subtasks_from_plan,
)
from .progress import calculate_progress
from .row_index import TaskRowIndex
from .store import SubtaskStore

__all__ = [
    "PlanBuilder",
    "PlanProvider",
    "PlanSubtaskGenerator",
    "ProgressModeController",
    "StoredPlanProvider",
    "SubtaskStore",
    "TaskRowIndex",
    "add_subtask",
    "calculate_progress",
    "normalize_subtask",
    "normalize_subtasks",
    "parse_weight",
    "plan_steps",
    "remove_subtask",
    "serialize_subtasks",
    "step_title",
    "subtasks_from_plan",
    "toggle_subtask",
]
