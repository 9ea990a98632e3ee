"""Taskboard.

Weighted subtasks with Auto/Manual progress tracking, a lock-protected
subtask store, plan-based subtask generation, and a task-start workflow
that fans out to calendar, tracker and email notifiers.
"""

from __future__ import annotations

from .database import TaskboardDB, get_db, reset_db, set_db_path
from .diagnostics import DiagnosticLog
from .exceptions import CollaboratorError, LockTimeoutError, TaskboardError, TaskNotFoundError
from .lifecycle import TaskActions, TaskLifecycle
from .locking import StoreLock
from .models import (
    LifecycleStatus,
    ModeResult,
    ProgressMode,
    ProgressSnapshot,
    StartTaskResult,
    StepOutcome,
    Subtask,
    SubtaskWriteResult,
    TaskProjection,
)
from .services import Services, build_services
from .subtasks import (
    PlanSubtaskGenerator,
    ProgressModeController,
    StoredPlanProvider,
    SubtaskStore,
    add_subtask,
    calculate_progress,
    normalize_subtasks,
    remove_subtask,
    toggle_subtask,
)

__all__ = [
    "CollaboratorError",
    "DiagnosticLog",
    "LifecycleStatus",
    "LockTimeoutError",
    "ModeResult",
    "PlanSubtaskGenerator",
    "ProgressMode",
    "ProgressModeController",
    "ProgressSnapshot",
    "Services",
    "StartTaskResult",
    "StepOutcome",
    "StoreLock",
    "StoredPlanProvider",
    "Subtask",
    "SubtaskStore",
    "SubtaskWriteResult",
    "TaskActions",
    "TaskLifecycle",
    "TaskNotFoundError",
    "TaskProjection",
    "TaskboardDB",
    "TaskboardError",
    "add_subtask",
    "build_services",
    "calculate_progress",
    "get_db",
    "normalize_subtasks",
    "remove_subtask",
    "reset_db",
    "set_db_path",
    "toggle_subtask",
]
