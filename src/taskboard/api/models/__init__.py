"""API models package for Taskboard."""

from .requests import (
    ProgressModeRequest,
    SubtaskAddRequest,
    SubtasksReplaceRequest,
    SubtaskToggleRequest,
)
from .responses import (
    ErrorResponse,
    HealthResponse,
    ModeResponse,
    SnapshotResponse,
    StartTaskResponse,
    StepOutcomeModel,
    SubtaskModel,
    SubtaskWriteResponse,
    TaskSummary,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ModeResponse",
    "ProgressModeRequest",
    "SnapshotResponse",
    "StartTaskResponse",
    "StepOutcomeModel",
    "SubtaskAddRequest",
    "SubtaskModel",
    "SubtaskToggleRequest",
    "SubtaskWriteResponse",
    "SubtasksReplaceRequest",
    "TaskSummary",
]
