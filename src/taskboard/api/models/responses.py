"""API response models for Taskboard.

Each mirrors the to_dict() of a domain result object.
"""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str


class SubtaskModel(BaseModel):
    """A normalized subtask."""

    id: str
    title: str
    done: bool
    weight: int


class SnapshotResponse(BaseModel):
    """A task's subtasks, progress mode and stored progress."""

    subtasks: list[SubtaskModel]
    mode: Literal["Auto", "Manual"]
    progress: int


class SubtaskWriteResponse(BaseModel):
    """Outcome of a subtask write. progress is omitted in Manual mode."""

    ok: bool
    progress: int | None = None
    error: str | None = None
    id: str | None = None


class ModeResponse(BaseModel):
    """Outcome of a progress mode switch."""

    ok: bool
    mode: Literal["Auto", "Manual"] | None = None
    error: str | None = None


class StepOutcomeModel(BaseModel):
    """Outcome of one downstream call of the task-start workflow."""

    name: str
    success: bool
    authoritative: bool
    detail: dict[str, Any]
    error: str | None = None


class StartTaskResponse(BaseModel):
    """Aggregate result of the task-start workflow."""

    status: Literal["Success", "Error"]
    message: str | None = None
    status_transition: StepOutcomeModel | None = None
    calendar: StepOutcomeModel | None = None
    external_task: StepOutcomeModel | None = None
    notification: StepOutcomeModel | None = None


class TaskSummary(BaseModel):
    """A task row as listed by the API."""

    id: str
    action_item: str
    department: str
    priority: str
    status: str
    owners: str
    progress: int
    progress_mode: str
