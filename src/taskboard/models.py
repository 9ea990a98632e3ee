"""Domain models for subtask progress and the task-start workflow.

Subtasks are weighted checklist items stored as JSON on a task row. The
progress of a task is either derived from its subtasks (Auto mode) or set by
hand (Manual mode). Starting a task produces a StartTaskResult that carries
one outcome per downstream call.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

MAX_TITLE_LENGTH = 200
MIN_WEIGHT = 1
MAX_WEIGHT = 100


class ProgressMode(str, Enum):
    """How a task's completion percentage is maintained.

    - AUTO: recomputed from the weighted subtasks on every subtask write
    - MANUAL: set directly by a caller, never touched by subtask writes
    """

    AUTO = "Auto"
    MANUAL = "Manual"

    @classmethod
    def coerce(cls, value: Any) -> ProgressMode:
        """Map any input to a mode; only the literal "Manual" selects MANUAL."""
        if value is cls.MANUAL or value == cls.MANUAL.value:
            return cls.MANUAL
        return cls.AUTO


class LifecycleStatus(str, Enum):
    """Overall outcome of a lifecycle workflow invocation."""

    SUCCESS = "Success"
    ERROR = "Error"


@dataclass(frozen=True)
class Subtask:
    """A weighted, completable checklist item belonging to a task.

    Attributes:
        id: Identifier, unique within the task by convention only.
        title: Display title, at most 200 characters.
        done: Completion flag.
        weight: Relative weight in [1, 100].
    """

    id: str
    title: str
    done: bool
    weight: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ProgressSnapshot:
    """Subtasks, mode and stored progress of one task."""

    subtasks: list[Subtask] = field(default_factory=list)
    mode: ProgressMode = ProgressMode.AUTO
    progress: int = 0

    @classmethod
    def empty(cls) -> ProgressSnapshot:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtasks": [s.to_dict() for s in self.subtasks],
            "mode": self.mode.value,
            "progress": self.progress,
        }


@dataclass
class SubtaskWriteResult:
    """Result of a subtask write.

    Attributes:
        ok: Whether the write was persisted.
        progress: Recomputed progress in Auto mode, None in Manual mode or on failure.
        error: Human-readable failure message.
        subtask_id: Id assigned by an add operation.
    """

    ok: bool
    progress: int | None = None
    error: str | None = None
    subtask_id: str | None = None

    @classmethod
    def failure(cls, error: str) -> SubtaskWriteResult:
        return cls(ok=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if self.progress is not None:
            data["progress"] = self.progress
        if self.error is not None:
            data["error"] = self.error
        if self.subtask_id is not None:
            data["id"] = self.subtask_id
        return data


@dataclass
class ModeResult:
    """Result of switching a task's progress mode."""

    ok: bool
    mode: ProgressMode | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if self.mode is not None:
            data["mode"] = self.mode.value
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class TaskProjection:
    """Normalized view of a task handed to the notification collaborators."""

    id: str
    action_item: str
    department: str
    priority: str
    status: str
    owners: str
    progress: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StepOutcome:
    """Outcome of one downstream call made by the lifecycle workflow.

    Attributes:
        name: Step name (status_transition, calendar, external_task, notification).
        success: Whether the collaborator reported success.
        authoritative: True for the source-of-truth step, False for advisory ones.
        detail: Raw payload returned by the collaborator.
        error: Failure message, if any.
    """

    name: str
    success: bool
    authoritative: bool = False
    detail: dict[str, Any] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StartTaskResult:
    """Aggregate result of the task-start workflow. Never persisted."""

    status: LifecycleStatus
    message: str | None = None
    status_transition: StepOutcome | None = None
    calendar: StepOutcome | None = None
    external_task: StepOutcome | None = None
    notification: StepOutcome | None = None

    @property
    def outcomes(self) -> list[StepOutcome]:
        steps = (self.status_transition, self.calendar, self.external_task, self.notification)
        return [s for s in steps if s is not None]

    @property
    def advisory_failures(self) -> list[str]:
        """Names of advisory steps that ran and failed."""
        return [s.name for s in self.outcomes if not s.authoritative and not s.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "status_transition": self.status_transition.to_dict() if self.status_transition else None,
            "calendar": self.calendar.to_dict() if self.calendar else None,
            "external_task": self.external_task.to_dict() if self.external_task else None,
            "notification": self.notification.to_dict() if self.notification else None,
        }
