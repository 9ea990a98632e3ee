"""Exception hierarchy for taskboard operations.

Store-touching operations catch these at their boundary and turn them into
result objects; they only escape to callers of the lower-level helpers.
"""

from __future__ import annotations


class TaskboardError(Exception):
    """Base exception for all taskboard errors."""

    pass


class TaskNotFoundError(TaskboardError, LookupError):
    """Raised when a task key is absent from the row index."""

    def __init__(self, task_key: str) -> None:
        self.task_key = task_key
        super().__init__(f"Task not found: {task_key}")


class LockTimeoutError(TaskboardError):
    """Raised when the store lock cannot be acquired within its bounded wait."""

    def __init__(self, name: str, timeout: float) -> None:
        self.name = name
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:.1f}s waiting for lock '{name}'")


class CollaboratorError(TaskboardError):
    """Raised when a downstream collaborator (plan provider, notifier) fails."""

    def __init__(self, collaborator: str, message: str) -> None:
        self.collaborator = collaborator
        self.message = message
        super().__init__(f"{collaborator}: {message}")
