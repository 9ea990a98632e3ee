"""API request models with Pydantic validation.

Subtask fields are deliberately loose: the subtask normalizer canonicalizes
ids, titles and weights, so the models only pin down the request shape.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class SubtasksReplaceRequest(BaseModel):
    """Request model for replacing a task's subtasks."""

    model_config = {"extra": "forbid"}

    subtasks: list[Any] = Field(default_factory=list)


class SubtaskAddRequest(BaseModel):
    """Request model for appending a subtask."""

    model_config = {"extra": "forbid"}

    title: str
    weight: int | str = 1

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not empty or whitespace."""
        if not v or not v.strip():
            raise ValueError("title must not be empty or whitespace")
        return v


class SubtaskToggleRequest(BaseModel):
    """Request model for setting a subtask's done flag."""

    model_config = {"extra": "forbid"}

    done: bool


class ProgressModeRequest(BaseModel):
    """Request model for switching progress mode. Anything but "Manual" means Auto."""

    model_config = {"extra": "forbid"}

    mode: str
