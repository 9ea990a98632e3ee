"""Status-transition collaborator: named actions applied to a task row."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import aiosqlite

from ..exceptions import TaskboardError, TaskNotFoundError
from ..subtasks.row_index import TaskRowIndex
from .projection import sanitize_owners

if TYPE_CHECKING:
    from ..database import TaskboardDB

logger = logging.getLogger(__name__)

START_PROJECT = "START_PROJECT"
FORCE_COMPLETE = "FORCE_COMPLETE"
CANCEL_PROJECT = "CANCEL_PROJECT"
ASSIGN_TEAM = "ASSIGN_TEAM"
SET_DEADLINE = "SET_DEADLINE"
DELETE_PROJECT = "DELETE_PROJECT"

# Actions that only move the status column
STATUS_ACTIONS: dict[str, str] = {
    START_PROJECT: "In Progress",
    FORCE_COMPLETE: "Completed",
    CANCEL_PROJECT: "Cancelled",
}

ACTIONS = frozenset({*STATUS_ACTIONS, ASSIGN_TEAM, SET_DEADLINE, DELETE_PROJECT})


class StatusTransition(Protocol):
    """Applies a lifecycle action to a task and reports the outcome."""

    async def apply_action(
        self, task_key: str, action: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


class TaskActions:
    """Database-backed StatusTransition.

    Results follow the ``{"status": "Success" | "Error", "message": ...}``
    shape. Failures are reported, never raised.
    """

    def __init__(self, db: TaskboardDB) -> None:
        self.db = db

    async def apply_action(
        self, task_key: str, action: str, params: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        params = params or {}
        try:
            await self._apply(task_key, action, params)
        except (TaskboardError, aiosqlite.Error, ValueError) as e:
            logger.error("Action %s on %s failed: %s", action, task_key, e)
            return {"status": "Error", "message": str(e)}
        logger.info("Action %s applied to %s", action, task_key)
        return {"status": "Success", "message": f"Action '{action}' completed."}

    async def _apply(self, task_key: str, action: str, params: dict[str, Any]) -> None:
        if action not in ACTIONS:
            msg = f"Invalid action specified: {action}"
            raise ValueError(msg)

        index = await TaskRowIndex.load(self.db)
        row_id = index.require(task_key)

        if action in STATUS_ACTIONS:
            updated = await self.db.set_cells(row_id, {"status": STATUS_ACTIONS[action]})
        elif action == ASSIGN_TEAM:
            owners = sanitize_owners(params.get("team_members") or [])
            updated = await self.db.set_cells(row_id, {"owners": owners})
        elif action == SET_DEADLINE:
            due = params.get("due_date")
            updated = await self.db.set_cells(row_id, {"due_date": str(due) if due else None})
        else:
            updated = await self.db.delete_task(task_key)

        if not updated:
            raise TaskNotFoundError(task_key)
