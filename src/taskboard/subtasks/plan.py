"""Generate a task's subtasks from its implementation plan.

A plan is either a list of steps or an object whose ``implementationPlan``
holds that list. Each step is usually a one-entry mapping of step title to
description, e.g. ``{"Define requirements": "Collect input from ops"}``.
Generation replaces the task's subtasks with one unweighted, open subtask
per step.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

import aiosqlite

from ..exceptions import CollaboratorError, TaskboardError, TaskNotFoundError
from ..models import SubtaskWriteResult
from .row_index import TaskRowIndex
from .store import SubtaskStore

if TYPE_CHECKING:
    from ..database import TaskboardDB

logger = logging.getLogger(__name__)

PLAN_STEPS_KEY = "implementationPlan"


class PlanProvider(Protocol):
    """Supplies the ordered implementation plan of a task."""

    async def get_or_build_plan(self, task_key: str) -> list[Any]: ...


class PlanBuilder(Protocol):
    """Builds a fresh plan for a task row (e.g. by asking an LLM)."""

    async def build_plan(self, task: dict[str, Any]) -> Any: ...


def plan_steps(plan: Any) -> list[Any]:
    """Extract the ordered steps from a stored or built plan."""
    if isinstance(plan, list):
        return plan
    if isinstance(plan, Mapping):
        steps = plan.get(PLAN_STEPS_KEY)
        if isinstance(steps, list):
            return steps
    return []


def step_title(step: Any, position: int) -> str:
    """Title of a plan step: the first attribute name of a mapping step."""
    if isinstance(step, Mapping):
        for key in step:
            if key:
                return str(key)
    elif isinstance(step, str) and step.strip():
        return step.strip()
    return f"Step {position + 1}"


def subtasks_from_plan(task_key: str, steps: list[Any]) -> list[dict[str, Any]]:
    return [
        {"id": f"{task_key}-{i + 1}", "title": step_title(step, i), "done": False, "weight": 1}
        for i, step in enumerate(steps)
    ]


def _decode_plan(raw: Any) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, TypeError):
        return None


class StoredPlanProvider:
    """Plan provider backed by the task's cached plan column.

    A cached plan is returned as-is. Without one, the configured builder
    produces a plan, which is cached before being returned.
    """

    def __init__(self, db: TaskboardDB, builder: PlanBuilder | None = None) -> None:
        self.db = db
        self.builder = builder

    async def get_or_build_plan(self, task_key: str) -> list[Any]:
        """Steps of the task's plan.

        Raises:
            TaskNotFoundError: If the task does not exist.
            CollaboratorError: If no plan is cached and none can be built.
        """
        index = await TaskRowIndex.load(self.db)
        row_id = index.require(task_key)
        cells = await self.db.get_cells(row_id, ("plan_json",))
        cached = _decode_plan(cells["plan_json"]) if cells else None
        if cached is not None:
            return plan_steps(cached)

        if self.builder is None:
            raise CollaboratorError("plan_provider", f"No plan stored for task {task_key}")

        task = await self.db.get_task_by_row(row_id) or {"task_key": task_key}
        try:
            plan = await self.builder.build_plan(task)
        except Exception as e:
            raise CollaboratorError("plan_builder", str(e)) from e
        if not plan or (isinstance(plan, Mapping) and plan.get("error")):
            raise CollaboratorError("plan_builder", f"Plan generation failed for task {task_key}")

        await self._store(row_id, task_key, plan)
        return plan_steps(plan)

    async def save_plan(self, task_key: str, plan: Any) -> None:
        """Cache a plan for a task, replacing any previous one.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        index = await TaskRowIndex.load(self.db)
        await self._store(index.require(task_key), task_key, plan)

    async def _store(self, row_id: int, task_key: str, plan: Any) -> None:
        stored = await self.db.set_cells(
            row_id,
            {
                "plan_json": json.dumps(plan, ensure_ascii=False),
                "plan_last_updated": datetime.now(UTC).isoformat(),
            },
        )
        if not stored:
            raise TaskNotFoundError(task_key)
        logger.info("Stored plan for %s (%d steps)", task_key, len(plan_steps(plan)))


class PlanSubtaskGenerator:
    """Replaces a task's subtasks with one subtask per plan step."""

    def __init__(
        self,
        store: SubtaskStore,
        provider: PlanProvider,
        lock_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.provider = provider
        self.lock_timeout = store.lock_timeout if lock_timeout is None else lock_timeout

    async def generate_from_plan(self, task_key: str) -> SubtaskWriteResult:
        """Fetch the plan and write its steps as the task's subtasks.

        The plan fetch and the write share one hold of the store lock. Any
        prior subtasks are discarded.
        """
        try:
            async with self.store.lock.hold(self.lock_timeout, "generate_from_plan"):
                steps = await self._fetch_steps(task_key)
                items = subtasks_from_plan(task_key, steps)
                return await self.store._write_locked(task_key, items)
        except (TaskboardError, aiosqlite.Error) as e:
            await self.store.diagnostics.log(
                "error", "generate_from_plan", "failed", {"err": str(e)}, task_key
            )
            return SubtaskWriteResult.failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error generating subtasks for %s", task_key)
            await self.store.diagnostics.log(
                "error", "generate_from_plan", "failed", {"err": str(e)}, task_key
            )
            return SubtaskWriteResult.failure(f"Unexpected error: {e}")

    async def _fetch_steps(self, task_key: str) -> list[Any]:
        try:
            return plan_steps(await self.provider.get_or_build_plan(task_key))
        except TaskboardError:
            raise
        except Exception as e:
            raise CollaboratorError("plan_provider", str(e)) from e
