"""Task-start workflow: an authoritative status change plus advisory fan-out.

The status transition is the source of truth. Calendar, tracker and
notification calls follow it and are recorded one outcome per step; none of
them rolls back the status change.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..diagnostics import DiagnosticLog
from ..exceptions import LockTimeoutError
from ..locking import DEFAULT_LIFECYCLE_TIMEOUT
from ..models import LifecycleStatus, StartTaskResult, StepOutcome, TaskProjection
from ..subtasks.row_index import TaskRowIndex
from .actions import START_PROJECT, STATUS_ACTIONS, StatusTransition, TaskActions
from .notifiers import CalendarNotifier, EmailNotifier, TaskNotifier, TaskTrackerNotifier
from .projection import build_projection

if TYPE_CHECKING:
    from ..database import TaskboardDB

logger = logging.getLogger(__name__)


def _outcome(name: str, payload: Any, *, authoritative: bool = False) -> StepOutcome:
    detail = dict(payload) if isinstance(payload, dict) else {"result": payload}
    success = bool(detail.get("success")) or detail.get("status") == "Success"
    error = None
    if not success:
        error = str(detail.get("error") or detail.get("message") or "Step reported failure")
    return StepOutcome(
        name=name, success=success, authoritative=authoritative, detail=detail, error=error
    )


class TaskLifecycle:
    """Runs lifecycle workflows against the task store.

    Collaborators default to the database-backed status transition and
    webhook notifiers without a URL (log only).
    """

    def __init__(
        self,
        db: TaskboardDB,
        status_transition: StatusTransition | None = None,
        calendar: TaskNotifier | None = None,
        tracker: TaskNotifier | None = None,
        notifier: TaskNotifier | None = None,
        diagnostics: DiagnosticLog | None = None,
        lock_timeout: float = DEFAULT_LIFECYCLE_TIMEOUT,
    ) -> None:
        self.db = db
        self.status_transition = status_transition or TaskActions(db)
        self.calendar = calendar or CalendarNotifier()
        self.tracker = tracker or TaskTrackerNotifier()
        self.notifier = notifier or EmailNotifier()
        self.diagnostics = diagnostics or DiagnosticLog(db)
        self.lock_timeout = lock_timeout

    async def start_task(self, task_key: str) -> StartTaskResult:
        """Move a task to In Progress and notify calendar, tracker and owners.

        Returns:
            ERROR if the lock could not be acquired, the task does not exist,
            or a step raised unexpectedly; SUCCESS otherwise, including when
            advisory steps failed. Each step that ran has its own outcome.
        """
        result = StartTaskResult(status=LifecycleStatus.SUCCESS)
        try:
            async with self.db.store_lock.hold(self.lock_timeout, "start_task"):
                await self._start_locked(task_key, result)
        except LockTimeoutError as e:
            await self.diagnostics.log("error", "start_task", "lock timeout", {"err": str(e)}, task_key)
            result.status = LifecycleStatus.ERROR
            result.message = str(e)
        except Exception as e:
            logger.exception("start_task failed for %s", task_key)
            await self.diagnostics.log("error", "start_task", "failed", {"err": str(e)}, task_key)
            result.status = LifecycleStatus.ERROR
            result.message = str(e)
        return result

    async def _start_locked(self, task_key: str, result: StartTaskResult) -> None:
        index = await TaskRowIndex.load(self.db)
        row_id = index.resolve(task_key)
        task = await self.db.get_task_by_row(row_id) if row_id is not None else None
        if task is None:
            result.status = LifecycleStatus.ERROR
            result.message = f"Task not found: {task_key}"
            await self.diagnostics.log("warn", "start_task", "task not found", task_key=task_key)
            return

        transition = await self.status_transition.apply_action(task_key, START_PROJECT)
        result.status_transition = _outcome("status_transition", transition, authoritative=True)

        projection = build_projection(task, status=STATUS_ACTIONS[START_PROJECT])
        result.calendar = _outcome("calendar", await self.calendar(projection))
        result.external_task = _outcome("external_task", await self.tracker(projection))
        result.notification = await self._notify(projection)

        result.message = f"Task {task_key} started."
        if result.advisory_failures:
            await self.diagnostics.log(
                "warn",
                "start_task",
                "advisory steps failed",
                {"steps": result.advisory_failures},
                task_key,
            )
        else:
            await self.diagnostics.log("info", "start_task", "completed", task_key=task_key)

    async def _notify(self, projection: TaskProjection) -> StepOutcome:
        try:
            payload = await self.notifier(projection)
        except Exception as e:
            logger.warning("Notification for %s failed: %s", projection.id, e)
            return StepOutcome(name="notification", success=False, error=str(e))
        return _outcome("notification", payload)
