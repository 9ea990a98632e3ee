"""Lock-protected read-modify-write of a task's subtasks and progress.

A write resolves the task row, normalizes the incoming subtasks, and then
persists the subtask JSON, its timestamp and (in Auto mode) the recomputed
progress in one UPDATE. All of that happens while holding the store lock,
so two writers never interleave and subtasks and progress never disagree
after a successful write.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiosqlite

from ..diagnostics import DiagnosticLog
from ..exceptions import TaskboardError, TaskNotFoundError
from ..locking import DEFAULT_STORE_TIMEOUT, StoreLock
from ..models import ProgressMode, ProgressSnapshot, SubtaskWriteResult
from .normalizer import normalize_subtasks, serialize_subtasks
from .progress import calculate_progress
from .row_index import TaskRowIndex

if TYPE_CHECKING:
    from ..database import TaskboardDB

logger = logging.getLogger(__name__)

_SNAPSHOT_COLUMNS = ("subtasks_json", "progress_mode", "progress_percentage")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_stored_progress(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


class SubtaskStore:
    """Reads and writes the subtask/mode/progress columns of task rows."""

    def __init__(
        self,
        db: TaskboardDB,
        diagnostics: DiagnosticLog | None = None,
        lock_timeout: float = DEFAULT_STORE_TIMEOUT,
    ) -> None:
        self.db = db
        self.diagnostics = diagnostics or DiagnosticLog(db)
        self.lock_timeout = lock_timeout

    @property
    def lock(self) -> StoreLock:
        return self.db.store_lock

    async def read(self, task_key: str) -> ProgressSnapshot:
        """Current subtasks, mode and progress of a task.

        Not lock-protected; may observe a snapshot that an in-flight write is
        about to replace. Never raises: a missing task or a storage error
        yields the empty snapshot.
        """
        try:
            index = await TaskRowIndex.load(self.db)
            row_id = index.resolve(task_key)
            if row_id is None:
                return ProgressSnapshot.empty()
            cells = await self.db.get_cells(row_id, _SNAPSHOT_COLUMNS)
            if cells is None:
                return ProgressSnapshot.empty()
            return ProgressSnapshot(
                subtasks=normalize_subtasks(cells["subtasks_json"]),
                mode=ProgressMode.coerce(cells["progress_mode"]),
                progress=_parse_stored_progress(cells["progress_percentage"]),
            )
        except Exception as e:
            await self.diagnostics.log("error", "read", "failed", {"err": str(e)}, task_key)
            return ProgressSnapshot.empty()

    async def write(self, task_key: str, subtasks: Any) -> SubtaskWriteResult:
        """Replace a task's subtasks, recomputing progress in Auto mode.

        Args:
            task_key: Task to update.
            subtasks: Anything normalize_subtasks() accepts.

        Returns:
            ok with the new progress (Auto) or without it (Manual); on lock
            timeout, missing task, storage error or any unexpected error, a
            failure with the message.
            Nothing is persisted on failure.
        """
        try:
            async with self.lock.hold(self.lock_timeout, "write"):
                return await self._write_locked(task_key, subtasks)
        except (TaskboardError, aiosqlite.Error) as e:
            await self.diagnostics.log("error", "write", "failed", {"err": str(e)}, task_key)
            return SubtaskWriteResult.failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error writing subtasks for %s", task_key)
            await self.diagnostics.log("error", "write", "failed", {"err": str(e)}, task_key)
            return SubtaskWriteResult.failure(f"Unexpected error: {e}")

    async def _write_locked(self, task_key: str, subtasks: Any) -> SubtaskWriteResult:
        """Body of write(); the caller must hold the store lock.

        Raises:
            TaskNotFoundError: If the task is missing or vanished mid-write.
            aiosqlite.Error: On storage failure.
        """
        index = await TaskRowIndex.load(self.db)
        row_id = index.require(task_key)
        items = normalize_subtasks(subtasks)

        cells = await self.db.get_cells(row_id, ("progress_mode",))
        if cells is None:
            raise TaskNotFoundError(task_key)
        mode = ProgressMode.coerce(cells["progress_mode"])

        values: dict[str, Any] = {
            "subtasks_json": serialize_subtasks(items),
            "subtasks_last_updated": datetime.now(UTC).isoformat(),
        }
        progress: int | None = None
        if mode is ProgressMode.AUTO:
            progress = calculate_progress(items)
            values["progress_percentage"] = progress

        if not await self.db.set_cells(row_id, values):
            raise TaskNotFoundError(task_key)

        await self.diagnostics.log(
            "info", "write", "updated", {"count": len(items), "mode": mode.value}, task_key
        )
        return SubtaskWriteResult(ok=True, progress=progress)
