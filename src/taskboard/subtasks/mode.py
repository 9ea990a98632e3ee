"""Per-task Auto/Manual progress mode switching.

Switching modes never touches the stored progress. After a switch to Auto
the progress is recomputed by the next subtask write, not immediately.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import aiosqlite

from ..diagnostics import DiagnosticLog
from ..exceptions import TaskboardError, TaskNotFoundError
from ..locking import DEFAULT_STORE_TIMEOUT
from ..models import ModeResult, ProgressMode
from .row_index import TaskRowIndex

if TYPE_CHECKING:
    from ..database import TaskboardDB


class ProgressModeController:
    """Sets the progress mode of a task under the store lock."""

    def __init__(
        self,
        db: TaskboardDB,
        diagnostics: DiagnosticLog | None = None,
        lock_timeout: float = DEFAULT_STORE_TIMEOUT,
    ) -> None:
        self.db = db
        self.diagnostics = diagnostics or DiagnosticLog(db)
        self.lock_timeout = lock_timeout

    async def set_mode(self, task_key: str, mode: Any) -> ModeResult:
        """Set a task's mode. Anything other than "Manual" means Auto."""
        resolved = ProgressMode.coerce(mode)
        try:
            async with self.db.store_lock.hold(self.lock_timeout, "set_mode"):
                index = await TaskRowIndex.load(self.db)
                row_id = index.require(task_key)
                if not await self.db.set_cells(row_id, {"progress_mode": resolved.value}):
                    raise TaskNotFoundError(task_key)
        except (TaskboardError, aiosqlite.Error) as e:
            await self.diagnostics.log("error", "set_mode", "failed", {"err": str(e)}, task_key)
            return ModeResult(ok=False, error=str(e))

        await self.diagnostics.log("info", "set_mode", f"mode set to {resolved.value}", None, task_key)
        return ModeResult(ok=True, mode=resolved)
