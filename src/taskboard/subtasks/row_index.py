"""Task key to row id resolution.

The index is loaded from the table at the start of every store operation
and thrown away afterwards. Rows can be inserted or deleted by unrelated
operations between calls, so a cached index could point a write at the
wrong row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..exceptions import TaskNotFoundError

if TYPE_CHECKING:
    from ..database import TaskboardDB


@dataclass(frozen=True)
class TaskRowIndex:
    """Snapshot of task_key -> row id taken at one point in time."""

    rows: dict[str, int]

    @classmethod
    async def load(cls, db: TaskboardDB) -> TaskRowIndex:
        return cls(rows=await db.get_row_index())

    def __contains__(self, task_key: object) -> bool:
        return str(task_key) in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def resolve(self, task_key: str) -> int | None:
        """Row id for a task, or None when the task does not exist."""
        return self.rows.get(str(task_key))

    def require(self, task_key: str) -> int:
        """Row id for a task.

        Raises:
            TaskNotFoundError: If the task is not in the index.
        """
        row_id = self.resolve(task_key)
        if row_id is None:
            raise TaskNotFoundError(str(task_key))
        return row_id
