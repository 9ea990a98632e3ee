"""Task row queries, cell access, and status mutations.

Provides the TaskMixin with all task-related database methods. Rows are
addressed by their integer row id (the handle returned by the row index);
tasks are looked up by their unique task_key.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from typing import Any

import aiosqlite

logger = logging.getLogger(__name__)

VALID_STATUSES = frozenset({"Not Started", "In Progress", "Completed", "Cancelled"})

# Columns addressable through get_cells/set_cells. Column names are
# interpolated into SQL, so only these are accepted.
TASK_COLUMNS = frozenset(
    {
        "task_key",
        "action_item",
        "department",
        "priority_score",
        "owners",
        "due_date",
        "status",
        "progress_percentage",
        "progress_mode",
        "subtasks_json",
        "subtasks_last_updated",
        "plan_json",
        "plan_last_updated",
        "created_at",
    }
)


def _check_columns(columns: Iterable[str]) -> list[str]:
    names = list(columns)
    unknown = [c for c in names if c not in TASK_COLUMNS]
    if unknown:
        msg = f"Unknown task column(s): {', '.join(sorted(unknown))}"
        raise ValueError(msg)
    return names


class TaskMixin:
    """Mixin providing task CRUD, the row index, and cell-level access."""

    _conn: aiosqlite.Connection | None
    _write_lock: asyncio.Lock

    async def _ensure_connected(self) -> None: ...

    # =========================================================================
    # Task Queries
    # =========================================================================

    async def get_task_by_key(self, task_key: str) -> dict[str, Any] | None:
        """Get a task by its unique key.

        Args:
            task_key: The task identifier (e.g., "OPS-12").

        Returns:
            Task dict with all columns, or None if not found.
        """
        await self._ensure_connected()
        if not self._conn:
            return None

        async with self._conn.execute(
            "SELECT * FROM tasks WHERE task_key = ?", (task_key,)
        ) as cursor:
            row = await cursor.fetchone()
            if row:
                return dict(row)
        return None

    async def get_task_by_row(self, row_id: int) -> dict[str, Any] | None:
        """Get a task by its row id."""
        await self._ensure_connected()
        if not self._conn:
            return None

        async with self._conn.execute("SELECT * FROM tasks WHERE id = ?", (row_id,)) as cursor:
            row = await cursor.fetchone()
            if row:
                return dict(row)
        return None

    async def get_all_tasks(self) -> list[dict[str, Any]]:
        """Get all tasks in row order.

        Returns:
            List of task dicts.
        """
        await self._ensure_connected()
        if not self._conn:
            return []

        async with self._conn.execute("SELECT * FROM tasks ORDER BY id") as cursor:
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_row_index(self) -> dict[str, int]:
        """Read the current task_key -> row id mapping from the table.

        Always reads fresh; callers must not hold on to the result across
        operations because rows can be inserted or deleted in between.
        """
        await self._ensure_connected()
        if not self._conn:
            return {}

        async with self._conn.execute("SELECT id, task_key FROM tasks") as cursor:
            rows = await cursor.fetchall()
            return {str(row["task_key"]): int(row["id"]) for row in rows if row["task_key"]}

    # =========================================================================
    # Cell Access
    # =========================================================================

    async def get_cells(self, row_id: int, columns: Iterable[str]) -> dict[str, Any] | None:
        """Read selected columns of one row.

        Args:
            row_id: Row handle from the row index.
            columns: Column names to read.

        Returns:
            Mapping of column -> value, or None if the row no longer exists.

        Raises:
            ValueError: If a column name is not a task column.
        """
        names = _check_columns(columns)
        await self._ensure_connected()
        if not self._conn or not names:
            return None

        query = f"SELECT {', '.join(names)} FROM tasks WHERE id = ?"
        async with self._conn.execute(query, (row_id,)) as cursor:
            row = await cursor.fetchone()
            if row is None:
                return None
            return {name: row[name] for name in names}

    async def set_cells(self, row_id: int, values: Mapping[str, Any]) -> bool:
        """Write several columns of one row in a single statement.

        All columns are committed together or not at all.

        Args:
            row_id: Row handle from the row index.
            values: Column -> new value.

        Returns:
            True if the row was updated, False if it no longer exists.

        Raises:
            ValueError: If a column name is not a task column.
            aiosqlite.Error: On storage failure (the transaction is rolled back).
        """
        names = _check_columns(values.keys())
        if not names:
            return False
        await self._ensure_connected()
        if not self._conn:
            return False

        assignments = ", ".join(f"{name} = ?" for name in names)
        params = [values[name] for name in names]
        params.append(row_id)
        async with self._write_lock:
            try:
                cursor = await self._conn.execute(
                    f"UPDATE tasks SET {assignments} WHERE id = ?", params
                )
                await self._conn.commit()
            except aiosqlite.Error:
                await self._conn.rollback()
                raise
            return cursor.rowcount > 0

    # =========================================================================
    # Task Mutations
    # =========================================================================

    async def create_task(
        self,
        task_key: str,
        action_item: str,
        *,
        department: str = "",
        priority_score: str | int = "",
        owners: str = "",
        status: str = "Not Started",
        progress_percentage: int = 0,
        progress_mode: str = "Auto",
    ) -> int:
        """Append a new task row.

        Args:
            task_key: Unique task identifier.
            action_item: Human-readable task title.
            department: Owning department.
            priority_score: Priority as displayed.
            owners: Comma-separated owner names.
            status: Initial status.
            progress_percentage: Initial progress.
            progress_mode: "Auto" or "Manual".

        Returns:
            The new row id.

        Raises:
            ValueError: If status is invalid.
        """
        if status not in VALID_STATUSES:
            msg = f"Invalid status: {status}. Must be one of {sorted(VALID_STATUSES)}"
            raise ValueError(msg)

        await self._ensure_connected()
        if not self._conn:
            return 0

        async with self._write_lock:
            cursor = await self._conn.execute(
                """
                INSERT INTO tasks (
                    task_key, action_item, department, priority_score, owners,
                    status, progress_percentage, progress_mode
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task_key,
                    action_item,
                    department,
                    str(priority_score),
                    owners,
                    status,
                    progress_percentage,
                    progress_mode,
                ),
            )
            await self._conn.commit()
            logger.info("Created task %s", task_key)
            return cursor.lastrowid or 0

    async def delete_task(self, task_key: str) -> bool:
        """Delete a task row. Row ids are never reused afterwards."""
        await self._ensure_connected()
        if not self._conn:
            return False

        async with self._write_lock:
            cursor = await self._conn.execute("DELETE FROM tasks WHERE task_key = ?", (task_key,))
            await self._conn.commit()
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("Task %s deleted", task_key)
            return deleted
