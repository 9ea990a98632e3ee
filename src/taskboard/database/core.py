"""Composed TaskboardDB class.

Combines all mixin classes into the final TaskboardDB that provides
the complete database API.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .connection import ConnectionMixin
from .logs import LogsMixin
from .tasks import TaskMixin


class TaskboardDB(ConnectionMixin, TaskMixin, LogsMixin):
    """Async SQLite store for tasks, their subtasks, and diagnostics.

    Usage:
        async with TaskboardDB("taskboard.db") as db:
            index = await db.get_row_index()
            cells = await db.get_cells(index["OPS-1"], ["subtasks_json"])
    """

    def __init__(self, db_path: str | Path | None = None) -> None:
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for testing.
                     Defaults to taskboard.db in the current working directory.
        """
        super().__init__(db_path)

    async def __aenter__(self) -> TaskboardDB:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Async context manager exit."""
        await self.close()
