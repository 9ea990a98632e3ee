"""Async SQLite persistence for tasks, subtasks, and diagnostics.

All operations are async using aiosqlite for non-blocking I/O.
"""

from __future__ import annotations

from .connection import DEFAULT_DB_PATH, SCHEMA_PATH
from .core import TaskboardDB
from .singleton import get_db, reset_db, set_db_path
from .tasks import TASK_COLUMNS, VALID_STATUSES

__all__ = [
    "DEFAULT_DB_PATH",
    "SCHEMA_PATH",
    "TASK_COLUMNS",
    "TaskboardDB",
    "VALID_STATUSES",
    "get_db",
    "reset_db",
    "set_db_path",
]
