"""Diagnostic sink for store and lifecycle operations.

Every entry goes to the module logger. Entries are also persisted to the
``logs`` table: error and warn always, info and debug only in the dev
environment. Logging is fire-and-forget and never raises into the caller.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .database import TaskboardDB

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_ALWAYS_PERSIST = frozenset({"warn", "error"})


class DiagnosticLog:
    """Writes diagnostics to the logger and, by level and env, to the store."""

    def __init__(self, db: TaskboardDB | None = None, env: str = "prod") -> None:
        self._db = db
        self.env = "dev" if env == "dev" else "prod"

    def should_persist(self, level: str) -> bool:
        return level in _ALWAYS_PERSIST or self.env == "dev"

    async def log(
        self,
        level: str,
        operation: str,
        message: str,
        context: dict[str, Any] | None = None,
        task_key: str | None = None,
    ) -> None:
        """Record one diagnostic entry.

        Args:
            level: debug, info, warn or error.
            operation: Name of the operation reporting (e.g. "write").
            message: Short message.
            context: Extra JSON-serializable details.
            task_key: Task the entry concerns, if any.
        """
        level = (level or "info").lower()
        if level == "warning":
            level = "warn"
        py_level = _LEVELS.get(level, logging.INFO)
        logger.log(
            py_level,
            "[%s] %s%s %s",
            level.upper(),
            operation,
            f" ({task_key})" if task_key else "",
            message,
        )

        if self._db is None or not self.should_persist(level):
            return

        try:
            await self._db.insert_log(
                timestamp=datetime.now(UTC).isoformat(),
                level=level,
                operation=operation,
                message=message or "",
                task_key=task_key,
                context_json=json.dumps(context, default=str) if context else None,
                request_id=uuid.uuid4().hex[:8],
            )
        except Exception as e:
            logger.debug("Diagnostic persist failed for %s: %s", operation, e)

    async def recent(self, limit: int = 50, task_key: str | None = None) -> list[dict[str, Any]]:
        """Return persisted entries, newest first."""
        if self._db is None:
            return []
        return await self._db.get_logs(task_key=task_key, limit=limit)
