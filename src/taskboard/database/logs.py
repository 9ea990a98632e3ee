"""Persisted diagnostic log rows.

Provides the LogsMixin used by the diagnostic sink.
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiosqlite


class LogsMixin:
    """Mixin providing insert and read access to the logs table."""

    _conn: aiosqlite.Connection | None
    _write_lock: asyncio.Lock

    async def _ensure_connected(self) -> None: ...

    async def insert_log(
        self,
        *,
        timestamp: str,
        level: str,
        operation: str,
        message: str,
        task_key: str | None = None,
        context_json: str | None = None,
        request_id: str | None = None,
    ) -> int:
        """Append one diagnostic row.

        Returns:
            The new row id.
        """
        await self._ensure_connected()
        if not self._conn:
            return 0

        async with self._write_lock:
            cursor = await self._conn.execute(
                """
                INSERT INTO logs (
                    timestamp, level, operation, task_key, message, context_json, request_id
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (timestamp, level, operation, task_key, message, context_json, request_id),
            )
            await self._conn.commit()
            return cursor.lastrowid or 0

    async def get_logs(
        self,
        *,
        task_key: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Read the most recent diagnostic rows, newest first.

        Args:
            task_key: Only rows for this task when given.
            limit: Maximum number of rows.
        """
        await self._ensure_connected()
        if not self._conn:
            return []

        if task_key is not None:
            query = "SELECT * FROM logs WHERE task_key = ? ORDER BY id DESC LIMIT ?"
            params: tuple[Any, ...] = (task_key, limit)
        else:
            query = "SELECT * FROM logs ORDER BY id DESC LIMIT ?"
            params = (limit,)

        async with self._conn.execute(query, params) as cursor:
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]
