"""Store-wide mutual exclusion with bounded waits.

One StoreLock guards every read-modify-write of a task's subtask, mode and
progress columns. It is global to the store, not per task, so writes to
unrelated tasks serialize too.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from .exceptions import LockTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_STORE_TIMEOUT = 10.0
DEFAULT_LIFECYCLE_TIMEOUT = 20.0


class StoreLock:
    """Named asyncio lock with a bounded acquire.

    Not reentrant: a holder that needs a nested critical section must call
    the already-locked body directly.

    Usage:
        async with db.store_lock.hold(10.0, "write"):
            ...
    """

    def __init__(self, name: str = "store") -> None:
        self.name = name
        self._lock = asyncio.Lock()
        self._holder: str | None = None

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @property
    def holder(self) -> str | None:
        """Operation currently holding the lock, for diagnostics."""
        return self._holder

    @asynccontextmanager
    async def hold(self, timeout: float, operation: str = "") -> AsyncIterator[None]:
        """Acquire the lock for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within timeout seconds.
                Nothing inside the block runs in that case.
        """
        try:
            await asyncio.wait_for(self._lock.acquire(), timeout=timeout)
        except TimeoutError:
            logger.warning(
                "Lock %s not acquired for %s within %.1fs (held by %s)",
                self.name,
                operation or "unknown",
                timeout,
                self._holder,
            )
            raise LockTimeoutError(self.name, timeout) from None

        self._holder = operation or None
        try:
            yield
        finally:
            self._holder = None
            self._lock.release()
