"""Server runner module for the Taskboard API.

Provides a run_server utility that configures and starts uvicorn
with appropriate defaults.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import uvicorn

from taskboard.api.app import DB_PATH_ENV_VAR


@contextmanager
def _temporary_env_var(name: str, value: str | None) -> Iterator[None]:
    """Temporarily set an environment variable, restoring original state on exit."""
    if value is None:
        yield
        return
    was_set = name in os.environ
    old_value = os.environ.get(name)
    os.environ[name] = value
    try:
        yield
    finally:
        if was_set and old_value is not None:
            os.environ[name] = old_value
        else:
            os.environ.pop(name, None)


def run_server(
    host: str = "127.0.0.1",
    port: int = 8420,
    log_level: str = "info",
    reload: bool = False,
    db_path: str | None = None,
    **kwargs: Any,
) -> None:
    """Run the Taskboard API server.

    Args:
        host: The host to bind to.
        port: The port to bind to.
        log_level: The log level for uvicorn.
        reload: Whether to enable auto-reload.
        db_path: Database path, exported as TASKBOARD_DB_PATH for the app factory.
        **kwargs: Additional keyword arguments forwarded to uvicorn.run.
    """
    with _temporary_env_var(DB_PATH_ENV_VAR, db_path):
        uvicorn.run(
            "taskboard.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            log_level=log_level,
            reload=reload,
            **kwargs,
        )
