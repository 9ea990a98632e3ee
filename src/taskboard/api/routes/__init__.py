"""Route registration for the FastAPI app.

Wires the health, tasks and subtasks route modules to the app.
"""

from __future__ import annotations

from fastapi import FastAPI

from taskboard.api.routes import health, subtasks, tasks


def register_routes(app: FastAPI) -> None:
    """Register all route modules to the FastAPI app.

    Idempotent: calling it again on the same app does not duplicate routes.
    """
    if getattr(app, "_routes_registered", False):
        return

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(subtasks.router, prefix="/tasks", tags=["subtasks"])
    app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])

    app._routes_registered = True  # type: ignore[attr-defined]
