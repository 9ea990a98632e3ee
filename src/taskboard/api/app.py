"""FastAPI application factory with lifespan dependency management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from taskboard.api import dependencies
from taskboard.api.middleware import configure_cors, register_error_handlers
from taskboard.api.routes import register_routes
from taskboard.database import DEFAULT_DB_PATH
from taskboard.project_config import ProjectConfig, find_project_root, load_project_config

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "TASKBOARD_DB_PATH"


def _resolve_settings() -> tuple[str, ProjectConfig | None]:
    """Database path and project config for the server.

    TASKBOARD_DB_PATH wins; otherwise the nearest .taskboard/ project is
    used, and failing that taskboard.db in the working directory. Project
    config is applied whenever a project is found.
    """
    config: ProjectConfig | None = None
    project_root = find_project_root()
    if project_root is not None:
        try:
            config = load_project_config(project_root)
        except (FileNotFoundError, ValueError) as e:
            logger.warning("Ignoring project config at %s: %s", project_root, e)

    env_path = os.environ.get(DB_PATH_ENV_VAR)
    if env_path:
        return env_path, config
    if project_root is not None and config is not None:
        return str(config.resolve_db_path(project_root)), config
    return str(Path(DEFAULT_DB_PATH)), config


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Open the database on startup and close it on shutdown."""
    db_path, config = _resolve_settings()
    await dependencies.init_dependencies(db_path, config)
    logger.info("Taskboard API using database %s", db_path)
    try:
        yield
    finally:
        await dependencies.shutdown_dependencies()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Taskboard",
        version="1.0.0",
        docs_url="/docs",
        lifespan=lifespan,
    )

    configure_cors(app)
    register_error_handlers(app)
    register_routes(app)

    return app
