"""Shared fixtures for API unit tests.

Routes are exercised through TestClient with the services dependency
overridden by mocks, so no database is opened.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI

from taskboard.api.dependencies import get_services_dep
from taskboard.api.middleware import register_error_handlers
from taskboard.api.routes import register_routes


@pytest.fixture
def mock_services() -> MagicMock:
    """Services bundle whose collaborators are async mocks."""
    services = MagicMock()
    services.store = MagicMock()
    services.store.read = AsyncMock()
    services.store.write = AsyncMock()
    services.modes.set_mode = AsyncMock()
    services.generator.generate_from_plan = AsyncMock()
    services.lifecycle.start_task = AsyncMock()
    services.db.get_all_tasks = AsyncMock(return_value=[])
    services.db.get_task_by_key = AsyncMock(return_value=None)
    return services


@pytest.fixture
def app(mock_services: MagicMock) -> FastAPI:
    """App with all routes and error handlers, and mocked services."""
    app = FastAPI()
    register_error_handlers(app)
    register_routes(app)
    app.dependency_overrides[get_services_dep] = lambda: mock_services
    return app
