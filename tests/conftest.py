"""Root conftest.py for pytest configuration.

Provides --run-slow flag to opt in to slow tests (skipped by default) and
in-memory database fixtures shared by unit and integration tests.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from taskboard.database import TaskboardDB


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="Run tests marked @pytest.mark.slow"
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="needs --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
async def db() -> AsyncIterator[TaskboardDB]:
    """Connected in-memory database with the schema applied."""
    async with TaskboardDB(":memory:") as conn:
        yield conn


@pytest.fixture
async def seeded_db(db: TaskboardDB) -> TaskboardDB:
    """In-memory database holding OPS-1 (Auto) and OPS-2 (Manual, 40%)."""
    await db.create_task(
        "OPS-1",
        "Migrate billing service",
        department="Platform",
        priority_score=3,
        owners="Ada Lovelace, Grace Hopper",
    )
    await db.create_task(
        "OPS-2",
        "Quarterly access review",
        department="Security",
        progress_percentage=40,
        progress_mode="Manual",
    )
    return db
