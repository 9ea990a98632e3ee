"""Shared fixtures for database unit tests.

Resets the singleton around each test and points it at an in-memory
database.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest

from taskboard.database.singleton import reset_db, set_db_path


@pytest.fixture(autouse=True)
async def reset_database_singleton() -> AsyncIterator[None]:
    """Reset the database singleton before and after each test."""
    await reset_db()
    set_db_path(":memory:")
    yield
    await reset_db()
