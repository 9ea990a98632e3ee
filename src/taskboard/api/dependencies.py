"""Dependency initialization and management for API singletons.

One TaskboardDB and one Services bundle live for the application's lifespan,
so every request shares the same store lock.
"""

from __future__ import annotations

from taskboard.database import TaskboardDB
from taskboard.project_config import ProjectConfig
from taskboard.services import Services, build_services

# Module-level singletons
_db: TaskboardDB | None = None
_services: Services | None = None


def get_db_dep() -> TaskboardDB:
    """Get the TaskboardDB singleton.

    Raises:
        RuntimeError: If dependencies are not initialized.
    """
    if _db is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _db


def get_services_dep() -> Services:
    """Get the Services singleton.

    Raises:
        RuntimeError: If dependencies are not initialized.
    """
    if _services is None:
        raise RuntimeError("Dependencies not initialized. Call init_dependencies() first.")
    return _services


async def init_dependencies(db_path: str, config: ProjectConfig | None = None) -> None:
    """Open the database and build the shared services.

    Idempotent: a second call keeps the existing singletons.

    Raises:
        ValueError: If db_path is empty.
        OSError: If the database file cannot be opened.
    """
    global _db, _services

    if _db is not None and _services is not None:
        return

    if not db_path:
        raise ValueError("db_path cannot be empty")

    db = TaskboardDB(db_path=db_path)
    try:
        await db.connect()
    except Exception as e:
        if "unable to open database" in str(e).lower():
            raise OSError(f"Unable to open database at {db_path}") from e
        raise

    _db = db
    _services = build_services(db, config)


async def shutdown_dependencies() -> None:
    """Close the database and reset the singletons. Safe to call repeatedly."""
    global _db, _services

    if _db is not None:
        await _db.close()
    _db = None
    _services = None
