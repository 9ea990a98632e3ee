"""Shared plumbing for CLI commands: DB resolution and JSON output."""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from .database import TaskboardDB
from .project_config import ProjectConfig, resolve_db_for_cli
from .services import Services, build_services

T = TypeVar("T")

db_option = click.option("--db", type=click.Path(), help="Database path")


def resolve_or_exit(db: str | None) -> tuple[Path, ProjectConfig | None]:
    """Resolve the database path, exiting with an error message on failure."""
    try:
        return resolve_db_for_cli(db)
    except (FileNotFoundError, ValueError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def run_with_services(db: str | None, action: Callable[[Services], Awaitable[T]]) -> T:
    """Open the database, run an async action against its services, close."""
    db_path, config = resolve_or_exit(db)
    return asyncio.run(_run(db_path, config, action))


async def _run(
    db_path: Path, config: ProjectConfig | None, action: Callable[[Services], Awaitable[T]]
) -> T:
    async with TaskboardDB(db_path) as conn:
        return await action(build_services(conn, config))


def echo_result(result: Any) -> None:
    """Print a result object as JSON; exit 1 when it reports failure."""
    data = result.to_dict() if hasattr(result, "to_dict") else result
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
    failed = data.get("ok") is False or data.get("status") == "Error"
    if failed:
        sys.exit(1)
