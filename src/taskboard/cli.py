"""CLI for Taskboard.

Provides command-line access to task subtasks, progress modes, plan-based
generation and the task-start workflow.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from .cli_context import db_option, echo_result, resolve_or_exit, run_with_services
from .cli_init import init_command
from .cli_subtasks import plan, subtasks
from .database import VALID_STATUSES
from .lifecycle import sanitize_owners
from .services import Services

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """Taskboard - weighted subtasks, progress tracking and task lifecycle."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


cli.add_command(init_command)
cli.add_command(subtasks)
cli.add_command(plan)


@cli.group()
def task() -> None:
    """Task row commands."""


@task.command(name="add")
@click.argument("task_key")
@click.argument("action_item")
@click.option("--department", default="", help="Owning department")
@click.option("--priority", default="", help="Priority score")
@click.option("--owners", default="", help="Comma-separated owner names")
@click.option(
    "--status",
    type=click.Choice(sorted(VALID_STATUSES)),
    default="Not Started",
    help="Initial status (default: Not Started)",
)
@click.option(
    "--mode",
    type=click.Choice(["Auto", "Manual"]),
    default="Auto",
    help="Progress mode (default: Auto)",
)
@db_option
def task_add(
    task_key: str,
    action_item: str,
    department: str,
    priority: str,
    owners: str,
    status: str,
    mode: str,
    db: str | None,
) -> None:
    """Add a task row."""

    async def _add(services: Services) -> int:
        if await services.db.get_task_by_key(task_key):
            return 0
        return await services.db.create_task(
            task_key,
            action_item,
            department=department,
            priority_score=priority,
            owners=sanitize_owners(owners),
            status=status,
            progress_mode=mode,
        )

    row_id = run_with_services(db, _add)
    if not row_id:
        click.echo(f"Error: Task already exists: {task_key}", err=True)
        sys.exit(1)
    click.echo(f"Created task {task_key} (row {row_id})")


@task.command(name="list")
@db_option
def task_list(db: str | None) -> None:
    """List tasks with status and progress."""

    async def _list(services: Services) -> list[dict[str, object]]:
        return await services.db.get_all_tasks()

    rows = run_with_services(db, _list)
    if not rows:
        click.echo("No tasks found.")
        return
    for row in rows:
        click.echo(
            f"  {row['task_key']}: {row['action_item']} "
            f"[{row['status']}, {row['progress_percentage']}% {row['progress_mode']}]"
        )


@cli.command()
@click.argument("task_key")
@db_option
def start(task_key: str, db: str | None) -> None:
    """Start a task: set it In Progress and notify calendar, tracker and owners."""

    async def _start(services: Services) -> object:
        return await services.lifecycle.start_task(task_key)

    echo_result(run_with_services(db, _start))


@cli.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", default=8420, type=int, help="Port to bind to (default: 8420)")
@click.option("--db-path", type=click.Path(), default=None, help="Database path")
@click.option("--reload", is_flag=True, help="Enable auto-reload on code changes")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error", "critical"], case_sensitive=False),
    default="info",
    help="Logging level (default: info)",
)
def serve(
    host: str,
    port: int,
    db_path: str | None,
    reload: bool,
    log_level: str,
) -> None:
    """Start the API server."""
    resolved_db_path, _ = resolve_or_exit(db_path)
    run_server(
        host=host,
        port=port,
        db_path=resolved_db_path,
        reload=reload,
        log_level=log_level,
    )


def run_server(
    host: str,
    port: int,
    db_path: Path | None,
    reload: bool,
    log_level: str,
) -> None:
    """Run the API server via api.serve."""
    from taskboard.api.serve import run_server as _run_api_server

    _run_api_server(
        host=host,
        port=port,
        db_path=str(db_path) if db_path is not None else None,
        reload=reload,
        log_level=log_level,
    )


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
