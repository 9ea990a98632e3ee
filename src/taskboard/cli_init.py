"""CLI init command for Taskboard.

Provides the top-level `init` command that bootstraps a .taskboard/
directory with config.toml, .gitignore, and a per-project database.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from .database import TaskboardDB
from .project_config import create_default_config


@click.command("init")
@click.option(
    "--project",
    "-p",
    "project_path",
    required=True,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Path to the project directory",
)
@click.option(
    "--name",
    "-n",
    default=None,
    help="Project name (defaults to directory name)",
)
@click.option(
    "--env",
    type=click.Choice(["prod", "dev"]),
    default="prod",
    help="Diagnostics environment; dev also persists info logs (default: prod)",
)
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing .taskboard/ configuration",
)
def init_command(
    project_path: str,
    name: str | None,
    env: str,
    force: bool,
) -> None:
    """Initialize a project for Taskboard.

    Creates a .taskboard/ directory with config.toml, .gitignore,
    and an empty task database.
    """
    path = Path(project_path)

    try:
        config = create_default_config(path, name=name, env=env, force=force)
    except FileExistsError:
        click.echo(
            f"Error: Project already initialized at {path / '.taskboard'}. "
            "Use --force to overwrite.",
            err=True,
        )
        sys.exit(1)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    db_path = config.resolve_db_path(path)
    asyncio.run(_init_db(db_path))

    click.echo(f"Initialized Taskboard project '{config.name}' at {path}")
    click.echo(f"  Config: {path / '.taskboard' / 'config.toml'}")
    click.echo(f"  Database: {db_path}")
    click.echo("")
    click.echo("Next steps:")
    click.echo('  taskboard task add OPS-1 "Describe the task"')


async def _init_db(db_path: str | Path) -> None:
    """Initialize the project database."""
    db = TaskboardDB(db_path)
    await db.connect()
    await db.close()
