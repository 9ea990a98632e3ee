"""Subtask and plan CLI commands for Taskboard.

Results are printed as JSON; a failed result exits with status 1.
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from .cli_context import db_option, echo_result, run_with_services
from .models import ModeResult, ProgressSnapshot, SubtaskWriteResult
from .services import Services
from .subtasks import add_subtask, remove_subtask, toggle_subtask


@click.group()
def subtasks() -> None:
    """Subtask and progress commands."""


@subtasks.command(name="show")
@click.argument("task_key")
@db_option
def subtasks_show(task_key: str, db: str | None) -> None:
    """Show a task's subtasks, progress mode and progress."""

    async def _show(services: Services) -> ProgressSnapshot:
        return await services.store.read(task_key)

    snapshot = run_with_services(db, _show)
    click.echo(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False))


@subtasks.command(name="set")
@click.argument("task_key")
@click.argument("subtasks_file", type=click.File("r", encoding="utf-8"))
@db_option
def subtasks_set(task_key: str, subtasks_file: Any, db: str | None) -> None:
    """Replace a task's subtasks with a JSON list read from a file ("-" for stdin)."""
    raw = subtasks_file.read()

    async def _set(services: Services) -> SubtaskWriteResult:
        return await services.store.write(task_key, raw)

    echo_result(run_with_services(db, _set))


@subtasks.command(name="add")
@click.argument("task_key")
@click.argument("title")
@click.option("--weight", "-w", default=1, type=int, help="Weight 1-100 (default: 1)")
@db_option
def subtasks_add(task_key: str, title: str, weight: int, db: str | None) -> None:
    """Append a subtask."""

    async def _add(services: Services) -> SubtaskWriteResult:
        return await add_subtask(services.store, task_key, title, weight)

    echo_result(run_with_services(db, _add))


@subtasks.command(name="toggle")
@click.argument("task_key")
@click.argument("subtask_id")
@click.option("--done/--undone", default=True, help="Mark done (default) or not done")
@db_option
def subtasks_toggle(task_key: str, subtask_id: str, done: bool, db: str | None) -> None:
    """Set a subtask's done flag."""

    async def _toggle(services: Services) -> SubtaskWriteResult:
        return await toggle_subtask(services.store, task_key, subtask_id, done)

    echo_result(run_with_services(db, _toggle))


@subtasks.command(name="remove")
@click.argument("task_key")
@click.argument("subtask_id")
@db_option
def subtasks_remove(task_key: str, subtask_id: str, db: str | None) -> None:
    """Remove a subtask."""

    async def _remove(services: Services) -> SubtaskWriteResult:
        return await remove_subtask(services.store, task_key, subtask_id)

    echo_result(run_with_services(db, _remove))


@subtasks.command(name="mode")
@click.argument("task_key")
@click.argument("mode", type=click.Choice(["Auto", "Manual"]))
@db_option
def subtasks_mode(task_key: str, mode: str, db: str | None) -> None:
    """Switch a task between Auto and Manual progress."""

    async def _mode(services: Services) -> ModeResult:
        return await services.modes.set_mode(task_key, mode)

    echo_result(run_with_services(db, _mode))


@subtasks.command(name="generate")
@click.argument("task_key")
@db_option
def subtasks_generate(task_key: str, db: str | None) -> None:
    """Replace a task's subtasks with one per step of its stored plan."""

    async def _generate(services: Services) -> SubtaskWriteResult:
        return await services.generator.generate_from_plan(task_key)

    echo_result(run_with_services(db, _generate))


@click.group()
def plan() -> None:
    """Implementation plan commands."""


@plan.command(name="import")
@click.argument("task_key")
@click.argument("plan_file", type=click.File("r", encoding="utf-8"))
@db_option
def plan_import(task_key: str, plan_file: Any, db: str | None) -> None:
    """Store an implementation plan (JSON) for a task."""
    try:
        data = json.load(plan_file)
    except ValueError as exc:
        click.echo(f"Error: Invalid plan JSON: {exc}", err=True)
        sys.exit(1)

    async def _import(services: Services) -> list[Any]:
        await services.plans.save_plan(task_key, data)
        return await services.plans.get_or_build_plan(task_key)

    try:
        steps = run_with_services(db, _import)
    except LookupError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    click.echo(f"Stored plan for {task_key} ({len(steps)} steps)")
