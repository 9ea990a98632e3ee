"""Wires the store, mode controller, plan generator and lifecycle together.

The CLI and the HTTP adapter share one set of components per database so
that every operation funnels through the same store lock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .diagnostics import DiagnosticLog
from .lifecycle import CalendarNotifier, EmailNotifier, TaskLifecycle, TaskTrackerNotifier
from .project_config import ProjectConfig
from .subtasks import (
    PlanBuilder,
    PlanSubtaskGenerator,
    ProgressModeController,
    StoredPlanProvider,
    SubtaskStore,
)

if TYPE_CHECKING:
    from .database import TaskboardDB


@dataclass
class Services:
    """Components bound to one database."""

    db: TaskboardDB
    diagnostics: DiagnosticLog
    store: SubtaskStore
    modes: ProgressModeController
    plans: StoredPlanProvider
    generator: PlanSubtaskGenerator
    lifecycle: TaskLifecycle


def build_services(
    db: TaskboardDB,
    config: ProjectConfig | None = None,
    *,
    plan_builder: PlanBuilder | None = None,
) -> Services:
    """Build the components for a database, applying project config if given."""
    config = config or ProjectConfig(name="taskboard")
    diagnostics = DiagnosticLog(db, env=config.logging.env)
    store_timeout = config.locks.store_timeout_seconds
    hooks = config.notifications

    store = SubtaskStore(db, diagnostics, lock_timeout=store_timeout)
    plans = StoredPlanProvider(db, plan_builder)
    lifecycle = TaskLifecycle(
        db,
        calendar=CalendarNotifier(hooks.calendar_webhook_url, timeout=hooks.timeout_seconds),
        tracker=TaskTrackerNotifier(hooks.tracker_webhook_url, timeout=hooks.timeout_seconds),
        notifier=EmailNotifier(hooks.email_webhook_url, timeout=hooks.timeout_seconds),
        diagnostics=diagnostics,
        lock_timeout=config.locks.lifecycle_timeout_seconds,
    )
    return Services(
        db=db,
        diagnostics=diagnostics,
        store=store,
        modes=ProgressModeController(db, diagnostics, lock_timeout=store_timeout),
        plans=plans,
        generator=PlanSubtaskGenerator(store, plans),
        lifecycle=lifecycle,
    )
