"""Task lifecycle workflows and their downstream collaborators."""

from __future__ import annotations

from .actions import ACTIONS, STATUS_ACTIONS, StatusTransition, TaskActions
from .notifiers import (
    CalendarNotifier,
    EmailNotifier,
    TaskNotifier,
    TaskTrackerNotifier,
    WebhookNotifier,
)
from .orchestrator import TaskLifecycle
from .projection import build_projection, owner_list, sanitize_owners

__all__ = [
    "ACTIONS",
    "STATUS_ACTIONS",
    "CalendarNotifier",
    "EmailNotifier",
    "StatusTransition",
    "TaskActions",
    "TaskLifecycle",
    "TaskNotifier",
    "TaskTrackerNotifier",
    "WebhookNotifier",
    "build_projection",
    "owner_list",
    "sanitize_owners",
]
