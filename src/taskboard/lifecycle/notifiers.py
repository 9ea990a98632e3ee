"""Webhook-backed notification collaborators for the task-start workflow.

Each notifier posts a JSON payload describing the task to its webhook. With
no webhook configured it only logs, and reports success without delivery.
Transport and HTTP errors are reported in the result, not raised.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Protocol

import httpx

from ..models import TaskProjection
from .projection import owner_list

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
EVENT_DURATION = timedelta(hours=1)
TRACKER_DUE_IN = timedelta(days=7)


class TaskNotifier(Protocol):
    """Advisory collaborator invoked with a task projection."""

    async def __call__(self, projection: TaskProjection) -> dict[str, Any]: ...


def _details(projection: TaskProjection) -> list[str]:
    return [
        f"- Department: {projection.department}",
        f"- Priority: {projection.priority}",
        f"- Status: {projection.status}",
        f"- Assigned to: {projection.owners or 'Unassigned'}",
        f"- Progress: {projection.progress}%",
    ]


class WebhookNotifier:
    """Base notifier posting a payload to an optional webhook URL."""

    name = "webhook"

    def __init__(
        self,
        webhook_url: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    def build_payload(self, projection: TaskProjection) -> dict[str, Any]:
        return {"task": projection.to_dict()}

    async def __call__(self, projection: TaskProjection) -> dict[str, Any]:
        payload = self.build_payload(projection)
        if not self._webhook_url:
            logger.info("%s notification (no webhook) for %s", self.name, projection.id)
            return {"success": True, "delivered": False, "payload": payload}
        return await self._post(self._webhook_url, payload)

    async def _post(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error("%s notification error: %s", self.name, e)
            return {"success": False, "error": str(e)}

        if response.status_code >= 400:
            logger.error(
                "%s notification failed: %d %s", self.name, response.status_code, response.text
            )
            return {"success": False, "error": f"HTTP {response.status_code}: {response.text}"}
        return {"success": True, "delivered": True, "status_code": response.status_code}


class CalendarNotifier(WebhookNotifier):
    """Books a one-hour calendar block for the task, inviting its owners."""

    name = "calendar"

    def build_payload(self, projection: TaskProjection) -> dict[str, Any]:
        start = datetime.now(UTC)
        return {
            "title": f"{projection.id}: {projection.action_item}",
            "start": start.isoformat(),
            "end": (start + EVENT_DURATION).isoformat(),
            "description": "\n".join(["Task Details:", *_details(projection)]),
            "guests": owner_list(projection.owners),
            "task": projection.to_dict(),
        }


class TaskTrackerNotifier(WebhookNotifier):
    """Creates an item in an external task tracker, due in a week."""

    name = "external_task"

    def build_payload(self, projection: TaskProjection) -> dict[str, Any]:
        due = datetime.now(UTC) + TRACKER_DUE_IN
        return {
            "title": f"{projection.id}: {projection.action_item}",
            "notes": "\n".join([f"Task: {projection.action_item}", *_details(projection)]),
            "due": due.isoformat(),
            "task": projection.to_dict(),
        }


class EmailNotifier(WebhookNotifier):
    """Emails the task's owners through a mail relay webhook."""

    name = "notification"

    def __init__(
        self,
        webhook_url: str | None = None,
        *,
        action: str = "started",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(webhook_url, timeout=timeout, transport=transport)
        self.action = action

    def build_payload(self, projection: TaskProjection) -> dict[str, Any]:
        return {
            "recipients": owner_list(projection.owners),
            "subject": f"Task {self.action}: {projection.action_item}",
            "body": "\n".join(
                [
                    "Task Details:",
                    f"- Task ID: {projection.id}",
                    f"- Action Item: {projection.action_item}",
                    *_details(projection),
                ]
            ),
            "task": projection.to_dict(),
        }

    async def __call__(self, projection: TaskProjection) -> dict[str, Any]:
        if not owner_list(projection.owners):
            logger.info("No owners to notify for %s", projection.id)
            return {"success": False, "error": "No team members assigned to this task"}
        result = await super().__call__(projection)
        if result.get("success"):
            result["recipients"] = owner_list(projection.owners)
        return result
