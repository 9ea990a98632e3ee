"""Tests for the webhook notifiers, using httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from taskboard.lifecycle import CalendarNotifier, EmailNotifier, TaskTrackerNotifier
from taskboard.models import TaskProjection

PROJECTION = TaskProjection(
    id="OPS-1",
    action_item="Migrate billing",
    department="Platform",
    priority="3",
    status="In Progress",
    owners="Ada, Grace",
    progress=60,
)


def _recording_transport(status_code: int = 200) -> tuple[httpx.MockTransport, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, text="ok" if status_code < 400 else "bad hook")

    return httpx.MockTransport(handler), seen


class TestWebhookDelivery:
    """Delivery behaviour shared by all notifiers."""

    @pytest.mark.asyncio
    async def test_without_url_logs_only(self) -> None:
        result = await CalendarNotifier()(PROJECTION)

        assert result["success"] is True
        assert result["delivered"] is False
        assert result["payload"]["title"] == "OPS-1: Migrate billing"

    @pytest.mark.asyncio
    async def test_posts_payload(self) -> None:
        transport, seen = _recording_transport()
        notifier = CalendarNotifier("https://hooks.example/calendar", transport=transport)

        result = await notifier(PROJECTION)

        assert result == {"success": True, "delivered": True, "status_code": 200}
        assert str(seen[0].url) == "https://hooks.example/calendar"
        assert seen[0].method == "POST"
        body = json.loads(seen[0].content)
        assert body["guests"] == ["Ada", "Grace"]
        assert body["start"] < body["end"]
        assert "- Progress: 60%" in body["description"]

    @pytest.mark.asyncio
    async def test_http_error_status_reported(self) -> None:
        transport, _ = _recording_transport(500)
        notifier = TaskTrackerNotifier("https://hooks.example/tracker", transport=transport)

        result = await notifier(PROJECTION)

        assert result["success"] is False
        assert result["error"] == "HTTP 500: bad hook"

    @pytest.mark.asyncio
    async def test_transport_error_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = TaskTrackerNotifier(
            "https://hooks.example/tracker", transport=httpx.MockTransport(handler)
        )

        result = await notifier(PROJECTION)

        assert result["success"] is False
        assert "connection refused" in result["error"]


class TestEmailNotifier:
    """Tests for EmailNotifier."""

    @pytest.mark.asyncio
    async def test_no_owners_fails(self) -> None:
        projection = TaskProjection(
            id="OPS-2",
            action_item="Review",
            department="",
            priority="",
            status="In Progress",
            owners="",
            progress=0,
        )

        result = await EmailNotifier()(projection)

        assert result == {"success": False, "error": "No team members assigned to this task"}

    @pytest.mark.asyncio
    async def test_sends_to_owners(self) -> None:
        transport, seen = _recording_transport()
        notifier = EmailNotifier("https://hooks.example/mail", transport=transport)

        result = await notifier(PROJECTION)

        assert result["success"] is True
        assert result["recipients"] == ["Ada", "Grace"]
        body = json.loads(seen[0].content)
        assert body["subject"] == "Task started: Migrate billing"
        assert "- Task ID: OPS-1" in body["body"]


def test_tracker_payload_due_in_a_week() -> None:
    payload = TaskTrackerNotifier().build_payload(PROJECTION)
    assert payload["title"] == "OPS-1: Migrate billing"
    assert payload["notes"].startswith("Task: Migrate billing")
