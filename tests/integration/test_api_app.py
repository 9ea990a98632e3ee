"""End-to-end API tests: the real app factory over a SQLite file."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskboard.api import create_app
from taskboard.database import TaskboardDB


async def _seed(db_path: Path) -> None:
    async with TaskboardDB(db_path) as db:
        await db.create_task("OPS-1", "Migrate billing", owners="Ada, Grace")
        await db.create_task("OPS-2", "Access review", progress_percentage=40, progress_mode="Manual")


@pytest.fixture
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    db_path = tmp_path / "api.db"
    asyncio.run(_seed(db_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TASKBOARD_DB_PATH", str(db_path))
    with TestClient(create_app()) as test_client:
        yield test_client


def test_subtask_lifecycle_over_http(client: TestClient) -> None:
    put = client.put(
        "/tasks/OPS-1/subtasks",
        json={"subtasks": [{"id": "a", "title": "Design", "done": True}, {"id": "b", "weight": 3}]},
    )
    added = client.post("/tasks/OPS-1/subtasks", json={"title": "Verify"})
    toggled = client.patch("/tasks/OPS-1/subtasks/b", json={"done": True})
    snapshot = client.get("/tasks/OPS-1/subtasks").json()

    assert put.json() == {"ok": True, "progress": 25}
    assert added.status_code == 201
    assert added.json()["id"] == "OPS-1-3"
    assert toggled.json() == {"ok": True, "progress": 80}
    assert [s["id"] for s in snapshot["subtasks"]] == ["a", "b", "OPS-1-3"]
    assert snapshot["progress"] == 80


def test_manual_mode_over_http(client: TestClient) -> None:
    result = client.put("/tasks/OPS-2/subtasks", json={"subtasks": [{"done": True}]})

    assert result.json() == {"ok": True}
    assert client.get("/tasks/OPS-2/subtasks").json()["progress"] == 40


def test_missing_task_write_is_400(client: TestClient) -> None:
    response = client.put("/tasks/NOPE/subtasks", json={"subtasks": []})

    assert response.status_code == 400
    assert response.json()["error"] == "Task not found: NOPE"


def test_start_task_over_http(client: TestClient) -> None:
    response = client.post("/tasks/OPS-1/start")

    assert response.status_code == 200
    assert response.json()["status"] == "Success"
    assert client.get("/tasks/OPS-1").json()["status"] == "In Progress"


def test_health_ready(client: TestClient) -> None:
    assert client.get("/health/ready").json() == {"status": "ok"}
