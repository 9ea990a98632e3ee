"""Tasks router: list and fetch task rows, and run the task-start workflow."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from taskboard.api.dependencies import get_services_dep
from taskboard.api.models.responses import StartTaskResponse, TaskSummary
from taskboard.exceptions import TaskNotFoundError
from taskboard.lifecycle import build_projection
from taskboard.models import LifecycleStatus
from taskboard.services import Services

router = APIRouter()


def _summary(row: dict[str, Any]) -> dict[str, Any]:
    projection = build_projection(row)
    return TaskSummary(
        **projection.to_dict(), progress_mode=str(row.get("progress_mode") or "Auto")
    ).model_dump()


@router.get("")
async def list_tasks(
    status: str | None = Query(None, description="Filter by task status"),
    services: Services = Depends(get_services_dep),
) -> dict[str, Any]:
    """List task rows, optionally filtered by status."""
    rows = await services.db.get_all_tasks()
    if status is not None:
        rows = [row for row in rows if row.get("status") == status]
    return {"tasks": [_summary(row) for row in rows], "total": len(rows)}


@router.get("/{task_key}", response_model=TaskSummary)
async def get_task(task_key: str, services: Services = Depends(get_services_dep)) -> dict[str, Any]:
    """Fetch one task row.

    Raises:
        TaskNotFoundError: Mapped to a 404 by the error handlers.
    """
    row = await services.db.get_task_by_key(task_key)
    if row is None:
        raise TaskNotFoundError(task_key)
    return _summary(row)


@router.post("/{task_key}/start", response_model=StartTaskResponse)
async def start_task(task_key: str, services: Services = Depends(get_services_dep)) -> JSONResponse:
    """Move a task to In Progress and notify calendar, tracker and owners.

    Answers 200 when the workflow succeeded, even if advisory steps failed,
    and 400 when it did not.
    """
    result = await services.lifecycle.start_task(task_key)
    body = StartTaskResponse.model_validate(result.to_dict())
    return JSONResponse(
        status_code=200 if result.status is LifecycleStatus.SUCCESS else 400,
        content=body.model_dump(),
    )
