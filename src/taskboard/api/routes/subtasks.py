"""Subtasks router: read, replace, edit and generate a task's subtasks.

Write endpoints answer 200 with the result when it is ok and 400 with the
same body when the store reports a failure (missing task, lock timeout,
storage or plan error).
"""

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from taskboard.api.dependencies import get_services_dep
from taskboard.api.models.requests import (
    ProgressModeRequest,
    SubtaskAddRequest,
    SubtasksReplaceRequest,
    SubtaskToggleRequest,
)
from taskboard.api.models.responses import ModeResponse, SnapshotResponse, SubtaskWriteResponse
from taskboard.models import ModeResult, SubtaskWriteResult
from taskboard.services import Services
from taskboard.subtasks import add_subtask, remove_subtask, toggle_subtask

router = APIRouter()


def _write_response(result: SubtaskWriteResult, *, created: bool = False) -> JSONResponse:
    body = SubtaskWriteResponse.model_validate(result.to_dict())
    if not result.ok:
        status_code = 400
    else:
        status_code = 201 if created else 200
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _mode_response(result: ModeResult) -> JSONResponse:
    body = ModeResponse.model_validate(result.to_dict())
    return JSONResponse(
        status_code=200 if result.ok else 400,
        content=body.model_dump(exclude_none=True),
    )


@router.get("/{task_key}/subtasks", response_model=SnapshotResponse)
async def get_subtasks(
    task_key: str, services: Services = Depends(get_services_dep)
) -> dict[str, Any]:
    """Return the subtasks, mode and progress of a task.

    An unknown task yields the empty snapshot, not a 404.
    """
    snapshot = await services.store.read(task_key)
    return snapshot.to_dict()


@router.put("/{task_key}/subtasks", response_model=SubtaskWriteResponse)
async def replace_subtasks(
    task_key: str,
    request: SubtasksReplaceRequest,
    services: Services = Depends(get_services_dep),
) -> JSONResponse:
    """Replace a task's subtasks; progress is recomputed in Auto mode."""
    return _write_response(await services.store.write(task_key, request.subtasks))


@router.post("/{task_key}/subtasks", status_code=201, response_model=SubtaskWriteResponse)
async def create_subtask(
    task_key: str,
    request: SubtaskAddRequest,
    services: Services = Depends(get_services_dep),
) -> JSONResponse:
    """Append a subtask; the response carries its assigned id."""
    result = await add_subtask(services.store, task_key, request.title, request.weight)
    return _write_response(result, created=True)


@router.post("/{task_key}/subtasks/generate", response_model=SubtaskWriteResponse)
async def generate_subtasks(
    task_key: str, services: Services = Depends(get_services_dep)
) -> JSONResponse:
    """Replace a task's subtasks with one per step of its implementation plan."""
    return _write_response(await services.generator.generate_from_plan(task_key))


@router.patch("/{task_key}/subtasks/{subtask_id}", response_model=SubtaskWriteResponse)
async def update_subtask(
    task_key: str,
    subtask_id: str,
    request: SubtaskToggleRequest,
    services: Services = Depends(get_services_dep),
) -> JSONResponse:
    """Set a subtask's done flag. Unknown subtask ids change nothing."""
    result = await toggle_subtask(services.store, task_key, subtask_id, request.done)
    return _write_response(result)


@router.delete("/{task_key}/subtasks/{subtask_id}", response_model=SubtaskWriteResponse)
async def delete_subtask(
    task_key: str, subtask_id: str, services: Services = Depends(get_services_dep)
) -> JSONResponse:
    """Remove a subtask. Unknown subtask ids change nothing."""
    return _write_response(await remove_subtask(services.store, task_key, subtask_id))


@router.put("/{task_key}/progress-mode", response_model=ModeResponse)
async def set_progress_mode(
    task_key: str,
    request: ProgressModeRequest,
    services: Services = Depends(get_services_dep),
) -> JSONResponse:
    """Switch a task between Auto and Manual progress."""
    return _mode_response(await services.modes.set_mode(task_key, request.mode))
