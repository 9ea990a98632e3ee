"""Health check router for liveness and readiness endpoints."""

from typing import Any

from fastapi import APIRouter, Request, Response

from taskboard.api.models.responses import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health() -> dict[str, str]:
    """Return liveness status."""
    return {"status": "ok"}


@router.get("/ready")
async def get_health_ready(request: Request, response: Response) -> dict[str, Any]:
    """Return readiness by running a trivial query against the database.

    Answers 503 when the database is not initialized or not reachable.
    """
    from taskboard.api.dependencies import get_db_dep

    dependency_func = request.app.dependency_overrides.get(get_db_dep, get_db_dep)
    try:
        db = dependency_func()
        await db.execute_query("SELECT 1")
    except Exception as e:
        response.status_code = 503
        return {"status": "unavailable", "detail": str(e)}
    return {"status": "ok"}
