"""Error handler middleware for the FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskboard.api.models.responses import ErrorResponse
from taskboard.exceptions import LockTimeoutError


async def _value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Handle ValueError exceptions with a 400."""
    error_message = str(exc) if exc.args else ""
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(detail=error_message).model_dump(),
    )


async def _lookup_error_handler(request: Request, exc: LookupError) -> JSONResponse:
    """Handle LookupError exceptions (TaskNotFoundError, KeyError) with a 404."""
    # Use exc.args to avoid KeyError quote wrapping
    if exc.args and exc.args[0]:
        error_message = str(exc.args[0])
    else:
        error_message = "Not found"
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(detail=error_message).model_dump(),
    )


async def _lock_timeout_handler(request: Request, exc: LockTimeoutError) -> JSONResponse:
    """Handle store lock timeouts with a 503."""
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(detail=str(exc)).model_dump(),
    )


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions without leaking internal details."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(detail="Internal server error").model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers for the FastAPI application."""
    app.add_exception_handler(ValueError, _value_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(LookupError, _lookup_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(LockTimeoutError, _lock_timeout_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
