"""CORS middleware configuration for FastAPI."""

import os

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

_DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def configure_cors(app: FastAPI) -> None:
    """Configure CORS from TASKBOARD_CORS_ORIGINS.

    Unset means the local development origins, "*" allows any origin, and a
    comma-separated list allows exactly those origins.
    """
    origins_env = os.environ.get("TASKBOARD_CORS_ORIGINS")
    if origins_env is None:
        allow_origins = _DEFAULT_ORIGINS
    elif origins_env == "*":
        allow_origins = ["*"]
    else:
        allow_origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
