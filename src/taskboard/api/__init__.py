"""Taskboard REST API package.

FastAPI adapter exposing subtask editing, progress modes, plan-based
generation and the task-start workflow.
"""

from taskboard.api.app import create_app

__all__ = ["create_app"]
