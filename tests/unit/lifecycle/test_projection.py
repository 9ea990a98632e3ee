"""Tests for owner sanitizing and the task projection."""

from __future__ import annotations

from typing import Any

import pytest

from taskboard.lifecycle import build_projection, owner_list, sanitize_owners


class TestSanitizeOwners:
    """Tests for sanitize_owners()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Ada, Grace", "Ada, Grace"),
            ('"Ada"\n  Grace ,', "Ada, Grace"),
            ("“Ada”, ‘Grace’", "Ada, Grace"),
            ("Ada, ada, ADA, Grace", "Ada, Grace"),
            (["Ada", " Grace", ""], "Ada, Grace"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_sanitize(self, value: Any, expected: str) -> None:
        assert sanitize_owners(value) == expected

    def test_owner_list(self) -> None:
        assert owner_list("Ada,\nGrace") == ["Ada", "Grace"]
        assert owner_list("") == []


class TestBuildProjection:
    """Tests for build_projection()."""

    def test_projects_row_fields(self) -> None:
        row = {
            "task_key": "OPS-1",
            "action_item": "Migrate billing",
            "department": "Platform",
            "priority_score": "3",
            "status": "Not Started",
            "owners": "Ada, ada",
            "progress_percentage": 60,
        }

        projection = build_projection(row, status="In Progress")

        assert projection.to_dict() == {
            "id": "OPS-1",
            "action_item": "Migrate billing",
            "department": "Platform",
            "priority": "3",
            "status": "In Progress",
            "owners": "Ada",
            "progress": 60,
        }

    def test_missing_fields_default(self) -> None:
        projection = build_projection({"task_key": "OPS-9", "progress_percentage": "n/a"})
        assert projection.status == ""
        assert projection.owners == ""
        assert projection.progress == 0
