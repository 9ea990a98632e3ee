"""Tests for subtask normalization and weight parsing."""

from __future__ import annotations

import json
from typing import Any

import pytest

from taskboard.models import Subtask
from taskboard.subtasks import normalize_subtasks, parse_weight, serialize_subtasks
from taskboard.subtasks.progress import calculate_progress


class TestParseWeight:
    """Tests for parse_weight()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (5, 5),
            ("12", 12),
            ("12abc", 12),
            ("3.7", 3),
            (7.9, 7),
            (0, 1),
            ("0", 1),
            (-4, 1),
            (150, 100),
            ("1000", 100),
            ("0005", 5),
            ("-0007", 1),
        ],
    )
    def test_parses_and_clamps(self, value: Any, expected: int) -> None:
        assert parse_weight(value) == expected

    @pytest.mark.parametrize("value", [None, "", "abc", [], {}, True, float("nan")])
    def test_unparsable_defaults_to_one(self, value: Any) -> None:
        assert parse_weight(value) == 1

    def test_digit_runs_past_int_conversion_limit(self) -> None:
        assert parse_weight("9" * 5000) == 100
        assert parse_weight("-" + "9" * 5000) == 1
        assert parse_weight("  " + "0" * 5000 + "42kg") == 42


class TestNormalizeSubtasks:
    """Tests for normalize_subtasks()."""

    @pytest.mark.parametrize("raw", [None, "", "not json", "{}", 42, {"id": "a"}, b"\xff"])
    def test_malformed_input_yields_empty(self, raw: Any) -> None:
        assert normalize_subtasks(raw) == []

    def test_positional_id_fallback(self) -> None:
        items = normalize_subtasks([{"title": "a"}, {"id": "x"}, {"id": ""}])
        assert [s.id for s in items] == ["S1", "x", "S3"]

    def test_fields_canonicalized(self) -> None:
        [item] = normalize_subtasks([{"id": 7, "title": None, "done": 1, "weight": "250"}])
        assert item == Subtask(id="7", title="", done=True, weight=100)

    def test_title_truncated_to_200(self) -> None:
        [item] = normalize_subtasks([{"title": "x" * 250}])
        assert len(item.title) == 200

    def test_non_mapping_elements_become_defaults(self) -> None:
        items = normalize_subtasks(["loose", None, {"id": "b"}])
        assert items == [
            Subtask(id="S1", title="", done=False, weight=1),
            Subtask(id="S2", title="", done=False, weight=1),
            Subtask(id="b", title="", done=False, weight=1),
        ]

    def test_duplicate_ids_tolerated(self) -> None:
        items = normalize_subtasks([{"id": "a"}, {"id": "a"}])
        assert [s.id for s in items] == ["a", "a"]

    def test_json_text_accepted(self) -> None:
        raw = json.dumps([{"id": "a", "title": "Plan", "done": True, "weight": 2}])
        assert normalize_subtasks(raw) == [Subtask(id="a", title="Plan", done=True, weight=2)]

    def test_idempotent(self) -> None:
        raw = [{"title": "a", "weight": "0"}, {"id": 3, "done": "yes", "weight": 900}, "x"]
        once = normalize_subtasks(raw)
        assert normalize_subtasks(once) == once
        assert calculate_progress(once) == calculate_progress(normalize_subtasks(once))

    def test_serialize_round_trip_preserves_fields(self) -> None:
        items = normalize_subtasks(
            [{"id": "a", "title": "é" * 210, "done": True, "weight": -3}, {"weight": 42}]
        )
        assert normalize_subtasks(serialize_subtasks(items)) == items

    def test_oversized_numeric_text_never_raises(self) -> None:
        raw = json.dumps([{"id": "a", "weight": "9" * 5000}])
        assert normalize_subtasks(raw) == [Subtask(id="a", title="", done=False, weight=100)]

    def test_oversized_integer_id_and_title_degrade(self) -> None:
        huge = 10**5000
        [item] = normalize_subtasks([{"id": huge, "title": huge, "weight": huge}])
        assert item == Subtask(id="S1", title="", done=False, weight=100)
