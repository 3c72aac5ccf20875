"""Tests for hunkplan.compose.plan module."""

import json

import pytest
from pydantic import ValidationError

from hunkplan.compose.models import CommitType
from hunkplan.compose.plan import PlanParseError, load_plan_file, parse_plan_json


class TestParsePlanJson:
    """Tests for parse_plan_json function."""

    def test_units_shape(self):
        raw = json.dumps({
            "units": [
                {
                    "hunk_refs": ["src/app.py:0"],
                    "message": {"type": "fix", "scope": "app", "description": "guard None"},
                },
                {
                    "files": ["new.rs"],
                    "message": {"type": "feat", "description": "add new.rs"},
                },
            ]
        })

        plan = parse_plan_json(raw)

        assert len(plan.units) == 2
        assert plan.units[0].hunk_refs == ("src/app.py:0",)
        assert plan.units[0].is_hunk_mode
        assert plan.units[0].message.type is CommitType.FIX
        assert plan.units[1].files == ("new.rs",)
        assert not plan.units[1].is_hunk_mode
        assert plan.units[1].message.scope == ""

    def test_planner_response_shape(self):
        """Test the commits/hunk_headers/prefix/header response shape."""
        raw = json.dumps({
            "commits": [
                {
                    "files": [],
                    "hunk_headers": ["a.py:0", "a.py:2"],
                    "message": {
                        "prefix": "Refactor",
                        "scope": None,
                        "breaking": True,
                        "header": "split module",
                        "body": "Moves helpers out.",
                    },
                }
            ]
        })

        plan = parse_plan_json(raw)
        unit = plan.units[0]

        assert unit.hunk_refs == ("a.py:0", "a.py:2")
        assert unit.message.type is CommitType.REFACTOR
        assert unit.message.breaking
        assert unit.message.description == "split module"
        assert unit.message.body == "Moves helpers out."

    def test_code_fences_stripped(self):
        raw = '```json\n{"units": [{"files": ["a"], "message": {"type": "docs", "description": "x"}}]}\n```'
        assert parse_plan_json(raw).units[0].files == ("a",)

    def test_empty_plan(self):
        assert parse_plan_json('{"units": []}').units == ()

    def test_invalid_json(self):
        with pytest.raises(PlanParseError) as exc_info:
            parse_plan_json("not json at all")
        assert "Failed to parse plan" in str(exc_info.value)

    def test_not_an_object(self):
        with pytest.raises(PlanParseError):
            parse_plan_json("[1, 2]")

    def test_unknown_commit_type(self):
        raw = '{"units": [{"files": ["a"], "message": {"type": "yolo", "description": "x"}}]}'
        with pytest.raises(PlanParseError) as exc_info:
            parse_plan_json(raw)
        assert "expected schema" in str(exc_info.value)

    def test_missing_message(self):
        with pytest.raises(PlanParseError):
            parse_plan_json('{"units": [{"files": ["a"]}]}')

    def test_plan_is_immutable(self):
        plan = parse_plan_json('{"units": [{"files": ["a"], "message": {"type": "ci", "description": "x"}}]}')

        with pytest.raises(ValidationError):
            plan.units[0].files = ("b",)


class TestLoadPlanFile:
    """Tests for load_plan_file function."""

    def test_loads_file(self, temp_dir):
        plan_file = temp_dir / "plan.json"
        plan_file.write_text('{"units": [{"files": ["a"], "message": {"type": "build", "description": "x"}}]}')

        plan = load_plan_file(plan_file)

        assert plan.units[0].message.type is CommitType.BUILD

    def test_missing_file(self, temp_dir):
        with pytest.raises(PlanParseError) as exc_info:
            load_plan_file(temp_dir / "missing.json")
        assert "Cannot read plan file" in str(exc_info.value)
