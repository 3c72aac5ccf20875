"""Commit plan loading for hunkplan compose module.

Contains:
- PlanParseError: Raised when a plan cannot be parsed or validated
- parse_plan_json: Parse raw planner output into a CommitPlan
- load_plan_file: Read a CommitPlan from a JSON file
- _normalize_plan_dict: Map alternative field names onto the plan schema
"""

import json
from pathlib import Path

from pydantic import ValidationError

from hunkplan.compose.models import CommitPlan


class PlanParseError(Exception):
    """Raised when a commit plan cannot be parsed or does not match the schema."""

    pass


def _strip_code_fences(raw: str) -> str:
    """Remove markdown fences and surrounding prose around a JSON object."""
    cleaned = raw.strip()

    if cleaned.startswith("```"):
        lines = cleaned.split("\n")[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    first_brace = cleaned.find("{")
    last_brace = cleaned.rfind("}")
    if first_brace != -1 and last_brace != -1 and last_brace > first_brace:
        cleaned = cleaned[first_brace:last_brace + 1]
    return cleaned


def _normalize_message(message: dict) -> dict:
    """Accept the planner's `prefix`/`header` names for `type`/`description`."""
    result = dict(message)
    if "prefix" in result and "type" not in result:
        result["type"] = result.pop("prefix")
    if "header" in result and "description" not in result:
        result["description"] = result.pop("header")
    if isinstance(result.get("type"), str):
        result["type"] = result["type"].strip().lower()
    if result.get("scope") is None:
        result["scope"] = ""
    return result


def _normalize_plan_dict(parsed: dict) -> dict:
    """Normalize parsed JSON to the CommitPlan schema.

    Planners return either:
    - {"units": [...]} with files / hunk_refs / message
    - {"commits": [...]} with files / hunk_headers / message{prefix, header}

    Args:
        parsed: The raw parsed JSON dictionary.

    Returns:
        Normalized dictionary compatible with CommitPlan.
    """
    units = parsed.get("units")
    if units is None:
        units = parsed.get("commits", [])

    normalized = []
    for unit in units:
        unit = dict(unit)
        if "hunk_headers" in unit and "hunk_refs" not in unit:
            unit["hunk_refs"] = unit.pop("hunk_headers")
        unit["files"] = unit.get("files") or []
        unit["hunk_refs"] = unit.get("hunk_refs") or []
        if isinstance(unit.get("message"), dict):
            unit["message"] = _normalize_message(unit["message"])
        normalized.append(unit)
    return {"units": normalized}


def parse_plan_json(raw: str) -> CommitPlan:
    """Parse planner output as a CommitPlan.

    Args:
        raw: Raw JSON text, possibly wrapped in markdown fences.

    Returns:
        The validated, immutable CommitPlan.

    Raises:
        PlanParseError: If parsing or validation fails.
    """
    try:
        parsed = json.loads(_strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise PlanParseError(f"Failed to parse plan as JSON.\nError: {e}")

    if not isinstance(parsed, dict):
        raise PlanParseError("Plan JSON must be an object with a 'units' or 'commits' list.")

    try:
        return CommitPlan(**_normalize_plan_dict(parsed))
    except (ValidationError, TypeError, ValueError, AttributeError) as e:
        raise PlanParseError(f"Plan does not match expected schema.\nError: {e}")


def load_plan_file(path: Path) -> CommitPlan:
    """Read and parse a plan file.

    Raises:
        PlanParseError: If the file cannot be read or parsed.
    """
    try:
        raw = path.read_text()
    except OSError as e:
        raise PlanParseError(f"Cannot read plan file {path}: {e}")
    return parse_plan_json(raw)
