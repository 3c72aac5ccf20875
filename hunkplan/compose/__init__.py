"""Compose feature for hunkplan - turn outstanding changes into planned commits.

This package provides modular compose handling with:
- models: Line, Hunk, WorkingTreeFile, CommitMessage, CommitUnit, CommitPlan,
          ApplyWarning, ApplyReport
- parser: parse_unified_diff, parse_hunk_header
- extractor: extract, extract_changes, should_truncate
- inventory: format_hunk_token, parse_hunk_token, build_hunk_inventory,
             render_file, render_files
- patch: build_file_patch
- message: CommitOptions, format_commit_message
- plan: PlanParseError, parse_plan_json, load_plan_file
- executor: StagingEngine, apply_plan
"""

# Models
from hunkplan.compose.models import (
    ApplyReport,
    ApplyWarning,
    CommitMessage,
    CommitPlan,
    CommitType,
    CommitUnit,
    EngineState,
    Hunk,
    Line,
    LineKind,
    WarningKind,
    WorkingTreeFile,
)

# Parser
from hunkplan.compose.parser import (
    parse_hunk_header,
    parse_unified_diff,
)

# Extractor
from hunkplan.compose.extractor import (
    DEFAULT_TRUNCATE_PATTERNS,
    extract,
    extract_changes,
    should_truncate,
)

# Inventory and rendering
from hunkplan.compose.inventory import (
    TRUNCATED_PLACEHOLDER,
    build_hunk_inventory,
    format_hunk_token,
    parse_hunk_token,
    render_file,
    render_files,
)

# Patch builder
from hunkplan.compose.patch import (
    build_file_patch,
)

# Commit messages
from hunkplan.compose.message import (
    CommitOptions,
    format_commit_message,
    format_commit_prefix,
)

# Plan loading
from hunkplan.compose.plan import (
    PlanParseError,
    load_plan_file,
    parse_plan_json,
)

# Executor
from hunkplan.compose.executor import (
    StagingEngine,
    apply_plan,
)


__all__ = [
    # Models
    "Line",
    "LineKind",
    "Hunk",
    "WorkingTreeFile",
    "CommitType",
    "CommitMessage",
    "CommitUnit",
    "CommitPlan",
    "WarningKind",
    "ApplyWarning",
    "EngineState",
    "ApplyReport",
    # Parser
    "parse_unified_diff",
    "parse_hunk_header",
    # Extractor
    "DEFAULT_TRUNCATE_PATTERNS",
    "extract",
    "extract_changes",
    "should_truncate",
    # Inventory
    "TRUNCATED_PLACEHOLDER",
    "format_hunk_token",
    "parse_hunk_token",
    "build_hunk_inventory",
    "render_file",
    "render_files",
    # Patch
    "build_file_patch",
    # Messages
    "CommitOptions",
    "format_commit_prefix",
    "format_commit_message",
    # Plan
    "PlanParseError",
    "parse_plan_json",
    "load_plan_file",
    # Executor
    "StagingEngine",
    "apply_plan",
]
