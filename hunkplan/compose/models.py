"""Data models for hunkplan compose module.

Contains:
- LineKind, Line: A single diff line and its change kind
- Hunk: Contiguous block of changed lines sharing a diff header
- WorkingTreeFile: One changed file and its ordered hunks
- CommitType, CommitMessage, CommitUnit, CommitPlan: The externally supplied plan
- WarningKind, ApplyWarning, EngineState, ApplyReport: Outcome of applying a plan
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


# Matches the line ranges of a hunk header: @@ -a,b +c,d @@
_HUNK_RANGE_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?")

# Header used for hunks synthesized from untracked files
_NEW_FILE_HEADER_RE = re.compile(r"^New File \d+$")


class LineKind(Enum):
    """Change kind of a diff line; the value is its patch prefix."""

    CONTEXT = " "
    ADDITION = "+"
    DELETION = "-"

    @property
    def prefix(self) -> str:
        return self.value


@dataclass(frozen=True)
class Line:
    """A single diff line.

    `text` keeps its trailing newline. A line without one is the last line
    of a file that has no newline at end of file.
    """

    kind: LineKind
    text: str

    @property
    def has_newline(self) -> bool:
        return self.text.endswith("\n")


@dataclass
class Hunk:
    """Contiguous block of changed lines sharing one diff header."""

    header: str  # The @@ ... @@ line, or "New File <n>" for untracked files
    ordinal: int  # Position within the file's hunk list, 0-based
    lines: list[Line] = field(default_factory=list)
    old_start: int = 0
    old_len: int = 0
    new_start: int = 0
    new_len: int = 0

    @property
    def is_new_file(self) -> bool:
        """True for hunks synthesized from an untracked file."""
        return bool(_NEW_FILE_HEADER_RE.match(self.header))

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.kind is LineKind.DELETION)

    def normalized_header(self) -> str:
        """Header with line numbers removed, keeping only the section text.

        Line numbers shift once an earlier hunk of the same file is committed,
        so they take no part in matching.
        """
        if self.is_new_file:
            return ""
        return _HUNK_RANGE_RE.sub("", self.header).strip()

    def identity(self) -> tuple:
        """Key identifying this change independently of its position."""
        return (
            self.normalized_header(),
            tuple((line.kind.value, line.text) for line in self.lines),
        )


@dataclass
class WorkingTreeFile:
    """One changed file of an extraction pass and its ordered hunks."""

    path: str
    truncated: bool = False
    hunks: list[Hunk] = field(default_factory=list)
    is_new: bool = False
    is_deleted: bool = False
    is_binary: bool = False
    is_untracked: bool = False
    old_mode: Optional[str] = None
    new_mode: Optional[str] = None


class CommitType(str, Enum):
    """Conventional commit prefix."""

    FEAT = "feat"
    FIX = "fix"
    REFACTOR = "refactor"
    STYLE = "style"
    TEST = "test"
    DOCS = "docs"
    BUILD = "build"
    CI = "ci"
    OPS = "ops"
    CHORE = "chore"
    MERGE = "merge"
    REVERT = "revert"


class CommitMessage(BaseModel):
    """Structured commit message of a planned commit."""

    model_config = ConfigDict(frozen=True)

    type: CommitType
    scope: str = ""
    breaking: bool = False
    description: str
    body: Optional[str] = None


class CommitUnit(BaseModel):
    """A single commit in the plan: what to stage and how to describe it."""

    model_config = ConfigDict(frozen=True)

    files: tuple[str, ...] = ()
    hunk_refs: tuple[str, ...] = ()  # "path:ordinal" tokens
    message: CommitMessage

    @property
    def is_hunk_mode(self) -> bool:
        return bool(self.hunk_refs)


class CommitPlan(BaseModel):
    """Ordered sequence of commit units, consumed once."""

    model_config = ConfigDict(frozen=True)

    units: tuple[CommitUnit, ...] = ()


class WarningKind(str, Enum):
    """Non-fatal problems recorded while applying a plan."""

    PATH_STATUS_MISMATCH = "PathStatusMismatch"
    HUNK_MATCH_MISS = "HunkMatchMiss"


@dataclass
class ApplyWarning:
    """A non-fatal problem met while applying one unit."""

    kind: WarningKind
    detail: str
    unit_index: int

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "detail": self.detail, "unit": self.unit_index}


class EngineState(str, Enum):
    """States of the staging engine."""

    IDLE = "idle"
    RESET_INDEX = "reset_index"
    POPULATE_INDEX = "populate_index"
    WRITE_TREE = "write_tree"
    COMMIT = "commit"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class ApplyReport:
    """Outcome of applying a commit plan.

    Commits listed here are permanent; a fatal error never rolls them back.
    """

    committed_units: int = 0
    commits: list[str] = field(default_factory=list)
    warnings: list[ApplyWarning] = field(default_factory=list)
    fatal_error: Optional[str] = None
    skipped_units: list[int] = field(default_factory=list)
    original_head: Optional[str] = None
    cancelled: bool = False
    state: EngineState = EngineState.IDLE

    @property
    def aborted(self) -> bool:
        return self.state is EngineState.ABORTED

    def to_dict(self) -> dict:
        return {
            "committed_units": self.committed_units,
            "commits": list(self.commits),
            "warnings": [w.to_dict() for w in self.warnings],
            "fatal_error": self.fatal_error,
            "skipped_units": list(self.skipped_units),
            "original_head": self.original_head,
            "cancelled": self.cancelled,
            "state": self.state.value,
        }
