"""Executor for hunkplan compose module.

Contains:
- StagingEngine: Applies a CommitPlan to the repository, one unit at a time
- apply_plan: Convenience wrapper around StagingEngine

Every unit goes through RESET_INDEX -> POPULATE_INDEX -> WRITE_TREE -> COMMIT.
Hunks are always re-derived against the current HEAD right before matching;
the extraction the plan was built from only tells which change a token meant.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from hunkplan.compose.extractor import DEFAULT_TRUNCATE_PATTERNS, extract
from hunkplan.compose.inventory import build_hunk_inventory, format_hunk_token, parse_hunk_token
from hunkplan.compose.message import CommitOptions, format_commit_message
from hunkplan.compose.models import (
    ApplyReport,
    ApplyWarning,
    CommitPlan,
    CommitUnit,
    EngineState,
    Hunk,
    WarningKind,
    WorkingTreeFile,
)
from hunkplan.compose.patch import build_file_patch
from hunkplan.git.exceptions import GitError
from hunkplan.git.index import add_to_index, apply_patch_to_index, remove_from_index, reset_index
from hunkplan.git.objects import (
    commit_tree,
    get_commit_tree,
    get_empty_tree,
    get_head_commit,
    resolve_baseline_tree,
    resolve_signature,
    update_head,
    write_tree,
)
from hunkplan.git.status import classify_status, get_worktree_changes

LOG = logging.getLogger(__name__)


def _find_match(candidates: list[Hunk], wanted: Hunk, used: set[int]) -> Optional[Hunk]:
    """Find the first unused re-derived hunk that carries the wanted change.

    Normalized headers are compared first. The section text of a header can
    change once earlier hunks are committed, so an equal body alone is
    accepted as a second choice.
    """
    identity = wanted.identity()
    for hunk in candidates:
        if hunk.ordinal not in used and hunk.identity() == identity:
            return hunk
    body = identity[1]
    for hunk in candidates:
        if hunk.ordinal not in used and hunk.identity()[1] == body:
            return hunk
    return None


class StagingEngine:
    """Applies commit plans to a repository.

    The engine owns the index for the duration of a plan and does no locking;
    callers must keep other git commands away from the repository meanwhile.
    """

    def __init__(
        self,
        repo_root: Path,
        truncate_patterns: Optional[list[str]] = None,
        commit_options: Optional[CommitOptions] = None,
    ):
        self.repo_root = Path(repo_root)
        self.truncate_patterns = (
            DEFAULT_TRUNCATE_PATTERNS if truncate_patterns is None else truncate_patterns
        )
        self.commit_options = commit_options or CommitOptions()
        self.state = EngineState.IDLE
        self._signature: Optional[tuple[str, str]] = None

    def apply(
        self,
        plan: CommitPlan,
        reference: Optional[list[WorkingTreeFile]] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> ApplyReport:
        """Apply every unit of a plan, in order.

        Args:
            plan: The plan to apply.
            reference: The extraction pass the plan's tokens were taken from.
                If None, the working tree is extracted once before any unit is
                applied, which yields the same tokens for an unchanged tree.
            should_continue: Checked between units; returning False stops
                after the last committed unit.

        Returns:
            ApplyReport. Fatal errors are reported in it, never raised.
        """
        report = ApplyReport()
        self.state = EngineState.IDLE
        self._signature = None

        try:
            head = get_head_commit(self.repo_root)
            report.original_head = head
            if reference is None:
                reference = extract(
                    self.repo_root,
                    resolve_baseline_tree(self.repo_root),
                    self.truncate_patterns,
                )
        except GitError as e:
            return self._abort(report, f"Cannot read repository state: {e}")

        inventory = build_hunk_inventory(reference)

        for index, unit in enumerate(plan.units):
            if should_continue is not None and not should_continue():
                LOG.info("Stopped before unit %d of %d", index + 1, len(plan.units))
                report.cancelled = True
                break

            LOG.info("Applying unit %d of %d: %s", index + 1, len(plan.units), unit.message.description)
            try:
                commit = self._apply_unit(index, unit, head, inventory, report)
            except GitError as e:
                return self._abort(report, f"Unit {index + 1} failed: {e}")

            if commit is None:
                LOG.warning("Unit %d staged nothing; skipped without committing", index + 1)
                report.skipped_units.append(index)
                continue

            head = commit
            report.commits.append(commit)
            report.committed_units += 1

        self.state = EngineState.DONE
        report.state = self.state
        return report

    def _abort(self, report: ApplyReport, error: str) -> ApplyReport:
        """Stop the plan, keeping every commit made so far."""
        LOG.error("%s (%d unit(s) committed before the failure)", error, report.committed_units)
        report.fatal_error = error
        self.state = EngineState.ABORTED
        report.state = self.state

        # Drop partial staging; HEAD and the commits already made stay as they are
        try:
            head = get_head_commit(self.repo_root)
            reset_index(self.repo_root, get_commit_tree(self.repo_root, head) if head else None)
        except GitError as e:
            LOG.error("Could not reset the index after the failure: %s", e)
        return report

    def _warn(self, report: ApplyReport, kind: WarningKind, detail: str, unit_index: int) -> None:
        LOG.warning("%s: %s", kind.value, detail)
        report.warnings.append(ApplyWarning(kind=kind, detail=detail, unit_index=unit_index))

    def _apply_unit(
        self,
        index: int,
        unit: CommitUnit,
        head: Optional[str],
        inventory: dict[str, Hunk],
        report: ApplyReport,
    ) -> Optional[str]:
        """Run one unit through the state machine.

        Returns:
            The new commit id, or None if the unit staged nothing.

        Raises:
            RepositoryStateError: If the index or status cannot be handled.
            ObjectWriteError: If the tree, commit or ref cannot be written.
        """
        self.state = EngineState.RESET_INDEX
        if head is None:
            baseline_tree = get_empty_tree(self.repo_root)
            reset_index(self.repo_root, None)
        else:
            baseline_tree = get_commit_tree(self.repo_root, head)
            reset_index(self.repo_root, baseline_tree)

        self.state = EngineState.POPULATE_INDEX
        if unit.is_hunk_mode:
            self._stage_hunks(index, unit, baseline_tree, inventory, report)
        else:
            self._stage_files(index, unit, report)

        self.state = EngineState.WRITE_TREE
        tree = write_tree(self.repo_root)
        if tree == baseline_tree:
            return None

        self.state = EngineState.COMMIT
        if self._signature is None:
            self._signature = resolve_signature(self.repo_root)
        message = format_commit_message(unit.message, self.commit_options)
        parents = [head] if head else []
        commit = commit_tree(self.repo_root, tree, parents, message, signature=self._signature)
        update_head(self.repo_root, commit, head, f"hunkplan: {message.splitlines()[0]}")
        LOG.info("Created commit %s", commit[:12])
        return commit

    def _stage_files(self, index: int, unit: CommitUnit, report: ApplyReport) -> None:
        """Whole-file mode: stage every listed path according to its status."""
        for path in unit.files:
            changes = get_worktree_changes(self.repo_root, [path])
            if not changes:
                self._warn(
                    report,
                    WarningKind.PATH_STATUS_MISMATCH,
                    f"{path}: no outstanding change against HEAD",
                    index,
                )
                continue

            for file_path, code in sorted(changes.items()):
                if code in ("?", "M", "A"):
                    add_to_index(self.repo_root, file_path)
                elif code == "D":
                    remove_from_index(self.repo_root, file_path)
                elif code == "T":
                    remove_from_index(self.repo_root, file_path)
                    add_to_index(self.repo_root, file_path)
                else:
                    self._warn(
                        report,
                        WarningKind.PATH_STATUS_MISMATCH,
                        f"{file_path}: unsupported status '{code}'",
                        index,
                    )

    def _stage_hunks(
        self,
        index: int,
        unit: CommitUnit,
        baseline_tree: str,
        inventory: dict[str, Hunk],
        report: ApplyReport,
    ) -> None:
        """Hunk mode: re-derive hunks for the unit's files and stage the selected ones."""
        requested: dict[str, list[tuple[str, Hunk]]] = {}
        for token in unit.hunk_refs:
            try:
                path, ordinal = parse_hunk_token(token)
            except ValueError as e:
                self._warn(report, WarningKind.HUNK_MATCH_MISS, str(e), index)
                continue

            wanted = inventory.get(format_hunk_token(path, ordinal))
            if wanted is None:
                self._warn(
                    report,
                    WarningKind.HUNK_MATCH_MISS,
                    f"{token}: not a hunk of the diff the plan was built from",
                    index,
                )
                continue
            requested.setdefault(path, []).append((token, wanted))

        if not requested:
            return

        status = classify_status(self.repo_root)
        current = extract(
            self.repo_root,
            baseline_tree,
            self.truncate_patterns,
            status=status,
            paths=sorted(requested),
        )
        current_by_path = {f.path: f for f in current}

        for path, wanted_hunks in requested.items():
            working_file = current_by_path.get(path)
            used: set[int] = set()
            selected: list[tuple[str, Hunk]] = []

            for token, wanted in wanted_hunks:
                match = _find_match(working_file.hunks, wanted, used) if working_file else None
                if match is None:
                    self._warn(
                        report,
                        WarningKind.HUNK_MATCH_MISS,
                        f"{token}: no matching hunk in the current diff",
                        index,
                    )
                    continue
                used.add(match.ordinal)
                selected.append((token, match))

            if not selected:
                continue

            if working_file.is_untracked:
                # The synthesized hunk always covers the whole file
                add_to_index(self.repo_root, path)
                continue

            patch = build_file_patch(working_file, [hunk for _, hunk in selected])
            try:
                apply_patch_to_index(self.repo_root, patch)
            except GitError as e:
                for token, _ in selected:
                    self._warn(
                        report,
                        WarningKind.HUNK_MATCH_MISS,
                        f"{token}: patch did not apply: {e}",
                        index,
                    )


def apply_plan(
    repo_root: Path,
    plan: CommitPlan,
    reference: Optional[list[WorkingTreeFile]] = None,
    truncate_patterns: Optional[list[str]] = None,
    commit_options: Optional[CommitOptions] = None,
) -> ApplyReport:
    """Apply a plan with a fresh StagingEngine.

    Args:
        repo_root: Repository root path
        plan: The plan to apply
        reference: Extraction pass the plan was built from (re-extracted if None)
        truncate_patterns: Truncate patterns used for extraction
        commit_options: Commit message options

    Returns:
        ApplyReport describing what was committed
    """
    engine = StagingEngine(repo_root, truncate_patterns=truncate_patterns, commit_options=commit_options)
    return engine.apply(plan, reference=reference)
