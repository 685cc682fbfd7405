#!/usr/bin/env python3
"""Reconciliation of requested patterns with the cwd's .gitattributes.

This module provides the track operation itself:
- Skipping patterns already declared with the same lockable flag
- Rewriting changed pattern lines in place
- Appending new patterns after all existing lines
- Refreshing the timestamps of files git already tracks under a new pattern
- Vetoing the refresh for patterns that match forbidden files

Unrelated lines are copied through unchanged, each terminated by exactly one
newline. A dry run rewrites the rule file like a normal run and only skips
touching files.

Example:
    >>> engine = ReconcileEngine(GitRepository(), TrackOptions(lockable=True))
    >>> outcome = engine.reconcile(["*.psd"], ".", known)
    >>> outcome.appended
    ['*.psd']
"""

import os
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from lfstrack.core.constants import ATTRIBUTES_FILE, ErrorCode, Messages, TrackOptions
from lfstrack.git.repository import EnumerationError, GitError, GitRepository
from lfstrack.infrastructure.logger import Logger, get_logger
from lfstrack.rules import blocklist
from lfstrack.rules.codec import line_key, render_line, split_rule_lines
from lfstrack.rules.index import KnownPatternIndex, tree_path


class RuleFileError(Exception):
    """The primary rule file could not be read or written."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.PERMISSION_DENIED):
        super().__init__(message)
        self.error_code = error_code


@dataclass
class ReconcileOutcome:
    """What a single reconciliation did."""

    already_supported: List[str] = field(default_factory=list)
    tracked: List[str] = field(default_factory=list)
    appended: List[str] = field(default_factory=list)
    conflicts: List[Tuple[str, str]] = field(default_factory=list)  # (pattern, file)
    touched: List[str] = field(default_factory=list)
    touch_failures: List[Tuple[str, str]] = field(default_factory=list)  # (file, reason)


def merge_rule_lines(
    lines: Sequence[str], pending: Mapping[str, str]
) -> Tuple[List[str], Dict[str, str]]:
    """Merge pending pattern lines into existing rule file lines.

    Args:
        lines: Existing lines without terminators
        pending: Raw pattern -> rendered line

    Returns:
        The rewritten lines (newline-terminated) and the pending entries
        that matched no existing line, in their original order
    """
    remaining = dict(pending)
    merged = []
    for line in lines:
        key = line_key(line)
        if key is not None and key in remaining:
            merged.append(remaining.pop(key))
        else:
            merged.append(line + "\n")
    return merged, remaining


class ReconcileEngine:
    """Apply a track request to the rule file in the working directory."""

    def __init__(
        self,
        git: GitRepository,
        options: TrackOptions,
        logger: Optional[Logger] = None,
        work_dir: Optional[str] = None,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize the engine.

        Args:
            git: Source of the files git already tracks under a pattern
            options: Options for this invocation
            logger: Output for progress, conflicts and errors
            work_dir: Directory holding the rule file to edit (defaults to cwd)
            clock: Time source for refreshed timestamps
        """
        self.git = git
        self.options = options
        self.logger = logger or get_logger()
        self.work_dir = os.path.abspath(work_dir or os.getcwd())
        self.rule_file = os.path.join(self.work_dir, ATTRIBUTES_FILE)
        self._clock = clock

    def reconcile(
        self, patterns: Sequence[str], cwd_relative: str, known: KnownPatternIndex
    ) -> ReconcileOutcome:
        """Track ``patterns`` in the working directory's rule file.

        Args:
            patterns: Requested patterns, relative to the working directory
            cwd_relative: Working directory relative to the tree root
            known: Patterns already declared anywhere in the tree

        Returns:
            Outcome of the reconciliation

        Raises:
            RuleFileError: If the rule file cannot be read or written
            EnumerationError: If tracked files cannot be listed for a pattern
        """
        outcome = ReconcileOutcome()
        pending = self._pending_changes(patterns, cwd_relative, known, outcome)
        if not pending:
            return outcome

        merged, remaining = merge_rule_lines(self._read_rule_file(), pending)
        self._write_rule_file(merged + list(remaining.values()))
        outcome.appended = list(remaining)

        for pattern in remaining:
            self._refresh_tracked_files(pattern, outcome)

        return outcome

    def _pending_changes(
        self,
        patterns: Sequence[str],
        cwd_relative: str,
        known: KnownPatternIndex,
        outcome: ReconcileOutcome,
    ) -> Dict[str, str]:
        lockable = self.options.lockable
        pending: Dict[str, str] = {}

        for pattern in patterns:
            if known.find(tree_path(cwd_relative, pattern), lockable) is not None:
                self.logger.info(Messages.ALREADY_SUPPORTED.format(pattern=pattern))
                outcome.already_supported.append(pattern)
                continue

            pending[pattern] = render_line(pattern, lockable)
            self.logger.info(Messages.TRACKING.format(pattern=pattern))
            outcome.tracked.append(pattern)

        return pending

    def _read_rule_file(self) -> List[str]:
        try:
            with open(
                self.rule_file, "r", encoding="utf-8", errors="surrogateescape", newline=""
            ) as f:
                return split_rule_lines(f.read())
        except FileNotFoundError:
            return []
        except OSError as e:
            raise RuleFileError(Messages.READ_ERROR) from e

    def _write_rule_file(self, lines: Sequence[str]) -> None:
        try:
            f = open(self.rule_file, "w", encoding="utf-8", errors="surrogateescape", newline="")
        except OSError as e:
            raise RuleFileError(Messages.OPEN_ERROR) from e

        with f:
            try:
                f.writelines(lines)
            except OSError as e:
                raise RuleFileError(f"Error writing .gitattributes file: {e}") from e

    def _refresh_tracked_files(self, pattern: str, outcome: ReconcileOutcome) -> None:
        """Touch files git already tracks under a newly added pattern."""
        verbose = self.options.verbose

        if verbose:
            self.logger.info(Messages.SEARCHING.format(pattern=pattern))

        try:
            files = self.git.tracked_files(pattern)
        except EnumerationError:
            raise
        except GitError as e:
            raise EnumerationError(pattern, str(e)) from e

        if verbose:
            self.logger.info(Messages.FOUND.format(count=len(files), pattern=pattern))

        blocked = False
        for name in files:
            if blocklist.check(name) is not None:
                self.logger.warning(Messages.FORBIDDEN.format(pattern=pattern, file=name))
                outcome.conflicts.append((pattern, name))
                blocked = True

        if blocked:
            return

        for name in files:
            if verbose or self.options.dry_run:
                self.logger.info(Messages.TOUCHING.format(file=name))

            if self.options.dry_run:
                continue

            now = self._clock()
            try:
                os.utime(os.path.join(self.work_dir, name), (now, now))
            except OSError as e:
                self.logger.error(Messages.TOUCH_ERROR.format(file=name, reason=e.strerror or e))
                outcome.touch_failures.append((name, str(e)))
                continue

            outcome.touched.append(name)
