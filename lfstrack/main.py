#!/usr/bin/env python3
"""Track command for lfstrack.

This module handles one invocation of the track command:
- Git version and repository checks
- pre-push hook installation
- Rule file discovery and the known pattern index
- Listing (no patterns) or reconciliation (patterns given)
- Mapping failures to exit statuses

Example:
    >>> from lfstrack.main import run_track
    >>> run_track(["*.psd"], TrackOptions(lockable=True), logger)
    0
"""

import os
from typing import Optional, Sequence

from lfstrack.core.constants import ErrorCode, ExitStatus, Messages, TrackOptions
from lfstrack.core.validators import ValidationError, validate_pattern
from lfstrack.git.hooks import install_hooks
from lfstrack.git.repository import (
    GitError,
    GitRepository,
    NotARepositoryError,
    NotAWorkTreeError,
)
from lfstrack.infrastructure.logger import Logger, get_logger
from lfstrack.rules.engine import ReconcileEngine, RuleFileError
from lfstrack.rules.index import KnownPatternIndex
from lfstrack.rules.locator import DiscoveryError, locate


class OutsideWorkTreeError(Exception):
    """The current directory is not below the working tree root."""

    def __init__(self, cwd: str, root: str):
        super().__init__(Messages.OUTSIDE_WORK_TREE.format(cwd=cwd, root=root))
        self.error_code = ErrorCode.ENVIRONMENT


def relative_to_work_tree(cwd: str, work_tree: str) -> str:
    """Return ``cwd`` relative to ``work_tree``.

    Raises:
        OutsideWorkTreeError: If cwd is not inside the working tree
    """
    rel = os.path.relpath(cwd, work_tree)
    if rel == os.pardir or rel.startswith(os.pardir + os.sep):
        raise OutsideWorkTreeError(cwd, work_tree)
    return rel


def list_known_patterns(known: KnownPatternIndex, logger: Logger) -> None:
    """Print every declared pattern with its lockable flag and source."""
    for line in known.listing():
        logger.info(line)


def run_track(
    patterns: Sequence[str],
    options: TrackOptions,
    logger: Optional[Logger] = None,
    repository: Optional[GitRepository] = None,
    cwd: Optional[str] = None,
) -> int:
    """Run the track command.

    With no patterns the known patterns are listed and nothing is changed.
    Otherwise the patterns are merged into the current directory's
    .gitattributes and previously committed matches are refreshed.

    Args:
        patterns: Requested patterns, relative to cwd
        options: Lockable / dry-run / verbose options
        logger: Output for all user-visible lines
        repository: Git access (defaults to the repository at cwd)
        cwd: Working directory (defaults to the process cwd)

    Returns:
        Process exit status
    """
    logger = logger or get_logger()
    cwd = os.path.realpath(cwd or os.getcwd())
    repository = repository or GitRepository(cwd)

    try:
        repository.require_version()

        try:
            git_dir = os.path.realpath(repository.git_dir())
            work_tree = os.path.realpath(repository.work_tree())
        except (NotARepositoryError, NotAWorkTreeError) as e:
            logger.error(str(e))
            return ExitStatus.NOT_A_REPOSITORY

        install_hooks(git_dir, force=False, logger=logger)

        rule_files = locate(work_tree, git_dir)
        logger.debug(f"Found {len(rule_files)} attribute files")
        known = KnownPatternIndex.build(rule_files, work_tree, git_dir, logger)

        if not patterns:
            list_known_patterns(known, logger)
            return ExitStatus.OK

        for pattern in patterns:
            validate_pattern(pattern)

        cwd_relative = relative_to_work_tree(cwd, work_tree)
        engine = ReconcileEngine(repository, options, logger=logger, work_dir=cwd)
        engine.reconcile(patterns, cwd_relative, known)
        return ExitStatus.OK

    except (ValidationError, RuleFileError) as e:
        logger.error(str(e))
        return ExitStatus.ERROR

    except (OutsideWorkTreeError, DiscoveryError, GitError) as e:
        logger.error(str(e))
        return ExitStatus.FATAL
