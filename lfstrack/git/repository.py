#!/usr/bin/env python3
"""Access to the git repository the track command runs in.

Everything here shells out to the ``git`` executable:
- locating the git metadata directory and the working tree root
- checking the installed git version
- listing files already tracked by git under a pattern

Example:
    >>> repo = GitRepository(cwd="/repo/assets")
    >>> repo.work_tree()
    '/repo'
    >>> repo.tracked_files("*.psd")
    ['logo.psd', 'icons/app.psd']
"""

import os
import posixpath
import re
import subprocess
from typing import List, Optional, Sequence, Tuple

from lfstrack.core.constants import MIN_GIT_VERSION, ErrorCode, Messages


class GitError(Exception):
    """Base exception for failed git interactions."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        super().__init__(message)
        self.error_code = error_code


class NotARepositoryError(GitError):
    """The current directory is not inside a git repository."""

    def __init__(self, message: str = Messages.NOT_A_REPOSITORY):
        super().__init__(message, ErrorCode.ENVIRONMENT)


class NotAWorkTreeError(GitError):
    """The current directory is inside a repository but not a work tree."""

    def __init__(self, message: str = Messages.NOT_A_WORK_TREE):
        super().__init__(message, ErrorCode.ENVIRONMENT)


class GitVersionError(GitError):
    """The installed git is missing or too old."""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.DEPENDENCY_ERROR)


class EnumerationError(GitError):
    """Listing the tracked files for a pattern failed."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            Messages.ENUMERATION_ERROR.format(pattern=pattern, reason=reason),
            ErrorCode.INTERNAL_ERROR,
        )
        self.pattern = pattern
        self.reason = reason


def parse_version(output: str) -> Tuple[int, ...]:
    """Extract the numeric version from ``git --version`` output.

    Args:
        output: e.g. "git version 2.39.2 (Apple Git-143)"

    Returns:
        Version tuple, e.g. (2, 39, 2)

    Raises:
        GitVersionError: If no version number is present
    """
    match = re.search(r"(\d+)\.(\d+)(?:\.(\d+))?", output)
    if not match:
        raise GitVersionError(f"Unable to determine git version from {output.strip()!r}")
    return tuple(int(part) for part in match.groups(default="0"))


def sanitize_pattern(pattern: str) -> Tuple[str, bool]:
    """Prepare a pattern for ``git ls-files``.

    ``git ls-files`` does not accept a leading slash, so a single one is
    removed. A removed slash on a wildcard pattern means only files directly
    in the current directory may match.

    Returns:
        The pattern to pass to git, and whether it is a root wildcard
    """
    if pattern.startswith("/"):
        safe = pattern[1:]
        return safe, "*" in safe
    return pattern, False


class GitRepository:
    """Thin wrapper around the git executable for one directory."""

    def __init__(self, cwd: Optional[str] = None, git: str = "git"):
        """Initialize repository access.

        Args:
            cwd: Directory to run git in (defaults to the process cwd)
            git: git executable name or path
        """
        self.cwd = os.path.abspath(cwd or os.getcwd())
        self.git = git

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.git, *args],
                cwd=self.cwd,
                capture_output=True,
                encoding="utf-8",
                errors="surrogateescape",
                check=False,
            )
        except FileNotFoundError:
            raise GitVersionError(f"git executable not found: {self.git}")
        except OSError as e:
            raise GitError(f"Unable to run {self.git}: {e}")

    def version(self) -> Tuple[int, ...]:
        """Return the installed git version."""
        result = self._run(["--version"])
        if result.returncode != 0:
            raise GitVersionError(f"git --version failed: {result.stderr.strip()}")
        return parse_version(result.stdout)

    def require_version(self, minimum: Tuple[int, ...] = MIN_GIT_VERSION) -> None:
        """Fail unless git is at least ``minimum``.

        Raises:
            GitVersionError: If git is older than required
        """
        found = self.version()
        if found < minimum:
            wanted = ".".join(str(part) for part in minimum)
            have = ".".join(str(part) for part in found)
            raise GitVersionError(f"git version >= {wanted} is required, found {have}")

    def git_dir(self) -> str:
        """Return the absolute git metadata directory.

        Raises:
            NotARepositoryError: Outside of any repository
        """
        result = self._run(["rev-parse", "--git-dir"])
        path = result.stdout.strip()
        if result.returncode != 0 or not path:
            raise NotARepositoryError()
        return os.path.normpath(os.path.join(self.cwd, path))

    def work_tree(self) -> str:
        """Return the absolute working tree root.

        Raises:
            NotAWorkTreeError: Inside a bare repository or the git directory
        """
        result = self._run(["rev-parse", "--show-toplevel"])
        path = result.stdout.strip()
        if result.returncode != 0 or not path:
            raise NotAWorkTreeError()
        return os.path.normpath(path)

    def tracked_files(self, pattern: str) -> List[str]:
        """List files in the index matching ``pattern``.

        Paths are relative to the repository's cwd, as git reports them.

        Args:
            pattern: Pattern as written in the cwd's .gitattributes

        Returns:
            Matching file names

        Raises:
            EnumerationError: If git ls-files fails
        """
        safe_pattern, root_wildcard = sanitize_pattern(pattern)
        result = self._run(["ls-files", "--cached", "-z", "--", safe_pattern])
        if result.returncode != 0:
            raise EnumerationError(pattern, result.stderr.strip() or f"exit status {result.returncode}")

        files = []
        for name in result.stdout.split("\0"):
            if not name:
                continue
            if root_wildcard and posixpath.dirname(name) != "":
                continue
            files.append(name)
        return files
