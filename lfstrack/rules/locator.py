#!/usr/bin/env python3
"""Discovery of the rule files that apply to a working tree.

Two kinds of rule files are found:
- every ``.gitattributes`` file in the working tree
- the repository-wide ``<git-dir>/info/attributes`` file

Files are returned in precedence order: the deeper a ``.gitattributes``
file sits in the tree, the earlier it is returned, so a subdirectory's
declaration of a pattern is seen before the root's. Files at the same depth
keep their (lexical) discovery order. The repository-wide file comes last.

Example:
    >>> locate("/repo", "/repo/.git")
    ['/repo/a/b/.gitattributes', '/repo/a/.gitattributes', '/repo/.gitattributes']
"""

import os
from dataclasses import dataclass
from typing import List

from lfstrack.core.constants import ATTRIBUTES_FILE, REPO_ATTRIBUTES_PATH, ErrorCode


class DiscoveryError(Exception):
    """Raised when the working tree cannot be walked completely."""

    def __init__(self, message: str, error_code: ErrorCode = ErrorCode.INTERNAL_ERROR):
        super().__init__(message)
        self.error_code = error_code


@dataclass(frozen=True)
class _Candidate:
    path: str
    depth: int
    order: int


def repo_attributes_file(git_dir: str) -> str:
    """Path of the repository-wide attributes file."""
    return os.path.join(git_dir, *REPO_ATTRIBUTES_PATH)


def _raise_walk_error(err: OSError) -> None:
    raise DiscoveryError(f"Error walking working tree at {err.filename}: {err.strerror}") from err


def walk_attribute_files(work_tree: str) -> List[str]:
    """Walk the working tree and return every ``.gitattributes`` file.

    Directories and files are visited in lexical order. The result is sorted
    by depth, deepest first, with ties kept in visiting order.

    Raises:
        DiscoveryError: If any directory cannot be read
    """
    candidates: List[_Candidate] = []

    for dirpath, dirnames, filenames in os.walk(work_tree, onerror=_raise_walk_error):
        dirnames.sort()
        if ATTRIBUTES_FILE not in filenames:
            continue

        path = os.path.join(dirpath, ATTRIBUTES_FILE)
        if not os.path.isfile(path):
            continue

        rel_dir = os.path.relpath(dirpath, work_tree)
        depth = 0 if rel_dir == os.curdir else len(rel_dir.split(os.sep))
        candidates.append(_Candidate(path=path, depth=depth, order=len(candidates)))

    candidates.sort(key=lambda c: (-c.depth, c.order))
    return [c.path for c in candidates]


def locate(work_tree: str, git_dir: str) -> List[str]:
    """Return all rule files for a working tree in precedence order.

    Args:
        work_tree: Absolute path of the working tree root
        git_dir: Absolute path of the git metadata directory

    Returns:
        Absolute rule file paths, most specific first

    Raises:
        DiscoveryError: If the working tree walk fails
    """
    paths = walk_attribute_files(work_tree)

    repo_attributes = repo_attributes_file(git_dir)
    if os.path.isfile(repo_attributes):
        paths.append(repo_attributes)

    return paths
