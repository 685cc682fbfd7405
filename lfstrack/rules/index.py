#!/usr/bin/env python3
"""Index of the patterns already tracked by every rule file in a tree.

The index is rebuilt on each invocation from the files returned by
``locator.locate``. Each entry records the pattern expressed relative to the
working tree root, the rule file that declared it and its lockable flag.

Entries are kept in rule file precedence order, then line order. Nothing is
de-duplicated: a pattern declared in two files appears twice, and lookups
return the first (most specific) declaration.

Example:
    >>> index = KnownPatternIndex.build(locate(root, git_dir), root, git_dir)
    >>> index.find("assets/*.psd", lockable=True)
    PatternDescriptor(path='assets/*.psd', source='assets/.gitattributes', lockable=True)
"""

import os
import posixpath
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from lfstrack.core.constants import Messages
from lfstrack.infrastructure.logger import Logger, get_logger
from lfstrack.rules.codec import PatternDescriptor, parse_line, split_rule_lines
from lfstrack.rules.locator import repo_attributes_file


def to_posix(path: str) -> str:
    """Convert an OS path to forward slashes."""
    return path.replace(os.sep, "/")


def tree_path(rel_dir: str, pattern: str) -> str:
    """Express ``pattern`` relative to the tree root.

    Args:
        rel_dir: Directory of the declaring file (or cwd) relative to the root
        pattern: Pattern as written in that directory

    Returns:
        Normalized, forward-slash tree-relative pattern
    """
    rel_dir = to_posix(rel_dir)
    if rel_dir in ("", "."):
        return posixpath.normpath(pattern)
    return posixpath.normpath(f"{rel_dir}/{pattern}")


class KnownPatternIndex:
    """Read-only, ordered collection of declared patterns."""

    def __init__(self, entries: Iterable[PatternDescriptor] = ()):
        self._entries: Tuple[PatternDescriptor, ...] = tuple(entries)

    @classmethod
    def build(
        cls,
        rule_files: Sequence[str],
        work_tree: str,
        git_dir: str,
        logger: Optional[Logger] = None,
    ) -> "KnownPatternIndex":
        """Parse every rule file into an index.

        Unreadable files are skipped.

        Args:
            rule_files: Absolute rule file paths in precedence order
            work_tree: Absolute path of the working tree root
            git_dir: Absolute path of the git metadata directory

        Returns:
            The populated index
        """
        logger = logger or get_logger()
        repo_attributes = os.path.normpath(repo_attributes_file(git_dir))
        entries: List[PatternDescriptor] = []

        for path in rule_files:
            source = to_posix(os.path.relpath(path, work_tree))
            if os.path.normpath(path) == repo_attributes:
                rel_dir = ""
            else:
                rel_dir = posixpath.dirname(source)

            try:
                with open(
                    path, "r", encoding="utf-8", errors="surrogateescape", newline=""
                ) as f:
                    lines = split_rule_lines(f.read())
            except OSError as e:
                logger.debug(f"Skipping unreadable rule file {source}: {e}")
                continue

            for line in lines:
                descriptor = parse_line(line)
                if descriptor is None:
                    continue
                entries.append(
                    PatternDescriptor(
                        path=tree_path(rel_dir, descriptor.path),
                        source=source,
                        lockable=descriptor.lockable,
                    )
                )

        return cls(entries)

    def find(self, path: str, lockable: bool) -> Optional[PatternDescriptor]:
        """Return the first declaration of ``(path, lockable)``, if any."""
        for entry in self._entries:
            if entry.path == path and entry.lockable == lockable:
                return entry
        return None

    def listing(self) -> List[str]:
        """Render the index as the lines printed by a bare track command."""
        lines = [Messages.LISTING]
        for entry in self._entries:
            template = Messages.LISTING_ENTRY_LOCKABLE if entry.lockable else Messages.LISTING_ENTRY
            lines.append(template.format(path=entry.path, source=entry.source))
        return lines

    def __iter__(self) -> Iterator[PatternDescriptor]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
