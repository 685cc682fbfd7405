"""
lfstrack Foundation: Constants and Type Definitions

This module provides system-wide constants, error codes, exit statuses and the
fixed tokens of the Git LFS attribute line format.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, TypeAlias

# Version information
LFSTRACK_VERSION = "1.0.0"

# Minimum git version able to run the LFS filters
MIN_GIT_VERSION: Tuple[int, int, int] = (1, 8, 2)


class ErrorCode(IntEnum):
    """Standardized error codes for lfstrack operations."""

    SUCCESS = 0  # Operation completed successfully
    INVALID_INPUT = 1  # Bad pattern, invalid configuration
    NOT_FOUND = 2  # File or resource doesn't exist
    PERMISSION_DENIED = 3  # Insufficient permissions
    CONFLICT = 4  # Pattern matches a forbidden file
    DEPENDENCY_ERROR = 5  # git missing or too old
    INTERNAL_ERROR = 6  # Bug in lfstrack
    ENVIRONMENT = 7  # Not a repository / not in a work tree


class ExitStatus(IntEnum):
    """Process exit statuses returned by the track command."""

    OK = 0
    ERROR = 1  # Reported error, nothing mutated
    FATAL = 2  # Aborted part way
    NOT_A_REPOSITORY = 128


# Type aliases for clarity
Pattern: TypeAlias = str
TreePath: TypeAlias = str


class AttributeTokens:
    """Fixed tokens of a Git LFS attribute line."""

    FILTER = "filter=lfs"
    DIFF = "diff=lfs"
    MERGE = "merge=lfs"
    TEXT = "-text"
    LOCKABLE = "lockable"

    # Escape for literal spaces inside a pattern
    SPACE_ESCAPE = "[[:space:]]"

    # Appended to every rendered pattern
    SUFFIX = f"{FILTER} {DIFF} {MERGE} {TEXT}"


@dataclass(frozen=True)
class TrackOptions:
    """Options for one track invocation."""

    lockable: bool = False
    dry_run: bool = False  # Rewrite rule file but touch nothing
    verbose: bool = False


# Rule file names
ATTRIBUTES_FILE = ".gitattributes"
REPO_ATTRIBUTES_PATH = ("info", "attributes")

# Base name prefixes that may never be tracked
PREFIX_BLOCKLIST: Tuple[str, ...] = (".git", ".lfs")


class Messages:
    """User-visible message templates."""

    NOT_A_REPOSITORY = "Not a git repository."
    NOT_A_WORK_TREE = "This operation must be run in a work tree."
    OUTSIDE_WORK_TREE = 'Current directory "{cwd}" outside of git working directory "{root}".'
    LISTING = "Listing tracked paths"
    LISTING_ENTRY = "    {path} ({source})"
    LISTING_ENTRY_LOCKABLE = "    {path} [lockable] ({source})"
    ALREADY_SUPPORTED = "{pattern} already supported"
    TRACKING = "Tracking {pattern}"
    READ_ERROR = "Error reading .gitattributes file"
    OPEN_ERROR = "Error opening .gitattributes file"
    SEARCHING = "Searching for files matching pattern: {pattern}"
    FOUND = "Found {count} files previously added to Git matching pattern: {pattern}"
    ENUMERATION_ERROR = 'Error getting tracked files for "{pattern}": {reason}'
    FORBIDDEN = (
        "Pattern {pattern} matches forbidden file {file}. "
        "If you would like to track {file}, modify .gitattributes manually."
    )
    TOUCHING = "Git LFS: touching {file}"
    TOUCH_ERROR = 'Error marking "{file}" modified: {reason}'


class ConfigKey:
    """Configuration key constants."""

    TRACK = "track"
    LOGGING = "logging"

    LOCKABLE = "lockable"
    DRY_RUN = "dry_run"
    VERBOSE = "verbose"

    LEVEL = "level"
    FILE = "file"


# Default configuration values
DEFAULT_CONFIG = {
    ConfigKey.TRACK: {
        ConfigKey.LOCKABLE: False,
        ConfigKey.DRY_RUN: False,
        ConfigKey.VERBOSE: False,
    },
    ConfigKey.LOGGING: {
        ConfigKey.LEVEL: "INFO",
        ConfigKey.FILE: None,
    },
}
