"""lfstrack Git integration.

- GitRepository: repository discovery, version check and tracked file listing
- install_hooks: pre-push hook installation
"""

from .hooks import PRE_PUSH_HOOK, install_hooks
from .repository import (
    EnumerationError,
    GitError,
    GitRepository,
    GitVersionError,
    NotARepositoryError,
    NotAWorkTreeError,
)

__all__ = [
    "GitRepository",
    "GitError",
    "GitVersionError",
    "NotARepositoryError",
    "NotAWorkTreeError",
    "EnumerationError",
    "install_hooks",
    "PRE_PUSH_HOOK",
]
