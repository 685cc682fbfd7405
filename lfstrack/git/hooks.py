"""Installation of the Git LFS pre-push hook."""

import os
from typing import Optional

from lfstrack.infrastructure.logger import Logger, get_logger

PRE_PUSH = "pre-push"

PRE_PUSH_HOOK = (
    "#!/bin/sh\n"
    'command -v git-lfs >/dev/null 2>&1 || { echo >&2 "\\nThis repository is configured '
    "for Git LFS but 'git-lfs' was not found on your path. If you no longer wish to use "
    'Git LFS, remove this hook by deleting .git/hooks/pre-push.\\n"; exit 2; }\n'
    'git lfs pre-push "$@"\n'
)

# Earlier hook bodies written by Git LFS, safe to overwrite
UPGRADEABLE_HOOKS = (
    "#!/bin/sh\ngit lfs push --stdin $*\n",
    '#!/bin/sh\ngit lfs push --stdin "$@"\n',
    '#!/bin/sh\ngit lfs pre-push "$@"\n',
)


def hook_path(git_dir: str, name: str = PRE_PUSH) -> str:
    return os.path.join(git_dir, "hooks", name)


def install_hooks(git_dir: str, force: bool = False, logger: Optional[Logger] = None) -> bool:
    """Install the pre-push hook if it is missing or one of ours.

    A hook with foreign contents is left alone unless ``force`` is set.

    Args:
        git_dir: Absolute git metadata directory
        force: Overwrite any existing hook
        logger: Logger for conflicts and write failures

    Returns:
        True if the hook is installed and current
    """
    logger = logger or get_logger()
    path = hook_path(git_dir)

    existing = None
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            existing = f.read()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Unable to read hook {path}: {e}")
        return False

    if existing == PRE_PUSH_HOOK:
        return True

    if existing is not None and not force and existing not in UPGRADEABLE_HOOKS:
        logger.warning(f"Hook already exists: {PRE_PUSH}\n\n{existing.rstrip()}\n")
        return False

    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(PRE_PUSH_HOOK)
        os.chmod(path, 0o755)
    except OSError as e:
        logger.error(f"Error installing {PRE_PUSH} hook: {e}")
        return False

    logger.debug(f"Installed {PRE_PUSH} hook", path=path)
    return True
