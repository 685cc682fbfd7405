"""Forbidden file names that a tracking pattern may never touch."""

from typing import Iterable, Optional

from lfstrack.core.constants import PREFIX_BLOCKLIST


def check(name: str, prefixes: Iterable[str] = PREFIX_BLOCKLIST) -> Optional[str]:
    """Return the blocklist prefix preventing ``name`` from being tracked.

    The base name is prefix-matched; a parent directory must equal a prefix
    exactly. ``docs/.gitignore`` and ``.git/info/foo.txt`` are refused while
    ``.github/logo.png`` is not.

    Args:
        name: Tree- or cwd-relative file name as reported by git
        prefixes: Forbidden base name prefixes

    Returns:
        The matching prefix, or None if the file may be tracked
    """
    prefixes = tuple(prefixes)
    parts = [p for p in name.replace("\\", "/").split("/") if p and p not in (".", "..")]
    if not parts:
        return None

    base = parts[-1]
    for prefix in prefixes:
        if base.startswith(prefix):
            return prefix

    for part in reversed(parts[:-1]):
        if part in prefixes:
            return part
    return None
