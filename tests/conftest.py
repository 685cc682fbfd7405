"""Shared pytest fixtures for lfstrack tests."""
import io
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from lfstrack.core.constants import TrackOptions
from lfstrack.git.repository import EnumerationError
from lfstrack.infrastructure.logger import Logger, LogLevel


class FakeGit:
    """Stand-in for GitRepository with canned answers."""

    def __init__(self, work_tree: Path, tracked: Optional[Dict[str, List[str]]] = None):
        self.work_tree_path = str(work_tree)
        self.git_dir_path = str(work_tree / ".git")
        self.tracked = tracked or {}
        self.failing: Dict[str, str] = {}
        self.calls: List[str] = []

    def require_version(self) -> None:
        pass

    def git_dir(self) -> str:
        return self.git_dir_path

    def work_tree(self) -> str:
        return self.work_tree_path

    def tracked_files(self, pattern: str) -> List[str]:
        self.calls.append(pattern)
        if pattern in self.failing:
            raise EnumerationError(pattern, self.failing[pattern])
        return list(self.tracked.get(pattern, []))


@pytest.fixture
def work_tree(tmp_path: Path) -> Path:
    """Create an empty working tree with a git metadata directory."""
    root = tmp_path / "repo"
    (root / ".git" / "info").mkdir(parents=True)
    (root / ".git" / "hooks").mkdir()
    return root


@pytest.fixture
def fake_git(work_tree: Path) -> FakeGit:
    """Git collaborator bound to the work_tree fixture."""
    return FakeGit(work_tree)


@pytest.fixture
def log_output() -> io.StringIO:
    """Buffer receiving every line the test logger prints."""
    return io.StringIO()


@pytest.fixture
def logger(log_output: io.StringIO) -> Logger:
    """Logger writing bare messages into log_output."""
    return Logger(
        "lfstrack.test",
        level=LogLevel.DEBUG,
        handlers=[Logger.create_console_handler(log_output)],
    )


@pytest.fixture
def options() -> TrackOptions:
    """Default track options."""
    return TrackOptions()



@pytest.fixture
def fake_git_factory():
    """Build FakeGit instances for extra working trees."""
    return FakeGit
