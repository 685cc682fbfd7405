#!/usr/bin/env python3
"""Tests for rule file discovery."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from lfstrack.rules.locator import DiscoveryError, locate, repo_attributes_file


def make_attributes(directory: Path) -> str:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / ".gitattributes"
    path.write_text("")
    return str(path)


class TestLocate:
    """Tests for locate."""

    def test_empty_tree(self, work_tree):
        """Test a tree without rule files."""
        assert locate(str(work_tree), str(work_tree / ".git")) == []

    def test_deeper_files_first(self, work_tree):
        """Test files are ordered deepest first."""
        root = make_attributes(work_tree)
        a = make_attributes(work_tree / "a")
        ab = make_attributes(work_tree / "a" / "b")

        assert locate(str(work_tree), str(work_tree / ".git")) == [ab, a, root]

    def test_same_depth_keeps_lexical_order(self, work_tree):
        """Test ties are broken by discovery order."""
        z = make_attributes(work_tree / "z")
        a = make_attributes(work_tree / "a")
        m_deep = make_attributes(work_tree / "m" / "n")

        assert locate(str(work_tree), str(work_tree / ".git")) == [m_deep, a, z]

    def test_repo_attributes_last(self, work_tree):
        """Test the repository-wide file follows all tree files."""
        root = make_attributes(work_tree)
        sub = make_attributes(work_tree / "sub")
        info = work_tree / ".git" / "info" / "attributes"
        info.write_text("*.bin filter=lfs diff=lfs merge=lfs -text\n")

        assert locate(str(work_tree), str(work_tree / ".git")) == [sub, root, str(info)]

    def test_repo_attributes_directory_ignored(self, work_tree):
        """Test a directory named like the repository-wide file is skipped."""
        (work_tree / ".git" / "info" / "attributes").mkdir()

        assert locate(str(work_tree), str(work_tree / ".git")) == []

    def test_directory_named_gitattributes_ignored(self, work_tree):
        """Test only regular files are collected."""
        (work_tree / "x" / ".gitattributes").mkdir(parents=True)

        assert locate(str(work_tree), str(work_tree / ".git")) == []

    def test_walk_error_is_fatal(self, work_tree):
        """Test a walk failure raises DiscoveryError."""

        def failing_walk(top, onerror=None):
            onerror(PermissionError(13, "Permission denied", str(work_tree / "locked")))
            return iter(())

        with patch("lfstrack.rules.locator.os.walk", side_effect=failing_walk):
            with pytest.raises(DiscoveryError, match="locked"):
                locate(str(work_tree), str(work_tree / ".git"))

    def test_missing_tree_is_fatal(self, tmp_path):
        """Test walking a missing root fails."""
        with pytest.raises(DiscoveryError):
            locate(str(tmp_path / "missing"), str(tmp_path / "missing" / ".git"))


class TestRepoAttributesFile:
    """Tests for repo_attributes_file."""

    def test_path(self):
        """Test the repository-wide file lives under info/."""
        assert repo_attributes_file("/r/.git") == os.path.join("/r/.git", "info", "attributes")
