#!/usr/bin/env python3
"""Tests for the track command entry point."""

import os
from unittest.mock import patch

from lfstrack.core.constants import ExitStatus, TrackOptions
from lfstrack.git.hooks import PRE_PUSH_HOOK
from lfstrack.git.repository import NotARepositoryError, NotAWorkTreeError
from lfstrack.main import OutsideWorkTreeError, relative_to_work_tree, run_track
from lfstrack.rules.locator import DiscoveryError

LFS = "filter=lfs diff=lfs merge=lfs -text"


class TestRelativeToWorkTree:
    """Tests for relative_to_work_tree."""

    def test_root(self, tmp_path):
        """Test the root itself is '.'."""
        assert relative_to_work_tree(str(tmp_path), str(tmp_path)) == "."

    def test_subdirectory(self, tmp_path):
        """Test a nested directory."""
        assert relative_to_work_tree(str(tmp_path / "a" / "b"), str(tmp_path)) == os.path.join("a", "b")

    def test_sibling_named_like_parent(self, tmp_path):
        """Test a directory starting with '..' in its name is inside."""
        assert relative_to_work_tree(str(tmp_path / "..data"), str(tmp_path)) == "..data"

    def test_outside(self, tmp_path):
        """Test a directory above the root is rejected."""
        try:
            relative_to_work_tree(str(tmp_path), str(tmp_path / "repo"))
        except OutsideWorkTreeError as e:
            assert "outside of git working directory" in str(e)
        else:
            raise AssertionError("expected OutsideWorkTreeError")


class TestRunTrack:
    """Tests for run_track."""

    def test_listing(self, work_tree, fake_git, logger, log_output):
        """Test no patterns lists known patterns without changes."""
        (work_tree / ".gitattributes").write_text(f"*.psd {LFS} lockable\n")
        (work_tree / "art").mkdir()
        (work_tree / "art" / ".gitattributes").write_text(f"*.png {LFS}\n")
        logger.set_level("INFO")

        status = run_track([], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.OK
        assert log_output.getvalue().splitlines() == [
            "Listing tracked paths",
            "    art/*.png (art/.gitattributes)",
            "    *.psd [lockable] (.gitattributes)",
        ]
        assert (work_tree / ".gitattributes").read_text() == f"*.psd {LFS} lockable\n"
        assert fake_git.calls == []

    def test_track_installs_hook_and_writes(self, work_tree, fake_git, logger, log_output):
        """Test tracking writes the rule file and installs the hook."""
        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.OK
        assert (work_tree / ".gitattributes").read_text() == f"*.bin {LFS}\n"
        assert (work_tree / ".git" / "hooks" / "pre-push").read_text() == PRE_PUSH_HOOK
        assert "Tracking *.bin" in log_output.getvalue()

    def test_subdirectory_cwd(self, work_tree, fake_git, logger):
        """Test the cwd's own rule file is edited and files are touched from there."""
        sub = work_tree / "sub"
        sub.mkdir()
        target = sub / "a.bin"
        target.write_text("x")
        os.utime(target, (1_000_000, 1_000_000))
        fake_git.tracked["*.bin"] = ["a.bin"]

        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(sub))

        assert status == ExitStatus.OK
        assert (sub / ".gitattributes").read_text() == f"*.bin {LFS}\n"
        assert not (work_tree / ".gitattributes").exists()
        assert target.stat().st_mtime > 1_000_000

    def test_not_a_repository(self, work_tree, fake_git, logger, log_output):
        """Test a missing repository exits with 128 before doing anything."""

        def no_repo():
            raise NotARepositoryError()

        fake_git.git_dir = no_repo

        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.NOT_A_REPOSITORY == 128
        assert log_output.getvalue() == "Not a git repository.\n"
        assert not (work_tree / ".gitattributes").exists()
        assert not (work_tree / ".git" / "hooks" / "pre-push").exists()

    def test_not_a_work_tree(self, work_tree, fake_git, logger, log_output):
        """Test a bare repository exits with 128."""

        def no_work_tree():
            raise NotAWorkTreeError()

        fake_git.work_tree = no_work_tree

        status = run_track([], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == 128
        assert log_output.getvalue() == "This operation must be run in a work tree.\n"

    def test_outside_work_tree(self, tmp_path, work_tree, fake_git, logger, log_output):
        """Test a cwd outside the working tree is fatal."""
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()

        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(elsewhere))

        assert status == ExitStatus.FATAL
        assert "outside of git working directory" in log_output.getvalue()
        assert not (elsewhere / ".gitattributes").exists()

    def test_invalid_pattern(self, work_tree, fake_git, logger, log_output):
        """Test an invalid pattern is reported without writing."""
        status = run_track(["ok.bin", "bad\nname"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.ERROR
        assert "line break" in log_output.getvalue()
        assert not (work_tree / ".gitattributes").exists()

    def test_enumeration_failure(self, work_tree, fake_git, logger, log_output):
        """Test a failed listing of tracked files is fatal."""
        fake_git.failing["*.bin"] = "boom"

        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.FATAL
        assert 'Error getting tracked files for "*.bin": boom' in log_output.getvalue()

    def test_rule_file_error(self, work_tree, fake_git, logger, log_output):
        """Test an unreadable rule file is reported."""
        (work_tree / ".gitattributes").mkdir()

        status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.ERROR
        assert "Error reading .gitattributes file" in log_output.getvalue()

    def test_discovery_error(self, work_tree, fake_git, logger, log_output):
        """Test a failed tree walk is fatal."""
        with patch("lfstrack.main.locate", side_effect=DiscoveryError("Error walking working tree")):
            status = run_track(["*.bin"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.FATAL
        assert "Error walking working tree" in log_output.getvalue()
        assert not (work_tree / ".gitattributes").exists()

    def test_blocked_pattern_still_succeeds(self, work_tree, fake_git, logger, log_output):
        """Test a blocklist conflict is reported but not fatal."""
        fake_git.tracked["*.txt"] = [".gitignore", "readme.txt"]

        status = run_track(["*.txt"], TrackOptions(), logger, fake_git, cwd=str(work_tree))

        assert status == ExitStatus.OK
        assert "matches forbidden file .gitignore" in log_output.getvalue()
        assert (work_tree / ".gitattributes").read_text() == f"*.txt {LFS}\n"
