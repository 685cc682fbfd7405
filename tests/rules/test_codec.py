#!/usr/bin/env python3
"""Tests for Git LFS attribute line parsing and rendering."""

import pytest

from lfstrack.rules.codec import (
    PatternDescriptor,
    decode_pattern,
    encode_pattern,
    line_key,
    parse_line,
    render_line,
)


class TestRenderLine:
    """Tests for render_line."""

    def test_plain_pattern(self):
        """Test rendering a simple pattern."""
        assert render_line("*.psd") == "*.psd filter=lfs diff=lfs merge=lfs -text\n"

    def test_lockable_pattern(self):
        """Test lockable attribute is appended last."""
        assert (
            render_line("*.psd", lockable=True)
            == "*.psd filter=lfs diff=lfs merge=lfs -text lockable\n"
        )

    def test_spaces_are_escaped(self):
        """Test spaces inside the pattern are escaped."""
        line = render_line("my file.bin")

        assert line.startswith("my[[:space:]]file.bin ")
        assert line.count(" ") == 4

    def test_single_trailing_newline(self):
        """Test the rendered line ends in exactly one newline."""
        line = render_line("a b c", lockable=True)

        assert line.endswith("\n")
        assert not line.endswith("\n\n")


class TestParseLine:
    """Tests for parse_line."""

    def test_parses_lfs_line(self):
        """Test parsing a rendered line."""
        descriptor = parse_line("*.psd filter=lfs diff=lfs merge=lfs -text")

        assert descriptor == PatternDescriptor(path="*.psd", source="", lockable=False)

    def test_parses_lockable(self):
        """Test lockable is detected anywhere in the line."""
        descriptor = parse_line("*.psd lockable filter=lfs diff=lfs merge=lfs -text")

        assert descriptor.lockable is True

    def test_ignores_lines_without_filter(self):
        """Test non-LFS lines are not patterns."""
        assert parse_line("*.txt text eol=lf") is None
        assert parse_line("# comment") is None
        assert parse_line("") is None

    def test_lockable_must_be_a_token(self):
        """Test a pattern containing the word lockable is not lockable."""
        descriptor = parse_line("lockable.bin filter=lfs diff=lfs merge=lfs -text")

        assert descriptor.path == "lockable.bin"
        assert descriptor.lockable is False

    def test_pattern_named_lockable(self):
        """Test a pattern spelled like the attribute is only lockable when marked."""
        assert parse_line("lockable filter=lfs diff=lfs merge=lfs -text").lockable is False
        assert parse_line("lockable filter=lfs diff=lfs merge=lfs -text lockable").lockable is True

    def test_accepts_trailing_newline(self):
        """Test a line read with its newline parses the same."""
        descriptor = parse_line("*.zip filter=lfs diff=lfs merge=lfs -text\n")

        assert descriptor.path == "*.zip"

    def test_decodes_escaped_spaces(self):
        """Test the escape token is turned back into a space."""
        descriptor = parse_line("a[[:space:]]b.bin filter=lfs diff=lfs merge=lfs -text")

        assert descriptor.path == "a b.bin"


class TestRoundTrip:
    """Tests for parse_line(render_line(...))."""

    @pytest.mark.parametrize("pattern", ["*.psd", "my file.bin", " leading", "dir/with  two.bin", "lockable"])
    @pytest.mark.parametrize("lockable", [True, False])
    def test_round_trip(self, pattern, lockable):
        """Test pattern and lockable survive a round trip."""
        descriptor = parse_line(render_line(pattern, lockable))

        assert descriptor.path == pattern
        assert descriptor.lockable is lockable
        assert render_line(descriptor.path, descriptor.lockable) == render_line(pattern, lockable)


class TestLineKey:
    """Tests for line_key and the escape helpers."""

    def test_first_field(self):
        """Test key is the first field."""
        assert line_key("*.txt text") == "*.txt"

    def test_blank_line(self):
        """Test blank lines have no key."""
        assert line_key("") is None
        assert line_key("   ") is None

    def test_escape_helpers_are_inverse(self):
        """Test encode and decode are inverses."""
        assert decode_pattern(encode_pattern("a b  c")) == "a b  c"
