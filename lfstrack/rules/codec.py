#!/usr/bin/env python3
"""Encoding and decoding of Git LFS attribute lines.

A tracked pattern is stored in a rule file as a single line:

    <pattern> filter=lfs diff=lfs merge=lfs -text[ lockable]

Spaces inside the pattern are written as ``[[:space:]]`` so the line stays
whitespace-delimited. Lines without ``filter=lfs`` are not patterns of ours
and are left alone by every caller.

Example:
    >>> render_line("my file.bin", lockable=True)
    'my[[:space:]]file.bin filter=lfs diff=lfs merge=lfs -text lockable\\n'
    >>> parse_line("*.psd filter=lfs diff=lfs merge=lfs -text").path
    '*.psd'
"""

from dataclasses import dataclass
from typing import List, Optional

from lfstrack.core.constants import AttributeTokens


@dataclass(frozen=True)
class PatternDescriptor:
    """A pattern declared in a rule file."""

    path: str  # Tree-relative pattern
    source: str = ""  # Tree-relative path of the declaring rule file
    lockable: bool = False


def encode_pattern(pattern: str) -> str:
    """Escape literal spaces in a pattern."""
    return pattern.replace(" ", AttributeTokens.SPACE_ESCAPE)


def decode_pattern(field: str) -> str:
    """Reverse encode_pattern."""
    return field.replace(AttributeTokens.SPACE_ESCAPE, " ")


def split_rule_lines(text: str) -> List[str]:
    """Split rule file contents into lines without their terminators.

    Only "\\n" ends a line; a "\\r" before it is dropped.
    """
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def line_key(line: str) -> Optional[str]:
    """Return the decoded first field of a line, or None for a blank line."""
    fields = line.split()
    if not fields:
        return None
    return decode_pattern(fields[0])


def parse_line(line: str) -> Optional[PatternDescriptor]:
    """Parse an attribute line into a descriptor.

    Args:
        line: One line of a rule file, with or without its newline

    Returns:
        PatternDescriptor with an empty source, or None when the line does
        not carry the LFS filter
    """
    if AttributeTokens.FILTER not in line:
        return None

    pattern = line_key(line)
    if pattern is None:
        return None

    return PatternDescriptor(
        path=pattern,
        lockable=AttributeTokens.LOCKABLE in line.split()[1:],
    )


def render_line(pattern: str, lockable: bool = False) -> str:
    """Render a pattern as a newline-terminated attribute line.

    Args:
        pattern: Raw pattern text (may contain spaces)
        lockable: Append the lockable attribute

    Returns:
        Attribute line ending in exactly one newline
    """
    line = f"{encode_pattern(pattern)} {AttributeTokens.SUFFIX}"
    if lockable:
        line += f" {AttributeTokens.LOCKABLE}"
    return line + "\n"
