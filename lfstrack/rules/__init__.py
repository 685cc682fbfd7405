"""lfstrack Rules System.

This module provides the rule file handling behind the track command:
- codec: Parse and render Git LFS attribute lines
- locator: Find every rule file in a working tree, in precedence order
- index: Already-declared patterns across all rule files
- blocklist: File names that may never be tracked
- engine: Merge requested patterns into the rule file and refresh files
"""

from .codec import PatternDescriptor, parse_line, render_line
from .engine import ReconcileEngine, ReconcileOutcome, RuleFileError, merge_rule_lines
from .index import KnownPatternIndex, tree_path
from .locator import DiscoveryError, locate

__all__ = [
    # Codec
    "PatternDescriptor",
    "parse_line",
    "render_line",
    # Discovery
    "DiscoveryError",
    "locate",
    "KnownPatternIndex",
    "tree_path",
    # Reconciliation
    "ReconcileEngine",
    "ReconcileOutcome",
    "RuleFileError",
    "merge_rule_lines",
]
