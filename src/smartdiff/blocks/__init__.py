"""Structural block diffs: extract, compare and group function/class blocks.

Public API re-exports for the blocks subpackage.
"""

from smartdiff.blocks.engine import diff_blocks, normalize_code
from smartdiff.blocks.extraction import BlockExtractor, extract_blocks
from smartdiff.blocks.grouping import filter_entries, group_entries, normalized_name
from smartdiff.blocks.models import (
    Block,
    BlockKind,
    BlockMap,
    DiffEntry,
    DiffStatus,
    GroupedDiff,
)
from smartdiff.blocks.parsing import PythonTreeProducer, SyntaxNode, SyntaxTreeProducer

__all__ = [
    "Block",
    "BlockExtractor",
    "BlockKind",
    "BlockMap",
    "DiffEntry",
    "DiffStatus",
    "GroupedDiff",
    "PythonTreeProducer",
    "SyntaxNode",
    "SyntaxTreeProducer",
    "diff_blocks",
    "extract_blocks",
    "filter_entries",
    "group_entries",
    "normalize_code",
    "normalized_name",
]
