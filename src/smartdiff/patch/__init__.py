"""Patch parsing: unified diff text to per-file old/new text."""

from smartdiff.patch.models import PatchFile
from smartdiff.patch.parser import is_diff_stat_line, parse_unified_diff

__all__ = [
    "PatchFile",
    "is_diff_stat_line",
    "parse_unified_diff",
]
