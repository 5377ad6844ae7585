"""Presentation-level grouping of block diffs.

Entries are grouped per file, then split add/remove pairs that look like the
same logical unit are fused into one modified entry. Two entries pair when
they share a normalized name (key without its leading ``def ``/``class ``
keyword and without the parameter list or superclass clause) and are the
only two entries with that name in the file: one added, one removed.

Only a leading keyword is stripped, never an enclosing-class qualifier.
``def helper()`` moved into ``class C`` normalizes to ``helper`` on one side
and ``C.def helper`` on the other, so the move stays an add plus a remove.

The rule can fuse unrelated blocks that happen to share a name, e.g. a
removed overload and an added one. That trade-off is accepted for
readability.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from smartdiff.blocks.models import BlockKind, DiffEntry, DiffStatus, GroupedDiff

_KEYWORD_PREFIX = re.compile(r"^(?:class|def) ")
_SUFFIX_START = re.compile(r"[(:]")


def normalized_name(key: str) -> str:
    """``def foo(a, b)`` -> ``foo``, ``class A(Base)`` -> ``A``."""
    bare = _KEYWORD_PREFIX.sub("", key, count=1)
    return _SUFFIX_START.split(bare, maxsplit=1)[0]


def filter_entries(entries: Iterable[DiffEntry], kind: BlockKind | None) -> list[DiffEntry]:
    """Keep entries of one kind. ``None`` keeps everything."""
    if kind is None:
        return list(entries)
    return [entry for entry in entries if entry.kind == kind]


def _fuse(bucket: list[DiffEntry]) -> list[DiffEntry]:
    if len(bucket) != 2:
        return bucket
    by_status = {entry.status: entry for entry in bucket}
    added = by_status.get(DiffStatus.ADDED)
    removed = by_status.get(DiffStatus.REMOVED)
    if added is None or removed is None:
        return bucket
    return [
        DiffEntry(
            file_name=added.file_name,
            method_name=added.method_name or removed.method_name,
            old_code=removed.old_code,
            new_code=added.new_code,
            status=DiffStatus.MODIFIED,
            kind=added.kind,
        )
    ]


def _merge_file(entries: list[DiffEntry]) -> list[DiffEntry]:
    buckets: dict[str, list[DiffEntry]] = {}
    for entry in entries:
        buckets.setdefault(normalized_name(entry.method_name), []).append(entry)

    merged: list[DiffEntry] = []
    for bucket in buckets.values():
        merged.extend(_fuse(bucket))
    return merged


def group_entries(entries: Iterable[DiffEntry], *, merge: bool = True) -> list[GroupedDiff]:
    """Group entries by file (first-seen order) and fuse add/remove pairs.

    Args:
        entries: Flat diff entries, possibly spanning several files.
        merge: Fuse qualifying add/remove pairs. When False entries are only
            grouped by file.

    Returns:
        ``(file_name, entries)`` tuples.
    """
    by_file: dict[str, list[DiffEntry]] = {}
    for entry in entries:
        by_file.setdefault(entry.file_name, []).append(entry)

    if not merge:
        return list(by_file.items())
    return [(file_name, _merge_file(file_entries)) for file_name, file_entries in by_file.items()]
