"""Pure structural diff engine.

Compares the BlockMaps of two versions of one file and classifies each
qualified key:

- added: key only in the new version
- removed: key only in the old version
- modified: key in both, code differs once trailing whitespace is stripped

Unchanged blocks produce nothing. No I/O, no parsing.
"""

from __future__ import annotations

import structlog

from smartdiff.blocks.models import Block, BlockMap, DiffEntry, DiffStatus

log = structlog.get_logger(__name__)


def normalize_code(code: str) -> str:
    """Drop trailing whitespace and blank lines.

    Internal whitespace is kept, so reformatting inside a block still counts
    as a modification.
    """
    return code.rstrip()


def _entry(
    file_name: str,
    key: str,
    status: DiffStatus,
    old: Block | None,
    new: Block | None,
) -> DiffEntry:
    block = new or old
    assert block is not None
    return DiffEntry(
        file_name=file_name,
        method_name=key,
        old_code=old.code if old is not None else None,
        new_code=new.code if new is not None else None,
        status=status,
        kind=block.kind,
    )


def diff_blocks(file_name: str, old_blocks: BlockMap, new_blocks: BlockMap) -> list[DiffEntry]:
    """Diff a single file's blocks.

    Entries follow the old map's key order, then keys new in the target.
    Callers must not rely on that order.
    """
    entries: list[DiffEntry] = []
    keys = dict.fromkeys([*old_blocks, *new_blocks])

    for key in keys:
        old = old_blocks.get(key)
        new = new_blocks.get(key)

        if old is not None and new is not None:
            if normalize_code(old.code) != normalize_code(new.code):
                entries.append(_entry(file_name, key, DiffStatus.MODIFIED, old, new))
        elif new is not None:
            entries.append(_entry(file_name, key, DiffStatus.ADDED, None, new))
        elif old is not None:
            entries.append(_entry(file_name, key, DiffStatus.REMOVED, old, None))

    log.debug(
        "blocks_diffed",
        path=file_name,
        old=len(old_blocks),
        new=len(new_blocks),
        changes=len(entries),
    )
    return entries
