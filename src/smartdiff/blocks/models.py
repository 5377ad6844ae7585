"""Data models for structural block diffs.

All models are plain frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class BlockKind(StrEnum):
    FUNCTION = "function"
    CLASS = "class"


class DiffStatus(StrEnum):
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"


@dataclass(frozen=True, slots=True)
class Block:
    """One function or class definition in one version of a file.

    ``key`` is the identity used to match blocks across versions: the
    enclosing class names followed by the block's own signature, e.g.
    ``Outer.def inner(self, x)``. Offsets are UTF-8 byte offsets.
    """

    key: str
    name: str
    signature: str
    kind: BlockKind
    code: str
    start_index: int
    end_index: int


# Qualified key -> block. Duplicate keys resolve to the last block seen.
BlockMap = dict[str, Block]


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """A block that was added, removed or modified.

    ``old_code`` is None for added blocks, ``new_code`` is None for removed
    blocks; modified blocks carry both, verbatim.
    """

    file_name: str
    method_name: str
    old_code: str | None
    new_code: str | None
    status: DiffStatus
    kind: BlockKind

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_name": self.file_name,
            "method_name": self.method_name,
            "old_code": self.old_code,
            "new_code": self.new_code,
            "status": self.status.value,
            "kind": self.kind.value,
        }


# (file_name, entries) after presentation-level merging
GroupedDiff = tuple[str, list[DiffEntry]]
