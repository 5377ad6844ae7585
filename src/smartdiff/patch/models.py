"""Data models for parsed patches."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PatchFile:
    """One file touched by a patch.

    ``old_text`` and ``new_text`` only hold hunk-covered lines, so they are
    not the whole file. A file without hunks has both empty.
    """

    file_name: str
    old_text: str
    new_text: str

    @property
    def has_changes(self) -> bool:
        return self.old_text != self.new_text
