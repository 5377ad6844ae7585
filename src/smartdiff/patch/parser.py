"""Unified diff parsing.

Rebuilds the before/after text of each file in a ``git diff`` style patch.
Only hunk bodies contribute text:

- `` `` (context) lines go to both sides
- ``-`` lines go to the old side
- ``+`` lines go to the new side

Never raises on malformed input. A ``diff --git`` header whose path pair
cannot be read is skipped together with its hunks; a header without hunks
yields a file with empty text on both sides.
"""

from __future__ import annotations

import re

import structlog

from smartdiff.patch.models import PatchFile

log = structlog.get_logger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")
_DIFF_HEADER = re.compile(r"^diff --git a/(.+?) b/(.+)$")
# " src/x.py | 4 ++--" lines from a --stat block pasted into the patch
_DIFF_STAT = re.compile(r"\s\|\s\d+\s[+-]+$")


def is_diff_stat_line(content: str) -> bool:
    return _DIFF_STAT.search(content.strip()) is not None


class _PatchState:
    """Accumulates the file currently being read."""

    __slots__ = ("files", "file_name", "old_lines", "new_lines", "in_hunk")

    def __init__(self) -> None:
        self.files: list[PatchFile] = []
        self.file_name: str | None = None
        self.old_lines: list[str] = []
        self.new_lines: list[str] = []
        self.in_hunk = False

    def start(self, file_name: str | None) -> None:
        self.flush()
        self.file_name = file_name

    def flush(self) -> None:
        if self.file_name is not None:
            self.files.append(
                PatchFile(
                    file_name=self.file_name,
                    old_text="".join(f"{line}\n" for line in self.old_lines),
                    new_text="".join(f"{line}\n" for line in self.new_lines),
                )
            )
        self.file_name = None
        self.old_lines = []
        self.new_lines = []
        self.in_hunk = False

    def feed(self, line: str) -> None:
        if line.startswith("diff --git "):
            match = _DIFF_HEADER.match(line)
            if match is None:
                log.debug("malformed_diff_header", line=line)
            self.start(match.group(2) if match else None)
            return

        if self.file_name is None:
            return
        if line.startswith(("--- ", "+++ ")):
            return
        if line.startswith("@@"):
            self.in_hunk = True
            return
        if not self.in_hunk or not line:
            return

        marker, content = line[0], line[1:]
        if marker not in " -+" or is_diff_stat_line(content):
            return
        if marker != "+":
            self.old_lines.append(content)
        if marker != "-":
            self.new_lines.append(content)


def parse_unified_diff(patch_text: str) -> list[PatchFile]:
    """Split a unified diff into per-file old/new reconstructions.

    Args:
        patch_text: Raw patch, e.g. the output of ``git diff`` or
            ``git format-patch``.

    Returns:
        One PatchFile per readable ``diff --git`` header, in patch order.
    """
    state = _PatchState()
    for line in _LINE_SPLIT.split(patch_text):
        state.feed(line)
    state.flush()

    log.debug("patch_parsed", files=len(state.files))
    return state.files
