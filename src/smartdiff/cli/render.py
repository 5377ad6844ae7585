"""Terminal rendering of grouped block diffs.

Display only: the line runs computed here never feed back into matching.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass
from typing import Literal

from rich.console import Console, Group, RenderableType
from rich.text import Text

from smartdiff.blocks import DiffEntry, DiffStatus, GroupedDiff
from smartdiff.core.progress import pluralize

RunTag = Literal["equal", "added", "removed"]

_RUN_STYLE: dict[RunTag, tuple[str, str]] = {
    "equal": ("  ", "dim"),
    "added": ("+ ", "green"),
    "removed": ("- ", "red"),
}

_STATUS_STYLE = {
    DiffStatus.ADDED: "bold green",
    DiffStatus.REMOVED: "bold red",
    DiffStatus.MODIFIED: "bold yellow",
}


@dataclass(frozen=True, slots=True)
class LineRun:
    tag: RunTag
    lines: list[str]


def line_runs(old: str, new: str) -> list[LineRun]:
    """Split two texts into equal/added/removed runs of lines."""
    old_lines = old.splitlines()
    new_lines = new.splitlines()
    runs: list[LineRun] = []
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)
    for op, i1, i2, j1, j2 in matcher.get_opcodes():
        if op == "equal":
            runs.append(LineRun("equal", old_lines[i1:i2]))
            continue
        if i2 > i1:
            runs.append(LineRun("removed", old_lines[i1:i2]))
        if j2 > j1:
            runs.append(LineRun("added", new_lines[j1:j2]))
    return runs


def render_entry(entry: DiffEntry) -> RenderableType:
    header = Text()
    header.append(f"{entry.status.value:<9}", style=_STATUS_STYLE[entry.status])
    header.append(entry.method_name, style="bold")

    body = Text()
    for run in line_runs(entry.old_code or "", entry.new_code or ""):
        prefix, style = _RUN_STYLE[run.tag]
        for line in run.lines:
            body.append(f"{prefix}{line}\n", style=style)
    body.rstrip()
    return Group(header, body, Text(""))


def render_grouped(grouped: list[GroupedDiff], console: Console) -> None:
    """Print one section per file."""
    if not grouped:
        console.print("No function or class changes detected.", highlight=False)
        return

    for file_name, entries in grouped:
        console.rule(Text(f"{file_name} ({pluralize(len(entries), 'change')})"), align="left")
        for entry in entries:
            console.print(render_entry(entry))
