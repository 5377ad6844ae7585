"""CLI utilities."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from rich.console import Console

from smartdiff.blocks import BlockKind
from smartdiff.cli.render import render_grouped
from smartdiff.core.errors import SmartDiffError
from smartdiff.core.progress import status
from smartdiff.ops import AnalysisResult

KIND_CHOICES = ("all", "function", "class")


def find_repo_root(start_path: Path | None = None) -> Path:
    """Find the git repository root from the given path.

    Walks up the directory tree looking for a .git directory. Falls back to
    the start path itself so the tool also works outside repositories.
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent

    if (current / ".git").exists():
        return current
    return start_path.resolve()


def parse_kind(value: str) -> BlockKind | None:
    return None if value == "all" else BlockKind(value)


def output_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every analysis command."""
    func = click.option("--json", "as_json", is_flag=True, help="Output as JSON")(func)
    func = click.option(
        "--kind",
        type=click.Choice(KIND_CHOICES),
        default="all",
        show_default=True,
        help="Only show function or class blocks",
    )(func)
    func = click.option(
        "--no-merge",
        is_flag=True,
        help="Do not fuse add/remove pairs sharing a name",
    )(func)
    return func


def to_click_error(error: SmartDiffError) -> click.ClickException:
    return click.ClickException(error.message)


def emit_result(result: AnalysisResult, *, kind: str, merge: bool, as_json: bool) -> None:
    """Write an analysis result to stdout."""
    block_kind = parse_kind(kind)
    if as_json:
        click.echo(json.dumps(result.to_dict(block_kind, merge=merge), indent=2))
        return

    if result.note:
        status(result.note, style="warning")
    render_grouped(result.grouped(block_kind, merge=merge), Console())
