"""smartdiff patch command - block diffs from a unified diff file."""

from typing import TextIO

import click

from smartdiff.cli.utils import emit_result, output_options, to_click_error
from smartdiff.core.errors import SmartDiffError
from smartdiff.ops import analyze_patch


@click.command()
@click.argument("patch_file", type=click.File("r", encoding="utf-8", errors="replace"))
@output_options
@click.pass_context
def patch_command(
    ctx: click.Context,
    patch_file: TextIO,
    as_json: bool,
    kind: str,
    no_merge: bool,
) -> None:
    """Show function and class changes in a patch.

    PATCH_FILE is a unified diff such as `git diff` output. Use - for stdin.
    """
    patch_text = patch_file.read()
    try:
        result = analyze_patch(patch_text, config=ctx.obj["config"])
    except SmartDiffError as e:
        raise to_click_error(e) from e

    emit_result(result, kind=kind, merge=not no_merge, as_json=as_json)
