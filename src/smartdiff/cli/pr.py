"""smartdiff pr command - block diffs for a GitHub pull request."""

import click

from smartdiff.cli.utils import emit_result, output_options, to_click_error
from smartdiff.config.models import SmartDiffConfig
from smartdiff.core.errors import SmartDiffError
from smartdiff.core.progress import pluralize, spinner, status
from smartdiff.ops import analyze_pull_request
from smartdiff.remote.github import GitHubClient


@click.command()
@click.argument("url")
@output_options
@click.option("--token", help="GitHub token, overrides config and $GITHUB_TOKEN")
@click.pass_context
def pr_command(
    ctx: click.Context,
    url: str,
    as_json: bool,
    kind: str,
    no_merge: bool,
    token: str | None,
) -> None:
    """Show function and class changes in a GitHub pull request.

    URL looks like https://github.com/OWNER/REPO/pull/NUMBER.
    """
    config: SmartDiffConfig = ctx.obj["config"]
    if token:
        config = config.model_copy(
            update={"github": config.github.model_copy(update={"token": token})}
        )

    try:
        with GitHubClient(config.github) as client:
            if as_json:
                result = analyze_pull_request(url, client, config=config)
            else:
                with spinner("Fetching pull request"):
                    result = analyze_pull_request(url, client, config=config)
    except SmartDiffError as e:
        raise to_click_error(e) from e

    if not as_json:
        status(f"{pluralize(result.files_analyzed, 'file')} analyzed", style="success")
    emit_result(result, kind=kind, merge=not no_merge, as_json=as_json)
