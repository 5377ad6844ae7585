"""smartdiff CLI - function and class level diffs."""

from pathlib import Path

import click

from smartdiff import __version__
from smartdiff.cli.patch import patch_command
from smartdiff.cli.pr import pr_command
from smartdiff.cli.utils import find_repo_root, to_click_error
from smartdiff.config.loader import load_config
from smartdiff.config.models import LoggingConfig
from smartdiff.core.errors import ConfigError
from smartdiff.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="smartdiff")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file (default: .smartdiff/config.yaml in the repository)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """smartdiff - Function and class level diffs for Python changes."""
    ctx.ensure_object(dict)
    try:
        config = load_config(find_repo_root(), config_path=config_path)
    except ConfigError as e:
        raise to_click_error(e) from e

    if verbose:
        config = config.model_copy(
            update={"logging": LoggingConfig(level="DEBUG", outputs=config.logging.outputs)}
        )
    configure_logging(config=config.logging)

    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(patch_command, name="patch")
cli.add_command(pr_command, name="pr")


if __name__ == "__main__":
    cli()
