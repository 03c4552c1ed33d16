"""Purge command for tomate."""

import click

from tomate.commands.common import get_config
from tomate.core import lifecycle
from tomate.core.errors import TomateError


@click.command()
@click.option("--yes", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def purge(ctx: click.Context, yes: bool) -> None:
    """Delete the current session and the whole history.

    The config file and hooks are left alone.
    """
    config = get_config(ctx)
    if not yes:
        click.confirm(
            f"Delete {config.state_file_path} and {config.history_file_path}?",
            abort=True,
        )

    try:
        removed = lifecycle.purge(config)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    if not removed:
        click.echo("Nothing to remove")
    for path in removed:
        click.echo(f"Removed {click.style(str(path), fg='cyan')}")
