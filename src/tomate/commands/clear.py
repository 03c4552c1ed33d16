"""Clear command for tomate."""

import click

from tomate.commands.common import get_config
from tomate.core import lifecycle
from tomate.core.errors import TomateError


@click.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Discard the current Pomodoro or break.

    Nothing is archived and no hook runs.
    """
    config = get_config(ctx)
    try:
        result = lifecycle.clear(config)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    noun = "break" if result.record.is_break else "Pomodoro"
    click.echo(f"Discarded current {noun}")
