"""Finish command for tomate."""

import click

from tomate.commands.common import get_config
from tomate.core import lifecycle
from tomate.core.errors import TomateError
from tomate.core.timefmt import format_human


@click.command()
@click.pass_context
def finish(ctx: click.Context) -> None:
    """Finish the current Pomodoro or break.

    Pomodoros are archived to the history with their actual length.
    Runs the end hook if it hasn't run yet.
    """
    config = get_config(ctx)
    try:
        result = lifecycle.finish(config)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    if result.entry is not None:
        click.echo(
            f"Archived Pomodoro ({format_human(result.entry.duration)}) "
            f"to {click.style(str(config.history_file_path), fg='cyan')}"
        )
    else:
        click.echo("Break finished")
