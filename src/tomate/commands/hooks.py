"""Hooks command for tomate.

Shows which hook scripts are installed.
"""

import click

from tomate.commands.common import get_config
from tomate.hooks.dispatch import MISSING, NOT_EXECUTABLE, list_hooks

STATE_COLORS = {MISSING: "bright_black", NOT_EXECUTABLE: "red"}


@click.command()
@click.pass_context
def hooks(ctx: click.Context) -> None:
    """List hook scripts and whether they will run.

    Hooks live in the hooks directory and are named after their event,
    e.g. pomodoro-end. They must be executable. Each hook gets the session
    in TOMATE_EVENT, TOMATE_KIND, TOMATE_DESCRIPTION, TOMATE_TAGS,
    TOMATE_STARTED_AT, TOMATE_ENDS_AT and TOMATE_DURATION.
    """
    config = get_config(ctx)
    click.echo(f"Hooks directory: {click.style(str(config.hooks_directory), fg='cyan')}")
    click.echo()
    for event, _path, state in list_hooks(config.hooks_directory):
        color = STATE_COLORS.get(state, "green")
        click.echo(f"  {event.ljust(16)} {click.style(state, fg=color)}")
