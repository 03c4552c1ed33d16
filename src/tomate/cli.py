"""CLI entry point for tomate.

Usage:
    tomate start "task"       # Start a Pomodoro
    tomate status             # Show the current Pomodoro or break
    tomate finish             # Archive the Pomodoro (or end the break)
    tomate break              # Take a short break
    tomate history            # List completed Pomodoros
"""

import logging
from pathlib import Path

import click

from tomate.commands.clear import clear
from tomate.commands.finish import finish
from tomate.commands.history import history
from tomate.commands.hooks import hooks
from tomate.commands.purge import purge
from tomate.commands.start import start
from tomate.commands.status import status
from tomate.commands.take_break import take_break
from tomate.commands.timer import timer


def setup_logging(verbose: bool) -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TOMATE_CONFIG",
    help="Config file to use [default: ~/.tomate/config.json]",
)
@click.option("-v", "--verbose", is_flag=True, help="Log what tomate is doing")
@click.version_option(package_name="tomate")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """Tomate - a Pomodoro timer for the command line.

    Tracks one Pomodoro or break at a time, archives finished Pomodoros and
    runs your hook scripts when sessions start and end.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


# Register commands
main.add_command(start)
main.add_command(take_break)
main.add_command(status)
main.add_command(finish)
main.add_command(clear)
main.add_command(history)
main.add_command(hooks)
main.add_command(purge)
main.add_command(timer)
