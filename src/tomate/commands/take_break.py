"""Break command for tomate."""

import click

from tomate.commands.common import get_config
from tomate.commands.progress import follow_progress
from tomate.commands.start import duration_option, report_start
from tomate.core import lifecycle
from tomate.core.errors import TomateError
from tomate.core.session import LONG_BREAK, SHORT_BREAK


@click.command("break")
@click.option(
    "-d",
    "--duration",
    callback=duration_option,
    help="Length of the break, e.g. 5m (defaults to config)",
)
@click.option("--long", "long_break", is_flag=True, help="Take a long break")
@click.option(
    "-p",
    "--progress",
    is_flag=True,
    help="Show a progress bar and don't exit until the timer is over",
)
@click.pass_context
def take_break(ctx: click.Context, duration, long_break: bool, progress: bool) -> None:
    """Take a short (or --long) break."""
    config = get_config(ctx)
    kind = LONG_BREAK if long_break else SHORT_BREAK
    try:
        result = lifecycle.start(config, kind, duration=duration)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    report_start(result, "long break" if long_break else "short break")

    if progress:
        try:
            follow_progress(config)
        except TomateError as e:
            raise click.ClickException(str(e)) from e
