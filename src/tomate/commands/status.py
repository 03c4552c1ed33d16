"""Status command for tomate.

Shows the current session. Never fires hooks or changes state.
"""

import click

from tomate.commands.common import get_config
from tomate.commands.progress import follow_progress
from tomate.core import lifecycle
from tomate.core.errors import NoActiveSession, TomateError
from tomate.core.session import LONG_BREAK
from tomate.core.timefmt import format_human, format_kitchen


def format_status(result: lifecycle.StatusResult, fmt: str) -> str:
    """Expand a custom status format.

    Tokens:
        %d description, %t tags (comma-separated), %k kind,
        %r remaining (mm:ss), %R remaining seconds,
        %s / %S start time (RFC 3339 / unix), %e / %E end time (RFC 3339 / unix)
    """
    record = result.record
    tokens = {
        "d": record.description or "",
        "t": ",".join(record.tags),
        "k": record.kind,
        "r": format_kitchen(result.remaining),
        "R": str(int(result.remaining.total_seconds())),
        "s": record.started_at.isoformat(),
        "S": str(int(record.started_at.timestamp())),
        "e": record.ends_at.isoformat(),
        "E": str(int(record.ends_at.timestamp())),
    }

    out = []
    i = 0
    while i < len(fmt):
        if fmt[i] == "%" and i + 1 < len(fmt) and fmt[i + 1] in tokens:
            out.append(tokens[fmt[i + 1]])
            i += 2
        else:
            out.append(fmt[i])
            i += 1
    return "".join(out)


def _print_idle() -> None:
    click.echo("No current Pomodoro")
    click.echo()
    click.echo(click.style('(use "tomate start" to start a Pomodoro)', dim=True))
    click.echo(click.style('(use "tomate break" to take a break)', dim=True))


def _print_status(result: lifecycle.StatusResult) -> None:
    record = result.record

    if record.is_break:
        label = "long break" if record.kind == LONG_BREAK else "short break"
        click.echo(f"Taking a {label}")
    elif record.description:
        click.echo(f"Current Pomodoro: {click.style(record.description, fg='yellow')}")
    else:
        click.echo("Current Pomodoro")

    if result.expired:
        click.echo(f"Status: {click.style('Done', fg='red', bold=True)}")
    else:
        click.echo(f"Status: {click.style('Active', fg='magenta', bold=True)}")
    click.echo(f"Duration: {click.style(format_human(record.duration), fg='cyan')}")
    if record.tags:
        click.echo("Tags:")
        for tag in record.tags:
            click.echo(f"\t- {click.style(tag, fg='blue')}")
    click.echo()
    click.echo(f"Time remaining: {format_kitchen(result.remaining)}")
    click.echo()

    noun = "break" if record.is_break else "Pomodoro"
    click.echo(click.style(f'(use "tomate finish" to finish this {noun})', dim=True))
    click.echo(click.style(f'(use "tomate clear" to discard this {noun})', dim=True))


@click.command()
@click.option("-f", "--format", "fmt", default=None, help="Custom output format")
@click.option(
    "-p",
    "--progress",
    is_flag=True,
    help="Show a progress bar and don't exit until the timer is over",
)
@click.pass_context
def status(ctx: click.Context, fmt: str | None, progress: bool) -> None:
    """Show the current Pomodoro or break.

    With --format, prints only the expanded format string. Tokens:

    \b
        %d  description          %t  tags, comma-separated
        %k  kind                 %r  remaining time (mm:ss)
        %R  remaining seconds    %s  start time (RFC 3339)
        %S  start (unix time)    %e  end time (RFC 3339)
        %E  end (unix time)

    Examples:

    \b
        tomate status
        tomate status -f "%r %d"
    """
    config = get_config(ctx)
    try:
        result = lifecycle.status(config)
    except NoActiveSession:
        if fmt is None:
            _print_idle()
        return
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    if fmt is not None:
        click.echo(format_status(result, fmt))
        return

    if progress:
        try:
            follow_progress(config)
        except TomateError as e:
            raise click.ClickException(str(e)) from e
        return

    _print_status(result)
