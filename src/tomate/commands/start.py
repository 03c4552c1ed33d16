"""Start command for tomate.

Starts a Pomodoro and schedules its end hook.
"""

import click

from tomate.commands.common import get_config, parse_tags
from tomate.commands.progress import follow_progress
from tomate.core import lifecycle
from tomate.core.errors import TomateError
from tomate.core.session import POMODORO
from tomate.core.timefmt import format_human, parse_duration


def duration_option(ctx: click.Context, param: click.Parameter, value: str | None):
    """Click callback turning a duration string into a timedelta."""
    if value is None:
        return None
    try:
        return parse_duration(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def report_start(result: lifecycle.StartResult, label: str) -> None:
    """Print what a start or break command did."""
    record = result.record
    click.echo(
        f"Started {label} ({format_human(record.duration)}), "
        f"ends at {record.ends_at.strftime('%H:%M:%S')}"
    )
    if not result.scheduled:
        click.echo(
            "Could not schedule the end hook; "
            'run "tomate finish" when you are done.',
            err=True,
        )


@click.command()
@click.argument("description", required=False)
@click.option(
    "-d",
    "--duration",
    callback=duration_option,
    help="Length of the Pomodoro, e.g. 25m or 1h10m (defaults to config)",
)
@click.option("-t", "--tags", default="", help="Comma-separated tags")
@click.option(
    "-p",
    "--progress",
    is_flag=True,
    help="Show a progress bar and don't exit until the timer is over",
)
@click.pass_context
def start(ctx: click.Context, description, duration, tags: str, progress: bool) -> None:
    """Start a Pomodoro.

    DESCRIPTION is what you're focusing on.

    Examples:

    \b
        tomate start "Write report" -t work,writing
        tomate start -d 50m
    """
    config = get_config(ctx)
    try:
        result = lifecycle.start(
            config,
            POMODORO,
            duration=duration,
            description=description,
            tags=parse_tags(tags),
        )
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    label = "Pomodoro"
    if result.record.description:
        label += f" {result.record.description!r}"
    report_start(result, label)

    if progress:
        try:
            follow_progress(config)
        except TomateError as e:
            raise click.ClickException(str(e)) from e
