"""History command for tomate."""

import click
import orjson

from tomate.commands.common import get_config
from tomate.core import lifecycle
from tomate.core.errors import TomateError
from tomate.core.history import entry_to_dict
from tomate.core.timefmt import format_human

COLUMNS = ("Date Started", "Duration", "Tags", "Description")


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print history as JSON")
@click.pass_context
def history(ctx: click.Context, as_json: bool) -> None:
    """List completed Pomodoros, oldest first."""
    config = get_config(ctx)
    try:
        entries = lifecycle.history(config)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        payload = [entry_to_dict(entry) for entry in entries]
        click.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        return

    if not entries:
        click.echo("No Pomodoros archived yet")
        return

    rows = [
        (
            entry.started_at.strftime("%d %b %H:%M"),
            format_human(entry.duration),
            ",".join(entry.tags) or "-",
            entry.description or "-",
        )
        for entry in entries
    ]
    widths = [max(len(row[i]) for row in [COLUMNS, *rows]) for i in range(len(COLUMNS))]

    header = "  ".join(
        click.style(title.ljust(width), underline=True)
        for title, width in zip(COLUMNS, widths)
    )
    click.echo(header)
    for date, duration, tags, description in rows:
        click.echo(
            "  ".join(
                [
                    click.style(date.ljust(widths[0]), fg="blue"),
                    click.style(duration.rjust(widths[1]), fg="cyan"),
                    tags.ljust(widths[2]),
                    description,
                ]
            )
        )
