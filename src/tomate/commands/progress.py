"""Live progress bar for the current session.

Redraws once a second and whenever the session file changes, and returns
when the timer runs out or the session is finished or cleared elsewhere.
"""

from datetime import datetime, timedelta
from pathlib import Path

import click
from watchfiles import watch

from tomate.core import lifecycle
from tomate.core.config import Config
from tomate.core.errors import NoActiveSession
from tomate.core.session import SessionRecord, local_now
from tomate.core.timefmt import format_kitchen

BAR_WIDTH = 40


def progress_bar(record: SessionRecord, now: datetime, width: int = BAR_WIDTH) -> str:
    """Render "elapsed [bar] remaining" for a session."""
    elapsed = min(max(record.elapsed(now), timedelta(0)), record.duration)
    ratio = elapsed / record.duration
    filled = round(width * ratio)
    bar = "█" * filled + "░" * (width - filled)
    return f"{format_kitchen(elapsed)} {bar} {format_kitchen(record.remaining(now))}"


def follow_progress(config: Config, clock=local_now) -> None:
    """Draw the progress bar until the session ends.

    Raises:
        NoActiveSession: If there is no session to follow.
    """
    current = lifecycle.status(config, clock=clock)
    started_at = current.record.started_at
    state_path = config.state_file_path

    def _draw(result: lifecycle.StatusResult) -> None:
        click.echo("\r" + progress_bar(result.record, result.now), nl=False)

    _draw(current)
    if current.expired:
        click.echo()
        return

    for _ in watch(
        state_path.parent,
        watch_filter=lambda _change, path: Path(path) == state_path,
        rust_timeout=1000,
        yield_on_timeout=True,
    ):
        try:
            current = lifecycle.status(config, clock=clock)
        except NoActiveSession:
            click.echo()
            click.echo("Session ended")
            return

        if current.record.started_at != started_at:
            click.echo()
            click.echo("Session was replaced")
            return

        _draw(current)
        if current.expired:
            click.echo()
            return
