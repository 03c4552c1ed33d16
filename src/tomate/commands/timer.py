"""Timer commands for tomate.

`tomate timer check` is what the scheduled systemd timer runs when a session
is due. It is safe to run by hand or more than once.
"""

import logging

import click

from tomate.commands.common import get_config
from tomate.core import lifecycle
from tomate.core.errors import TomateError

logger = logging.getLogger(__name__)


@click.group(hidden=True)
def timer() -> None:
    """Commands run by scheduled timers."""
    pass


@timer.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Fire the end hook if the current session is due."""
    config = get_config(ctx)
    try:
        result = lifecycle.check_expiry(config)
    except TomateError as e:
        raise click.ClickException(str(e)) from e

    logger.info("Expiry check: %s", result.outcome)
