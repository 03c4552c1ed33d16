"""systemd-run wrapper for tomate.

Asks the user's systemd instance to run `tomate timer check` once a session is
due, so the end hook fires even when no tomate process is running. Wake-ups
are fire and forget: nothing tracks or cancels them, and a stale one simply
finds no session (or an already notified one) when it runs.
"""

import logging
import math
import os
import shutil
import subprocess
import sys
from datetime import datetime
from pathlib import Path

from tomate.core.config import TOMATE_HOME_ENV, get_tomate_home

logger = logging.getLogger(__name__)

# Set TOMATE_SYSTEMD_RUN to use another systemd-run binary
SYSTEMD_RUN_ENV = "TOMATE_SYSTEMD_RUN"


class SchedulerError(Exception):
    """Raised when a wake-up cannot be scheduled."""

    pass


def _systemd_run() -> str:
    return os.environ.get(SYSTEMD_RUN_ENV) or "systemd-run"


def tomate_command() -> list[str]:
    """Get the command line that invokes this tomate installation."""
    script = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if script is not None and script.name == "tomate" and script.exists():
        return [str(script.resolve())]
    if found := shutil.which("tomate"):
        return [found]
    return [sys.executable, "-m", "tomate"]


def delay_seconds(at: datetime, now: datetime) -> int:
    """Whole seconds from now until at, at least 1."""
    return max(1, math.ceil((at - now).total_seconds()))


def build_schedule_command(
    at: datetime, now: datetime, config_path: Path | None = None
) -> list[str]:
    """Build the systemd-run command that will run the expiry check.

    The transient unit runs in the systemd user manager's environment, so a
    TOMATE_HOME set in the calling shell is passed on explicitly.
    """
    command = [
        _systemd_run(),
        "--user",
        f"--on-active={delay_seconds(at, now)}s",
        "--timer-property=AccuracySec=100ms",
    ]
    if os.environ.get(TOMATE_HOME_ENV):
        command.append(f"--setenv={TOMATE_HOME_ENV}={get_tomate_home().resolve()}")
    command += tomate_command()
    if config_path is not None:
        command += ["--config", str(config_path.absolute())]
    command += ["timer", "check"]
    return command


def schedule_expiry(
    at: datetime, *, now: datetime, config_path: Path | None = None
) -> None:
    """Schedule a one-shot `tomate timer check` at or after `at`.

    Args:
        at: When the session is due.
        now: Current time, used to compute the delay.
        config_path: Config file the check should use.

    Raises:
        SchedulerError: If systemd-run is unavailable or refuses the timer.
    """
    command = build_schedule_command(at, now, config_path)
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as e:
        raise SchedulerError(f"Failed to run {command[0]}: {e}") from e

    if result.returncode != 0:
        raise SchedulerError(
            f"Failed to schedule systemd timer: {result.stderr.strip()}"
        )

    if result.stderr:
        logger.info(result.stderr.strip())
