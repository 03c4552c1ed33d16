"""Hook dispatch for session start and end events.

Hooks are user-provided executables in the hooks directory, named after the
event they handle:

    pomodoro-start, pomodoro-end,
    shortbreak-start, shortbreak-end,
    longbreak-start, longbreak-end

A hook receives the session as TOMATE_* environment variables. Hook problems
are logged as warnings and never interrupt the session transition.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from tomate.core.errors import HookNotExecutable
from tomate.core.session import VALID_KINDS, SessionRecord

logger = logging.getLogger(__name__)

START = "start"
END = "end"

HOOK_EVENTS = tuple(f"{kind}-{phase}" for kind in VALID_KINDS for phase in (START, END))

MISSING = "missing"
NOT_EXECUTABLE = "not-executable"
READY = "ready"
SUCCEEDED = "succeeded"
FAILED = "failed"


@dataclass
class HookResult:
    """Outcome of dispatching one hook event.

    Attributes:
        event: Event name, e.g. "pomodoro-end"
        path: Script path that was looked up
        outcome: One of "missing", "not-executable", "succeeded", "failed"
        returncode: Exit status when the script ran
        message: Warning text for "not-executable" and "failed"
        error: HookNotExecutable for "not-executable"
    """

    event: str
    path: Path
    outcome: str
    returncode: int | None = None
    message: str = ""
    error: HookNotExecutable | None = None

    @property
    def ran(self) -> bool:
        return self.outcome in (SUCCEEDED, FAILED)


def hook_event(kind: str, phase: str) -> str:
    """Build the event name for a session kind and phase."""
    event = f"{kind}-{phase}"
    if event not in HOOK_EVENTS:
        raise ValueError(f"Invalid hook event: {event}")
    return event


def hook_environment(event: str, record: SessionRecord) -> dict[str, str]:
    """Build the environment passed to a hook script."""
    env = os.environ.copy()
    env.update(
        {
            "TOMATE_EVENT": event,
            "TOMATE_KIND": record.kind,
            "TOMATE_DESCRIPTION": record.description or "",
            "TOMATE_TAGS": ",".join(record.tags),
            "TOMATE_STARTED_AT": record.started_at.isoformat(),
            "TOMATE_ENDS_AT": record.ends_at.isoformat(),
            "TOMATE_DURATION": str(int(record.duration.total_seconds())),
        }
    )
    return env


def hook_state(hooks_directory: Path, event: str) -> str:
    """Tell whether a hook is missing, not executable, or ready to run."""
    path = hooks_directory / event
    if not path.exists():
        return MISSING
    if not path.is_file() or not os.access(path, os.X_OK):
        return NOT_EXECUTABLE
    return READY


def list_hooks(hooks_directory: Path) -> list[tuple[str, Path, str]]:
    """List every hook event with its script path and state."""
    return [
        (event, hooks_directory / event, hook_state(hooks_directory, event))
        for event in HOOK_EVENTS
    ]


def run_hook(hooks_directory: Path, event: str, record: SessionRecord) -> HookResult:
    """Run the hook script for an event, if there is one.

    Args:
        hooks_directory: Directory holding hook scripts.
        event: Event name, one of HOOK_EVENTS.
        record: The session the event is about.

    Returns:
        HookResult describing what happened.

    Raises:
        ValueError: If event is not a known hook event.
    """
    if event not in HOOK_EVENTS:
        raise ValueError(f"Invalid hook event: {event}")

    path = hooks_directory / event
    state = hook_state(hooks_directory, event)

    if state == MISSING:
        return HookResult(event=event, path=path, outcome=MISSING)

    if state == NOT_EXECUTABLE:
        error = HookNotExecutable(path)
        logger.warning(str(error))
        return HookResult(
            event=event,
            path=path,
            outcome=NOT_EXECUTABLE,
            message=str(error),
            error=error,
        )

    logger.info("Executing %s hook at %s", event, path)
    try:
        result = subprocess.run(
            [str(path)],
            env=hook_environment(event, record),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        message = f"Hook {path} could not be executed: {e}"
        logger.warning(message)
        return HookResult(event=event, path=path, outcome=FAILED, message=message)

    if result.stdout:
        logger.info("%s hook output: %s", event, result.stdout.strip())

    if result.returncode != 0:
        message = f"Hook {path} exited with status {result.returncode}"
        stderr = result.stderr.strip()
        if stderr:
            message += f": {stderr}"
        logger.warning(message)
        return HookResult(
            event=event,
            path=path,
            outcome=FAILED,
            returncode=result.returncode,
            message=message,
        )

    return HookResult(event=event, path=path, outcome=SUCCEEDED, returncode=0)
