"""Error types for tomate.

Every failure of the session lifecycle is one of these. The CLI turns them
into exit codes and messages; nothing below the CLI exits the process.
"""

from pathlib import Path


class TomateError(Exception):
    """Base class for all tomate errors."""

    pass


class NoActiveSession(TomateError):
    """Raised when an operation needs a session but none is running."""

    def __init__(self) -> None:
        super().__init__(
            'No active Pomodoro. Start one with "tomate start" or "tomate break"'
        )


class SessionAlreadyActive(TomateError):
    """Raised when starting a session while another one exists."""

    def __init__(self, record) -> None:
        self.record = record
        if record.is_break:
            message = "You're currently taking a break!"
        else:
            message = "There is already an unfinished Pomodoro"
        super().__init__(
            f'{message} (use "tomate finish" or "tomate clear" first)'
        )


class CorruptState(TomateError):
    """Raised when a persisted file exists but cannot be parsed.

    The offending file is left untouched so the user can inspect it.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot parse {path}: {reason}")


class StorageError(TomateError):
    """Raised on I/O failure while reading or writing state."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Storage error on {path}: {reason}")


class HookNotExecutable(TomateError):
    """A hook script exists but lacks the execute bit.

    Reported as a warning on the hook result; the session transition goes on.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Hook {path} is not executable (fix with: chmod +x {path})")
