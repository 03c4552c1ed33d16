"""Session lifecycle for tomate.

A session is Idle (no session file), Active (session file, not notified) or
Notified (session file, end hook already fired). No process stays resident,
so every operation rebuilds the state from the session file and the clock.

Mutating operations hold the exclusive session lock from their first read to
their last write, hooks and history appends included. That keeps the end hook
to one firing per session and history to one entry per Pomodoro even when a
manual `finish` races the scheduled `timer check`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from tomate.core.config import Config
from tomate.core.errors import NoActiveSession, SessionAlreadyActive
from tomate.core.history import append_entry, list_entries, purge_history
from tomate.core.scheduler import SchedulerError, schedule_expiry
from tomate.core.session import (
    POMODORO,
    VALID_KINDS,
    HistoryEntry,
    SessionRecord,
    local_now,
    normalize_tags,
)
from tomate.core.state import delete_session, load_session, save_session, session_lock
from tomate.hooks.dispatch import END, START, HookResult, hook_event, run_hook

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Scheduler = Callable[[datetime, datetime], None]

# check_expiry outcomes
IDLE = "idle"
PENDING = "pending"
NOTIFIED = "notified"
FIRED = "fired"


@dataclass
class StartResult:
    """Outcome of starting a session."""

    record: SessionRecord
    hook: HookResult
    scheduled: bool
    schedule_error: str = ""


@dataclass
class StatusResult:
    """Snapshot of the current session at a point in time."""

    record: SessionRecord
    now: datetime

    @property
    def elapsed(self) -> timedelta:
        return self.record.elapsed(self.now)

    @property
    def remaining(self) -> timedelta:
        return self.record.remaining(self.now)

    @property
    def expired(self) -> bool:
        return self.record.is_expired(self.now)


@dataclass
class ExpiryResult:
    """Outcome of an expiry check.

    outcome is "fired" when this call ran the end hook. "idle", "pending" and
    "notified" are the no-op outcomes.
    """

    outcome: str
    record: SessionRecord | None = None
    hook: HookResult | None = None

    @property
    def fired(self) -> bool:
        return self.outcome == FIRED


@dataclass
class FinishResult:
    """Outcome of finishing a session."""

    record: SessionRecord
    entry: HistoryEntry | None
    end_hook: HookResult | None


@dataclass
class ClearResult:
    """Outcome of clearing a session."""

    record: SessionRecord


def _require_session(config: Config) -> SessionRecord:
    record = load_session(config.state_file_path)
    if record is None:
        raise NoActiveSession()
    return record


def _default_scheduler(config: Config) -> Scheduler:
    def schedule(at: datetime, now: datetime) -> None:
        schedule_expiry(at, now=now, config_path=config.config_path)

    return schedule


def _fire_end_hook(config: Config, record: SessionRecord) -> HookResult:
    """Run the end hook and persist notified=True."""
    hook = run_hook(config.hooks_directory, hook_event(record.kind, END), record)
    record.notified = True
    save_session(config.state_file_path, record)
    return hook


def start(
    config: Config,
    kind: str,
    duration: timedelta | None = None,
    description: str | None = None,
    tags=(),
    *,
    clock: Clock = local_now,
    scheduler: Scheduler | None = None,
) -> StartResult:
    """Start a Pomodoro or break.

    Args:
        config: Tomate configuration.
        kind: "pomodoro", "shortbreak" or "longbreak".
        duration: Session length. Defaults to the configured length for kind.
        description: What the Pomodoro is about. Ignored for breaks.
        tags: Tags for the Pomodoro. Ignored for breaks.
        clock: Returns the current time.
        scheduler: Called with (ends_at, now) to request the expiry wake-up.

    Returns:
        StartResult with the new record, start hook outcome and whether the
        wake-up was scheduled.

    Raises:
        SessionAlreadyActive: If a session already exists.
        ValueError: If kind or duration is invalid.
    """
    if kind not in VALID_KINDS:
        raise ValueError(f"Invalid kind: {kind}. Must be one of {VALID_KINDS}")
    if duration is None:
        duration = config.duration_for(kind)
    if scheduler is None:
        scheduler = _default_scheduler(config)

    with session_lock(config.state_file_path):
        existing = load_session(config.state_file_path)
        if existing is not None:
            raise SessionAlreadyActive(existing)

        now = clock()
        is_pomodoro = kind == POMODORO
        record = SessionRecord(
            kind=kind,
            started_at=now,
            duration=duration,
            description=(description or None) if is_pomodoro else None,
            tags=normalize_tags(tags) if is_pomodoro else [],
        )
        save_session(config.state_file_path, record)
        hook = run_hook(config.hooks_directory, hook_event(kind, START), record)

    try:
        scheduler(record.ends_at, now)
    except SchedulerError as e:
        logger.warning(
            "%s. The end hook will run on the next finish or timer check.", e
        )
        return StartResult(record=record, hook=hook, scheduled=False, schedule_error=str(e))

    return StartResult(record=record, hook=hook, scheduled=True)


def status(config: Config, *, clock: Clock = local_now) -> StatusResult:
    """Get the current session without changing anything.

    Raises:
        NoActiveSession: If no session is running.
        CorruptState: If the session file cannot be parsed.
    """
    with session_lock(config.state_file_path, shared=True):
        record = _require_session(config)
    return StatusResult(record=record, now=clock())


def check_expiry(config: Config, *, clock: Clock = local_now) -> ExpiryResult:
    """Fire the end hook if the session is due and hasn't been notified.

    Safe to call any number of times, early, late, or after the session is
    gone: the end hook runs at most once per session.

    Returns:
        ExpiryResult whose outcome is "fired" only if this call ran the hook.
    """
    with session_lock(config.state_file_path):
        record = load_session(config.state_file_path)
        if record is None:
            return ExpiryResult(outcome=IDLE)
        if record.notified:
            return ExpiryResult(outcome=NOTIFIED, record=record)
        if not record.is_expired(clock()):
            return ExpiryResult(outcome=PENDING, record=record)

        hook = _fire_end_hook(config, record)
        return ExpiryResult(outcome=FIRED, record=record, hook=hook)


def finish(config: Config, *, clock: Clock = local_now) -> FinishResult:
    """Finish the current session.

    Fires the end hook unless an expiry check already did, archives Pomodoros
    with the actual end time, then removes the session.

    Raises:
        NoActiveSession: If no session is running.
        StorageError: If the history entry cannot be written. The session is
            kept in that case so finish can be retried.
    """
    with session_lock(config.state_file_path):
        record = _require_session(config)

        end_hook = None
        if not record.notified:
            end_hook = _fire_end_hook(config, record)

        entry = None
        if not record.is_break:
            entry = HistoryEntry(
                started_at=record.started_at,
                ended_at=clock(),
                tags=tuple(record.tags),
                description=record.description,
            )
            append_entry(config.history_file_path, entry)

        delete_session(config.state_file_path)

    return FinishResult(record=record, entry=entry, end_hook=end_hook)


def clear(config: Config) -> ClearResult:
    """Discard the current session without history or hooks.

    Raises:
        NoActiveSession: If no session is running.
    """
    with session_lock(config.state_file_path):
        record = _require_session(config)
        delete_session(config.state_file_path)
    return ClearResult(record=record)


def history(config: Config) -> list[HistoryEntry]:
    """List completed Pomodoros, oldest first."""
    return list_entries(config.history_file_path)


def purge(config: Config) -> list[Path]:
    """Delete the session and history files.

    Returns:
        Paths that were removed.
    """
    removed = []
    with session_lock(config.state_file_path):
        if config.state_file_path.exists():
            delete_session(config.state_file_path)
            removed.append(config.state_file_path)
        if purge_history(config.history_file_path):
            removed.append(config.history_file_path)
    return removed
