"""Storage for the current tomate session.

The current session lives in a single JSON file (default ~/.tomate/current.json):

{
  "kind": "pomodoro",
  "started_at": "2024-03-27T12:00:00-06:00",
  "duration": 1500.0,
  "description": "Write report",
  "tags": ["work"],
  "notified": false
}

A missing file means no session is running. Writes go through a temp file and
os.replace so a crash never leaves a half-written record behind.
"""

import fcntl
import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterator

import orjson

from tomate.core.errors import CorruptState, StorageError
from tomate.core.session import SessionRecord

logger = logging.getLogger(__name__)


def _get_lock_path(state_path: Path) -> Path:
    """Get path to the lock file guarding the session file."""
    return state_path.with_name(state_path.name + ".lock")


@contextmanager
def session_lock(state_path: Path, shared: bool = False) -> Iterator[None]:
    """Hold a lock on the session file for the duration of the block.

    Use the exclusive lock around any load-modify-save sequence so concurrent
    invocations (a manual finish racing the scheduled expiry check) serialize.

    Args:
        state_path: Path of the session file being guarded.
        shared: Take a shared lock for read-only access. The state
            directory is never created; if the lock file can't be opened
            the block runs unlocked.

    Raises:
        StorageError: If the exclusive lock file cannot be created.
    """
    lock_path = _get_lock_path(state_path)
    lock_file = None
    try:
        if shared:
            lock_file = open(lock_path, "a")
        else:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
            lock_file = open(lock_path, "w")
    except OSError as e:
        if not shared:
            raise StorageError(lock_path, str(e)) from e
        logger.debug("Reading %s without a lock: %s", state_path, e)

    # Saves replace the file atomically; an unlocked read sees a whole record
    if lock_file is None:
        yield
        return

    with lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_SH if shared else fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file, fcntl.LOCK_UN)


def record_to_dict(record: SessionRecord) -> dict:
    """Convert a session record to its JSON-ready form."""
    return {
        "kind": record.kind,
        "started_at": record.started_at.isoformat(),
        "duration": record.duration.total_seconds(),
        "description": record.description,
        "tags": list(record.tags),
        "notified": record.notified,
    }


def record_from_dict(data: dict) -> SessionRecord:
    """Build a session record from its JSON form.

    Raises:
        KeyError, TypeError, ValueError: If the data is malformed.
    """
    if not isinstance(data, dict):
        raise TypeError("session file must hold a JSON object")
    duration = data["duration"]
    if not isinstance(duration, (int, float)) or isinstance(duration, bool):
        raise TypeError("duration must be a number of seconds")
    notified = data.get("notified", False)
    if not isinstance(notified, bool):
        raise TypeError("notified must be true or false")
    tags = data.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise TypeError("tags must be a list of strings")
    description = data.get("description")
    if description is not None and not isinstance(description, str):
        raise TypeError("description must be a string")

    return SessionRecord(
        kind=data["kind"],
        started_at=datetime.fromisoformat(data["started_at"]),
        duration=timedelta(seconds=duration),
        description=description,
        tags=tags,
        notified=notified,
    )


def load_session(state_path: Path) -> SessionRecord | None:
    """Load the current session.

    Args:
        state_path: Path of the session file.

    Returns:
        The session record, or None if no session file exists.

    Raises:
        CorruptState: If the file exists but cannot be parsed.
        StorageError: If the file cannot be read.
    """
    try:
        content = state_path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageError(state_path, str(e)) from e

    try:
        return record_from_dict(orjson.loads(content))
    except orjson.JSONDecodeError as e:
        raise CorruptState(state_path, f"invalid JSON ({e})") from e
    except KeyError as e:
        raise CorruptState(state_path, f"missing field {e}") from e
    except (TypeError, ValueError, OverflowError) as e:
        raise CorruptState(state_path, str(e)) from e


def save_session(state_path: Path, record: SessionRecord) -> None:
    """Atomically write the session record.

    Args:
        state_path: Path of the session file.
        record: The record to persist.

    Raises:
        StorageError: If the file cannot be written.
    """
    payload = orjson.dumps(record_to_dict(record), option=orjson.OPT_INDENT_2)

    try:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=str(state_path.parent),
            prefix=".tmp_session_",
            suffix=".json",
        )
    except OSError as e:
        raise StorageError(state_path, str(e)) from e

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, state_path)
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise StorageError(state_path, str(e)) from e

    logger.info("Saved %s session to %s", record.kind, state_path)


def delete_session(state_path: Path) -> None:
    """Delete the session file. Succeeds silently if it doesn't exist.

    Raises:
        StorageError: If the file exists but cannot be removed.
    """
    try:
        state_path.unlink()
    except FileNotFoundError:
        return
    except OSError as e:
        raise StorageError(state_path, str(e)) from e

    logger.info("Deleted session file %s", state_path)
