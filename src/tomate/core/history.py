"""Append-only history of completed Pomodoros.

History is stored as JSON Lines (default ~/.tomate/history.jsonl), one entry
per line, oldest first:

{"started_at": "...", "ended_at": "...", "tags": ["work"], "description": "..."}

Entries are only ever appended; reading never rewrites the file.
"""

import logging
import os
from datetime import datetime
from pathlib import Path

import orjson

from tomate.core.errors import CorruptState, StorageError
from tomate.core.session import HistoryEntry

logger = logging.getLogger(__name__)


def entry_to_dict(entry: HistoryEntry) -> dict:
    """Convert a history entry to its JSON-ready form."""
    return {
        "started_at": entry.started_at.isoformat(),
        "ended_at": entry.ended_at.isoformat(),
        "tags": list(entry.tags),
        "description": entry.description,
    }


def entry_from_dict(data: dict) -> HistoryEntry:
    """Build a history entry from its JSON form.

    Raises:
        KeyError, TypeError, ValueError: If the data is malformed.
    """
    if not isinstance(data, dict):
        raise TypeError("entry must be a JSON object")
    tags = data.get("tags") or []
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise TypeError("tags must be a list of strings")
    return HistoryEntry(
        started_at=datetime.fromisoformat(data["started_at"]),
        ended_at=datetime.fromisoformat(data["ended_at"]),
        tags=tuple(tags),
        description=data.get("description"),
    )


def append_entry(history_path: Path, entry: HistoryEntry) -> None:
    """Append one entry to the history file.

    The line is flushed and fsynced before returning.

    Args:
        history_path: Path of the history file.
        entry: The completed Pomodoro.

    Raises:
        StorageError: If the entry could not be written.
    """
    line = orjson.dumps(entry_to_dict(entry)) + b"\n"
    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        with open(history_path, "ab") as handle:
            handle.write(line)
            handle.flush()
            os.fsync(handle.fileno())
    except OSError as e:
        raise StorageError(history_path, str(e)) from e

    logger.info("Archived Pomodoro to %s", history_path)


def list_entries(history_path: Path) -> list[HistoryEntry]:
    """Read every history entry, oldest first.

    Args:
        history_path: Path of the history file.

    Returns:
        List of entries. Empty if the file doesn't exist.

    Raises:
        CorruptState: If a line cannot be parsed.
        StorageError: If the file cannot be read.
    """
    try:
        content = history_path.read_bytes()
    except FileNotFoundError:
        return []
    except OSError as e:
        raise StorageError(history_path, str(e)) from e

    entries = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entries.append(entry_from_dict(orjson.loads(line)))
        except orjson.JSONDecodeError as e:
            raise CorruptState(history_path, f"line {lineno}: invalid JSON ({e})") from e
        except KeyError as e:
            raise CorruptState(history_path, f"line {lineno}: missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise CorruptState(history_path, f"line {lineno}: {e}") from e

    return entries


def purge_history(history_path: Path) -> bool:
    """Delete the history file.

    Returns:
        True if a file was removed, False if there was none.

    Raises:
        StorageError: If the file exists but cannot be removed.
    """
    try:
        history_path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageError(history_path, str(e)) from e

    logger.info("Removed history file %s", history_path)
    return True
