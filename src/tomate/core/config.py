"""Tomate configuration management.

Handles ~/.tomate/config.json (or $TOMATE_HOME/config.json). Every key is
optional:

{
  "pomodoro_duration": "25m",
  "short_break_duration": "5m",
  "long_break_duration": 900,
  "hooks_directory": "~/.tomate/hooks",
  "state_file_path": "~/.tomate/current.json",
  "history_file_path": "~/.tomate/history.jsonl"
}

Durations are a duration string or an integer number of seconds.
"""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import orjson

from tomate.core.errors import CorruptState, StorageError
from tomate.core.session import LONG_BREAK, POMODORO, SHORT_BREAK
from tomate.core.timefmt import parse_duration

# Set TOMATE_HOME to keep all tomate files somewhere other than ~/.tomate
TOMATE_HOME_ENV = "TOMATE_HOME"

DEFAULT_POMODORO_DURATION = timedelta(minutes=25)
DEFAULT_SHORT_BREAK_DURATION = timedelta(minutes=5)
DEFAULT_LONG_BREAK_DURATION = timedelta(minutes=15)


def get_tomate_home() -> Path:
    """Get the directory holding tomate's config and state."""
    if env_home := os.environ.get(TOMATE_HOME_ENV):
        return Path(env_home).expanduser()
    return Path.home() / ".tomate"


def get_config_path() -> Path:
    """Get the path to tomate's default config file."""
    return get_tomate_home() / "config.json"


@dataclass(frozen=True)
class Config:
    """Settings consumed by the session lifecycle.

    Attributes:
        pomodoro_duration: Default length of a Pomodoro
        short_break_duration: Default length of a short break
        long_break_duration: Default length of a long break
        hooks_directory: Directory searched for hook scripts
        state_file_path: File holding the current session
        history_file_path: File holding completed Pomodoros
        config_path: File this config was read from, if any
    """

    pomodoro_duration: timedelta
    short_break_duration: timedelta
    long_break_duration: timedelta
    hooks_directory: Path
    state_file_path: Path
    history_file_path: Path
    config_path: Path | None = None

    def duration_for(self, kind: str) -> timedelta:
        """Get the configured default duration for a session kind."""
        durations = {
            POMODORO: self.pomodoro_duration,
            SHORT_BREAK: self.short_break_duration,
            LONG_BREAK: self.long_break_duration,
        }
        return durations[kind]


def read_config(config_path: Path) -> dict:
    """Read a config file, returning an empty dict if not found.

    Raises:
        CorruptState: If the file isn't a JSON object.
        StorageError: If the file cannot be read.
    """
    try:
        content = config_path.read_bytes()
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise StorageError(config_path, str(e)) from e

    if not content.strip():
        return {}
    try:
        data = orjson.loads(content)
    except orjson.JSONDecodeError as e:
        raise CorruptState(config_path, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise CorruptState(config_path, "config must be a JSON object")
    return data


def _duration_setting(
    data: dict, key: str, default: timedelta, config_path: Path
) -> timedelta:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        if value <= 0:
            raise CorruptState(config_path, f"{key} must be positive")
        return timedelta(seconds=value)
    if isinstance(value, str):
        try:
            return parse_duration(value)
        except ValueError as e:
            raise CorruptState(config_path, f"{key}: {e}") from e
    raise CorruptState(config_path, f"{key} must be a duration string or seconds")


def _path_setting(data: dict, key: str, default: Path, config_path: Path) -> Path:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str) or not value:
        raise CorruptState(config_path, f"{key} must be a path string")
    return Path(value).expanduser()


def load_config(config_path: Path | None = None) -> Config:
    """Build the config from a file, falling back to defaults.

    Args:
        config_path: Config file to read. Defaults to $TOMATE_HOME/config.json.

    Returns:
        The loaded configuration.

    Raises:
        CorruptState: If the file exists but holds invalid settings.
    """
    explicit = config_path is not None
    if config_path is None:
        config_path = get_config_path()
    data = read_config(config_path)
    home = get_tomate_home()

    return Config(
        pomodoro_duration=_duration_setting(
            data, "pomodoro_duration", DEFAULT_POMODORO_DURATION, config_path
        ),
        short_break_duration=_duration_setting(
            data, "short_break_duration", DEFAULT_SHORT_BREAK_DURATION, config_path
        ),
        long_break_duration=_duration_setting(
            data, "long_break_duration", DEFAULT_LONG_BREAK_DURATION, config_path
        ),
        hooks_directory=_path_setting(
            data, "hooks_directory", home / "hooks", config_path
        ),
        state_file_path=_path_setting(
            data, "state_file_path", home / "current.json", config_path
        ),
        history_file_path=_path_setting(
            data, "history_file_path", home / "history.jsonl", config_path
        ),
        config_path=config_path if explicit else None,
    )
