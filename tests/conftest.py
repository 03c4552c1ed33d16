"""Shared pytest fixtures for tomate tests."""

import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from tomate.core.config import load_config


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Fake clock starting at a fixed, timezone-aware instant."""
    return FakeClock(datetime(2024, 3, 27, 12, 0, 0, tzinfo=timezone(timedelta(hours=-6))))


@pytest.fixture
def scheduled(monkeypatch):
    """Replace the systemd scheduler with a recorder.

    Returns the list of (at, now, config_path) calls.
    """
    calls = []

    def fake_schedule(at, *, now, config_path=None):
        calls.append((at, now, config_path))

    monkeypatch.setattr("tomate.core.lifecycle.schedule_expiry", fake_schedule)
    return calls


@pytest.fixture
def tomate_home(tmp_path, monkeypatch, scheduled):
    """Point TOMATE_HOME at tmp_path for test isolation.

    This ensures tests don't touch the real ~/.tomate/ directory or schedule
    real systemd timers.
    """
    monkeypatch.setenv("TOMATE_HOME", str(tmp_path))
    monkeypatch.delenv("TOMATE_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def config(tomate_home):
    """Default config rooted in the test's TOMATE_HOME."""
    return load_config()


@pytest.fixture
def make_hook(config):
    """Create hook scripts that append their environment to a log file.

    Returns a function (event, exit_code=0, executable=True) -> log path.
    """
    config.hooks_directory.mkdir(parents=True, exist_ok=True)

    def _make(event: str, exit_code: int = 0, executable: bool = True) -> Path:
        log_path = config.hooks_directory / f"{event}.log"
        script = config.hooks_directory / event
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$TOMATE_EVENT|$TOMATE_KIND|$TOMATE_DESCRIPTION|$TOMATE_TAGS" >> "{log_path}"\n'
            f"exit {exit_code}\n"
        )
        mode = script.stat().st_mode
        if executable:
            script.chmod(mode | stat.S_IXUSR)
        else:
            script.chmod(mode & ~(stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH))
        return log_path

    return _make


def hook_calls(log_path: Path) -> list[str]:
    """Lines written by a hook made with make_hook."""
    if not log_path.exists():
        return []
    return log_path.read_text().splitlines()


@pytest.fixture
def hook_log():
    return hook_calls
