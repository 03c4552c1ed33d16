"""Tests for hook dispatch."""

import logging
from datetime import datetime, timedelta, timezone

import pytest

from tomate.core.errors import HookNotExecutable, TomateError
from tomate.core.session import SessionRecord
from tomate.hooks.dispatch import (
    HOOK_EVENTS,
    hook_environment,
    hook_event,
    list_hooks,
    run_hook,
)

START = datetime(2024, 3, 27, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def record():
    return SessionRecord(
        kind="pomodoro",
        started_at=START,
        duration=timedelta(minutes=25),
        description="Write report",
        tags=["work", "writing"],
    )


def test_hook_events():
    """Test the six recognized event names."""
    assert set(HOOK_EVENTS) == {
        "pomodoro-start",
        "pomodoro-end",
        "shortbreak-start",
        "shortbreak-end",
        "longbreak-start",
        "longbreak-end",
    }


def test_hook_event_builds_name():
    """Test event names from kind and phase."""
    assert hook_event("longbreak", "end") == "longbreak-end"
    with pytest.raises(ValueError):
        hook_event("nap", "start")


def test_hook_environment(record):
    """Test session attributes are exported to hooks."""
    env = hook_environment("pomodoro-start", record)

    assert env["TOMATE_EVENT"] == "pomodoro-start"
    assert env["TOMATE_KIND"] == "pomodoro"
    assert env["TOMATE_DESCRIPTION"] == "Write report"
    assert env["TOMATE_TAGS"] == "work,writing"
    assert env["TOMATE_STARTED_AT"] == "2024-03-27T12:00:00+00:00"
    assert env["TOMATE_ENDS_AT"] == "2024-03-27T12:25:00+00:00"
    assert env["TOMATE_DURATION"] == "1500"


def test_hook_environment_keeps_parent_env(record, monkeypatch):
    """Test hooks still see the caller's environment."""
    monkeypatch.setenv("DISPLAY", ":1")
    assert hook_environment("pomodoro-end", record)["DISPLAY"] == ":1"


def test_run_hook_missing_is_noop(tmp_path, record, caplog):
    """Test a missing hook is silently skipped."""
    with caplog.at_level(logging.WARNING):
        result = run_hook(tmp_path, "pomodoro-start", record)

    assert result.outcome == "missing"
    assert not result.ran
    assert caplog.records == []


def test_run_hook_missing_directory(tmp_path, record):
    """Test a hooks directory that doesn't exist is fine."""
    result = run_hook(tmp_path / "nope", "pomodoro-end", record)
    assert result.outcome == "missing"


def test_run_hook_executes(config, record, make_hook, hook_log):
    """Test an executable hook runs with the session environment."""
    log_path = make_hook("pomodoro-start")

    result = run_hook(config.hooks_directory, "pomodoro-start", record)

    assert result.outcome == "succeeded"
    assert result.returncode == 0
    assert result.ran
    assert hook_log(log_path) == ["pomodoro-start|pomodoro|Write report|work,writing"]


def test_run_hook_not_executable(config, record, make_hook, hook_log, caplog):
    """Test a non-executable hook is reported and not run."""
    log_path = make_hook("pomodoro-end", executable=False)

    with caplog.at_level(logging.WARNING):
        result = run_hook(config.hooks_directory, "pomodoro-end", record)

    assert result.outcome == "not-executable"
    assert not result.ran
    assert "chmod +x" in result.message
    assert isinstance(result.error, HookNotExecutable)
    assert result.error.path == config.hooks_directory / "pomodoro-end"
    assert hook_log(log_path) == []
    assert any("not executable" in r.message for r in caplog.records)


def test_run_hook_directory_named_like_event(tmp_path, record):
    """Test a directory with an event name is not run."""
    (tmp_path / "pomodoro-end").mkdir()
    result = run_hook(tmp_path, "pomodoro-end", record)
    assert result.outcome == "not-executable"


def test_run_hook_failure_is_warning(config, record, make_hook, hook_log, caplog):
    """Test a failing hook is logged but doesn't raise."""
    log_path = make_hook("pomodoro-end", exit_code=3)

    with caplog.at_level(logging.WARNING):
        result = run_hook(config.hooks_directory, "pomodoro-end", record)

    assert result.outcome == "failed"
    assert result.returncode == 3
    assert "status 3" in result.message
    assert len(hook_log(log_path)) == 1
    assert any("status 3" in r.message for r in caplog.records)


def test_run_hook_bad_interpreter(config, record, caplog):
    """Test a hook that can't be spawned is a warning, not an error."""
    config.hooks_directory.mkdir(parents=True)
    script = config.hooks_directory / "pomodoro-start"
    script.write_text("#!/nonexistent/interpreter\n")
    script.chmod(0o755)

    with caplog.at_level(logging.WARNING):
        result = run_hook(config.hooks_directory, "pomodoro-start", record)

    assert result.outcome == "failed"
    assert result.returncode is None
    assert "could not be executed" in result.message


def test_run_hook_rejects_unknown_event(tmp_path, record):
    """Test unknown event names raise ValueError."""
    with pytest.raises(ValueError, match="Invalid hook event"):
        run_hook(tmp_path, "pomodoro-middle", record)


def test_list_hooks(config, make_hook):
    """Test listing reports each event's state."""
    make_hook("pomodoro-start")
    make_hook("pomodoro-end", executable=False)

    states = {event: state for event, _path, state in list_hooks(config.hooks_directory)}

    assert states["pomodoro-start"] == "ready"
    assert states["pomodoro-end"] == "not-executable"
    assert states["shortbreak-start"] == "missing"
    assert len(states) == 6


def test_hook_not_executable_is_tomate_error(tmp_path):
    """Test the warning type belongs to the tomate error family."""
    error = HookNotExecutable(tmp_path / "pomodoro-end")
    assert isinstance(error, TomateError)
    assert str(error).endswith(f"chmod +x {tmp_path / 'pomodoro-end'})")
