"""Tests for the subprocess-backed runner (spawns the current interpreter)."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from adapters.process_runner import EXIT_LAUNCH_FAILED, EXIT_TIMED_OUT, SubprocessRunner, build_runner
from core.interfaces.runner import CommandRunner


def test_captures_stdout_and_exit_code(tmp_path):
    runner = SubprocessRunner()
    result = runner.run(sys.executable, ["-c", "import os; print(os.getcwd())"], cwd=tmp_path)
    assert result.ok
    assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()


def test_non_zero_exit_is_returned_not_raised():
    runner = SubprocessRunner()
    result = runner.run(sys.executable, ["-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"])
    assert result.exit_code == 3
    assert result.stderr == "bad"
    assert result.args[0] == "-c"


def test_missing_executable():
    result = SubprocessRunner().run("definitely-not-a-real-pac-binary", ["help"])
    assert result.exit_code == EXIT_LAUNCH_FAILED
    assert result.stderr


def test_timeout():
    runner = SubprocessRunner(timeout_seconds=0.5)
    result = runner.run(sys.executable, ["-c", "import time; time.sleep(5)"])
    assert result.exit_code == EXIT_TIMED_OUT
    assert "timed out" in result.stderr


@pytest.mark.unit
def test_build_runner_uses_configured_timeout(settings):
    configured = settings.model_copy(update={"command_timeout_seconds": 12.5})
    runner = build_runner(configured)
    assert isinstance(runner, CommandRunner)
    assert runner._timeout == 12.5
