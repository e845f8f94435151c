from __future__ import annotations

import sys
from pathlib import Path

import pytest

from ddtgen.process import ProcessRunner
from ddtgen.utils.errors import InvalidArgumentError, ProcessError, ProcessTimeoutError


def _python(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_run_returns_exit_code() -> None:
    runner = ProcessRunner(_python("import sys; sys.exit(3)"))
    assert runner.last_exit_code is None
    assert runner.run(timeout=30) == 3
    assert runner.last_exit_code == 3
    assert not runner.is_running


def test_run_async_and_wait() -> None:
    runner = ProcessRunner(_python("import time; time.sleep(0.2)"))
    runner.run_async()
    assert runner.is_running
    assert runner.last_exit_code is None
    assert runner.wait(timeout=30) == 0
    assert runner.last_exit_code == 0


def test_cannot_start_twice_while_running() -> None:
    runner = ProcessRunner(_python("import time; time.sleep(30)"))
    runner.run_async()
    try:
        with pytest.raises(ProcessError, match="already running"):
            runner.run_async()
    finally:
        runner.terminate()
    assert not runner.is_running


def test_wait_timeout() -> None:
    runner = ProcessRunner(_python("import time; time.sleep(30)"))
    runner.run_async()
    try:
        with pytest.raises(ProcessTimeoutError):
            runner.wait(timeout=0.1)
        assert runner.is_running
    finally:
        runner.terminate()


def test_string_command_is_split() -> None:
    runner = ProcessRunner(f'"{sys.executable}" -c "pass"')
    assert runner.args == [sys.executable, "-c", "pass"]
    assert runner.run(timeout=30) == 0


@pytest.mark.parametrize("command", ["", "   ", []])
def test_empty_command(command: str | list[str]) -> None:
    with pytest.raises(InvalidArgumentError):
        ProcessRunner(command)


def test_wait_before_start() -> None:
    with pytest.raises(ProcessError, match="not been started"):
        ProcessRunner(_python("pass")).wait()


def test_missing_executable(tmp_path: Path) -> None:
    runner = ProcessRunner([str(tmp_path / "no-such-program")])
    with pytest.raises(ProcessError):
        runner.run()
    assert runner.last_exit_code is None
