"""Run external executables from test steps.

:class:`ProcessRunner` wraps one command line (for example a UI automation
helper script) so a test can start it, optionally in the background, wait
for it and read its exit code.  It is independent of the keyword
generators.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence

from .utils.errors import InvalidArgumentError, ProcessError, ProcessTimeoutError
from .utils.logging import get_logger

__all__ = ["ProcessRunner"]

log = get_logger(__name__)


class ProcessRunner:
    """Start, wait for and inspect an external process.

    Parameters
    ----------
    command:
        The executable path with optional arguments, either as one string
        (split with :func:`shlex.split`) or as an argument sequence.
    """

    def __init__(self, command: str | Sequence[str]) -> None:
        if isinstance(command, str):
            if not command.strip():
                raise InvalidArgumentError("command cannot be empty")
            args = shlex.split(command.strip())
        else:
            args = [str(part) for part in command]
            if not args or not args[0].strip():
                raise InvalidArgumentError("command cannot be empty")
        self.args: list[str] = args
        self._process: subprocess.Popen[bytes] | None = None
        self._last_exit_code: int | None = None

    def __repr__(self) -> str:
        return f"ProcessRunner({shlex.join(self.args)!r})"

    @property
    def is_running(self) -> bool:
        """Return ``True`` while the most recently started process is alive."""

        return self._process is not None and self._process.poll() is None

    @property
    def last_exit_code(self) -> int | None:
        """Exit code of the last completed run, ``None`` if none has completed.

        While a process is still running this is the code of the previous run.
        """

        if self._process is not None:
            code = self._process.poll()
            if code is not None:
                self._last_exit_code = code
        return self._last_exit_code

    def _start(self) -> subprocess.Popen[bytes]:
        if self.is_running:
            raise ProcessError(f"{self!r} is already running")
        log.debug("starting process: %s", shlex.join(self.args))
        try:
            self._process = subprocess.Popen(self.args)
        except OSError as exc:
            raise ProcessError(f"unable to start '{shlex.join(self.args)}': {exc}") from exc
        return self._process

    def run_async(self) -> None:
        """Start the process without waiting for it to finish."""

        self._start()

    def run(self, timeout: float | None = None) -> int:
        """Start the process and wait for it; return its exit code."""

        self._start()
        return self.wait(timeout)

    def wait(self, timeout: float | None = None) -> int:
        """Wait for the running process and return its exit code.

        Raises :class:`ProcessTimeoutError` when ``timeout`` seconds elapse
        first; the process keeps running in that case.
        """

        if self._process is None:
            raise ProcessError(f"{self!r} has not been started")
        try:
            code = self._process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeoutError(
                f"'{shlex.join(self.args)}' did not finish within {timeout} seconds"
            ) from exc
        self._last_exit_code = code
        log.debug("process exited with %d: %s", code, shlex.join(self.args))
        return code

    def terminate(self) -> None:
        """Terminate the running process, if any."""

        if self.is_running:
            assert self._process is not None
            self._process.terminate()
            self._process.wait()
