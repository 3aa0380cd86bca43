# Copyright 2025 The jazz-scm-client Authors
# License AGPL-3.0 or later (http://www.gnu.org/licenses/agpl)

import shlex
import subprocess
import threading
import time
from contextlib import closing
from typing import Iterator, List, NamedTuple, Optional, Tuple

from ..exceptions import ScmCommandError, ScmInterrupted, ScmLaunchError, ScmTimeoutError

import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Subprocess output lands here, the equivalent of the build console.
output_logger = logging.getLogger("jazz_scm_client.output")

DEFAULT_TIMEOUT = 5 * 60
POLL_INTERVAL = 0.1
MASK = "********"


class ScmCommand(NamedTuple):
    argv: Tuple[str, ...]

    def to_string_with_quote(self) -> str:
        shown = []
        hide_next = False
        for arg in self.argv:
            shown.append(MASK if hide_next else arg)
            hide_next = arg == "-P"
        return shlex.join(shown)

    def __str__(self) -> str:
        return self.to_string_with_quote()


class _Watchdog(threading.Thread):
    """Kills a process once its deadline passes or the build is cancelled."""

    def __init__(self, proc: subprocess.Popen, timeout: float, cancel_event: Optional[threading.Event]):
        super().__init__(daemon=True)
        self.proc = proc
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.reason: Optional[str] = None
        self._finished = threading.Event()

    def run(self):
        deadline = time.monotonic() + self.timeout
        while not self._finished.is_set():
            if self.cancel_event is not None and self.cancel_event.is_set():
                self._kill("cancelled")
                return
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._kill("timeout")
                return
            self._finished.wait(min(remaining, POLL_INTERVAL))

    def _kill(self, reason: str):
        if self.proc.poll() is None:
            self.reason = reason
            self.proc.kill()

    def stop(self):
        self._finished.set()
        self.join()


class ScmProcess:
    """One running ``scm`` invocation.

    Iterating yields raw stdout lines while copying each to the output logger.
    ``returncode`` and ``reason`` are set once iteration is over.
    """

    def __init__(self, command: ScmCommand, timeout: float, listener: logging.Logger,
                 cancel_event: Optional[threading.Event] = None):
        self.command = command
        self.timeout = timeout
        self.listener = listener
        self.cancel_event = cancel_event
        self.returncode: Optional[int] = None
        self.reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.reason == "cancelled"

    @property
    def timed_out(self) -> bool:
        return self.reason == "timeout"

    def __iter__(self) -> Iterator[bytes]:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self.reason = "cancelled"
            return
        try:
            proc = subprocess.Popen(list(self.command.argv), stdout=subprocess.PIPE, stdin=subprocess.DEVNULL)
        except OSError as e:
            quoted = self.command.to_string_with_quote()
            logger.error(f"Failed to run {quoted}")
            raise ScmLaunchError(quoted, e.strerror or str(e)) from e
        watchdog = _Watchdog(proc, self.timeout, self.cancel_event)
        watchdog.start()
        try:
            for raw in proc.stdout:
                self.listener.info(raw.decode("utf-8", errors="replace").rstrip("\r\n"))
                yield raw
            proc.wait()
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            proc.stdout.close()
            watchdog.stop()
            self.returncode = proc.returncode
            self.reason = watchdog.reason


class ScmRunner:
    """Launches the ``scm`` command line tool.

    Every invocation gets its own argument vector starting with the configured
    executable, runs with a bounded timeout and has its standard output copied
    to ``listener``.
    """

    def __init__(self, executable: str, username: Optional[str] = None, password: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT, listener: Optional[logging.Logger] = None,
                 cancel_event: Optional[threading.Event] = None, encoding: str = "utf-8"):
        self.executable = executable
        self.username = username
        self.password = password
        self.timeout = timeout
        self.listener = listener or output_logger
        self.cancel_event = cancel_event
        self.encoding = encoding

    def auth_args(self) -> List[str]:
        args = []
        if self.username and self.username.strip():
            args += ["-u", self.username]
        if self.password and self.password.strip():
            args += ["-P", self.password]
        return args

    def command(self, *args) -> ScmCommand:
        return ScmCommand((self.executable, *(str(a) for a in args)))

    def _process(self, command: ScmCommand) -> ScmProcess:
        logger.debug(command.to_string_with_quote())
        return ScmProcess(command, self.timeout, self.listener, self.cancel_event)

    def _check(self, process: ScmProcess) -> None:
        quoted = process.command.to_string_with_quote()
        if process.cancelled:
            raise ScmInterrupted(quoted)
        if process.timed_out:
            logger.error(f"Failed to run {quoted}")
            raise ScmTimeoutError(quoted, self.timeout)
        if process.returncode != 0:
            logger.error(f"Failed to run {quoted}")
            raise ScmCommandError(quoted, process.returncode)

    def stream(self, command: ScmCommand) -> Iterator[str]:
        """Yield decoded stdout lines as the tool prints them.

        The exit status is only known once the output is drained, so a failure
        is raised after the last line.
        """
        process = self._process(command)
        with closing(iter(process)) as raws:
            for raw in raws:
                yield raw.decode(self.encoding, errors="replace").rstrip("\r\n")
        self._check(process)

    def popen(self, command: ScmCommand) -> bytes:
        """Run the command and return its captured standard output."""
        process = self._process(command)
        output = b"".join(process)
        self._check(process)
        return output

    def call(self, command: ScmCommand) -> int:
        process = self._process(command)
        for _ in process:
            pass
        if process.cancelled:
            raise ScmInterrupted(command.to_string_with_quote())
        if process.timed_out:
            logger.error(f"Timed out after {self.timeout:g}s: {command.to_string_with_quote()}")
        return process.returncode
