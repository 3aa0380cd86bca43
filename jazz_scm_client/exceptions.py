class ScmError(Exception):
    """Base error for a failed ``scm`` invocation.

    Everything that must abort the enclosing build derives from it.
    """


class ScmCommandError(ScmError):
    def __init__(self, command: str, returncode: int):
        super().__init__(f"Failed to run {command} (exit code {returncode})")
        self.command = command
        self.returncode = returncode


class ScmTimeoutError(ScmError):
    def __init__(self, command: str, timeout: float):
        super().__init__(f"Failed to run {command} (no result after {timeout:g}s)")
        self.command = command
        self.timeout = timeout


class ScmInterrupted(ScmError):
    def __init__(self, command: str):
        super().__init__(f"Interrupted while running {command}")
        self.command = command


class ChangelogParseError(ScmError):
    """Output of ``scm list changesets`` that breaks its own structure."""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(f"line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class ScmLaunchError(ScmError):
    """The ``scm`` executable could not be started at all."""

    def __init__(self, command: str, reason: str):
        super().__init__(f"Failed to run {command}: {reason}")
        self.command = command
        self.reason = reason
