"""Error types raised while loading a specification or building a bundle.

Library code raises these and lets them propagate; the command-line entry
points turn them into an ``ERROR:`` line on stderr and a non-zero exit.
Filesystem failures are not wrapped and surface as plain ``OSError``.
"""

from typing import Optional, Sequence


class AppBundlerError(Exception):
    """Base class for every failure the builder reports."""


class ConfigError(AppBundlerError):
    """The specification document is missing, malformed or incomplete."""

    def __init__(self, message: str, path=None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class ExternalToolError(AppBundlerError):
    """An external compiler or the deploy tool failed or could not be found.

    Attributes:
        cmd: The argument list that was executed.
        returncode: Exit status, or None when the tool could not be started.
    """

    def __init__(self, cmd: Sequence[str], returncode: Optional[int] = None,
                 reason: Optional[str] = None):
        tool = cmd[0] if cmd else "<empty command>"
        if returncode is not None:
            message = f"{tool} exited with status {returncode}"
        else:
            message = f"{tool} could not be executed"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.cmd = list(cmd)
        self.returncode = returncode
