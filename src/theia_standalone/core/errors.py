"""Errors raised by the packaging pipeline.

All of these are fatal: the pipeline releases its ephemeral resources and
the CLI reports the message before exiting with a non-zero status.
Filesystem failures are not wrapped and propagate as ``OSError``.
"""

from collections.abc import Sequence


class StandalonePackagingError(RuntimeError):
    """Base class for errors reported at the CLI boundary."""


class RegistryTimeoutError(StandalonePackagingError):
    """The registry never started accepting connections on its port."""


class ProcessAbortedError(StandalonePackagingError):
    """A child process was terminated by a signal."""

    def __init__(self, command: Sequence[str]) -> None:
        self.command = list(command)
        super().__init__("Aborted.")


class ProcessLaunchError(StandalonePackagingError):
    """A child process could not be started."""


class ProcessFailedError(StandalonePackagingError):
    """A child process exited with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        cmd_str = " ".join(self.command)
        super().__init__(f"Command failed: {cmd_str}\nExit code: {returncode}")


class ManifestError(StandalonePackagingError):
    """A package.json is missing or lacks a required field."""


class CleanupError(StandalonePackagingError):
    """One or more ephemeral resources could not be released."""
