"""Child process operations interface.

This module defines the abstract interface for running external tools
(``yarn``, ``verdaccio``), following the ops pattern with ABC-based
dependency injection for testability.

Architecture:
- ProcessRunner: abstract interface for synchronous and background processes
- RunningProcess: handle on a background process
- ProcessResult: typed outcome of a synchronous run
- ensure_process_succeeded: decides which outcomes are fatal
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from theia_standalone.core.errors import (
    ProcessAbortedError,
    ProcessFailedError,
    ProcessLaunchError,
)

logger = logging.getLogger(__name__)


class ProcessStatus(Enum):
    """How a synchronous child process ended."""

    SUCCESS = "success"
    SIGNALED = "signaled"
    LAUNCH_ERROR = "launch_error"
    NON_ZERO_EXIT = "non_zero_exit"


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of a synchronous child process.

    Attributes:
        command: Command and arguments that were executed
        status: Classification of the outcome
        returncode: Exit status, or None if the process never started
        signal: Number of the terminating signal, if any
        error: Launch error, if the process never started
    """

    command: tuple[str, ...]
    status: ProcessStatus
    returncode: int | None = None
    signal: int | None = None
    error: OSError | None = None


class RunningProcess(ABC):
    """Handle on a process running in the background."""

    @abstractmethod
    def is_running(self) -> bool:
        """Return True while the process has not exited."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the process and wait for it to exit.

        Calling stop() on an already exited process is a no-op.
        """
        ...


class ProcessRunner(ABC):
    """Abstract interface for child process operations.

    Real implementations use subprocess. Fake implementations are pure
    in-memory for unit tests and never start a process.
    """

    @abstractmethod
    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        debug: bool,
    ) -> ProcessResult:
        """Run a command to completion.

        Args:
            command: Executable name or path
            args: Arguments passed to the executable
            cwd: Working directory for the process
            debug: Whether the child's output is shown to the user

        Returns:
            ProcessResult classifying how the process ended. Launch errors
            are reported through the result rather than raised.
        """
        ...

    @abstractmethod
    def start(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str],
        debug: bool,
    ) -> RunningProcess:
        """Start a command in the background.

        Args:
            command: Executable name or path
            args: Arguments passed to the executable
            env: Extra environment variables layered over the current environment
            debug: Whether the child's output is shown to the user

        Returns:
            Handle on the running process

        Raises:
            ProcessLaunchError: If the process could not be started
        """
        ...


def ensure_process_succeeded(result: ProcessResult) -> None:
    """Raise the error matching a failed process result.

    Raises:
        ProcessAbortedError: If the process was terminated by a signal
        ProcessLaunchError: If the process could not be started
        ProcessFailedError: If the process exited with a non-zero status
        ValueError: If a non-zero exit result carries no exit code
    """
    if result.status == ProcessStatus.SUCCESS:
        return

    if result.status == ProcessStatus.SIGNALED:
        logger.debug("Process %s terminated by signal %s", result.command, result.signal)
        raise ProcessAbortedError(result.command)

    if result.status == ProcessStatus.LAUNCH_ERROR:
        logger.error("Error encountered.")
        cmd_str = " ".join(result.command)
        raise ProcessLaunchError(f"Could not start '{cmd_str}': {result.error}") from result.error

    if result.returncode is None:
        cmd_str = " ".join(result.command)
        raise ValueError(f"Result for '{cmd_str}' has status {result.status.name} but no exit code")
    raise ProcessFailedError(result.command, result.returncode)
