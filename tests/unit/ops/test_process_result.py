"""Tests for deciding which process outcomes are fatal."""

import pytest

from theia_standalone.core.errors import (
    ProcessAbortedError,
    ProcessFailedError,
    ProcessLaunchError,
)
from theia_standalone.ops.process import ProcessResult, ProcessStatus, ensure_process_succeeded

COMMAND = ("yarn", "install")


def test_success_does_not_raise() -> None:
    ensure_process_succeeded(
        ProcessResult(command=COMMAND, status=ProcessStatus.SUCCESS, returncode=0)
    )


def test_signaled_raises_aborted() -> None:
    result = ProcessResult(
        command=COMMAND, status=ProcessStatus.SIGNALED, returncode=-2, signal=2
    )

    with pytest.raises(ProcessAbortedError, match="^Aborted.$") as exc_info:
        ensure_process_succeeded(result)

    assert exc_info.value.command == ["yarn", "install"]


def test_launch_error_chains_underlying_error() -> None:
    error = FileNotFoundError(2, "No such file or directory", "yarn")
    result = ProcessResult(command=COMMAND, status=ProcessStatus.LAUNCH_ERROR, error=error)

    with pytest.raises(ProcessLaunchError, match="Could not start 'yarn install'") as exc_info:
        ensure_process_succeeded(result)

    assert exc_info.value.__cause__ is error


def test_non_zero_exit_raises_failed() -> None:
    result = ProcessResult(command=COMMAND, status=ProcessStatus.NON_ZERO_EXIT, returncode=3)

    with pytest.raises(ProcessFailedError) as exc_info:
        ensure_process_succeeded(result)

    assert exc_info.value.returncode == 3
    assert "Command failed: yarn install" in str(exc_info.value)
    assert "Exit code: 3" in str(exc_info.value)


def test_non_zero_exit_without_returncode_is_rejected() -> None:
    """A malformed result raises a descriptive error, never ProcessFailedError(None)."""
    result = ProcessResult(command=COMMAND, status=ProcessStatus.NON_ZERO_EXIT)

    with pytest.raises(ValueError, match="'yarn install' has status NON_ZERO_EXIT but no exit code"):
        ensure_process_succeeded(result)
