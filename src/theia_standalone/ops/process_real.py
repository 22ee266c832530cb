"""Real child process operations using subprocess.

Synchronous runs never raise for process outcomes: the result is classified
and handed back to the caller, which decides what is fatal.
"""

import logging
import os
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from theia_standalone.core.errors import ProcessLaunchError
from theia_standalone.ops.process import (
    ProcessResult,
    ProcessRunner,
    ProcessStatus,
    RunningProcess,
)

logger = logging.getLogger(__name__)

# Seconds to wait after SIGTERM before escalating to SIGKILL
STOP_GRACE_PERIOD = 10.0


def _output_target(debug: bool) -> int | None:
    # None inherits the parent's streams
    if debug:
        return None
    return subprocess.DEVNULL


class RealRunningProcess(RunningProcess):
    """Background process backed by subprocess.Popen."""

    def __init__(self, popen: subprocess.Popen[bytes]) -> None:
        self._popen = popen

    @property
    def pid(self) -> int:
        return self._popen.pid

    def is_running(self) -> bool:
        return self._popen.poll() is None

    def stop(self) -> None:
        if not self.is_running():
            return
        logger.debug("Terminating process %d", self._popen.pid)
        self._popen.terminate()
        try:
            self._popen.wait(timeout=STOP_GRACE_PERIOD)
        except subprocess.TimeoutExpired:
            logger.debug("Process %d ignored SIGTERM, killing", self._popen.pid)
            self._popen.kill()
            self._popen.wait()


class RealProcessRunner(ProcessRunner):
    """Production process runner using subprocess."""

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        debug: bool,
    ) -> ProcessResult:
        cmd = (command, *args)
        logger.debug("Running %s in %s", cmd, cwd)
        output = _output_target(debug)
        try:
            completed = subprocess.run(
                list(cmd),
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=output,
                stderr=output,
                check=False,
            )
        except OSError as e:
            return ProcessResult(command=cmd, status=ProcessStatus.LAUNCH_ERROR, error=e)

        # Negative return codes report the terminating signal on POSIX
        if completed.returncode < 0:
            return ProcessResult(
                command=cmd,
                status=ProcessStatus.SIGNALED,
                returncode=completed.returncode,
                signal=-completed.returncode,
            )
        if completed.returncode != 0:
            return ProcessResult(
                command=cmd,
                status=ProcessStatus.NON_ZERO_EXIT,
                returncode=completed.returncode,
            )
        return ProcessResult(command=cmd, status=ProcessStatus.SUCCESS, returncode=0)

    def start(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str],
        debug: bool,
    ) -> RunningProcess:
        cmd = [command, *args]
        logger.debug("Starting %s with extra env %s", cmd, dict(env))
        output = _output_target(debug)
        try:
            popen = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=output,
                stderr=output,
                env={**os.environ, **env},
            )
        except OSError as e:
            cmd_str = " ".join(cmd)
            raise ProcessLaunchError(f"Could not start '{cmd_str}': {e}") from e
        return RealRunningProcess(popen)
