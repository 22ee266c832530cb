"""Fake process operations for testing without spawning anything.

Records every run() and start() call for verification in tests. All
processes succeed by default; failures are configured per command prefix.
"""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

from theia_standalone.core.errors import ProcessLaunchError
from theia_standalone.ops.process import (
    ProcessResult,
    ProcessRunner,
    ProcessStatus,
    RunningProcess,
)


class FakeRunningProcess(RunningProcess):
    """Background process that runs until stopped, or exits on its own if told to."""

    def __init__(
        self,
        command: str,
        args: list[str],
        env: dict[str, str],
        *,
        exited: bool = False,
    ) -> None:
        self.command = command
        self.args = args
        self.env = env
        self.stop_calls = 0
        self._running = not exited

    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        self.stop_calls += 1
        self._running = False


class FakeProcessRunner(ProcessRunner):
    """In-memory fake process runner for unit testing.

    Attributes:
        run_calls: List of (command, args, cwd, debug) tuples
        started: FakeRunningProcess instances returned by start()

    Examples:
        # Every process succeeds
        >>> runner = FakeProcessRunner()

        # `yarn install` exits with status 1
        >>> runner = FakeProcessRunner(
        ...     outcomes={("yarn", "install"): ProcessStatus.NON_ZERO_EXIT}
        ... )

        # Simulate Ctrl-C while `yarn install` runs
        >>> def interrupt(command, args): raise KeyboardInterrupt
        >>> runner = FakeProcessRunner(hooks={("yarn", "install"): interrupt})
    """

    def __init__(
        self,
        *,
        outcomes: Mapping[tuple[str, ...], ProcessStatus] | None = None,
        hooks: Mapping[tuple[str, ...], Callable[[str, list[str]], None]] | None = None,
        start_fails: bool = False,
        started_process_exits: bool = False,
    ) -> None:
        """Initialize fake.

        Args:
            outcomes: Status to report for runs whose (command, *args) starts
                with the given prefix. Unmatched runs succeed.
            hooks: Callback invoked before a matching run is recorded; may raise
            start_fails: Whether start() raises ProcessLaunchError
            started_process_exits: Whether started processes report as exited
        """
        self._outcomes = dict(outcomes or {})
        self._hooks = dict(hooks or {})
        self._start_fails = start_fails
        self._started_process_exits = started_process_exits
        self.run_calls: list[tuple[str, list[str], Path, bool]] = []
        self.started: list[FakeRunningProcess] = []

    @staticmethod
    def _matches(prefix: tuple[str, ...], cmd: tuple[str, ...]) -> bool:
        return cmd[: len(prefix)] == prefix

    @property
    def commands(self) -> list[list[str]]:
        """Each run as a flat [command, *args] list."""
        return [[command, *args] for command, args, _, _ in self.run_calls]

    def run(
        self,
        command: str,
        args: Sequence[str],
        cwd: Path,
        debug: bool,
    ) -> ProcessResult:
        cmd = (command, *args)
        for prefix, hook in self._hooks.items():
            if self._matches(prefix, cmd):
                hook(command, list(args))
        self.run_calls.append((command, list(args), cwd, debug))

        for prefix, status in self._outcomes.items():
            if not self._matches(prefix, cmd):
                continue
            if status == ProcessStatus.SIGNALED:
                return ProcessResult(command=cmd, status=status, returncode=-15, signal=15)
            if status == ProcessStatus.LAUNCH_ERROR:
                return ProcessResult(
                    command=cmd,
                    status=status,
                    error=FileNotFoundError(2, "No such file or directory", command),
                )
            if status == ProcessStatus.NON_ZERO_EXIT:
                return ProcessResult(command=cmd, status=status, returncode=1)
        return ProcessResult(command=cmd, status=ProcessStatus.SUCCESS, returncode=0)

    def start(
        self,
        command: str,
        args: Sequence[str],
        env: Mapping[str, str],
        debug: bool,
    ) -> RunningProcess:
        if self._start_fails:
            raise ProcessLaunchError(f"Could not start '{command}'")
        process = FakeRunningProcess(
            command, list(args), dict(env), exited=self._started_process_exits
        )
        self.started.append(process)
        return process

    @property
    def running_processes(self) -> list[FakeRunningProcess]:
        return [process for process in self.started if process.is_running()]
