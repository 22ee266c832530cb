"""Temporary Verdaccio registry lifecycle."""

import logging
import math
import shutil
from pathlib import Path

from theia_standalone.core.config import REGISTRY_HOST
from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.disposables import Disposable
from theia_standalone.core.errors import RegistryTimeoutError
from theia_standalone.ops.process import RunningProcess

logger = logging.getLogger(__name__)

VERDACCIO_COMMAND = "verdaccio"
STORAGE_ENV_VAR = "VERDACCIO_STORAGE_PATH"
PORT_POLL_INTERVAL = 0.25


class RegistryHandle(Disposable):
    """Owns the registry process and its storage directory."""

    def __init__(self, process: RunningProcess, storage: Path) -> None:
        self.process = process
        self.storage = storage
        self._released = False

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self.process.stop()
        if self.storage.exists():
            shutil.rmtree(self.storage)

    def __repr__(self) -> str:
        return f"RegistryHandle(storage={str(self.storage)!r})"


def build_verdaccio_args(config: Path | None, port: int) -> list[str]:
    """Build verdaccio arguments, omitting options whose value is falsy."""
    args: list[str] = []
    if config:
        args.extend(["--config", str(config)])
    if port:
        args.extend(["--listen", str(port)])
    return args


def wait_for_port(
    ctx: StandaloneContext,
    port: int,
    timeout: float,
    process: RunningProcess | None = None,
) -> None:
    """Poll until localhost:port accepts a TCP connection.

    Args:
        ctx: Context providing network probing and sleeping
        port: Port to poll
        timeout: Upper bound in seconds on the total wait
        process: If given, stop waiting as soon as this process has exited

    Raises:
        RegistryTimeoutError: If the port is not reachable within timeout
    """
    attempts = max(1, math.ceil(timeout / PORT_POLL_INTERVAL))
    for attempt in range(attempts):
        if ctx.network.is_port_open(REGISTRY_HOST, port):
            logger.debug("Port %d reachable after %d attempt(s)", port, attempt + 1)
            return
        if process is not None and not process.is_running():
            raise RegistryTimeoutError(
                f"Registry exited before port {port} became reachable."
            )
        ctx.time.sleep(PORT_POLL_INTERVAL)

    raise RegistryTimeoutError(f"Registry port {port} not reachable after {timeout:g}s.")


def start_registry(
    ctx: StandaloneContext,
    config: Path | None,
    port: int,
    storage: Path,
    debug: bool,
    timeout: float,
) -> RegistryHandle:
    """Start Verdaccio and block until it listens on port.

    The storage directory is handed to Verdaccio through its environment.
    If the registry never becomes reachable, or the wait is interrupted, the
    process is stopped and the storage removed before the error propagates.

    Returns:
        RegistryHandle that stops the registry and deletes its storage

    Raises:
        RegistryTimeoutError: If the port never becomes reachable
        ProcessLaunchError: If verdaccio could not be started
    """
    storage_dir = (ctx.cwd / storage).resolve()
    config_path = ctx.cwd / config if config else None

    ctx.feedback.info("🚀 Starting verdaccio...")
    process = ctx.process_runner.start(
        VERDACCIO_COMMAND,
        build_verdaccio_args(config_path, port),
        env={STORAGE_ENV_VAR: str(storage_dir)},
        debug=debug,
    )
    handle = RegistryHandle(process, storage_dir)
    try:
        wait_for_port(ctx, port, timeout, process=process)
    except BaseException:
        # Covers timeouts and interrupts delivered while waiting
        handle.release()
        raise
    return handle
