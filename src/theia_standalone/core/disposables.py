"""Ownership of ephemeral resources created during a packaging run.

Every step that allocates something temporary (the registry process, its
storage directory, the .npmrc file) hands back a Disposable. The
ResourceGuard collects them and releases all of them once, in registration
order, whether the run completes, fails, or is interrupted.
"""

import logging
import signal
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from types import FrameType
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class Disposable(ABC):
    """A handle whose only contract is releasing what it owns."""

    @abstractmethod
    def release(self) -> None:
        """Release the underlying resource. Repeat calls are no-ops."""
        ...


T = TypeVar("T", bound=Disposable)


class CallbackDisposable(Disposable):
    """Disposable that runs a callback the first time it is released."""

    def __init__(self, callback: Callable[[], None], description: str) -> None:
        self._callback = callback
        self._released = False
        self.description = description

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._callback()

    def __repr__(self) -> str:
        return f"CallbackDisposable({self.description!r})"


@dataclass(frozen=True)
class ReleaseFailure:
    """A disposable whose release raised."""

    disposable: Disposable
    error: Exception


class ResourceGuard:
    """Releases registered disposables exactly once, in registration order.

    Example:
        guard = ResourceGuard()
        guard.install_signal_handlers()
        try:
            guard.register(start_registry(...))
            ...
        finally:
            guard.release_all()
            guard.restore_signal_handlers()
    """

    def __init__(self) -> None:
        self._disposables: list[Disposable] = []
        self._released = False
        self._releasing = False
        self._previous_handlers: dict[int, Any] = {}

    @property
    def disposables(self) -> list[Disposable]:
        return list(self._disposables)

    @property
    def released(self) -> bool:
        return self._released

    def register(self, disposable: T) -> T:
        """Take ownership of a disposable and return it unchanged.

        A disposable registered after release_all() has run is released
        immediately, so nothing can slip past a completed teardown.
        """
        if self._released:
            logger.debug("Guard already released, releasing %r immediately", disposable)
            disposable.release()
            return disposable
        self._disposables.append(disposable)
        return disposable

    def release_all(self) -> list[ReleaseFailure]:
        """Release every registered disposable.

        A failing release does not stop the remaining ones. Failures are
        logged and returned to the caller.

        Returns:
            Failures in registration order; empty when everything was released
            or when this guard had already been released.
        """
        if self._released:
            return []
        self._released = True

        failures: list[ReleaseFailure] = []
        self._releasing = True
        try:
            for disposable in self._disposables:
                try:
                    disposable.release()
                except Exception as e:
                    logger.warning("Failed to release %r: %s", disposable, e)
                    failures.append(ReleaseFailure(disposable=disposable, error=e))
        finally:
            self._releasing = False
        return failures

    def handle_signal(self, signum: int, frame: FrameType | None) -> None:
        """Signal handler that tears everything down and aborts the run.

        A signal arriving while release_all() is running is ignored so the
        teardown already in progress reaches every disposable.
        """
        if self._releasing:
            logger.debug("Received signal %d during teardown, ignoring", signum)
            return
        logger.debug("Received signal %d, releasing resources", signum)
        self.release_all()
        raise KeyboardInterrupt

    def install_signal_handlers(self) -> None:
        """Route SIGINT and SIGTERM to handle_signal.

        Must be called from the main thread.
        """
        for signum in INTERRUPT_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self.handle_signal)

    def restore_signal_handlers(self) -> None:
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
