"""In-memory Time for readiness polling tests."""

from collections.abc import Callable

from theia_standalone.core.time.abc import Time


class FakeTime(Time):
    """Records requested sleeps and returns immediately.

    on_sleep runs after each recorded sleep. Tests use it to act at a point
    where the real clock would have been blocked, such as delivering a signal
    between two port polls.
    """

    def __init__(self, *, on_sleep: Callable[[float], None] | None = None) -> None:
        self.sleep_calls: list[float] = []
        self._on_sleep = on_sleep

    def sleep(self, seconds: float) -> None:
        self.sleep_calls.append(seconds)
        if self._on_sleep is not None:
            self._on_sleep(seconds)
