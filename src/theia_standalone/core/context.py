"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from theia_standalone.core.time.abc import Time
from theia_standalone.core.time.real import RealTime
from theia_standalone.core.user_feedback import InteractiveFeedback, UserFeedback
from theia_standalone.ops.network import Network
from theia_standalone.ops.network_real import RealNetwork
from theia_standalone.ops.process import ProcessRunner
from theia_standalone.ops.process_real import RealProcessRunner


@dataclass(frozen=True)
class StandaloneContext:
    """Immutable context holding all dependencies for a packaging run.

    Created at the CLI entry point and threaded through the pipeline.
    Frozen to prevent accidental modification at runtime.
    """

    process_runner: ProcessRunner
    network: Network
    time: Time
    feedback: UserFeedback
    cwd: Path  # Directory holding the root package.json, yarn.lock and .npmrc

    @staticmethod
    def for_test(
        process_runner: ProcessRunner | None = None,
        network: Network | None = None,
        time: Time | None = None,
        feedback: UserFeedback | None = None,
        cwd: Path | None = None,
    ) -> "StandaloneContext":
        """Create test context with optional pre-configured integration classes.

        Any integration left unspecified gets its fake with default settings:
        processes succeed, ports are open, sleeps return immediately.

        Args:
            process_runner: Optional ProcessRunner. If None, creates FakeProcessRunner.
            network: Optional Network. If None, creates FakeNetwork with all ports open.
            time: Optional Time. If None, creates FakeTime.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            cwd: Optional working directory. If None, uses Path("/test/default/cwd").

        Returns:
            StandaloneContext configured for tests
        """
        from tests.fakes.network import FakeNetwork
        from tests.fakes.process import FakeProcessRunner
        from tests.fakes.time import FakeTime
        from tests.fakes.user_feedback import FakeUserFeedback

        return StandaloneContext(
            process_runner=process_runner or FakeProcessRunner(),
            network=network or FakeNetwork(),
            time=time or FakeTime(),
            feedback=feedback or FakeUserFeedback(),
            cwd=cwd or Path("/test/default/cwd"),
        )


def create_context(cwd: Path | None = None) -> StandaloneContext:
    """Create production context with real implementations."""
    return StandaloneContext(
        process_runner=RealProcessRunner(),
        network=RealNetwork(),
        time=RealTime(),
        feedback=InteractiveFeedback(),
        cwd=cwd or Path.cwd(),
    )
