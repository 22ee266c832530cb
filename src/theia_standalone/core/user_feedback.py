"""User-facing progress output."""

from abc import ABC, abstractmethod

import click

from theia_standalone.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output for pipeline steps.

    Pipeline code reports progress through ctx.feedback instead of printing,
    so tests can capture messages and assert on them.

    Usage:
        ctx.feedback.info("🚀 Starting verdaccio...")
        ctx.feedback.success("📦 Building app completed")
        ctx.feedback.error("Error: failed to release registry")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr with click styling."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
