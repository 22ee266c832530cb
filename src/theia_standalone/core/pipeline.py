"""The packaging pipeline: registry, publish, copy, install, minify.

Every ephemeral resource is registered with a ResourceGuard. The guard is
released in a finally block and from the SIGINT/SIGTERM handler, so the
registry process, its storage and the temporary .npmrc never outlive a run.
"""

import logging
from dataclasses import dataclass

from theia_standalone.core.app import adapt_app, build_app, copy_app, minify_app
from theia_standalone.core.config import BuildConfig
from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.credentials import create_npmrc
from theia_standalone.core.disposables import ReleaseFailure, ResourceGuard
from theia_standalone.core.errors import CleanupError
from theia_standalone.core.extensions import PublishedPackage, publish_extensions
from theia_standalone.core.registry import start_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    published: list[PublishedPackage]


def _report_release_failures(ctx: StandaloneContext, failures: list[ReleaseFailure]) -> None:
    for failure in failures:
        ctx.feedback.error(f"Error: failed to release {failure.disposable!r}: {failure.error}")


def _run_steps(
    ctx: StandaloneContext, config: BuildConfig, guard: ResourceGuard
) -> PipelineResult:
    registry_url = config.registry_url

    guard.register(
        start_registry(
            ctx,
            config.verdaccio_config,
            config.verdaccio_port,
            config.verdaccio_storage,
            config.debug,
            config.verdaccio_timeout,
        )
    )
    guard.register(create_npmrc(ctx, registry_url))

    published = publish_extensions(
        ctx,
        registry_url,
        config.include_extensions,
        config.exclude_extensions,
        config.debug,
    )
    copy_app(ctx, config.app, config.output)
    adapt_app(ctx, config.output)
    build_app(ctx, config.output, registry_url, config.debug)
    minify_app(ctx, config.output, config.debug)
    return PipelineResult(published=published)


def run_pipeline(
    ctx: StandaloneContext,
    config: BuildConfig,
    guard: ResourceGuard | None = None,
    handle_signals: bool = True,
) -> PipelineResult:
    """Run all packaging steps, always releasing ephemeral resources.

    Args:
        ctx: Context with process, network, time and feedback integrations
        config: Resolved build configuration
        guard: Guard to register resources with. A fresh one is used if None.
        handle_signals: Install SIGINT/SIGTERM handlers for the duration of
            the run. Requires running on the main thread.

    Returns:
        PipelineResult describing the published packages

    Raises:
        StandalonePackagingError: On any fatal step, after cleanup
        CleanupError: If every step succeeded but a resource failed to release
        KeyboardInterrupt: If the run was interrupted, after cleanup
    """
    if guard is None:
        guard = ResourceGuard()
    logger.debug("Running pipeline with %s", config)

    if handle_signals:
        guard.install_signal_handlers()
    try:
        result = _run_steps(ctx, config, guard)
    finally:
        failures = guard.release_all()
        _report_release_failures(ctx, failures)
        if handle_signals:
            guard.restore_signal_handlers()

    if failures:
        raise CleanupError(f"{len(failures)} temporary resource(s) could not be released.")
    return result
