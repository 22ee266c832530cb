import logging
import time
from pathlib import Path

import click
from rich.console import Console

from theia_standalone.cli.output import format_build_summary, format_config_table, user_output
from theia_standalone.core.config import (
    DEFAULT_APP,
    DEFAULT_INCLUDE_EXTENSIONS,
    DEFAULT_OUTPUT,
    DEFAULT_VERDACCIO_CONFIG,
    DEFAULT_VERDACCIO_PORT,
    DEFAULT_VERDACCIO_STORAGE,
    DEFAULT_VERDACCIO_TIMEOUT,
    BuildConfig,
)
from theia_standalone.core.context import StandaloneContext, create_context
from theia_standalone.core.errors import StandalonePackagingError
from theia_standalone.core.pipeline import run_pipeline

# Terse help flags; every option can also be set as THEIA_STANDALONE_<NAME>
CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    auto_envvar_prefix="THEIA_STANDALONE",
    max_content_width=120,
)

DEBUG_LOG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG, format=DEBUG_LOG_FORMAT)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--app",
    "-a",
    "app",
    default=DEFAULT_APP,
    show_default=True,
    help="The application package that should be built. "
    "All local dependencies must be present in the include pattern.",
)
@click.option(
    "--output",
    "-o",
    "output",
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="The output directory for the build result.",
)
@click.option(
    "--includeExtensions",
    "-i",
    "include_extensions",
    multiple=True,
    default=DEFAULT_INCLUDE_EXTENSIONS,
    show_default=True,
    help="Glob pattern matching extensions that should be published. Repeatable.",
)
@click.option(
    "--excludeExtensions",
    "-e",
    "exclude_extensions",
    multiple=True,
    help="Glob pattern matching extensions that should be ignored for publishing. Repeatable.",
)
@click.option(
    "--verdaccioConfig",
    "-c",
    "verdaccio_config",
    default=DEFAULT_VERDACCIO_CONFIG,
    show_default=True,
    help="The configuration of the temporary Verdaccio instance.",
)
@click.option(
    "--verdaccioPort",
    "-p",
    "verdaccio_port",
    type=int,
    default=DEFAULT_VERDACCIO_PORT,
    show_default=True,
    help="Port on which the temporary Verdaccio instance should be run.",
)
@click.option(
    "--verdaccioStorage",
    "-s",
    "verdaccio_storage",
    default=DEFAULT_VERDACCIO_STORAGE,
    show_default=True,
    help="The directory name where the temporary Verdaccio instance should be stored.",
)
@click.option(
    "--verdaccioTimeout",
    "-t",
    "verdaccio_timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_VERDACCIO_TIMEOUT,
    show_default=True,
    help="Seconds to wait for the temporary Verdaccio instance to accept connections.",
)
@click.option(
    "--debug",
    "-d",
    "debug",
    is_flag=True,
    help="Enable debug output, including the output of child processes.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    app: str,
    output: str,
    include_extensions: tuple[str, ...],
    exclude_extensions: tuple[str, ...],
    verdaccio_config: str,
    verdaccio_port: int,
    verdaccio_storage: str,
    verdaccio_timeout: float,
    debug: bool,
) -> None:
    """Build a standalone Theia application from local extensions.

    Publishes the extensions to a temporary Verdaccio registry, copies the
    application to the output directory, installs its dependencies from that
    registry and strips files not needed at runtime. The registry, its
    storage and the temporary .npmrc are removed when the build ends.
    """
    configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()
    standalone_ctx: StandaloneContext = ctx.obj

    config = BuildConfig(
        app=Path(app),
        output=Path(output),
        include_extensions=tuple(include_extensions),
        exclude_extensions=tuple(exclude_extensions),
        verdaccio_config=Path(verdaccio_config) if verdaccio_config else None,
        verdaccio_port=verdaccio_port,
        verdaccio_storage=Path(verdaccio_storage),
        verdaccio_timeout=verdaccio_timeout,
        debug=debug,
    )
    console = Console(stderr=True)
    if debug:
        console.print(format_config_table(config))

    start_time = time.monotonic()
    try:
        run_pipeline(standalone_ctx, config)
    except StandalonePackagingError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e
    except KeyboardInterrupt:
        user_output(click.style("Interrupted. ", fg="yellow") + "Temporary resources released.")
        raise SystemExit(130) from None

    console.print(format_build_summary(config, time.monotonic() - start_time))


def main() -> None:
    """CLI entry point used by the `theia-standalone` console script."""
    cli()
