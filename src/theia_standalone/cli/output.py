"""Output utilities for the CLI with clear intent.

user_output writes human-facing text to stderr. The rich helpers build the
debug configuration table and the closing summary panel.
"""

import click
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from theia_standalone.core.config import BuildConfig


def user_output(message: str) -> None:
    """Write a message for the user to stderr."""
    click.echo(message, err=True)


def format_duration(seconds: float) -> str:
    """Format a duration as e.g. ``45s`` or ``3m 07s``."""
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    if minutes == 0:
        return f"{secs}s"
    return f"{minutes}m {secs:02d}s"


def format_config_table(config: BuildConfig) -> Table:
    """Render the resolved configuration for --debug output."""
    table = Table(title="Configuration", show_header=False)
    table.add_column("Option", style="bold")
    table.add_column("Value")
    table.add_row("app", str(config.app))
    table.add_row("output", str(config.output))
    table.add_row("includeExtensions", ", ".join(config.include_extensions))
    table.add_row("excludeExtensions", ", ".join(config.exclude_extensions))
    table.add_row("verdaccioConfig", str(config.verdaccio_config or ""))
    table.add_row("verdaccioPort", str(config.verdaccio_port))
    table.add_row("verdaccioStorage", str(config.verdaccio_storage))
    table.add_row("verdaccioTimeout", f"{config.verdaccio_timeout:g}s")
    table.add_row("registry", config.registry_url)
    return table


def format_build_summary(config: BuildConfig, total_duration: float) -> Panel:
    """Format the closing summary box with the start command and timing."""
    lines = [
        Text("✅ Status: Success", style="green"),
        Text(f"⏱  Duration: {format_duration(total_duration)}"),
        Text(""),
        Text("🏁 You can start the app with:"),
        Text(f"cd {config.output} && {config.start_command}", style="bold"),
    ]
    return Panel(
        Text("\n").join(lines),
        title="Build Complete",
        border_style="green",
        padding=(1, 2),
    )
