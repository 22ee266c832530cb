"""Materializing, installing and minifying the target application."""

import json
import logging
import shutil
from pathlib import Path

from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.extensions import PACKAGE_MANIFEST, read_manifest
from theia_standalone.ops.process import ensure_process_succeeded

logger = logging.getLogger(__name__)

LOCKFILE = "yarn.lock"
NETWORK_TIMEOUT_MS = 100000


def copy_app(ctx: StandaloneContext, app: Path, target: Path) -> None:
    """Replace target with a copy of the app and the workspace lockfile."""
    source = ctx.cwd / app
    destination = ctx.cwd / target
    ctx.feedback.info(f"🚡 Copying app from '{app}' to '{target}'...")

    if destination.exists():
        logger.debug("Removing existing output %s", destination)
        shutil.rmtree(destination)
    shutil.copytree(source, destination, symlinks=True)
    shutil.copyfile(ctx.cwd / LOCKFILE, destination / LOCKFILE)


def merge_resolutions(app_manifest: dict, root_resolutions: dict) -> dict:
    """Return app_manifest with root resolutions layered over its own.

    Example:
        >>> merge_resolutions({"resolutions": {"x": "0.9", "y": "2.0"}}, {"x": "1.0"})
        {'resolutions': {'x': '1.0', 'y': '2.0'}}
    """
    merged = dict(app_manifest)
    merged["resolutions"] = {**(app_manifest.get("resolutions") or {}), **root_resolutions}
    return merged


def adapt_app(ctx: StandaloneContext, target: Path) -> None:
    """Carry the workspace's root-level resolutions into the copied app.

    The copied package.json is only rewritten when the root manifest
    declares resolutions.
    """
    destination = ctx.cwd / target
    ctx.feedback.info(f"🖊️  Adapting app in '{target}'...")

    root_manifest = read_manifest(ctx.cwd)
    root_resolutions = root_manifest.get("resolutions")
    if root_resolutions is None:
        logger.debug("Root manifest has no resolutions, leaving app manifest untouched")
        return

    app_manifest = read_manifest(destination)
    merged = merge_resolutions(app_manifest, root_resolutions)
    (destination / PACKAGE_MANIFEST).write_text(
        json.dumps(merged, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def build_app(ctx: StandaloneContext, target: Path, registry_url: str, debug: bool) -> None:
    """Install the app's dependencies from the temporary registry."""
    ctx.feedback.info(f"🏗️  Building app from '{target}'... (this may take several minutes)")
    result = ctx.process_runner.run(
        "yarn",
        [
            "install",
            "--registry",
            registry_url,
            "--network-timeout",
            str(NETWORK_TIMEOUT_MS),
        ],
        cwd=ctx.cwd / target,
        debug=debug,
    )
    ensure_process_succeeded(result)
    ctx.feedback.success(f"📦 Building app completed successfully at '{target}'.")


def minify_app(ctx: StandaloneContext, target: Path, debug: bool) -> None:
    """Strip files the installed app does not need at runtime."""
    ctx.feedback.info(f"🔬  Minifying built app in '{target}'")
    for mode in ("--init", "--force"):
        result = ctx.process_runner.run(
            "yarn",
            ["autoclean", mode],
            cwd=ctx.cwd / target,
            debug=debug,
        )
        ensure_process_succeeded(result)
