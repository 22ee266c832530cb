"""Discovery and publishing of local extension packages."""

import glob
import json
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.errors import ManifestError
from theia_standalone.ops.process import ensure_process_succeeded

logger = logging.getLogger(__name__)

PACKAGE_MANIFEST = "package.json"


@dataclass(frozen=True)
class PublishedPackage:
    """A local package directory and the version it is published under."""

    path: Path
    version: str


def _expand(pattern: str, cwd: Path) -> list[Path]:
    matches = glob.glob(pattern, root_dir=cwd)
    return [Path(os.path.realpath(cwd / match)) for match in sorted(matches)]


def resolve_extension_paths(
    include_patterns: Sequence[str],
    exclude_patterns: Sequence[str],
    cwd: Path,
) -> list[Path]:
    """Expand include globs into unique, absolute package directories.

    Matches of any exclude pattern are dropped. A directory matched by more
    than one include pattern appears once, at its first position.

    Args:
        include_patterns: Glob patterns relative to cwd
        exclude_patterns: Glob patterns relative to cwd
        cwd: Directory the patterns are evaluated in

    Returns:
        Real paths of matching directories, in discovery order
    """
    excluded: set[Path] = set()
    for pattern in exclude_patterns:
        excluded.update(_expand(pattern, cwd))

    paths: list[Path] = []
    seen: set[Path] = set()
    for pattern in include_patterns:
        for path in _expand(pattern, cwd):
            if path in seen or path in excluded:
                continue
            seen.add(path)
            if not path.is_dir():
                logger.debug("Skipping %s: not a directory", path)
                continue
            paths.append(path)
    return paths


def read_manifest(package_dir: Path) -> dict:
    """Load package.json from a package directory.

    Raises:
        ManifestError: If the manifest does not exist
    """
    manifest_path = package_dir / PACKAGE_MANIFEST
    if not manifest_path.exists():
        raise ManifestError(f"No {PACKAGE_MANIFEST} found in '{package_dir}'.")
    return json.loads(manifest_path.read_text(encoding="utf-8"))


def read_package_version(package_dir: Path) -> str:
    """Return the version declared in a package's manifest.

    Raises:
        ManifestError: If the manifest is missing or declares no version
    """
    version = read_manifest(package_dir).get("version")
    if not version:
        raise ManifestError(f"{package_dir / PACKAGE_MANIFEST} does not declare a version.")
    return str(version)


def publish_extensions(
    ctx: StandaloneContext,
    registry_url: str,
    include_patterns: Sequence[str],
    exclude_patterns: Sequence[str],
    debug: bool,
) -> list[PublishedPackage]:
    """Publish every discovered extension to the registry, one at a time.

    The first failing publish aborts the run; later packages are not tried.

    Returns:
        The packages that were published, in publish order
    """
    published: list[PublishedPackage] = []
    for path in resolve_extension_paths(include_patterns, exclude_patterns, ctx.cwd):
        version = read_package_version(path)
        ctx.feedback.info(f"🪛  Publishing version {version} of '{path}'...")
        result = ctx.process_runner.run(
            "yarn",
            ["publish", "--registry", registry_url, "--new-version", version],
            cwd=path,
            debug=debug,
        )
        ensure_process_succeeded(result)
        published.append(PublishedPackage(path=path, version=version))
    return published
