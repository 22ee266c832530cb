"""Build configuration resolved from command line options."""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_APP = "applications/browser"
DEFAULT_OUTPUT = "../target/"
DEFAULT_INCLUDE_EXTENSIONS = ("theia-extensions/*",)
DEFAULT_VERDACCIO_CONFIG = "configs/verdaccio.config.yaml"
DEFAULT_VERDACCIO_PORT = 4873
DEFAULT_VERDACCIO_STORAGE = "verdaccio-storage"
DEFAULT_VERDACCIO_TIMEOUT = 30.0

REGISTRY_HOST = "localhost"


@dataclass(frozen=True)
class BuildConfig:
    """Immutable configuration for one packaging run.

    Relative paths are interpreted against the working directory the
    pipeline runs in, never against the process cwd at import time.
    """

    app: Path
    output: Path
    include_extensions: tuple[str, ...]
    exclude_extensions: tuple[str, ...]
    verdaccio_config: Path | None
    verdaccio_port: int
    verdaccio_storage: Path
    verdaccio_timeout: float
    debug: bool

    @property
    def registry_url(self) -> str:
        """URL of the temporary registry, e.g. ``http://localhost:4873``."""
        return f"http://{REGISTRY_HOST}:{self.verdaccio_port}"

    @property
    def start_command(self) -> str:
        return "node ./node_modules/@theia/cli/bin/theia start"

    @staticmethod
    def with_defaults(**overrides: object) -> "BuildConfig":
        """Create a configuration with every unspecified field at its CLI default."""
        values: dict[str, object] = {
            "app": Path(DEFAULT_APP),
            "output": Path(DEFAULT_OUTPUT),
            "include_extensions": DEFAULT_INCLUDE_EXTENSIONS,
            "exclude_extensions": (),
            "verdaccio_config": Path(DEFAULT_VERDACCIO_CONFIG),
            "verdaccio_port": DEFAULT_VERDACCIO_PORT,
            "verdaccio_storage": Path(DEFAULT_VERDACCIO_STORAGE),
            "verdaccio_timeout": DEFAULT_VERDACCIO_TIMEOUT,
            "debug": False,
        }
        values.update(overrides)
        return BuildConfig(**values)  # type: ignore[arg-type]
