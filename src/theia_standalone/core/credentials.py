"""Temporary .npmrc pointing publishes at the local registry."""

from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.disposables import CallbackDisposable

NPMRC_FILENAME = ".npmrc"
AUTH_TOKEN = "fooBar"


def format_auth_line(registry_url: str) -> str:
    """Build the auth-token line for a registry URL.

    Example:
        >>> format_auth_line("http://localhost:4873")
        '//localhost:4873/:_authToken="fooBar"\\n'
    """
    registry = registry_url.replace("http:", "", 1)
    return f'{registry}/:_authToken="{AUTH_TOKEN}"\n'


def create_npmrc(ctx: StandaloneContext, registry_url: str) -> CallbackDisposable:
    """Write .npmrc in the working directory and return its restorer.

    Whether to restore or delete is decided here, from the file's state
    before writing. An existing file gets its original bytes back on release;
    otherwise the file is removed.
    """
    ctx.feedback.info("📝 Generating npmrc file...")
    path = ctx.cwd / NPMRC_FILENAME

    if path.exists():
        original_content = path.read_bytes()

        def restore() -> None:
            path.write_bytes(original_content)

        disposable = CallbackDisposable(restore, f"restore {path}")
    else:

        def remove() -> None:
            if path.exists():
                path.unlink()

        disposable = CallbackDisposable(remove, f"remove {path}")

    path.write_text(format_auth_line(registry_url), encoding="utf-8")
    return disposable
