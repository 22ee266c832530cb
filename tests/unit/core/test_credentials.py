"""Tests for the temporary .npmrc provisioning."""

from pathlib import Path

from tests.fakes.user_feedback import FakeUserFeedback
from theia_standalone.core.context import StandaloneContext
from theia_standalone.core.credentials import create_npmrc, format_auth_line

REGISTRY = "http://localhost:4873"
AUTH_LINE = '//localhost:4873/:_authToken="fooBar"\n'


def test_format_auth_line_strips_scheme() -> None:
    assert format_auth_line(REGISTRY) == AUTH_LINE
    assert format_auth_line("http://localhost:9999") == '//localhost:9999/:_authToken="fooBar"\n'


def test_missing_npmrc_is_created_then_removed(tmp_path: Path) -> None:
    """Without a prior .npmrc, release deletes the file."""
    feedback = FakeUserFeedback()
    ctx = StandaloneContext.for_test(cwd=tmp_path, feedback=feedback)
    npmrc = tmp_path / ".npmrc"

    disposable = create_npmrc(ctx, REGISTRY)

    assert npmrc.read_text(encoding="utf-8") == AUTH_LINE
    assert feedback.contains("Generating npmrc file")

    disposable.release()

    assert not npmrc.exists()


def test_existing_npmrc_is_restored_byte_for_byte(tmp_path: Path) -> None:
    """Prior content, including odd bytes and no trailing newline, comes back verbatim."""
    npmrc = tmp_path / ".npmrc"
    original = b"registry=https://registry.yarnpkg.com/\r\nemail=dev@example.com\n\xe2\x9c\x93"
    npmrc.write_bytes(original)
    ctx = StandaloneContext.for_test(cwd=tmp_path)

    disposable = create_npmrc(ctx, REGISTRY)

    assert npmrc.read_text(encoding="utf-8") == AUTH_LINE

    disposable.release()

    assert npmrc.read_bytes() == original


def test_existing_empty_npmrc_stays_empty(tmp_path: Path) -> None:
    npmrc = tmp_path / ".npmrc"
    npmrc.write_bytes(b"")
    ctx = StandaloneContext.for_test(cwd=tmp_path)

    disposable = create_npmrc(ctx, REGISTRY)
    disposable.release()

    assert npmrc.exists()
    assert npmrc.read_bytes() == b""


def test_restore_decision_is_made_at_creation(tmp_path: Path) -> None:
    """Release deletes the file even if something recreated it meanwhile."""
    npmrc = tmp_path / ".npmrc"
    ctx = StandaloneContext.for_test(cwd=tmp_path)

    disposable = create_npmrc(ctx, REGISTRY)
    npmrc.write_text("changed by someone else\n", encoding="utf-8")
    disposable.release()

    assert not npmrc.exists()


def test_release_tolerates_file_already_removed(tmp_path: Path) -> None:
    ctx = StandaloneContext.for_test(cwd=tmp_path)

    disposable = create_npmrc(ctx, REGISTRY)
    (tmp_path / ".npmrc").unlink()
    disposable.release()

    assert not (tmp_path / ".npmrc").exists()
