"""Shared test fixtures for bytestashy.

Provides an isolated config environment, an in-memory keyring backend, a
Typer CLI runner and helpers for building fake ByteStash payloads.  These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import keyring
import keyring.backend
import keyring.errors
import pytest

from bytestashy.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    Resetting forces a fresh manager to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Keyring
# ---------------------------------------------------------------------------


class MemoryKeyring(keyring.backend.KeyringBackend):
    """Keyring backend holding passwords in a dict."""

    priority = 1  # type: ignore[assignment]

    def __init__(self) -> None:
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service: str, username: str) -> Optional[str]:
        return self.passwords.get((service, username))

    def set_password(self, service: str, username: str, password: str) -> None:
        self.passwords[(service, username)] = password

    def delete_password(self, service: str, username: str) -> None:
        try:
            del self.passwords[(service, username)]
        except KeyError:
            raise keyring.errors.PasswordDeleteError("not found") from None


@pytest.fixture
def memory_keyring() -> MemoryKeyring:
    """Install a :class:`MemoryKeyring` as the process-wide keyring backend."""
    previous = keyring.get_keyring()
    backend = MemoryKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, memory_keyring: MemoryKeyring
) -> Path:
    """Isolate configuration and the keyring.

    Points ``BYTESTASHY_CONFIG_DIR``, ``XDG_CONFIG_HOME`` and
    ``XDG_DATA_HOME`` at subdirectories of tmp_path, installs an empty
    in-memory keyring, clears ``BYTESTASHY_PASSWORD`` and changes the
    working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("BYTESTASHY_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("BYTESTASHY_PASSWORD", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Payload helpers
# ---------------------------------------------------------------------------


def snippet_payload(snippet_id: int = 1, **overrides: Any) -> dict[str, Any]:
    """Return a snippet object shaped like the ByteStash API's."""
    payload: dict[str, Any] = {
        "id": snippet_id,
        "title": f"Snippet {snippet_id}",
        "description": "",
        "categories": ["python"],
        "fragments": [
            {
                "id": snippet_id * 10,
                "file_name": "main.py",
                "code": "print('hi')\n",
                "language": "python",
                "position": 0,
            }
        ],
        "updated_at": "2024-05-01T12:00:00Z",
        "share_count": 0,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_snippet():
    """The :func:`snippet_payload` factory."""
    return snippet_payload
