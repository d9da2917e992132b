"""Configuration paths, atomic writes and server URL validation.

This module handles the filesystem side of bytestashy's persistent state:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.bytestashy/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`. ``BYTESTASHY_CONFIG_DIR`` overrides the config
  directory outright.
* **Atomic writes** -- :func:`_atomic_write` writes through a temp file and
  ``os.replace`` so a crash never leaves a half-written config behind.
* **URL validation** -- :func:`normalize_api_url` checks the server URL the
  user typed at ``login`` before anything is sent to it.

The config file itself (``config.json``) is read and written by
:class:`~bytestashy.auth.credential_store.CredentialStore`, which pairs it
with the keyring entry holding the API key.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

import httpx

from bytestashy.exceptions import InvalidInputError

_APP_NAME = "bytestashy"
_CONFIG_FILENAME = "config.json"
_CONFIG_DIR_ENV = "BYTESTASHY_CONFIG_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory without creating it.

    Resolution order:

    1. ``$BYTESTASHY_CONFIG_DIR`` if set.
    2. On Linux/BSD: ``$XDG_CONFIG_HOME/bytestashy/`` (default
       ``~/.config/bytestashy/``).
    3. On macOS/Windows: ``~/.bytestashy/``.

    The directory is only created when the config is first saved, so that
    merely running a command never leaves an empty directory behind.

    Returns:
        Absolute path to the configuration directory.
    """
    override = os.environ.get(_CONFIG_DIR_ENV, "")
    if override:
        return Path(override).expanduser()
    if _is_xdg_platform():
        return _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    return _fallback_base_dir()


def get_config_path(config_dir: Optional[Path] = None) -> Path:
    """Return the path of ``config.json`` inside *config_dir* (default: :func:`get_config_dir`)."""
    return (config_dir or get_config_dir()) / _CONFIG_FILENAME


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/bytestashy/`` (default ``~/.local/share/bytestashy/``).
    On macOS/Windows: ``~/.bytestashy/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str, mode: Optional[int] = None) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    When *mode* is given it is applied to the temp file before any content
    is written, so the secret-adjacent file is never readable by others.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        if mode is not None and os.name == "posix":
            os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Server URL ---


def normalize_api_url(url: str) -> str:
    """Validate a ByteStash server URL and strip trailing slashes.

    Args:
        url: The URL as typed by the user, e.g. ``"https://stash.example.com/"``.

    Returns:
        The URL without surrounding whitespace or trailing ``/``.

    Raises:
        InvalidInputError: If the URL cannot be parsed, does not use the
            ``http`` or ``https`` scheme, or has no host.
    """
    candidate = url.strip()
    try:
        parsed = httpx.URL(candidate)
    except httpx.InvalidURL as exc:
        raise InvalidInputError(f"Invalid URL '{url}': {exc}") from exc

    if parsed.scheme not in ("http", "https"):
        raise InvalidInputError(
            f"Invalid URL '{url}': URL must use http or https scheme"
        )
    if not parsed.host:
        raise InvalidInputError(f"Invalid URL '{url}': no host given")
    return candidate.rstrip("/")
