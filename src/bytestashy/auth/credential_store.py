"""Persistent credential store split between a config file and the keyring.

The server URL lives in ``<config_dir>/config.json`` (see
:func:`~bytestashy.config.get_config_dir`) and the API key lives in the
platform credential vault via :mod:`keyring`, under a fixed service/account
pair.  The config file is written atomically with ``0o600`` permissions on
POSIX systems and never contains the key.

The two halves must agree: a config file without a keyring entry is
reported as :class:`~bytestashy.exceptions.CredentialError` rather than
treated as "not logged in".

See Also:
    :class:`~bytestashy.auth.login.AuthExchange` -- produces the credential.
    :class:`~bytestashy.client.sync_client.SyncClient` -- consumes it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import keyring
import keyring.errors
import pydantic

from bytestashy.config import _atomic_write, get_config_path, normalize_api_url
from bytestashy.exceptions import CredentialError, InvalidInputError
from bytestashy.models import ConfigFile, Credential

KEYRING_SERVICE = "bytestashy"
KEYRING_ACCOUNT = "api_key"


class CredentialStore:
    """Load, save and clear the single stored :class:`~bytestashy.models.Credential`.

    Args:
        config_dir: Directory holding ``config.json``.  Defaults to
            :func:`~bytestashy.config.get_config_dir`.
        backend: Object exposing ``get_password``, ``set_password`` and
            ``delete_password`` with the :mod:`keyring` signatures.
            Defaults to the :mod:`keyring` module itself, i.e. whatever
            backend keyring selects for the platform.

    Example::

        store = CredentialStore()
        store.save(Credential(endpoint="https://stash.example.com", secret_key="k"))
        credential = store.load()
        assert credential.secret_key == "k"
    """

    def __init__(self, config_dir: Optional[Path] = None, backend: Any = None) -> None:
        self._path = get_config_path(config_dir)
        self._backend = backend if backend is not None else keyring

    @property
    def path(self) -> Path:
        """The filesystem path to ``config.json``."""
        return self._path

    def load(self) -> Optional[Credential]:
        """Rebuild the stored credential from the config file and the keyring.

        Returns:
            The :class:`~bytestashy.models.Credential`, or ``None`` when no
            config file exists (the user never logged in).

        Raises:
            CredentialError: If the config file cannot be read or parsed, if
                its server URL is empty or not http(s), or if the keyring has
                no usable entry for it.
        """
        if not self._path.is_file():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
            config = ConfigFile.model_validate(json.loads(text))
        except (OSError, json.JSONDecodeError, pydantic.ValidationError) as exc:
            raise CredentialError(f"Invalid config file at {self._path}: {exc}") from exc

        try:
            endpoint = normalize_api_url(config.api_url)
        except InvalidInputError as exc:
            raise CredentialError(
                f"Invalid server URL in config file {self._path}: {exc}. "
                "Run `bytestashy login <api-url>` again."
            ) from exc

        secret = self._get_secret()
        if not secret:
            raise CredentialError(
                f"Config file {self._path} exists but no API key was found in the "
                "keyring. Run `bytestashy login <api-url>` again."
            )
        return Credential(endpoint=endpoint, secret_key=secret)

    def save(self, credential: Credential) -> None:
        """Persist *credential*: keyring first, then the config file.

        If the keyring write succeeds but the config file cannot be written,
        the keyring entry is put back the way it was (previous key restored,
        or the entry removed) before the error is raised.

        Args:
            credential: The credential to store.  Must be usable.

        Raises:
            InvalidInputError: If the endpoint or key is empty.
            CredentialError: If the keyring or the config file cannot be written.
        """
        if not credential.is_usable:
            raise InvalidInputError("Cannot save a credential with an empty endpoint or key")

        previous = self._get_secret()
        self._set_secret(credential.secret_key)

        data = ConfigFile(api_url=credential.endpoint).model_dump(mode="json")
        try:
            _atomic_write(self._path, json.dumps(data, indent=2) + "\n", mode=0o600)
        except OSError as exc:
            self._restore_secret(previous)
            raise CredentialError(
                f"Could not write config file {self._path}: {exc}"
            ) from exc

    def clear(self) -> None:
        """Delete the config file and the keyring entry.

        Either half may already be missing; that is not an error.

        Raises:
            CredentialError: If the keyring backend fails for another reason.
        """
        if self._path.is_file():
            self._path.unlink()
        self._delete_secret()

    # ------------------------------------------------------------------ #
    # Keyring access
    # ------------------------------------------------------------------ #

    def _get_secret(self) -> Optional[str]:
        try:
            return self._backend.get_password(KEYRING_SERVICE, KEYRING_ACCOUNT)
        except keyring.errors.KeyringError as exc:
            raise CredentialError(f"Could not read API key from keyring: {exc}") from exc

    def _set_secret(self, secret: str) -> None:
        try:
            self._backend.set_password(KEYRING_SERVICE, KEYRING_ACCOUNT, secret)
        except keyring.errors.KeyringError as exc:
            raise CredentialError(f"Could not store API key in keyring: {exc}") from exc

    def _delete_secret(self) -> None:
        try:
            self._backend.delete_password(KEYRING_SERVICE, KEYRING_ACCOUNT)
        except keyring.errors.PasswordDeleteError:
            pass  # already gone
        except keyring.errors.KeyringError as exc:
            raise CredentialError(f"Could not remove API key from keyring: {exc}") from exc

    def _restore_secret(self, previous: Optional[str]) -> None:
        """Undo :meth:`_set_secret` after a failed config write."""
        try:
            if previous:
                self._set_secret(previous)
            else:
                self._delete_secret()
        except CredentialError as exc:
            raise CredentialError(
                f"Config file {self._path} could not be written and the keyring "
                f"entry could not be rolled back: {exc}"
            ) from exc
