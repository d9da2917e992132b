"""Login exchange: username and password in, persisted API key out.

ByteStash issues API keys only to a logged-in user, so ``bytestashy login``
runs two requests back to back:

1. ``POST /api/auth/login`` with ``{"username", "password"}`` returns a
   short-lived JWT (``{"token": ...}``).
2. ``POST /api/keys`` with the header ``bytestashauth: bearer <token>`` and
   ``{"name": <key name>}`` returns the long-lived key (``{"key": ...}``).

The key and server URL are then handed to the
:class:`~bytestashy.auth.credential_store.CredentialStore`.  The JWT only
lives for the duration of :meth:`AuthExchange.login`; it is never stored or
logged.  Each step fails closed: nothing after a failed step runs, and
nothing is saved unless both steps succeed.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from bytestashy.auth.credential_store import CredentialStore
from bytestashy.client.response import decode_json
from bytestashy.client.sync_client import SyncClient
from bytestashy.config import normalize_api_url
from bytestashy.exceptions import ApiError, AuthError, InvalidInputError, ProtocolError
from bytestashy.models import Credential
from bytestashy.output import debug

LOGIN_PATH = "/api/auth/login"
KEYS_PATH = "/api/keys"
JWT_HEADER = "bytestashauth"
DEFAULT_KEY_NAME = "bytestashy"


class AuthExchange:
    """Run the two-step login and persist the resulting credential.

    Args:
        store: Where the issued credential is saved.
        transport: Optional httpx transport, used by tests.

    Example::

        exchange = AuthExchange(CredentialStore())
        credential = exchange.login("https://stash.example.com", "alice", "s3cret")
    """

    def __init__(
        self,
        store: CredentialStore,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._store = store
        self._transport = transport

    def login(
        self,
        endpoint: str,
        username: str,
        password: str,
        key_name: str = DEFAULT_KEY_NAME,
    ) -> Credential:
        """Exchange *username*/*password* for an API key and save it.

        Args:
            endpoint: Server URL; must use http or https.
            username: ByteStash user name.
            password: ByteStash password.
            key_name: Label of the API key shown in the ByteStash web UI.

        Returns:
            The saved :class:`~bytestashy.models.Credential`.

        Raises:
            InvalidInputError: Bad URL, empty username or key name.
            AuthError: The server rejected the username/password (401).
            ApiError: Any other unexpected status from either step.
            ProtocolError: A success response without ``token`` / ``key``.
            ConnectionError_: The server could not be reached.
            CredentialError: The key could not be stored.
        """
        base_url = normalize_api_url(endpoint)
        if not username:
            raise InvalidInputError("Username must not be empty")
        if not key_name.strip():
            raise InvalidInputError("API key name must not be empty")

        with SyncClient(base_url, transport=self._transport) as client:
            token = self._request_token(client, username, password)
            key = self._request_key(client, token, key_name.strip())

        credential = Credential(endpoint=base_url, secret_key=key)
        self._store.save(credential)
        debug(f"Stored API key '{key_name.strip()}' for {base_url}")
        return credential

    def _request_token(self, client: SyncClient, username: str, password: str) -> str:
        response = client.post(
            LOGIN_PATH, json_body={"username": username, "password": password}
        )
        if response.status_code == 401:
            raise AuthError("Invalid credentials (401 Unauthorized).")
        if response.status_code != 200:
            raise ApiError(response.status_code, response.text)
        return _require_field(decode_json(response.text), "token", LOGIN_PATH)

    def _request_key(self, client: SyncClient, token: str, key_name: str) -> str:
        response = client.post(
            KEYS_PATH,
            headers={JWT_HEADER: f"bearer {token}"},
            json_body={"name": key_name},
        )
        if response.status_code != 201:
            raise ApiError(response.status_code, response.text)
        return _require_field(decode_json(response.text), "key", KEYS_PATH)


def _require_field(payload: Any, field: str, path: str) -> str:
    if not isinstance(payload, dict) or not payload.get(field):
        raise ProtocolError(f"Response from {path} has no '{field}' field")
    return str(payload[field])
