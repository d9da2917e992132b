"""Tests for the two-step login exchange."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest

from bytestashy.auth.credential_store import CredentialStore
from bytestashy.auth.login import AuthExchange
from bytestashy.exceptions import (
    ApiError,
    AuthError,
    ConnectionError_,
    InvalidInputError,
    ProtocolError,
)
from bytestashy.models import Credential


@pytest.fixture()
def store(tmp_path: Path, memory_keyring) -> CredentialStore:
    return CredentialStore(config_dir=tmp_path, backend=memory_keyring)


def _server(
    login_status: int = 200,
    login_body: object = None,
    keys_status: int = 201,
    keys_body: object = None,
):
    """Build a handler for the login and keys endpoints, recording requests."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path == "/api/auth/login":
            return httpx.Response(
                login_status, json=login_body if login_body is not None else {"token": "t"}
            )
        if request.url.path == "/api/keys":
            return httpx.Response(
                keys_status, json=keys_body if keys_body is not None else {"key": "abc123"}
            )
        return httpx.Response(404)

    return handler, seen


class TestLogin:
    def test_end_to_end(self, store: CredentialStore) -> None:
        handler, seen = _server()
        exchange = AuthExchange(store, transport=httpx.MockTransport(handler))

        credential = exchange.login("https://host", "alice", "pw", "mytool")

        assert credential == Credential(endpoint="https://host", secret_key="abc123")
        assert store.load() == credential

        login, keys = seen
        assert login.method == "POST"
        assert json.loads(login.content) == {"username": "alice", "password": "pw"}
        assert keys.headers["bytestashauth"] == "bearer t"
        assert json.loads(keys.content) == {"name": "mytool"}

    def test_trailing_slash_stripped(self, store: CredentialStore) -> None:
        handler, seen = _server()
        credential = AuthExchange(store, transport=httpx.MockTransport(handler)).login(
            "https://host/", "alice", "pw"
        )
        assert credential.endpoint == "https://host"
        assert seen[0].url == "https://host/api/auth/login"

    def test_default_key_name(self, store: CredentialStore) -> None:
        handler, seen = _server()
        AuthExchange(store, transport=httpx.MockTransport(handler)).login(
            "https://host", "alice", "pw"
        )
        assert json.loads(seen[1].content) == {"name": "bytestashy"}

    def test_bad_password_stops_after_first_step(self, store: CredentialStore) -> None:
        handler, seen = _server(login_status=401, login_body={"error": "nope"})
        exchange = AuthExchange(store, transport=httpx.MockTransport(handler))

        with pytest.raises(AuthError):
            exchange.login("https://host", "alice", "wrong")

        assert [r.url.path for r in seen] == ["/api/auth/login"]
        assert store.load() is None

    def test_unexpected_login_status(self, store: CredentialStore) -> None:
        handler, _ = _server(login_status=500, login_body={"error": "boom"})
        with pytest.raises(ApiError) as exc_info:
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )
        assert exc_info.value.status == 500

    def test_key_step_failure_saves_nothing(self, store: CredentialStore) -> None:
        handler, _ = _server(keys_status=500, keys_body={"error": "boom"})
        with pytest.raises(ApiError):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )
        assert store.load() is None

    def test_missing_token(self, store: CredentialStore) -> None:
        handler, seen = _server(login_body={"user": "alice"})
        with pytest.raises(ProtocolError, match="token"):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )
        assert len(seen) == 1

    def test_missing_key(self, store: CredentialStore) -> None:
        handler, _ = _server(keys_body={"id": 3})
        with pytest.raises(ProtocolError, match="key"):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )

    def test_non_json_login_response(self, store: CredentialStore) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with pytest.raises(ProtocolError):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )

    def test_connection_failure(self, store: CredentialStore) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ConnectionError_):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "https://host", "alice", "pw"
            )


class TestLoginValidation:
    def test_non_http_scheme_sends_nothing(self) -> None:
        store = MagicMock(spec=CredentialStore)
        handler = MagicMock()
        with pytest.raises(InvalidInputError, match="http or https"):
            AuthExchange(store, transport=httpx.MockTransport(handler)).login(
                "ftp://host", "alice", "pw"
            )
        handler.assert_not_called()
        store.save.assert_not_called()

    def test_empty_username(self) -> None:
        store = MagicMock(spec=CredentialStore)
        with pytest.raises(InvalidInputError):
            AuthExchange(store).login("https://host", "", "pw")

    def test_blank_key_name(self) -> None:
        store = MagicMock(spec=CredentialStore)
        with pytest.raises(InvalidInputError):
            AuthExchange(store).login("https://host", "alice", "pw", "  ")
