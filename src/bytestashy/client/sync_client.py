"""Synchronous HTTP client bound to one ByteStash server.

This module provides :class:`SyncClient`, the only place bytestashy touches
:class:`httpx.Client`.  It layers on:

- **Header injection** -- the API key from a
  :class:`~bytestashy.models.Credential` goes into every request as
  ``x-api-key`` (see :meth:`SyncClient.for_credential`).
- **Debug logging** -- each request line and status is written through
  :func:`~bytestashy.output.debug` (visible with ``--verbose``).  Header
  values are never logged.
- **Transport error mapping** -- DNS failures, refused connections and
  timeouts become :class:`~bytestashy.exceptions.ConnectionError_`.

Status codes are *not* interpreted here; that is the job of
:func:`~bytestashy.client.response.handle_response`, called by each
endpoint.  Requests are sent exactly once, with httpx's default timeout.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from bytestashy.exceptions import ConnectionError_
from bytestashy.models import Credential
from bytestashy.output import debug

API_KEY_HEADER = "x-api-key"


class SyncClient:
    """Blocking HTTP client for a single ByteStash base URL.

    Must be used as a context manager so that the underlying connection
    pool is opened and closed.

    Args:
        base_url: Server URL without trailing slash, e.g.
            ``"https://stash.example.com"``.
        headers: Headers sent with every request.
        transport: Optional httpx transport; tests pass an
            :class:`httpx.MockTransport` here.

    Example::

        with SyncClient.for_credential(credential) as client:
            response = client.get("/api/v1/snippets")
    """

    def __init__(
        self,
        base_url: str,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def for_credential(
        cls,
        credential: Credential,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> SyncClient:
        """Create a client that authenticates every request with *credential*."""
        return cls(
            credential.endpoint,
            headers={API_KEY_HEADER: credential.secret_key},
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=self._headers,
            transport=self._transport,
            follow_redirects=True,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    def request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[list[tuple[str, Any]]] = None,
    ) -> httpx.Response:
        """Send one HTTP request and return the raw response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE).
            path: URL path (and optional pre-encoded query) appended to the
                base URL.
            params: Query parameters.
            headers: Extra request headers.
            json_body: JSON-serialisable body.
            data: Multipart text fields (used together with *files*).
            files: Multipart file parts as ``(field, (name, handle))`` tuples.

        Returns:
            The :class:`httpx.Response`, whatever its status.

        Raises:
            ConnectionError_: On network or timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        kwargs: dict[str, Any] = {"method": method, "url": path}
        if params:
            kwargs["params"] = params
        if headers:
            kwargs["headers"] = headers
        if files is not None or data is not None:
            kwargs["data"] = data
            kwargs["files"] = files
        elif json_body is not None:
            kwargs["json"] = json_body

        url = f"{self._base_url}{path}"
        debug(f"{method.upper()} {url}")
        try:
            response = self._client.request(**kwargs)
        except httpx.HTTPError as exc:
            raise ConnectionError_(f"Request to {url} failed: {exc}") from exc

        debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
        return response

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", path, **kwargs)
