"""Response classification shared by every API call.

Every endpoint in :mod:`bytestashy.client.snippets` ends the same way: the
status code and body go through :func:`classify_response`, which either
returns the decoded JSON payload or raises one exception from
:mod:`bytestashy.exceptions`. Keeping this in one pure function guarantees
that a 401 means the same thing for ``list`` as it does for ``delete``.

Policy, in priority order:

1. status in *expected* -- decode the body as JSON (``ProtocolError`` if it
   is not JSON; an empty ``204`` body decodes to ``None``).
2. ``401`` -- :class:`~bytestashy.exceptions.AuthError`.
3. ``404`` -- :class:`~bytestashy.exceptions.NotFoundError`.
4. ``400`` -- :class:`~bytestashy.exceptions.ValidationError` with the raw body.
5. anything else -- :class:`~bytestashy.exceptions.ApiError`.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from bytestashy.exceptions import (
    ApiError,
    AuthError,
    NotFoundError,
    ProtocolError,
    ValidationError,
)

DEFAULT_SUCCESS = (200, 201)


def decode_json(body: str) -> Any:
    """Decode a response body, mapping decode failures to :class:`ProtocolError`."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ProtocolError(f"response was not valid JSON: {exc}") from exc


def classify_response(
    status_code: int,
    body: str,
    expected: tuple[int, ...] = DEFAULT_SUCCESS,
) -> Any:
    """Turn a status code and body text into a payload or a typed error.

    Args:
        status_code: HTTP status of the response.
        body: Response body as text.
        expected: Status codes that count as success for this endpoint.

    Returns:
        The decoded JSON value, or ``None`` for an empty ``204`` response.

    Raises:
        ProtocolError: Success status but the body is not JSON.
        AuthError: On 401.
        NotFoundError: On 404.
        ValidationError: On 400.
        ApiError: On any other status.
    """
    if status_code in expected:
        if status_code == 204 and not body.strip():
            return None
        return decode_json(body)
    if status_code == 401:
        raise AuthError(
            "API key is invalid or expired. Run `bytestashy login <api-url>` "
            "to create a new one."
        )
    if status_code == 404:
        raise NotFoundError(f"Not found (HTTP 404): {body}" if body else "Not found (HTTP 404)")
    if status_code == 400:
        raise ValidationError(body)
    raise ApiError(status_code, body)


def handle_response(
    response: httpx.Response,
    expected: tuple[int, ...] = DEFAULT_SUCCESS,
) -> Any:
    """Classify an :class:`httpx.Response` with :func:`classify_response`."""
    return classify_response(response.status_code, response.text, expected)
