"""Exception hierarchy for bytestashy.

All exceptions inherit from :class:`BytestashyError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`bytestashy.exit_codes`.
The top-level error handler in :func:`bytestashy.app.main` catches
``BytestashyError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Failures coming from third-party libraries (httpx, json, pydantic, keyring,
the filesystem) are translated into one of these classes where they occur,
so callers only ever see this hierarchy.

Subclass hierarchy::

    BytestashyError (exit 1)
    +-- InvalidInputError   (exit 2)
    +-- FileOperationError  (exit 2)
    +-- AuthError           (exit 3)
    +-- CredentialError     (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ValidationError     (exit 5)
    +-- ApiError            (exit 5)
    +-- ProtocolError       (exit 5)
    +-- ConnectionError_    (exit 6)
"""

from __future__ import annotations

from bytestashy.exit_codes import (
    EXIT_API_ERROR,
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_INPUT,
    EXIT_NOT_FOUND,
)


class BytestashyError(Exception):
    """Base exception for all bytestashy errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`bytestashy.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidInputError(BytestashyError):
    """Raised when a local precondition fails before any request is sent.

    Examples: an empty file list, a URL without an http(s) scheme, an unknown
    sort order, a negative snippet id.
    """

    exit_code = EXIT_INVALID_INPUT


class FileOperationError(BytestashyError):
    """Raised when a local file cannot be opened or written.

    Args:
        path: The path that failed, as given by the caller.
        cause: The underlying :class:`OSError`.
    """

    exit_code = EXIT_INVALID_INPUT

    def __init__(self, path: str, cause: OSError):
        if isinstance(cause, FileNotFoundError):
            message = f"File does not exist: {path}"
        else:
            reason = cause.strerror or str(cause)
            message = f"File operation failed: {path} - {reason}"
        super().__init__(message)
        self.path = path
        self.cause = cause


class AuthError(BytestashyError):
    """Raised when the server rejects a password or API key (HTTP 401)."""

    exit_code = EXIT_AUTH_FAILURE


class CredentialError(BytestashyError):
    """Raised when the stored credential is missing or inconsistent.

    Covers an unreadable config file, a config file without a matching
    keyring entry, and keyring backend failures.
    """

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(BytestashyError):
    """Raised when the API returns HTTP 404 (snippet not found)."""

    exit_code = EXIT_NOT_FOUND


class ValidationError(BytestashyError):
    """Raised when the API returns HTTP 400.

    The server's field messages are not interpreted; the raw body is kept
    on :attr:`body`.
    """

    exit_code = EXIT_API_ERROR

    def __init__(self, body: str):
        message = "Request rejected by server (HTTP 400)"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.body = body


class ApiError(BytestashyError):
    """Raised for any non-success status without a more specific class.

    Args:
        status: The HTTP status code.
        body: The raw response body text.
    """

    exit_code = EXIT_API_ERROR

    def __init__(self, status: int, body: str):
        super().__init__(f"API error: HTTP {status} - {body}")
        self.status = status
        self.body = body


class ProtocolError(BytestashyError):
    """Raised when a success response does not carry the expected JSON."""

    exit_code = EXIT_API_ERROR


class ConnectionError_(BytestashyError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
