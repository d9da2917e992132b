"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~bytestashy.exceptions.BytestashyError` subclass.
Shell scripts can inspect the exit code to tell a rejected key from a bad
argument without parsing stderr.

Example::

    $ bytestashy get 42
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the stored API key was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_INPUT = 2
"""A local precondition failed (bad argument, unreadable file); nothing was sent."""

EXIT_AUTH_FAILURE = 3
"""The server rejected the credentials, or no usable credential is stored."""

EXIT_NOT_FOUND = 4
"""The requested snippet does not exist (HTTP 404)."""

EXIT_API_ERROR = 5
"""The server answered with an unexpected status or an undecodable body."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""
