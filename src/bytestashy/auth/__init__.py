"""Credential lifecycle for bytestashy.

- :class:`CredentialStore` -- keeps the server URL in ``config.json`` and the
  API key in the platform keyring.
- :class:`AuthExchange` -- turns a username and password into a stored API
  key via ``/api/auth/login`` and ``/api/keys``.

Typical usage::

    from bytestashy.auth import AuthExchange, CredentialStore

    store = CredentialStore()
    AuthExchange(store).login("https://stash.example.com", "alice", "s3cret")
    credential = store.load()
"""

from bytestashy.auth.credential_store import CredentialStore
from bytestashy.auth.login import AuthExchange

__all__ = ["AuthExchange", "CredentialStore"]
