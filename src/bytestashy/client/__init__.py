"""HTTP client module for bytestashy.

- :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`,
  injecting the ``x-api-key`` header.
- :class:`SnippetEndpoints` -- the list/get/create/update/delete/search
  operations.
- :func:`handle_response` -- shared status-code classification.
- :func:`build_upload` -- multipart body construction.

Example::

    from bytestashy.client import SnippetEndpoints, SyncClient

    with SyncClient.for_credential(credential) as client:
        snippet = SnippetEndpoints(client).get_snippet(42)
"""

from bytestashy.client.multipart import build_upload
from bytestashy.client.response import classify_response, handle_response
from bytestashy.client.snippets import SnippetEndpoints
from bytestashy.client.sync_client import SyncClient

__all__ = [
    "SnippetEndpoints",
    "SyncClient",
    "build_upload",
    "classify_response",
    "handle_response",
]
