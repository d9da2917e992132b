"""Snippet endpoints of the ByteStash v1 API.

:class:`SnippetEndpoints` wraps the six snippet operations.  Each method
checks its own local preconditions first (valid id, non-empty file list,
known sort order) so that a request that is bound to fail is never sent,
then issues one request through a :class:`~bytestashy.client.SyncClient`
and hands the response to :func:`~bytestashy.client.response.handle_response`.

==================  ======  ================================  ===========
Operation           Method  Path                              Success
==================  ======  ================================  ===========
list_snippets       GET     /api/v1/snippets                  200
get_snippet         GET     /api/v1/snippets/{id}             200
create_snippet      POST    /api/v1/snippets/push             201
update_snippet      PUT     /api/v1/snippets/{id}             200, 201
delete_snippet      DELETE  /api/v1/snippets/{id}             200, 204
search_snippets     GET     /api/v1/snippets/search?q=...     200
==================  ======  ================================  ===========
"""

from __future__ import annotations

from typing import Any, Optional, Union
from urllib.parse import quote

import pydantic

from bytestashy.client.multipart import build_upload
from bytestashy.client.response import handle_response
from bytestashy.client.sync_client import SyncClient
from bytestashy.exceptions import InvalidInputError, ProtocolError
from bytestashy.models import Snippet, SortOrder, UploadRequest

SNIPPETS_PATH = "/api/v1/snippets"


class SnippetEndpoints:
    """CRUD and search operations on snippets.

    Holds no state besides the client: every call is a fresh round trip.

    Args:
        client: An entered :class:`SyncClient` carrying the API key.

    Example::

        with SyncClient.for_credential(credential) as client:
            snippets = SnippetEndpoints(client).list_snippets()
    """

    def __init__(self, client: SyncClient) -> None:
        self._client = client

    def list_snippets(self) -> list[Snippet]:
        """Return every snippet visible to the API key.

        The server returns the whole collection; paging is done by the caller.
        """
        payload = handle_response(self._client.get(SNIPPETS_PATH), expected=(200,))
        return _parse_snippet_list(payload)

    def get_snippet(self, snippet_id: int) -> Snippet:
        """Fetch one snippet with its fragments.

        Raises:
            InvalidInputError: If *snippet_id* is not a non-negative integer.
            NotFoundError: If the server has no such snippet.
        """
        _check_id(snippet_id)
        payload = handle_response(
            self._client.get(f"{SNIPPETS_PATH}/{snippet_id}"), expected=(200,)
        )
        return _parse_snippet(payload)

    def create_snippet(self, upload: UploadRequest) -> Snippet:
        """Create a snippet from local files.

        Raises:
            InvalidInputError: If no files are given.
            FileOperationError: If a file cannot be opened; nothing is sent.
        """
        _check_files(upload)
        with build_upload(upload) as form:
            response = self._client.post(
                f"{SNIPPETS_PATH}/push", data=form.fields, files=form.files
            )
        return _parse_snippet(handle_response(response, expected=(201,)))

    def update_snippet(self, snippet_id: int, upload: UploadRequest) -> Snippet:
        """Replace a snippet's metadata and fragments.

        The uploaded files replace all existing fragments; fragments not
        re-uploaded are gone afterwards.
        """
        _check_id(snippet_id)
        _check_files(upload)
        with build_upload(upload) as form:
            response = self._client.put(
                f"{SNIPPETS_PATH}/{snippet_id}", data=form.fields, files=form.files
            )
        return _parse_snippet(handle_response(response, expected=(200, 201)))

    def delete_snippet(self, snippet_id: int) -> int:
        """Delete a snippet and return its id.

        Asking the user for confirmation is the caller's business.
        """
        _check_id(snippet_id)
        payload = handle_response(
            self._client.delete(f"{SNIPPETS_PATH}/{snippet_id}"), expected=(200, 204)
        )
        if isinstance(payload, dict) and "id" in payload:
            try:
                return int(payload["id"])
            except (TypeError, ValueError) as exc:
                raise ProtocolError(f"Unexpected id in delete response: {payload['id']!r}") from exc
        return snippet_id

    def search_snippets(
        self,
        query: str,
        sort: Optional[Union[SortOrder, str]] = None,
        search_code: bool = False,
    ) -> list[Snippet]:
        """Search snippet titles (and optionally code) for *query*.

        Args:
            query: Free text; percent-encoded into the ``q`` parameter.
            sort: One of ``newest``, ``oldest``, ``alpha-asc``, ``alpha-desc``.
            search_code: Also match inside fragment code.

        Raises:
            InvalidInputError: If *sort* is not a known order.
        """
        order = parse_sort_order(sort) if sort is not None else None

        query_string = f"q={quote(query, safe='')}"
        if order is not None:
            query_string += f"&sort={order.value}"
        if search_code:
            query_string += "&searchCode=true"

        response = self._client.get(f"{SNIPPETS_PATH}/search?{query_string}")
        return _parse_snippet_list(handle_response(response, expected=(200,)))


def parse_sort_order(value: Union[SortOrder, str]) -> SortOrder:
    """Convert user input into a :class:`SortOrder`.

    Raises:
        InvalidInputError: If *value* is not one of the four orders.
    """
    try:
        return SortOrder(value)
    except ValueError:
        allowed = ", ".join(o.value for o in SortOrder)
        raise InvalidInputError(
            f"Invalid sort order '{value}'. Use one of: {allowed}"
        ) from None


def _check_id(snippet_id: Any) -> None:
    if isinstance(snippet_id, bool) or not isinstance(snippet_id, int) or snippet_id < 0:
        raise InvalidInputError(
            f"Snippet id must be a non-negative integer, got {snippet_id!r}"
        )


def _check_files(upload: UploadRequest) -> None:
    if not upload.files:
        raise InvalidInputError("Provide at least one file to upload")


def _parse_snippet(payload: Any) -> Snippet:
    try:
        return Snippet.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ProtocolError(f"Unexpected snippet in response: {exc}") from exc


def _parse_snippet_list(payload: Any) -> list[Snippet]:
    if not isinstance(payload, list):
        raise ProtocolError(
            f"Expected a list of snippets, got {type(payload).__name__}"
        )
    return [_parse_snippet(item) for item in payload]
