"""Snippet commands -- create, get, update, delete, list, search.

Every command loads the stored credential, opens one
:class:`~bytestashy.client.SyncClient` and calls a single
:class:`~bytestashy.client.SnippetEndpoints` operation.  Errors are raised
as :class:`~bytestashy.exceptions.BytestashyError` and turned into exit
codes by :func:`bytestashy.app.main`.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, TypeVar

import typer

from bytestashy.auth import CredentialStore
from bytestashy.client import SnippetEndpoints, SyncClient
from bytestashy.client.multipart import validate_upload_paths
from bytestashy.client.snippets import parse_sort_order
from bytestashy.exceptions import CredentialError, InvalidInputError
from bytestashy.fragments import write_fragments
from bytestashy.models import UploadRequest
from bytestashy.output import OutputFormat, get_output, info, success, suggest
from bytestashy.prompts import make_confirmer

DEFAULT_PAGE_SIZE = 10

T = TypeVar("T")


def _open_client() -> SyncClient:
    """Return a client for the stored credential (not yet entered)."""
    credential = CredentialStore().load()
    if credential is None:
        raise CredentialError("No saved API key found. Run `bytestashy login <api-url>` first.")
    return SyncClient.for_credential(credential)


def _flags(ctx: typer.Context) -> tuple[bool, bool]:
    obj = ctx.obj or {}
    return obj.get("force", False), obj.get("no_input", False)


def _collect_upload(
    ctx: typer.Context,
    files: list[str],
    title: Optional[str],
    description: Optional[str],
    public: Optional[bool],
    categories: Optional[str],
) -> UploadRequest:
    """Validate *files*, then fill in any metadata not given on the command line."""
    validate_upload_paths(files)
    _, no_input = _flags(ctx)

    if title is None:
        if no_input:
            raise InvalidInputError("--title is required with --no-input")
        title = typer.prompt("Title for the snippet")
    if description is None:
        description = "" if no_input else typer.prompt(
            "Description (optional)", default="", show_default=False
        )
    if public is None:
        public = False if no_input else typer.confirm("Make the snippet public?", default=False)
    if categories is None:
        categories = "" if no_input else typer.prompt(
            'Categories (comma-separated, e.g. "python,cli")', default="", show_default=False
        )

    return UploadRequest.from_category_list(
        title=title,
        categories=categories.split(","),
        files=list(files),
        description=description,
        is_public=public,
    )


def paginate(items: list[T], page: int, page_size: int) -> tuple[list[T], int]:
    """Return the items on *page* (1-based) and the total number of pages.

    Raises:
        InvalidInputError: If *page* or *page_size* is smaller than 1.
    """
    if page < 1:
        raise InvalidInputError(f"Page must be 1 or greater, got {page}")
    if page_size < 1:
        raise InvalidInputError(f"Page size must be 1 or greater, got {page_size}")
    pages = max(1, math.ceil(len(items) / page_size))
    start = (page - 1) * page_size
    return items[start:start + page_size], pages


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

_TITLE = typer.Option(None, "--title", "-t", help="Snippet title (prompted for when omitted).")
_DESCRIPTION = typer.Option(None, "--description", "-d", help="Snippet description.")
_PUBLIC = typer.Option(None, "--public/--private", help="Visibility of the snippet.")
_CATEGORIES = typer.Option(None, "--categories", "-c", help="Comma-separated categories.")


def create_command(
    ctx: typer.Context,
    files: Optional[list[str]] = typer.Argument(None, help="Files to upload."),
    title: Optional[str] = _TITLE,
    description: Optional[str] = _DESCRIPTION,
    public: Optional[bool] = _PUBLIC,
    categories: Optional[str] = _CATEGORIES,
) -> None:
    """Create a new snippet from one or more files.

    Example::

        bytestashy create main.py utils.py -t "CLI helpers" -c python,cli
    """
    upload = _collect_upload(ctx, files or [], title, description, public, categories)
    with _open_client() as client:
        snippet = SnippetEndpoints(client).create_snippet(upload)
    success(f"Snippet #{snippet.id} created.")
    if get_output().format == OutputFormat.JSON:
        get_output().format_response(snippet.model_dump(mode="json"))


def update_command(
    ctx: typer.Context,
    snippet_id: int = typer.Argument(help="Numeric snippet identifier."),
    files: Optional[list[str]] = typer.Argument(None, help="Files to upload (replaces existing files)."),
    title: Optional[str] = _TITLE,
    description: Optional[str] = _DESCRIPTION,
    public: Optional[bool] = _PUBLIC,
    categories: Optional[str] = _CATEGORIES,
) -> None:
    """Update an existing snippet. The given files replace all of its files."""
    upload = _collect_upload(ctx, files or [], title, description, public, categories)
    with _open_client() as client:
        snippet = SnippetEndpoints(client).update_snippet(snippet_id, upload)
    success(f"Snippet #{snippet.id} updated.")


def get_command(
    ctx: typer.Context,
    snippet_id: int = typer.Argument(help="Numeric snippet identifier."),
    directory: Path = typer.Option(Path("."), "--dir", "-o", help="Directory to write the files to."),
    print_only: bool = typer.Option(False, "--print", help="Print the files instead of writing them."),
) -> None:
    """Retrieve a snippet by ID and write its files."""
    with _open_client() as client:
        snippet = SnippetEndpoints(client).get_snippet(snippet_id)

    output = get_output()
    if print_only or output.format == OutputFormat.JSON:
        output.print_snippet(snippet)
        return

    if not snippet.fragments:
        info(f"Snippet #{snippet.id} has no files.")
        return

    force, no_input = _flags(ctx)
    written = write_fragments(snippet, directory, make_confirmer(force, no_input))
    for path in written:
        output.print_data(str(path))
    success(f"Wrote {len(written)} of {len(snippet.fragments)} files from snippet #{snippet.id}.")


def delete_command(
    ctx: typer.Context,
    snippet_id: int = typer.Argument(help="Numeric snippet identifier."),
) -> None:
    """Delete a snippet by ID. Asks first unless --force is given."""
    force, no_input = _flags(ctx)
    if not make_confirmer(force, no_input).confirm(f"Delete snippet #{snippet_id}?"):
        info("Cancelled.")
        raise typer.Exit()

    with _open_client() as client:
        deleted = SnippetEndpoints(client).delete_snippet(snippet_id)
    success(f"Snippet #{deleted} deleted.")


def list_command(
    show_all: bool = typer.Option(False, "--all", "-a", help="Display every snippet, not just one page."),
    number: int = typer.Option(DEFAULT_PAGE_SIZE, "--number", "-n", help="Page size."),
    page: int = typer.Option(1, "--page", "-p", help="Page number to display (starting at 1)."),
) -> None:
    """Show a paginated list of snippets."""
    if not show_all:
        # Validate before the request.
        paginate([], page, number)

    with _open_client() as client:
        snippets = SnippetEndpoints(client).list_snippets()

    if not snippets:
        info("No snippets found.")
        return

    if show_all:
        get_output().print_snippets(snippets, title=f"Snippets ({len(snippets)} total)")
        return

    shown, pages = paginate(snippets, page, number)
    if not shown:
        info(f"Page {page} does not exist; there {'is' if pages == 1 else 'are'} {pages} page(s).")
        return
    get_output().print_snippets(
        shown, title=f"Snippets (page {page}/{pages}, {len(snippets)} total)"
    )
    if page < pages:
        suggest(f"Next page: bytestashy list --page {page + 1}")


def search_command(
    query: str = typer.Argument(help="Search query."),
    sort: Optional[str] = typer.Option(
        None, "--sort", "-s", help="Sort order: newest, oldest, alpha-asc, alpha-desc."
    ),
    search_code: bool = typer.Option(False, "--search-code", help="Search within code fragments."),
) -> None:
    """Search snippets."""
    order = parse_sort_order(sort) if sort is not None else None
    with _open_client() as client:
        results = SnippetEndpoints(client).search_snippets(query, sort=order, search_code=search_code)

    if not results:
        info(f'No snippets match "{query}".')
        return
    get_output().print_snippets(results, title=f'Search results for "{query}"')
