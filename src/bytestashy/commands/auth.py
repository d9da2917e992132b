"""Auth commands -- log in, log out, show the stored credential.

Typical workflow::

    bytestashy login https://stash.example.com   # prompts for user/password
    bytestashy status                            # which server, which key
    bytestashy logout                            # forget the key locally
"""

from __future__ import annotations

from typing import Optional

import typer

from bytestashy.auth import AuthExchange, CredentialStore
from bytestashy.auth.login import DEFAULT_KEY_NAME
from bytestashy.config import normalize_api_url
from bytestashy.exceptions import CredentialError, InvalidInputError
from bytestashy.output import get_output, info, success, suggest, warning
from bytestashy.prompts import make_confirmer


def _store() -> CredentialStore:
    return CredentialStore()


def _exchange(store: CredentialStore) -> AuthExchange:
    return AuthExchange(store)


def login_command(
    ctx: typer.Context,
    api_url: str = typer.Argument(help="URL of your ByteStash server, e.g. https://stash.example.com"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="ByteStash user name."),
    password: Optional[str] = typer.Option(
        None,
        "--password",
        envvar="BYTESTASHY_PASSWORD",
        show_envvar=True,
        help="Password (prompted for when omitted).",
    ),
    key_name: Optional[str] = typer.Option(
        None, "--key-name", "-k", help=f"Name of the API key to create (default: {DEFAULT_KEY_NAME})."
    ),
) -> None:
    """Authenticate with your ByteStash API.

    Logs in with username and password, creates an API key and stores it
    in the system keyring. The server URL is saved to the config file.

    Example::

        bytestashy login https://stash.example.com
        bytestashy login https://stash.example.com -u alice -k laptop
    """
    no_input = ctx.obj.get("no_input", False) if ctx.obj else False

    # Reject a bad URL before asking for a password.
    endpoint = normalize_api_url(api_url)

    if username is None:
        if no_input:
            raise InvalidInputError("--username is required with --no-input")
        username = typer.prompt("Username")
    if password is None:
        if no_input:
            raise InvalidInputError("--password or BYTESTASHY_PASSWORD is required with --no-input")
        password = typer.prompt("Password", hide_input=True)
    if key_name is None:
        key_name = DEFAULT_KEY_NAME if no_input else typer.prompt(
            "Name of the API key to generate", default=DEFAULT_KEY_NAME
        )

    store = _store()
    credential = _exchange(store).login(endpoint, username, password, key_name)
    success(f"Login successful, API key for {credential.endpoint} saved to keyring.")
    suggest("Upload something: bytestashy create <files>")


def logout_command(ctx: typer.Context) -> None:
    """Remove the stored API key and config file.

    The key itself stays valid on the server; revoke it in the ByteStash
    web UI if it should stop working.
    """
    obj = ctx.obj or {}
    confirmer = make_confirmer(obj.get("force", False), obj.get("no_input", False))

    store = _store()
    try:
        credential = store.load()
    except CredentialError as exc:
        warning(str(exc))
        credential = None

    if credential is None and not store.path.exists():
        info("Not logged in.")
        return

    target = credential.endpoint if credential else str(store.path)
    if not confirmer.confirm(f"Remove stored API key for {target}?"):
        info("Cancelled.")
        raise typer.Exit()

    store.clear()
    success("Stored API key removed.")


def status_command() -> None:
    """Show which server and API key are in use."""
    store = _store()
    credential = store.load()
    if credential is None:
        info("Not logged in.")
        suggest("Log in: bytestashy login <api-url>")
        return

    key = credential.secret_key
    masked = key[:4] + "..." if len(key) > 8 else "****"
    get_output().print_table(
        ["Field", "Value"],
        [
            ["Server", credential.endpoint],
            ["API Key", masked],
            ["Config File", str(store.path)],
        ],
        title="Stored Credential",
    )
