"""bytestashy -- push, fetch and search ByteStash snippets from the terminal.

The package is a small client for a ByteStash server. ``bytestashy login``
exchanges a username and password for a long-lived API key, which is kept in
the platform keyring while the server URL goes to a plain JSON config file.
Every other command sends a single authenticated request with that key.

Typical workflow::

    bytestashy login https://stash.example.com
    bytestashy create main.py utils.py
    bytestashy list --page 2

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for credentials, snippets and uploads.
    config: XDG-aware config paths, atomic writes and URL validation.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    prompts: Injectable confirmation prompts.
"""

__version__ = "0.3.1"
