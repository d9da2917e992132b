"""Write downloaded fragments to local files.

Used by ``bytestashy get``.  File names come from the server, so each one is
checked before anything is written: a name must be a single path component
(no separators, no ``..``).  Existing files are only overwritten when the
:class:`~bytestashy.prompts.Confirmer` agrees.
"""

from __future__ import annotations

from pathlib import Path

from bytestashy.exceptions import FileOperationError, InvalidInputError
from bytestashy.models import Fragment, Snippet
from bytestashy.output import debug, info
from bytestashy.prompts import Confirmer


def safe_file_name(fragment: Fragment) -> str:
    """Return the fragment's file name if it is safe to write in a directory.

    Raises:
        InvalidInputError: If the name is empty, ``.`` / ``..``, or contains
            a path separator.
    """
    name = fragment.file_name
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidInputError(
            f"Refusing to write fragment {fragment.id} with unsafe file name {name!r}"
        )
    return name


def write_fragments(snippet: Snippet, directory: Path, confirmer: Confirmer) -> list[Path]:
    """Write every fragment of *snippet* into *directory*.

    All names are validated before the first file is written.

    Args:
        snippet: Snippet with fragments, as returned by ``get_snippet``.
        directory: Target directory, created if missing.
        confirmer: Asked before an existing file is overwritten.

    Returns:
        The paths that were written, in fragment order.  Files the user
        chose not to overwrite are left out.

    Raises:
        InvalidInputError: If a fragment has an unsafe file name.
        FileOperationError: If a file cannot be written.
    """
    targets = [(fragment, directory / safe_file_name(fragment)) for fragment in snippet.fragments]

    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(str(directory), exc) from exc

    written: list[Path] = []
    for fragment, path in targets:
        if path.exists() and not confirmer.confirm(f"Overwrite {path}?"):
            info(f"Skipped {path}")
            continue
        try:
            path.write_text(fragment.code, encoding="utf-8")
        except OSError as exc:
            raise FileOperationError(str(path), exc) from exc
        debug(f"Wrote {len(fragment.code)} characters to {path}")
        written.append(path)
    return written
