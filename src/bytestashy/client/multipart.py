"""Multipart upload construction for snippet create and update.

:func:`build_upload` turns an :class:`~bytestashy.models.UploadRequest` into
the ``data=`` and ``files=`` arguments httpx needs for a
``multipart/form-data`` request:

* four text fields, in order: ``title``, ``description``, ``is_public``
  (``"true"`` / ``"false"``) and ``categories``;
* one ``files`` part per local path, in the order given, named after the
  path's final component.

Every file is opened while building. If any of them cannot be opened the
handles already opened are closed and :class:`FileOperationError` is raised,
so a request is never sent with only some of the files. The handles are
passed to httpx as-is and streamed in chunks during the send, which keeps
memory flat for large files.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path
from typing import BinaryIO, Sequence, Union

from bytestashy.exceptions import FileOperationError, InvalidInputError
from bytestashy.models import UploadRequest

FILES_FIELD = "files"
UNKNOWN_FILE_NAME = "unknown"

PathLike = Union[str, Path]


class MultipartUpload:
    """The open form of an :class:`UploadRequest`, ready to hand to httpx.

    Use as a context manager so that file handles are released once the
    request has been sent::

        with build_upload(request) as upload:
            client.post(url, data=upload.fields, files=upload.files)
    """

    def __init__(
        self,
        fields: dict[str, str],
        files: list[tuple[str, tuple[str, BinaryIO]]],
    ) -> None:
        self.fields = fields
        self.files = files

    @property
    def file_names(self) -> list[str]:
        """Uploaded file names, in part order."""
        return [name for _, (name, _) in self.files]

    def close(self) -> None:
        for _, (_, handle) in self.files:
            handle.close()

    def __enter__(self) -> MultipartUpload:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def upload_file_name(path: PathLike) -> str:
    """Return the name a file is uploaded under: its final path component.

    A path ending in a separator has no final component and is uploaded as
    ``"unknown"``.
    """
    return os.path.basename(os.fspath(path)) or UNKNOWN_FILE_NAME


def build_upload(request: UploadRequest) -> MultipartUpload:
    """Open every file in *request* and assemble the multipart fields.

    Args:
        request: Metadata and the ordered list of local paths.  An empty
            list is allowed and produces fields only.

    Returns:
        A :class:`MultipartUpload` owning the opened file handles.

    Raises:
        FileOperationError: If any path cannot be opened for reading.
    """
    fields = {
        "title": request.title,
        "description": request.description,
        "is_public": "true" if request.is_public else "false",
        "categories": request.categories,
    }

    files: list[tuple[str, tuple[str, BinaryIO]]] = []
    upload = MultipartUpload(fields, files)
    for path in request.files:
        name = upload_file_name(path)
        try:
            handle = open(path, "rb")
        except OSError as exc:
            upload.close()
            raise FileOperationError(os.fspath(path), exc) from exc
        files.append((FILES_FIELD, (name, handle)))
    return upload


def validate_upload_paths(paths: Sequence[PathLike]) -> None:
    """Check the file arguments of ``create`` / ``update`` before anything is sent.

    Raises:
        InvalidInputError: If *paths* is empty or a path contains a ``..``
            component.
        FileOperationError: If a path does not exist.
    """
    if not paths:
        raise InvalidInputError("Provide at least one file to upload")
    for path in paths:
        if ".." in Path(path).parts:
            raise InvalidInputError(
                f"Path traversal is not allowed: '{os.fspath(path)}' contains '..'"
            )
        if not os.path.exists(path):
            missing = FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), os.fspath(path))
            raise FileOperationError(os.fspath(path), missing)
