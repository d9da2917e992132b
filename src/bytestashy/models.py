"""Canonical Pydantic models shared across all bytestashy modules.

This is the single source of truth for data shapes in the project. The
models fall into two groups:

**Local state** -- what the client keeps between invocations:
    :class:`Credential` (endpoint + API key, split between the config file
    and the keyring) and :class:`ConfigFile` (the on-disk JSON shape).

**Wire models** -- what the ByteStash API sends and receives:
    :class:`Fragment`, :class:`Snippet`, :class:`UploadRequest` and the
    :class:`SortOrder` enumeration accepted by the search endpoint.

Server payloads may carry fields this client does not know about; the wire
models use ``extra="allow"`` so that they survive a round trip through
``model_dump``.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Local state ---


class Credential(BaseModel):
    """The server URL and API key used for every snippet request.

    ``endpoint`` is stored in the plain config file, ``secret_key`` only in
    the platform keyring. See :class:`~bytestashy.auth.CredentialStore`.
    """

    endpoint: str = Field(description="Base URL of the ByteStash server")
    secret_key: str = Field(description="API key issued by POST /api/keys")

    @property
    def is_usable(self) -> bool:
        """``True`` when both the endpoint and the key are non-empty."""
        return bool(self.endpoint) and bool(self.secret_key)


class ConfigFile(BaseModel):
    """Contents of ``config.json``. The API key is deliberately absent."""

    api_url: str


# --- Wire models ---


class SortOrder(str, enum.Enum):
    """Sort orders understood by ``GET /api/v1/snippets/search``."""

    NEWEST = "newest"
    OLDEST = "oldest"
    ALPHA_ASC = "alpha-asc"
    ALPHA_DESC = "alpha-desc"


class Fragment(BaseModel):
    """One file inside a snippet."""

    model_config = ConfigDict(extra="allow")

    id: int
    file_name: str
    code: str = ""
    language: str = ""
    position: int = 0


class Snippet(BaseModel):
    """A titled bundle of fragments as returned by the API.

    Only ``id`` is required: the create and update endpoints may answer with
    a partial object. ``updated_at`` and ``share_count`` are assigned by the
    server and never sent back.
    """

    model_config = ConfigDict(extra="allow")

    id: int
    title: str = ""
    description: Optional[str] = ""
    categories: list[str] = Field(default_factory=list)
    fragments: list[Fragment] = Field(default_factory=list)
    updated_at: Optional[str] = None
    share_count: int = 0

    @field_validator("fragments")
    @classmethod
    def _order_by_position(cls, fragments: list[Fragment]) -> list[Fragment]:
        return sorted(fragments, key=lambda f: f.position)


class UploadRequest(BaseModel):
    """Metadata and local files for a create or update call.

    Never persisted. ``categories`` is the comma-joined form the server
    expects; use :meth:`from_category_list` to build it from a list.
    """

    title: str
    description: str = ""
    is_public: bool = False
    categories: str = ""
    files: list[Union[str, Path]] = Field(default_factory=list)

    @classmethod
    def from_category_list(
        cls,
        title: str,
        categories: list[str],
        files: list[Union[str, Path]],
        description: str = "",
        is_public: bool = False,
    ) -> UploadRequest:
        """Build a request, joining *categories* with commas and dropping blanks."""
        joined = ",".join(c.strip() for c in categories if c.strip())
        return cls(
            title=title,
            description=description,
            is_public=is_public,
            categories=joined,
            files=files,
        )
