"""Pydantic models shared across appwrite_cli.

**Configuration models** -- serialised as JSON in the user's config
directory or in the project directory:
    :class:`RequestConfig`, :class:`GlobalConfig`, :class:`ProjectConfig`.

**Request models** -- built by commands and consumed by the HTTP client:
    :class:`InputFile`.
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENDPOINT = "https://cloud.appwrite.io/v1"


class RequestConfig(BaseModel):
    """Default HTTP request settings applied to every API call."""

    timeout: int = Field(default=30, description="Request timeout in seconds")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/appwrite-cli/config.json``.

    Holds the server endpoint, the active project and the credentials the
    client sends with every call. Loaded and saved by
    :func:`~appwrite_cli.config.load_global_config` and
    :func:`~appwrite_cli.config.save_global_config`. See
    :func:`~appwrite_cli.config.resolve_config` for how environment variables
    and ``appwrite.json`` override these values.
    """

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="API endpoint URL")
    project_id: Optional[str] = Field(default=None, description="Active project ID")
    key: Optional[str] = Field(default=None, description="Secret API key")
    cookie: Optional[str] = Field(
        default=None, description="Session cookie stored after the last call"
    )
    self_signed: bool = Field(
        default=False, description="Accept self-signed TLS certificates"
    )
    locale: Optional[str] = Field(default=None, description="X-Appwrite-Locale header")
    request: RequestConfig = Field(default_factory=RequestConfig)


class ProjectConfig(BaseModel):
    """Project-local ``appwrite.json`` written next to the user's code.

    Only the connection fields are read; everything else in the file
    (functions, collections, buckets...) is preserved in ``model_extra``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    project_id: Optional[str] = Field(default=None, alias="projectId")
    project_name: Optional[str] = Field(default=None, alias="projectName")
    endpoint: Optional[str] = None


class InputFile(BaseModel):
    """A local file to send as a multipart file part.

    ``content`` is only set for a single chunk of a chunked upload; the
    client sends it instead of reading ``path``.
    """

    path: Path
    filename: Optional[str] = None
    mime_type: Optional[str] = None
    content: Optional[bytes] = None

    @classmethod
    def from_path(cls, path: str | Path) -> InputFile:
        """Build an :class:`InputFile` for *path*, guessing its MIME type."""
        resolved = Path(path).expanduser().resolve()
        mime, _ = mimetypes.guess_type(resolved.name)
        return cls(
            path=resolved,
            filename=resolved.name,
            mime_type=mime or "application/octet-stream",
        )

    @property
    def name(self) -> str:
        return self.filename or self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read(self) -> bytes:
        if self.content is not None:
            return self.content
        return self.path.read_bytes()
