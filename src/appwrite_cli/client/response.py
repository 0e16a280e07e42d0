"""Response bridge -- decodes :class:`httpx.Response` bodies for the output system.

:func:`decode_response` turns a raw HTTP response into the value commands
work with (JSON with big integers preserved, text, or bytes), and
:func:`format_api_response` hands that value to
:meth:`~appwrite_cli.output.OutputManager.format_response`.

See Also:
    :mod:`appwrite_cli.render` -- JSON and table rendering.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from appwrite_cli.output import get_output
from appwrite_cli.values import decode_json


def decode_response(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    JSON bodies are decoded with :func:`~appwrite_cli.values.decode_json`
    so 64-bit integers stay exact. ``text/*`` bodies come back as ``str``,
    anything else (images, file downloads) as ``bytes``.

    Returns:
        The decoded body, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    content_type = response.headers.get("content-type", "").lower()
    if "json" in content_type:
        try:
            return decode_json(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return response.text
    if content_type.startswith("text/"):
        return response.text
    return response.content


def format_api_response(data: Any) -> None:
    """Render a decoded response body using the global output system.

    Empty bodies (``None``) print nothing.
    """
    if data is None:
        return
    get_output().format_response(data)
