"""Generic request command -- send any method to any API path.

Covers endpoints that have no dedicated command. Parameters come from a
JSON document (``--data``) and/or repeated ``--param key=value`` pairs;
pairs win over keys of the same name in the document.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from appwrite_cli.exceptions import InvalidUsageError
from appwrite_cli.sdk import execute
from appwrite_cli.values import decode_json

_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def _parse_pairs(pairs: list[str]) -> dict[str, Any]:
    """Turn ``key=value`` strings into a dict, keeping values as text."""
    result: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Invalid parameter '{pair}'. Expected key=value.")
        result[key] = value
    return result


def _parse_data(data: Optional[str]) -> dict[str, Any]:
    if data is None:
        return {}
    try:
        parsed = decode_json(data)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"--data is not valid JSON: {exc.msg}") from None
    if not isinstance(parsed, dict):
        raise InvalidUsageError("--data must be a JSON object.")
    return parsed


def call_command(
    method: str = typer.Argument(help="HTTP method: GET, POST, PUT, PATCH or DELETE."),
    path: str = typer.Argument(help="API path, e.g. /users."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Request parameter as key=value. Repeatable."
    ),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Request parameters as a JSON object."
    ),
    console: bool = typer.Option(
        False, "--console", help="Send the request without the project header."
    ),
) -> None:
    """Send a request to an arbitrary API path and render the response.

    Example::

        appwrite call GET /users --param "queries[]=limit(5)"
        appwrite call PATCH /users/alice/name --data '{"name": "Alice"}'
    """
    method = method.upper()
    if method not in _METHODS:
        raise InvalidUsageError(
            f"Unsupported method '{method}'. Use one of: {', '.join(_METHODS)}."
        )
    if not path.startswith("/"):
        path = "/" + path

    params = _parse_data(data)
    params.update(_parse_pairs(param or []))
    execute(method, path, params, project=not console)
