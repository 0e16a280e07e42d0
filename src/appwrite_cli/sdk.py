"""Factories for pre-configured :class:`~appwrite_cli.client.Client` instances.

Commands never build a client themselves; they call :func:`sdk_for_project`
(project-scoped endpoints) or :func:`sdk_for_console` (endpoints that work
without a project). Both resolve configuration through
:func:`~appwrite_cli.config.resolve_config`, honour the root ``--endpoint``,
``--project-id`` and ``--dry-run`` flags, and persist any session cookie the
server sends back.
"""

from __future__ import annotations

from typing import Any, Optional

import click
import httpx

from appwrite_cli.client import Client, format_api_response
from appwrite_cli.config import resolve_config, save_session_cookie
from appwrite_cli.exceptions import ConfigError
from appwrite_cli.models import GlobalConfig
from appwrite_cli.output import success


def _root_options() -> dict[str, Any]:
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return {}
    root = ctx.find_root()
    return root.obj if isinstance(root.obj, dict) else {}


def _build_client(
    config: GlobalConfig,
    options: dict[str, Any],
    transport: Optional[httpx.BaseTransport],
) -> Client:
    client = Client(
        endpoint=config.endpoint,
        timeout=config.request.timeout,
        dry_run=bool(options.get("dry_run")),
        on_cookie=save_session_cookie,
        transport=transport,
    )
    client.set_self_signed(config.self_signed)
    if config.cookie:
        client.set_cookie(config.cookie)
    if config.locale:
        client.set_locale(config.locale)
    return client


def _resolve(options: dict[str, Any]) -> GlobalConfig:
    return resolve_config(
        cli_endpoint=options.get("endpoint"),
        cli_project=options.get("project_id"),
    )


def sdk_for_console(transport: Optional[httpx.BaseTransport] = None) -> Client:
    """Build a client for the configured endpoint without a project header."""
    options = _root_options()
    return _build_client(_resolve(options), options, transport)


def sdk_for_project(transport: Optional[httpx.BaseTransport] = None) -> Client:
    """Build a client scoped to the active project.

    An API key, when configured, is sent instead of relying on the session
    cookie alone.

    Raises:
        ConfigError: If no project ID is configured anywhere.
    """
    options = _root_options()
    config = _resolve(options)
    if not config.project_id:
        raise ConfigError(
            "Project is not set. Run 'appwrite client set --project-id <id>' "
            "or set APPWRITE_PROJECT_ID."
        )

    client = _build_client(config, options, transport)
    client.set_project(config.project_id)
    if config.key:
        client.set_key(config.key)
        client.set_mode("default")
    return client


def payload(fields: dict[str, Any]) -> dict[str, Any]:
    """Drop unset (``None``) fields from a request parameter tree."""
    return {key: value for key, value in fields.items() if value is not None}


def execute(
    method: str,
    path: str,
    params: Optional[dict[str, Any]] = None,
    content_type: str = "application/json",
    project: bool = True,
) -> Any:
    """Send one request, render the response, and print the success line.

    This is what almost every endpoint command boils down to.

    Args:
        method: HTTP method.
        path: API path with path parameters already substituted.
        params: Parameter tree for the query string or body.
        content_type: Request content type.
        project: Use :func:`sdk_for_project` (default) or
            :func:`sdk_for_console`.

    Returns:
        The decoded response body.
    """
    client = sdk_for_project() if project else sdk_for_console()
    with client:
        response = client.call(method, path, {"content-type": content_type}, params)
    format_api_response(response)
    success()
    return response
