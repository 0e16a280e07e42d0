"""Client commands -- view and change the connection settings.

Provides the ``appwrite client`` sub-command group for the endpoint,
project, API key and TLS settings stored in the global config
(:class:`~appwrite_cli.models.GlobalConfig`), and for dropping the stored
session cookie.
"""

from __future__ import annotations

from typing import Optional

import typer

from appwrite_cli.client import Client
from appwrite_cli.config import get_config_dir, load_global_config, save_global_config
from appwrite_cli.exceptions import AppwriteCliError, InvalidUsageError
from appwrite_cli.models import GlobalConfig
from appwrite_cli.output import format_response, info, success
from appwrite_cli.parsing import parse_bool

client_app = typer.Typer(no_args_is_help=True)


def _mask(secret: Optional[str]) -> Optional[str]:
    if not secret:
        return secret
    return secret[:4] + "*" * max(len(secret) - 4, 4)


def _check_endpoint(endpoint: str, self_signed: bool) -> None:
    """Make sure *endpoint* answers like an Appwrite server.

    Raises:
        InvalidUsageError: If ``/health/version`` does not return a version.
    """
    client = Client(endpoint=endpoint).set_self_signed(self_signed)
    try:
        with client:
            response = client.call("GET", "/health/version")
    except AppwriteCliError:
        response = None
    if not isinstance(response, dict) or "version" not in response:
        raise InvalidUsageError(
            "Invalid endpoint or your Appwrite server is not running as expected."
        )


@client_app.command("show")
def client_show() -> None:
    """Show the stored connection settings.

    The API key and session cookie are masked.
    """
    config = load_global_config()
    info(f"Config directory: {get_config_dir()}")
    data = config.model_dump(mode="json")
    data["key"] = _mask(config.key)
    data["cookie"] = _mask(config.cookie)
    format_response(data)


@client_app.command("set")
def client_set(
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="Appwrite endpoint, e.g. https://cloud.appwrite.io/v1."
    ),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project ID."),
    key: Optional[str] = typer.Option(None, "--key", help="Secret API key."),
    self_signed: Optional[str] = typer.Option(
        None,
        "--self-signed",
        callback=parse_bool,
        help="Accept self-signed certificates: true or false.",
    ),
    locale: Optional[str] = typer.Option(None, "--locale", help="Locale sent with requests."),
) -> None:
    """Update the stored connection settings.

    A new endpoint is probed with ``GET /health/version`` before it is saved.

    Example::

        appwrite client set --endpoint http://localhost/v1 --self-signed true
        appwrite client set --project-id demo --key standard_1234
    """
    config = load_global_config()
    if all(value is None for value in (endpoint, project_id, key, self_signed, locale)):
        raise InvalidUsageError("Nothing to set. Pass at least one option.")

    if self_signed is not None:
        config.self_signed = self_signed
    if endpoint is not None:
        _check_endpoint(endpoint, config.self_signed)
        config.endpoint = endpoint
    if project_id is not None:
        config.project_id = project_id
    if key is not None:
        config.key = key
    if locale is not None:
        config.locale = locale

    save_global_config(config)
    success("Client settings updated.")


@client_app.command("reset")
def client_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the connection settings to defaults and drop the session."""
    if not force:
        confirmed = typer.confirm("Reset endpoint, project, key and session?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Client settings reset to defaults.")
