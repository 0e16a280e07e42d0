"""Typer application and CLI entry point for appwrite_cli.

This module wires together the top-level Typer application and registers the
built-in command groups (``client``, ``health``, ``locale``, ``users``,
``functions``, ``storage``) plus the generic ``call`` command.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, invokes the Typer app, and
turns :class:`~appwrite_cli.exceptions.AppwriteCliError` into an error line
and exit code. Unhandled exceptions are written to a crash log under the
data directory.

See Also:
    :mod:`appwrite_cli.config`: Configuration resolution.
    :mod:`appwrite_cli.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import platform
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional
from urllib.parse import urlencode

import typer

from appwrite_cli import __version__
from appwrite_cli.commands.call import call_command
from appwrite_cli.commands.client import client_app
from appwrite_cli.commands.functions import functions_app
from appwrite_cli.commands.health import health_app
from appwrite_cli.commands.locale import locale_app
from appwrite_cli.commands.storage import storage_app
from appwrite_cli.commands.users import users_app
from appwrite_cli.exceptions import AppwriteCliError
from appwrite_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from appwrite_cli.output import OutputFormat, OutputManager, error, hint, print_data, set_output

ISSUES_URL = "https://github.com/appwrite/appwrite/issues/new"
DISCORD_URL = "https://appwrite.io/discord"

app = typer.Typer(
    name="appwrite",
    help="Command line interface for the Appwrite API.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.add_typer(client_app, name="client", help="Connection settings and session.")
app.add_typer(health_app, name="health", help="Check the health of the Appwrite server.")
app.add_typer(locale_app, name="locale", help="Location-based data for the request.")
app.add_typer(users_app, name="users", help="Manage the project's users.")
app.add_typer(functions_app, name="functions", help="Inspect functions and executions.")
app.add_typer(storage_app, name="storage", help="Manage files in storage buckets.")
app.command("call")(call_command)

# Error-reporting flags of the current invocation, read by :func:`main`
# after the Typer context is gone.
_error_flags: dict[str, bool] = {"verbose": False, "report": False}


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"appwrite {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output in JSON format."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show complete error log and debug output."
    ),
    report: bool = typer.Option(
        False, "--report", help="Print a GitHub issue link when an error occurs."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print requests without sending them."
    ),
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", help="Endpoint override for this invocation."
    ),
    project_id: Optional[str] = typer.Option(
        None, "--project-id", help="Project override for this invocation."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~appwrite_cli.output.OutputManager` from
    CLI flags, and stores shared options in the Typer context so that
    :mod:`appwrite_cli.sdk` can read them via ``ctx.obj``.
    """
    output = OutputManager(
        format=OutputFormat.JSON if json_output else OutputFormat.TABLE,
        no_color=no_color,
        quiet=quiet,
        verbose=verbose,
    )
    set_output(output)

    _error_flags["verbose"] = verbose
    _error_flags["report"] = report

    ctx.ensure_object(dict)
    ctx.obj["endpoint"] = endpoint
    ctx.obj["project_id"] = project_id
    ctx.obj["dry_run"] = dry_run
    ctx.obj["verbose"] = verbose
    ctx.obj["report"] = report


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from appwrite_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def _server_version(endpoint: str) -> str:
    """Ask *endpoint* for its version; ``"unknown"`` when that fails."""
    from appwrite_cli.client import Client

    try:
        with Client(endpoint=endpoint) as client:
            response = client.call("GET", "/health/version")
    except AppwriteCliError:
        return "unknown"
    if isinstance(response, dict) and response.get("version"):
        return str(response["version"])
    return "unknown"


def build_report_url(
    exc: BaseException,
    args: list[str],
    endpoint: str,
    appwrite_version: str,
) -> str:
    """Build a prefilled GitHub bug-report URL for *exc*.

    Args:
        exc: The error being reported.
        args: Command-line arguments of the failing invocation.
        endpoint: The endpoint the CLI was talking to.
        appwrite_version: Server version, or ``"unknown"``.
    """
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    is_cloud = "Yes" if "cloud.appwrite.io" in endpoint else "No"
    environment = (
        f"CLI version: {__version__}\n"
        f"Operation System: {platform.system()}\n"
        f"Appwrite version: {appwrite_version}\n"
        f"Is Cloud: {is_cloud}"
    )
    query = urlencode({
        "labels": "bug",
        "template": "bug.yaml",
        "title": f"\U0001f41b Bug Report: {exc}",
        "actual-behavior": f"CLI Error:\n```\n{stack}\n```",
        "steps-to-reproduce": f"Running `appwrite {' '.join(args)}`",
        "environment": environment,
    })
    return f"{ISSUES_URL}?{query}"


def _report(exc: AppwriteCliError) -> None:
    from appwrite_cli.config import resolve_config

    try:
        endpoint = resolve_config().endpoint
    except AppwriteCliError:
        from appwrite_cli.models import DEFAULT_ENDPOINT

        endpoint = DEFAULT_ENDPOINT

    url = build_report_url(exc, sys.argv[1:], endpoint, _server_version(endpoint))
    print_data(
        "To report this error you can:\n"
        f" - Create a support ticket in our Discord server {DISCORD_URL}\n"
        " - Create an issue in our Github\n"
        f"   {url}\n"
    )
    error(str(exc))
    sys.stderr.write("\n Stack Trace: \n")
    sys.stderr.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))


def handle_error(exc: AppwriteCliError) -> int:
    """Print *exc* according to ``--verbose`` / ``--report`` and return its exit code."""
    if _error_flags["report"]:
        _report(exc)
    elif _error_flags["verbose"]:
        error(str(exc))
        sys.stderr.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    else:
        error(str(exc))
        hint("For detailed error pass the --verbose or --report flag")
    return exc.exit_code


def main() -> None:
    """CLI entry point invoked by the ``appwrite`` console script.

    :class:`~appwrite_cli.exceptions.AppwriteCliError` instances cause a
    clean exit with the error's ``exit_code``. All other exceptions produce
    a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except AppwriteCliError as exc:
        sys.exit(handle_error(exc))
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        error(f"Please report: {ISSUES_URL}")
        sys.exit(EXIT_GENERIC_FAILURE)
