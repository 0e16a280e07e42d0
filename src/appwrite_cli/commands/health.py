"""Health commands -- check the status of an Appwrite server's services."""

from __future__ import annotations

from typing import Optional

import typer

from appwrite_cli.sdk import execute, payload

health_app = typer.Typer(no_args_is_help=True)


@health_app.command("get")
def health_get() -> None:
    """Check the Appwrite HTTP server is up and responsive."""
    execute("GET", "/health")


@health_app.command("get-db")
def health_get_db() -> None:
    """Check the Appwrite database servers are up and connection is successful."""
    execute("GET", "/health/db")


@health_app.command("get-cache")
def health_get_cache() -> None:
    """Check the Appwrite in-memory cache servers are up and connection is successful."""
    execute("GET", "/health/cache")


@health_app.command("get-time")
def health_get_time() -> None:
    """Check the Appwrite server time is synced with Google remote NTP server."""
    execute("GET", "/health/time")


@health_app.command("get-queue-builds")
def health_get_queue_builds(
    threshold: Optional[int] = typer.Option(
        None,
        "--threshold",
        help="Queue size threshold. When hit (equal or higher), the endpoint "
        "returns a 500 error. Default value is 5000.",
    ),
) -> None:
    """Get the number of builds that are waiting to be processed."""
    execute("GET", "/health/queue/builds", payload({"threshold": threshold}))
