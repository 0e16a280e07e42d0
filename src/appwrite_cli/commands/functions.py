"""Functions commands -- inspect functions and their execution logs."""

from __future__ import annotations

from typing import Optional

import typer

from appwrite_cli.parsing import parse_bool
from appwrite_cli.sdk import execute, payload

functions_app = typer.Typer(no_args_is_help=True)


@functions_app.command("list")
def functions_list(
    queries: Optional[list[str]] = typer.Option(
        None,
        "--queries",
        help="Query string generated using the Query class. Repeat for several queries.",
    ),
    search: Optional[str] = typer.Option(
        None, "--search", help="Search term to filter your list results. Max length: 256 chars."
    ),
    total: Optional[str] = typer.Option(
        None,
        "--total",
        callback=parse_bool,
        help="When set to false, the total count returned will be 0 and will not be calculated.",
    ),
) -> None:
    """Get a list of all the project's functions."""
    execute(
        "GET",
        "/functions",
        payload({"queries": queries, "search": search, "total": total}),
    )


@functions_app.command("list-executions")
def functions_list_executions(
    function_id: str = typer.Option(..., "--function-id", help="Function ID."),
    queries: Optional[list[str]] = typer.Option(
        None,
        "--queries",
        help="Query string generated using the Query class. Repeat for several queries.",
    ),
    total: Optional[str] = typer.Option(
        None,
        "--total",
        callback=parse_bool,
        help="When set to false, the total count returned will be 0 and will not be calculated.",
    ),
) -> None:
    """Get a list of all the current user function execution logs.

    Executions that were never scheduled come back with ``scheduledAt`` set
    to null; those cells show ``-``.
    """
    execute(
        "GET",
        f"/functions/{function_id}/executions",
        payload({"queries": queries, "total": total}),
    )


@functions_app.command("get-execution")
def functions_get_execution(
    function_id: str = typer.Option(..., "--function-id", help="Function ID."),
    execution_id: str = typer.Option(..., "--execution-id", help="Execution ID."),
) -> None:
    """Get a function execution log by its unique ID."""
    execute("GET", f"/functions/{function_id}/executions/{execution_id}")
