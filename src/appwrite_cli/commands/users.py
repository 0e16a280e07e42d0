"""Users commands -- manage the users of the active project."""

from __future__ import annotations

from typing import Optional

import typer

from appwrite_cli.parsing import parse_bool
from appwrite_cli.sdk import execute, payload

users_app = typer.Typer(no_args_is_help=True)

_QUERIES_HELP = (
    "Query string generated using the Query class. Repeat the option for "
    "several queries; a maximum of 100 queries is allowed."
)


@users_app.command("list")
def users_list(
    queries: Optional[list[str]] = typer.Option(None, "--queries", help=_QUERIES_HELP),
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
    """Get a list of all the project's users."""
    execute(
        "GET",
        "/users",
        payload({"queries": queries, "search": search, "total": total}),
    )


@users_app.command("get")
def users_get(
    user_id: str = typer.Option(..., "--user-id", help="User ID."),
) -> None:
    """Get a user by its unique ID."""
    execute("GET", f"/users/{user_id}")


@users_app.command("create")
def users_create(
    user_id: str = typer.Option(
        ...,
        "--user-id",
        help='User ID. Choose a custom ID or pass "unique()" to auto generate it.',
    ),
    email: Optional[str] = typer.Option(None, "--email", help="User email."),
    phone: Optional[str] = typer.Option(
        None, "--phone", help="Phone number with a leading '+' and a country code."
    ),
    password: Optional[str] = typer.Option(
        None, "--password", help="Plain text user password. Must be at least 8 chars."
    ),
    name: Optional[str] = typer.Option(None, "--name", help="User name. Max length: 128 chars."),
) -> None:
    """Create a new user."""
    execute(
        "POST",
        "/users",
        payload({
            "userId": user_id,
            "email": email,
            "phone": phone,
            "password": password,
            "name": name,
        }),
    )


@users_app.command("update-status")
def users_update_status(
    user_id: str = typer.Option(..., "--user-id", help="User ID."),
    status: str = typer.Option(
        ...,
        "--status",
        callback=parse_bool,
        help="User status. Pass 'true' to activate the user or 'false' to block them.",
    ),
) -> None:
    """Update the user status by its unique ID."""
    execute("PATCH", f"/users/{user_id}/status", {"status": status})



@users_app.command("delete")
def users_delete(
    user_id: str = typer.Option(..., "--user-id", help="User ID."),
) -> None:
    """Delete a user by its unique ID, thereby releasing its ID."""
    execute("DELETE", f"/users/{user_id}")
