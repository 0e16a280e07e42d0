"""Locale commands -- location-based data for the current request."""

from __future__ import annotations

import typer

from appwrite_cli.sdk import execute

locale_app = typer.Typer(no_args_is_help=True)


@locale_app.command("get")
def locale_get() -> None:
    """Get the current user location based on IP.

    Returns an object with the user country code, country name, continent
    name, continent code, IP address and suggested currency.
    """
    execute("GET", "/locale")


@locale_app.command("list-countries")
def locale_list_countries() -> None:
    """List of all countries, localized with the X-Appwrite-Locale header."""
    execute("GET", "/locale/countries")


@locale_app.command("list-currencies")
def locale_list_currencies() -> None:
    """List of all currencies, including symbol, name, plural, and decimal digits."""
    execute("GET", "/locale/currencies")
