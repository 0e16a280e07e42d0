"""Strict converters for command-line values.

Typer's own ``bool`` handling turns options into ``--flag/--no-flag``
switches; endpoint commands instead take explicit ``true``/``false`` values
that map straight onto the request body, so they use :func:`parse_bool` as
the option callback.
"""

from __future__ import annotations

from typing import Optional

import typer


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Convert ``"true"``/``"false"`` to a bool; ``None`` passes through.

    Raises:
        typer.BadParameter: For any other string.
    """
    if value is None:
        return None
    if value == "true":
        return True
    if value == "false":
        return False
    raise typer.BadParameter("Not a boolean.")

