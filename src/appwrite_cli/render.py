"""Render decoded API responses as JSON or as terminal tables.

Every function here is a pure function of its inputs plus the Rich
:class:`~rich.console.Console` it writes to. The output mode is passed in
explicitly by :class:`~appwrite_cli.output.OutputManager`; nothing in this
module reads global state.

Table layout for a response such as::

    {"total": 2, "users": [{"$id": "a", "name": "Ann"}, {"$id": "b"}]}

prints ``total : 2``, then a ``users`` heading followed by a table with the
columns ``$id`` and ``name``. The second row shows ``-`` under ``name``
because that record has no such field.
"""

from __future__ import annotations

import enum
import sys
from typing import Any, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.measure import Measurement
from rich.table import Table
from rich.text import Text

from appwrite_cli.values import (
    ValueKind,
    compact_json,
    encode_json,
    format_scalar,
    kind_of,
)

PLACEHOLDER = "-"
EMPTY_LIST = "[]"


class OutputFormat(str, enum.Enum):
    """Render mode selected by the global ``--json`` flag.

    ``TABLE`` prints key/value lines and tables; ``JSON`` prints the raw
    response body as indented JSON.
    """

    TABLE = "table"
    JSON = "json"


def render_response(data: Any, mode: OutputFormat, console: Console) -> None:
    """Render a full response body in *mode*.

    In JSON mode the whole body is printed as indented JSON. Otherwise a
    record is walked key by key: lists and nested records get a heading and a
    table, everything else is printed as ``key : value``.

    Args:
        data: Decoded response body.
        mode: :attr:`OutputFormat.JSON` or :attr:`OutputFormat.TABLE`.
        console: Destination console (stdout in normal use).
    """
    if mode == OutputFormat.JSON:
        draw_json(data, console)
        return

    kind = kind_of(data)
    if kind == ValueKind.LIST:
        _draw_list(data, console)
        return
    if kind != ValueKind.RECORD:
        console.print(format_scalar(data), markup=False, highlight=False, emoji=False)
        return

    for key, value in data.items():
        kind = kind_of(value)
        if kind == ValueKind.LIST:
            _draw_heading(key, console)
            _draw_list(value, console)
        elif kind == ValueKind.RECORD:
            _draw_heading(key, console)
            draw_table([value], console)
        else:
            # SCALAR and BIG_INTEGER both print as-is; BigInteger str() is exact.
            _draw_key_value(key, value, console)


def draw_table(records: Sequence[Any], console: Console) -> None:
    """Print *records* as a table, or ``[]`` when there is nothing to show."""
    table = build_table(records)
    if table is None:
        console.print(EMPTY_LIST, markup=False, highlight=False, emoji=False)
        return
    # Cells never wrap; a table wider than the terminal runs past its edge.
    measurement = Measurement.get(console, console.options.update_width(sys.maxsize), table)
    if measurement.maximum > console.width:
        table.width = measurement.maximum
    console.print(table, crop=False)


def draw_json(data: Any, console: Console) -> None:
    """Print *data* as 2-space indented JSON."""
    console.print(encode_json(data), markup=False, highlight=False, emoji=False, soft_wrap=True)


def build_table(records: Sequence[Any]) -> Table | None:
    """Build a Rich table for *records*.

    Returns:
        ``None`` when *records* is empty or contains no fields at all
        (for example ``[None]``), otherwise the populated table.
    """
    columns = table_columns(records)
    if not columns:
        return None

    table = Table(
        box=box.MINIMAL,
        show_lines=True,
        border_style="cyan",
        header_style="bold italic cyan",
    )
    for column in columns:
        table.add_column(Text(column), no_wrap=True)
    for row in table_rows(records, columns):
        table.add_row(*(Text(cell) for cell in row))
    return table


def table_columns(records: Sequence[Any]) -> list[str]:
    """Union of field names across *records*, in first-seen order.

    Entries that are not records (``None``, strings, numbers) contribute no
    fields.
    """
    columns: list[str] = []
    seen: set[str] = set()
    for index in range(len(records)):
        record = records[index]
        if kind_of(record) != ValueKind.RECORD:
            continue
        for key in record:
            if key not in seen:
                seen.add(key)
                columns.append(key)
    return columns


def table_rows(records: Sequence[Any], columns: Sequence[str]) -> list[list[str]]:
    """Cell text for every record, one list of strings per row.

    A non-record entry is treated as an empty record, so its row is all
    placeholders.
    """
    rows: list[list[str]] = []
    for record in records:
        if kind_of(record) != ValueKind.RECORD:
            record = {}
        rows.append([_cell(record, column) for column in columns])
    return rows


def _cell(record: dict[str, Any], column: str) -> str:
    if column not in record:
        return PLACEHOLDER
    value = record[column]
    if value is None:
        return PLACEHOLDER
    if kind_of(value) in (ValueKind.LIST, ValueKind.RECORD):
        return compact_json(value)
    return format_scalar(value)


def _draw_list(values: Sequence[Any], console: Console) -> None:
    # Table only when the first entry looks like a record; a null first entry
    # still goes to the table so it can render as a placeholder row.
    if values and (values[0] is None or kind_of(values[0]) == ValueKind.RECORD):
        draw_table(values, console)
    else:
        draw_json(values, console)


def _draw_heading(key: str, console: Console) -> None:
    console.print(f"[bold underline yellow]{_escape(key)}[/]", emoji=False)


def _draw_key_value(key: str, value: Any, console: Console) -> None:
    console.print(
        f"[bold yellow]{_escape(key)}[/] : {_escape(format_scalar(value))}",
        highlight=False,
        emoji=False,
    )


def _escape(text: Any) -> str:
    return escape(str(text))
