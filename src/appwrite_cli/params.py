"""Flatten nested request parameters into bracket-keyed form fields.

Query strings and multipart bodies can only carry flat ``key=value`` pairs.
:func:`flatten` turns a parameter tree built by a command into that shape,
encoding list positions in the key with bracket notation::

    >>> flatten({"queries": ["limit(5)", "offset(10)"], "search": "bob"})
    {'queries[0]': 'limit(5)', 'queries[1]': 'offset(10)', 'search': 'bob'}

Only sequences are expanded. A nested mapping is passed through untouched as
a single leaf value, and the transport is responsible for encoding it (the
client sends such leaves as JSON text). Several endpoints accept object-valued
fields as one JSON-encoded form field, so this must not be changed to recurse
into mappings.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence, Union

ParameterTree = Union[Mapping[str, Any], Sequence[Any]]


def flatten(data: ParameterTree, prefix: str = "") -> dict[str, Any]:
    """Flatten *data* into a single-level mapping with bracket-encoded keys.

    Args:
        data: A mapping, or a list/tuple whose indices are used as keys.
        prefix: Key of the enclosing container; empty at the top level.

    Returns:
        A new dict from composite key (``parent[child]``) to leaf value, in
        the order the keys were produced.
    """
    output: dict[str, Any] = {}

    if isinstance(data, (list, tuple)):
        items = enumerate(data)
    else:
        items = data.items()

    for key, value in items:
        final_key = f"{prefix}[{key}]" if prefix else str(key)

        if isinstance(value, (list, tuple)):
            output.update(flatten(value, final_key))
        else:
            output[final_key] = value

    return output
