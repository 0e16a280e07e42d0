"""HTTP client module for appwrite_cli.

Provides :class:`Client`, a synchronous client that wraps :mod:`httpx` with
SDK headers, parameter flattening, chunked uploads, session-cookie capture,
dry-run mode and typed error mapping, plus the response helpers in
:mod:`appwrite_cli.client.response`.

Example::

    from appwrite_cli.client import Client

    with Client(endpoint).set_project("demo").set_key(key) as client:
        health = client.call("GET", "/health")
"""

from appwrite_cli.client.response import decode_response, format_api_response
from appwrite_cli.client.sync_client import Client

__all__ = ["Client", "decode_response", "format_api_response"]
