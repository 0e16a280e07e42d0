"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~appwrite_cli.exceptions.AppwriteCliError` subclass.
Shell wrappers can inspect the exit code to tell an expired session from a
missing document without parsing stderr.

Example::

    $ appwrite users get --user-id missing-user
    $ echo $?
    4   # EXIT_NOT_FOUND
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including HTTP 4xx other than 401/403/404)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""The server rejected the session, API key, or JWT (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The server returned an HTTP 5xx error."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C."""
