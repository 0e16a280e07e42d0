"""Exception hierarchy for appwrite_cli.

All exceptions inherit from :class:`AppwriteCliError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`appwrite_cli.exit_codes`. The top-level error handler in
:func:`appwrite_cli.app.main` catches ``AppwriteCliError`` and exits with the
appropriate code, while unexpected exceptions produce a crash log and exit
with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    AppwriteCliError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- ConnectionError_    (exit 6)
    +-- ApiError            (exit 1)
        +-- AuthError       (exit 3)
        +-- NotFoundError   (exit 4)
        +-- ServerError     (exit 5)
"""

from __future__ import annotations

from typing import Any, Optional

from appwrite_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class AppwriteCliError(Exception):
    """Base exception for all appwrite_cli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`appwrite_cli.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(AppwriteCliError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(AppwriteCliError):
    """Raised for configuration problems (missing project, invalid JSON files)."""

    exit_code = EXIT_GENERIC_FAILURE


class ConnectionError_(AppwriteCliError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ApiError(AppwriteCliError):
    """Raised when the server answers with an HTTP error status.

    Args:
        message: The server's ``message`` field, or the raw body when the
            response was not JSON.
        code: HTTP status code.
        type: The server's machine-readable error type
            (e.g. ``user_not_found``), when present.
        response: The decoded response body.
    """

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        type: Optional[str] = None,
        response: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.type = type
        self.response = response


class AuthError(ApiError):
    """Raised on HTTP 401 / 403 (missing scope, expired session, invalid key)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(ApiError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ApiError):
    """Raised when the API returns an HTTP 5xx error."""

    exit_code = EXIT_SERVER_ERROR


def api_error_for_status(
    status: int,
    message: str,
    error_type: Optional[str] = None,
    response: Any = None,
) -> ApiError:
    """Build the :class:`ApiError` subclass matching an HTTP *status*."""
    cls: type[ApiError]
    if status in (401, 403):
        cls = AuthError
    elif status == 404:
        cls = NotFoundError
    elif status >= 500:
        cls = ServerError
    else:
        cls = ApiError
    return cls(message, code=status, type=error_type, response=response)
