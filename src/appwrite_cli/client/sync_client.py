"""Synchronous HTTP client for the Appwrite REST API.

This module provides :class:`Client`, the blocking client every command
uses. It wraps :class:`httpx.Client` and layers on:

- **SDK headers** -- ``x-sdk-*``, ``user-agent`` and the response format
  version are sent with every request, plus project/key/JWT/cookie headers
  set through the fluent ``set_*`` methods.
- **Parameter encoding** -- parameters are flattened with
  :func:`~appwrite_cli.params.flatten` for query strings and multipart
  bodies, and JSON-encoded (big integers intact) for everything else.
- **Chunked uploads** -- files larger than :attr:`Client.CHUNK_SIZE` are sent
  in ``content-range`` chunks (see :meth:`Client.upload`).
- **Session cookies** -- a ``set-cookie`` header in a response is handed to
  the ``on_cookie`` callback so it can be persisted.
- **Dry-run mode** -- prints the request to stderr and returns a synthetic
  body without sending traffic.
- **Error mapping** -- HTTP errors become
  :class:`~appwrite_cli.exceptions.ApiError` subclasses, network failures
  :class:`~appwrite_cli.exceptions.ConnectionError_`.

Requests are never retried.
"""

from __future__ import annotations

import platform
from typing import Any, Callable, Optional

import httpx

from appwrite_cli import __version__
from appwrite_cli.client.response import decode_response
from appwrite_cli.exceptions import ApiError, ConnectionError_, api_error_for_status
from appwrite_cli.models import DEFAULT_ENDPOINT, InputFile
from appwrite_cli.output import get_output
from appwrite_cli.params import flatten
from appwrite_cli.values import compact_json, encode_json, format_scalar

RESPONSE_FORMAT = "1.6.0"

ProgressCallback = Callable[[dict[str, Any]], None]


class Client:
    """Synchronous HTTP client for API calls.

    Must be used as a context manager so that the underlying transport is
    opened and closed properly.

    Args:
        endpoint: API root including the version segment, e.g.
            ``https://cloud.appwrite.io/v1``.
        timeout: Request timeout in seconds.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic body is returned without network I/O.
        on_cookie: Called with the ``name=value`` part of any
            ``set-cookie`` header the server sends back.
        transport: Optional httpx transport (tests pass a
            :class:`httpx.MockTransport`).

    Example::

        with Client().set_endpoint(url).set_project("demo") as client:
            users = client.call("GET", "/users", params={"queries": ["limit(5)"]})
    """

    CHUNK_SIZE = 5 * 1024 * 1024

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: int = 30,
        dry_run: bool = False,
        on_cookie: Optional[Callable[[str], None]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._dry_run = dry_run
        self._on_cookie = on_cookie
        self._transport = transport
        self._self_signed = False
        self._client: Optional[httpx.Client] = None
        self._headers: dict[str, str] = {
            "x-sdk-name": "Command Line",
            "x-sdk-platform": "console",
            "x-sdk-language": "cli",
            "x-sdk-version": __version__,
            "user-agent": (
                f"AppwriteCLI/{__version__} "
                f"({platform.system()} {platform.release()}; {platform.machine()})"
            ),
            "x-appwrite-response-format": RESPONSE_FORMAT,
        }

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Client:
        self._client = httpx.Client(
            timeout=self._timeout,
            verify=not self._self_signed,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def headers(self) -> dict[str, str]:
        """A copy of the headers sent with every request."""
        return dict(self._headers)

    def set_endpoint(self, endpoint: str) -> Client:
        self._endpoint = endpoint.rstrip("/")
        return self

    def set_self_signed(self, status: bool) -> Client:
        """Accept self-signed certificates. Takes effect on ``__enter__``."""
        self._self_signed = status
        return self

    def set_project(self, project: str) -> Client:
        return self.add_header("X-Appwrite-Project", project)

    def set_key(self, key: str) -> Client:
        return self.add_header("X-Appwrite-Key", key)

    def set_jwt(self, jwt: str) -> Client:
        return self.add_header("X-Appwrite-JWT", jwt)

    def set_locale(self, locale: str) -> Client:
        return self.add_header("X-Appwrite-Locale", locale)

    def set_mode(self, mode: str) -> Client:
        return self.add_header("X-Appwrite-Mode", mode)

    def set_cookie(self, cookie: str) -> Client:
        return self.add_header("Cookie", cookie)

    def add_header(self, key: str, value: str) -> Client:
        self._headers[key.lower()] = value
        return self

    # ------------------------------------------------------------------ #
    # Requests
    # ------------------------------------------------------------------ #

    def call(
        self,
        method: str,
        path: str = "",
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded response body.

        The ``content-type`` header picks the encoding: ``GET`` requests
        send flattened parameters as the query string, ``multipart/form-data``
        sends them as flattened form fields and file parts, and anything
        else sends a JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE).
            path: API path appended to the endpoint, e.g. ``/users``.
            headers: Extra request headers for this call only.
            params: Parameter tree for the query string or body.

        Returns:
            The decoded body (see
            :func:`~appwrite_cli.client.response.decode_response`).

        Raises:
            ApiError: On any 4xx / 5xx status (or a subclass of it).
            ConnectionError_: On network / timeout errors.
        """
        method = method.upper()
        params = params or {}
        merged_headers = dict(self._headers)
        for key, value in (headers or {}).items():
            merged_headers[key.lower()] = value
        content_type = merged_headers.pop("content-type", "").lower()
        url = f"{self._endpoint}{path}"

        kwargs: dict[str, Any] = {}
        if method == "GET":
            kwargs["params"] = _query_params(params)
        elif content_type.startswith("multipart/form-data"):
            # httpx writes its own content-type with the boundary.
            kwargs["data"], kwargs["files"] = _multipart(params)
        else:
            merged_headers["content-type"] = content_type or "application/json"
            kwargs["content"] = encode_json(params, indent=None)

        if self._dry_run:
            return self._print_dry_run(method, url, merged_headers, kwargs)

        assert self._client is not None, "Client not initialised -- use as context manager"
        get_output().debug(f"{method} {url}")

        try:
            response = self._client.request(method, url, headers=merged_headers, **kwargs)
        except (httpx.TimeoutException, httpx.NetworkError) as exc:
            raise ConnectionError_(f"Connection to {self._endpoint} failed: {exc}") from exc

        self._store_cookie(response)
        data = decode_response(response)

        if response.is_error:
            raise _error_from_response(response, data)
        return data

    def upload(
        self,
        path: str,
        params: dict[str, Any],
        file_param: str = "file",
        id_param: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Any:
        """Upload the :class:`~appwrite_cli.models.InputFile` in ``params[file_param]``.

        Files up to :attr:`CHUNK_SIZE` bytes go out in a single multipart
        request. Larger files are split into chunks, each sent with a
        ``content-range`` header; after the first chunk the server-assigned
        ``$id`` is echoed in ``x-appwrite-id``. When ``params[id_param]`` is a
        concrete ID (not ``unique()``), an interrupted upload resumes from the
        server's ``chunksUploaded`` count.

        Returns:
            The decoded body of the last request.
        """
        input_file: InputFile = params[file_param]
        headers = {"content-type": "multipart/form-data"}
        size = input_file.size

        if size <= self.CHUNK_SIZE:
            return self.call("POST", path, headers, params)

        response: Any = None
        offset = 0
        upload_id = params.get(id_param) if id_param else None
        if upload_id and upload_id != "unique()":
            try:
                response = self.call("GET", f"{path}/{upload_id}", headers)
                offset = int(response.get("chunksUploaded", 0)) * self.CHUNK_SIZE
            except ApiError:
                response = None
                offset = 0

        with input_file.path.open("rb") as fh:
            while offset < size:
                end = min(offset + self.CHUNK_SIZE, size) - 1
                fh.seek(offset)
                chunk = input_file.model_copy(update={"content": fh.read(end - offset + 1)})

                headers["content-range"] = f"bytes {offset}-{end}/{size}"
                if isinstance(response, dict) and response.get("$id"):
                    headers["x-appwrite-id"] = str(response["$id"])

                response = self.call("POST", path, headers, {**params, file_param: chunk})

                if on_progress is not None:
                    on_progress({
                        "$id": response.get("$id"),
                        "progress": min(end + 1, size) / size * 100,
                        "sizeUploaded": end + 1,
                        "chunksTotal": response.get("chunksTotal"),
                        "chunksUploaded": response.get("chunksUploaded"),
                    })
                offset += self.CHUNK_SIZE

        return response

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _store_cookie(self, response: httpx.Response) -> None:
        cookies = response.headers.get_list("set-cookie")
        if not cookies or self._on_cookie is None:
            return
        self._on_cookie(cookies[0].split(";", 1)[0].strip())

    def _print_dry_run(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        kwargs: dict[str, Any],
    ) -> dict[str, Any]:
        """Print request details to stderr and return a synthetic body."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")

        for key, value in headers.items():
            output.info(f"  Header: {key}: {value}")
        for key, value in (kwargs.get("params") or {}).items():
            output.info(f"  Param: {key}={value}")
        for key, value in (kwargs.get("data") or {}).items():
            output.info(f"  Field: {key}={value}")
        for key, (filename, _content, _mime) in kwargs.get("files") or []:
            output.info(f"  File: {key}={filename}")
        if "content" in kwargs:
            output.info(f"  Body (JSON): {kwargs['content']}")

        return {"dry_run": True, "message": "Request was not sent"}


def _query_params(params: dict[str, Any]) -> dict[str, Any]:
    """Flatten *params* into query-string pairs.

    ``None`` values are dropped and mapping leaves are sent as JSON text.
    """
    query: dict[str, Any] = {}
    for key, value in flatten(params).items():
        if value is None:
            continue
        if isinstance(value, dict):
            value = compact_json(value)
        elif isinstance(value, bool):
            value = format_scalar(value)
        query[key] = value
    return query


def _multipart(
    params: dict[str, Any],
) -> tuple[dict[str, str], list[tuple[str, tuple[str, bytes, str]]]]:
    """Split flattened *params* into form fields and file parts."""
    data: dict[str, str] = {}
    files: list[tuple[str, tuple[str, bytes, str]]] = []
    for key, value in flatten(params).items():
        if value is None:
            continue
        if isinstance(value, InputFile):
            files.append((key, (value.name, value.read(), value.mime_type or "application/octet-stream")))
        elif isinstance(value, bytes):
            files.append((key, (key, value, "application/octet-stream")))
        elif isinstance(value, dict):
            data[key] = compact_json(value)
        else:
            data[key] = format_scalar(value)
    return data, files


def _error_from_response(response: httpx.Response, data: Any) -> ApiError:
    """Build the typed exception for an error *response*."""
    if isinstance(data, dict):
        message = data.get("message") or response.reason_phrase
        error_type = data.get("type")
    elif isinstance(data, str) and data:
        message = data
        error_type = None
    else:
        message = response.reason_phrase or f"HTTP {response.status_code}"
        error_type = None
    return api_error_for_status(
        response.status_code,
        str(message),
        error_type=error_type,
        response=data,
    )
