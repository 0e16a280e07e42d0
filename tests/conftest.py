"""Shared test fixtures for appwrite_cli.

Provides reusable fixtures for isolated config environments, output state,
mock HTTP transports and running CLI commands. These fixtures are
automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from rich.console import Console

from appwrite_cli.client import Client
from appwrite_cli.config import save_global_config
from appwrite_cli.models import GlobalConfig
from appwrite_cli.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, forces the XDG layout,
    clears all APPWRITE_* environment variables and changes the working
    directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("appwrite_cli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in ["APPWRITE_ENDPOINT", "APPWRITE_PROJECT_ID", "APPWRITE_KEY"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for tests that don't check diagnostics."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def console() -> Console:
    """A wide, colourless Rich console writing to memory.

    Read what was printed with ``console.file.getvalue()``.
    """
    return Console(file=io.StringIO(), width=200, no_color=True, color_system=None)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays responses.

    Args:
        responder: Called with each :class:`httpx.Request`; returns the
            response to send back.
    """

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.responder(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Callable[..., RecordingHandler]:
    """Factory for :class:`RecordingHandler` instances.

    Example::

        handler = recorder(lambda req: httpx.Response(200, json={"ok": True}))
        client = Client(transport=httpx.MockTransport(handler))
    """
    return RecordingHandler


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Command fixtures: a configured project and a mock Appwrite server
# ---------------------------------------------------------------------------

MOCK_ENDPOINT = "http://appwrite.test/v1"


class MockServer:
    """Routes requests to canned responses and records what was sent.

    Responses are registered per ``(method, path)``; unregistered routes get
    ``{"ok": true}``.
    """

    endpoint = MOCK_ENDPOINT

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200, **kwargs: Any) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if isinstance(body, (bytes, str)):
                return httpx.Response(status, content=body, **kwargs)
            return httpx.Response(status, json=body, **kwargs)

        self.routes[(method, "/v1" + path)] = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(200, json={"ok": True})
        return route(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def server(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> MockServer:
    """A project-configured CLI whose clients talk to a :class:`MockServer`."""
    save_global_config(GlobalConfig(endpoint=MOCK_ENDPOINT, project_id="demo"))
    mock = MockServer()
    transport = httpx.MockTransport(mock)

    def client_factory(*args: Any, **kwargs: Any) -> Client:
        kwargs["transport"] = transport
        return Client(*args, **kwargs)

    monkeypatch.setattr("appwrite_cli.sdk.Client", client_factory)
    return mock


@pytest.fixture
def invoke(cli_runner):
    """Run the root ``appwrite`` app with *args*; returns the click Result."""
    from appwrite_cli.app import app

    def run(*args: str, **kwargs: Any):
        return cli_runner.invoke(app, list(args), **kwargs)

    return run
