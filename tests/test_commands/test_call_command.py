"""Tests for the generic ``appwrite call`` command."""

from __future__ import annotations

import json

from appwrite_cli.exceptions import InvalidUsageError


class TestCall:
    def test_get_with_params(self, server, invoke) -> None:
        server.on("GET", "/users", {"total": 0, "users": []})
        result = invoke("call", "get", "/users", "--param", "search=ann", "-P", "queries[0]=limit(1)")
        assert result.exit_code == 0, result.output
        assert server.last.method == "GET"
        params = server.last.url.params
        assert params["search"] == "ann"
        assert params["queries[0]"] == "limit(1)"

    def test_json_data_body(self, server, invoke) -> None:
        result = invoke(
            "call", "PATCH", "users/u1/prefs",
            "--data", '{"prefs": {"theme": "dark"}, "size": 9007199254740993}',
        )
        assert result.exit_code == 0, result.output
        request = server.last
        assert request.url.path == "/v1/users/u1/prefs"
        assert b'"size": 9007199254740993' in request.content
        assert json.loads(request.content)["prefs"] == {"theme": "dark"}

    def test_param_overrides_data(self, server, invoke) -> None:
        result = invoke("call", "POST", "/x", "--data", '{"a": "1", "b": "2"}', "--param", "a=3")
        assert result.exit_code == 0, result.output
        assert json.loads(server.last.content) == {"a": "3", "b": "2"}

    def test_console_flag_omits_project(self, server, invoke) -> None:
        result = invoke("call", "GET", "/health/version", "--console")
        assert result.exit_code == 0, result.output
        assert "x-appwrite-project" not in server.last.headers

    def test_invalid_method(self, server, invoke) -> None:
        result = invoke("call", "FETCH", "/users")
        assert isinstance(result.exception, InvalidUsageError)
        assert server.requests == []

    def test_invalid_pair(self, server, invoke) -> None:
        result = invoke("call", "GET", "/users", "--param", "novalue")
        assert isinstance(result.exception, InvalidUsageError)

    def test_invalid_json(self, server, invoke) -> None:
        result = invoke("call", "POST", "/users", "--data", "{nope")
        assert isinstance(result.exception, InvalidUsageError)
        assert "not valid JSON" in str(result.exception)

    def test_data_must_be_object(self, server, invoke) -> None:
        result = invoke("call", "POST", "/users", "--data", "[1, 2]")
        assert isinstance(result.exception, InvalidUsageError)

    def test_dry_run_sends_nothing(self, server, invoke) -> None:
        result = invoke("--dry-run", "call", "DELETE", "/users/u1")
        assert result.exit_code == 0, result.output
        assert server.requests == []
        assert "[dry-run] DELETE http://appwrite.test/v1/users/u1" in result.stderr
        assert "dry_run : true" in result.stdout

    def test_endpoint_and_project_overrides(self, server, invoke) -> None:
        result = invoke(
            "--endpoint", "http://other.test/v1",
            "--project-id", "override",
            "call", "GET", "/health",
        )
        assert result.exit_code == 0, result.output
        assert server.last.url.host == "other.test"
        assert server.last.headers["x-appwrite-project"] == "override"
