"""Tests for the response decoding bridge."""

from __future__ import annotations

import json

import httpx
import pytest

from appwrite_cli.client.response import decode_response, format_api_response
from appwrite_cli.output import OutputFormat, OutputManager, set_output
from appwrite_cli.values import BigInteger


class TestDecodeResponse:
    def test_json(self) -> None:
        response = httpx.Response(200, json={"a": [1, None]})
        assert decode_response(response) == {"a": [1, None]}

    def test_json_with_charset(self) -> None:
        response = httpx.Response(
            200,
            headers={"content-type": "application/json; charset=utf-8"},
            content=b'{"n": 18446744073709551615}',
        )
        data = decode_response(response)
        assert isinstance(data["n"], BigInteger)
        assert data["n"] == 18446744073709551615

    def test_invalid_json_falls_back_to_text(self) -> None:
        response = httpx.Response(
            200, headers={"content-type": "application/json"}, content=b"<html>oops"
        )
        assert decode_response(response) == "<html>oops"

    def test_text(self) -> None:
        assert decode_response(httpx.Response(200, text="pong")) == "pong"

    def test_binary(self) -> None:
        response = httpx.Response(
            200, headers={"content-type": "image/png"}, content=b"\x89PNG"
        )
        assert decode_response(response) == b"\x89PNG"

    def test_empty_body(self) -> None:
        assert decode_response(httpx.Response(204)) is None


class TestFormatApiResponse:
    def test_none_prints_nothing(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(None)
        assert capsys.readouterr().out == ""

    @pytest.mark.parametrize("data", [{"a": 1}, [1, 2], "text"])
    def test_json_mode(self, capsys, data) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))
        format_api_response(data)
        assert json.loads(capsys.readouterr().out) == data
