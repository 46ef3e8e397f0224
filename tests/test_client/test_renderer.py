"""Tests for response rendering and body classification."""

from __future__ import annotations

from pathlib import Path

import pytest

from apiq.client.response import (
    RawBody,
    StructuredBody,
    classify_body,
    format_status_line,
    render_response,
)
from apiq.exceptions import FileAccessError
from apiq.models import ResolvedResponse
from apiq.output import OutputManager


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _response(
    status_code: int = 200,
    body: bytes = b'{"ok":true}',
    headers: tuple[tuple[str, str], ...] = (("Content-Type", "application/json"),),
    status_message: str = "OK",
) -> ResolvedResponse:
    return ResolvedResponse(
        status_code=status_code,
        status_message=status_message,
        headers=headers,
        body=body,
    )


# ---------------------------------------------------------------------------
# classify_body
# ---------------------------------------------------------------------------


class TestClassifyBody:
    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            (b'{"a":1}', {"a": 1}),
            (b"[1,2]", [1, 2]),
            (b'"text"', "text"),
            (b"42", 42),
            (b"null", None),
            (b'  {"a": 1}\n', {"a": 1}),
        ],
    )
    def test_structured(self, body: bytes, expected: object) -> None:
        assert classify_body(body) == StructuredBody(expected)

    @pytest.mark.parametrize(
        "body",
        [b"not json", b"", b"<html></html>", b"\xff\xfe\x00garbage", b'{"a":'],
    )
    def test_raw(self, body: bytes) -> None:
        assert classify_body(body) == RawBody(body)

    def test_deeply_nested_is_raw(self) -> None:
        body = b"[" * 100_000 + b"]" * 100_000
        assert classify_body(body) == RawBody(body)


# ---------------------------------------------------------------------------
# format_status_line
# ---------------------------------------------------------------------------


class TestStatusLine:
    def test_with_reason(self) -> None:
        assert format_status_line(_response()) == "HTTP/1.1 200 OK"

    def test_without_reason(self) -> None:
        assert format_status_line(_response(status_code=599, status_message="")) == "HTTP/1.1 599"

    def test_http2(self) -> None:
        response = ResolvedResponse(status_code=204, status_message="No Content", protocol_version="HTTP/2")
        assert format_status_line(response) == "HTTP/2 204 No Content"


# ---------------------------------------------------------------------------
# render_response
# ---------------------------------------------------------------------------


class TestRenderResponse:
    def test_pretty_json(self, plain_output: OutputManager, capfd) -> None:
        render_response(_response())
        captured = capfd.readouterr()
        assert captured.out == '{\n  "ok": true\n}\n'
        assert captured.err == ""

    def test_raw_body(self, plain_output: OutputManager, capfd) -> None:
        render_response(_response(body=b"not json", headers=()))
        assert capfd.readouterr().out == "not json"

    def test_empty_body_prints_nothing(self, plain_output: OutputManager, capfd) -> None:
        render_response(_response(status_code=204, body=b"", status_message="No Content"))
        assert capfd.readouterr().out == ""

    def test_error_status_body_is_still_rendered(self, plain_output: OutputManager, capfd) -> None:
        render_response(_response(status_code=500, body=b'{"error":"boom"}'))
        assert '"error": "boom"' in capfd.readouterr().out

    def test_only_status(self, plain_output: OutputManager, capfd) -> None:
        render_response(_response(status_code=404, body=b'{"missing":true}'), only_status=True)
        assert capfd.readouterr().out == "404\n"

    def test_only_status_wins_over_other_flags(
        self, plain_output: OutputManager, capfd, tmp_path: Path
    ) -> None:
        target = tmp_path / "out.json"
        render_response(
            _response(status_code=201),
            only_status=True,
            show_headers=True,
            out_file=str(target),
        )
        assert capfd.readouterr().out == "201\n"
        assert not target.exists()

    def test_show_headers(self, plain_output: OutputManager, capfd) -> None:
        response = _response(
            headers=(("Content-Type", "application/json"), ("X-Trace", "a"), ("X-Trace", "b"))
        )
        render_response(response, show_headers=True)
        assert capfd.readouterr().out == (
            "HTTP/1.1 200 OK\n"
            "Content-Type: application/json\n"
            "X-Trace: a\n"
            "X-Trace: b\n"
            "\n"
            '{\n  "ok": true\n}\n'
        )

    def test_out_file(self, plain_output: OutputManager, capfd, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        render_response(_response(body=b'{"ok":true}'), out_file=str(target))

        assert target.read_bytes() == b'{"ok":true}'
        captured = capfd.readouterr()
        assert captured.out == ""
        assert f"Saved response body to {target}" in captured.err

    def test_out_file_overwrites(self, plain_output: OutputManager, tmp_path: Path) -> None:
        target = tmp_path / "out.bin"
        target.write_bytes(b"old old old")
        render_response(_response(body=b"new"), out_file=str(target))
        assert target.read_bytes() == b"new"

    def test_out_file_with_headers(self, plain_output: OutputManager, capfd, tmp_path: Path) -> None:
        target = tmp_path / "out.json"
        render_response(_response(headers=()), show_headers=True, out_file=str(target))
        assert capfd.readouterr().out == "HTTP/1.1 200 OK\n\n"
        assert target.read_bytes() == b'{"ok":true}'

    def test_unwritable_out_file(self, plain_output: OutputManager, tmp_path: Path) -> None:
        target = tmp_path / "missing-dir" / "out.json"
        with pytest.raises(FileAccessError, match="Cannot write output file") as exc_info:
            render_response(_response(), out_file=str(target))
        assert exc_info.value.exit_code == 3
