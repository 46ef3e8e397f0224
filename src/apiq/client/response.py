"""Response rendering -- maps a :class:`~apiq.models.ResolvedResponse` to the output system.

Rendering flags are evaluated in a fixed priority:

1. ``only_status`` -- print the numeric status code and nothing else.
2. ``show_headers`` -- print the status line and every header in receipt
   order, then a blank line, then continue with the body.
3. Body -- ``out_file`` writes the raw bytes to disk; otherwise the body is
   classified by :func:`classify_body` and printed as pretty JSON or as the
   raw bytes.

A body that is not JSON is not an error: :func:`classify_body` always
returns one of its two variants and never raises.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from apiq.exceptions import FileAccessError
from apiq.models import ResolvedResponse
from apiq.output import get_output


@dataclass(frozen=True)
class StructuredBody:
    """A body that parsed as JSON.

    Attributes:
        data: The decoded JSON value (dict, list, str, number, bool or None).
    """

    data: Any


@dataclass(frozen=True)
class RawBody:
    """A body that is not JSON (including an empty body), kept as bytes."""

    content: bytes


BodyOutcome = Union[StructuredBody, RawBody]


def classify_body(body: bytes) -> BodyOutcome:
    """Decide whether *body* is JSON.

    :func:`json.loads` detects UTF-8/16/32 from the bytes. Decoding and
    syntax failures both derive from :class:`ValueError`; pathologically
    nested documents raise :class:`RecursionError`.
    """
    try:
        return StructuredBody(json.loads(body))
    except (ValueError, RecursionError):
        return RawBody(body)


def format_status_line(response: ResolvedResponse) -> str:
    """``HTTP/1.1 200 OK`` style status line."""
    return f"{response.protocol_version} {response.status_code} {response.status_message}".rstrip()


def render_response(
    response: ResolvedResponse,
    only_status: bool = False,
    show_headers: bool = False,
    out_file: Optional[str] = None,
) -> None:
    """Print *response* according to the rendering flags.

    Args:
        response: The response to render.
        only_status: Print only the status code; all other flags are ignored.
        show_headers: Print the status line and headers before the body.
        out_file: Write the raw body to this path instead of stdout.

    Raises:
        FileAccessError: If *out_file* cannot be written.
    """
    output = get_output()

    if only_status:
        output.print_data(str(response.status_code))
        return

    if show_headers:
        output.print_data(format_status_line(response))
        for name, value in response.headers:
            output.print_data(f"{name}: {value}")
        output.print_data("")

    if out_file:
        write_body(response.body, Path(out_file))
        output.success(f"Saved response body to {out_file}")
        return

    outcome = classify_body(response.body)
    if isinstance(outcome, StructuredBody):
        output.print_json(outcome.data)
    else:
        output.print_bytes(outcome.content)


def write_body(body: bytes, path: Path) -> None:
    """Create or overwrite *path* with *body*.

    Raises:
        FileAccessError: If the file cannot be written.
    """
    try:
        path.expanduser().write_bytes(body)
    except OSError as exc:
        raise FileAccessError(f"Cannot write output file {path}: {exc.strerror or exc}") from exc
