"""Synchronous dispatch of one resolved request over :mod:`httpx`.

:class:`RequestDispatcher` turns a :class:`~apiq.models.ResolvedRequest`
into exactly one HTTP exchange:

- **One attempt** -- no retries and no redirect following; a 3xx is
  returned to the caller like any other response.
- **One timeout** -- the same value bounds connect, read, write and pool
  acquisition. With no timeout the httpx default applies.
- **Verbose trace** -- when requested, method, URL, headers (in send order)
  and body are written to stderr *before* the request goes out, so the trace
  is there even if the connection then fails.
- **Unified transport errors** -- every :class:`httpx.TransportError`
  (DNS, refused connection, TLS, timeout, protocol) becomes
  :class:`~apiq.exceptions.ConnectionError_`.

The transport is injectable so tests can pass an :class:`httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from apiq.exceptions import ConnectionError_
from apiq.models import ResolvedRequest, ResolvedResponse
from apiq.output import get_output


class RequestDispatcher:
    """Sends a :class:`~apiq.models.ResolvedRequest` and returns the reply.

    A fresh :class:`httpx.Client` is opened and closed for every call; no
    connection is reused across invocations.

    Args:
        transport: Optional httpx transport. ``None`` uses the real network.

    Example::

        response = RequestDispatcher().send(request, verbose=True)
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._transport = transport

    def send(self, request: ResolvedRequest, verbose: bool = False) -> ResolvedResponse:
        """Perform the request.

        Args:
            request: The fully resolved request.
            verbose: Write a request trace to stderr before sending.

        Returns:
            The :class:`~apiq.models.ResolvedResponse`.

        Raises:
            ConnectionError_: On any transport-level failure.
        """
        client_kwargs: dict[str, Any] = {
            "transport": self._transport,
            "follow_redirects": False,
        }
        if request.timeout is not None:
            client_kwargs["timeout"] = httpx.Timeout(request.timeout)

        with httpx.Client(**client_kwargs) as client:
            outgoing = client.build_request(
                request.method,
                request.url,
                headers=list(request.headers),
                content=request.body,
            )
            if verbose:
                self._print_trace(request, outgoing)
            try:
                response = client.send(outgoing)
            except httpx.TransportError as exc:
                raise ConnectionError_(
                    f"Request to {request.url} failed: {_describe(exc)}"
                ) from exc

        get_output().debug(
            f"{response.http_version} {response.status_code} "
            f"({len(response.content)} bytes)"
        )
        return to_resolved_response(response)

    def _print_trace(self, request: ResolvedRequest, outgoing: httpx.Request) -> None:
        """Write the request to stderr, tokens and all.

        Headers are listed as they will be sent, including the ones httpx
        adds (Host, User-Agent, Accept, ...).
        """
        output = get_output()
        output.trace(f"> {request.method} {request.url}")
        output.trace("> Headers:")
        for name, value in outgoing.headers.raw:
            output.trace(f"  {name.decode('latin-1')}: {value.decode('latin-1')}")
        if request.body is not None:
            output.trace("> Body:")
            output.trace(request.body.decode("utf-8", errors="replace"))


def to_resolved_response(response: httpx.Response) -> ResolvedResponse:
    """Copy an :class:`httpx.Response` into an immutable :class:`~apiq.models.ResolvedResponse`.

    Header names keep the case they were received with.
    """
    headers = tuple(
        (name.decode("latin-1"), value.decode("latin-1"))
        for name, value in response.headers.raw
    )
    return ResolvedResponse(
        status_code=response.status_code,
        status_message=response.reason_phrase or "",
        protocol_version=response.http_version,
        headers=headers,
        body=response.content,
    )


def _describe(exc: httpx.TransportError) -> str:
    """Short human description of a transport error."""
    if isinstance(exc, httpx.TimeoutException):
        return f"timed out ({exc})" if str(exc) else "timed out"
    return str(exc) or type(exc).__name__
