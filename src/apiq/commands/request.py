"""Request command -- send one REST request.

Implements ``apiq [METHOD] [PATH] [options]`` (registered as the
``request`` command; :func:`apiq.app.route_args` inserts the command name
when the first argument is not a sub-command). :func:`run_request` is the
whole pipeline and is shared with the ``gql`` command.
"""

from __future__ import annotations

from typing import Optional

import typer

from apiq.client.dispatcher import RequestDispatcher
from apiq.client.response import render_response
from apiq.commands import common
from apiq.config import ProfileStore
from apiq.models import RequestOptions, ResolvedResponse
from apiq.output import debug, get_output
from apiq.resolver import resolve_request


def run_request(
    options: RequestOptions,
    store: ProfileStore,
    dispatcher: RequestDispatcher,
) -> ResolvedResponse:
    """Resolve, send and render one request.

    Args:
        options: Parsed command-line options.
        store: Source of the saved profiles.
        dispatcher: Sends the resolved request.

    Returns:
        The response that was rendered.

    Raises:
        ApiqError: Any resolution, I/O or transport failure. Nothing is
            rendered in that case.
    """
    config = store.load()
    debug(f"Loaded config from {store.location}")

    request = resolve_request(options, config)
    response = dispatcher.send(request, verbose=options.verbose)
    render_response(
        response,
        only_status=options.only_status,
        show_headers=options.show_headers,
        out_file=options.out_file,
    )
    return response


def request_command(
    method: str = typer.Argument(
        "GET", help="HTTP method: GET, POST, PUT, PATCH, DELETE, HEAD or OPTIONS."
    ),
    path: str = typer.Argument(
        "/", help="Path resolved against the base URL ('/x' replaces its path)."
    ),
    data: Optional[str] = typer.Option(
        None, "--data", "-d", help="Request body, or @FILE to send a file's contents."
    ),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header 'Name: value' (repeatable)."
    ),
    cookie: Optional[str] = typer.Option(
        None, "--cookie", help="Cookie header value, e.g. 'a=b; c=d'."
    ),
    content_type: Optional[str] = typer.Option(
        None, "--content-type", help="Content-Type (default: application/json)."
    ),
    show_headers: bool = typer.Option(
        False, "--show-headers", help="Print the status line and response headers."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile to use instead of the default."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="Bearer token (overrides the profile's token)."
    ),
    base: Optional[str] = typer.Option(
        None, "--base", help="Base URL (overrides the profile's base_url)."
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Timeout in seconds for connect, read and write; must be greater than 0.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Print the request (and debug output) to stderr."
    ),
    only_status: bool = typer.Option(
        False, "--only-status", help="Print only the HTTP status code."
    ),
    out: Optional[str] = typer.Option(
        None, "--out", "-o", help="Write the response body to FILE."
    ),
) -> None:
    """Send a REST request.

    Flags win over the selected profile, which wins over built-in defaults
    (base URL http://localhost:3000, Content-Type application/json).

    Example::

        apiq GET /users
        apiq POST /users --data '{"name": "ada"}' --show-headers
        apiq PUT /users/1 --data @user.json --profile staging
        apiq GET /health --only-status
    """
    get_output().is_verbose = verbose
    options = RequestOptions(
        method=method,
        path=path,
        base_url=base,
        token=token,
        profile=profile,
        headers=header or [],
        cookie=cookie,
        content_type=content_type,
        data=data,
        timeout=timeout,
        show_headers=show_headers,
        verbose=verbose,
        only_status=only_status,
        out_file=out,
    )
    with common.exit_on_error():
        run_request(options, common.make_store(), common.make_dispatcher())
