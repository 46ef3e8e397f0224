"""GraphQL command -- send a query file as ``POST /graphql``.

``apiq gql --file q.graphql`` is shorthand for::

    apiq POST /graphql --data '{"query":"<contents of q.graphql>"}'

``--profile`` is carried through; everything else comes from the profile
and the defaults. Variables and operation names are not supported.
"""

from __future__ import annotations

from typing import Optional

import typer

from apiq.body import build_graphql_payload
from apiq.commands import common
from apiq.commands.request import run_request
from apiq.models import RequestOptions

GRAPHQL_PATH = "/graphql"


def gql_command(
    file: str = typer.Option(
        ..., "--file", "-f", help="File containing the GraphQL query."
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile to use instead of the default."
    ),
) -> None:
    """Send a GraphQL query.

    Example::

        apiq gql --file viewer.graphql
        apiq gql --file viewer.graphql --profile github
    """
    with common.exit_on_error():
        payload = build_graphql_payload(file)
        options = RequestOptions(
            method="POST",
            path=GRAPHQL_PATH,
            data=payload,
            profile=profile,
        )
        run_request(options, common.make_store(), common.make_dispatcher())
