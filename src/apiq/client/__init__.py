"""HTTP client module for apiq.

Sends one resolved request with :mod:`httpx` and renders the reply.

Classes and functions:
    :class:`RequestDispatcher` -- blocking, single-attempt dispatcher backed
        by :class:`httpx.Client`.
    :func:`render_response` -- prints a response according to the
        ``--only-status`` / ``--show-headers`` / ``--out`` flags.

Example::

    from apiq.client import RequestDispatcher, render_response

    response = RequestDispatcher().send(request)
    render_response(response, show_headers=True)
"""

from apiq.client.dispatcher import RequestDispatcher
from apiq.client.response import render_response

__all__ = ["RequestDispatcher", "render_response"]
