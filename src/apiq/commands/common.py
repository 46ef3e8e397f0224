"""Helpers shared by the command modules.

The factories are looked up through this module at call time
(``common.make_store()``), so tests can monkeypatch them to inject an
in-memory store or a mock transport.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from apiq.client.dispatcher import RequestDispatcher
from apiq.config import FileProfileStore, ProfileStore
from apiq.exceptions import ApiqError, ProfileNotFoundError
from apiq.output import error, suggest


def make_store() -> ProfileStore:
    """Return the store backing the user's config file."""
    return FileProfileStore()


def make_dispatcher() -> RequestDispatcher:
    """Return a dispatcher that talks to the real network."""
    return RequestDispatcher()


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Turn an :class:`~apiq.exceptions.ApiqError` into an error message and exit code."""
    try:
        yield
    except ApiqError as exc:
        error(str(exc))
        if isinstance(exc, ProfileNotFoundError):
            suggest("Run 'apiq config show' to list profiles.")
        raise typer.Exit(code=exc.exit_code) from None
