"""Request body resolution.

A *body spec* is the raw ``--data`` value. It is either a literal string,
sent as-is, or ``@path``, in which case the file's bytes are sent. The body
is never validated: malformed JSON goes to the server unchanged.

The ``gql`` command builds its body spec with :func:`build_graphql_payload`
and then goes through the same path as any other request.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from apiq.exceptions import FileAccessError

FILE_PREFIX = "@"


def resolve_body(spec: Optional[str]) -> Optional[bytes]:
    """Turn a body spec into the bytes to send.

    Args:
        spec: ``None`` for no body, ``@path`` to read a file, or a literal.

    Returns:
        The body bytes, or ``None`` when *spec* is ``None``.

    Raises:
        FileAccessError: If an ``@path`` file cannot be read.
    """
    if spec is None:
        return None
    if spec.startswith(FILE_PREFIX):
        return _read_bytes(Path(spec[len(FILE_PREFIX):]), "body file")
    return spec.encode("utf-8")


def build_graphql_payload(query_file: str | Path) -> str:
    """Read a GraphQL query file and wrap it as ``{"query": ...}`` JSON.

    The file contents are used verbatim (including any trailing newline).
    The JSON is compact, e.g. ``{"query":"{ viewer { id } }"}``.

    Raises:
        FileAccessError: If the query file cannot be read or is not UTF-8.
    """
    path = Path(query_file)
    raw = _read_bytes(path, "query file")
    try:
        query = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FileAccessError(f"Query file {path} is not valid UTF-8: {exc}") from exc
    return json.dumps({"query": query}, separators=(",", ":"), ensure_ascii=False)


def _read_bytes(path: Path, what: str) -> bytes:
    try:
        return path.expanduser().read_bytes()
    except OSError as exc:
        raise FileAccessError(f"Cannot read {what} {path}: {exc.strerror or exc}") from exc
