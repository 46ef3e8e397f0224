"""Parsers for the small ``name: value`` and ``key=value`` strings on the command line.

Both parsers split on the *first* separator only, so values may contain
further colons or equals signs (``Authorization: Basic a:b``,
``base_url=https://x/?a=b``). A string without the separator is a usage
error rather than something to drop silently.
"""

from __future__ import annotations

from apiq.exceptions import InvalidUsageError
from apiq.models import Header


def parse_header(raw: str) -> Header:
    """Parse a ``--header`` value of the form ``Name: value``.

    Name and value are stripped of surrounding whitespace. An empty value is
    allowed; an empty name is not.

    Args:
        raw: The string as given on the command line.

    Returns:
        A ``(name, value)`` tuple.

    Raises:
        InvalidUsageError: If *raw* has no ``:`` or the name is empty.

    Example::

        >>> parse_header("X-Trace-Id:  abc ")
        ('X-Trace-Id', 'abc')
    """
    name, sep, value = raw.partition(":")
    if not sep:
        raise InvalidUsageError(f"Invalid header '{raw}': expected 'Name: value'")
    name = name.strip()
    if not name:
        raise InvalidUsageError(f"Invalid header '{raw}': header name is empty")
    return name, value.strip()


def parse_assignment(raw: str) -> tuple[str, str]:
    """Parse a ``key=value`` pair as used by ``config set``.

    The key and value are kept verbatim (no stripping) since profile fields
    are stored exactly as given.

    Raises:
        InvalidUsageError: If *raw* has no ``=`` or the key is empty.
    """
    key, sep, value = raw.partition("=")
    if not sep:
        raise InvalidUsageError(f"Invalid pair '{raw}': expected key=value")
    if not key:
        raise InvalidUsageError(f"Invalid pair '{raw}': key is empty")
    return key, value
