"""Merge command-line options, the selected profile and built-in defaults.

Every connection setting is resolved with the same precedence (high to low):

    1. Explicit CLI flag (``--base``, ``--token``, ``--cookie``, ...)
    2. Field of the selected profile (``base_url``, ``token``, ``cookie``,
       ``content_type``, ``timeout``)
    3. Built-in default

The selected profile is ``--profile`` if given, else the config's default
profile. A name that does not match any profile selects an empty profile;
that is not an error.

Headers are built in a fixed order and never deduplicated::

    Authorization (only if a token resolved) -> Cookie (only if given)
        -> Content-Type -> each --header in command-line order

The result is an immutable :class:`~apiq.models.ResolvedRequest` that
includes the resolved body (see :mod:`apiq.body`).
"""

from __future__ import annotations

import math
from typing import Optional

import httpx

from apiq.body import resolve_body
from apiq.exceptions import InvalidUsageError
from apiq.models import Config, Header, Profile, RequestOptions, ResolvedRequest
from apiq.output import debug, warning
from apiq.parsing import parse_header

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_METHOD = "GET"
DEFAULT_PATH = "/"

SUPPORTED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


def select_profile(options: RequestOptions, config: Config) -> Profile:
    """Return the profile named by ``--profile`` or the config default.

    Falls back to an empty :class:`~apiq.models.Profile` when no name is
    given or the name is unknown.
    """
    name = options.profile if options.profile is not None else config.default
    profile = config.get_profile(name)
    if profile is None:
        if name is not None:
            debug(f"Profile '{name}' not found, continuing without a profile")
        return Profile()
    debug(f"Using profile: {profile.name}")
    return profile


def resolve_method(raw: Optional[str]) -> str:
    """Uppercase *raw* and check it is a supported HTTP method.

    Raises:
        InvalidUsageError: For methods outside :data:`SUPPORTED_METHODS`.
    """
    if not raw:
        return DEFAULT_METHOD
    method = raw.upper()
    if method not in SUPPORTED_METHODS:
        raise InvalidUsageError(
            f"Unsupported HTTP method '{raw}'. "
            f"Expected one of: {', '.join(SUPPORTED_METHODS)}"
        )
    return method


def build_url(base_url: str, path: str) -> str:
    """Resolve *path* against *base_url* as an RFC 3986 relative reference.

    ``/x`` replaces the base's path; ``x`` resolves against the base's last
    directory, so ``https://host/v1/`` + ``users`` gives ``https://host/v1/users``.

    Raises:
        InvalidUsageError: If the result is not an absolute http(s) URL.
    """
    try:
        url = httpx.URL(base_url).join(path or DEFAULT_PATH)
    except httpx.InvalidURL as exc:
        raise InvalidUsageError(f"Invalid URL '{base_url}' + '{path}': {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidUsageError(
            f"Invalid base URL '{base_url}': expected an absolute http(s) URL"
        )
    return str(url)


def build_headers(
    token: Optional[str],
    cookie: Optional[str],
    content_type: str,
    raw_headers: list[str],
) -> tuple[Header, ...]:
    """Assemble request headers in send order.

    Raises:
        InvalidUsageError: If any raw header is malformed, or a name or value
            is not ASCII.
    """
    headers: list[Header] = []
    if token:
        headers.append(("Authorization", f"Bearer {token}"))
    if cookie:
        headers.append(("Cookie", cookie))
    headers.append(("Content-Type", content_type))
    headers.extend(parse_header(raw) for raw in raw_headers)
    for name, value in headers:
        _check_ascii(name, value)
    return tuple(headers)


def _check_ascii(name: str, value: str) -> None:
    """HTTP/1.1 header fields go on the wire as ASCII."""
    try:
        name.encode("ascii")
        value.encode("ascii")
    except UnicodeEncodeError as exc:
        raise InvalidUsageError(
            f"Header '{name}' contains a non-ASCII character: {exc.object[exc.start:exc.end]!r}"
        ) from exc


def _is_valid_timeout(value: float) -> bool:
    return math.isfinite(value) and value > 0


def resolve_timeout(options: RequestOptions, profile: Profile) -> Optional[float]:
    """Return the flag timeout, else the profile's ``timeout`` field, else ``None``.

    A timeout must be a finite number of seconds greater than zero.

    Raises:
        InvalidUsageError: If ``--timeout`` is not a valid timeout. An invalid
            profile value is ignored with a warning instead.
    """
    if options.timeout is not None:
        if not _is_valid_timeout(options.timeout):
            raise InvalidUsageError(
                f"Invalid timeout '{options.timeout}': expected a positive number of seconds"
            )
        return options.timeout
    raw = profile.get("timeout")
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        warning(f"Ignoring non-numeric timeout '{raw}' in profile '{profile.name}'")
        return None
    if not _is_valid_timeout(value):
        warning(f"Ignoring invalid timeout '{raw}' in profile '{profile.name}'")
        return None
    return value


def _first_set(*values: Optional[str]) -> Optional[str]:
    """Return the first value that is not ``None``. An explicit ``""`` counts as set."""
    for value in values:
        if value is not None:
            return value
    return None


def resolve_request(options: RequestOptions, config: Config) -> ResolvedRequest:
    """Build the single :class:`~apiq.models.ResolvedRequest` for this invocation.

    Args:
        options: Parsed command-line options.
        config: The loaded config document.

    Returns:
        The fully materialised request.

    Raises:
        InvalidUsageError: Unsupported method, malformed or non-ASCII header,
            bad URL or invalid ``--timeout``.
        FileAccessError: If an ``@file`` body cannot be read.
    """
    profile = select_profile(options, config)

    method = resolve_method(options.method)
    base_url = _first_set(options.base_url, profile.base_url, DEFAULT_BASE_URL)
    token = _first_set(options.token, profile.token)
    cookie = _first_set(options.cookie, profile.get("cookie"))
    content_type = _first_set(
        options.content_type, profile.get("content_type"), DEFAULT_CONTENT_TYPE
    )

    url = build_url(base_url, options.path)
    headers = build_headers(token, cookie, content_type, options.headers)
    body = resolve_body(options.data)

    return ResolvedRequest(
        method=method,
        url=url,
        headers=headers,
        body=body,
        timeout=resolve_timeout(options, profile),
    )
