"""Canonical Pydantic models shared across all apiq modules.

The models fall into two groups:

**Persisted configuration** -- serialised as YAML in the user's config
directory: :class:`Config`. :class:`Profile` is a read-only view over one
entry of ``Config.profiles``.

**Per-invocation models** -- built fresh for every request and discarded
when the process exits: :class:`RequestOptions` (parsed flags),
:class:`ResolvedRequest` (what goes on the wire) and
:class:`ResolvedResponse` (what came back).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


Header = tuple[str, str]
"""A single ``(name, value)`` header pair."""


# --- Persisted configuration ---


class Config(BaseModel):
    """The whole persisted config document.

    ``default`` names the profile used when ``--profile`` is not given. It is
    only ever set to a key that exists in ``profiles`` at the time of the
    ``config use`` call; deleting profiles is not supported, so the pointer
    stays valid.

    Example::

        Config(
            default="dev",
            profiles={"dev": {"base_url": "https://api.example.com", "token": "abc"}},
        )
    """

    # Hand-edited YAML turns ``timeout: 30`` into an int.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    default: Optional[str] = None
    profiles: dict[str, dict[str, str]] = Field(default_factory=dict)

    def get_profile(self, name: Optional[str]) -> Optional[Profile]:
        """Return the named profile, or ``None`` if *name* is unset or unknown."""
        if name is None or name not in self.profiles:
            return None
        return Profile(name=name, fields=dict(self.profiles[name]))


class Profile(BaseModel):
    """A named, free-form bag of connection defaults.

    Any key is accepted and stored verbatim. ``base_url`` and ``token`` are
    the conventional ones; ``cookie``, ``content_type`` and ``timeout`` are
    honoured by the resolver as well.
    """

    name: str = ""
    fields: dict[str, str] = Field(default_factory=dict)

    @property
    def base_url(self) -> Optional[str]:
        """The profile's ``base_url`` field, if any."""
        return self.fields.get("base_url")

    @property
    def token(self) -> Optional[str]:
        """The profile's ``token`` field, if any."""
        return self.fields.get("token")

    def get(self, key: str) -> Optional[str]:
        return self.fields.get(key)


# --- Per-invocation models ---


class RequestOptions(BaseModel):
    """Everything the user asked for on one command line, before resolution.

    ``None`` means "not given on the command line" so the resolver can fall
    back to the selected profile and then to built-in defaults.
    """

    method: str = "GET"
    path: str = "/"
    base_url: Optional[str] = None
    token: Optional[str] = None
    profile: Optional[str] = None
    headers: list[str] = Field(default_factory=list)
    cookie: Optional[str] = None
    content_type: Optional[str] = None
    data: Optional[str] = Field(
        default=None, description="Body spec: a literal string or @path"
    )
    timeout: Optional[float] = Field(default=None, description="Timeout in seconds")
    # Rendering flags
    show_headers: bool = False
    verbose: bool = False
    only_status: bool = False
    out_file: Optional[str] = None


class ResolvedRequest(BaseModel):
    """A fully materialised outbound request. Immutable once built.

    ``headers`` keeps duplicates and order exactly as they will be sent.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: tuple[Header, ...] = ()
    body: Optional[bytes] = None
    timeout: Optional[float] = None


class ResolvedResponse(BaseModel):
    """The reply to a :class:`ResolvedRequest`, headers in receipt order."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    status_message: str = ""
    protocol_version: str = "HTTP/1.1"
    headers: tuple[Header, ...] = ()
    body: bytes = b""
