"""Config commands -- manage saved profiles.

Provides the ``apiq config`` sub-command group. Profiles are free-form
``key=value`` bags persisted in the YAML config file (see
:mod:`apiq.config`); ``base_url`` and ``token`` are the usual keys.

Typical workflow::

    apiq config set dev base_url=http://localhost:8080 token=devtoken
    apiq config set prod base_url=https://api.example.com
    apiq config use dev
    apiq config show
"""

from __future__ import annotations

from typing import Optional

import typer

from apiq.commands import common
from apiq.output import info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("set")
def config_set(
    name: str = typer.Argument(help="Profile name (created if missing)."),
    pairs: Optional[list[str]] = typer.Argument(
        None, help="key=value pairs, applied in order."
    ),
) -> None:
    """Create or update a profile.

    Later pairs win when a key is repeated. A pair without '=' is rejected
    and nothing is saved.

    Example::

        apiq config set dev base_url=https://api.example.com token=abc123
    """
    from apiq.config import set_profile_fields

    with common.exit_on_error():
        set_profile_fields(common.make_store(), name, pairs or [])
    success(f"Profile '{name}' updated.")


@config_app.command("use")
def config_use(
    name: str = typer.Argument(help="Profile to make the default."),
) -> None:
    """Set the default profile.

    Fails, leaving the config untouched, when the profile does not exist.
    """
    from apiq.config import use_profile

    with common.exit_on_error():
        use_profile(common.make_store(), name)
    success(f"Default profile set to '{name}'.")


@config_app.command("show")
def config_show() -> None:
    """Show the whole configuration.

    Tokens are printed in plain text.
    """
    from apiq.config import dump_config

    with common.exit_on_error():
        store = common.make_store()
        config = store.load()
    info(f"Config file: {store.location}")
    print_data(dump_config(config).rstrip("\n"))


@config_app.command("clear")
def config_clear() -> None:
    """Delete the configuration file. Succeeds when there is none."""
    with common.exit_on_error():
        common.make_store().clear()
    success("Configuration cleared.")
