"""Typer application and CLI entry point for apiq.

This module wires together the top-level Typer application and registers
the built-in commands (``request``, ``gql``, ``config``).

The command line is ``apiq METHOD PATH [options]`` for REST requests, so
:func:`route_args` inserts the ``request`` command name whenever the first
argument after the root flags is not a known sub-command.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers, routes the arguments and
invokes the Typer app. Unhandled exceptions are written to a crash log
under the data directory.

See Also:
    :mod:`apiq.commands.request`: The request pipeline.
    :mod:`apiq.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Sequence

import typer

from apiq import __version__
from apiq.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED
from apiq.commands.config import config_app
from apiq.commands.gql import gql_command
from apiq.commands.request import request_command


app = typer.Typer(
    name="apiq",
    help="Send one REST or GraphQL request using saved profiles.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("request", help="Send a REST request (the default command).")(request_command)
app.command("gql", help="Send a GraphQL query file as POST /graphql.")(gql_command)
app.add_typer(config_app, name="config", help="Manage saved profiles.")

SUBCOMMANDS = frozenset({"request", "gql", "config"})
"""Names that :func:`route_args` passes through untouched."""

ROOT_FLAGS = frozenset({"-h", "--help", "--version", "--no-color"})
"""Flags that belong to the root callback and may precede the command."""


def route_args(args: Sequence[str]) -> list[str]:
    """Insert ``request`` so ``apiq GET /x`` reaches the request command.

    Leading root flags are left in front. When nothing follows them, or the
    next argument is a sub-command, *args* is returned unchanged.

    Example::

        >>> route_args(["GET", "/users"])
        ['request', 'GET', '/users']
        >>> route_args(["--no-color", "config", "show"])
        ['--no-color', 'config', 'show']
    """
    args = list(args)
    i = 0
    while i < len(args) and args[i] in ROOT_FLAGS:
        i += 1
    if i == len(args) or args[i] in SUBCOMMANDS:
        return args
    return [*args[:i], "request", *args[i:]]


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apiq {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~apiq.output.OutputManager`. The request
    command turns on verbose output itself when ``--verbose`` is given.
    """
    from apiq.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color))


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from apiq.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apiq`` console script.

    Commands report :class:`~apiq.exceptions.ApiqError` themselves; this
    is the last line of defence for anything that escapes them.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app(args=route_args(sys.argv[1:]), prog_name="apiq")
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from apiq.exceptions import ApiqError
        from apiq.output import error

        if isinstance(exc, ApiqError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
