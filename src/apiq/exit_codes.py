"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apiq.exceptions.ApiqError` subclass. Shell scripts
can inspect the exit code to tell a bad invocation from a network failure
without parsing stderr.

Example::

    $ apiq GET /health --base http://localhost:9
    Error: Request to http://localhost:9/health failed: ...
    $ echo $?
    4   # EXIT_CONNECTION_ERROR
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (also used for unknown profiles)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_IO_ERROR = 3
"""A local file (body file, output file, config document) could not be read or written."""

EXIT_CONNECTION_ERROR = 4
"""A transport-level error occurred (timeout, DNS failure, TLS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The process was interrupted with Ctrl-C."""
