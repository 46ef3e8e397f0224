"""Exception hierarchy for apiq.

All exceptions inherit from :class:`ApiqError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`apiq.exit_codes`.
Commands catch ``ApiqError``, print the message to stderr and exit with
the error's code, while unexpected exceptions reaching :func:`apiq.app.main`
produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    ApiqError (exit 1)
    +-- InvalidUsageError      (exit 2)
    +-- ProfileNotFoundError   (exit 1)
    +-- FileAccessError        (exit 3)
    |   +-- ConfigError        (exit 3)
    +-- ConnectionError_       (exit 4)

A response body that is not JSON is not an error and has no exception
class: it is rendered raw.
"""

from apiq.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
)


class ApiqError(Exception):
    """Base exception for all apiq errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`apiq.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApiqError):
    """Raised for invalid CLI arguments: unknown methods, malformed headers or ``key=value`` pairs."""

    exit_code = EXIT_INVALID_USAGE


class ProfileNotFoundError(ApiqError):
    """Raised when ``config use`` names a profile that does not exist."""

    exit_code = EXIT_GENERIC_FAILURE


class FileAccessError(ApiqError):
    """Raised when a body file, query file or output file cannot be read or written."""

    exit_code = EXIT_IO_ERROR


class ConfigError(FileAccessError):
    """Raised when the config document is unreadable, corrupt, or cannot be written."""


class ConnectionError_(ApiqError):
    """Raised on transport failures (timeout, DNS resolution, TLS, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
