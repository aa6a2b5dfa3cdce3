"""Exception hierarchy for jsonreq.

All exceptions inherit from :class:`JsonreqError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`jsonreq.exit_codes`.

The three failure kinds raised by the request pipeline
(:class:`NetworkFailure`, :class:`ParseFailure`, :class:`IOFailure`) never
escape :func:`~jsonreq.engine.fetch` or :func:`~jsonreq.engine.submit`:
they are caught at the dispatch boundary and turned into a
:class:`~jsonreq.models.Failure`.  :meth:`~jsonreq.models.Failure.raise_error`
re-creates them for callers who prefer exceptions.

Subclass hierarchy::

    JsonreqError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- NetworkFailure      (exit 6)
    +-- ParseFailure        (exit 7)
    +-- IOFailure           (exit 8)
"""

from jsonreq.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_IO_FAILURE,
    EXIT_NETWORK_FAILURE,
    EXIT_PARSE_FAILURE,
)


class JsonreqError(Exception):
    """Base exception for all jsonreq errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(JsonreqError):
    """Raised for invalid arguments (bad header syntax, conflicting body options)."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(JsonreqError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE


class NetworkFailure(JsonreqError):
    """Raised on transport-level failures (DNS, connect, TLS, reset, timeout)."""

    exit_code = EXIT_NETWORK_FAILURE


class ParseFailure(JsonreqError):
    """Raised when a payload is not a well-formed UTF-8 JSON document."""

    exit_code = EXIT_PARSE_FAILURE


class IOFailure(JsonreqError):
    """Raised when a local file cannot be read, written, or its directory created."""

    exit_code = EXIT_IO_FAILURE
