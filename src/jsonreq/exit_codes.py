"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific failure category and is referenced by the
corresponding :class:`~jsonreq.exceptions.JsonreqError` subclass.
Shell scripts wrapping ``jsonreq`` can inspect the exit code to tell a
network problem from a malformed response without parsing stderr.

Example::

    $ jsonreq get https://unreachable.invalid/items
    $ echo $?
    6   # EXIT_NETWORK_FAILURE -- the request never got a response
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NETWORK_FAILURE = 6
"""A transport-level error occurred (DNS, connect, TLS, reset, timeout)."""

EXIT_PARSE_FAILURE = 7
"""The response (or local file) was not a valid JSON document."""

EXIT_IO_FAILURE = 8
"""A local file could not be read or written."""

EXIT_INTERRUPTED = 130
"""The user pressed Ctrl-C (128 + SIGINT)."""
