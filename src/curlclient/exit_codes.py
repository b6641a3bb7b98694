"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~curlclient.exceptions.CurlClientError` subclass.
Shell scripts wrapping ``curlclient request`` can inspect the exit code to
tell a local failure from a network failure without parsing stderr.

Example::

    $ curlclient request https://unreachable.invalid/
    $ echo $?
    6   # EXIT_NETWORK_ERROR -- the transfer reached the engine and failed
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified or local error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NETWORK_ERROR = 6
"""The transfer was attempted and failed (DNS, TLS, connection reset, ...)."""
