"""Exception hierarchy for curlclient.

All exceptions inherit from :class:`CurlClientError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`curlclient.exit_codes`.
The top-level error handler in :func:`curlclient.app.main` catches
``CurlClientError`` and exits with the appropriate code.

:class:`~curlclient.client.CurlClient` only ever raises the two kinds
that describe an exchange: :class:`ClientError` (the exchange never reached
the network, or the response could not be assembled) and
:class:`NetworkError` (the transfer was attempted and failed).

Subclass hierarchy::

    CurlClientError (exit 1)
    +-- ClientError             (exit 1)
    +-- NetworkError            (exit 6)
    +-- TransportError          (exit 1)
    |   +-- InitializationError
    |   +-- SessionNotOpenError
    +-- ConfigError             (exit 1)
    +-- InvalidUsageError       (exit 2)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from curlclient.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NETWORK_ERROR,
)

if TYPE_CHECKING:
    from curlclient.message import Request


class CurlClientError(Exception):
    """Base exception for all curlclient errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str = "", exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ClientError(CurlClientError):
    """Raised for local failures: the session could not be established, the
    transfer could not be configured, or the response could not be assembled."""

    exit_code = EXIT_GENERIC_FAILURE


class NetworkError(CurlClientError):
    """Raised when the transfer was attempted but did not complete.

    The originating request is kept so callers can correlate, log, or retry.

    Args:
        request: The request whose transfer failed.
        message: Diagnostic string reported by the transport engine.
    """

    exit_code = EXIT_NETWORK_ERROR

    def __init__(self, request: Request, message: str = "", exit_code: int | None = None):
        super().__init__(message, exit_code)
        self.request = request


class TransportError(CurlClientError):
    """Raised by :class:`~curlclient.transport.TransportSession` on lifecycle misuse."""


class InitializationError(TransportError):
    """Raised when a session cannot be opened (binding missing, or a handle is already owned)."""


class SessionNotOpenError(TransportError):
    """Raised by operations that require an already-open session."""


class ConfigError(CurlClientError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(CurlClientError):
    """Raised for invalid CLI arguments (malformed header, bad method)."""

    exit_code = EXIT_INVALID_USAGE
