"""Synchronous HTTP client backed by a libcurl transfer session.

This module provides :class:`CurlClient`, which turns one
:class:`~curlclient.message.Request` into one
:class:`~curlclient.message.Response` per call using a
:class:`~curlclient.transport.TransportSession`:

1. **Session guard** -- opens the session if needed; an unusable binding
   becomes a :class:`~curlclient.exceptions.ClientError`.
2. **Reset** -- clears engine state so nothing leaks between calls.
3. **Option mapping** -- the request is translated by
   :func:`~curlclient.client.descriptor.build_transfer_descriptor`.
4. **Header capture** -- :class:`HeaderCapture` receives each header line
   during the transfer, before the body is known.
5. **Error mapping** -- a failed transfer raises
   :class:`~curlclient.exceptions.NetworkError`; a failure while assembling
   the response raises :class:`~curlclient.exceptions.ClientError`.

The call blocks until the transfer completes.  A client and its session
must not be shared between threads.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from curlclient.client.descriptor import build_transfer_descriptor
from curlclient.exceptions import ClientError, InitializationError, NetworkError
from curlclient.message import Request, Response, ResponseFactory
from curlclient.models import ClientConfig
from curlclient.output import get_output
from curlclient.transport import TransportSession


class HeaderCapture:
    """Header callback installed as ``HEADERFUNCTION`` for one transfer.

    Each call receives one raw header line.  Lines of the form
    ``Name: value`` are added to :attr:`response`; the status line, the
    blank terminator and lines with an empty name or value are ignored.
    The line's byte length is always returned so the engine keeps reading.

    With ``FOLLOWLOCATION`` on, the engine reports the headers of every hop,
    so a redirected response carries the earlier hops' headers (for example
    the 302's ``Location``) ahead of the final ones.

    Args:
        response: The response to accumulate headers into.
    """

    def __init__(self, response: Response) -> None:
        self.response = response

    def __call__(self, line: bytes) -> int:
        length = len(line)
        text = line.decode("iso-8859-1") if isinstance(line, bytes) else line
        name, separator, value = text.partition(":")
        name = name.strip()
        value = value.strip()
        if not separator or not name or not value:
            return length

        self.response = self.response.with_added_header(name, value)
        return length


class CurlClient:
    """HTTP client that executes requests through a :class:`TransportSession`.

    Args:
        response_factory: Creates the empty response each call fills in.
            Defaults to :class:`~curlclient.message.ResponseFactory`.
        handle: A :class:`TransportSession`, a native ``pycurl.Curl`` handle
            to wrap, or ``None`` for a new session.
        config: Transfer settings; defaults to
            :class:`~curlclient.models.ClientConfig`.

    Example::

        with CurlClient() as client:
            response = client.get("https://httpbin.org/get")
            print(response.status_code, response.get_header_line("Content-Type"))
    """

    def __init__(
        self,
        response_factory: Optional[ResponseFactory] = None,
        handle: Union[TransportSession, Any, None] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._response_factory = response_factory or ResponseFactory()
        if isinstance(handle, TransportSession):
            self._session = handle
        else:
            self._session = TransportSession(handle)
        self._config = config or ClientConfig()

    @property
    def session(self) -> TransportSession:
        return self._session

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> CurlClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------ #
    # Sending
    # ------------------------------------------------------------------ #

    def send_request(self, request: Request) -> Response:
        """Send *request* and return the completed response.

        Raises:
            ClientError: If the session cannot be initialised or configured,
                or the response cannot be assembled.
            NetworkError: If the transfer itself fails; ``exc.request`` is
                *request*.
        """
        output = get_output()
        response = self._response_factory.create_response()

        self._ensure_session_is_initialized()
        self._session.reset()

        descriptor = build_transfer_descriptor(request, self._config)
        if not self._session.set_options(descriptor.to_options()):
            raise ClientError(f"Unable to configure cURL transfer: {self._session.error()}")

        capture = HeaderCapture(response)
        if not self._session.set_option("HEADERFUNCTION", capture):
            raise ClientError(f"Unable to install header callback: {self._session.error()}")

        output.debug(f"{request.method} {request.url}")
        result = self._session.execute()
        if not result.ok:
            raise NetworkError(request, result.error)

        try:
            response = capture.response.with_status(int(self._session.get_info("RESPONSE_CODE")))
            response.body.write(result.body)
            response.body.rewind()
        except Exception as exc:
            raise ClientError(str(exc)) from exc

        output.debug(f"HTTP {response.status_code} ({len(result.body)} bytes)")
        return response

    def request(
        self,
        method: str,
        url: str,
        headers: Any = None,
        content: Union[bytes, str] = b"",
    ) -> Response:
        """Build a :class:`~curlclient.message.Request` and send it."""
        return self.send_request(Request(method, url, headers=headers, content=content))

    def get(self, url: str, **kwargs: Any) -> Response:
        return self.request("GET", url, **kwargs)

    def head(self, url: str, **kwargs: Any) -> Response:
        return self.request("HEAD", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> Response:
        return self.request("PUT", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> Response:
        return self.request("PATCH", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> Response:
        return self.request("DELETE", url, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _ensure_session_is_initialized(self) -> None:
        """Open the session if it is closed.

        Raises:
            ClientError: If the session cannot be opened.
        """
        if not self._session.is_open():
            try:
                self._session.open()
            except InitializationError as exc:
                raise ClientError(f"Unable to initialize cURL session: {exc}") from exc
