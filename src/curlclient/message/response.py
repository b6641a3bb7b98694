"""HTTP response value and its factory."""

from __future__ import annotations

from typing import Union

import httpx

from curlclient.message.base import HeaderInput, Message
from curlclient.message.stream import Stream


class Response(Message):
    """An HTTP response: status, reason phrase, headers and body.

    ``with_status`` and ``with_added_header`` return new instances that
    share the same body :class:`Stream`, so a body written into any of them
    is visible from all.

    Args:
        status_code: Three-digit status code.
        headers: Initial headers.
        content: Body as bytes, text or a :class:`Stream`.
        reason_phrase: Explicit reason; defaults to the standard phrase.
    """

    def __init__(
        self,
        status_code: int = 200,
        headers: HeaderInput = None,
        content: Union[Stream, bytes, str] = b"",
        reason_phrase: str = "",
    ) -> None:
        _check_status(status_code)
        super().__init__(headers, content)
        self._status_code = status_code
        self._reason_phrase = reason_phrase or httpx.codes.get_reason_phrase(status_code)

    def __repr__(self) -> str:
        return f"<Response [{self._status_code}]>"

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        return self._reason_phrase

    @property
    def content(self) -> bytes:
        """The whole body, independent of the stream cursor."""
        return self._body.getvalue()

    def with_status(self, code: int, reason_phrase: str = "") -> Response:
        """Return a copy with *code* and its reason phrase.

        Raises:
            ValueError: If *code* is not an integer in ``100..599``.
        """
        _check_status(code)
        return self._replace(
            status_code=code,
            reason_phrase=reason_phrase or httpx.codes.get_reason_phrase(code),
        )


def _check_status(code: int) -> None:
    if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code <= 599:
        raise ValueError(f"Invalid HTTP status code: {code!r}")


class ResponseFactory:
    """Creates empty :class:`Response` shells for the client to fill in."""

    def create_response(self, code: int = 200, reason_phrase: str = "") -> Response:
        return Response(code, reason_phrase=reason_phrase)
