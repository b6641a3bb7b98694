"""Immutable outbound request."""

from __future__ import annotations

from typing import Union

import httpx

from curlclient.message.base import HeaderInput, Message
from curlclient.message.stream import Stream


class Request(Message):
    """An HTTP request: method, target URL, headers and body.

    Instances are immutable; every ``with_*`` method returns a new request
    and leaves the receiver untouched.

    Args:
        method: Request method token, kept verbatim (``"GET"``, ``"PURGE"``...).
        url: Target URL as a string or :class:`httpx.URL`.
        headers: Initial headers (mapping, list of pairs or ``httpx.Headers``).
        content: Body as bytes, text or a :class:`Stream`.

    Example::

        request = Request("POST", "https://httpbin.org/post", content=b"ping")
        request = request.with_header("Accept", "application/json")
    """

    def __init__(
        self,
        method: str,
        url: Union[str, httpx.URL],
        headers: HeaderInput = None,
        content: Union[Stream, bytes, str] = b"",
    ) -> None:
        if not method:
            raise ValueError("Request method must not be empty")
        super().__init__(headers, content)
        self._method = method
        self._url = httpx.URL(url)

    def __repr__(self) -> str:
        return f"<Request [{self._method} {self._url}]>"

    @property
    def method(self) -> str:
        return self._method

    @property
    def url(self) -> httpx.URL:
        return self._url

    def with_method(self, method: str) -> Request:
        if not method:
            raise ValueError("Request method must not be empty")
        return self._replace(method=method)

    def with_url(self, url: Union[str, httpx.URL]) -> Request:
        return self._replace(url=httpx.URL(url))
