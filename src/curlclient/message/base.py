"""Header handling shared by :class:`~curlclient.message.Request` and
:class:`~curlclient.message.Response`.

Headers are stored in an :class:`httpx.Headers` multimap, which keeps
insertion order, compares names case-insensitively, and remembers the
original spelling of each name in ``Headers.raw``.  Every mutating
operation builds a new ``Headers`` and a shallow copy of the message, so
instances are never changed in place.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, TypeVar, Union

import httpx

from curlclient.message.stream import Stream

# Header bytes on the wire are ISO-8859-1; any Latin-1 text round-trips.
_HEADER_ENCODING = "iso-8859-1"

HeaderInput = Union[httpx.Headers, dict[str, str], Iterable[tuple[str, str]], None]

_M = TypeVar("_M", bound="Message")


class Message:
    """Base class holding a header multimap and a body stream."""

    _headers: httpx.Headers
    _body: Stream

    def __init__(self, headers: HeaderInput = None, content: Union[Stream, bytes, str] = b"") -> None:
        self._headers = httpx.Headers(headers, encoding=_HEADER_ENCODING)
        self._body = content if isinstance(content, Stream) else Stream(content)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    @property
    def headers(self) -> httpx.Headers:
        """A copy of the header multimap."""
        return httpx.Headers(self._headers, encoding=_HEADER_ENCODING)

    @property
    def body(self) -> Stream:
        return self._body

    def has_header(self, name: str) -> bool:
        return name in self._headers

    def get_header(self, name: str) -> list[str]:
        """Return every value recorded for *name* (case-insensitive)."""
        return self._headers.get_list(name)

    def get_header_line(self, name: str) -> str:
        """Return the values of *name* joined with ``", "``, or ``""``."""
        return ", ".join(self.get_header(name))

    def header_names(self) -> list[str]:
        """Return distinct header names in insertion order, first spelling wins."""
        seen: set[str] = set()
        names: list[str] = []
        for raw_name, _ in self._headers.raw:
            name = raw_name.decode(self._headers.encoding)
            if name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)
        return names

    def header_items(self) -> list[tuple[str, str]]:
        """Return ``(name, value)`` pairs exactly as added, case preserved."""
        encoding = self._headers.encoding
        return [(k.decode(encoding), v.decode(encoding)) for k, v in self._headers.raw]

    # ------------------------------------------------------------------ #
    # Derived copies
    # ------------------------------------------------------------------ #

    def _replace(self: _M, **changes: Any) -> _M:
        clone = copy.copy(self)
        for attr, value in changes.items():
            setattr(clone, f"_{attr}", value)
        return clone

    def with_header(self: _M, name: str, value: Union[str, list[str]]) -> _M:
        """Return a copy where *name* is replaced by *value* (one or many values)."""
        values = value if isinstance(value, list) else [value]
        items = [(k, v) for k, v in self.header_items() if k.lower() != name.lower()]
        items.extend((name, v) for v in values)
        return self._replace(headers=httpx.Headers(items, encoding=_HEADER_ENCODING))

    def with_added_header(self: _M, name: str, value: Union[str, list[str]]) -> _M:
        """Return a copy with *value* appended to any existing values of *name*."""
        values = value if isinstance(value, list) else [value]
        items = self.header_items()
        items.extend((name, v) for v in values)
        return self._replace(headers=httpx.Headers(items, encoding=_HEADER_ENCODING))

    def without_header(self: _M, name: str) -> _M:
        items = [(k, v) for k, v in self.header_items() if k.lower() != name.lower()]
        return self._replace(headers=httpx.Headers(items, encoding=_HEADER_ENCODING))

    def with_body(self: _M, body: Union[Stream, bytes, str]) -> _M:
        stream = body if isinstance(body, Stream) else Stream(body)
        return self._replace(body=stream)
