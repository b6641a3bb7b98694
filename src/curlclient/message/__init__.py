"""HTTP message model for curlclient.

Small, immutable value objects describing one HTTP exchange.  URLs are
:class:`httpx.URL` instances and headers live in :class:`httpx.Headers`, so
names are case-insensitive for lookup while keeping the spelling they were
added with.

Classes:
    :class:`Request` -- method, URL, headers and body of an outbound request.
    :class:`Response` -- status, headers and body filled in by the client.
    :class:`ResponseFactory` -- creates empty responses (status 200).
    :class:`Stream` -- in-memory byte stream used for bodies.
"""

from curlclient.message.request import Request
from curlclient.message.response import Response, ResponseFactory
from curlclient.message.stream import Stream

__all__ = ["Request", "Response", "ResponseFactory", "Stream"]
