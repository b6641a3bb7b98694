"""HTTP client module for curlclient.

Classes:
    :class:`CurlClient` -- blocking client executing one request per call
        through a :class:`~curlclient.transport.TransportSession`.
    :class:`HeaderCapture` -- header callback used during a transfer.

Example::

    from curlclient.client import CurlClient
    from curlclient.message import Request

    with CurlClient() as client:
        response = client.send_request(Request("GET", "https://httpbin.org/get"))
"""

from curlclient.client.curl_client import CurlClient, HeaderCapture

__all__ = ["CurlClient", "HeaderCapture"]
