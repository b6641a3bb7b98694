"""curlclient -- an HTTP client over a reusable libcurl transfer session.

This package adapts small, immutable request/response objects onto a
stateful libcurl easy handle (via :mod:`pycurl`).  One
:class:`~curlclient.client.CurlClient` owns one
:class:`~curlclient.transport.TransportSession` and performs one exchange
per call, raising :class:`~curlclient.exceptions.ClientError` for local
failures and :class:`~curlclient.exceptions.NetworkError` for failed
transfers.

Typical usage::

    from curlclient.client import CurlClient
    from curlclient.message import Request

    with CurlClient() as client:
        response = client.send_request(Request("GET", "https://httpbin.org/get"))

Modules:
    app: Typer application and CLI entry point.
    client: The HTTP client and response rendering.
    transport: The libcurl session wrapper.
    message: Request, Response and body stream value objects.
    models: Pydantic configuration models.
    config: XDG-aware configuration loading and precedence.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
