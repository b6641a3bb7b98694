"""Response formatting bridge -- maps a :class:`~curlclient.message.Response` to the output system.

After :meth:`~curlclient.client.CurlClient.send_request` returns,
:func:`format_api_response` writes the status line (and optionally the
headers) to stderr and routes the body through
:meth:`~curlclient.output.OutputManager.format_response`.

See Also:
    :mod:`curlclient.output` -- the output manager that renders data.
"""

from __future__ import annotations

import json
from typing import Any

from curlclient.message import Response
from curlclient.output import get_output


def format_api_response(response: Response, include_headers: bool = False) -> None:
    """Format and print a response using the global output system.

    Args:
        response: The response to display.
        include_headers: Also print every received header to stderr.
    """
    output = get_output()
    output.status_line(response.status_code, response.reason_phrase)
    if include_headers:
        output.headers(response.header_items())

    content_type = response.get_header_line("Content-Type") or "application/octet-stream"
    data = extract_response_data(response)
    if data is not None:
        output.format_response(data, content_type)


def extract_response_data(response: Response) -> Any:
    """Extract the body from a response.

    Attempts to parse the body as JSON first, then falls back to text
    decoded as UTF-8 (undecodable bytes replaced).  Returns ``None`` for an
    empty body.
    """
    content = response.content
    if not content:
        return None

    text = content.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return text
