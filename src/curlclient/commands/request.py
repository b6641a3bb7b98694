"""The ``curlclient request`` command -- send one HTTP request from the shell.

Builds a :class:`~curlclient.message.Request` from the command-line
arguments, sends it with :class:`~curlclient.client.CurlClient` using the
resolved :class:`~curlclient.models.ClientConfig`, and renders the
response with :func:`~curlclient.client.response.format_api_response`.

Transfer errors are reported on stderr and mapped to the exit code of the
:class:`~curlclient.exceptions.CurlClientError` subclass (``6`` for a
network failure).
"""

from __future__ import annotations

from typing import Optional

import typer

from curlclient.exceptions import CurlClientError, InvalidUsageError


def parse_header(raw: str) -> tuple[str, str]:
    """Split a ``"Name: value"`` argument into its parts.

    Raises:
        InvalidUsageError: If there is no colon or the name is empty.
    """
    name, separator, value = raw.partition(":")
    if not separator or not name.strip():
        raise InvalidUsageError(f"Invalid header (expected 'Name: value'): {raw}")
    return name.strip(), value.strip()


def request_command(
    url: str = typer.Argument(help="Target URL."),
    method: str = typer.Option("GET", "--request", "-X", help="Request method."),
    header: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Extra header 'Name: value' (repeatable)."
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Request body."),
    include: bool = typer.Option(
        False, "--include", "-i", help="Print response headers to stderr."
    ),
    timeout: Optional[int] = typer.Option(
        None, "--timeout", help="Whole-transfer timeout in seconds."
    ),
    insecure: bool = typer.Option(
        False, "--insecure", "-k", help="Skip TLS certificate verification."
    ),
    content_type: Optional[str] = typer.Option(
        None, "--default-content-type", help="Content-Type for bodies that lack one; 'none' sends none."
    ),
) -> None:
    """Send an HTTP request and print the response.

    Example::

        curlclient request https://httpbin.org/get
        curlclient request https://httpbin.org/post -X POST -d 'hello' -H 'X-Trace: abc'
    """
    from curlclient.client import CurlClient
    from curlclient.client.response import format_api_response
    from curlclient.config import resolve_config
    from curlclient.message import Request
    from curlclient.output import debug, error

    try:
        if not method.strip():
            raise InvalidUsageError("Request method must not be empty")
        headers = [parse_header(h) for h in header or []]

        cli_client = {
            "timeout": timeout,
            "verify_ssl": False if insecure else None,
            "default_content_type": content_type,
        }
        config = resolve_config(cli_client=cli_client)
        debug(f"Client config: {config.client.model_dump(mode='json')}")

        request = Request(method.strip(), url, headers=headers, content=data or b"")
        with CurlClient(config=config.client) as client:
            response = client.send_request(request)
    except CurlClientError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    format_api_response(response, include_headers=include)
