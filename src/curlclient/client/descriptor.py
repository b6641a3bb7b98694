"""Translation of a :class:`~curlclient.message.Request` into cURL options.

:func:`prepare_request` applies the body defaults (``Content-Length`` and,
unless disabled, ``Content-Type``) to a derived copy of the request.
:func:`build_transfer_descriptor` turns the prepared request into a
:class:`TransferDescriptor`, whose :meth:`~TransferDescriptor.to_options`
yields the option mapping handed to
:meth:`~curlclient.transport.TransportSession.set_options`.

Mapping::

    method          -> CUSTOMREQUEST (always)
    HEAD            -> NOBODY (no body is read after the headers)
    url             -> URL
    (always)        -> ENCODING "" (let the engine negotiate), FOLLOWLOCATION,
                       RETURNTRANSFER
    non-empty body  -> POST, POSTFIELDS
    headers         -> HTTPHEADER, one "Name: value" line per name
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from curlclient.message import Request
from curlclient.models import ClientConfig
from curlclient.transport import RETURNTRANSFER


class TransferDescriptor(BaseModel):
    """Per-request set of transfer options, built fresh for every call."""

    url: str
    method: str
    accept_encoding: str = ""
    follow_location: bool = True
    return_transfer: bool = True
    no_body: bool = False
    has_body: bool = False
    body: bytes = b""
    header_lines: list[str] = Field(default_factory=list)
    timeout: Optional[int] = None
    connect_timeout: Optional[int] = None
    verify_ssl: bool = True
    user_agent: Optional[str] = None

    def to_options(self) -> dict[str, Any]:
        """Render the descriptor as an ordered option-name -> value mapping."""
        options: dict[str, Any] = {
            "CUSTOMREQUEST": self.method,
            "URL": self.url,
            "ENCODING": self.accept_encoding,
            "FOLLOWLOCATION": 1 if self.follow_location else 0,
            RETURNTRANSFER: self.return_transfer,
        }
        if self.no_body:
            options["NOBODY"] = 1
        if self.has_body:
            options["POST"] = 1
            options["POSTFIELDS"] = self.body
        if self.timeout is not None:
            options["TIMEOUT"] = self.timeout
        if self.connect_timeout is not None:
            options["CONNECTTIMEOUT"] = self.connect_timeout
        if not self.verify_ssl:
            options["SSL_VERIFYPEER"] = 0
            options["SSL_VERIFYHOST"] = 0
        if self.user_agent is not None:
            options["USERAGENT"] = self.user_agent
        options["HTTPHEADER"] = list(self.header_lines)
        return options


def prepare_request(request: Request, config: Optional[ClientConfig] = None) -> Request:
    """Return *request* with body defaults applied; the argument is never modified.

    When the body is non-empty, a missing ``Content-Length`` is set to the
    body's byte length and a missing ``Content-Type`` to
    ``config.default_content_type`` (skipped when that is ``None``).
    Requests without a body are returned unchanged.
    """
    config = config or ClientConfig()
    content = request.body.getvalue()
    if not content:
        return request

    if not request.has_header("Content-Length"):
        request = request.with_header("Content-Length", str(len(content)))
    if config.default_content_type is not None and not request.has_header("Content-Type"):
        request = request.with_header("Content-Type", config.default_content_type)
    return request


def serialize_headers(request: Request) -> list[str]:
    """Render each distinct header name as one ``"Name: value"`` line."""
    return [
        f"{name.strip()}: {request.get_header_line(name)}"
        for name in request.header_names()
    ]


def build_transfer_descriptor(
    request: Request, config: Optional[ClientConfig] = None
) -> TransferDescriptor:
    """Build the :class:`TransferDescriptor` for one call to ``send_request``."""
    config = config or ClientConfig()
    prepared = prepare_request(request, config)
    content = prepared.body.getvalue()

    return TransferDescriptor(
        url=str(prepared.url),
        method=prepared.method,
        no_body=prepared.method.upper() == "HEAD",
        has_body=bool(content),
        body=content,
        header_lines=serialize_headers(prepared),
        timeout=config.timeout,
        connect_timeout=config.connect_timeout,
        verify_ssl=config.verify_ssl,
        user_agent=config.user_agent,
    )
