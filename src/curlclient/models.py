"""Canonical Pydantic models shared across curlclient modules.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`ClientConfig`, :class:`OutputConfig`, and :class:`GlobalConfig`.

The per-request :class:`~curlclient.client.descriptor.TransferDescriptor`
lives next to the code that builds it.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ClientConfig(BaseModel):
    """Transfer settings applied by :class:`~curlclient.client.CurlClient` to every request.

    Example::

        ClientConfig(timeout=10, default_content_type="application/json")
    """

    default_content_type: Optional[str] = Field(
        default="text/plain",
        description="Content-Type added to body-bearing requests that have none; null disables it",
    )
    timeout: Optional[int] = Field(
        default=None, ge=0, description="Whole-transfer timeout in seconds"
    )
    connect_timeout: Optional[int] = Field(
        default=None, ge=0, description="Connection phase timeout in seconds"
    )
    verify_ssl: bool = Field(default=True, description="Verify TLS peer and host name")
    user_agent: Optional[str] = Field(default=None, description="User-Agent sent by the engine")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/curlclient/config.json``.

    Loaded and saved by :func:`~curlclient.config.load_global_config` and
    :func:`~curlclient.config.save_global_config`. See
    :func:`~curlclient.config.resolve_config` for the precedence chain.
    """

    client: ClientConfig = Field(default_factory=ClientConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
