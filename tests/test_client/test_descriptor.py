"""Tests for the request -> transfer option translation."""

from __future__ import annotations

import pytest

from curlclient.client.descriptor import (
    TransferDescriptor,
    build_transfer_descriptor,
    prepare_request,
    serialize_headers,
)
from curlclient.message import Request
from curlclient.models import ClientConfig
from curlclient.transport import RETURNTRANSFER


URL = "https://httpbin.org/anything"


# ---------------------------------------------------------------------------
# prepare_request
# ---------------------------------------------------------------------------


class TestPrepareRequest:
    def test_empty_body_is_untouched(self) -> None:
        request = Request("GET", URL)
        assert prepare_request(request) is request

    def test_empty_body_with_headers_is_untouched(self) -> None:
        request = Request("POST", URL, headers={"Content-Type": "application/json"})
        prepared = prepare_request(request)
        assert prepared.has_header("Content-Length") is False
        assert prepared.get_header_line("Content-Type") == "application/json"

    @pytest.mark.parametrize(
        "content, length",
        [
            (b"hello", "5"),
            ("héllo", "6"),
            (b"\x00\x01\x02", "3"),
        ],
    )
    def test_content_length_is_byte_length(self, content, length: str) -> None:
        prepared = prepare_request(Request("POST", URL, content=content))
        assert prepared.get_header_line("Content-Length") == length

    def test_default_content_type(self) -> None:
        prepared = prepare_request(Request("POST", URL, content=b"x"))
        assert prepared.get_header_line("Content-Type") == "text/plain"

    def test_configured_content_type(self) -> None:
        config = ClientConfig(default_content_type="application/octet-stream")
        prepared = prepare_request(Request("POST", URL, content=b"x"), config)
        assert prepared.get_header_line("Content-Type") == "application/octet-stream"

    def test_content_type_default_disabled(self) -> None:
        config = ClientConfig(default_content_type=None)
        prepared = prepare_request(Request("POST", URL, content=b"x"), config)
        assert prepared.has_header("Content-Type") is False
        assert prepared.get_header_line("Content-Length") == "1"

    def test_existing_headers_win(self) -> None:
        request = Request(
            "POST",
            URL,
            headers={"content-length": "2", "content-type": "application/json"},
            content=b"{}",
        )
        prepared = prepare_request(request)
        assert prepared.get_header("Content-Length") == ["2"]
        assert prepared.get_header("Content-Type") == ["application/json"]

    def test_original_request_is_not_modified(self) -> None:
        request = Request("POST", URL, headers={"X-Trace": "abc"}, content=b"hello")
        prepared = prepare_request(request)
        assert prepared is not request
        assert request.header_names() == ["X-Trace"]
        assert prepared.header_names() == ["X-Trace", "Content-Length", "Content-Type"]


# ---------------------------------------------------------------------------
# serialize_headers
# ---------------------------------------------------------------------------


class TestSerializeHeaders:
    def test_one_line_per_name(self) -> None:
        request = Request(
            "GET",
            URL,
            headers=[("Accept", "text/html"), ("X-Trace", "abc"), ("accept", "application/json")],
        )
        assert serialize_headers(request) == [
            "Accept: text/html, application/json",
            "X-Trace: abc",
        ]

    def test_no_headers(self) -> None:
        assert serialize_headers(Request("GET", URL)) == []


# ---------------------------------------------------------------------------
# TransferDescriptor
# ---------------------------------------------------------------------------


class TestTransferDescriptor:
    def test_get_options(self) -> None:
        descriptor = build_transfer_descriptor(Request("GET", URL))
        options = descriptor.to_options()
        assert options == {
            "CUSTOMREQUEST": "GET",
            "URL": URL,
            "ENCODING": "",
            "FOLLOWLOCATION": 1,
            RETURNTRANSFER: True,
            "HTTPHEADER": [],
        }

    def test_empty_body_never_sets_body_flags(self) -> None:
        descriptor = build_transfer_descriptor(Request("DELETE", URL, headers={"X-A": "1"}))
        options = descriptor.to_options()
        assert descriptor.has_body is False
        assert "POST" not in options
        assert "POSTFIELDS" not in options
        assert options["HTTPHEADER"] == ["X-A: 1"]

    def test_body_options(self) -> None:
        descriptor = build_transfer_descriptor(Request("PATCH", URL, content=b"data"))
        options = descriptor.to_options()
        assert descriptor.has_body is True
        assert options["CUSTOMREQUEST"] == "PATCH"
        assert options["POST"] == 1
        assert options["POSTFIELDS"] == b"data"
        assert options["HTTPHEADER"] == ["Content-Length: 4", "Content-Type: text/plain"]

    def test_headers_are_applied_last(self) -> None:
        config = ClientConfig(timeout=3, verify_ssl=False, user_agent="ua")
        options = build_transfer_descriptor(Request("POST", URL, content=b"x"), config).to_options()
        assert list(options)[-1] == "HTTPHEADER"
        assert list(options)[:5] == ["CUSTOMREQUEST", "URL", "ENCODING", "FOLLOWLOCATION", RETURNTRANSFER]

    def test_config_options(self) -> None:
        config = ClientConfig(timeout=30, connect_timeout=5, verify_ssl=False, user_agent="ua/1")
        options = build_transfer_descriptor(Request("GET", URL), config).to_options()
        assert options["TIMEOUT"] == 30
        assert options["CONNECTTIMEOUT"] == 5
        assert options["SSL_VERIFYPEER"] == 0
        assert options["SSL_VERIFYHOST"] == 0
        assert options["USERAGENT"] == "ua/1"

    def test_default_config_adds_no_optional_options(self) -> None:
        options = build_transfer_descriptor(Request("GET", URL)).to_options()
        for name in ("TIMEOUT", "CONNECTTIMEOUT", "SSL_VERIFYPEER", "SSL_VERIFYHOST", "USERAGENT"):
            assert name not in options

    @pytest.mark.parametrize("method", ["HEAD", "head"])
    def test_head_reads_no_body(self, method: str) -> None:
        descriptor = build_transfer_descriptor(Request(method, URL))
        options = descriptor.to_options()
        assert descriptor.no_body is True
        assert options["NOBODY"] == 1
        assert options["CUSTOMREQUEST"] == method

    @pytest.mark.parametrize("method", ["GET", "POST", "HEADERS"])
    def test_other_methods_read_the_body(self, method: str) -> None:
        assert "NOBODY" not in build_transfer_descriptor(Request(method, URL)).to_options()

    def test_method_is_kept_verbatim(self) -> None:
        descriptor = build_transfer_descriptor(Request("purge", URL))
        assert descriptor.method == "purge"

    def test_descriptor_flags(self) -> None:
        descriptor = TransferDescriptor(url=URL, method="GET", follow_location=False, return_transfer=False)
        options = descriptor.to_options()
        assert options["FOLLOWLOCATION"] == 0
        assert options[RETURNTRANSFER] is False
