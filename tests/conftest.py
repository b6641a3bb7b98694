"""Shared fixtures for the curlclient test suite.

Provides a scriptable stand-in for the ``pycurl`` module (so transport and
client tests never touch the network), config isolation, and output
fixtures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

import pytest

from curlclient.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Fake libcurl binding
# ---------------------------------------------------------------------------


class FakeCurlError(Exception):
    """Mirrors ``pycurl.error``: ``args == (code, message)``."""


class FakeCurl:
    """In-memory easy handle driven by its :class:`FakeEngine`.

    ``perform()`` replays the engine's scripted response through the
    installed ``HEADERFUNCTION`` and ``WRITEFUNCTION`` callbacks.
    """

    def __init__(self, engine: FakeEngine) -> None:
        self._engine = engine
        self.options: dict[int, Any] = {}
        self.info: dict[int, Any] = {}
        self.closed = False
        self.reset_calls = 0
        self.perform_calls = 0
        self.paused: list[int] = []
        self.header_returns: list[int] = []

    def setopt(self, option: int, value: Any) -> None:
        if option in self._engine.rejected_options:
            raise FakeCurlError(43, f"option {option} rejected")
        self.options[option] = value

    def reset(self) -> None:
        self.options.clear()
        self.info.clear()
        self.reset_calls += 1

    def perform(self) -> None:
        self.perform_calls += 1
        engine = self._engine
        if engine.failure is not None:
            raise FakeCurlError(*engine.failure)

        header_callback = self.options.get(engine.HEADERFUNCTION)
        if header_callback is not None:
            status_line = f"HTTP/1.1 {engine.status} Scripted\r\n".encode("ascii")
            for line in [status_line, *engine.header_lines, b"\r\n"]:
                self.header_returns.append(header_callback(line))

        write_callback = self.options.get(engine.WRITEFUNCTION)
        if write_callback is not None and engine.body and not self.options.get(engine.NOBODY):
            write_callback(engine.body)

        self.info[engine.RESPONSE_CODE] = engine.status
        self.info[engine.EFFECTIVE_URL] = self.options.get(engine.URL, "")
        self.info[engine.TOTAL_TIME] = 0.01

    def getinfo(self, option: int) -> Any:
        if option not in self.info:
            raise FakeCurlError(43, f"info {option} not available")
        return self.info[option]

    def pause(self, bitmask: int) -> None:
        if self._engine.pause_failure is not None:
            raise FakeCurlError(*self._engine.pause_failure)
        self.paused.append(bitmask)

    def close(self) -> None:
        self.closed = True


class FakeEngine:
    """Module-like object exposing the ``pycurl`` surface the session uses."""

    error = FakeCurlError
    version = "PycURL/7.45.3 libcurl/8.5.0 OpenSSL/3.0.13"

    # Options
    TIMEOUT = 13
    NOBODY = 44
    POST = 47
    FOLLOWLOCATION = 52
    SSL_VERIFYPEER = 64
    CONNECTTIMEOUT = 78
    SSL_VERIFYHOST = 81
    URL = 10002
    POSTFIELDS = 10015
    USERAGENT = 10018
    HTTPHEADER = 10023
    CUSTOMREQUEST = 10036
    ENCODING = 10102
    WRITEFUNCTION = 20011
    HEADERFUNCTION = 20079

    # Info
    EFFECTIVE_URL = 1048577
    RESPONSE_CODE = 2097154
    TOTAL_TIME = 3145731

    # Pause bitmask
    PAUSE_RECV = 1
    PAUSE_SEND = 4
    PAUSE_ALL = 5
    PAUSE_CONT = 0

    def __init__(self) -> None:
        self.handles: list[FakeCurl] = []
        self.rejected_options: set[int] = set()
        self.failure: Optional[tuple[int, str]] = None
        self.pause_failure: Optional[tuple[int, str]] = None
        self.init_failure: Optional[tuple[int, str]] = None
        self.status = 200
        self.header_lines: list[bytes] = []
        self.body = b""

    def Curl(self) -> FakeCurl:  # noqa: N802
        if self.init_failure is not None:
            raise FakeCurlError(*self.init_failure)
        handle = FakeCurl(self)
        self.handles.append(handle)
        return handle

    def respond(self, status: int = 200, headers: Iterable[str] = (), body: bytes = b"") -> None:
        """Script the response replayed by the next ``perform()``."""
        self.status = status
        self.header_lines = [f"{line}\r\n".encode("iso-8859-1") for line in headers]
        self.body = body

    @property
    def last_handle(self) -> FakeCurl:
        return self.handles[-1]


@pytest.fixture
def fake_engine() -> FakeEngine:
    """A fresh scriptable libcurl binding."""
    return FakeEngine()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config. Clears all CURLCLIENT_*
    environment variables and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("curlclient.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "CURLCLIENT_TIMEOUT",
        "CURLCLIENT_CONNECT_TIMEOUT",
        "CURLCLIENT_VERIFY_SSL",
        "CURLCLIENT_USER_AGENT",
        "CURLCLIENT_DEFAULT_CONTENT_TYPE",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager and reset it afterwards."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
