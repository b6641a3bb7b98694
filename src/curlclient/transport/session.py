"""Lifecycle-safe wrapper around a single libcurl easy handle.

:class:`TransportSession` owns zero or one :class:`pycurl.Curl` handle at a
time and exposes the narrow operation set the client needs: open, set
options, execute, read diagnostics, close.

Two rules shape the API:

- **Lazy open** -- :meth:`~TransportSession.set_option`,
  :meth:`~TransportSession.set_options`, :meth:`~TransportSession.reset`,
  :meth:`~TransportSession.escape` and :meth:`~TransportSession.unescape`
  open a handle on demand.  :meth:`~TransportSession.execute` and
  :meth:`~TransportSession.pause` never do: running a transfer on a handle
  nobody configured is a caller bug and raises
  :class:`~curlclient.exceptions.SessionNotOpenError`.
- **Best-effort diagnostics** -- :meth:`~TransportSession.errno`,
  :meth:`~TransportSession.error` and :meth:`~TransportSession.get_info`
  return ``None`` on a closed session instead of raising.

The binding is probed with :func:`load_engine` each time a handle is
opened, so a host without ``pycurl`` gets an
:class:`~curlclient.exceptions.InitializationError` rather than an
import-time crash.

A session is not thread-safe.  Closing or detaching it from another thread
while :meth:`~TransportSession.execute` is running is forbidden.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote, unquote

from curlclient.exceptions import InitializationError, SessionNotOpenError
from curlclient.output import get_output

RETURNTRANSFER = "RETURNTRANSFER"
"""Session-level option: buffer the response body and return it from :meth:`TransportSession.execute`."""

OptionKey = Union[str, int]

# Transfer facts reported by ``get_info()`` without a key.
_DEFAULT_INFO = {
    "url": "EFFECTIVE_URL",
    "content_type": "CONTENT_TYPE",
    "http_code": "RESPONSE_CODE",
    "header_size": "HEADER_SIZE",
    "request_size": "REQUEST_SIZE",
    "redirect_count": "REDIRECT_COUNT",
    "redirect_url": "REDIRECT_URL",
    "total_time": "TOTAL_TIME",
    "namelookup_time": "NAMELOOKUP_TIME",
    "connect_time": "CONNECT_TIME",
    "pretransfer_time": "PRETRANSFER_TIME",
    "starttransfer_time": "STARTTRANSFER_TIME",
    "redirect_time": "REDIRECT_TIME",
    "size_upload": "SIZE_UPLOAD",
    "size_download": "SIZE_DOWNLOAD",
    "speed_download": "SPEED_DOWNLOAD",
    "speed_upload": "SPEED_UPLOAD",
    "primary_ip": "PRIMARY_IP",
    "primary_port": "PRIMARY_PORT",
    "local_ip": "LOCAL_IP",
    "local_port": "LOCAL_PORT",
}

# libcurl error codes used when the binding itself raised nothing numeric.
_E_BAD_FUNCTION_ARGUMENT = 43
_E_UNKNOWN_OPTION = 48


def load_engine() -> Optional[ModuleType]:
    """Return the ``pycurl`` module, or ``None`` when it cannot be imported."""
    try:
        import pycurl
    except ImportError:
        return None
    return pycurl


@dataclass(frozen=True)
class TransferResult:
    """Outcome of :meth:`TransportSession.execute`.

    Exactly one of two variants:

    * success -- ``ok`` is ``True`` and ``body`` holds the received bytes
      (empty when nothing was returned or ``RETURNTRANSFER`` was off);
    * failure -- ``ok`` is ``False``; ``errno`` and ``error`` carry the
      engine's code and message.

    The class defines no truthiness on purpose: test ``result.ok``.
    """

    ok: bool
    body: bytes = b""
    errno: int = 0
    error: str = ""

    @classmethod
    def success(cls, body: bytes = b"") -> TransferResult:
        return cls(ok=True, body=body)

    @classmethod
    def failure(cls, errno: int, error: str) -> TransferResult:
        return cls(ok=False, errno=errno, error=error)


class TransportSession:
    """Owns at most one native transfer handle.

    Args:
        handle: An existing handle to adopt.  The session starts ``Open``
            when one is given and ``Closed`` otherwise.
        engine: The binding module used to create handles and resolve
            option names.  Defaults to whatever :func:`load_engine` finds.

    Example::

        with TransportSession() as session:
            session.set_options({"URL": "https://httpbin.org/get", RETURNTRANSFER: True})
            result = session.execute()
            if result.ok:
                print(session.get_info("RESPONSE_CODE"), len(result.body))
    """

    def __init__(self, handle: Any = None, engine: Optional[Any] = None) -> None:
        self._handle = handle
        self._engine = engine
        self._return_transfer = False
        self._last_errno = 0
        self._last_error = ""

    def __repr__(self) -> str:
        state = "open" if self.is_open() else "closed"
        return f"<TransportSession {state}>"

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TransportSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def _get_engine(self) -> Optional[Any]:
        if self._engine is None:
            self._engine = load_engine()
        return self._engine

    def is_curl_enabled(self) -> bool:
        """Return ``True`` if the libcurl binding can be used on this host."""
        return self._get_engine() is not None

    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        """Create a fresh handle in its default state.

        Raises:
            InitializationError: If the binding is unavailable, or a handle
                is already owned (close or detach it first).
        """
        engine = self._get_engine()
        if engine is None:
            raise InitializationError("libcurl binding (pycurl) is not available")
        if self.is_open():
            raise InitializationError("Previous cURL session has not been closed or detached")

        try:
            self._handle = engine.Curl()
        except engine.error as exc:
            raise InitializationError(f"Unable to create cURL handle: {exc}") from exc
        self._clear_state()
        get_output().debug("cURL session opened")

    def _ensure_open(self) -> None:
        if not self.is_open():
            self.open()

    def close(self) -> None:
        """Release the handle if one is owned."""
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._clear_state()
            get_output().debug("cURL session closed")

    def detach(self) -> Any:
        """Hand the handle over to the caller without releasing it.

        Returns:
            The native handle, or ``None`` if the session was closed.
        """
        handle = self._handle
        self._handle = None
        self._clear_state()
        if handle is not None:
            get_output().debug("cURL session detached")
        return handle

    def reset(self) -> None:
        """Restore engine options to their defaults, keeping the handle."""
        self._ensure_open()
        self._handle.reset()
        self._clear_state()

    def _clear_state(self) -> None:
        self._return_transfer = False
        self._last_errno = 0
        self._last_error = ""

    # ------------------------------------------------------------------ #
    # Options
    # ------------------------------------------------------------------ #

    def _resolve(self, key: OptionKey) -> Optional[int]:
        if isinstance(key, int):
            return key
        value = getattr(self._get_engine(), key.upper(), None)
        return value if isinstance(value, int) else None

    def set_option(self, key: OptionKey, value: Any) -> bool:
        """Apply one engine option, opening a session if needed.

        Args:
            key: Option name as spelled by the binding (``"URL"``,
                ``"FOLLOWLOCATION"``), a raw option id, or
                :data:`RETURNTRANSFER`.
            value: Option value.

        Returns:
            ``True`` on success, ``False`` if the engine rejected the option.
            The rejection reason is available from :meth:`error`.
        """
        self._ensure_open()
        if key == RETURNTRANSFER:
            self._return_transfer = bool(value)
            return True

        engine = self._get_engine()
        option = self._resolve(key)
        if option is None:
            self._record_error(_E_UNKNOWN_OPTION, f"Unknown cURL option: {key}")
            get_output().debug(self._last_error)
            return False

        try:
            self._handle.setopt(option, value)
        except (engine.error, TypeError, ValueError) as exc:
            errno, message = _split_engine_error(exc)
            self._record_error(errno, message)
            get_output().debug(f"cURL rejected option {key}: {message}")
            return False
        return True

    def set_options(self, options: Mapping[OptionKey, Any]) -> bool:
        """Apply several options in order, stopping at the first rejection.

        Returns:
            ``True`` if every option was applied.  On ``False`` the entries
            after the rejected one were not applied.
        """
        self._ensure_open()
        for key, value in options.items():
            if not self.set_option(key, value):
                return False
        return True

    # ------------------------------------------------------------------ #
    # Transfer
    # ------------------------------------------------------------------ #

    def execute(self) -> TransferResult:
        """Run the configured transfer and block until it completes.

        Returns:
            A :class:`TransferResult`.  With :data:`RETURNTRANSFER` set the
            success variant carries the response body.

        Raises:
            SessionNotOpenError: If no handle is owned.
        """
        if not self.is_open():
            raise SessionNotOpenError("cURL session is not initialized")

        buffer = io.BytesIO()
        engine = self._get_engine()
        if self._return_transfer:
            self._handle.setopt(engine.WRITEFUNCTION, buffer.write)

        try:
            self._handle.perform()
        except engine.error as exc:
            errno, message = _split_engine_error(exc)
            self._record_error(errno, message)
            get_output().debug(f"cURL transfer failed: ({errno}) {message}")
            return TransferResult.failure(errno, message)

        self._record_error(0, "")
        return TransferResult.success(buffer.getvalue())

    def pause(self, bitmask: int) -> int:
        """Pause or resume the transfer directions given by *bitmask*.

        Returns:
            The engine status code, ``0`` on success.

        Raises:
            SessionNotOpenError: If no handle is owned.
        """
        if not self.is_open():
            raise SessionNotOpenError("cURL session is not initialized")
        engine = self._get_engine()
        try:
            self._handle.pause(bitmask)
        except engine.error as exc:
            errno, message = _split_engine_error(exc)
            self._record_error(errno, message)
            return errno
        return 0

    # ------------------------------------------------------------------ #
    # Diagnostics
    # ------------------------------------------------------------------ #

    def _record_error(self, errno: int, message: str) -> None:
        self._last_errno = errno
        self._last_error = message

    def errno(self) -> Optional[int]:
        """Last engine error code (``0`` if none), or ``None`` when closed."""
        if not self.is_open():
            return None
        return self._last_errno

    def error(self) -> Optional[str]:
        """Last engine error message (``""`` if none), or ``None`` when closed."""
        if not self.is_open():
            return None
        return self._last_error

    def get_info(self, key: Optional[OptionKey] = None) -> Any:
        """Read transfer information from the handle.

        Args:
            key: Info name (``"RESPONSE_CODE"``) or id.  When omitted, a dict
                of common transfer facts is returned.

        Returns:
            The value, a dict when *key* is ``None``, or ``None`` when the
            session is closed or the key is unknown.
        """
        if not self.is_open():
            return None
        engine = self._get_engine()
        if key is None:
            info: dict[str, Any] = {}
            for name, engine_name in _DEFAULT_INFO.items():
                option = self._resolve(engine_name)
                if option is None:
                    continue
                try:
                    info[name] = self._handle.getinfo(option)
                except engine.error:
                    continue
            return info

        option = self._resolve(key)
        if option is None:
            return None
        try:
            return self._handle.getinfo(option)
        except engine.error:
            return None

    @staticmethod
    def version() -> Optional[str]:
        """Return the binding's version string, or ``None`` if it is unavailable."""
        engine = load_engine()
        return engine.version if engine is not None else None

    # ------------------------------------------------------------------ #
    # Encoding helpers
    # ------------------------------------------------------------------ #

    def escape(self, value: str) -> str:
        """Percent-encode *value*, keeping only RFC 3986 unreserved characters."""
        self._ensure_open()
        return quote(value, safe="")

    def unescape(self, value: str) -> str:
        """Decode percent-escapes in *value*."""
        self._ensure_open()
        return unquote(value)


def _split_engine_error(exc: BaseException) -> tuple[int, str]:
    """Return ``(code, message)`` from a ``pycurl.error`` or a Python error."""
    args = exc.args
    if len(args) >= 2 and isinstance(args[0], int):
        return args[0], str(args[1])
    if len(args) == 1 and isinstance(args[0], int):
        return args[0], ""
    return _E_BAD_FUNCTION_ARGUMENT, str(exc)
