"""In-memory byte stream used as the body of requests and responses.

A :class:`Stream` wraps :class:`io.BytesIO` with explicit ``readable`` /
``writable`` flags and a cursor, so the client can write a received body
into a response and callers can read it back.
"""

from __future__ import annotations

import io
from typing import Union


class Stream:
    """Seekable in-memory byte stream.

    Args:
        content: Initial content.  ``str`` is encoded as UTF-8.
        writable: Whether :meth:`write` is allowed.

    Example::

        body = Stream(b"hello")
        body.get_contents()   # b"hello"
        body.rewind()
        body.read(2)          # b"he"
    """

    def __init__(self, content: Union[bytes, str] = b"", writable: bool = True) -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._buffer: io.BytesIO | None = io.BytesIO(content)
        self._writable = writable

    def __repr__(self) -> str:
        return f"<Stream size={self.size()} writable={self.writable}>"

    def __len__(self) -> int:
        return self.size()

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def readable(self) -> bool:
        return self._buffer is not None

    @property
    def writable(self) -> bool:
        return self._buffer is not None and self._writable

    def _require_open(self) -> io.BytesIO:
        if self._buffer is None:
            raise OSError("Stream is closed")
        return self._buffer

    def size(self) -> int:
        """Return the total number of bytes held, or 0 once closed."""
        if self._buffer is None:
            return 0
        return len(self._buffer.getbuffer())

    def tell(self) -> int:
        return self._require_open().tell()

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._require_open().seek(offset, whence)

    def rewind(self) -> None:
        self.seek(0)

    def read(self, size: int = -1) -> bytes:
        return self._require_open().read(size)

    def write(self, data: Union[bytes, str]) -> int:
        """Write *data* at the cursor and return the number of bytes written.

        Raises:
            OSError: If the stream is closed or not writable.
        """
        buffer = self._require_open()
        if not self._writable:
            raise OSError("Stream is not writable")
        if isinstance(data, str):
            data = data.encode("utf-8")
        return buffer.write(data)

    def get_contents(self) -> bytes:
        """Return the bytes between the cursor and the end of the stream."""
        return self._require_open().read()

    def getvalue(self) -> bytes:
        """Return the whole content regardless of the cursor position."""
        return self._require_open().getvalue()

    def close(self) -> None:
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
