"""Transport layer for curlclient.

Wraps one libcurl easy handle (through :mod:`pycurl`) behind a small,
lifecycle-safe API.

Classes:
    :class:`TransportSession` -- owns zero or one native handle.
    :class:`TransferResult` -- two-variant outcome of a transfer.

Example::

    from curlclient.transport import RETURNTRANSFER, TransportSession

    with TransportSession() as session:
        session.set_options({"URL": "https://httpbin.org/get", RETURNTRANSFER: True})
        result = session.execute()
"""

from curlclient.transport.session import (
    RETURNTRANSFER,
    TransferResult,
    TransportSession,
    load_engine,
)

__all__ = ["RETURNTRANSFER", "TransferResult", "TransportSession", "load_engine"]
