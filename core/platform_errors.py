"""
core/platform_errors.py
Map OS error codes from a failed TCP connect to a PortStatus.

One table per platform, picked once at import. Nothing else in core
branches on the platform.
"""

from __future__ import annotations

import errno
import sys
from typing import Dict, Optional

from utils.constants import PortStatus


# Win32 system error codes reported by the proactor event loop
ERROR_CONNECTION_REFUSED = 1225
ERROR_NETWORK_UNREACHABLE = 1231
ERROR_HOST_UNREACHABLE = 1232


def _posix_table() -> Dict[int, PortStatus]:
    return {
        errno.ECONNREFUSED: PortStatus.CLOSED,
        errno.ECONNRESET:   PortStatus.CLOSED,
        errno.ETIMEDOUT:    PortStatus.FILTERED,
        errno.ENETUNREACH:  PortStatus.HOST_DOWN,
        errno.EHOSTUNREACH: PortStatus.HOST_DOWN,
    }


def _windows_table() -> Dict[int, PortStatus]:
    return {
        errno.WSAECONNREFUSED:     PortStatus.CLOSED,
        errno.WSAECONNRESET:       PortStatus.CLOSED,
        errno.WSAETIMEDOUT:        PortStatus.FILTERED,
        errno.WSAENETUNREACH:      PortStatus.HOST_DOWN,
        errno.WSAEHOSTUNREACH:     PortStatus.HOST_DOWN,
        ERROR_CONNECTION_REFUSED:  PortStatus.CLOSED,
        ERROR_NETWORK_UNREACHABLE: PortStatus.HOST_DOWN,
        ERROR_HOST_UNREACHABLE:    PortStatus.HOST_DOWN,
    }


_ERRNO_STATUS: Dict[int, PortStatus] = (
    _windows_table() if sys.platform == "win32" else _posix_table()
)


def classify_errno(code: Optional[int]) -> Optional[PortStatus]:
    """PortStatus for a connect() error code, or None if it is a real failure."""
    if code is None:
        return None
    return _ERRNO_STATUS.get(code)


def classify_os_error(exc: OSError) -> Optional[PortStatus]:
    """
    Classify a connect() failure.

    Refusals and resets are recognised by type, as are timeouts raised by
    the socket layer (they carry no errno). Everything else goes through
    the errno table: winerror first on Windows, then errno.
    """
    if isinstance(exc, (ConnectionRefusedError, ConnectionResetError)):
        return PortStatus.CLOSED
    if isinstance(exc, TimeoutError) and exc.errno is None:
        return PortStatus.FILTERED
    status = classify_errno(getattr(exc, "winerror", None))
    if status is None:
        status = classify_errno(exc.errno)
    return status
