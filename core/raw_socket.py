"""
core/raw_socket.py
Thin raw ICMP socket used by the host prober.

Opening one requires CAP_NET_RAW / root (Administrator on Windows); the
resulting PermissionError is propagated unchanged.
"""

from __future__ import annotations

import socket
from typing import Optional

from utils.constants import AddressFamily, ICMP_RECV_BUFSIZE


class RawSocket:
    """
    Raw ICMP(v6) socket connected to a single peer.

    Usage:
        with RawSocket(AddressFamily.IPV4) as sock:
            sock.connect(address)
            sock.send(packet)
            sock.set_timeout(0.5)
            data = sock.recv()
    """

    def __init__(self, family: AddressFamily):
        self.family = family
        self._sock: Optional[socket.socket] = socket.socket(
            family.socket_family, socket.SOCK_RAW, family.icmp_protocol
        )

    def connect(self, address) -> None:
        """Restrict send/recv to `address` (kernel filters other sources)."""
        self._sock.connect((str(address), 0))

    def send(self, data: bytes) -> int:
        return self._sock.send(data)

    def set_timeout(self, seconds: float) -> None:
        self._sock.settimeout(seconds)

    def recv(self, bufsize: int = ICMP_RECV_BUFSIZE) -> bytes:
        return self._sock.recv(bufsize)

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def __enter__(self) -> "RawSocket":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
