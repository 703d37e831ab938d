"""
core/host_prober.py
ICMP echo liveness probe over a raw socket.

One echo request is sent per loop iteration; the receive timeout is always
re-derived from a single absolute deadline, so garbage or unrelated ICMP
traffic can cause retries but never extends the total wait beyond the
caller's budget.
"""

from __future__ import annotations

import socket
import time
from typing import Callable, Optional

from core.icmp import IcmpEchoPacket, IcmpDecodeError
from core.raw_socket import RawSocket
from utils.constants import (
    AddressFamily, HostStatus,
    ICMP_IDENTIFIER, ICMP_SEQUENCE, ICMP_PAYLOAD,
)
from utils.logger import get_logger

log = get_logger("hostsweep.host_prober")


def probe_host(
    address,
    timeout: float,
    *,
    socket_factory: Optional[Callable[[AddressFamily], RawSocket]] = None,
    clock: Callable[[], float] = time.monotonic,
) -> HostStatus:
    """
    Ping `address` once within `timeout` seconds → HostStatus.

    Raises OSError for anything that is not a timeout, including the
    PermissionError from opening a raw socket without privileges.
    """
    family = AddressFamily.of(address)
    request = IcmpEchoPacket.echo_request(
        family, ICMP_IDENTIFIER, ICMP_SEQUENCE, ICMP_PAYLOAD
    ).encode()
    decode = (
        IcmpEchoPacket.decode_ipv4 if family is AddressFamily.IPV4
        else IcmpEchoPacket.decode
    )

    factory = socket_factory or RawSocket
    with factory(family) as sock:
        sock.connect(address)
        deadline = clock() + timeout

        while deadline - clock() > 0:
            sock.send(request)

            remaining = deadline - clock()
            if remaining <= 0:
                break
            sock.set_timeout(remaining)

            try:
                data = sock.recv()
            except (socket.timeout, BlockingIOError):
                log.debug(f"{address}: no reply within {timeout:.3f}s")
                return HostStatus.DOWN

            try:
                reply = decode(data)
            except IcmpDecodeError as exc:
                log.debug(f"{address}: ignoring packet ({exc})")
                continue

            log.debug(f"{address}: {reply.type.name} id={reply.identifier} seq={reply.sequence_number}")
            return HostStatus.UP

    return HostStatus.DOWN
