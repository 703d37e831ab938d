"""
core/port_prober.py
Single-shot TCP connect probe.

  connected            → OPEN
  timed out            → FILTERED
  refused / reset      → CLOSED
  net/host unreachable → HOST_DOWN
  anything else        → OSError re-raised

No retries; the connection is closed as soon as it is established.
"""

from __future__ import annotations

import asyncio
import socket
from typing import Tuple

from core.platform_errors import classify_os_error
from utils.constants import PortStatus
from utils.logger import get_logger

log = get_logger("hostsweep.port_prober")

Target = Tuple[str, int]


def _classify(target: Target, exc: OSError) -> PortStatus:
    status = classify_os_error(exc)
    if status is None:
        raise exc
    log.debug(f"{target[0]}:{target[1]} {status} ({exc})")
    return status


def probe_port(target: Target, timeout: float) -> PortStatus:
    """Blocking TCP connect to (host, port) bounded by `timeout` seconds."""
    host, port = target
    try:
        conn = socket.create_connection((str(host), port), timeout=timeout)
    except OSError as exc:
        return _classify(target, exc)
    conn.close()
    return PortStatus.OPEN


async def async_probe_port(target: Target, timeout: float) -> PortStatus:
    """Event-loop variant of probe_port, same classification."""
    host, port = target
    try:
        _, writer = await asyncio.wait_for(
            asyncio.open_connection(str(host), port),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        log.debug(f"{host}:{port} {PortStatus.FILTERED} (timed out)")
        return PortStatus.FILTERED
    except OSError as exc:
        return _classify(target, exc)

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass  # peer reset during close
    return PortStatus.OPEN
