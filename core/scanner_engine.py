"""
core/scanner_engine.py
Async sweep engine driving the probes across address ranges:
  • AddressRange → host probe → (if Up) port probes, per address
  • Host probes run in a thread pool (raw-socket I/O is blocking)
  • Port probes run on the event loop, bounded by a semaphore
  • Addresses are consumed lazily in chunks, results yielded in order
  • Probe failures are recorded per target; the sweep always continues
  • No imports of main (clean layering)
"""

from __future__ import annotations

import asyncio
import functools
import itertools
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import AsyncIterator, Awaitable, Callable, Iterable, List, Optional, Sequence

from core.address_range import AddressRange, IPAddress
from core.host_prober import probe_host
from core.port_prober import async_probe_port, Target
from utils.config import ScanConfig
from utils.constants import HostStatus, PortStatus


HostProbe = Callable[[IPAddress, float], HostStatus]
PortProbe = Callable[[Target, float], Awaitable[PortStatus]]


# ─── Data Classes ─────────────────────────────────────────────────────────────

@dataclass
class PortResult:
    port:          int
    status:        Optional[PortStatus]
    error:         Optional[str] = None

    def __str__(self) -> str:
        return self.error if self.error is not None else str(self.status)


@dataclass
class HostResult:
    address:       IPAddress
    status:        Optional[HostStatus]
    error:         Optional[str] = None
    ports:         List[PortResult] = field(default_factory=list)
    scan_ms:       float = 0.0

    @property
    def is_up(self) -> bool:
        return self.status is HostStatus.UP

    @property
    def open_ports(self) -> List[PortResult]:
        return [p for p in self.ports if p.status is PortStatus.OPEN]

    def __str__(self) -> str:
        return self.error if self.error is not None else str(self.status)


@dataclass
class ScanStats:
    hosts_total:   int = 0
    hosts_up:      int = 0
    host_errors:   int = 0
    ports_scanned: int = 0
    ports_open:    int = 0
    elapsed_s:     float = 0.0

    @property
    def rate_per_s(self) -> float:
        return self.ports_scanned / self.elapsed_s if self.elapsed_s > 0 else 0.0

    def record(self, result: HostResult) -> None:
        self.hosts_total += 1
        if result.error is not None:
            self.host_errors += 1
        if result.is_up:
            self.hosts_up += 1
        self.ports_scanned += len(result.ports)
        self.ports_open += len(result.open_ports)


def _error_text(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


# ─── Core Engine ─────────────────────────────────────────────────────────────

class ScanEngine:
    """
    Host/port sweep over AddressRanges.

    Layering contract:
      Imports only: core/*, utils/*
      Does NOT import: main
    """

    def __init__(
        self,
        config: Optional[ScanConfig] = None,
        progress_cb: Optional[Callable[[str], None]] = None,
        host_prober: HostProbe = probe_host,
        port_prober: PortProbe = async_probe_port,
    ):
        self._config = config or ScanConfig()
        self._cb = progress_cb or (lambda _: None)
        self._probe_host = host_prober
        self._probe_port = port_prober
        self.stats = ScanStats()          # accumulates across scan() calls

        # Created inside the running loop
        self._port_sem: Optional[asyncio.Semaphore] = None

    # ── Public scan API ───────────────────────────────────────────────────────

    async def scan(
        self,
        ranges: Iterable[AddressRange],
        ports: Optional[Sequence[int]] = None,
    ) -> AsyncIterator[HostResult]:
        """
        Probe every address of every range, yielding HostResults in order.

        ports=None skips port probing; otherwise each Up host is probed on
        exactly `ports`.
        """
        self._ensure_semaphore()
        t0 = time.monotonic()
        elapsed_before = self.stats.elapsed_s
        addresses = (addr for r in ranges for addr in r.iterate())
        chunk_size = self._config.max_concurrent_hosts

        with ThreadPoolExecutor(max_workers=chunk_size,
                                thread_name_prefix="hostsweep-probe") as pool:
            while True:
                chunk = list(itertools.islice(addresses, chunk_size))
                if not chunk:
                    break
                results = await asyncio.gather(
                    *(self.scan_host(addr, ports, executor=pool) for addr in chunk),
                    return_exceptions=True,
                )
                for addr, result in zip(chunk, results):
                    if isinstance(result, Exception):
                        result = HostResult(address=addr, status=None,
                                            error=_error_text(result))
                    elif isinstance(result, BaseException):
                        raise result
                    self.stats.record(result)
                    self.stats.elapsed_s = elapsed_before + time.monotonic() - t0
                    yield result

        self.stats.elapsed_s = elapsed_before + time.monotonic() - t0

    async def scan_host(
        self,
        address: IPAddress,
        ports: Optional[Sequence[int]] = None,
        executor: Optional[Executor] = None,
    ) -> HostResult:
        """Liveness probe, then port probes if the host is Up. Probe failures become error results, never exceptions."""
        self._ensure_semaphore()
        loop = asyncio.get_running_loop()
        t0 = time.monotonic()

        try:
            status = await loop.run_in_executor(
                executor,
                functools.partial(self._probe_host, address, self._config.timeout),
            )
        except Exception as exc:
            self._cb(f"[!] {address}: {exc!r}")
            return HostResult(address=address, status=None, error=_error_text(exc),
                              scan_ms=(time.monotonic() - t0) * 1000)

        if status is not HostStatus.UP or ports is None:
            self._cb(f"[-] {address} {status}")
            return HostResult(address=address, status=status,
                              scan_ms=(time.monotonic() - t0) * 1000)

        self._cb(f"[+] {address} is up — probing {len(ports)} ports")

        port_results: List[PortResult] = []
        batch = self._config.max_concurrent_ports
        for i in range(0, len(ports), batch):
            port_results.extend(await asyncio.gather(
                *(self._scan_port(address, p) for p in ports[i:i + batch])
            ))

        elapsed = (time.monotonic() - t0) * 1000
        self._cb(
            f"[✓] {address} done: {sum(r.status is PortStatus.OPEN for r in port_results)} open "
            f"/ {len(ports)} probed in {elapsed/1000:.2f}s"
        )
        return HostResult(address=address, status=status,
                          ports=port_results, scan_ms=elapsed)

    # ── Port-level scan ───────────────────────────────────────────────────────

    async def _scan_port(self, address: IPAddress, port: int) -> PortResult:
        async with self._port_sem:
            try:
                status = await self._probe_port((str(address), port), self._config.timeout)
            except Exception as exc:
                return PortResult(port=port, status=None, error=_error_text(exc))
            return PortResult(port=port, status=status)

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _ensure_semaphore(self) -> None:
        """Create semaphore inside running event loop."""
        if self._port_sem is None:
            self._port_sem = asyncio.Semaphore(self._config.max_concurrent_ports)
