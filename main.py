#!/usr/bin/env python3
"""
hostsweep — ICMP host sweep + TCP port probe
main.py — CLI entry point

Usage:
  sudo python3 main.py 192.168.1.1
  sudo python3 main.py 192.168.1.0/24 -t 500ms
  sudo python3 main.py 10.0.0.0/30 fd00::1 -p 22 80 443 8000-8010
  sudo python3 main.py 192.168.1.10 -p            # all ports 0-65535
"""

from __future__ import annotations

import argparse
import asyncio
import itertools
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

# Try uvloop for 2-4× speed on Linux/macOS
try:
    import uvloop
    asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
except ImportError:
    pass

from core.address_range import AddressRange, RangeError
from core.port_parser import PortParseError, resolve_ports
from core.scanner_engine import ScanEngine, HostResult
from utils.config import ConfigError, ScanConfig, load_config
from utils.constants import (
    PortStatus, PROJECT_NAME, PROJECT_VERSION, DEFAULT_CONFIG_PATH,
)
from utils.duration import DurationParseError, parse_duration
from utils.logger import get_logger, set_level

log = get_logger("hostsweep")


# ─── Argument helpers ─────────────────────────────────────────────────────────

def _duration_arg(text: str) -> float:
    try:
        return parse_duration(text)
    except DurationParseError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


Target = Tuple[str, Optional[AddressRange], Optional[str]]


def parse_targets(texts: List[str]) -> List[Target]:
    """Parse CLI targets in order into (text, range, error) triples."""
    targets: List[Target] = []
    for text in texts:
        try:
            targets.append((text, AddressRange.parse(text), None))
        except RangeError as exc:
            targets.append((text, None, str(exc)))
    return targets


# ─── Output ───────────────────────────────────────────────────────────────────

def format_host(result: HostResult, show_closed: bool = True) -> List[str]:
    lines = [f"{str(result.address):<16} {result}"]
    for p in result.ports:
        if p.status is PortStatus.CLOSED and not show_closed:
            continue
        lines.append(f"  :{p.port:<5} {p}")
    return lines


# ─── Core scan runner ─────────────────────────────────────────────────────────

async def _run_scan(
    targets: List[Target],
    ports: Optional[List[int]],
    config: ScanConfig,
    show_closed: bool,
) -> None:
    engine = ScanEngine(config=config, progress_cb=log.debug)

    log.info(f"Targets  : {', '.join(text for text, _, _ in targets)}")
    log.info(f"Ports    : {'none' if ports is None else len(ports)}")
    log.info(f"Timeout  : {config.timeout:.3f}s")

    # Consecutive valid targets share one sweep; errors print in place
    for valid, group in itertools.groupby(targets, key=lambda t: t[1] is not None):
        if not valid:
            for text, _, message in group:
                print(f"{text:<16} error: {message}", flush=True)
            continue
        async for result in engine.scan([r for _, r, _ in group], ports):
            log.debug(f"{result.address} finished in {result.scan_ms:.1f} ms")
            for line in format_host(result, show_closed):
                print(line, flush=True)

    s = engine.stats
    log.info(
        f"{s.hosts_up}/{s.hosts_total} hosts up, {s.host_errors} errors, "
        f"{s.ports_open}/{s.ports_scanned} ports open in {s.elapsed_s:.2f}s"
    )


# ─── CLI ─────────────────────────────────────────────────────────────────────

def build_cli() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=PROJECT_NAME,
        description="Scan for hosts or open ports.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Targets:      192.168.1.1  |  192.168.1.0/24  |  fd00::/120
Port specs:   80  |  80,443  |  1-1000  |  (no value = all 0-65535)
Timeout:      1s  |  500ms  |  1m30s

Host probing uses raw ICMP sockets and needs root / CAP_NET_RAW.
""",
    )
    ap.add_argument("targets",      nargs="+", metavar="TARGET",
                    help="IP address or CIDR range")

    s = ap.add_argument_group("Scan")
    s.add_argument("-p", "--ports", nargs="*", metavar="PORTS", default=None,
                   help="Probe these ports on live hosts (no value: all ports)")
    s.add_argument("-t", "--timeout", type=_duration_arg, metavar="DURATION",
                   help="Per-probe timeout (default: 1s)")
    s.add_argument("--show-closed", action="store_true",
                   help="Show closed ports when scanning all ports")
    s.add_argument("--concurrency", type=_positive_int, metavar="N",
                   help="Hosts probed in parallel")

    ap.add_argument("--config",    default=DEFAULT_CONFIG_PATH, metavar="FILE")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("-q", "--quiet",   action="store_true", help="Errors only")
    ap.add_argument("--version",   action="version",
                    version=f"{PROJECT_NAME} {PROJECT_VERSION}")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap   = build_cli()
    args = ap.parse_args(argv)

    try:
        config = load_config(args.config)
        overrides = {}
        if args.timeout is not None:
            overrides["timeout"] = args.timeout
        if args.concurrency is not None:
            overrides["max_concurrent_hosts"] = args.concurrency
        config = replace(config, **overrides)
        ports = resolve_ports(args.ports)
    except (ConfigError, PortParseError) as exc:
        ap.error(str(exc))

    if args.verbose:
        set_level("DEBUG")
    elif args.quiet:
        set_level("ERROR")
    else:
        set_level(config.log_level)

    targets = parse_targets(args.targets)
    bad_targets = [text for text, r, _ in targets if r is None]

    # Closed lines are only noise when sweeping every port
    show_closed = args.show_closed or config.show_closed or bool(args.ports)

    try:
        asyncio.run(_run_scan(targets, ports, config, show_closed))
    except KeyboardInterrupt:
        print("\n  [!] Interrupted by user", file=sys.stderr)
        return 130

    return 1 if bad_targets else 0


if __name__ == "__main__":
    sys.exit(main())
