"""
hostsweep Constants & Enums
Probe outcomes, address families and scan limits shared by core and CLI.
"""

import socket
from enum import Enum


PROJECT_NAME    = "hostsweep"
PROJECT_VERSION = "1.0.0"


# ─── Probe outcomes ───────────────────────────────────────────────────────────
class HostStatus(str, Enum):
    UP   = "Up"
    DOWN = "Down"

    def __str__(self) -> str:
        return self.value


class PortStatus(str, Enum):
    OPEN      = "Open"        # handshake completed
    CLOSED    = "Closed"      # RST / refused
    FILTERED  = "Filtered"    # no answer before the deadline
    HOST_DOWN = "HostDown"    # network or host unreachable

    def __str__(self) -> str:
        return self.value


# ─── Address families ─────────────────────────────────────────────────────────
class AddressFamily(Enum):
    """IP version with the raw-socket parameters needed to ping it."""

    IPV4 = (4, 32,  socket.AF_INET,  socket.IPPROTO_ICMP)
    IPV6 = (6, 128, socket.AF_INET6, socket.IPPROTO_ICMPV6)

    def __init__(self, version: int, width: int, socket_family: int, icmp_protocol: int):
        self.version       = version
        self.width         = width
        self.socket_family = socket_family
        self.icmp_protocol = icmp_protocol

    @classmethod
    def of(cls, address) -> "AddressFamily":
        return cls.IPV4 if address.version == 4 else cls.IPV6


# ─── ICMP echo probe ──────────────────────────────────────────────────────────
ICMP_IDENTIFIER   = 12345
ICMP_SEQUENCE     = 0
ICMP_PAYLOAD      = f"{PROJECT_NAME}/{PROJECT_VERSION}".encode()
ICMP_RECV_BUFSIZE = 65535

# ─── Port limits ──────────────────────────────────────────────────────────────
PORT_MIN = 0
PORT_MAX = 65535

# ─── Defaults (overridable by config file / CLI) ──────────────────────────────
DEFAULT_TIMEOUT_S            = 1.0
MAX_TIMEOUT_S                = 86400.0     # one day
DEFAULT_CONFIG_PATH          = "hostsweep.yaml"
DEFAULT_MAX_CONCURRENT_HOSTS = 32
DEFAULT_MAX_CONCURRENT_PORTS = 256
DEFAULT_LOG_LEVEL            = "WARNING"

# ─── Layering Contract (hard import rules - enforced by tests) ───────────────
# core  → may import: utils
# utils → may import: stdlib, yaml
# NEVER: core imports main, utils imports core
