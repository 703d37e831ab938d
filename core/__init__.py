"""
hostsweep Core — Public API

from core import AddressRange, probe_host, probe_port
"""
from core.address_range  import (AddressRange, RangeError, InvalidRangeError, RangeParseError,
                                 MalformedAddressError, MalformedPrefixError, PrefixOutOfRangeError)
from core.icmp           import IcmpEchoPacket, IcmpEchoType, IcmpDecodeError, internet_checksum
from core.raw_socket     import RawSocket
from core.platform_errors import classify_errno, classify_os_error
from core.host_prober    import probe_host
from core.port_prober    import probe_port, async_probe_port
from core.port_parser    import PortParser, PortParseError, parse_ports, resolve_ports
from core.scanner_engine import ScanEngine, HostResult, PortResult, ScanStats

__all__ = [
    "AddressRange", "RangeError", "InvalidRangeError", "RangeParseError",
    "MalformedAddressError", "MalformedPrefixError", "PrefixOutOfRangeError",
    "IcmpEchoPacket", "IcmpEchoType", "IcmpDecodeError", "internet_checksum",
    "RawSocket",
    "classify_errno", "classify_os_error",
    "probe_host",
    "probe_port", "async_probe_port",
    "PortParser", "PortParseError", "parse_ports", "resolve_ports",
    "ScanEngine", "HostResult", "PortResult", "ScanStats",
]
