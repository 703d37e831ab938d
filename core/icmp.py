"""
core/icmp.py
ICMP / ICMPv6 echo packet codec and RFC 1071 internet checksum.

Wire layout (8-byte header + payload, network byte order):
  0      type        8 / 0 (ICMPv4 request / reply), 128 / 129 (ICMPv6)
  1      code        always 0
  2-3    checksum    ICMPv4 only; ICMPv6 checksum is filled in by the kernel
  4-5    identifier
  6-7    sequence number
  8-     payload

The ICMPv6 checksum covers an IPv6 pseudo-header the socket layer owns,
so encode() leaves it zero and the kernel writes it on send.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from utils.constants import AddressFamily


class IcmpDecodeError(ValueError):
    """Raised when received bytes are not an ICMP echo request/reply."""


class IcmpEchoType(IntEnum):
    REPLY      = 0
    REQUEST    = 8
    REQUEST_V6 = 128
    REPLY_V6   = 129

    @property
    def needs_checksum(self) -> bool:
        """Whether the checksum is computed in user space (ICMPv4 only)."""
        return self in (IcmpEchoType.REQUEST, IcmpEchoType.REPLY)


_HEADER = struct.Struct("!BBHHH")
HEADER_SIZE = _HEADER.size


# ─── Internet checksum (RFC 1071) ─────────────────────────────────────────────

def _ones_complement_add(a: int, b: int) -> int:
    s = a + b
    return (s & 0xFFFF) + (s >> 16)


def internet_checksum(data: bytes, checksum: int = 0xFFFF) -> int:
    """
    One's-complement checksum of data, 16-bit big-endian words.

    Pass a previous result as `checksum` to continue over more bytes:
    internet_checksum(b, internet_checksum(a)) == internet_checksum(a + b)
    for even-length a. A trailing odd byte is zero-padded.
    """
    total = ~checksum & 0xFFFF
    if len(data) % 2:
        data = bytes(data) + b"\x00"
    for (word,) in struct.iter_unpack("!H", data):
        total = _ones_complement_add(total, word)
    return ~total & 0xFFFF


# ─── Echo packet ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class IcmpEchoPacket:
    type:            IcmpEchoType
    identifier:      int
    sequence_number: int
    payload:         bytes = b""

    @classmethod
    def echo_request(
        cls,
        family: AddressFamily,
        identifier: int,
        sequence_number: int,
        payload: bytes = b"",
    ) -> "IcmpEchoPacket":
        kind = IcmpEchoType.REQUEST if family is AddressFamily.IPV4 else IcmpEchoType.REQUEST_V6
        return cls(kind, identifier, sequence_number, payload)

    def __len__(self) -> int:
        return HEADER_SIZE + len(self.payload)

    def encode(self) -> bytes:
        header = _HEADER.pack(self.type, 0, 0, self.identifier, self.sequence_number)
        if self.type.needs_checksum:
            checksum = internet_checksum(self.payload, internet_checksum(header))
            header = _HEADER.pack(self.type, 0, checksum, self.identifier, self.sequence_number)
        return header + bytes(self.payload)

    @classmethod
    def decode(cls, data: bytes) -> "IcmpEchoPacket":
        """Parse an ICMP message with no IP header in front."""
        if len(data) < HEADER_SIZE:
            raise IcmpDecodeError(f"ICMP message too short: {len(data)} bytes")

        type_code, code, _checksum, identifier, sequence = _HEADER.unpack_from(data)
        try:
            kind = IcmpEchoType(type_code)
        except ValueError:
            raise IcmpDecodeError(f"Not an echo message: type {type_code}") from None
        if code != 0:
            raise IcmpDecodeError(f"Unexpected ICMP code {code} for type {type_code}")

        return cls(kind, identifier, sequence, bytes(data[HEADER_SIZE:]))

    @classmethod
    def decode_ipv4(cls, data: bytes) -> "IcmpEchoPacket":
        """Parse a datagram from an IPv4 raw socket (IP header included)."""
        if not data:
            raise IcmpDecodeError("Empty IPv4 datagram")
        header_len = (data[0] & 0x0F) * 4
        if len(data) < header_len:
            raise IcmpDecodeError(
                f"IPv4 datagram shorter than its header ({len(data)} < {header_len})"
            )
        return cls.decode(data[header_len:])
