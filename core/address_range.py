"""
core/address_range.py
CIDR address range value type.

  AddressRange.parse("10.0.0.0/30")  → 10.0.0.0 … 10.0.0.3
  AddressRange.parse("10.0.0.7")     → single host, /32
  AddressRange.parse("fe80::/126")   → fe80:: … fe80::3

Bounds are derived from the stored address with integer masks of the
family's width; the stored address is kept as given (not normalised to
the network address), so format() round-trips exactly.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, replace
from typing import Iterator, Union

from utils.constants import AddressFamily

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


# ─── Custom Exceptions ────────────────────────────────────────────────────────

class RangeError(ValueError):
    """Base class for address range errors."""


class InvalidRangeError(RangeError):
    """Prefix length outside 1..width for the address family."""


class RangeParseError(RangeError):
    """Raised when CIDR text cannot be parsed."""


class MalformedAddressError(RangeParseError):
    """The ADDR part is not a valid IPv4/IPv6 address."""


class MalformedPrefixError(RangeParseError):
    """The PREFIX part is not a decimal integer."""


class PrefixOutOfRangeError(MalformedPrefixError, InvalidRangeError):
    """The PREFIX part parsed but is not valid for the address family."""


# ─── Value type ───────────────────────────────────────────────────────────────

_PREFIX_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class AddressRange:
    address:       IPAddress
    prefix_length: int

    def __post_init__(self) -> None:
        if isinstance(self.address, str):
            object.__setattr__(self, "address", ipaddress.ip_address(self.address))
        if self.prefix_length == 0:
            raise InvalidRangeError("mask cannot be 0")
        if self.prefix_length < 0:
            raise InvalidRangeError(f"mask cannot be negative: {self.prefix_length}")
        width = self.family.width
        if self.prefix_length > width:
            raise InvalidRangeError(
                f"mask cannot exceed {width} for IPv{self.family.version} address"
            )

    # ── Constructors ──────────────────────────────────────────────────────────

    @classmethod
    def host(cls, address: IPAddress | str) -> "AddressRange":
        """Single-address range (/32 or /128)."""
        if isinstance(address, str):
            address = ipaddress.ip_address(address)
        return cls(address, AddressFamily.of(address).width)

    @classmethod
    def parse(cls, text: str) -> "AddressRange":
        """
        Parse ADDR["/" PREFIX].

        Raises MalformedAddressError, MalformedPrefixError or
        PrefixOutOfRangeError (also an InvalidRangeError).
        """
        addr_text, slash, prefix_text = text.partition("/")
        try:
            address = ipaddress.ip_address(addr_text)
        except ValueError as exc:
            raise MalformedAddressError(str(exc)) from exc

        if not slash:
            return cls.host(address)

        if not prefix_text:
            raise MalformedPrefixError(f"cannot parse prefix from empty string in {text!r}")
        if not _PREFIX_RE.fullmatch(prefix_text):
            raise MalformedPrefixError(f"invalid prefix {prefix_text!r}: expected decimal integer")

        try:
            return cls(address, int(prefix_text))
        except InvalidRangeError as exc:
            raise PrefixOutOfRangeError(str(exc)) from exc

    # ── Derived properties ────────────────────────────────────────────────────

    @property
    def family(self) -> AddressFamily:
        return AddressFamily.of(self.address)

    @property
    def width(self) -> int:
        return self.family.width

    @property
    def num_addresses(self) -> int:
        return 1 << (self.width - self.prefix_length)

    def _host_bits(self) -> int:
        # All-ones below the prefix; zero at full width (no full-width shift)
        return (1 << (self.width - self.prefix_length)) - 1

    def first_address(self) -> IPAddress:
        if self.prefix_length == self.width:
            return self.address
        return self._from_int(int(self.address) & ~self._host_bits())

    def last_address(self) -> IPAddress:
        if self.prefix_length == self.width:
            return self.address
        return self._from_int(int(self.address) | self._host_bits())

    def _from_int(self, value: int) -> IPAddress:
        if self.family is AddressFamily.IPV4:
            return ipaddress.IPv4Address(value)
        return ipaddress.IPv6Address(value)

    # ── Iteration ─────────────────────────────────────────────────────────────

    def iterate(self) -> Iterator[IPAddress]:
        """Every address from first to last inclusive, in increasing order."""
        current = int(self.first_address())
        last = int(self.last_address())
        while True:
            yield self._from_int(current)
            if current == last:
                return
            current += 1

    def __iter__(self) -> Iterator[IPAddress]:
        return self.iterate()

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            try:
                item = ipaddress.ip_address(item)
            except ValueError:
                return False
        if not isinstance(item, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            return False
        if item.version != self.address.version:
            return False
        return int(self.first_address()) <= int(item) <= int(self.last_address())

    # ── Derived ranges ────────────────────────────────────────────────────────

    def with_address(self, address: IPAddress | str) -> "AddressRange":
        if isinstance(address, str):
            address = ipaddress.ip_address(address)
        return replace(self, address=address)

    def with_prefix(self, prefix_length: int) -> "AddressRange":
        return replace(self, prefix_length=prefix_length)

    # ── Text form ─────────────────────────────────────────────────────────────

    def format(self) -> str:
        return f"{self.address}/{self.prefix_length}"

    def __str__(self) -> str:
        return self.format()
