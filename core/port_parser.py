"""
core/port_parser.py
Port specification parser for the --ports option.

Accepts:
  "80"                 → [80]
  "80,443"             → [80, 443]
  "1-1000"             → [1..1000]
  "22,80-100,443"      → merged & sorted, deduped
  "-"                  → all ports (0-65535)

Rejects:
  "abc", "99999", "-5", "100-50", "", None
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Set

from utils.constants import PORT_MIN, PORT_MAX


# ─── Custom Exceptions ────────────────────────────────────────────────────────

class PortParseError(ValueError):
    """Raised when port specification is invalid."""


ALL_PORTS: List[int] = list(range(PORT_MIN, PORT_MAX + 1))


# ─── Parser ───────────────────────────────────────────────────────────────────

class PortParser:
    """
    Parse a port specification string.

    All errors raise PortParseError with a human-readable message.
    """

    _SINGLE_RE = re.compile(r"[0-9]+")
    _RANGE_RE  = re.compile(r"([0-9]+)-([0-9]+)")

    # ── Public API ────────────────────────────────────────────────────────────

    def parse(self, spec: str) -> List[int]:
        """
        Parse port spec → sorted deduplicated list.

        Raises PortParseError on any invalid input.
        """
        if not isinstance(spec, str):
            raise PortParseError(f"Expected string, got {type(spec).__name__}")

        spec = spec.strip()
        if not spec:
            raise PortParseError("Port specification is empty")

        # Special keyword: all ports
        if spec == "-":
            return list(ALL_PORTS)

        ports: Set[int] = set()
        for part in spec.split(","):
            part = part.strip()
            if not part:
                continue
            ports.update(self._parse_token(part))

        if not ports:
            raise PortParseError(f"No valid ports parsed from: {spec!r}")

        return sorted(ports)

    def parse_many(self, specs: Iterable[str]) -> List[int]:
        """Merge several specs (one per CLI value) → sorted deduplicated list."""
        ports: Set[int] = set()
        for spec in specs:
            ports.update(self.parse(spec))
        return sorted(ports)

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _parse_token(self, token: str) -> List[int]:
        if self._SINGLE_RE.fullmatch(token):
            return [self._validated(int(token))]

        m = self._RANGE_RE.fullmatch(token)
        if m:
            start, end = int(m.group(1)), int(m.group(2))
            self._validated(start)
            self._validated(end)
            if start > end:
                raise PortParseError(
                    f"Invalid range {start}-{end}: start > end"
                )
            return list(range(start, end + 1))

        raise PortParseError(
            f"Invalid port token: {token!r}  "
            f"(expected integer or start-end range)"
        )

    @staticmethod
    def _validated(port: int) -> int:
        if not (PORT_MIN <= port <= PORT_MAX):
            raise PortParseError(
                f"Port {port} out of valid range [{PORT_MIN}, {PORT_MAX}]"
            )
        return port


# ── Module-level convenience ──────────────────────────────────────────────────

_default_parser = PortParser()


def parse_ports(spec: str) -> List[int]:
    return _default_parser.parse(spec)


def resolve_ports(values: Optional[List[str]]) -> Optional[List[int]]:
    """
    Three-way --ports input:
      None            → None      (host probe only)
      []              → 0..65535  (flag given without values)
      ["22", "80-90"] → exactly those ports
    """
    if values is None:
        return None
    if not values:
        return list(ALL_PORTS)
    return _default_parser.parse_many(values)
