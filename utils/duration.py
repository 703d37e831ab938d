"""
utils/duration.py
Human-readable duration parser for the --timeout option.

Accepts:
  "1s"        → 1.0
  "500ms"     → 0.5
  "1m30s"     → 90.0
  "1.5 s"     → 1.5
  "2"         → 2.0   (bare number = seconds)

Rejects:
  "", "abc", "5 parsecs", "0s", "-1s"
"""

from __future__ import annotations

import re
from typing import Dict


class DurationParseError(ValueError):
    """Raised when a duration string is invalid."""


_UNITS: Dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6, "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0, "sec": 1.0, "secs": 1.0,
    "m": 60.0, "min": 60.0, "mins": 60.0,
    "h": 3600.0, "hr": 3600.0, "hrs": 3600.0,
    "d": 86400.0,
}

_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_TERM_RE   = re.compile(r"([0-9]+(?:\.[0-9]+)?)\s*([a-zµ]+)", re.IGNORECASE)


def parse_duration(text: str) -> float:
    """
    Parse a duration string → seconds.

    Raises DurationParseError on any invalid input.
    """
    if not isinstance(text, str):
        raise DurationParseError(f"Expected string, got {type(text).__name__}")

    spec = text.strip()
    if not spec:
        raise DurationParseError("Duration is empty")

    if _NUMBER_RE.fullmatch(spec):
        total = float(spec)
    else:
        total = 0.0
        pos = 0
        for m in _TERM_RE.finditer(spec):
            if spec[pos:m.start()].strip():
                raise DurationParseError(f"Invalid duration: {text!r}")
            unit = m.group(2).lower()
            if unit not in _UNITS:
                raise DurationParseError(
                    f"Unknown time unit {m.group(2)!r} in {text!r}"
                )
            total += float(m.group(1)) * _UNITS[unit]
            pos = m.end()
        if pos == 0 or spec[pos:].strip():
            raise DurationParseError(f"Invalid duration: {text!r}")

    if total <= 0:
        raise DurationParseError(f"Duration must be positive: {text!r}")
    return total
