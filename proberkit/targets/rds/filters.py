"""Common filters for resource discovery providers."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from fractions import Fraction

_UNIT_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as "300ms", "-1.5h" or "2h45m"."""
    rest = text
    sign = 1
    if rest[:1] in ("-", "+"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"invalid duration {text!r}")

    total = Fraction(0)
    position = 0
    while position < len(rest):
        match = _COMPONENT.match(rest, position)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += Fraction(match.group(1)) * _UNIT_NANOS[match.group(2)]
        position = match.end()

    return timedelta(microseconds=float(sign * total / 1000))


class RegexFilter:
    """Matches names against a regular expression, anywhere in the name."""

    def __init__(self, pattern: str) -> None:
        try:
            self._regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid regex {pattern!r}: {exc}") from exc

    def match(self, name: str) -> bool:
        return self._regex.search(name) is not None


class FreshnessFilter:
    """Matches times that lie within a fixed duration of now."""

    def __init__(self, duration: str) -> None:
        self.duration = parse_duration(duration)

    def match(self, when: datetime) -> bool:
        now = datetime.now(when.tzinfo) if when.tzinfo is not None else datetime.now()
        return now - when < self.duration