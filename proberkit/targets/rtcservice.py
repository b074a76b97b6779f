"""Runtime-configuration key/value store interface and an in-memory stub."""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


def parse_rfc3339(text: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Fractions finer than a microsecond are truncated.
    """
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid RFC 3339 time: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    microsecond = int((fraction or "").ljust(6, "0")[:6])
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"invalid time zone offset in {text!r}")
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return datetime(
        int(year),
        int(month),
        int(day),
        int(hour),
        int(minute),
        int(second),
        microsecond,
        tzinfo=tz,
    )


@dataclass
class Variable:
    """A configuration variable; ``value`` holds base64-encoded data."""

    name: str
    value: str = ""
    update_time: str = ""


@runtime_checkable
class RtcConfig(Protocol):
    """A single runtime configuration holding variables."""

    def get_project(self) -> str: ...

    def write(self, key: str, value: bytes) -> None: ...

    def delete(self, key: str) -> None: ...

    def val(self, variable: Variable) -> bytes: ...

    def list(self) -> list[Variable]: ...

    def filter_list(self, filter_text: str) -> list[Variable]: ...


class RtcStub:
    """An in-memory runtime configuration, for tests and local use."""

    def __init__(self) -> None:
        self._variables: dict[str, Variable] = {}

    def get_project(self) -> str:
        return ""

    def write(self, key: str, value: bytes) -> None:
        """Add or replace a variable holding ``value``."""
        encoded = base64.b64encode(bytes(value)).decode("ascii")
        self._variables[key] = Variable(name=key, value=encoded)

    def write_time(self, key: str, value: str, update_time: str) -> None:
        """Store an already-encoded value with the given update time string."""
        self._variables[key] = Variable(name=key, value=value, update_time=update_time)

    def delete(self, key: str) -> None:
        try:
            del self._variables[key]
        except KeyError:
            raise KeyError(f"rtc_stub: key not in map: {key}") from None

    def val(self, variable: Variable) -> bytes:
        """Decode the value of ``variable``; raises ValueError if it is not base64."""
        return base64.b64decode(variable.value, validate=True)

    def list(self) -> list[Variable]:
        return [replace(v) for v in self._variables.values()]

    def filter_list(self, filter_text: str) -> list[Variable]:
        """Filtering is not supported; returns every variable."""
        return self.list()