"""Validator that checks HTTP response status codes."""

from __future__ import annotations

import re
from dataclasses import dataclass

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_INTEGER = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class NumRange:
    """An inclusive range of integers."""

    lower: int
    upper: int

    def contains(self, value: int) -> bool:
        return self.lower <= value <= self.upper


def _parse_int32(text: str, bound: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"got error while parsing the range's {bound} bound ({text}): not an integer")
    value = int(text)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"got error while parsing the range's {bound} bound ({text}): out of range")
    return value


def parse_num_range(text: str) -> NumRange:
    """Parse "403" or "200-299" into a NumRange."""
    fields = text.split("-")
    if len(fields) > 2:
        raise ValueError(f"number range {text} is not in correct format (200 or 100-199)")

    lower = _parse_int32(fields[0], "lower")
    if len(fields) == 1:
        return NumRange(lower, lower)

    upper = _parse_int32(fields[1], "upper")
    if upper < lower:
        raise ValueError(f"upper bound cannot be smaller than the lower bound ({text})")
    return NumRange(lower, upper)


def parse_status_code_config(text: str) -> list[NumRange]:
    """Parse a comma-separated list of codes and code ranges, e.g. "302,200-299"."""
    return [parse_num_range(code) for code in text.split(",")]


def lookup_status_code(status_code: int, ranges) -> bool:
    """Return True if ``status_code`` falls in any of ``ranges``."""
    return any(r.contains(status_code) for r in ranges)


@dataclass
class HttpValidatorConfig:
    success_status_codes: str = ""
    failure_status_codes: str = ""


def _status_of(response) -> int:
    for attribute in ("status_code", "status"):
        status = getattr(response, attribute, None)
        if isinstance(status, int):
            return status
    raise TypeError(f"input {response!r} is not an HTTP response")


class HttpValidator:
    """Accepts responses whose status is a success code and not a failure code."""

    def __init__(self, config: HttpValidatorConfig) -> None:
        if not isinstance(config, HttpValidatorConfig):
            raise TypeError(f"{config!r} is not a valid HTTP validator config")
        self.config = config
        self.success_ranges = (
            parse_status_code_config(config.success_status_codes)
            if config.success_status_codes
            else []
        )
        self.failure_ranges = (
            parse_status_code_config(config.failure_status_codes)
            if config.failure_status_codes
            else []
        )

    def validate(self, response, body: bytes = b"") -> bool:
        """Check the response's status code; the body is not used."""
        status = _status_of(response)
        if self.config.failure_status_codes and lookup_status_code(status, self.failure_ranges):
            return False
        if self.config.success_status_codes and lookup_status_code(status, self.success_ranges):
            return True
        return False