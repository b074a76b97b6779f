"""Validator that matches response bodies against a regular expression."""

from __future__ import annotations

import re
from typing import Union


class RegexValidator:
    """Accepts bodies in which the configured regex finds a match."""

    def __init__(self, pattern: str) -> None:
        if not isinstance(pattern, str):
            raise TypeError(f"{pattern!r} is not a valid regex validator config")
        if not pattern:
            raise ValueError("validator regex string cannot be empty")
        try:
            self._regex = re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"error compiling the given regex ({pattern}): {exc}") from exc

    def validate(self, response, body: Union[bytes, str]) -> bool:
        """Return True if the body matches; the response object is not used."""
        if isinstance(body, (bytes, bytearray)):
            body = bytes(body).decode("utf-8", "surrogateescape")
        return self._regex.search(body or "") is not None