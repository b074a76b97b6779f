"""Validator that checks response bodies for data corruption."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class IntegrityValidatorConfig:
    """Exactly one of ``pattern_string`` and ``pattern_num_bytes`` must be set."""

    pattern_string: str = ""
    pattern_num_bytes: int = 0


def _find_mismatch(payload: bytes, pattern: bytes) -> Optional[int]:
    size = len(pattern)
    for offset in range(0, len(payload), size):
        chunk = payload[offset : offset + size]
        if chunk != pattern[: len(chunk)]:
            return offset
    return None


class IntegrityValidator:
    """Accepts bodies made of repetitions of a pattern.

    The pattern is either configured or taken from the first
    ``pattern_num_bytes`` bytes of each body.
    """

    def __init__(self, config: IntegrityValidatorConfig) -> None:
        if not isinstance(config, IntegrityValidatorConfig):
            raise TypeError(f"{config!r} is not a valid integrity validator config")
        if config.pattern_string and config.pattern_num_bytes:
            raise ValueError(
                f"bad integrity validator config ({config}): "
                "only one of pattern_string and pattern_num_bytes may be set"
            )
        if config.pattern_num_bytes < 0:
            raise ValueError(f"bad integrity validator config ({config}): negative pattern_num_bytes")
        self.pattern = config.pattern_string.encode()
        self.pattern_num_bytes = config.pattern_num_bytes
        if not self.pattern and not self.pattern_num_bytes:
            raise ValueError(
                f"bad integrity validator config ({config}): "
                "one of pattern_string and pattern_num_bytes should be set"
            )

    def validate(self, response, body: bytes) -> bool:
        """Return True if the body repeats the pattern throughout."""
        body = bytes(body or b"")
        pattern = self.pattern
        if not pattern:
            if len(body) < self.pattern_num_bytes:
                raise ValueError(
                    f"response ({body!r}) is smaller than the number of pattern bytes "
                    f"({self.pattern_num_bytes})"
                )
            pattern = body[: self.pattern_num_bytes]

        offset = _find_mismatch(body, pattern)
        if offset is not None:
            logger.error(
                "payload does not match pattern %r at offset %d: %r",
                pattern,
                offset,
                body[offset : offset + len(pattern)],
            )
            return False
        return True


def pattern_num_bytes_validator(num_bytes: int) -> IntegrityValidator:
    """Return a validator that takes its pattern from the first ``num_bytes`` bytes."""
    try:
        return IntegrityValidator(IntegrityValidatorConfig(pattern_num_bytes=num_bytes))
    except ValueError as exc:
        raise ValueError(f"error initializing data integrity validator: {exc}") from exc