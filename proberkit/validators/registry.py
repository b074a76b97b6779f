"""Builds named validators from their configurations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from proberkit.validators.http_validator import HttpValidator, HttpValidatorConfig
from proberkit.validators.integrity_validator import (
    IntegrityValidator,
    IntegrityValidatorConfig,
)
from proberkit.validators.regex_validator import RegexValidator


class _Validator(Protocol):
    def validate(self, response, body) -> bool: ...


@dataclass
class ValidatorConfig:
    """Configuration of one validator; exactly one validator type must be set."""

    name: str
    http_validator: Optional[HttpValidatorConfig] = None
    integrity_validator: Optional[IntegrityValidatorConfig] = None
    regex: Optional[str] = None


@dataclass
class NamedValidator:
    """A validator together with the name it was configured under."""

    name: str
    validator: _Validator

    def validate(self, response, body) -> bool:
        return self.validator.validate(response, body)


def _build(config: ValidatorConfig) -> _Validator:
    chosen = [
        (kind, value)
        for kind, value in (
            ("http_validator", config.http_validator),
            ("integrity_validator", config.integrity_validator),
            ("regex", config.regex),
        )
        if value is not None
    ]
    if len(chosen) != 1:
        kinds = ", ".join(kind for kind, _ in chosen) or "none"
        raise ValueError(f"unknown validator type for {config.name!r}: {kinds}")

    kind, value = chosen[0]
    if kind == "http_validator":
        return HttpValidator(value)
    if kind == "integrity_validator":
        return IntegrityValidator(value)
    return RegexValidator(value)


def init_validators(configs) -> list[NamedValidator]:
    """Build the validators described by ``configs``, keeping their order.

    Raises ValueError if a name is used twice or a configuration is invalid.
    """
    validators: list[NamedValidator] = []
    seen: set[str] = set()
    for config in configs:
        if config.name in seen:
            raise ValueError(f"validator {config.name} is defined twice")
        validators.append(NamedValidator(config.name, _build(config)))
        seen.add(config.name)
    return validators