"""Resource discovery service: request and response types and the server."""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, runtime_checkable


class IPType(enum.Enum):
    """Which address of a resource to report."""

    DEFAULT = 0
    PUBLIC = 1
    ALIAS = 2


@dataclass
class IPConfig:
    nic_index: int = 0
    ip_type: IPType = IPType.DEFAULT


@dataclass
class ResourceFilter:
    key: str
    value: str


@dataclass
class Resource:
    name: str
    ip: str = ""


@dataclass
class ListResourcesRequest:
    provider: str = ""
    resource_path: str = ""
    filters: list[ResourceFilter] = field(default_factory=list)
    ip_config: Optional[IPConfig] = None


@dataclass
class ListResourcesResponse:
    resources: list[Resource] = field(default_factory=list)


@runtime_checkable
class Provider(Protocol):
    """A source of resources, e.g. a cloud platform."""

    def list_resources(self, request: ListResourcesRequest) -> ListResourcesResponse: ...


class UnsupportedProviderError(LookupError):
    """Raised when a request names a provider the server does not have."""


class Server:
    """Dispatches resource listing requests to the provider they name."""

    def __init__(self, providers: Optional[Mapping[str, Provider]] = None) -> None:
        self._providers: dict[str, Provider] = dict(providers or {})
        self._lock = threading.Lock()

    def add_provider(self, provider_id: str, provider: Provider) -> None:
        """Register ``provider`` under ``provider_id``, replacing any earlier one."""
        with self._lock:
            self._providers[provider_id] = provider

    def list_resources(self, request: ListResourcesRequest) -> ListResourcesResponse:
        with self._lock:
            provider = self._providers.get(request.provider)
        if provider is None:
            raise UnsupportedProviderError(f"provider {request.provider} is not supported")
        return provider.list_resources(request)