"""Compute instances as resources for the resource discovery service.

A lister keeps a cache of instances and their network interfaces. The cache
is filled by ``expand``, and listing only reads the cache.
"""

from __future__ import annotations

import ipaddress
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence, Tuple, Union

from proberkit.targets.rds.filters import RegexFilter
from proberkit.targets.rds.server import IPConfig, IPType, Resource, ResourceFilter

logger = logging.getLogger(__name__)

Instances = Union[Mapping[str, Sequence["NetworkInterface"]], Iterable[Tuple[str, Sequence["NetworkInterface"]]]]
FetchInstances = Callable[[str], Instances]


@dataclass
class NetworkInterface:
    """A network interface of an instance.

    ``nat_ips`` holds the public addresses of its access configs and
    ``alias_ip_ranges`` its alias ranges, as addresses or CIDR ranges.
    """

    network_ip: str = ""
    nat_ips: list[str] = field(default_factory=list)
    alias_ip_ranges: list[str] = field(default_factory=list)


def _alias_ip(ip_range: str) -> str:
    try:
        return str(ipaddress.ip_address(ip_range))
    except ValueError:
        pass
    if "/" not in ip_range:
        raise ValueError(f"invalid CIDR address: {ip_range}")
    return str(ipaddress.ip_interface(ip_range).ip)


class GceInstancesLister:
    """Lists running instances of one project, excluding this instance."""

    def __init__(
        self,
        project: str,
        fetch_instances: Optional[FetchInstances] = None,
        this_instance: str = "",
    ) -> None:
        self.project = project
        self.this_instance = this_instance
        self._fetch_instances = fetch_instances
        self._lock = threading.RLock()
        self._names: list[str] = []
        self._cache: dict[str, list[NetworkInterface]] = {}

    def update(self, instances: Instances) -> None:
        """Replace the cache with ``instances`` (name to network interfaces)."""
        items = instances.items() if isinstance(instances, Mapping) else instances
        names: list[str] = []
        cache: dict[str, list[NetworkInterface]] = {}
        for name, interfaces in items:
            if name == self.this_instance:
                continue
            cache[name] = list(interfaces)
            names.append(name)
        with self._lock:
            self._names = names
            self._cache = cache

    def expand(self) -> None:
        """Fetch the project's instances and refill the cache.

        On a fetch error the current cache is kept, so a partial listing
        never replaces a complete one.
        """
        if self._fetch_instances is None:
            raise RuntimeError("no instance source configured")
        logger.info("gce_instances.expand: expanding GCE targets for project: %s", self.project)
        try:
            instances = self._fetch_instances(self.project)
            if isinstance(instances, Mapping):
                instances = dict(instances)
            else:
                instances = list(instances)
        except Exception as exc:
            logger.error("gce_instances.expand: error while getting list of all instances: %s", exc)
            return
        self.update(instances)

    def list_resources(
        self,
        filters: Optional[Iterable[ResourceFilter]] = None,
        ip_config: Optional[IPConfig] = None,
    ) -> list[Resource]:
        """Return one resource per cached instance, with the address ``ip_config`` selects."""
        name_filter: Optional[RegexFilter] = None
        for f in filters or ():
            if f.key != "name":
                raise ValueError(f"gce_instances: Invalid filter key: {f.key}")
            try:
                name_filter = RegexFilter(f.value)
            except ValueError as exc:
                raise ValueError(
                    f"gce_instances: error creating regex filter from: {f.value}, err: {exc}"
                ) from exc

        nic_index = ip_config.nic_index if ip_config is not None else 0
        ip_type = ip_config.ip_type if ip_config is not None else IPType.DEFAULT

        resources: list[Resource] = []
        with self._lock:
            for name in self._names:
                if name_filter is not None and not name_filter.match(name):
                    continue
                interfaces = self._cache.get(name, [])
                if not 0 <= nic_index < len(interfaces):
                    raise ValueError(
                        f"gce_instances: instance {name} doesn't have network interface "
                        f"at index {nic_index}"
                    )
                nic = interfaces[nic_index]

                if ip_type is IPType.PUBLIC:
                    if not nic.nat_ips:
                        raise ValueError(
                            f"gce_instances (instance: {name}, network_interface: "
                            f"{nic_index}): no public IP"
                        )
                    ip = nic.nat_ips[0]
                elif ip_type is IPType.ALIAS:
                    if not nic.alias_ip_ranges:
                        raise ValueError(f"gce_instances: instance {name} has no alias IP range")
                    try:
                        ip = _alias_ip(nic.alias_ip_ranges[0])
                    except ValueError as exc:
                        raise ValueError(
                            f"gce_instances (instance: {name}, network_interface: "
                            f"{nic_index}): error getting alias IP: {exc}"
                        ) from exc
                else:
                    ip = nic.network_ip

                resources.append(Resource(name=name, ip=ip))
        return resources