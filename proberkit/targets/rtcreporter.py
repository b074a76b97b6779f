"""Reports this instance's addresses to runtime configurations."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from proberkit.targets.rtcservice import RtcConfig

logger = logging.getLogger(__name__)


@dataclass
class RtcAddress:
    tag: str
    address: str


@dataclass
class RtcTargetInfo:
    """What an instance reports about itself: its name, groups and addresses."""

    instance_name: str = ""
    groups: list[str] = field(default_factory=list)
    addresses: list[RtcAddress] = field(default_factory=list)

    def encode(self) -> bytes:
        return json.dumps(
            {
                "instance_name": self.instance_name,
                "groups": list(self.groups),
                "addresses": [{"tag": a.tag, "address": a.address} for a in self.addresses],
            },
            sort_keys=True,
        ).encode("utf-8")

    @classmethod
    def decode(cls, data: bytes) -> "RtcTargetInfo":
        """Parse data made by ``encode``; raises ValueError if it is malformed."""
        try:
            raw = json.loads(bytes(data).decode("utf-8"))
            info = cls(
                instance_name=str(raw.get("instance_name", "")),
                groups=[str(g) for g in raw.get("groups", [])],
                addresses=[
                    RtcAddress(tag=str(a["tag"]), address=str(a["address"]))
                    for a in raw.get("addresses", [])
                ],
            )
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            raise ValueError(f"unable to decode target info: {exc}") from exc
        return info


@dataclass
class RtcReportOptions:
    cfgs: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)
    groups: list[str] = field(default_factory=list)
    interval_msec: int = 10_000


ConfigFactory = Callable[[str, str], RtcConfig]


class Reporter:
    """Periodically writes this instance's target info to a set of configs."""

    def __init__(
        self,
        options: RtcReportOptions,
        sys_vars: dict,
        config_factory: Optional[ConfigFactory] = None,
    ) -> None:
        project = sys_vars.get("project")
        if project is None:
            raise ValueError('sysVars has no "project"')
        if options.cfgs and config_factory is None:
            raise ValueError("a config factory is required to open the configured configs")

        self.configs: list[RtcConfig] = [config_factory(project, name) for name in options.cfgs]

        for variable in options.variables:
            if variable not in sys_vars:
                raise ValueError(f"no sysVar {variable}")

        self.options = options
        self.sys_vars = dict(sys_vars)
        self.report_vars = list(options.variables)
        self.groups = list(options.groups)

    def make_target_info(self) -> RtcTargetInfo:
        return RtcTargetInfo(
            instance_name=self.sys_vars.get("hostname", ""),
            groups=list(self.groups),
            addresses=[RtcAddress(v, self.sys_vars[v]) for v in self.report_vars],
        )

    def report(self, config: RtcConfig) -> None:
        """Write the current target info to ``config`` under the instance name."""
        info = self.make_target_info()
        config.write(info.instance_name, info.encode())

    def start(self, stop_event: threading.Event) -> None:
        """Report to every config once per interval until ``stop_event`` is set."""
        interval = self.options.interval_msec / 1000
        if interval <= 0:
            raise ValueError(f"report interval must be positive, got {self.options.interval_msec}ms")
        while not stop_event.wait(interval):
            for config in self.configs:
                try:
                    self.report(config)
                except Exception as exc:
                    logger.error("Unable to report to RTC config: %s", exc)