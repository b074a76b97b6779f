"""Runtime-configuration variables as resources for the resource discovery service."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from proberkit.targets.rds.filters import FreshnessFilter, RegexFilter
from proberkit.targets.rds.server import Resource, ResourceFilter
from proberkit.targets.rtcservice import Variable, parse_rfc3339

logger = logging.getLogger(__name__)

FetchVariables = Callable[[str, str], Iterable[Variable]]


@dataclass
class RtcVar:
    """A variable's short name and the time it was last updated."""

    name: str
    update_time: datetime


def process_var(variable: Variable) -> RtcVar:
    """Turn a variable with a full path name into an RtcVar."""
    parts = variable.name.split("/")
    if len(parts) == 1:
        raise ValueError(f"invalid variable name: {variable.name}")
    try:
        update_time = parse_rfc3339(variable.update_time)
    except ValueError as exc:
        raise ValueError(
            f"could not parse variable({variable.name}) update time "
            f"({variable.update_time}): {exc}"
        ) from exc
    return RtcVar(parts[-1], update_time)


class RtcVariablesLister:
    """Lists variables of a project's configs from a cache filled by ``expand``."""

    def __init__(self, project: str, fetch_variables: Optional[FetchVariables] = None) -> None:
        self.project = project
        self._fetch_variables = fetch_variables
        self._lock = threading.Lock()
        self._cache: dict[str, list[RtcVar]] = {}

    def set_config_vars(self, config_name: str, rtc_vars: Iterable[RtcVar]) -> None:
        """Replace the cached variables of ``config_name``."""
        with self._lock:
            self._cache[config_name] = list(rtc_vars)

    def expand(self, config_name: str) -> None:
        """Fetch the variables of ``config_name`` and cache them.

        On a fetch error the cache is left unchanged; variables that cannot
        be processed are skipped.
        """
        if self._fetch_variables is None:
            raise RuntimeError("no variable source configured")
        logger.info(
            "rtc_variables.expand: expanding RTC vars for project (%s) and config (%s)",
            self.project,
            config_name,
        )
        try:
            variables = list(self._fetch_variables(self.project, config_name))
        except Exception as exc:
            logger.error(
                "rtc_variables.expand: error while getting list of all vars for config %s: %s",
                config_name,
                exc,
            )
            return

        result: list[RtcVar] = []
        for variable in variables:
            try:
                result.append(process_var(variable))
            except ValueError as exc:
                logger.error("Error processing the RTC variable (%s): %s", variable.name, exc)
        self.set_config_vars(config_name, result)

    def list_resources(self, filters: Optional[Iterable[ResourceFilter]] = None) -> list[Resource]:
        """Return the cached variables, filtered by config name and freshness."""
        config_filter: Optional[RegexFilter] = None
        freshness_filter: Optional[FreshnessFilter] = None
        for f in filters or ():
            if f.key == "config_name":
                try:
                    config_filter = RegexFilter(f.value)
                except ValueError as exc:
                    raise ValueError(
                        f"rtc_variables: error creating regex filter from: {f.value}, err: {exc}"
                    ) from exc
            elif f.key == "updated_within":
                try:
                    freshness_filter = FreshnessFilter(f.value)
                except ValueError as exc:
                    raise ValueError(
                        f"rtc_variables: error creating freshness filter from: {f.value}, "
                        f"err: {exc}"
                    ) from exc
            else:
                raise ValueError(f"rtc_variables: Invalid filter key: {f.key}")

        with self._lock:
            snapshot = {name: list(rtc_vars) for name, rtc_vars in self._cache.items()}

        return [
            Resource(name=rtc_var.name)
            for config_name, rtc_vars in snapshot.items()
            if config_filter is None or config_filter.match(config_name)
            for rtc_var in rtc_vars
            if freshness_filter is None or freshness_filter.match(rtc_var.update_time)
        ]