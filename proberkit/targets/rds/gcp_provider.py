"""Cloud platform provider for the resource discovery service.

Resource paths have the form ``<resource type>/<project>``; the supported
types are ``gce_instances`` and ``rtc_variables``.
"""

from __future__ import annotations

from typing import Mapping, Optional

from proberkit.targets.rds.gce_instances import GceInstancesLister
from proberkit.targets.rds.rtc_variables import RtcVariablesLister
from proberkit.targets.rds.server import ListResourcesRequest, ListResourcesResponse


class GcpProvider:
    """Serves resources from per-project instance and variable listers."""

    def __init__(
        self,
        gce_instances: Optional[Mapping[str, GceInstancesLister]] = None,
        rtc_variables: Optional[Mapping[str, RtcVariablesLister]] = None,
    ) -> None:
        self.gce_instances = dict(gce_instances or {})
        self.rtc_variables = dict(rtc_variables or {})

    def list_resources(self, request: ListResourcesRequest) -> ListResourcesResponse:
        parts = request.resource_path.split("/", 1)
        if len(parts) != 2:
            raise ValueError(f"{request.resource_path} is not a valid GCP resource path")
        resource_type, project = parts

        if resource_type == "gce_instances":
            gce_lister = self.gce_instances.get(project)
            if gce_lister is None:
                raise LookupError(f"gcp: GCE instances lister for the project {project} not found")
            resources = gce_lister.list_resources(request.filters, request.ip_config)
        elif resource_type == "rtc_variables":
            rtc_lister = self.rtc_variables.get(project)
            if rtc_lister is None:
                raise LookupError(f"gcp: RTC variables lister for the project {project} not found")
            resources = rtc_lister.list_resources(request.filters)
        else:
            raise ValueError(f"gcp: unsupported resource type: {resource_type}")
        return ListResourcesResponse(resources=resources)