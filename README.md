# proberkit

Building blocks for network probers: discovering resources to probe,
reporting a host's addresses to a shared key/value store, and checking probe
responses. It has no dependencies beyond the standard library.

## Installation

```
pip install proberkit
```

For running the test suite:

```
pip install "proberkit[test]"
pytest
```

## Validators

```python
from proberkit.validators.http_validator import HttpValidator, HttpValidatorConfig
from proberkit.validators.regex_validator import RegexValidator

http_check = HttpValidator(HttpValidatorConfig(success_status_codes="200-299,301"))
body_check = RegexValidator("cloud.*")

body_check.validate(None, b"cloudprober")   # True
```

- `proberkit.validators.http_validator.HttpValidator` judges a response by its
  status code, read from a `status_code` or `status` attribute. Codes listed in
  `failure_status_codes` fail; otherwise codes listed in
  `success_status_codes` pass; anything else fails. Code lists are
  comma-separated codes and ranges such as `"302,200-299"`, parsed by
  `parse_status_code_config` into `NumRange` values.
- `proberkit.validators.regex_validator.RegexValidator` passes a body in which
  the pattern matches anywhere. An empty or invalid pattern raises
  `ValueError`.
- `proberkit.validators.integrity_validator.IntegrityValidator` passes a body
  that repeats a fixed pattern (`IntegrityValidatorConfig.pattern_string`) or
  its own first N bytes (`pattern_num_bytes`, or
  `pattern_num_bytes_validator(n)`). A body shorter than N bytes raises
  `ValueError`.
- `proberkit.validators.registry.init_validators(configs)` builds a list of
  `NamedValidator` from `ValidatorConfig` records, each naming exactly one of
  `http_validator`, `integrity_validator` or `regex`, and raises `ValueError`
  on a duplicate name or an invalid configuration.

## Runtime configuration stores

- `proberkit.targets.rtcservice` holds the `Variable` record (a name, a
  base64-encoded value and an RFC 3339 update time), the `RtcConfig`
  interface, `RtcStub`, an in-memory store, and `parse_rfc3339`.
- `proberkit.targets.rtcreporter.Reporter` writes an `RtcTargetInfo` record
  (host name, groups and tagged addresses taken from a dict of system
  variables) into each configured store. Stores are opened through a
  `config_factory(project, name)` callable; `start(stop_event)` reports once
  per `interval_msec` until the event is set. `RtcTargetInfo.encode()` and
  `decode()` use JSON.

## Resource discovery

- `proberkit.targets.rds.server` defines the request and response records
  (`ListResourcesRequest`, `ListResourcesResponse`, `Resource`,
  `ResourceFilter`, `IPConfig`, `IPType`), the `Provider` interface, and
  `Server`, which hands each request to the provider it names and raises
  `UnsupportedProviderError` for an unknown one.
- `proberkit.targets.rds.gcp_provider.GcpProvider` answers requests whose
  resource path is `gce_instances/<project>` or `rtc_variables/<project>`.
- `proberkit.targets.rds.gce_instances.GceInstancesLister` serves instances
  from a cache filled by `update(instances)` or by `expand()`, which calls a
  `fetch_instances(project)` callable. It supports a `name` regex filter and
  picks the private, public or alias address of the chosen network interface.
- `proberkit.targets.rds.rtc_variables.RtcVariablesLister` serves variables
  cached per config by `set_config_vars` or `expand(config_name)`, with
  `config_name` regex and `updated_within` duration filters.
- `proberkit.targets.rds.filters` provides `RegexFilter`, `FreshnessFilter`
  and `parse_duration` for durations such as `"5m"` or `"1h30m"`.

```python
from proberkit.targets.rds.gce_instances import GceInstancesLister, NetworkInterface
from proberkit.targets.rds.gcp_provider import GcpProvider
from proberkit.targets.rds.server import ListResourcesRequest, Server

lister = GceInstancesLister("my-project")
lister.update({"vm-1": [NetworkInterface(network_ip="10.0.0.1")]})

server = Server({"gcp": GcpProvider(gce_instances={"my-project": lister})})
response = server.list_resources(
    ListResourcesRequest(provider="gcp", resource_path="gce_instances/my-project")
)
print(response.resources)   # [Resource(name='vm-1', ip='10.0.0.1')]
```

## What this package does not do

- It does not list or resolve probe targets from target definitions, and it
  does not resolve host names through DNS.
- It has no client that polls a discovery server, and `Server` is an
  in-process dispatcher: it does not listen on a network port.
- It does not talk to any cloud API itself. Instance and variable listers get
  their data from the callables you pass in, and the reporter writes only to
  the stores its `config_factory` returns.
- It provides no command-line programs.