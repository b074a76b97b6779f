import pytest

from proberkit.targets.rds.gce_instances import GceInstancesLister, NetworkInterface
from proberkit.targets.rds.server import IPConfig, IPType, ResourceFilter

TEST_DATA = {
    "ins1": [
        ("10.216.0.1", "104.100.143.1", "192.168.1.0/24"),
        ("10.216.1.1", "", ""),
    ],
    "ins2": [
        ("10.216.0.2", "104.100.143.2", "192.168.2.0/24"),
        ("10.216.1.2", "104.100.143.3", ""),
    ],
}


def _interfaces(rows):
    return [
        NetworkInterface(
            network_ip=private,
            nat_ips=[public] if public else [],
            alias_ip_ranges=[alias] if alias else [],
        )
        for private, public, alias in rows
    ]


def _instances():
    return [(name, _interfaces(rows)) for name, rows in TEST_DATA.items()]


@pytest.fixture
def lister():
    gil = GceInstancesLister("proj")
    gil.update(_instances())
    return gil


def _as_map(resources):
    return {r.name: r.ip for r in resources}


def test_private_first_nic(lister):
    got = _as_map(lister.list_resources(None, None))
    assert got == {"ins1": "10.216.0.1", "ins2": "10.216.0.2"}


def test_bad_filter_key(lister):
    with pytest.raises(ValueError):
        lister.list_resources([ResourceFilter("instance_name", "ins2")], None)


def test_name_filter(lister):
    got = _as_map(lister.list_resources([ResourceFilter("name", "ins2")], None))
    assert got == {"ins2": "10.216.0.2"}


def test_public_ip(lister):
    got = _as_map(lister.list_resources(None, IPConfig(ip_type=IPType.PUBLIC)))
    assert got == {"ins1": "104.100.143.1", "ins2": "104.100.143.2"}


def test_alias_ip(lister):
    got = _as_map(lister.list_resources(None, IPConfig(ip_type=IPType.ALIAS)))
    assert got == {"ins1": "192.168.1.0", "ins2": "192.168.2.0"}


def test_second_nic_private(lister):
    got = _as_map(lister.list_resources(None, IPConfig(nic_index=1)))
    assert got == {"ins1": "10.216.1.1", "ins2": "10.216.1.2"}


def test_second_nic_public_missing(lister):
    with pytest.raises(ValueError):
        lister.list_resources(None, IPConfig(nic_index=1, ip_type=IPType.PUBLIC))


def test_missing_nic_index(lister):
    with pytest.raises(ValueError):
        lister.list_resources(None, IPConfig(nic_index=2))


def test_alias_missing(lister):
    with pytest.raises(ValueError):
        lister.list_resources(None, IPConfig(nic_index=1, ip_type=IPType.ALIAS))


def test_order_preserved(lister):
    assert [r.name for r in lister.list_resources()] == ["ins1", "ins2"]


def test_expand_skips_this_instance():
    calls = []

    def fetch(project):
        calls.append(project)
        return _instances()

    gil = GceInstancesLister("proj", fetch, this_instance="ins1")
    gil.expand()
    assert calls == ["proj"]
    assert _as_map(gil.list_resources()) == {"ins2": "10.216.0.2"}


def test_expand_error_keeps_cache():
    results = [_instances()]

    def fetch(project):
        if results:
            return results.pop()
        raise RuntimeError("api down")

    gil = GceInstancesLister("proj", fetch)
    gil.expand()
    gil.expand()
    assert [r.name for r in gil.list_resources()] == ["ins1", "ins2"]