from datetime import datetime, timedelta, timezone

import pytest

from proberkit.targets.rds.rtc_variables import RtcVar, RtcVariablesLister, process_var
from proberkit.targets.rds.server import ResourceFilter
from proberkit.targets.rtcservice import Variable


def _now():
    return datetime.now(timezone.utc)


def test_process_var_valid():
    update_time = _now() - timedelta(minutes=6)
    got = process_var(Variable(name="config1/v1", update_time=update_time.isoformat()))
    assert got.name == "v1"
    assert got.update_time == update_time


def test_process_var_invalid_name():
    with pytest.raises(ValueError):
        process_var(Variable(name="invalidname", update_time=_now().isoformat()))


def test_process_var_invalid_time():
    with pytest.raises(ValueError):
        process_var(Variable(name="c/v1", update_time="yesterday"))


@pytest.fixture
def lister():
    rvl = RtcVariablesLister("proj")
    rvl.set_config_vars(
        "c1",
        [RtcVar("v1", _now() - timedelta(minutes=6)), RtcVar("v2", _now() - timedelta(minutes=1))],
    )
    rvl.set_config_vars("c2", [RtcVar("v3", _now() - timedelta(minutes=1))])
    return rvl


def _names(resources):
    return sorted(r.name for r in resources)


def test_list_no_filter(lister):
    assert _names(lister.list_resources(None)) == ["v1", "v2", "v3"]


def test_list_config_and_freshness(lister):
    filters = [ResourceFilter("config_name", "c1"), ResourceFilter("updated_within", "5m")]
    assert _names(lister.list_resources(filters)) == ["v2"]


def test_list_config_regex_matches_both(lister):
    assert _names(lister.list_resources([ResourceFilter("config_name", "c")])) == ["v1", "v2", "v3"]


def test_invalid_filter_key(lister):
    with pytest.raises(ValueError):
        lister.list_resources([ResourceFilter("name", "v1")])


def test_invalid_duration(lister):
    with pytest.raises(ValueError):
        lister.list_resources([ResourceFilter("updated_within", "five minutes")])


def test_expand_skips_bad_variables():
    recent = (_now() - timedelta(minutes=1)).isoformat()

    def fetch(project, config_name):
        assert (project, config_name) == ("proj", "cfg")
        return [
            Variable(name="projects/proj/configs/cfg/variables/good", update_time=recent),
            Variable(name="bad", update_time=recent),
        ]

    rvl = RtcVariablesLister("proj", fetch)
    rvl.expand("cfg")
    assert _names(rvl.list_resources()) == ["good"]


def test_expand_error_keeps_cache(lister):
    def fetch(project, config_name):
        raise RuntimeError("api down")

    rvl = RtcVariablesLister("proj", fetch)
    rvl.set_config_vars("c1", [RtcVar("v9", _now())])
    rvl.expand("c1")
    assert _names(rvl.list_resources()) == ["v9"]