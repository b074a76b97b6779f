from datetime import datetime, timedelta, timezone

import pytest

from proberkit.targets.rds.filters import FreshnessFilter, RegexFilter, parse_duration


def test_parse_minutes():
    assert parse_duration("5m") == timedelta(minutes=5)


def test_parse_zero():
    assert parse_duration("0") == timedelta(0)


@pytest.mark.parametrize(
    "left, right",
    [
        ("90s", "1m30s"),
        ("1.5h", "90m"),
        ("1000ms", "1s"),
        ("1500us", "1.5ms"),
        ("+2h", "120m"),
    ],
)
def test_equivalent_durations(left, right):
    assert parse_duration(left) == parse_duration(right)


def test_negative_duration():
    assert parse_duration("-5m") == -parse_duration("5m")


@pytest.mark.parametrize("text", ["", "5", "5x", "m", "1.2.3s", "-", "5m3"])
def test_invalid_duration(text):
    with pytest.raises(ValueError):
        parse_duration(text)


def test_regex_filter_matches():
    f = RegexFilter("ins2")
    assert f.match("ins2")
    assert not f.match("ins1")


def test_regex_filter_matches_substring():
    f = RegexFilter("c")
    assert f.match("c1")
    assert f.match("c2")
    assert not f.match("x1")


def test_regex_filter_invalid():
    with pytest.raises(ValueError):
        RegexFilter("(")


def test_freshness_filter_aware():
    f = FreshnessFilter("5m")
    now = datetime.now(timezone.utc)
    assert f.match(now - timedelta(minutes=1))
    assert not f.match(now - timedelta(minutes=6))


def test_freshness_filter_naive():
    f = FreshnessFilter("5m")
    now = datetime.now()
    assert f.match(now - timedelta(minutes=1))
    assert not f.match(now - timedelta(minutes=6))


def test_freshness_filter_invalid_duration():
    with pytest.raises(ValueError):
        FreshnessFilter("five minutes")