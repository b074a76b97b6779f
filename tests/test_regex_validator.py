import pytest

from proberkit.validators.regex_validator import RegexValidator


def test_empty_config():
    with pytest.raises(ValueError):
        RegexValidator("")


def test_invalid_regex():
    with pytest.raises(ValueError):
        RegexValidator("(cloudprober")


def test_non_string_config():
    with pytest.raises(TypeError):
        RegexValidator(42)


@pytest.mark.parametrize(
    "regex, body, expected",
    [
        ("cloud.*", b"cloudprober", True),
        ("[Cc]loud.*", b"Cloudprober", True),
        ("^prober", b"cloudprober", False),
    ],
)
def test_pattern(regex, body, expected):
    assert RegexValidator(regex).validate(None, body) is expected


def test_str_body():
    assert RegexValidator("prober$").validate(None, "cloudprober") is True