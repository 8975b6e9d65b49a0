import pytest

from dns_zones.domain import Domain, RecordName
from dns_zones.errors import InvalidNameError


@pytest.mark.parametrize(
    "name",
    ["example.com", "example.com.", "a.b.example.com.", "x", "a-b.c0m", "@", "EXAMPLE.Com.", "a" * 63 + ".com"],
)
def test_valid_domains(name):
    assert Domain.is_valid(name)
    assert str(Domain.parse(name)) == name


@pytest.mark.parametrize(
    "name",
    ["", ".", "a..b", "-a.com", "a-.com", "a_b.com", "a b.com", "a" * 64 + ".com", "*.example.com", "@.com", "com.."],
)
def test_invalid_domains(name):
    assert not Domain.is_valid(name)
    with pytest.raises(InvalidNameError):
        Domain.parse(name)


def test_overlong_name_rejected():
    name = ".".join(["a" * 60] * 5)
    assert len(name) > 253
    assert not Domain.is_valid(name)


def test_error_names_offending_label():
    with pytest.raises(InvalidNameError, match="bad_label"):
        Domain.parse("www.bad_label.com")


def test_parent_walk():
    d = Domain.parse("a.b.example.com")
    seen = []
    while True:
        d, tld = d.parent()
        if tld:
            break
        seen.append(str(d))
    assert seen == ["b.example.com", "example.com", "com"]
    assert str(d) == "com"


def test_parent_keeps_trailing_dot():
    parent, tld = Domain.parse("www.example.com.").parent()
    assert str(parent) == "example.com."
    assert not tld
    same, tld = Domain.parse("com.").parent()
    assert str(same) == "com."
    assert tld


def test_apex_parent_is_tld():
    apex = Domain.parse("@")
    assert apex.parent() == (apex, True)
    assert apex.is_apex


def test_fqdn_and_qualified():
    assert Domain.parse("example.com.").fqdn
    assert not Domain.parse("example.com").fqdn
    assert str(Domain.parse("example.com").qualified()) == "example.com."


def test_equality_ignores_case():
    assert Domain.parse("Example.COM.") == Domain.parse("example.com.")
    assert hash(Domain.parse("Example.COM.")) == hash(Domain.parse("example.com."))
    assert Domain.parse("example.com") != Domain.parse("example.com.")


@pytest.mark.parametrize("name", ["@", "*", "*.www", "www", "a.b", "mail-1"])
def test_valid_record_names(name):
    assert RecordName.is_valid(name)


@pytest.mark.parametrize("name", ["", "www.", "www.*", "**", "*.", "a..b", "-x", "x_y"])
def test_invalid_record_names(name):
    with pytest.raises(InvalidNameError):
        RecordName.parse(name)


def test_record_name_absolute():
    origin = Domain.parse("example.com.")
    assert RecordName.parse("@").absolute(origin) == "example.com."
    assert RecordName.parse("www").absolute(origin) == "www.example.com."
    assert RecordName.parse("*.dev").absolute(Domain.parse("example.com")) == "*.dev.example.com."
    assert RecordName.parse("*.dev").is_wildcard
    assert not RecordName.parse("dev").is_wildcard
