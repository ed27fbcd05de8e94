import pytest

from linksift.elements import RawUri, is_email_link, is_verbatim_elem


@pytest.mark.parametrize("name", ["pre", "code", "listing", "script", "kbd", "xmp"])
def test_verbatim_matching(name):
    assert is_verbatim_elem(name) is True


@pytest.mark.parametrize("name", ["a", "div", "p", "span", "PRE"])
def test_non_verbatim_elements(name):
    assert is_verbatim_elem(name) is False


def test_is_email_link_with_mailto():
    assert is_email_link("mailto:contact@example.com") is True


def test_is_email_link_mailto_in_sentence():
    assert is_email_link("mailto:contact@example.com in a sentence") is False


def test_is_email_link_plain_address():
    assert is_email_link("foo@example.org") is True


def test_is_email_link_address_in_sentence():
    assert is_email_link("foo@example.org in sentence") is False


def test_is_email_link_website():
    assert is_email_link("https://example.org") is False


def test_is_email_link_domain_without_dot():
    assert is_email_link("foo@localhost") is False


def test_is_email_link_local_part_ending_in_dot():
    assert is_email_link("foo.@example.com") is False


def test_raw_uri_defaults():
    raw = RawUri("https://example.com")
    assert raw.element is None
    assert raw.attribute is None
    assert str(raw) == "https://example.com"


def test_raw_uri_equality():
    assert RawUri("https://example.org", "a", "href") == RawUri(
        text="https://example.org", element="a", attribute="href"
    )
    assert RawUri("https://example.org", "a", "href") != RawUri("https://example.org")