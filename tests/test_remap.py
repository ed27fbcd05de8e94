import pytest

from linksift.remap import RemapError, Remaps, normalize_url


def test_remap():
    remaps = Remaps([("https://example.com", "http://127.0.0.1:8080")])
    assert remaps.remap("https://example.com") == "http://127.0.0.1:8080/"
    assert remaps.remap("https://example.com") == normalize_url("http://127.0.0.1:8080")


def test_remap_path():
    replacement = normalize_url("https://example.com")
    remaps = Remaps([(".*?../../issues", replacement)])
    assert remaps.remap("file://../../issues") == replacement


def test_remap_skip():
    remaps = Remaps([("https://example.com", "http://127.0.0.1:8080/")])
    original = "https://unrelated.example.com"
    assert remaps.remap(original) == normalize_url(original)
    assert remaps.remap(original) == "https://unrelated.example.com/"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://docs.example.org/integrations/distcp.html",
            "file:///Users/user/code/repo/docs/_site/integrations/distcp.html",
        ),
        (
            "https://docs.example.org/howto/import.html#working-with-imported-data",
            "file:///Users/user/code/repo/docs/_site/howto/import.html#working-with-imported-data",
        ),
        (
            "https://docs.example.org/howto/garbage-collection-committed.html",
            "file:///Users/user/code/repo/docs/_site/howto/garbage-collection-committed.html",
        ),
    ],
)
def test_remap_url_to_file(url, expected):
    remaps = Remaps(
        [("https://docs.example.org", "file:///Users/user/code/repo/docs/_site")]
    )
    assert remaps.remap(url) == normalize_url(expected)


def test_remap_capture_group():
    remaps = Remaps(
        [("https://example.com/.*?/(.*?)/.*", "https://example.com/foo/$1/bar")]
    )
    assert remaps.remap("https://example.com/1/2/3") == "https://example.com/foo/2/bar"


def test_remap_named_capture():
    remaps = Remaps(
        [("https://example.com/.*?/(?P<foo>.*?)/.*", "https://example.com/foo/$foo/bar")]
    )
    assert remaps.remap("https://example.com/1/2/3") == "https://example.com/foo/2/bar"


def test_remap_named_capture_shorthand():
    remaps = Remaps(
        [("https://example.com/.*?/(?<foo>.*?)/.*", "https://example.com/foo/$foo/bar")]
    )
    assert remaps.remap("https://example.com/1/2/3") == "https://example.com/foo/2/bar"


def test_remap_braced_reference_and_literal_dollar():
    remaps = Remaps([("https://example.com/(?P<x>[a-z]+)", "https://example.com/${x}/$$")])
    assert remaps.remap("https://example.com/abc") == "https://example.com/abc/$"


def test_remap_first_matching_rule_wins():
    remaps = Remaps(
        [
            ("https://example.com", "https://first.example.com"),
            ("https://example.com", "https://second.example.com"),
        ]
    )
    assert remaps.remap("https://example.com") == "https://first.example.com/"


def test_remap_invalid_result_raises():
    remaps = Remaps([("https://example.com/.*", "not a url")])
    with pytest.raises(RemapError):
        remaps.remap("https://example.com/page")


def test_from_strings():
    remaps = Remaps.from_strings(["https://example.com   http://127.0.0.1:8080"])
    assert len(remaps) == 1
    pattern, replacement = remaps[0]
    assert pattern.pattern == "https://example.com"
    assert replacement == "http://127.0.0.1:8080"
    assert remaps.remap("https://example.com/") == "http://127.0.0.1:8080/"


@pytest.mark.parametrize("rule", ["onlyonepart", "a b c", ""])
def test_from_strings_wrong_number_of_parts(rule):
    with pytest.raises(RemapError):
        Remaps.from_strings([rule])


def test_from_strings_invalid_regex():
    with pytest.raises(RemapError):
        Remaps.from_strings(["(unclosed https://example.com"])


def test_empty_remaps_return_original():
    remaps = Remaps()
    assert len(remaps) == 0
    assert list(remaps) == []
    assert remaps.remap("https://example.com/a") == "https://example.com/a"


def test_normalize_url_rejects_relative():
    with pytest.raises(ValueError):
        normalize_url("/relative/path")


def test_normalize_url_lowercases_scheme_and_host():
    assert normalize_url("HTTPS://Example.COM") == "https://example.com/"