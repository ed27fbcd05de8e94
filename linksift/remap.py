"""Rules that send links matching a pattern to a different URL.

Rules are tried in order and only the first matching rule is applied, so a
later rule never sees a link that an earlier one already matched. Every link
is matched against every rule until one fits, so large rule sets are slow.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

import regex

_SCHEME = re.compile(r"([A-Za-z][A-Za-z0-9+.\-]*):(.*)", re.DOTALL)
_AUTHORITY = re.compile(r"//([^/?#]*)(.*)", re.DOTALL)
_SPECIAL_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp", "file"})
_GROUP_REFERENCE = re.compile(r"\$(?:(\$)|\{([_0-9A-Za-z]+)\}|([_0-9A-Za-z]+))")


class RemapError(ValueError):
    """A remapping rule is malformed or produced something that is not a URL."""


def normalize_url(text: str) -> str:
    """Return ``text`` as an absolute URL in normal form; raise ValueError if it is not one."""
    stripped = text.strip()
    match = _SCHEME.fullmatch(stripped)
    if match is None:
        raise ValueError(f"not an absolute URL: {text!r}")
    scheme = match.group(1).lower()
    rest = match.group(2)
    special = scheme in _SPECIAL_SCHEMES

    authority_match = _AUTHORITY.fullmatch(rest)
    if authority_match is None:
        if special and scheme != "file":
            raise ValueError(f"URL has no host: {text!r}")
        return f"{scheme}:{rest}"

    authority, tail = authority_match.groups()
    if any(char.isspace() for char in authority):
        raise ValueError(f"URL host contains whitespace: {text!r}")
    if special:
        userinfo, at, host = authority.rpartition("@")
        if not host and scheme != "file":
            raise ValueError(f"URL has an empty host: {text!r}")
        authority = f"{userinfo}{at}{host.lower()}"
        if not tail.startswith("/"):
            tail = "/" + tail
    return f"{scheme}://{authority}{tail}"


def _expand(match: regex.Match[str], template: str) -> str:
    """Fill ``$1``, ``$name``, ``${name}`` and ``$$`` in ``template`` from ``match``."""

    def group(name: str) -> str:
        if name.isdigit():
            index = int(name)
            if index > len(match.groups()):
                return ""
            return match.group(index) or ""
        if name not in match.re.groupindex:
            return ""
        return match.group(name) or ""

    def substitute(reference: re.Match[str]) -> str:
        if reference.group(1) is not None:
            return "$"
        return group(reference.group(2) or reference.group(3))

    return _GROUP_REFERENCE.sub(substitute, template)


class Remaps:
    """An ordered list of (pattern, replacement) rules."""

    def __init__(self, rules: Iterable[tuple[str | regex.Pattern[str], str]] = ()) -> None:
        self._rules: list[tuple[regex.Pattern[str], str]] = [
            (pattern if isinstance(pattern, regex.Pattern) else regex.compile(pattern), replacement)
            for pattern, replacement in rules
        ]

    @classmethod
    def from_strings(cls, rules: Iterable[str]) -> Remaps:
        """Build rules from strings of the form ``REGEX URL`` separated by whitespace."""
        parsed = []
        for rule in rules:
            params = rule.split()
            if len(params) != 2:
                raise RemapError(
                    "Cannot parse into URI remapping, must be a Regex pattern "
                    f"and a URL separated by whitespaces: {rule}"
                )
            pattern_text, replacement = params
            try:
                pattern = regex.compile(pattern_text)
            except regex.error as error:
                raise RemapError(f"Invalid remapping pattern {pattern_text!r}: {error}") from error
            parsed.append((pattern, replacement))
        return cls(parsed)

    def remap(self, url: str) -> str:
        """Apply the first matching rule to ``url``; return it unchanged if none matches."""
        original = normalize_url(url)
        for pattern, replacement in self._rules:
            if pattern.search(original):
                after = pattern.sub(lambda match: _expand(match, replacement), original)
                try:
                    return normalize_url(after)
                except ValueError as error:
                    raise RemapError(
                        "The remapping pattern must produce a valid URL, "
                        f"but it is not: {after}"
                    ) from error
        return original

    def __iter__(self) -> Iterator[tuple[regex.Pattern[str], str]]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> tuple[regex.Pattern[str], str]:
        return self._rules[index]

    def __repr__(self) -> str:
        rules = [(pattern.pattern, replacement) for pattern, replacement in self._rules]
        return f"Remaps({rules!r})"