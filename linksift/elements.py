"""Raw link records and helpers for classifying links and elements."""

from __future__ import annotations

import re
from dataclasses import dataclass

VERBATIM_ELEMENTS = frozenset(
    {
        "code",
        "kbd",
        "listing",
        "noscript",
        "plaintext",
        "pre",
        "samp",
        "script",
        "textarea",
        "var",
        "xmp",
    }
)

_LOCAL_PART_SYMBOLS = frozenset("!#$%&'*+-/=?^_`{|}~.")
_AT = re.compile("@")


@dataclass(frozen=True)
class RawUri:
    """An unparsed link as found in a document, with the element and attribute it came from."""

    text: str
    element: str | None = None
    attribute: str | None = None

    def __str__(self) -> str:
        return self.text


def _is_local_char(char: str) -> bool:
    return char.isalnum() or char in _LOCAL_PART_SYMBOLS


def _domain_end(text: str, begin: int) -> int | None:
    """Return the end of a dotted domain starting at ``begin``, or None."""
    end = None
    labels = 0
    at_label_start = True
    for offset, char in enumerate(text[begin:]):
        if at_label_start:
            if not char.isalnum():
                break
            at_label_start = False
            labels += 1
            end = begin + offset + 1
        elif char == ".":
            at_label_start = True
        elif char.isalnum():
            end = begin + offset + 1
        elif char != "-":
            break
    if end is None or labels < 2:
        return None
    return end


def _email_span(text: str, at: int, floor: int = 0) -> tuple[int, int] | None:
    """Find the e-mail address around the ``@`` at index ``at``.

    The local part never reaches back before ``floor``.
    """
    start = at
    while start > floor and _is_local_char(text[start - 1]):
        start -= 1
    while start < at and text[start] == ".":
        start += 1
    if start == at or text[at - 1] == ".":
        return None
    end = _domain_end(text, at + 1)
    if end is None:
        return None
    return start, end


def is_email_link(input: str) -> bool:
    """Whether the whole string, after an optional ``mailto:`` prefix, is an e-mail address."""
    email = next(
        (
            input[span[0] : span[1]]
            for match in _AT.finditer(input)
            if (span := _email_span(input, match.start())) is not None
        ),
        None,
    )
    if email is None:
        return False
    return input.removeprefix("mailto:") == email


def is_verbatim_elem(name: str) -> bool:
    """Whether the element holds preformatted ("verbatim") content."""
    return name in VERBATIM_ELEMENTS