"""Finding links in plain text."""

from __future__ import annotations

import re
from collections.abc import Iterator

from .elements import RawUri, _email_span

_TRIGGER = re.compile("[:@]")
_SCHEME_SYMBOLS = frozenset("+-.")
_BREAK_CHARS = frozenset('|"<>`')
_CANNOT_END = frozenset("?!.,:;*")
_QUOTES = frozenset("\"'")


def _is_scheme_char(char: str) -> bool:
    return (char.isascii() and char.isalnum()) or char in _SCHEME_SYMBOLS


def _is_break(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7F <= code <= 0x9F or char.isspace() or char in _BREAK_CHARS


def _url_length(rest: str, quote: str | None) -> int:
    """Length of the URL body in ``rest``, trimming trailing punctuation."""
    round_depth = square_depth = curly_depth = 0
    in_single_quote = False
    end = 0
    for index, char in enumerate(rest):
        if _is_break(char) or char == quote:
            break
        if char in _CANNOT_END:
            can_be_last = False
        elif char == "(":
            round_depth += 1
            can_be_last = False
        elif char == ")":
            round_depth -= 1
            if round_depth < 0:
                break
            can_be_last = True
        elif char == "[":
            square_depth += 1
            can_be_last = False
        elif char == "]":
            square_depth -= 1
            if square_depth < 0:
                break
            can_be_last = True
        elif char == "{":
            curly_depth += 1
            can_be_last = False
        elif char == "}":
            curly_depth -= 1
            if curly_depth < 0:
                break
            can_be_last = True
        elif char == "'":
            in_single_quote = not in_single_quote
            can_be_last = not in_single_quote
        else:
            can_be_last = True
        if can_be_last:
            end = index + 1
    return end


def _url_span(text: str, colon: int, floor: int) -> tuple[int, int] | None:
    if not text.startswith("://", colon):
        return None
    start = colon
    while start > floor and _is_scheme_char(text[start - 1]):
        start -= 1
    while start < colon and not (text[start].isascii() and text[start].isalpha()):
        start += 1
    if start == colon:
        return None
    quote = text[start - 1] if start > 0 and text[start - 1] in _QUOTES else None
    body_start = colon + 3
    length = _url_length(text[body_start:], quote)
    if length == 0:
        return None
    return start, body_start + length


def find_links(text: str) -> Iterator[str]:
    """Yield every URL with a scheme and every e-mail address in ``text``, in order."""
    floor = 0
    for match in _TRIGGER.finditer(text):
        position = match.start()
        if position < floor:
            continue
        if text[position] == ":":
            span = _url_span(text, position, floor)
        else:
            span = _email_span(text, position, floor)
        if span is not None:
            start, end = span
            yield text[start:end]
            floor = end


def extract_plaintext(text: str) -> list[RawUri]:
    """Extract unparsed links from plain text."""
    return [RawUri(link) for link in find_links(text)]