"""Link extraction from HTML documents."""

from __future__ import annotations

import enum
import functools
import html
import re
import string
from html.entities import html5 as _ENTITIES

from .elements import RawUri, is_email_link, is_verbatim_elem
from .plaintext import extract_plaintext

_LINK_ATTRIBUTES = frozenset({"href", "src", "cite", "usemap"})

_ELEMENT_LINK_ATTRIBUTES = frozenset(
    {
        ("applet", "codebase"),
        ("body", "background"),
        ("button", "formaction"),
        ("command", "icon"),
        ("form", "action"),
        ("frame", "longdesc"),
        ("head", "profile"),
        ("html", "manifest"),
        ("iframe", "longdesc"),
        ("img", "longdesc"),
        ("input", "formaction"),
        ("object", "classid"),
        ("object", "codebase"),
        ("object", "data"),
        ("video", "poster"),
    }
)

_ASCII_WHITESPACE = re.compile(r"[ \t\n\f\r]+")
_SPACES = re.compile(r"[ \t\n\f\r]*")
_TAG_NAME = re.compile(r"[^ \t\n\f\r/>]*")
_ATTRIBUTE_NAME = re.compile(r"[^ \t\n\f\r/>=]*")
_UNQUOTED_VALUE = re.compile(r"[^ \t\n\f\r>]*")
_COMMENT_END = re.compile(r"--!?>")
_CHARACTER_REFERENCE = re.compile(
    r"&(#[0-9]+;?|#[xX][0-9a-fA-F]+;?|[^\t\n\f <&#;]{1,32};?)"
)
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


class _Mode(enum.Enum):
    DATA = enum.auto()
    RCDATA = enum.auto()
    RAWTEXT = enum.auto()
    SCRIPT_DATA = enum.auto()
    PLAINTEXT = enum.auto()


_MODE_AFTER_START_TAG = {
    "title": _Mode.RCDATA,
    "textarea": _Mode.RCDATA,
    "style": _Mode.RAWTEXT,
    "xmp": _Mode.RAWTEXT,
    "iframe": _Mode.RAWTEXT,
    "noembed": _Mode.RAWTEXT,
    "noframes": _Mode.RAWTEXT,
    "script": _Mode.SCRIPT_DATA,
    "plaintext": _Mode.PLAINTEXT,
}


def urls_from_element_attribute(
    attr_name: str, elem_name: str, attr_value: str
) -> list[str] | None:
    """Return the links an attribute is known to hold, or None if it holds no links by definition."""
    if attr_name in _LINK_ATTRIBUTES or (elem_name, attr_name) in _ELEMENT_LINK_ATTRIBUTES:
        return [attr_value]
    if attr_name == "srcset":
        urls = []
        for candidate in attr_value.strip().split(","):
            first = next((part for part in _ASCII_WHITESPACE.split(candidate) if part), None)
            if first is not None:
                urls.append(first)
        return urls
    return None


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _decode_reference(match: re.Match[str]) -> str:
    reference = match.group(1)
    if reference.startswith("#") or reference in _ENTITIES:
        return html.unescape(match.group(0))
    for length in range(len(reference) - 1, 0, -1):
        prefix = reference[:length]
        if prefix in _ENTITIES:
            following = reference[length]
            if following == "=" or (following.isascii() and following.isalnum()):
                return match.group(0)
            return _ENTITIES[prefix] + reference[length:]
    return match.group(0)


def _decode_attribute(value: str) -> str:
    """Decode character references the way attribute values are decoded."""
    if "&" not in value:
        return value
    return _CHARACTER_REFERENCE.sub(_decode_reference, value)


class _LinkExtractor:
    """Collects links while receiving tokenizer events."""

    def __init__(self, include_verbatim: bool) -> None:
        self.include_verbatim = include_verbatim
        self.links: list[RawUri] = []
        self.element = ""
        self._text: list[str] = []
        self._closing = False
        self._nofollow = False
        self._attr_name = ""
        self._attr_value = ""
        self._verbatim_element: str | None = None

    def _skipping(self) -> bool:
        return not self.include_verbatim and (
            is_verbatim_elem(self.element) or self._verbatim_element is not None
        )

    def _clear_attribute(self) -> None:
        self._attr_name = ""
        self._attr_value = ""

    def _update_verbatim_element(self) -> None:
        if self._closing:
            if self._verbatim_element is not None and self.element == self._verbatim_element:
                self._verbatim_element = None
                self._clear_attribute()
        elif not self.include_verbatim and is_verbatim_elem(self.element):
            if self._verbatim_element is None:
                self._verbatim_element = self.element

    def _flush_characters(self) -> None:
        text = "".join(self._text)
        self._text.clear()
        if self._skipping():
            self._update_verbatim_element()
            return
        self.links.extend(extract_plaintext(text))

    def _flush_attribute(self) -> None:
        if self._skipping():
            self._update_verbatim_element()
            return
        name, value, element = self._attr_name, self._attr_value, self.element
        if name == "rel" and "nofollow" in value:
            self._nofollow = True
        if self._nofollow:
            self._clear_attribute()
            return
        urls = urls_from_element_attribute(name, element, value)
        if urls is None:
            self.links.extend(extract_plaintext(value))
        else:
            self.links.extend(
                RawUri(url, element, name)
                for url in urls
                if not is_email_link(url) or (url.startswith("mailto:") and name == "href")
            )
        self._clear_attribute()

    def characters(self, text: str) -> None:
        self._text.append(text)

    def start_tag(self) -> None:
        self._flush_characters()
        self.element = ""
        self._nofollow = False
        self._closing = False

    def end_tag(self) -> None:
        self.start_tag()
        self._closing = True

    def comment(self) -> None:
        self._flush_characters()

    def doctype(self) -> None:
        self._flush_characters()

    def tag_name(self, name: str) -> None:
        self.element += name

    def self_closing(self) -> None:
        self._closing = True

    def attribute_start(self) -> None:
        self._flush_attribute()

    def attribute_name(self, name: str) -> None:
        self._attr_name += name

    def attribute_value(self, value: str) -> None:
        self._attr_value += value

    def emit_tag(self) -> _Mode:
        mode = _Mode.DATA if self._closing else _MODE_AFTER_START_TAG.get(self.element, _Mode.DATA)
        self._flush_attribute()
        return mode

    def eof(self) -> None:
        self._flush_characters()


def _skip_spaces(buf: str, pos: int) -> int:
    return _SPACES.match(buf, pos).end()


def _after_gt(buf: str, pos: int) -> int:
    gt = buf.find(">", pos)
    return len(buf) if gt == -1 else gt + 1


@functools.lru_cache(maxsize=32)
def _end_tag_pattern(name: str) -> re.Pattern[str]:
    return re.compile("</" + re.escape(name) + r"(?=[ \t\n\f\r/>])", re.IGNORECASE | re.ASCII)


def _raw_text_end(buf: str, pos: int, name: str) -> int:
    match = _end_tag_pattern(name).search(buf, pos)
    return len(buf) if match is None else match.start()


def _read_tag(buf: str, pos: int, sink: _LinkExtractor, closing: bool) -> tuple[int, _Mode]:
    """Read a tag whose name starts at ``pos``; return the position after it and the next mode."""
    if closing:
        sink.end_tag()
    else:
        sink.start_tag()
    match = _TAG_NAME.match(buf, pos)
    sink.tag_name(_ascii_lower(match.group()))
    pos = match.end()
    end = len(buf)
    while True:
        pos = _skip_spaces(buf, pos)
        if pos >= end:
            return end, _Mode.DATA
        char = buf[pos]
        if char == ">":
            return pos + 1, sink.emit_tag()
        if char == "/":
            if buf.startswith(">", pos + 1):
                sink.self_closing()
                return pos + 2, sink.emit_tag()
            pos += 1
            continue
        sink.attribute_start()
        match = _ATTRIBUTE_NAME.match(buf, pos + 1)
        sink.attribute_name(_ascii_lower(buf[pos : match.end()]))
        pos = _skip_spaces(buf, match.end())
        if not buf.startswith("=", pos):
            continue
        pos = _skip_spaces(buf, pos + 1)
        if pos >= end:
            return end, _Mode.DATA
        quote = buf[pos]
        if quote in "\"'":
            close = buf.find(quote, pos + 1)
            if close == -1:
                return end, _Mode.DATA
            sink.attribute_value(_decode_attribute(buf[pos + 1 : close]))
            pos = close + 1
        elif quote != ">":
            match = _UNQUOTED_VALUE.match(buf, pos)
            sink.attribute_value(_decode_attribute(match.group()))
            pos = match.end()


def _read_markup(buf: str, pos: int, sink: _LinkExtractor) -> int:
    """Read a comment, doctype or bogus comment starting with ``<!`` at ``pos``."""
    body = pos + 2
    if buf.startswith("--", body):
        sink.comment()
        start = body + 2
        if buf.startswith(">", start):
            return start + 1
        if buf.startswith("->", start):
            return start + 2
        match = _COMMENT_END.search(buf, start)
        return len(buf) if match is None else match.end()
    if _ascii_lower(buf[body : body + 7]) == "doctype":
        sink.doctype()
        return _after_gt(buf, body)
    sink.comment()
    return _after_gt(buf, body)


def _tokenize(buf: str, sink: _LinkExtractor) -> None:
    pos = 0
    end = len(buf)
    mode = _Mode.DATA
    raw_name = ""
    while pos < end:
        if mode is _Mode.PLAINTEXT:
            sink.characters(buf[pos:])
            break
        if mode is not _Mode.DATA:
            stop = _raw_text_end(buf, pos, raw_name)
            text = buf[pos:stop]
            sink.characters(html.unescape(text) if mode is _Mode.RCDATA else text)
            pos = stop
            mode = _Mode.DATA
            continue
        lt = buf.find("<", pos)
        stop = end if lt == -1 else lt
        if stop > pos:
            sink.characters(html.unescape(buf[pos:stop]))
        if lt == -1:
            break
        following = buf[lt + 1 : lt + 2]
        if _is_ascii_alpha(following):
            pos, mode = _read_tag(buf, lt + 1, sink, closing=False)
            raw_name = sink.element
        elif following == "/":
            after = buf[lt + 2 : lt + 3]
            if _is_ascii_alpha(after):
                pos, mode = _read_tag(buf, lt + 2, sink, closing=True)
            elif after == ">":
                pos = lt + 3
            elif after == "":
                sink.characters("</")
                pos = end
            else:
                sink.comment()
                pos = _after_gt(buf, lt + 2)
        elif following == "!":
            pos = _read_markup(buf, lt, sink)
        elif following == "?":
            sink.comment()
            pos = _after_gt(buf, lt + 1)
        else:
            sink.characters("<")
            pos = lt + 1
    sink.eof()


def extract_html(buf: str, include_verbatim: bool = False) -> list[RawUri]:
    """Extract unparsed links from an HTML string."""
    extractor = _LinkExtractor(include_verbatim)
    _tokenize(buf, extractor)
    return extractor.links