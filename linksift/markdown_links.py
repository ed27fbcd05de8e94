"""Link extraction from Markdown documents."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .elements import RawUri
from .html import extract_html
from .plaintext import extract_plaintext


def _unchanged(url: str) -> str:
    return url


def _accept(url: str) -> bool:
    return True


def _make_parser() -> MarkdownIt:
    parser = MarkdownIt("commonmark")
    # Keep link destinations exactly as written and accept every scheme.
    parser.normalizeLink = _unchanged
    parser.normalizeLinkText = _unchanged
    parser.validateLink = _accept
    return parser


_PARSER = _make_parser()


def _link_destination(token: Token, following: Sequence[Token]) -> str:
    href = str(token.attrGet("href") or "")
    if token.markup == "autolink" and href.startswith("mailto:"):
        label = following[0].content if following else href
        if not label.startswith("mailto:"):
            return href.removeprefix("mailto:")
    return href


def _inline_links(tokens: Sequence[Token], include_verbatim: bool) -> Iterator[RawUri]:
    for position, token in enumerate(tokens):
        if token.type == "link_open":
            destination = _link_destination(token, tokens[position + 1 : position + 2])
            # Recorded as if it were an <a href="..."> element.
            yield RawUri(destination, "a", "href")
        elif token.type == "image":
            # Recorded as if it were an <img src="..."> element.
            yield RawUri(str(token.attrGet("src") or ""), "img", "src")
            yield from _inline_links(token.children or [], include_verbatim)
        elif token.type == "text":
            yield from extract_plaintext(token.content)
        elif token.type == "html_inline":
            yield from extract_html(token.content, include_verbatim)
        elif token.type == "code_inline" and include_verbatim:
            yield from extract_plaintext(token.content)


def extract_markdown(text: str, include_verbatim: bool = False) -> list[RawUri]:
    """Extract unparsed links from a Markdown string.

    Links inside code blocks and inline code are skipped unless
    ``include_verbatim`` is set.
    """
    links: list[RawUri] = []
    for token in _PARSER.parse(text):
        if token.type in ("fence", "code_block"):
            if include_verbatim:
                links.extend(extract_plaintext(token.content))
        elif token.type == "html_block":
            links.extend(extract_html(token.content, include_verbatim))
        elif token.type == "inline":
            links.extend(_inline_links(token.children or [], include_verbatim))
    return links