"""Choosing the right link extractor for a document."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from pathlib import PurePath

from .elements import RawUri
from .html import extract_html
from .markdown_links import extract_markdown
from .plaintext import extract_plaintext

_MARKDOWN_SUFFIXES = frozenset({"md", "markdown"})
_HTML_SUFFIXES = frozenset({"html"})


class FileType(enum.Enum):
    """The format of a document to extract links from."""

    MARKDOWN = "markdown"
    HTML = "html"
    PLAINTEXT = "plaintext"

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> FileType:
        """Guess the format from a file extension; anything unknown is plain text."""
        suffix = PurePath(path).suffix.lstrip(".").lower()
        if suffix in _MARKDOWN_SUFFIXES:
            return cls.MARKDOWN
        if suffix in _HTML_SUFFIXES:
            return cls.HTML
        return cls.PLAINTEXT


@dataclass(frozen=True)
class InputContent:
    """A document's text, its format and where it came from (a URL or path, if known)."""

    content: str
    file_type: FileType
    source: str | None = None

    @classmethod
    def from_string(cls, content: str, file_type: FileType) -> InputContent:
        """Wrap text that has no source of its own."""
        return cls(content, file_type)


@dataclass(frozen=True)
class Extractor:
    """Extracts links from Markdown, HTML and plain text.

    With ``include_verbatim`` set, links inside code blocks and other
    preformatted elements are extracted too.
    """

    include_verbatim: bool = False

    def extract(self, input_content: InputContent) -> list[RawUri]:
        """Extract the unparsed links of a document according to its format."""
        if input_content.file_type is FileType.MARKDOWN:
            return extract_markdown(input_content.content, self.include_verbatim)
        if input_content.file_type is FileType.HTML:
            return extract_html(input_content.content, self.include_verbatim)
        return extract_plaintext(input_content.content)