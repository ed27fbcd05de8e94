"""Rewrites of requests to sites that need special treatment to be checked."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, urlsplit, urlunsplit

TWITTER_PATTERN = re.compile(r"^(https?://)?(www\.)?twitter.com")
CRATES_PATTERN = re.compile(r"^(https?://)?(www\.)?crates.io")
YOUTUBE_PATTERN = re.compile(r"^(https?://)?(www\.)?(youtube\.com)")
YOUTUBE_SHORT_PATTERN = re.compile(r"^(https?://)?(www\.)?(youtu\.?be)")


@dataclass(frozen=True)
class Request:
    """An HTTP request about to be sent."""

    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Quirk:
    """A rewrite applied to requests whose URL matches ``pattern``."""

    pattern: re.Pattern[str]
    rewrite: Callable[[Request], Request]


def _thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/0.jpg"


def _rewrite_twitter(request: Request) -> Request:
    parts = urlsplit(request.url)
    userinfo, at, host_port = parts.netloc.rpartition("@")
    port = f":{parts.port}" if parts.port is not None else ""
    netloc = f"{userinfo}{at}nitter.net{port}"
    return dataclasses.replace(request, url=urlunsplit(parts._replace(netloc=netloc)))


def _rewrite_crates(request: Request) -> Request:
    return dataclasses.replace(request, headers={**request.headers, "Accept": "text/html"})


def _rewrite_youtube(request: Request) -> Request:
    parts = urlsplit(request.url)
    if parts.path != "/watch":
        return request
    video_id = dict(parse_qsl(parts.query, keep_blank_values=True)).get("v")
    if video_id is None:
        return request
    return dataclasses.replace(request, url=_thumbnail_url(video_id))


def _rewrite_youtube_short(request: Request) -> Request:
    # Short links carry the video id as their path.
    video_id = urlsplit(request.url).path.lstrip("/")
    if not video_id:
        return request
    return dataclasses.replace(request, url=_thumbnail_url(video_id))


def _default_quirks() -> tuple[Quirk, ...]:
    return (
        Quirk(TWITTER_PATTERN, _rewrite_twitter),
        Quirk(CRATES_PATTERN, _rewrite_crates),
        Quirk(YOUTUBE_PATTERN, _rewrite_youtube),
        Quirk(YOUTUBE_SHORT_PATTERN, _rewrite_youtube_short),
    )


@dataclass(frozen=True)
class Quirks:
    """An ordered collection of request rewrites."""

    quirks: tuple[Quirk, ...] = field(default_factory=_default_quirks)

    def apply(self, request: Request) -> Request:
        """Apply the first quirk whose pattern matches the URL; others are ignored."""
        for quirk in self.quirks:
            if quirk.pattern.search(request.url):
                return quirk.rewrite(request)
        return request