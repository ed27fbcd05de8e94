"""Extract links from HTML, Markdown and plain text; remap URLs, rewrite requests and classify retryable failures."""

__version__ = "0.1.0"