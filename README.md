# linksift

linksift finds links in documents and prepares them for a link checker. It
can:

- extract links from HTML, Markdown and plain text,
- remap URLs by regular-expression rules, for example to test a site against
  a local server,
- rewrite requests for sites that need special handling,
- decide whether a failed request is worth retrying.

## Installation

```
pip install linksift
```

## Extracting links

```python
from linksift.extractor import Extractor, FileType, InputContent

content = InputContent.from_string(
    'See <a href="https://example.org/docs">the docs</a>.', FileType.HTML
)
for raw in Extractor().extract(content):
    print(raw.text, raw.element, raw.attribute)
# https://example.org/docs a href
```

Each result is a `RawUri` with the link text as written in the document. It
also records the element and attribute the link came from. Both are `None`
for links found in running text.

`FileType.from_path("notes.md")` picks the format from the file extension.
`.md` and `.markdown` mean Markdown, `.html` means HTML, and anything else
means plain text. `InputContent` can also carry an optional `source`, such as
a path or URL.

Links inside verbatim content are skipped unless you use
`Extractor(include_verbatim=True)`. Verbatim content means Markdown code
blocks and inline code, and HTML elements such as `<pre>`, `<code>`, `<kbd>`,
`<samp>`, `<script>` and `<textarea>`. In HTML, links on an element with
`rel="nofollow"` are always skipped. E-mail addresses in link attributes are
kept only when they appear as `mailto:` links in an `href`.

The lower-level functions can be called directly:

```python
from linksift.html import extract_html, urls_from_element_attribute
from linksift.markdown_links import extract_markdown
from linksift.plaintext import extract_plaintext, find_links

extract_plaintext("Visit https://example.org today")
list(find_links("write to someone@example.com"))
extract_markdown("[docs](https://example.org)", include_verbatim=False)
extract_html('<img srcset="/a.png 1x, /b.png 2x">', include_verbatim=False)
urls_from_element_attribute("srcset", "img", "/a.png 1x, /b.png 2x")  # ['/a.png', '/b.png']
```

Plain-text extraction finds URLs that have a scheme (`scheme://...`) and
e-mail addresses. It trims trailing punctuation and unbalanced brackets.
`linksift.elements` provides `is_email_link` and `is_verbatim_elem`.

## Remapping

```python
from linksift.remap import Remaps

remaps = Remaps.from_strings(["https://example.com http://127.0.0.1:8080"])
remaps.remap("https://example.com/page")  # 'http://127.0.0.1:8080/page'
```

Each rule is a regular expression and a replacement URL, separated by
whitespace. The replacement may refer to capture groups as `$1`, `$name` or
`${name}`, and `$$` gives a literal `$`. Rules are tried in order, and only
the first matching rule is applied. If no rule matches, the URL is returned
unchanged. In both cases the scheme and host are lower-cased.

`Remaps` can also be built directly from `(pattern, replacement)` pairs. It
supports `len()`, iteration and indexing.

`RemapError`, a subclass of `ValueError`, is raised in these cases:

- a rule string is not exactly a pattern and a URL,
- a pattern does not compile,
- applying a rule produces something that is not an absolute URL.

Passing a URL that is not absolute raises `ValueError`.

## Request quirks

```python
from linksift.quirks import Quirks, Request

Quirks().apply(Request("https://youtu.be/abc123?t=42")).url
# 'https://img.youtube.com/vi/abc123/0.jpg'
```

The default quirks do the following:

- Twitter requests are sent to `nitter.net`.
- crates.io requests get an `Accept: text/html` header.
- YouTube `/watch?v=...` and `youtu.be` short links are turned into the
  video's thumbnail image.

Only the first quirk whose pattern matches is applied. `Request` is an
immutable record of URL, method and headers. A rewrite returns a new
`Request`.

## Retries

`linksift.retry.should_retry_status(code)` returns true for 5xx responses
and for 408 and 429, and false for any other status. It raises `ValueError`
if the code is not between 100 and 999.

`linksift.retry.should_retry_error(error)` looks at an exception and the
exceptions it was caused by. It returns true for:

- timeouts,
- connections reset or aborted by the peer,
- responses cut off before they were complete,
- servers that closed the connection.

It returns false when the host could not be reached at all, and for anything
else.

## What it does not do

linksift does not send requests or check links itself. It has no
command-line tool. It does not filter links by include or exclude patterns,
scheme, mail address or IP range.

## Running the tests

```
pip install -e ".[test]"
pytest
```