from __future__ import annotations

import html
import re
from collections.abc import Iterator, Mapping

_HREF_RE = re.compile(
    r"(?P<pre><a\s+[^>]*?\bhref=)(?P<q>['\"])(?P<href>[^'\"]*)(?P=q)",
    re.IGNORECASE,
)

_ARTICLE_RE = re.compile(
    r"<article\b[^>]*\bclass=(['\"])mdsite-content\1[^>]*>(?P<body>.*?)</article>",
    re.IGNORECASE | re.DOTALL,
)


def validate_scoped_html(page_html: str) -> bool:
    return '<div class="mdsite">' in page_html or "<div class='mdsite'>" in page_html


def rewrite_link_hrefs(page_html: str, lookup: Mapping[str, str]) -> str:
    """Rewrite <a href="..."> values found in lookup.

    - Keys are raw link targets as written in the Markdown source
    - Hrefs missing from lookup (external, unresolved) are left unchanged
    - Handles single/double quotes and HTML-escaped hrefs
    """

    if not lookup:
        return page_html

    def _repl(m: re.Match[str]) -> str:
        raw = html.unescape(m.group("href"))
        new = lookup.get(raw)
        if new is None:
            return m.group(0)
        quote = m.group("q")
        return f"{m.group('pre')}{quote}{html.escape(new, quote=True)}{quote}"

    return _HREF_RE.sub(_repl, page_html)


def iter_hrefs(page_html: str) -> Iterator[str]:
    for m in _HREF_RE.finditer(page_html):
        yield html.unescape(m.group("href"))


def article_body(page_html: str) -> str:
    """Return the rendered article body of a page, excluding navigation."""

    m = _ARTICLE_RE.search(page_html)
    return m.group("body") if m else ""


__all__ = [
    "article_body",
    "iter_hrefs",
    "rewrite_link_hrefs",
    "validate_scoped_html",
]
