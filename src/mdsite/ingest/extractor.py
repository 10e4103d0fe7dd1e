"""Link and heading extraction from Markdown source.

Only the inline link form ``[label](target)`` and ATX headings are
recognized. Closed fenced code blocks and inline code spans are skipped because
the renderer never turns their contents into links or anchors. Link targets
may be wrapped in ``<...>`` and may contain one level of balanced parentheses.
"""

from __future__ import annotations

import html
import logging
import posixpath
import re
from collections.abc import Iterator
from urllib.parse import unquote

from mdsite.errors import DuplicateSlugWarning
from mdsite.model.content import LinkRef
from mdsite.model.document import Document, Heading

logger = logging.getLogger(__name__)

_LINK_RE = re.compile(
    r"(?<!!)\[(?P<label>[^\]]*)\]"  # label, not preceded by "!" (images)
    r"\(\s*(?:<(?P<angled>[^<>\n]*)>"  # <target>, may hold spaces
    r"|(?P<target>(?:[^()\s]|\([^()\s]*\))+))"  # bare target, one level of parens
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'))?\s*\)"  # optional title
)
_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^(?P<fence>`{3,}|~{3,})[ ]*(?:\{[^}\n]*\}|\.?[\w#.+-]*)[ ]*$")
_INLINE_CODE_RE = re.compile(r"(`+)(?:.+?)\1")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_WHITESPACE_RE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Heading text -> anchor slug.

    Lowercase, drop everything except alphanumerics, hyphens and whitespace,
    then turn each whitespace run into a single hyphen.
    """

    kept = "".join(ch for ch in text.lower() if ch.isalnum() or ch == "-" or ch.isspace())
    return _WHITESPACE_RE.sub("-", kept.strip())


def _closing_fence(lines: list[str], start: int, fence: str) -> int | None:
    for index in range(start, len(lines)):
        if lines[index].rstrip(" ") == fence:
            return index
    return None


def _iter_prose_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line) for lines outside fenced code blocks.

    A fence opens only at column 0 and needs a later line holding the same
    fence to close it, matching the ``fenced_code`` extension used to render
    pages. An unclosed or indented fence is ordinary text.
    """

    lines = content.splitlines()
    index = 0
    while index < len(lines):
        m = _FENCE_RE.match(lines[index])
        if m:
            close = _closing_fence(lines, index + 1, m.group("fence"))
            if close is not None:
                index = close + 1
                continue
        yield index + 1, lines[index]
        index += 1


def _link_target(m: re.Match[str]) -> str:
    angled = m.group("angled")
    return angled.strip() if angled is not None else m.group("target")


def _heading_text(raw: str) -> str:
    # Inline links contribute their label only; entities count as the
    # characters they stand for
    text = _LINK_RE.sub(lambda m: m.group("label"), raw)
    return html.unescape(text).strip()


def extract_headings(content: str) -> tuple[Heading, ...]:
    headings: list[Heading] = []
    for lineno, line in _iter_prose_lines(content):
        m = _HEADING_RE.match(line)
        if not m or not m.group("text"):
            continue
        text = _heading_text(m.group("text"))
        if not text:
            continue
        headings.append(
            Heading(level=len(m.group("hashes")), text=text, slug=slugify(text), line=lineno)
        )
    return tuple(headings)


def _normalize_path(source_dir: str, raw_path: str) -> str:
    decoded = unquote(raw_path)
    if decoded.startswith("/"):
        joined = decoded.lstrip("/")
    else:
        joined = posixpath.join(source_dir, decoded)
    return posixpath.normpath(joined)


def classify_target(source: str, target: str) -> tuple[str | None, str | None, bool]:
    """Split a raw link target into (normalized path, anchor, external)."""

    if _SCHEME_RE.match(target):
        return None, None, True

    path_part, _, anchor = target.partition("#")
    anchor_or_none = unquote(anchor) if anchor else None
    if not path_part:
        return None, anchor_or_none, False
    return _normalize_path(posixpath.dirname(source), path_part), anchor_or_none, False


def iter_links(document: Document) -> Iterator[LinkRef]:
    """Lazily scan a document for inline links.

    Every call performs a fresh scan, so the sequence can be restarted and
    always yields the same links for the same content.
    """

    for lineno, line in _iter_prose_lines(document.content):
        if "](" not in line:
            continue
        scannable = _INLINE_CODE_RE.sub("", line)
        for m in _LINK_RE.finditer(scannable):
            target = _link_target(m)
            if not target:
                continue
            path, anchor, external = classify_target(document.path, target)
            yield LinkRef(
                source=document.path,
                line=lineno,
                label=m.group("label"),
                target=target,
                path=path,
                anchor=anchor,
                external=external,
            )


def extract_links(document: Document) -> list[LinkRef]:
    links = list(iter_links(document))
    logger.debug("Extracted %d links from %s", len(links), document.path)
    return links


def find_duplicate_slugs(document: Document) -> list[DuplicateSlugWarning]:
    """Warnings for the second and later headings sharing an anchor slug."""

    first_seen: dict[str, int] = {}
    warnings: list[DuplicateSlugWarning] = []
    for heading in document.headings:
        first_line = first_seen.get(heading.slug)
        if first_line is None:
            first_seen[heading.slug] = heading.line
            continue
        warnings.append(
            DuplicateSlugWarning(
                path=document.path, line=heading.line, slug=heading.slug, first_line=first_line
            )
        )
    return warnings


__all__ = [
    "classify_target",
    "extract_headings",
    "extract_links",
    "find_duplicate_slugs",
    "iter_links",
    "slugify",
]
