"""Render a checked graph into a navigable static HTML site.

Every page keeps the source tree's layout (``guides/Intro.md`` becomes
``guides/Intro.html``). Resolved links are rewritten to point at rendered
pages, and each page gets a navigation block listing the documents it links
to and the documents linking back to it.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from urllib.parse import unquote

import markdown
from markdown.extensions.toc import TocExtension

from mdsite.builder.checker import Report
from mdsite.builder.json_io import graph_to_json
from mdsite.ingest.extractor import classify_target, slugify
from mdsite.ingest.loader import ProgressCallback, safe_emit
from mdsite.model.content import Link, LinkKind
from mdsite.model.graph import Graph
from mdsite.model.site_options import SiteOptions
from mdsite.render.templating import Templates, create_environment
from mdsite.transform.links import (
    article_body,
    iter_hrefs,
    rewrite_link_hrefs,
    validate_scoped_html,
)

logger = logging.getLogger(__name__)

REPORT_FILE = "report.txt"
SITEMAP_FILE = "sitemap.json"

# (source, kind, target, anchor); target is a document path or an external URL
LinkKey = tuple[str, str, str, str | None]


@dataclass(frozen=True)
class NavItem:
    href: str
    title: str


@dataclass(frozen=True)
class RenderedPage:
    source: str
    output_path: str
    html: str


@dataclass(frozen=True)
class RenderedSite:
    pages: tuple[RenderedPage, ...]
    # Output-relative path -> file text, pages plus report and sitemap
    files: dict[str, str]


def output_path_for(path: str, options: SiteOptions | None = None) -> str:
    opts = options or SiteOptions()
    stem, _ = posixpath.splitext(path)
    return stem + opts.output_extension


def relative_href(from_output: str, to_output: str) -> str:
    return posixpath.relpath(to_output, posixpath.dirname(from_output) or ".")


def invert_edges(graph: Graph) -> dict[str, list[str]]:
    """Map each document to the documents linking to it, in one pass over the edges."""

    backrefs: dict[str, list[str]] = {path: [] for path in graph.documents}
    for source, target in graph.edges():
        backrefs[target].append(source)
    return backrefs


def link_href(link: Link, options: SiteOptions | None = None) -> str | None:
    """Output address for a resolved internal link; None leaves the href as written."""

    if not link.internal or link.target_path is None:
        return None
    source_out = output_path_for(link.source, options)
    if link.target_path == link.source:
        if link.anchor:
            return f"#{link.anchor}"
        return posixpath.basename(source_out)
    href = relative_href(source_out, output_path_for(link.target_path, options))
    if link.anchor:
        href += f"#{link.anchor}"
    return href


def _toc_slugify(value: str, separator: str) -> str:
    return slugify(value)


def markdown_to_html(content: str) -> str:
    md = markdown.Markdown(
        extensions=[TocExtension(slugify=_toc_slugify), "fenced_code", "tables"],
        output_format="html",
    )
    return md.convert(content)


def render_page(
    templates: Templates,
    graph: Graph,
    path: str,
    backrefs: dict[str, list[str]],
    options: SiteOptions | None = None,
) -> RenderedPage:
    doc = graph.documents[path]
    out_path = output_path_for(path, options)

    lookup: dict[str, str] = {}
    links_to: set[str] = set()
    for link in graph.links_from(path):
        href = link_href(link, options)
        if href is None:
            continue
        lookup[link.ref.target] = href
        if link.target_path is not None and link.target_path != path:
            links_to.add(link.target_path)

    body = rewrite_link_hrefs(markdown_to_html(doc.content), lookup)

    def _nav(paths: list[str]) -> list[NavItem]:
        return [
            NavItem(
                href=relative_href(out_path, output_path_for(p, options)),
                title=graph.documents[p].title,
            )
            for p in sorted(paths)
        ]

    page_html = templates.render_page(
        {
            "title": doc.title,
            "body": body,
            "links_to": _nav(list(links_to)),
            "linked_from": _nav(backrefs.get(path, [])),
        }
    )
    if not validate_scoped_html(page_html):
        raise ValueError(f"Page HTML missing scoped wrapper for path={path}")
    return RenderedPage(source=path, output_path=out_path, html=page_html)


def render_report(report: Report) -> str:
    lines = report.diagnostics()
    return "".join(f"{line}\n" for line in lines)


def render_site(
    graph: Graph,
    report: Report,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> RenderedSite:
    """Render every document plus the report and sitemap, entirely in memory."""

    templates = create_environment()
    backrefs = invert_edges(graph)
    safe_emit(on_progress, "render:start", {"pages": len(graph.documents)})

    pages: list[RenderedPage] = []
    for path in graph.documents:
        page = render_page(templates, graph, path, backrefs, options)
        pages.append(page)
        safe_emit(on_progress, "page:rendered", {"path": page.output_path})

    files: dict[str, str] = {page.output_path: page.html for page in pages}
    for reserved in (REPORT_FILE, SITEMAP_FILE):
        if reserved in files:
            logger.warning("Rendered page %s is replaced by the generated %s", reserved, reserved)
    files[REPORT_FILE] = render_report(report)
    files[SITEMAP_FILE] = graph_to_json(
        graph, report, output_path_for=lambda p: output_path_for(p, options)
    )

    logger.info("Rendered %d pages", len(pages))
    return RenderedSite(pages=tuple(pages), files=dict(sorted(files.items())))


def resolved_link_set(graph: Graph) -> set[LinkKey]:
    keys: set[LinkKey] = set()
    for link in graph.links:
        if link.kind is LinkKind.EXTERNAL:
            keys.add((link.source, link.kind.value, link.ref.target, None))
        elif link.internal and link.target_path is not None:
            keys.add((link.source, link.kind.value, link.target_path, link.anchor))
    return keys


def extract_rendered_links(
    page: RenderedPage, graph: Graph, options: SiteOptions | None = None
) -> set[LinkKey]:
    """Resolved links of a rendered page, mapped back to source documents.

    Only the article body is read, so navigation links are not counted.
    Hrefs that point at no rendered page or at a missing heading (unresolved
    links left as written) are skipped.
    """

    by_output = {output_path_for(p, options): p for p in graph.documents}
    keys: set[LinkKey] = set()
    for href in iter_hrefs(article_body(page.html)):
        _, _, external = classify_target(page.source, href)
        if external:
            keys.add((page.source, LinkKind.EXTERNAL.value, href, None))
            continue
        path_part, _, anchor = href.partition("#")
        if path_part:
            out_target = posixpath.normpath(
                posixpath.join(posixpath.dirname(page.output_path), unquote(path_part))
            )
            target = by_output.get(out_target)
        else:
            target = page.source
        anchor = unquote(anchor)
        if target is None or (anchor and anchor not in graph.documents[target].slugs):
            continue
        kind = LinkKind.INTERNAL_ANCHOR if anchor else LinkKind.INTERNAL_DOCUMENT
        keys.add((page.source, kind.value, target, anchor or None))
    return keys


__all__ = [
    "REPORT_FILE",
    "SITEMAP_FILE",
    "NavItem",
    "RenderedPage",
    "RenderedSite",
    "extract_rendered_links",
    "invert_edges",
    "link_href",
    "markdown_to_html",
    "output_path_for",
    "relative_href",
    "render_page",
    "render_report",
    "render_site",
    "resolved_link_set",
]
