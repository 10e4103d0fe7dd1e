"""End-to-end pipeline: load -> extract -> graph -> check -> render.

Stages run strictly in sequence. Nothing is written until the whole site has
been rendered in memory, so a fatal error never leaves a partial site behind.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mdsite.builder.checker import Report, check_graph
from mdsite.builder.graph import build_graph, extract_all
from mdsite.builder.output import ensure_safe_output_dir, write_site
from mdsite.ingest.loader import ProgressCallback, load_documents, safe_emit
from mdsite.model.graph import Graph
from mdsite.model.site_options import SiteOptions
from mdsite.render.html import RenderedSite, render_site


@dataclass(frozen=True)
class Analysis:
    graph: Graph
    report: Report


@dataclass(frozen=True)
class SiteBuild:
    graph: Graph
    report: Report
    site: RenderedSite


def analyze_tree(
    root: Path,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> Analysis:
    opts = options or SiteOptions()
    documents = load_documents(root, opts, on_progress=on_progress)
    links = extract_all(documents)
    graph = build_graph(documents, links, opts, on_progress=on_progress)
    report = check_graph(graph, opts, on_progress=on_progress)
    return Analysis(graph=graph, report=report)


def build_site(
    root: Path,
    out_dir: Path,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> SiteBuild:
    """Run the full pipeline and regenerate out_dir.

    Output is written even when links are unresolved; the Report carries the
    failure and callers decide the exit status from it.
    """

    opts = options or SiteOptions()
    ensure_safe_output_dir(root, out_dir)
    analysis = analyze_tree(root, opts, on_progress=on_progress)
    site = render_site(analysis.graph, analysis.report, opts, on_progress=on_progress)
    written = write_site(site, out_dir, source_root=root)
    safe_emit(on_progress, "write:done", {"files": len(written)})
    return SiteBuild(graph=analysis.graph, report=analysis.report, site=site)


__all__ = ["Analysis", "SiteBuild", "analyze_tree", "build_site"]
