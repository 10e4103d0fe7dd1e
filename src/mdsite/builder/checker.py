"""Graph consistency checks: broken links, orphan documents, duplicate anchors."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from mdsite.errors import DuplicateSlugWarning, IndexNotFoundError, UnresolvedLinkError
from mdsite.feature_logger import log_error_policy
from mdsite.ingest.extractor import find_duplicate_slugs
from mdsite.ingest.loader import ProgressCallback, safe_emit
from mdsite.model.graph import Graph
from mdsite.model.site_options import SiteOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Report:
    """Outcome of checking one graph.

    Only unresolved links fail a build; orphans and duplicate anchors are
    warnings, since intentionally unlinked reference pages are legitimate.
    """

    index: str
    reachable: tuple[str, ...]
    orphans: tuple[str, ...]
    unresolved: tuple[UnresolvedLinkError, ...]
    duplicate_slugs: tuple[DuplicateSlugWarning, ...]

    @property
    def ok(self) -> bool:
        return not self.unresolved

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def diagnostics(self) -> list[str]:
        """Flat ``path:line: severity: message`` lines, errors first."""

        lines = [err.diagnostic() for err in self.unresolved]
        lines.extend(warn.diagnostic() for warn in self.duplicate_slugs)
        lines.extend(
            f"{path}:1: warning: orphan document (not reachable from {self.index})"
            for path in self.orphans
        )
        return lines


def reachable_from(graph: Graph, start: str) -> list[str]:
    """Breadth-first traversal over resolved internal links.

    The visited set is keyed by document path, so cycles terminate and each
    document appears once, in discovery order.
    """

    adjacency: dict[str, list[str]] = {}
    for source, target in graph.edges():
        adjacency.setdefault(source, []).append(target)

    visited: set[str] = {start}
    order: list[str] = [start]
    queue: deque[str] = deque([start])
    while queue:
        current = queue.popleft()
        for target in adjacency.get(current, []):
            if target in visited:
                continue
            visited.add(target)
            order.append(target)
            queue.append(target)
    return order


def check_graph(
    graph: Graph,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> Report:
    opts = options or SiteOptions()
    if graph.index is None:
        raise IndexNotFoundError(opts.index)

    reachable = reachable_from(graph, graph.index)
    visited = set(reachable)
    orphans = tuple(path for path in graph.documents if path not in visited)

    unresolved = tuple(
        UnresolvedLinkError(
            source=link.source,
            line=link.ref.line,
            target=link.ref.target,
            reason=link.reason or "unresolved",
        )
        for link in graph.unresolved()
    )

    duplicates: list[DuplicateSlugWarning] = []
    for doc in graph.documents.values():
        duplicates.extend(find_duplicate_slugs(doc))

    report = Report(
        index=graph.index,
        reachable=tuple(reachable),
        orphans=orphans,
        unresolved=unresolved,
        duplicate_slugs=tuple(duplicates),
    )

    if report.unresolved:
        log_error_policy(
            "Checker", "unresolved_link", "report", f"{len(report.unresolved)} link(s)"
        )
    if report.orphans:
        log_error_policy(
            "Checker", "orphan_document", "warn", f"{len(report.orphans)} document(s)"
        )
    logger.info(
        "Checked graph: %d reachable, %d orphans, %d unresolved, %d duplicate anchors",
        len(report.reachable),
        len(report.orphans),
        len(report.unresolved),
        len(report.duplicate_slugs),
    )
    safe_emit(
        on_progress,
        "check:done",
        {"orphans": len(report.orphans), "unresolved": len(report.unresolved)},
    )
    return report


__all__ = ["Report", "check_graph", "reachable_from"]
