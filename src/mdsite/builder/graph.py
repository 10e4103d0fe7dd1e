from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from mdsite.feature_logger import log_feature_decision
from mdsite.ingest.extractor import extract_links
from mdsite.ingest.loader import ProgressCallback, safe_emit
from mdsite.model.content import Link, LinkKind, LinkRef
from mdsite.model.document import Document
from mdsite.model.graph import Graph
from mdsite.model.site_options import PathCase, SiteOptions

logger = logging.getLogger(__name__)

REASON_MISSING_DOCUMENT = "missing document"
REASON_MISSING_ANCHOR = "missing anchor"
REASON_OUTSIDE_ROOT = "outside source root"


class PathIndex:
    """Document path lookup under an explicit case policy.

    Lookups return the canonical (as loaded) path so every resolved link
    points at exactly one document regardless of how it was spelled.
    """

    def __init__(self, paths: Iterable[str], path_case: PathCase = PathCase.SENSITIVE) -> None:
        self.path_case = path_case
        self._paths: dict[str, str] = {}
        for path in sorted(paths):
            key = self._key(path)
            existing = self._paths.get(key)
            if existing is not None:
                logger.warning(
                    "Paths %s and %s collide under case-insensitive comparison; using %s",
                    existing,
                    path,
                    existing,
                )
                continue
            self._paths[key] = path

    def _key(self, path: str) -> str:
        return path.casefold() if self.path_case is PathCase.INSENSITIVE else path

    def lookup(self, path: str) -> str | None:
        return self._paths.get(self._key(path))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.lookup(path) is not None

    def __len__(self) -> int:
        return len(self._paths)


def resolve_link(ref: LinkRef, documents: Mapping[str, Document], paths: PathIndex) -> Link:
    """Resolve one extracted link against the complete document set.

    A path that resolves but names a missing anchor is still unresolved: a
    broken anchor is a broken link.
    """

    if ref.external:
        return Link(ref=ref, kind=LinkKind.EXTERNAL)

    if ref.path is None:
        target_path: str | None = ref.source
    elif ref.path == ".." or ref.path.startswith("../"):
        return Link(ref=ref, kind=LinkKind.UNRESOLVED, reason=REASON_OUTSIDE_ROOT)
    else:
        target_path = paths.lookup(ref.path)

    if target_path is None or target_path not in documents:
        return Link(ref=ref, kind=LinkKind.UNRESOLVED, reason=REASON_MISSING_DOCUMENT)

    if ref.anchor is None:
        return Link(ref=ref, kind=LinkKind.INTERNAL_DOCUMENT, target_path=target_path)

    if ref.anchor not in documents[target_path].slugs:
        return Link(
            ref=ref,
            kind=LinkKind.UNRESOLVED,
            target_path=target_path,
            reason=REASON_MISSING_ANCHOR,
        )
    return Link(ref=ref, kind=LinkKind.INTERNAL_ANCHOR, target_path=target_path)


def extract_all(documents: Iterable[Document]) -> dict[str, list[LinkRef]]:
    return {doc.path: extract_links(doc) for doc in documents}


def build_graph(
    documents: Sequence[Document],
    links: Mapping[str, Sequence[LinkRef]] | None = None,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> Graph:
    """Build the link graph from every document and its extracted links.

    Resolution needs global knowledge of valid paths and anchors, so it only
    starts once the full document set and all link sets are available.
    """

    opts = options or SiteOptions()
    by_path: dict[str, Document] = {}
    for doc in sorted(documents, key=lambda d: d.path):
        if doc.path in by_path:
            raise ValueError(f"Duplicate document path: {doc.path}")
        by_path[doc.path] = doc

    link_sets = links if links is not None else extract_all(by_path.values())
    paths = PathIndex(by_path.keys(), opts.path_case)
    if opts.path_case is PathCase.INSENSITIVE:
        log_feature_decision("Path comparison", "case-insensitive", {"documents": len(paths)})

    resolved: list[Link] = []
    for path in by_path:
        for ref in link_sets.get(path, ()):
            resolved.append(resolve_link(ref, by_path, paths))

    index = paths.lookup(opts.index)
    graph = Graph(documents=by_path, links=tuple(resolved), index=index)

    unresolved = sum(1 for link in resolved if not link.resolved)
    logger.info(
        "Built graph: %d documents, %d links (%d unresolved)",
        len(by_path),
        len(resolved),
        unresolved,
    )
    safe_emit(
        on_progress,
        "graph:built",
        {"documents": len(by_path), "links": len(resolved), "unresolved": unresolved},
    )
    return graph


__all__ = [
    "REASON_MISSING_ANCHOR",
    "REASON_MISSING_DOCUMENT",
    "REASON_OUTSIDE_ROOT",
    "PathIndex",
    "build_graph",
    "extract_all",
    "resolve_link",
]
