"""Document link graph."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from mdsite.model.content import Link, LinkKind
from mdsite.model.document import Document


@dataclass(frozen=True)
class Graph:
    """All documents of one build and every link between them.

    Built in one pass by ``build_graph`` and never mutated afterwards; a new
    build produces a new Graph.
    """

    documents: Mapping[str, Document]
    links: tuple[Link, ...]
    # Canonical path of the index document, None when it is missing
    index: str | None = None

    def links_from(self, path: str) -> Iterator[Link]:
        return (link for link in self.links if link.source == path)

    def unresolved(self) -> Iterator[Link]:
        return (link for link in self.links if link.kind is LinkKind.UNRESOLVED)

    def edges(self) -> list[tuple[str, str]]:
        """Distinct (source, target) document pairs joined by resolved internal links.

        Self-references ("#anchor" within one document) are not edges.
        """
        pairs: set[tuple[str, str]] = set()
        for link in self.links:
            if not link.internal or link.target_path is None:
                continue
            if link.target_path == link.source:
                continue
            pairs.add((link.source, link.target_path))
        return sorted(pairs)


__all__ = ["Graph"]
