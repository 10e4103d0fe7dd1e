"""JSON serialization for the site map and atomic file writing.

The sitemap is written with sorted keys and stable list ordering so that two
builds of an unchanged tree produce byte-identical output.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import TYPE_CHECKING, Any

from mdsite.model.graph import Graph

if TYPE_CHECKING:
    from mdsite.builder.checker import Report


def graph_to_json(
    graph: Graph,
    report: Report,
    *,
    output_path_for: Callable[[str], str],
    pretty: bool = True,
) -> str:
    """Serialize the document graph and check results as a sitemap."""

    outgoing: dict[str, list[str]] = {path: [] for path in graph.documents}
    incoming: dict[str, list[str]] = {path: [] for path in graph.documents}
    for source, target in graph.edges():
        outgoing[source].append(target)
        incoming[target].append(source)

    orphans = set(report.orphans)
    documents: list[dict[str, Any]] = []
    for path, doc in graph.documents.items():
        documents.append(
            {
                "path": path,
                "output": output_path_for(path),
                "title": doc.title,
                "headings": [
                    {"level": h.level, "text": h.text, "slug": h.slug} for h in doc.headings
                ],
                "links_to": outgoing[path],
                "linked_from": incoming[path],
                "orphan": path in orphans,
            }
        )

    obj = {
        "schema_version": 1,
        "index": graph.index,
        "documents": documents,
        "unresolved": [
            {"source": e.source, "line": e.line, "target": e.target, "reason": e.reason}
            for e in report.unresolved
        ],
    }
    text = json.dumps(
        obj,
        ensure_ascii=False,
        sort_keys=True,
        indent=2 if pretty else None,
    )
    return text + "\n"


def atomic_write_text(path: Path, data: str, *, encoding: str = "utf-8") -> None:
    """Atomically write text to a file by writing to a temp file then replacing.

    Ensures parent directories exist and minimizes risk of partial writes.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with NamedTemporaryFile(
        "w", encoding=encoding, dir=str(path.parent), delete=False, newline=""
    ) as tmp:
        tmp.write(data)
        tmp.flush()
        os.fsync(tmp.fileno())
        tmp_path = Path(tmp.name)
    os.replace(tmp_path, path)


__all__ = [
    "atomic_write_text",
    "graph_to_json",
]
