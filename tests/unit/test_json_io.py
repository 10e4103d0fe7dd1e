from __future__ import annotations

import json
from pathlib import Path

from mdsite.builder.checker import check_graph
from mdsite.builder.graph import build_graph
from mdsite.builder.json_io import atomic_write_text, graph_to_json
from mdsite.ingest.extractor import extract_headings
from mdsite.model.document import Document


def _graph_and_report():  # type: ignore[no-untyped-def]
    files = {"README.md": "# Home\n[b](b/B.md)\n", "b/B.md": "# B\n## Part\n", "Z.md": "# Z\n"}
    docs = [Document(path=p, content=c, headings=extract_headings(c)) for p, c in files.items()]
    graph = build_graph(docs)
    return graph, check_graph(graph)


def test_graph_to_json_is_deterministic_and_sorted() -> None:
    graph, report = _graph_and_report()
    j1 = graph_to_json(graph, report, output_path_for=lambda p: p[:-3] + ".html")
    j2 = graph_to_json(graph, report, output_path_for=lambda p: p[:-3] + ".html")
    assert j1 == j2
    assert j1.endswith("\n")
    assert j1.index('\n  "documents"') < j1.index('\n  "index"')

    data = json.loads(j1)
    assert [d["path"] for d in data["documents"]] == ["README.md", "Z.md", "b/B.md"]
    b = data["documents"][2]
    assert b["output"] == "b/B.html"
    assert b["headings"] == [
        {"level": 1, "slug": "b", "text": "B"},
        {"level": 2, "slug": "part", "text": "Part"},
    ]
    assert b["linked_from"] == ["README.md"]
    assert data["documents"][1]["orphan"] is True


def test_graph_to_json_pretty_flag_controls_indentation() -> None:
    graph, report = _graph_and_report()
    compact = graph_to_json(graph, report, output_path_for=str, pretty=False)
    assert "\n" not in compact.rstrip("\n")


def test_atomic_write_text(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "file.json"
    atomic_write_text(path, '{"k": 1}\n')
    assert path.read_text(encoding="utf-8") == '{"k": 1}\n'
    atomic_write_text(path, "replaced")
    assert path.read_text(encoding="utf-8") == "replaced"
    assert sorted(p.name for p in path.parent.iterdir()) == ["file.json"]
