from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress
from pathlib import Path

from mdsite.errors import SiteLoadError
from mdsite.ingest.extractor import extract_headings
from mdsite.model.document import Document
from mdsite.model.site_options import SiteOptions

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, dict[str, int | str]], None] | None


def safe_emit(on_progress: ProgressCallback, event: str, payload: dict[str, int | str]) -> None:
    """Call a progress callback, ignoring any failure raised by the UI side."""

    if on_progress is None:
        return
    with suppress(Exception):
        on_progress(event, payload)


def discover_sources(root: Path, extension: str = ".md") -> list[Path]:
    """Return matching regular files under root, sorted by their relative path."""

    if not root.exists():
        raise SiteLoadError(root, reason="source root does not exist")
    if not root.is_dir():
        raise SiteLoadError(root, reason="source root is not a directory")

    try:
        files = [p for p in root.rglob(f"*{extension}") if p.is_file()]
    except OSError as exc:
        raise SiteLoadError(root, cause=exc) from exc
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def read_document(root: Path, file_path: Path) -> Document:
    rel_path = file_path.relative_to(root).as_posix()
    try:
        # utf-8-sig drops a leading byte-order mark
        content = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteLoadError(file_path, cause=exc) from exc
    return Document(path=rel_path, content=content, headings=extract_headings(content))


def load_documents(
    root: Path,
    options: SiteOptions | None = None,
    on_progress: ProgressCallback = None,
) -> list[Document]:
    """Load every source document under root.

    All-or-nothing: any unreadable file raises SiteLoadError and no documents
    are returned, so a graph is never built from incomplete input.
    """

    opts = options or SiteOptions()
    files = discover_sources(root, opts.extension)
    safe_emit(on_progress, "load:start", {"documents": len(files)})

    def _read(file_path: Path) -> Document:
        doc = read_document(root, file_path)
        safe_emit(on_progress, "document:loaded", {"path": doc.path})
        return doc

    if opts.workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=opts.workers) as executor:
            # map() preserves input order; the first failure propagates
            documents = list(executor.map(_read, files))
    else:
        documents = [_read(f) for f in files]

    logger.info("Loaded %d documents from %s (workers=%d)", len(documents), root, opts.workers)
    return documents


__all__ = [
    "ProgressCallback",
    "discover_sources",
    "load_documents",
    "read_document",
    "safe_emit",
]
