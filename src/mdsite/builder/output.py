from __future__ import annotations

import logging
import shutil
from pathlib import Path

from mdsite.builder.json_io import atomic_write_text
from mdsite.errors import BuildError
from mdsite.render.html import RenderedSite

logger = logging.getLogger(__name__)


def ensure_safe_output_dir(source_root: Path, out_dir: Path) -> None:
    """Refuse output directories whose regeneration would delete the sources."""

    src = source_root.resolve()
    out = out_dir.resolve()
    if out == src or out in src.parents:
        raise BuildError(f"Output directory {out_dir} would overwrite source tree {source_root}")
    if out.exists() and not out.is_dir():
        raise BuildError(f"Output path {out_dir} exists and is not a directory")


def write_site(site: RenderedSite, out_dir: Path, *, source_root: Path) -> list[Path]:
    """Regenerate out_dir from a rendered site.

    The directory is removed and rewritten in full on every run; it is never
    patched incrementally, so files from earlier builds cannot linger.
    """

    ensure_safe_output_dir(source_root, out_dir)
    if out_dir.exists():
        logger.debug("Removing previous output %s", out_dir)
        shutil.rmtree(out_dir)
    out_dir.mkdir(parents=True)

    written: list[Path] = []
    for rel_path, text in site.files.items():
        target = out_dir / rel_path
        atomic_write_text(target, text)
        written.append(target)

    logger.info("Wrote %d files to %s", len(written), out_dir)
    return written


__all__ = ["ensure_safe_output_dir", "write_site"]
