import logging
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture
def isolate_logging():
    """Isolate logging configuration between tests.

    The CLI installs its own root handler with ``force=True``; restore the
    original handlers afterwards so later tests (and caplog) are unaffected.
    """
    original_handlers = logging.root.handlers[:]
    original_level = logging.root.level

    logging.root.handlers.clear()
    logging.root.addHandler(logging.NullHandler())

    yield

    logging.root.handlers.clear()
    logging.root.handlers.extend(original_handlers)
    logging.root.setLevel(original_level)


@pytest.fixture
def site_root(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Factory writing {relative path: content} into a fresh source tree."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "docs"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make
