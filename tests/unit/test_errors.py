"""Tests for mdsite exception types."""

from __future__ import annotations

from pathlib import Path

from mdsite.errors import (
    BuildError,
    DuplicateSlugWarning,
    IndexNotFoundError,
    SiteLoadError,
    UnresolvedLinkError,
)


class TestSiteLoadError:
    def test_is_an_ioerror(self) -> None:
        error = SiteLoadError(Path("/docs"))
        assert isinstance(error, IOError)
        assert str(error) == "Failed to read /docs"

    def test_with_reason(self) -> None:
        error = SiteLoadError(Path("/docs"), reason="source root does not exist")
        assert error.reason == "source root does not exist"
        assert str(error) == "Failed to read /docs (source root does not exist)"

    def test_with_cause(self) -> None:
        cause = PermissionError("denied")
        error = SiteLoadError("/docs/a.md", cause=cause)
        assert error.path == Path("/docs/a.md")
        assert error.cause is cause
        assert str(error) == "Failed to read /docs/a.md: denied"


def test_index_not_found_is_build_error() -> None:
    error = IndexNotFoundError("README.md")
    assert isinstance(error, BuildError)
    assert error.index == "README.md"
    assert str(error) == "Index document 'README.md' not found in source tree"


def test_unresolved_link_error() -> None:
    error = UnresolvedLinkError("README.md", 3, "Missing.md", "missing document")
    assert error.source == "README.md"
    assert error.line == 3
    assert str(error) == "Unresolved link 'Missing.md' in README.md at line 3: missing document"
    assert error.diagnostic() == "README.md:3: error: unresolved link 'Missing.md' (missing document)"


def test_duplicate_slug_warning() -> None:
    warning = DuplicateSlugWarning("Guide.md", 9, "setup", 4)
    assert isinstance(warning, UserWarning)
    assert warning.diagnostic() == "Guide.md:9: warning: duplicate anchor '#setup' (first defined at line 4)"
    assert "first defined at line 4" in str(warning)
