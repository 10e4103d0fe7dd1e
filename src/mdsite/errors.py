"""Exception types for the mdsite pipeline.

Two families live here:

- Fatal errors (``SiteLoadError``, ``BuildError``) abort a run before any
  output is written.
- Report entries (``UnresolvedLinkError``, ``DuplicateSlugWarning``) are
  collected by the checker so every problem in a tree surfaces in one run.
  They are never raised by the pipeline itself.
"""

from __future__ import annotations

from pathlib import Path


class SiteLoadError(OSError):
    """Raised when the source tree or one of its documents cannot be read."""

    def __init__(
        self, path: Path | str, cause: Exception | None = None, reason: str | None = None
    ) -> None:
        self.path = Path(path)
        self.cause = cause
        self.reason = reason

        message = f"Failed to read {self.path}"
        if reason:
            message += f" ({reason})"
        if cause:
            message += f": {cause}"
        super().__init__(message)


class BuildError(RuntimeError):
    """Raised for whole-run configuration problems (bad output dir, missing index)."""


class IndexNotFoundError(BuildError):
    def __init__(self, index: str) -> None:
        self.index = index
        super().__init__(f"Index document '{index}' not found in source tree")


class UnresolvedLinkError(Exception):
    """A link whose target document or anchor does not exist."""

    def __init__(self, source: str, line: int, target: str, reason: str) -> None:
        self.source = source
        self.line = line
        self.target = target
        self.reason = reason
        super().__init__(f"Unresolved link '{target}' in {source} at line {line}: {reason}")

    def diagnostic(self) -> str:
        return f"{self.source}:{self.line}: error: unresolved link '{self.target}' ({self.reason})"


class DuplicateSlugWarning(UserWarning):
    """A heading whose anchor collides with an earlier heading in the same document."""

    def __init__(self, path: str, line: int, slug: str, first_line: int) -> None:
        self.path = path
        self.line = line
        self.slug = slug
        self.first_line = first_line
        super().__init__(
            f"Duplicate heading anchor '#{slug}' in {path} at line {line} "
            f"(first defined at line {first_line})"
        )

    def diagnostic(self) -> str:
        return (
            f"{self.path}:{self.line}: warning: duplicate anchor '#{self.slug}' "
            f"(first defined at line {self.first_line})"
        )


__all__ = [
    "BuildError",
    "DuplicateSlugWarning",
    "IndexNotFoundError",
    "SiteLoadError",
    "UnresolvedLinkError",
]
