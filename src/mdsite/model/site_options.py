"""Site build options for mdsite.

Defaults describe the conventional layout of a Markdown documentation tree:
``.md`` sources, a ``README.md`` index, case-sensitive path comparison and
sequential file reads.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Any


class PathCase(Enum):
    """Document path comparison policy."""

    SENSITIVE = "sensitive"  # "Guide.md" and "guide.md" are different documents
    INSENSITIVE = "insensitive"  # Links match documents regardless of case


@dataclass
class SiteOptions:
    """Configuration shared by every pipeline stage.

    Path comparison is an explicit policy rather than whatever the host
    filesystem happens to do, so a tree validates the same on every platform.
    """

    # Index document, relative to the source root; traversal starts here
    index: str = "README.md"

    # Source file extension picked up by the loader
    extension: str = ".md"

    # Extension given to rendered pages
    output_extension: str = ".html"

    path_case: PathCase = PathCase.SENSITIVE

    # Number of threads used to read source files (1 = sequential)
    workers: int = 1

    @classmethod
    def from_cli(
        cls,
        *,
        index: str = "README.md",
        path_case: str = "sensitive",
        workers: int = 1,
    ) -> SiteOptions:
        """Build SiteOptions from CLI argument values.

        Args:
            index: Index document path relative to the source root
            path_case: Path comparison policy ("sensitive", "insensitive")
            workers: Number of reader threads (>= 1)

        Returns:
            SiteOptions instance with mapped enum values

        Raises:
            ValueError: If any argument has an invalid value
        """
        try:
            case_mode = PathCase(path_case)
        except ValueError as exc:
            valid_values = [mode.value for mode in PathCase]
            raise ValueError(
                f"Invalid path case '{path_case}'. Valid values: {valid_values}"
            ) from exc

        if workers < 1:
            raise ValueError(f"Invalid workers '{workers}'. Must be >= 1")

        raw_index = index.strip().replace("\\", "/")
        normalized_index = posixpath.normpath(raw_index).lstrip("/") if raw_index else ""
        if (
            not normalized_index
            or raw_index.endswith("/")
            or normalized_index in (".", "..")
            or normalized_index.startswith("../")
        ):
            raise ValueError(f"Invalid index '{index}'. Must name a document file")

        return cls(index=normalized_index, path_case=case_mode, workers=workers)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization/logging."""
        return {
            "index": self.index,
            "extension": self.extension,
            "output_extension": self.output_extension,
            "path_case": self.path_case.value,
            "workers": self.workers,
        }

    def __repr__(self) -> str:
        return (
            f"SiteOptions("
            f"index={self.index!r}, "
            f"extension={self.extension!r}, "
            f"output_extension={self.output_extension!r}, "
            f"path_case={self.path_case.value}, "
            f"workers={self.workers}"
            f")"
        )


__all__ = [
    "PathCase",
    "SiteOptions",
]
