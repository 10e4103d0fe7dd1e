"""Link data structures produced by extraction and graph resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LinkKind(Enum):
    INTERNAL_DOCUMENT = "internal-document"
    INTERNAL_ANCHOR = "internal-anchor"
    EXTERNAL = "external"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True, slots=True)
class LinkRef:
    """A link as written in a source document, before resolution.

    ``path`` is the target normalized against the source's directory; it is
    None for external targets and for "#anchor" links into the same document.
    """

    source: str
    line: int  # 1-based
    label: str
    target: str  # raw target as written
    path: str | None = None
    anchor: str | None = None
    external: bool = False


@dataclass(frozen=True, slots=True)
class Link:
    ref: LinkRef
    kind: LinkKind
    # Canonical document path for internal kinds
    target_path: str | None = None
    # Why resolution failed (UNRESOLVED only)
    reason: str | None = None

    @property
    def source(self) -> str:
        return self.ref.source

    @property
    def anchor(self) -> str | None:
        return self.ref.anchor

    @property
    def resolved(self) -> bool:
        return self.kind is not LinkKind.UNRESOLVED

    @property
    def internal(self) -> bool:
        return self.kind in (LinkKind.INTERNAL_DOCUMENT, LinkKind.INTERNAL_ANCHOR)


__all__ = ["Link", "LinkKind", "LinkRef"]
