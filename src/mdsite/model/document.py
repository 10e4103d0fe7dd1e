"""Source document structures (documents and their headings)."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Heading:
    level: int  # 1-6
    text: str
    slug: str
    line: int  # 1-based


@dataclass(frozen=True, slots=True)
class Document:
    """One Markdown file of the source tree.

    - path: POSIX path relative to the source root (e.g. "guides/Intro.md")
    - content: raw text as read from disk
    - headings: ATX headings in document order, derived at load time
    """

    path: str
    content: str
    headings: tuple[Heading, ...] = field(default_factory=tuple)

    @property
    def slugs(self) -> frozenset[str]:
        return frozenset(h.slug for h in self.headings)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def title(self) -> str:
        for heading in self.headings:
            if heading.level == 1:
                return heading.text
        if self.headings:
            return self.headings[0].text
        stem, _ = posixpath.splitext(posixpath.basename(self.path))
        return stem
