"""Locate the managed Design Specs section inside a document.

A section is closed when the end marker follows its heading; otherwise
it is open and runs to the next heading of the same or a higher rank
(same number of ``#`` or fewer), or to the end of the document.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from designspec_engine import SECTION_END_MARKER, SECTION_LABEL
from designspec_engine.section.headings import Heading, iter_headings
from designspec_engine.section.protected import protected_spans

_LABEL_RE = re.compile(
    r"^" + r"\s+".join(re.escape(w) for w in SECTION_LABEL.split()) + r"$",
    re.IGNORECASE,
)


class AmbiguousSectionError(ValueError):
    """More than one Design Specs heading; the document must be consolidated by hand."""

    def __init__(self, offsets: list[int]):
        self.offsets = offsets
        super().__init__(
            f"Found {len(offsets)} '{SECTION_LABEL}' headings "
            f"(at offsets {', '.join(str(o) for o in offsets)}). "
            "Merge them into a single section and re-run."
        )


@dataclass(frozen=True)
class SectionBounds:
    """Where the managed section sits in one document snapshot.

    Offsets are -1 when not found.
    """
    exists: bool = False
    heading_offset: int = -1
    heading_level: int = 2
    sentinel_offset: int = -1
    next_heading_offset: int = -1
    document_length: int = 0

    @property
    def is_closed(self) -> bool:
        """True when the end marker lies after the heading."""
        return self.exists and self.sentinel_offset > self.heading_offset

    @property
    def end(self) -> int:
        """Effective end of the section (exclusive)."""
        if not self.exists:
            return self.document_length
        if self.is_closed:
            return self.sentinel_offset
        if self.next_heading_offset >= 0:
            return self.next_heading_offset
        return self.document_length

    def above(self, document: str) -> str:
        """Document text preceding the section (everything when absent)."""
        return document[: self.heading_offset] if self.exists else document

    def section_text(self, document: str) -> str:
        """Section text from its heading up to the effective end."""
        if not self.exists:
            return ""
        return document[self.heading_offset : self.end]

    def to_dict(self) -> dict:
        return {
            "exists": self.exists,
            "heading_offset": self.heading_offset,
            "heading_level": self.heading_level,
            "sentinel_offset": self.sentinel_offset,
            "next_heading_offset": self.next_heading_offset,
            "closed": self.is_closed,
            "end": self.end,
        }


def is_section_heading(heading: Heading) -> bool:
    return bool(_LABEL_RE.match(heading.title))


def find_section_headings(document: str) -> list[Heading]:
    """Return every heading whose label is the managed section's."""
    return [h for h in iter_headings(document) if is_section_heading(h)]


def locate_section(document: str) -> SectionBounds:
    """Compute the section bounds for a document.

    Raises:
        AmbiguousSectionError: If more than one section heading exists.
    """
    headings = find_section_headings(document)
    if len(headings) > 1:
        raise AmbiguousSectionError([h.offset for h in headings])

    if not headings:
        return SectionBounds(
            exists=False,
            sentinel_offset=document.find(SECTION_END_MARKER),
            document_length=len(document),
        )

    heading = headings[0]
    sentinel = document.find(SECTION_END_MARKER, heading.offset)
    if sentinel < 0:
        sentinel = document.find(SECTION_END_MARKER)

    # Entry headings of an h6 section are h6 too; they never end the section
    protected = protected_spans(document)
    next_heading = -1
    for h in iter_headings(document, start=heading.offset + 1):
        if any(s <= h.offset < e for s, e in protected):
            continue
        if h.level <= heading.level:
            next_heading = h.offset
            break

    return SectionBounds(
        exists=True,
        heading_offset=heading.offset,
        heading_level=heading.level,
        sentinel_offset=sentinel,
        next_heading_offset=next_heading,
        document_length=len(document),
    )
