"""Catalog entry numbering.

Numbers are measured fresh from the section text on every run; there is
no stored counter. New entries continue after the highest surviving
number, so a number is never reused even if earlier entries were deleted.
"""

from __future__ import annotations

import re
from typing import Iterable, TypeVar

from designspec_engine.section.headings import iter_headings

T = TypeVar("T")

_ENTRY_TITLE_RE = re.compile(r"^(?:\W+\s*)?Design\s+Spec\s+(\d+)\b", re.IGNORECASE)
_START_MARKER_RE = re.compile(r"<!--\s*START_SPEC_(\d+)(?!\d)")


def entry_heading_numbers(section_text: str) -> list[int]:
    """Numbers from entry headings such as '### 🎨 Design Spec 3'."""
    numbers = []
    for h in iter_headings(section_text):
        m = _ENTRY_TITLE_RE.match(h.title)
        if m:
            numbers.append(int(m.group(1)))
    return numbers


def start_marker_numbers(section_text: str) -> list[int]:
    """Numbers from START_SPEC_<n> markers."""
    return [int(n) for n in _START_MARKER_RE.findall(section_text)]


def existing_entry_count(section_text: str) -> int:
    """Highest entry number present in the unfiltered section text.

    Equals the number of entries for a gap-free catalog. Entry headings
    and start markers are both consulted so catalogs written without
    per-entry headings still count.
    """
    numbers = entry_heading_numbers(section_text) + start_marker_numbers(section_text)
    return max(numbers, default=0)


def assign_numbers(items: Iterable[T], existing: int) -> list[tuple[int, T]]:
    """Pair items with consecutive numbers existing+1, existing+2, ... in order."""
    return [(existing + i, item) for i, item in enumerate(items, start=1)]
