"""Mask already-generated catalog entries inside the managed section.

An entry is protected only when a START marker and an END marker carry
the same number, with no second START of that number in between.
Unpaired or mismatched markers are left in place and their surroundings
are treated as ordinary, scannable text.
"""

from __future__ import annotations

import re

_PROTECTED_RE = re.compile(
    r"<!--\s*START_SPEC_(\d+)(?!\d)[^>]*?-->"
    r"(?:(?!<!--\s*START_SPEC_\1(?!\d)).)*?"
    r"<!--\s*END_SPEC_\1(?!\d)[^>]*?-->",
    re.DOTALL,
)


def protected_spans(text: str, base_offset: int = 0) -> list[tuple[int, int]]:
    """Spans (start, end) of complete START/END pairs, offset by base_offset."""
    return [
        (base_offset + m.start(), base_offset + m.end())
        for m in _PROTECTED_RE.finditer(text)
    ]


def unprotected_spans(text: str, base_offset: int = 0) -> list[tuple[int, int]]:
    """Complement of protected_spans within ``text``; empty spans are dropped."""
    spans = []
    cursor = 0
    for start, end in protected_spans(text):
        if start > cursor:
            spans.append((base_offset + cursor, base_offset + start))
        cursor = end
    if cursor < len(text):
        spans.append((base_offset + cursor, base_offset + len(text)))
    return spans


def strip_protected(text: str) -> str:
    """Return ``text`` with every complete protected entry removed."""
    return _PROTECTED_RE.sub("", text)


def protected_numbers(text: str) -> list[int]:
    """Entry numbers of the complete protected pairs, in document order."""
    return [int(m.group(1)) for m in _PROTECTED_RE.finditer(text)]
