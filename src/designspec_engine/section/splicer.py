"""Text surgery on the document: rewrite links, then insert catalog entries.

Where new entries go depends on three facts about the current snapshot,
resolved through INSERTION_TABLE:

    section exists | end marker after heading | later sibling heading
    ---------------+--------------------------+----------------------
    no             | -                        | -      -> CREATE_SECTION
    yes            | yes                      | -      -> BEFORE_SENTINEL
    yes            | no                       | yes    -> CLOSE_BEFORE_NEXT_HEADING
    yes            | no                       | no     -> APPEND_WITH_SENTINEL

Entries must always land before the end marker; anything after it is
never scanned again.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Iterable

from designspec_engine import SECTION_END_MARKER
from designspec_engine.catalog.resolver import ResolvedEntry
from designspec_engine.catalog.templates import section_heading
from designspec_engine.section.locator import SectionBounds, locate_section


class InsertionMode(str, Enum):
    CREATE_SECTION = "create_section"
    BEFORE_SENTINEL = "before_sentinel"
    CLOSE_BEFORE_NEXT_HEADING = "close_before_next_heading"
    APPEND_WITH_SENTINEL = "append_with_sentinel"


# (section exists, end marker after heading, sibling heading follows) -> mode
INSERTION_TABLE: dict[tuple[bool, bool, bool], InsertionMode] = {
    (False, False, False): InsertionMode.CREATE_SECTION,
    (False, False, True): InsertionMode.CREATE_SECTION,
    (False, True, False): InsertionMode.CREATE_SECTION,
    (False, True, True): InsertionMode.CREATE_SECTION,
    (True, True, False): InsertionMode.BEFORE_SENTINEL,
    (True, True, True): InsertionMode.BEFORE_SENTINEL,
    (True, False, True): InsertionMode.CLOSE_BEFORE_NEXT_HEADING,
    (True, False, False): InsertionMode.APPEND_WITH_SENTINEL,
}


@dataclass(frozen=True)
class Edit:
    """Replace ``old`` at ``offset`` with ``new``."""
    offset: int
    old: str
    new: str


def insertion_mode(bounds: SectionBounds) -> InsertionMode:
    key = (bounds.exists, bounds.is_closed, bounds.next_heading_offset >= 0)
    return INSERTION_TABLE[key]


def apply_edit(document: str, edit: Edit) -> str:
    end = edit.offset + len(edit.old)
    if document[edit.offset:end] != edit.old:
        raise ValueError(
            f"Stale edit at offset {edit.offset}: expected {edit.old!r}, "
            f"found {document[edit.offset:end]!r}"
        )
    return document[:edit.offset] + edit.new + document[end:]


def apply_edits(document: str, edits: Iterable[Edit]) -> str:
    """Fold edits into the document, last offset first so earlier offsets stay valid."""
    ordered = sorted(edits, key=lambda e: e.offset, reverse=True)
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.offset + len(cur.old) > prev.offset:
            raise ValueError(f"Overlapping edits at offsets {cur.offset} and {prev.offset}")
    return reduce(apply_edit, ordered, document)


def reference_edits(entries: Iterable[ResolvedEntry]) -> list[Edit]:
    """One edit per occurrence of each resolved link, repeats included."""
    return [
        Edit(offset=occ.offset, old=occ.raw_text, new=entry.reference_for(occ))
        for entry in entries
        for occ in entry.match.occurrences()
    ]


def _separator(before: str) -> str:
    """Newlines needed so a block starts after a blank line."""
    if not before or before.endswith("\n\n"):
        return ""
    if before.endswith("\n"):
        return "\n"
    return "\n\n"


def insert_block(document: str, block: str, bounds: SectionBounds) -> str:
    """Insert a block of rendered entries according to INSERTION_TABLE."""
    mode = insertion_mode(bounds)

    if mode is InsertionMode.BEFORE_SENTINEL:
        before, after = document[:bounds.sentinel_offset], document[bounds.sentinel_offset:]
        return before + _separator(before) + block + "\n\n" + after

    if mode is InsertionMode.CLOSE_BEFORE_NEXT_HEADING:
        before, after = document[:bounds.next_heading_offset], document[bounds.next_heading_offset:]
        return (
            before + _separator(before) + block
            + "\n\n" + SECTION_END_MARKER + "\n\n" + after
        )

    if mode is InsertionMode.APPEND_WITH_SENTINEL:
        return document + _separator(document) + block + "\n\n" + SECTION_END_MARKER

    return (
        document + _separator(document) + section_heading() + "\n\n"
        + block + "\n\n" + SECTION_END_MARKER
    )


def splice_document(document: str, entries: list[ResolvedEntry]) -> str:
    """Rewrite every resolved link and add the new entries to the section.

    ``entries`` must carry offsets computed against ``document``.
    """
    if not entries:
        return document

    rewritten = apply_edits(document, reference_edits(entries))
    bounds = locate_section(rewritten)
    level = bounds.heading_level if bounds.exists else 2
    block = "\n\n".join(entry.snippet(level) for entry in entries)
    return insert_block(rewritten, block, bounds)
