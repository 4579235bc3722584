"""Scan markdown text for ATX headings with their character offsets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")


@dataclass(frozen=True)
class Heading:
    offset: int
    level: int
    title: str
    line: str


def iter_headings(text: str, start: int = 0) -> Iterator[Heading]:
    """Yield headings in document order, skipping fenced code blocks.

    Offsets point at the first character of the heading line. Only lines
    starting at or after ``start`` are yielded, but fences before it are
    still tracked.
    """
    offset = 0
    fence: str | None = None
    for raw in text.splitlines(keepends=True):
        line = raw.rstrip("\r\n")
        fence_match = _FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker[0] * len(marker)
            elif marker.startswith(fence):
                fence = None
        elif fence is None and offset >= start:
            m = _HEADING_RE.match(line)
            if m:
                yield Heading(
                    offset=offset,
                    level=len(m.group(1)),
                    title=(m.group(2) or "").strip(),
                    line=line,
                )
        offset += len(raw)
