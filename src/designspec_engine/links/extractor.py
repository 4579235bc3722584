"""Find design links in a body of text.

Two syntactic forms are recognized over the same URL shape:
- labeled: ``[homepage design](https://www.figma.com/design/...)``
- bare:    ``https://www.figma.com/design/...``

Each URL yields one LinkMatch per scan. Later occurrences of the same URL
are kept on the primary match as ``repeats`` so the splicer can rewrite
them too.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum

from designspec_engine import DEFAULT_DESIGN_HOST
from designspec_engine.links.parser import link_patterns, parse_url

# Sentence punctuation that may trail a bare URL in prose
_TRAILING_PUNCTUATION = ".,;:!?"


class LinkFormat(str, Enum):
    PLAIN = "plain"
    LABELED = "labeled"


class LinkOrigin(str, Enum):
    ABOVE_SECTION = "above_section"
    WITHIN_SECTION = "within_section"


@dataclass(frozen=True)
class LinkMatch:
    """A design link found in a document snapshot.

    ``offset`` indexes the snapshot the match was computed from and is
    stale once the text has been spliced.
    """
    raw_text: str
    url: str
    file_id: str
    node_id: str
    offset: int
    format: LinkFormat = LinkFormat.PLAIN
    origin: LinkOrigin = LinkOrigin.ABOVE_SECTION
    label: str | None = None
    version_id: str | None = None
    repeats: tuple[LinkMatch, ...] = field(default=(), compare=False)

    @property
    def end(self) -> int:
        return self.offset + len(self.raw_text)

    def occurrences(self) -> list[LinkMatch]:
        """This match followed by its repeats, without nested repeats."""
        return [replace(self, repeats=())] + list(self.repeats)


def extract_links(
    text: str,
    origin: LinkOrigin = LinkOrigin.ABOVE_SECTION,
    base_offset: int = 0,
    host: str = DEFAULT_DESIGN_HOST,
) -> list[LinkMatch]:
    """Scan text for design links.

    Args:
        text: Region to scan.
        origin: Where the region sits relative to the managed section.
        base_offset: Offset of ``text`` inside the full document, so that
            match offsets index the document rather than the region.
        host: Design tool host name.

    Returns:
        Matches ordered by appearance, one per distinct URL.
    """
    return merge_repeats(_scan(text, origin, base_offset, host))


def merge_repeats(matches: list[LinkMatch]) -> list[LinkMatch]:
    """Collapse matches sharing a URL into one primary match.

    The primary is the first labeled occurrence if there is one, otherwise
    the first occurrence. Groups are ordered by where their URL first
    appears.
    """
    flat: list[LinkMatch] = []
    for m in matches:
        flat.extend(m.occurrences())
    flat.sort(key=lambda m: m.offset)

    groups: dict[str, list[LinkMatch]] = {}
    for m in flat:
        groups.setdefault(m.url, []).append(m)

    merged = []
    for group in groups.values():
        labeled = [m for m in group if m.format is LinkFormat.LABELED]
        primary = labeled[0] if labeled else group[0]
        rest = tuple(m for m in group if m is not primary)
        merged.append((group[0].offset, replace(primary, repeats=rest)))

    merged.sort(key=lambda pair: pair[0])
    return [m for _, m in merged]


def _scan(
    text: str,
    origin: LinkOrigin,
    base_offset: int,
    host: str,
) -> list[LinkMatch]:
    labeled_re, bare_re = link_patterns(host)
    found: list[LinkMatch] = []
    labeled_spans: list[tuple[int, int]] = []

    for m in labeled_re.finditer(text):
        parsed = parse_url(m.group(2))
        if parsed is None:
            continue
        labeled_spans.append(m.span())
        label = m.group(1)
        # A label that is itself a design URL would survive the rewrite as a bare link
        if bare_re.search(label):
            label = None
        found.append(LinkMatch(
            raw_text=m.group(0),
            url=m.group(2),
            file_id=parsed.file_id,
            node_id=parsed.node_id,
            version_id=parsed.version_id,
            offset=base_offset + m.start(),
            format=LinkFormat.LABELED,
            origin=origin,
            label=label,
        ))

    for m in bare_re.finditer(text):
        start, end = m.span()
        if any(s <= start < e for s, e in labeled_spans):
            continue
        # Cut a bare URL that runs straight into a labeled link
        end = min([s for s, _ in labeled_spans if start < s < end], default=end)
        url = text[start:end].rstrip(_TRAILING_PUNCTUATION)
        parsed = parse_url(url)
        if parsed is None:
            continue
        found.append(LinkMatch(
            raw_text=url,
            url=url,
            file_id=parsed.file_id,
            node_id=parsed.node_id,
            version_id=parsed.version_id,
            offset=base_offset + start,
            format=LinkFormat.PLAIN,
            origin=origin,
        ))

    found.sort(key=lambda m: m.offset)
    return found
