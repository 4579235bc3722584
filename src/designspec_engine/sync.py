"""Design spec sync: one pass over one document.

The sync process:
1. Locate the Design Specs section (fatal if there are two)
2. Count existing entries from the unfiltered section text
3. Collect links above the section, then links in the section's
   unprotected regions
4. Enrich each link; number the successes in discovery order
5. Rewrite the links and insert the new entries
6. Persist only if the text changed

Running it again on its own output is a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from designspec_engine import DEFAULT_DESIGN_HOST
from designspec_engine.catalog.resolver import (
    Clock,
    ResolutionFailure,
    ResolvedEntry,
    Resolver,
    utc_now,
)
from designspec_engine.links.extractor import LinkMatch, LinkOrigin, extract_links, merge_repeats
from designspec_engine.providers import DesignProvider, DocumentStore
from designspec_engine.section.locator import SectionBounds, locate_section
from designspec_engine.section.numbering import existing_entry_count
from designspec_engine.section.protected import unprotected_spans
from designspec_engine.section.splicer import splice_document

logger = logging.getLogger(__name__)


@dataclass
class Analysis:
    """What a run would work on, before any external lookups."""
    bounds: SectionBounds
    existing_count: int
    matches: list[LinkMatch] = field(default_factory=list)

    @property
    def above_count(self) -> int:
        return sum(1 for m in self.matches if m.origin is LinkOrigin.ABOVE_SECTION)

    @property
    def within_count(self) -> int:
        return sum(1 for m in self.matches if m.origin is LinkOrigin.WITHIN_SECTION)


@dataclass
class SyncOutcome:
    original: str
    document: str
    analysis: Analysis
    entries: list[ResolvedEntry] = field(default_factory=list)
    failures: list[ResolutionFailure] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.document != self.original


def collect_links(
    document: str,
    bounds: SectionBounds,
    host: str = DEFAULT_DESIGN_HOST,
) -> list[LinkMatch]:
    """Links above the section, then links in its unprotected regions."""
    found = extract_links(bounds.above(document), LinkOrigin.ABOVE_SECTION, 0, host)
    if bounds.exists:
        section = bounds.section_text(document)
        for start, end in unprotected_spans(section, bounds.heading_offset):
            found.extend(
                extract_links(document[start:end], LinkOrigin.WITHIN_SECTION, start, host)
            )
    return merge_repeats(found)


def analyze_document(document: str, host: str = DEFAULT_DESIGN_HOST) -> Analysis:
    """Locate the section, count its entries and collect links to process.

    Raises:
        AmbiguousSectionError: If the document has more than one section heading.
    """
    bounds = locate_section(document)
    existing = existing_entry_count(bounds.section_text(document))
    return Analysis(
        bounds=bounds,
        existing_count=existing,
        matches=collect_links(document, bounds, host),
    )


def sync_document(
    document: str,
    provider: DesignProvider,
    clock: Clock = utc_now,
    host: str = DEFAULT_DESIGN_HOST,
) -> SyncOutcome:
    """Compute the synced version of a document.

    Nothing is persisted here; per-link lookup failures are reported on
    the outcome rather than raised.
    """
    analysis = analyze_document(document, host)
    logger.info(
        "Found %d existing Design Spec entries; %d link(s) above the section, "
        "%d within unprotected areas",
        analysis.existing_count, analysis.above_count, analysis.within_count,
    )
    if not analysis.matches:
        return SyncOutcome(original=document, document=document, analysis=analysis)

    resolver = Resolver(provider, clock=clock, host=host)
    entries, failures = resolver.resolve(analysis.matches, analysis.existing_count)
    return SyncOutcome(
        original=document,
        document=splice_document(document, entries),
        analysis=analysis,
        entries=entries,
        failures=failures,
    )


def sync_stored_document(
    store: DocumentStore,
    ref: str,
    provider: DesignProvider,
    dry_run: bool = False,
    clock: Clock = utc_now,
    host: str = DEFAULT_DESIGN_HOST,
) -> dict[str, Any]:
    """Fetch a document, sync it and write it back if it changed.

    Args:
        store: Where the document lives.
        ref: Document reference within the store (PR number, file path).
        provider: Design API used for enrichment.
        dry_run: If True, report the result without writing.

    Returns:
        Summary dict with action, entries, errors and the new document.
    """
    original = store.fetch_document(ref)
    logger.info("Current body length: %d", len(original))
    outcome = sync_document(original, provider, clock=clock, host=host)

    status = None
    if outcome.changed:
        action = "updated"
        logger.info(
            "Body diff: %d characters added", len(outcome.document) - len(original)
        )
        if not dry_run:
            status = store.persist_document(ref, outcome.document)
    else:
        action = "unchanged"

    return {
        "ref": ref,
        "action": action,
        "status": status,
        "existing": outcome.analysis.existing_count,
        "found": len(outcome.analysis.matches),
        "entries": [e.to_dict() for e in outcome.entries],
        "errors": [f.to_dict() for f in outcome.failures],
        "document": outcome.document,
        "dry_run": dry_run,
    }
