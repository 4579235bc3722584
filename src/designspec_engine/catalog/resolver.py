"""Resolve design links into numbered catalog entries.

Each link is enriched independently: a failed lookup drops that link
only and the rest of the batch carries on. Numbers are handed out after
enrichment, in discovery order, to the links that succeeded, so a
failure never leaves a gap in the catalog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable

from designspec_engine import DEFAULT_DESIGN_HOST, PREVIEW_TTL_DAYS
from designspec_engine.catalog.templates import anchor_id, render_entry, render_reference
from designspec_engine.links.extractor import LinkMatch, LinkOrigin
from designspec_engine.links.parser import build_design_url
from designspec_engine.providers import DesignProvider, ProviderError, Version
from designspec_engine.section.numbering import assign_numbers

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with a Z suffix, e.g. 2025-01-01T00:00:00Z."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def preview_expiry(resolved_at: datetime) -> date:
    """Calendar date the preview URL stops working, counted from resolution time."""
    return (resolved_at + timedelta(days=PREVIEW_TTL_DAYS)).date()


def version_from_tag(version_id: str, resolved_at: datetime) -> Version:
    """Version record for a tag pinned in the URL; its timestamp is the resolution time."""
    return Version(id=version_id, created_at=format_timestamp(resolved_at))


@dataclass(frozen=True)
class Enrichment:
    version: str
    timestamp: str
    preview_url: str
    expires_on: date
    design_url: str


@dataclass(frozen=True)
class ResolvedEntry:
    """A link with its catalog number and enrichment data."""
    number: int
    match: LinkMatch
    version: str
    timestamp: str
    preview_url: str
    expires_on: date
    design_url: str

    @property
    def anchor(self) -> str:
        return anchor_id(self.number)

    def snippet(self, section_level: int = 2) -> str:
        return render_entry(
            number=self.number,
            preview_url=self.preview_url,
            design_url=self.design_url,
            version=self.version,
            timestamp=self.timestamp,
            expires=self.expires_on.isoformat(),
            section_level=section_level,
        )

    def reference_for(self, occurrence: LinkMatch) -> str:
        """Replacement text for one occurrence of this entry's link.

        Links already inside the section are removed rather than pointed
        back at the catalog.
        """
        if occurrence.origin is LinkOrigin.WITHIN_SECTION:
            return ""
        return render_reference(self.number, occurrence.label)

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "anchor": self.anchor,
            "url": self.match.url,
            "file_id": self.match.file_id,
            "node_id": self.match.node_id,
            "version": self.version,
            "timestamp": self.timestamp,
            "preview_url": self.preview_url,
            "expires_on": self.expires_on.isoformat(),
        }


@dataclass(frozen=True)
class ResolutionFailure:
    match: LinkMatch
    error: str

    def to_dict(self) -> dict:
        return {"url": self.match.url, "error": self.error}


class Resolver:
    """Enrich links through a DesignProvider, caching lookups for one run."""

    def __init__(
        self,
        provider: DesignProvider,
        clock: Clock = utc_now,
        host: str = DEFAULT_DESIGN_HOST,
    ):
        self.provider = provider
        self.clock = clock
        self.host = host
        self._versions: dict[str, Version] = {}
        self._previews: dict[tuple[str, str], str] = {}

    def latest_version(self, file_id: str) -> Version:
        if file_id not in self._versions:
            self._versions[file_id] = self.provider.fetch_latest_version(file_id)
        return self._versions[file_id]

    def preview_url(self, file_id: str, node_id: str) -> str:
        key = (file_id, node_id)
        if key not in self._previews:
            self._previews[key] = self.provider.fetch_preview_url(file_id, node_id)
        return self._previews[key]

    def enrich(self, match: LinkMatch) -> Enrichment:
        """Look up version and preview data for one link.

        Raises:
            ProviderError: If either lookup fails.
        """
        resolved_at = self.clock()
        if match.version_id:
            logger.info("Using existing version from URL: %s", match.version_id)
            version = version_from_tag(match.version_id, resolved_at)
        else:
            version = self.latest_version(match.file_id)

        preview = self.preview_url(match.file_id, match.node_id)
        return Enrichment(
            version=version.id,
            timestamp=version.created_at,
            preview_url=preview,
            expires_on=preview_expiry(resolved_at),
            design_url=build_design_url(match.file_id, match.node_id, version.id, self.host),
        )

    def resolve(
        self,
        matches: Iterable[LinkMatch],
        existing_count: int,
    ) -> tuple[list[ResolvedEntry], list[ResolutionFailure]]:
        """Enrich every match, then number the successes from existing_count + 1.

        Returns:
            (entries, failures), both in discovery order.
        """
        succeeded: list[tuple[LinkMatch, Enrichment]] = []
        failures: list[ResolutionFailure] = []

        for match in matches:
            try:
                succeeded.append((match, self.enrich(match)))
            except ProviderError as e:
                logger.warning("Error processing design link %s: %s", match.url, e)
                failures.append(ResolutionFailure(match=match, error=str(e)))

        entries = [
            ResolvedEntry(
                number=number,
                match=match,
                version=info.version,
                timestamp=info.timestamp,
                preview_url=info.preview_url,
                expires_on=info.expires_on,
                design_url=info.design_url,
            )
            for number, (match, info) in assign_numbers(succeeded, existing_count)
        ]
        return entries, failures
