"""External collaborators: design API, pull-request store, local files.

The engine only depends on the two protocols below; concrete clients live
in the submodules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class ProviderError(RuntimeError):
    """An external lookup or write failed."""


class PreviewNotFoundError(ProviderError):
    """The design API returned no preview image for a node."""


@dataclass(frozen=True)
class Version:
    id: str
    created_at: str


class DesignProvider(Protocol):
    def fetch_latest_version(self, file_id: str) -> Version: ...

    def fetch_preview_url(self, file_id: str, node_id: str) -> str: ...


class DocumentStore(Protocol):
    def fetch_document(self, ref: str) -> str: ...

    def persist_document(self, ref: str, text: str) -> object: ...
