"""Parse design-tool URLs into file, node and version identifiers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import unquote

from designspec_engine import DEFAULT_DESIGN_HOST

_FILE_ID_RE = re.compile(r"/design/([^/?#\s]+)/")
_NODE_ID_RE = re.compile(r"[?&]node-id=([^&#\s)]+)")
_VERSION_ID_RE = re.compile(r"[?&]version-id=([^&#\s)]+)")


@dataclass(frozen=True)
class ParsedUrl:
    """Identifiers carried by a design URL."""
    file_id: str
    node_id: str
    version_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "file_id": self.file_id,
            "node_id": self.node_id,
            "version_id": self.version_id,
        }


def normalize_node_id(raw: str) -> str:
    """Convert a URL node id into the API's colon form.

    URLs write node ids as "3143-20344"; the API expects "3143:20344".
    Only the first hyphen is a separator ("3143-20-344" -> "3143:20-344").
    Percent-encoded ids ("3143%3A20344") already carry the colon.
    """
    node_id = unquote(raw)
    if ":" in node_id:
        return node_id
    return node_id.replace("-", ":", 1)


def denormalize_node_id(node_id: str) -> str:
    """Inverse of normalize_node_id, for building URLs."""
    return node_id.replace(":", "-", 1)


def parse_url(url: str) -> ParsedUrl | None:
    """Extract identifiers from a design URL.

    Returns None when the URL lacks the file segment or the node-id
    parameter; such URLs are not design links.
    """
    file_match = _FILE_ID_RE.search(url)
    node_match = _NODE_ID_RE.search(url)
    if not file_match or not node_match:
        return None

    version_match = _VERSION_ID_RE.search(url)
    return ParsedUrl(
        file_id=file_match.group(1),
        node_id=normalize_node_id(node_match.group(1)),
        version_id=version_match.group(1) if version_match else None,
    )


def build_design_url(
    file_id: str,
    node_id: str,
    version_id: str,
    host: str = DEFAULT_DESIGN_HOST,
) -> str:
    """Build a clean, version-pinned design URL with only the essential parameters."""
    return (
        f"https://{host}/design/{file_id}/"
        f"?node-id={denormalize_node_id(node_id)}&version-id={version_id}&m=dev"
    )


@lru_cache(maxsize=None)
def link_patterns(host: str = DEFAULT_DESIGN_HOST) -> tuple[re.Pattern, re.Pattern]:
    """Compile (labeled, bare) link patterns for a design host.

    Labeled: ``[label](https://host/design/...node-id=...)``
    Bare:    ``https://host/design/<file>/<slug>?...node-id=...``
    """
    h = re.escape(host)
    labeled = re.compile(
        rf"\[([^\]]+)\]\((https://{h}/design/[^)\s]+node-id=[^)\s]+)\)"
    )
    c = r"""[^\s)<>"']"""
    bare = re.compile(
        rf"""https://{h}/design/[^/\s)<>"']+/[^?\s)<>"']*\?"""
        rf"""(?:{c}*&)?node-id=[^&\s)<>"']+{c}*"""
    )
    return labeled, bare
