"""Markdown templates for generated catalog entries and cross-references.

Templates use str.format() with named placeholders.
"""

from __future__ import annotations

from designspec_engine import (
    ANCHOR_TEMPLATE,
    ENTRY_END_TEMPLATE,
    ENTRY_START_TEMPLATE,
    SECTION_LABEL,
)

# ── Catalog entry ─────────────────────────────────────────────────

ENTRY_SNIPPET = """\
{start_marker}
<a id="{anchor}"></a>
{hashes} 🎨 Design Spec {number} [#](#{anchor})

<kbd><img alt="Figma Design Preview" src="{preview_url}" /></kbd>

<details>
<summary>spec details</summary>

**Design Link:** [View in Figma]({design_url}) (Cmd+Click to open in new tab)

**Version:** {version}

**Snapshot Timestamp:** {timestamp}

**Image Expires:** {expires}

**Description:** 

</details>
{end_marker}"""

# ── Cross-references ──────────────────────────────────────────────

PLAIN_REFERENCE = "[Refer to Design Spec {number} below](#{anchor})"
LABELED_REFERENCE = "{label} ([Refer to Design Spec {number} below](#{anchor}))"


def anchor_id(number: int) -> str:
    return ANCHOR_TEMPLATE.format(number=number)


def section_heading(level: int = 2) -> str:
    return f"{'#' * level} {SECTION_LABEL}"


def entry_heading_level(section_level: int) -> int:
    """Entries sit one level below the section heading, never deeper than h6."""
    return min(section_level + 1, 6)


def render_entry(
    number: int,
    preview_url: str,
    design_url: str,
    version: str,
    timestamp: str,
    expires: str,
    section_level: int = 2,
) -> str:
    """Render one protected catalog entry, wrapped in its START/END markers."""
    return ENTRY_SNIPPET.format(
        start_marker=ENTRY_START_TEMPLATE.format(number=number),
        end_marker=ENTRY_END_TEMPLATE.format(number=number),
        anchor=anchor_id(number),
        hashes="#" * entry_heading_level(section_level),
        number=number,
        preview_url=preview_url,
        design_url=design_url,
        version=version,
        timestamp=timestamp,
        expires=expires,
    )


def render_reference(number: int, label: str | None = None) -> str:
    """Text that replaces an original link above the section."""
    if label:
        return LABELED_REFERENCE.format(label=label, number=number, anchor=anchor_id(number))
    return PLAIN_REFERENCE.format(number=number, anchor=anchor_id(number))

