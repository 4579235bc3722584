"""Design spec catalog engine for pull-request descriptions.

Finds design-tool links in a pull-request body, enriches them with version
and preview data, and rewrites the body so each link becomes a pointer
into a generated "Design Specs" catalog section.

The managed section is laid out as:
    ## Design Specs
    <!-- START_SPEC_1 - DO NOT EDIT CONTENT BETWEEN THESE MARKERS -->
    ...
    <!-- END_SPEC_1 -->
    <!-- END_DESIGN_SPECS - WILL NOT DETECT FIGMA LINKS BELOW THIS LINE -->

Entries between a matched START/END pair are never rescanned, and nothing
below the section sentinel is ever scanned.
"""

# Marker constants shared by the locator, filter, templates and splicer
SECTION_LABEL = "Design Specs"
SECTION_END_MARKER = (
    "<!-- END_DESIGN_SPECS - WILL NOT DETECT FIGMA LINKS BELOW THIS LINE -->"
)
ENTRY_START_TEMPLATE = "<!-- START_SPEC_{number} - DO NOT EDIT CONTENT BETWEEN THESE MARKERS -->"
ENTRY_END_TEMPLATE = "<!-- END_SPEC_{number} -->"
ANCHOR_TEMPLATE = "design-spec-{number}"

PREVIEW_TTL_DAYS = 30
DEFAULT_DESIGN_HOST = "www.figma.com"
