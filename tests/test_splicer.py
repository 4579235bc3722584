"""Tests for document splicing and the insertion decision table."""

import pytest

from conftest import FakeProvider

from designspec_engine import SECTION_END_MARKER
from designspec_engine.catalog.resolver import Resolver
from designspec_engine.section.locator import locate_section
from designspec_engine.section.splicer import (
    INSERTION_TABLE,
    Edit,
    InsertionMode,
    apply_edits,
    insert_block,
    insertion_mode,
    splice_document,
)
from designspec_engine.sync import collect_links

URL = "https://www.figma.com/design/ABC/Name?node-id=1-2"
BLOCK = "<!-- START_SPEC_9 -->\nNEW\n<!-- END_SPEC_9 -->"


def resolve(document, existing=0):
    bounds = locate_section(document)
    matches = collect_links(document, bounds)
    entries, _ = Resolver(FakeProvider()).resolve(matches, existing)
    return entries


class TestDecisionTable:
    def test_table_is_total(self):
        keys = {(a, b, c) for a in (True, False) for b in (True, False) for c in (True, False)}
        assert set(INSERTION_TABLE) == keys

    @pytest.mark.parametrize("doc, mode", [
        ("no section here", InsertionMode.CREATE_SECTION),
        (f"## Design Specs\n{SECTION_END_MARKER}\n## Next\n", InsertionMode.BEFORE_SENTINEL),
        ("## Design Specs\nbody\n## Next\n", InsertionMode.CLOSE_BEFORE_NEXT_HEADING),
        ("## Design Specs\nbody\n", InsertionMode.APPEND_WITH_SENTINEL),
    ])
    def test_modes(self, doc, mode):
        assert insertion_mode(locate_section(doc)) is mode


class TestInsertBlock:
    def test_before_sentinel(self):
        doc = f"## Design Specs\n\nOLD\n\n{SECTION_END_MARKER}\n## Next\ntail"
        out = insert_block(doc, BLOCK, locate_section(doc))
        assert out == f"## Design Specs\n\nOLD\n\n{BLOCK}\n\n{SECTION_END_MARKER}\n## Next\ntail"

    def test_close_before_next_heading(self):
        doc = "## Design Specs\nbody\n## Next\ntail"
        out = insert_block(doc, BLOCK, locate_section(doc))
        assert out == f"## Design Specs\nbody\n\n{BLOCK}\n\n{SECTION_END_MARKER}\n\n## Next\ntail"
        assert out.count(SECTION_END_MARKER) == 1

    def test_append_with_sentinel(self):
        doc = "## Design Specs\nbody"
        out = insert_block(doc, BLOCK, locate_section(doc))
        assert out == f"## Design Specs\nbody\n\n{BLOCK}\n\n{SECTION_END_MARKER}"

    def test_create_section(self):
        out = insert_block("desc", BLOCK, locate_section("desc"))
        assert out == f"desc\n\n## Design Specs\n\n{BLOCK}\n\n{SECTION_END_MARKER}"

    def test_create_section_in_empty_document(self):
        out = insert_block("", BLOCK, locate_section(""))
        assert out.startswith("## Design Specs\n")


class TestApplyEdits:
    def test_applies_in_reverse_offset_order(self):
        doc = "aa bb cc"
        out = apply_edits(doc, [Edit(0, "aa", "AAAA"), Edit(6, "cc", "")])
        assert out == "AAAA bb "

    def test_stale_edit_raises(self):
        with pytest.raises(ValueError, match="Stale edit"):
            apply_edits("hello", [Edit(0, "bye", "x")])

    def test_overlapping_edits_raise(self):
        with pytest.raises(ValueError, match="Overlapping"):
            apply_edits("abcdef", [Edit(0, "abcd", "x"), Edit(2, "cd", "y")])


class TestSpliceDocument:
    def test_no_entries_is_identity(self):
        assert splice_document("anything", []) == "anything"

    def test_above_link_becomes_reference(self):
        doc = f"See {URL}"
        out = splice_document(doc, resolve(doc))
        assert out.startswith("See [Refer to Design Spec 1 below](#design-spec-1)\n\n## Design Specs\n")
        assert out.endswith(SECTION_END_MARKER)

    def test_labeled_link_keeps_label(self):
        doc = f"See [the mock]({URL}) please"
        out = splice_document(doc, resolve(doc))
        assert "See the mock ([Refer to Design Spec 1 below](#design-spec-1)) please" in out

    def test_repeated_url_rewritten_everywhere(self):
        doc = f"{URL}\nand again {URL}\n"
        out = splice_document(doc, resolve(doc))
        assert out.count("[Refer to Design Spec 1 below](#design-spec-1)") == 2
        assert "Design Spec 2" not in out

    def test_in_section_link_is_deleted(self):
        doc = f"Intro\n## Design Specs\nstray {URL}\n{SECTION_END_MARKER}"
        out = splice_document(doc, resolve(doc))
        assert "stray \n" in out
        assert "Refer to" not in out
        assert out.index("START_SPEC_1") < out.index(SECTION_END_MARKER)

    def test_entries_nest_under_deeper_section(self):
        doc = f"{URL}\n### Design Specs\n"
        out = splice_document(doc, resolve(doc))
        assert "#### 🎨 Design Spec 1" in out
