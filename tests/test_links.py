"""Tests for design URL parsing and link extraction."""

import pytest

from designspec_engine.links.extractor import (
    LinkFormat,
    LinkOrigin,
    extract_links,
    merge_repeats,
)
from designspec_engine.links.parser import (
    build_design_url,
    normalize_node_id,
    parse_url,
)

FIGMA_URL = "https://www.figma.com/design/PtEQFlGwta7PzrMwRjqquH/Homepage--9.2?node-id=3143-20344"


class TestNormalizeNodeId:
    def test_first_hyphen_becomes_colon(self):
        assert normalize_node_id("3143-20344") == "3143:20344"

    def test_only_first_hyphen(self):
        assert normalize_node_id("3143-20-344") == "3143:20-344"

    def test_percent_encoded_colon(self):
        assert normalize_node_id("3143%3A20344") == "3143:20344"


class TestParseUrl:
    def test_parses_file_and_node(self):
        parsed = parse_url(FIGMA_URL)
        assert parsed.file_id == "PtEQFlGwta7PzrMwRjqquH"
        assert parsed.node_id == "3143:20344"
        assert parsed.version_id is None

    def test_captures_version(self):
        parsed = parse_url(FIGMA_URL + "&version-id=2260315635405056828&m=dev")
        assert parsed.version_id == "2260315635405056828"

    def test_node_id_not_first_param(self):
        parsed = parse_url("https://www.figma.com/design/ABC/Name?t=xyz&node-id=1-2")
        assert parsed.node_id == "1:2"

    def test_missing_node_id_is_not_a_link(self):
        assert parse_url("https://www.figma.com/design/ABC/Name?t=xyz") is None

    def test_missing_file_segment_is_not_a_link(self):
        assert parse_url("https://www.figma.com/?node-id=1-2") is None

    def test_to_dict(self):
        assert parse_url(FIGMA_URL).to_dict() == {
            "file_id": "PtEQFlGwta7PzrMwRjqquH",
            "node_id": "3143:20344",
            "version_id": None,
        }


class TestBuildDesignUrl:
    def test_clean_url(self):
        url = build_design_url("PtEQFlGwta7PzrMwRjqquH", "3143:20344", "2260315635405056828")
        assert url == (
            "https://www.figma.com/design/PtEQFlGwta7PzrMwRjqquH/"
            "?node-id=3143-20344&version-id=2260315635405056828&m=dev"
        )

    def test_clean_url_is_itself_parseable(self):
        url = build_design_url("ABC", "1:2-3", "V9", host="tool.example")
        parsed = parse_url(url)
        assert (parsed.file_id, parsed.node_id, parsed.version_id) == ("ABC", "1:2-3", "V9")


class TestExtractLinks:
    def test_bare_url(self):
        text = f"Please see {FIGMA_URL} for details"
        [match] = extract_links(text)
        assert match.format is LinkFormat.PLAIN
        assert match.raw_text == FIGMA_URL
        assert match.offset == text.index(FIGMA_URL)
        assert match.node_id == "3143:20344"

    def test_labeled_link_wins_over_inner_url(self):
        text = f"Check [homepage design]({FIGMA_URL}) now"
        [match] = extract_links(text)
        assert match.format is LinkFormat.LABELED
        assert match.label == "homepage design"
        assert match.raw_text == f"[homepage design]({FIGMA_URL})"
        assert match.offset == text.index("[")
        assert match.repeats == ()

    def test_orders_by_appearance(self):
        other = "https://www.figma.com/design/XYZ/Other?node-id=1-2"
        text = f"first {other}\nthen [label]({FIGMA_URL})"
        matches = extract_links(text)
        assert [m.file_id for m in matches] == ["XYZ", "PtEQFlGwta7PzrMwRjqquH"]

    def test_duplicate_url_becomes_repeat(self):
        text = f"{FIGMA_URL}\nagain: [label]({FIGMA_URL})"
        [match] = extract_links(text)
        assert match.format is LinkFormat.LABELED
        assert len(match.repeats) == 1
        assert match.repeats[0].format is LinkFormat.PLAIN
        assert match.repeats[0].offset == 0

    def test_trailing_sentence_punctuation_is_dropped(self):
        [match] = extract_links(f"See {FIGMA_URL}.")
        assert match.raw_text == FIGMA_URL
        assert match.node_id == "3143:20344"

    def test_url_without_node_id_is_ignored(self):
        assert extract_links("https://www.figma.com/design/ABC/Name?t=1") == []

    def test_other_hosts_are_ignored(self):
        assert extract_links("https://example.com/design/ABC/Name?node-id=1-2") == []

    def test_custom_host(self):
        text = "See https://tool.example/design/ABC123/Name?node-id=10-20"
        [match] = extract_links(text, host="tool.example")
        assert match.file_id == "ABC123"
        assert match.node_id == "10:20"

    def test_base_offset_and_origin(self):
        [match] = extract_links(FIGMA_URL, LinkOrigin.WITHIN_SECTION, base_offset=100)
        assert match.offset == 100
        assert match.origin is LinkOrigin.WITHIN_SECTION

    def test_url_inside_html_attribute_stops_at_quote(self):
        [match] = extract_links(f'<a href="{FIGMA_URL}">x</a>')
        assert match.raw_text == FIGMA_URL

    def test_bare_url_running_into_labeled_link(self):
        other = "https://www.figma.com/design/XYZ/Other?node-id=1-2"
        text = f"{FIGMA_URL}[x]({other})"
        bare, labeled = extract_links(text)
        assert bare.format is LinkFormat.PLAIN
        assert bare.raw_text == FIGMA_URL
        assert labeled.format is LinkFormat.LABELED
        assert labeled.offset == len(FIGMA_URL)
        assert bare.end <= labeled.offset

    def test_url_used_as_its_own_label_drops_label(self):
        [match] = extract_links(f"[{FIGMA_URL}]({FIGMA_URL})")
        assert match.format is LinkFormat.LABELED
        assert match.label is None
        assert match.repeats == ()


class TestMergeRepeats:
    def test_merges_across_regions(self):
        above = extract_links(f"{FIGMA_URL}\n")
        within = extract_links(FIGMA_URL, LinkOrigin.WITHIN_SECTION, base_offset=500)
        [merged] = merge_repeats(above + within)
        assert merged.origin is LinkOrigin.ABOVE_SECTION
        assert [r.offset for r in merged.repeats] == [500]
        assert merged.repeats[0].origin is LinkOrigin.WITHIN_SECTION

    @pytest.mark.parametrize("count", [1, 3])
    def test_distinct_urls_stay_separate(self, count):
        text = " ".join(
            f"https://www.figma.com/design/F{i}/N?node-id=1-{i}" for i in range(count)
        )
        assert len(extract_links(text)) == count
