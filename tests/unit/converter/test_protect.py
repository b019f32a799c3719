"""Tests for region protection (extract / restore)."""

from notionsync.converter.protect import extract, find_unresolved_tokens, restore
from notionsync.models import ProtectedRegion, RegionKind

FENCE = "```python\nprint('>not a quote')\n```"
DETAILS = "<details>\n<summary>More</summary>\nhidden\n</details>"


class TestExtract:

    def test_code_fence_replaced_by_token(self):
        text, regions = extract(f"before\n{FENCE}\nafter")
        assert text == "before\n{{CODE_BLOCK_0}}\nafter"
        assert regions == [ProtectedRegion(RegionKind.CODE, 0, FENCE)]

    def test_disclosure_replaced_by_token(self):
        text, regions = extract(f"intro\n\n{DETAILS}\n")
        assert text == "intro\n\n{{DISCLOSURE_BLOCK_0}}\n"
        assert regions[0].kind is RegionKind.DISCLOSURE
        assert regions[0].text == DETAILS

    def test_regions_in_extraction_order(self):
        body = f"{FENCE}\n\n{DETAILS}\n\n```\nsecond\n```"
        text, regions = extract(body)
        assert [r.kind for r in regions] == [
            RegionKind.CODE,
            RegionKind.CODE,
            RegionKind.DISCLOSURE,
        ]
        assert [r.index for r in regions] == [0, 1, 2]
        assert text == "{{CODE_BLOCK_0}}\n\n{{DISCLOSURE_BLOCK_2}}\n\n{{CODE_BLOCK_1}}"

    def test_fence_inside_disclosure_is_nested(self):
        body = f"<details>\n<summary>Code</summary>\n\n{FENCE}\n</details>"
        text, regions = extract(body)
        assert text == "{{DISCLOSURE_BLOCK_1}}"
        assert regions[0].text == FENCE
        assert "{{CODE_BLOCK_0}}" in regions[1].text
        assert FENCE not in regions[1].text

    def test_fence_is_non_greedy(self):
        body = "```\na\n```\nmiddle\n```\nb\n```"
        text, regions = extract(body)
        assert text == "{{CODE_BLOCK_0}}\nmiddle\n{{CODE_BLOCK_1}}"
        assert regions[0].text == "```\na\n```"

    def test_unterminated_fence_is_ordinary_text(self):
        body = "text\n```python\nnever closed"
        text, regions = extract(body)
        assert text == body
        assert regions == []

    def test_unterminated_disclosure_is_ordinary_text(self):
        body = "<details>\n<summary>x</summary>\nno closer"
        text, regions = extract(body)
        assert text == body
        assert regions == []

    def test_disclosure_tag_case_insensitive(self):
        text, regions = extract("<DETAILS open>x</Details>")
        assert text == "{{DISCLOSURE_BLOCK_0}}"
        assert regions[0].text == "<DETAILS open>x</Details>"

    def test_no_regions(self):
        assert extract("plain") == ("plain", [])


class TestRestore:

    def test_round_trip_is_byte_identical(self):
        body = f"a\r\n{FENCE}\n<details>\n```\n  x\t\n```\n</details>\nz"
        text, regions = extract(body)
        assert restore(text, regions) == body

    def test_restore_without_tokens_is_noop(self):
        text, regions = extract(f"x\n{FENCE}")
        restored = restore(text, regions)
        assert restore(restored, regions) == restored

    def test_out_of_range_token_left_in_place(self):
        assert restore("{{CODE_BLOCK_3}}", []) == "{{CODE_BLOCK_3}}"

    def test_kind_mismatch_left_in_place(self):
        regions = [ProtectedRegion(RegionKind.CODE, 0, "```x```")]
        assert restore("{{DISCLOSURE_BLOCK_0}}", regions) == "{{DISCLOSURE_BLOCK_0}}"

    def test_no_tokens_survive_well_formed_input(self):
        body = f"{DETAILS}\n{FENCE}\n<details><summary>a</summary>\n{FENCE}\n</details>"
        text, regions = extract(body)
        assert find_unresolved_tokens(restore(text, regions)) == []


class TestFindUnresolvedTokens:

    def test_lists_tokens(self):
        text = "a {{CODE_BLOCK_0}} b {{DISCLOSURE_BLOCK_12}}"
        assert find_unresolved_tokens(text) == ["{{CODE_BLOCK_0}}", "{{DISCLOSURE_BLOCK_12}}"]

    def test_ignores_other_braces(self):
        assert find_unresolved_tokens("{{ site.url }}") == []
