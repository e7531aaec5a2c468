"""
Keyword anchor helper 테스트

place_after_keyword / place_before_keyword / extend_over_terminator
"""

from codegraph_upgrade.domain.text import (
    Insertion,
    extend_over_terminator,
    find_unique_keyword,
    is_multiline,
    place_after_keyword,
    place_before_keyword,
)


def header_span(text: str) -> tuple[int, int]:
    return 0, text.index("{")


class TestPlaceAfterKeyword:
    """keyword 뒤 marker 삽입"""

    def test_inline_insertion(self):
        text = "function f() public {}"
        start, end = header_span(text)

        insertion = place_after_keyword(text, start, end, "public", "override")

        assert insertion == Insertion(text.index("public") + 6, " override")

    def test_keyword_ending_its_line_gets_own_line(self):
        text = "function f()\n    public\n    returns (uint)\n{}"
        start, end = header_span(text)

        insertion = place_after_keyword(text, start, end, "public", "override")

        assert insertion.text == "\n    override"
        patched = text[: insertion.offset] + insertion.text + text[insertion.offset :]
        assert patched == "function f()\n    public\n    override\n    returns (uint)\n{}"

    def test_end_of_header_is_not_end_of_line(self):
        text = "function f() public{}"
        start, end = header_span(text)

        insertion = place_after_keyword(text, start, end, "public", "virtual")

        assert insertion.text == " virtual"

    def test_crlf_line_endings(self):
        text = "function f()\r\n  external\r\n{}"
        start, end = header_span(text)

        insertion = place_after_keyword(text, start, end, "external", "override")

        assert insertion.text == "\n  override"

    def test_absent_keyword(self):
        text = "function f() {}"

        assert place_after_keyword(text, 0, text.index("{"), "public", "virtual") is None

    def test_ambiguous_keyword(self):
        text = "function public() public {}"

        assert place_after_keyword(text, 0, text.index("{"), "public", "virtual") is None

    def test_whole_word_match_only(self):
        text = "function publicity() public {}"
        start, end = header_span(text)

        insertion = place_after_keyword(text, start, end, "public", "virtual")

        assert insertion.offset == text.index("() public") + len("() public")

    def test_search_limited_to_span(self):
        text = "function f() public {}\nfunction g() public {}"
        start = text.index("function g")
        end = text.index("{", start)

        insertion = place_after_keyword(text, start, end, "public", "virtual")

        assert insertion.offset == text.rindex("public") + 6


class TestPlaceBeforeKeyword:
    def test_insert_before(self):
        text = "contract A {}"

        assert place_before_keyword(text, 0, text.index("{"), "contract", "abstract") == Insertion(0, "abstract ")

    def test_offset_inside_text(self):
        text = "pragma solidity ^0.5.0;\n\ncontract A is B {}"
        start = text.index("contract")

        insertion = place_before_keyword(text, start, text.index("{"), "contract", "abstract")

        assert insertion.offset == start


class TestHelpers:
    def test_is_multiline(self):
        assert is_multiline("function f()\n  public\n", "public")
        assert not is_multiline("function f() public ", "public")
        assert not is_multiline("function f() public view\n", "public")

    def test_find_unique_keyword(self):
        text = "a public b"

        match = find_unique_keyword(text, 0, len(text), "public")

        assert match.start() == 2
        assert find_unique_keyword(text, 0, 2, "public") is None

    def test_extend_over_terminator(self):
        text = "x = 1 ;\ny"

        assert extend_over_terminator(text, 5) == 7
        assert extend_over_terminator("x = 1;", 5) == 6

    def test_extend_without_terminator(self):
        assert extend_over_terminator("x = 1\ny", 5) == 5
        assert extend_over_terminator("x = 1", 5) == 5
