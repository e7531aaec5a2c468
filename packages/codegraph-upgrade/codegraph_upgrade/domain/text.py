"""
Keyword Anchor Helpers

Narrow, line-aware text utilities for placing a marker next to a keyword.
Patches stay minimal: an insertion at one offset, never a rewrite of the
surrounding construct.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Insertion:
    """텍스트 삽입 위치 + 삽입 문자열"""

    offset: int
    text: str


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(r"\b" + re.escape(keyword) + r"\b")


def is_multiline(header: str, keyword: str) -> bool:
    """keyword가 자기 줄의 마지막 토큰인지 (line-aware)"""
    # End of the header slice is not an end of line
    pattern = re.compile(r"\b" + re.escape(keyword) + r"\b[ \t]*(?=\r?\n)")
    return pattern.search(header) is not None


def find_unique_keyword(text: str, start: int, end: int, keyword: str) -> re.Match[str] | None:
    """
    The single occurrence of ``keyword`` in text[start:end].

    Returns None when the keyword is absent or ambiguous.
    """
    matches = list(_keyword_pattern(keyword).finditer(text, start, end))
    if len(matches) != 1:
        return None
    return matches[0]


def place_after_keyword(text: str, start: int, end: int, keyword: str, marker: str) -> Insertion | None:
    """
    Insert ``marker`` right after ``keyword`` inside text[start:end].

    Pre: ``keyword`` appears exactly once as a whole word in the span,
    otherwise None is returned.
    Post: if the keyword ends its line the marker goes on its own new line,
    indented like the keyword's line; otherwise it follows after one space.
    """
    match = find_unique_keyword(text, start, end, keyword)
    if match is None:
        return None

    header = text[start:end]
    if is_multiline(header, keyword):
        line_start = text.rfind("\n", 0, match.start()) + 1
        indent = re.match(r"[ \t]*", text[line_start:]).group(0)
        return Insertion(match.end(), "\n" + indent + marker)
    return Insertion(match.end(), " " + marker)


def place_before_keyword(text: str, start: int, end: int, keyword: str, marker: str) -> Insertion | None:
    """
    Insert ``marker`` followed by one space right before ``keyword``.

    Same precondition as place_after_keyword.
    """
    match = find_unique_keyword(text, start, end, keyword)
    if match is None:
        return None
    return Insertion(match.start(), marker + " ")


def extend_over_terminator(text: str, end: int, terminator: str = ";") -> int:
    """
    Offset just past ``terminator`` if it follows ``end`` (after blanks).

    Returns ``end`` unchanged when the next non-blank character is something
    else.
    """
    position = end
    while position < len(text) and text[position] in " \t":
        position += 1
    if text.startswith(terminator, position):
        return position + len(terminator)
    return end
