"""
Upgrade Change Models

불변 패치 레코드 + 순수 splice 함수
"""

from dataclasses import dataclass
from enum import Enum

from codegraph_upgrade.common.exceptions import PatchTargetError

from .source import SourceRange

MAX_SHORT_SOURCE_LENGTH = 1000


class ChangeLevel(Enum):
    """
    패치 안전 등급

    SAFE: 구성상 동작 보존 (자동 적용 가능)
    UNSAFE: 의미 변화 가능, 사람이 판단해야 함
    """

    SAFE = "safe"
    UNSAFE = "unsafe"


@dataclass(frozen=True)
class UpgradeChange:
    """
    단일 업그레이드 변경사항 (불변)

    Valid only against the exact text snapshot it was detected in; the driver
    discards every change of a pass once any change has been applied.
    """

    range: SourceRange
    replacement: str
    level: ChangeLevel
    description: str
    rule: str = ""
    context: SourceRange | None = None

    def __post_init__(self):
        if not self.description:
            raise ValueError("description cannot be empty")
        if self.context is not None and not self.context.contains(self.range):
            raise ValueError("context must contain the change range")

    @property
    def unit_id(self) -> str:
        return self.range.unit_id

    @property
    def is_safe(self) -> bool:
        return self.level == ChangeLevel.SAFE

    @property
    def is_deletion(self) -> bool:
        return not self.replacement and self.range.length > 0

    def changes(self, text: str) -> bool:
        """적용 시 텍스트가 실제로 바뀌는지"""
        return self.range.slice(text) != self.replacement

    def preview(self, text: str) -> tuple[str, str]:
        """
        (before, after) snippets of the enclosing construct.

        Falls back to the full lines touched by the change when no context
        range was recorded.
        """
        region = self.context or _line_region(text, self.range)
        before = region.slice(text)
        offset = self.range.start - region.start
        after = before[:offset] + self.replacement + before[offset + self.range.length :]
        return before, after


def apply_change(text: str, change: UpgradeChange) -> str:
    """
    Splice a change into the text it was computed against.

    text' = text[:start] + replacement + text[end:]

    Raises:
        PatchTargetError: range does not fit the text (programming error)
    """
    if not change.range.fits(text):
        raise PatchTargetError(
            "change range exceeds text length",
            details={"range": str(change.range), "length": len(text)},
        )
    return text[: change.range.start] + change.replacement + text[change.range.end :]


def shorten_source(source: str) -> str:
    """short-log 모드용 소스 축약"""
    if len(source) > MAX_SHORT_SOURCE_LENGTH:
        return source[:MAX_SHORT_SOURCE_LENGTH] + "..."
    return source


def _line_region(text: str, source_range: SourceRange) -> SourceRange:
    start = text.rfind("\n", 0, source_range.start) + 1
    end = text.find("\n", source_range.end)
    if end == -1:
        end = len(text)
    return SourceRange(source_range.unit_id, start, end)
