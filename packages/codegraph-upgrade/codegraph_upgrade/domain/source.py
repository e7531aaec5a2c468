"""
Source Models

순수 데이터 모델 (외부 의존 없음)

Offsets are measured in Python str code points throughout the engine.
Front-end adapters that report byte offsets convert them before building
any of these values.
"""

from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True, slots=True)
class SourceRange:
    """
    Half-open range [start, end) into one unit's text snapshot.

    Only meaningful relative to the exact text it was computed against.
    """

    unit_id: str
    start: int
    end: int

    def __post_init__(self):
        if not self.unit_id:
            raise ValueError("unit_id cannot be empty")
        if self.start < 0:
            raise ValueError(f"start cannot be negative, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"end ({self.end}) must be >= start ({self.start})")

    @property
    def length(self) -> int:
        return self.end - self.start

    def fits(self, text: str) -> bool:
        """range가 주어진 텍스트 안에 있는지"""
        return self.end <= len(text)

    def contains(self, other: "SourceRange") -> bool:
        return self.unit_id == other.unit_id and self.start <= other.start and other.end <= self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def line_column(self, text: str) -> tuple[int, int]:
        """시작 위치의 (line, column), 둘 다 1-indexed"""
        line = text.count("\n", 0, self.start) + 1
        line_start = text.rfind("\n", 0, self.start) + 1
        return line, self.start - line_start + 1

    def __str__(self) -> str:
        return f"{self.unit_id}:{self.start}-{self.end}"


class Severity(IntEnum):
    """진단 심각도 (ERROR 이상이 blocking)"""

    INFO = 0
    WARNING = 1
    ERROR = 2

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        normalized = value.strip().lower()
        if normalized == "error":
            return cls.ERROR
        if normalized == "warning":
            return cls.WARNING
        return cls.INFO


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """컴파일러 진단 메시지"""

    severity: Severity
    message: str
    range: SourceRange | None = None
    error_type: str = ""

    @property
    def is_blocking(self) -> bool:
        return self.severity >= Severity.ERROR


def blocking(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    """Blocking diagnostics only (warnings are ignored for convergence)."""
    return [d for d in diagnostics if d.is_blocking]


@dataclass(slots=True)
class SourceUnit:
    """
    One tracked source file.

    Created once at load time and mutated in place by the driver; the text
    is replaced wholesale after each applied change.
    """

    unit_id: str
    text: str

    def __post_init__(self):
        if not self.unit_id:
            raise ValueError("unit_id cannot be empty")
