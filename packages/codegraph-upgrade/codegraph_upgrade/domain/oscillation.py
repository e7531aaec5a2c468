"""
Cycle Detector

순수 함수 기반 진동 감지

Two unsafe rules can in principle undo each other's work forever. The
detector remembers a digest of every full text state the driver produced and
reports a cycle when one recurs.
"""

import hashlib
from collections.abc import Iterable

from .source import SourceUnit


def text_state_digest(units: Iterable[SourceUnit]) -> str:
    """전체 unit 텍스트 상태의 sha256 (unit_id 순서 고정)"""
    digest = hashlib.sha256()
    for unit in sorted(units, key=lambda u: u.unit_id):
        digest.update(unit.unit_id.encode("utf-8"))
        digest.update(b"\0")
        digest.update(unit.text.encode("utf-8"))
        digest.update(b"\0")
    return digest.hexdigest()


class CycleDetector:
    """
    진동 감지기 (순수 로직)

    외부 의존 없음, 테스트 용이
    """

    def __init__(self):
        self._seen: set[str] = set()

    def __len__(self) -> int:
        return len(self._seen)

    def observe(self, units: Iterable[SourceUnit]) -> bool:
        """
        Record the current state.

        Returns:
            True if this exact state was already observed (cycle)
        """
        state = text_state_digest(units)
        if state in self._seen:
            return True
        self._seen.add(state)
        return False
