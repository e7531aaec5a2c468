"""
Domain Models - 순수 데이터 구조

불변성, 명시적 상태 전이

NOTE: UpgradeChange는 change.py, 트리는 tree.py에 정의됨
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .change import ChangeLevel, UpgradeChange
from .source import Diagnostic, blocking


@dataclass(frozen=True)
class UpgradePolicy:
    """
    드라이버 정책 (CLI 레이어가 제공)

    Neither apply flag set means report-only: detection runs, nothing is
    mutated.
    """

    apply_safe: bool = False
    apply_unsafe: bool = False
    verbose: bool = True

    @property
    def report_only(self) -> bool:
        return not (self.apply_safe or self.apply_unsafe)

    def allows(self, level: ChangeLevel) -> bool:
        if level == ChangeLevel.SAFE:
            return self.apply_safe
        return self.apply_unsafe


class DriverPhase(Enum):
    """드라이버 상태 머신 단계"""

    COMPILING = "compiling"
    BLOCKED = "blocked"
    REPORTING = "reporting"
    PATCHING = "patching"
    DONE = "done"


class UpgradeStatus(Enum):
    """실행 결과 상태"""

    RUNNING = "running"
    CONVERGED = "converged"  # blocking diagnostics 없음
    NO_PROGRESS = "no_progress"  # 남은 진단이 rule 범위 밖
    REPORTED = "reported"  # report-only 모드 종료
    BLOCKED = "blocked"  # 트리 생성 불가 (parse failure)
    CYCLE_DETECTED = "cycle_detected"  # 이전 텍스트 상태 재등장
    BUDGET_EXCEEDED = "budget_exceeded"  # max_iterations 도달
    ABORTED = "aborted"  # front end 예외

    @property
    def is_failure(self) -> bool:
        return self in (UpgradeStatus.BLOCKED, UpgradeStatus.ABORTED)


@dataclass(frozen=True)
class UpgradeState:
    """
    업그레이드 실행 상태 (불변)

    The driver threads one value through the loop and returns the last one;
    it always carries the last known diagnostic set.
    """

    status: UpgradeStatus = UpgradeStatus.RUNNING
    phase: DriverPhase = DriverPhase.COMPILING
    iteration: int = 0
    applied: tuple[UpgradeChange, ...] = ()
    findings: tuple[UpgradeChange, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    error_message: str | None = None

    def with_phase(self, phase: DriverPhase) -> UpgradeState:
        """상태 머신 전이"""
        return replace(self, phase=phase)

    def with_status(self, status: UpgradeStatus, error_message: str | None = None) -> UpgradeState:
        """종료 상태 설정 (항상 DONE/BLOCKED 단계로 이동)"""
        phase = DriverPhase.BLOCKED if status == UpgradeStatus.BLOCKED else DriverPhase.DONE
        return replace(self, status=status, phase=phase, error_message=error_message or self.error_message)

    def with_diagnostics(self, diagnostics: list[Diagnostic]) -> UpgradeState:
        return replace(self, diagnostics=tuple(diagnostics))

    def with_applied(self, change: UpgradeChange) -> UpgradeState:
        """적용된 변경 추가 + iteration 증가"""
        return replace(self, applied=self.applied + (change,), iteration=self.iteration + 1)

    def with_findings(self, findings: list[UpgradeChange]) -> UpgradeState:
        return replace(self, findings=tuple(findings))

    @property
    def blocking_diagnostics(self) -> list[Diagnostic]:
        return blocking(list(self.diagnostics))

    @property
    def is_done(self) -> bool:
        return self.status != UpgradeStatus.RUNNING

    @property
    def resolved(self) -> bool:
        """blocking 진단 없이 종료했는지"""
        return self.is_done and not self.status.is_failure and not self.blocking_diagnostics
