"""
Upgrade Driver - Convergence Loop

COMPILING → {BLOCKED, REPORTING, PATCHING} → COMPILING → ... → DONE

Exactly one change is applied per compilation: every change the suite
proposes was computed against the text it will be spliced into, because the
previous session is invalidated and all units are recompiled after each
application.
"""

from collections.abc import Mapping

from codegraph_upgrade.common.exceptions import SourceStoreError
from codegraph_upgrade.common.logging_config import get_logger
from codegraph_upgrade.domain.change import UpgradeChange, apply_change
from codegraph_upgrade.domain.models import DriverPhase, UpgradePolicy, UpgradeState, UpgradeStatus
from codegraph_upgrade.domain.oscillation import CycleDetector
from codegraph_upgrade.domain.source import SourceUnit
from codegraph_upgrade.domain.tree import CompilationSession
from codegraph_upgrade.rules.suite import UpgradeSuite

from .ports import CompileResult, FrontEndPort, NullReporter, ParseFailed, SourceStorePort, UpgradeReporterPort

logger = get_logger(__name__)


class UpgradeDriver:
    """
    업그레이드 수렴 루프

    Args:
        front_end: 컴파일러 oracle
        suite: 실행할 rule suite
        store: 변경 적용 후 파일 쓰기 (None이면 메모리에서만 변경)
        reporter: 진행 상황 출력
        policy: safe/unsafe 적용 정책
        max_iterations: 적용 횟수 상한 (None = 무제한)
        detect_cycles: 이전 텍스트 상태 재등장 시 중단
    """

    def __init__(
        self,
        front_end: FrontEndPort,
        suite: UpgradeSuite,
        store: SourceStorePort | None = None,
        reporter: UpgradeReporterPort | None = None,
        policy: UpgradePolicy | None = None,
        max_iterations: int | None = None,
        detect_cycles: bool = True,
    ):
        if max_iterations is not None and max_iterations <= 0:
            raise ValueError("max_iterations must be > 0")

        self.front_end = front_end
        self.suite = suite
        self.store = store
        self.reporter = reporter or NullReporter()
        self.policy = policy or UpgradePolicy()
        self.max_iterations = max_iterations
        self.detect_cycles = detect_cycles
        self.units: dict[str, SourceUnit] = {}

    @property
    def sources(self) -> dict[str, str]:
        """현재 unit 텍스트 {unit_id: text}"""
        return {unit_id: unit.text for unit_id, unit in sorted(self.units.items())}

    def run(self, sources: Mapping[str, str]) -> UpgradeState:
        """
        메인 루프 실행

        Args:
            sources: 초기 unit 텍스트 {unit_id: text}

        Returns:
            최종 상태 (항상 마지막으로 알려진 diagnostics 포함)
        """
        self.units = {unit_id: SourceUnit(unit_id, text) for unit_id, text in sources.items()}
        cycles = CycleDetector()

        state = UpgradeState()
        logger.info(
            "upgrade_started",
            units=len(self.units),
            suite=self.suite.name,
            apply_safe=self.policy.apply_safe,
            apply_unsafe=self.policy.apply_unsafe,
        )

        while not state.is_done:
            # ========== COMPILING ==========
            state = state.with_phase(DriverPhase.COMPILING)
            try:
                result = self._compile()
            except Exception as e:
                logger.error("front_end_failed", error=str(e), exc_info=True)
                self.reporter.failure(f"Exception during compilation: {e}")
                state = state.with_status(UpgradeStatus.ABORTED, error_message=str(e))
                break

            state = state.with_diagnostics(list(result.diagnostics))

            if isinstance(result, ParseFailed):
                self.reporter.diagnostics(state.blocking_diagnostics, resolvable=False)
                state = state.with_status(UpgradeStatus.BLOCKED)
                break

            session = result.session
            self._register_discovered(result.discovered)
            if not cycles:
                # baseline includes units pulled in through imports
                cycles.observe(self.units.values())

            # ========== Decision ==========
            outstanding = state.blocking_diagnostics
            if not outstanding:
                state = state.with_status(UpgradeStatus.CONVERGED)
                break

            self.reporter.diagnostics(outstanding, resolvable=True)

            if self.policy.report_only:
                state = self._report(state, session)
                break

            if self.max_iterations is not None and state.iteration >= self.max_iterations:
                state = state.with_status(UpgradeStatus.BUDGET_EXCEEDED)
                break

            # ========== PATCHING ==========
            state = state.with_phase(DriverPhase.PATCHING)
            change = self._select_change(session)
            if change is None:
                state = state.with_status(UpgradeStatus.NO_PROGRESS)
                break

            try:
                self._apply(change, session)
            except SourceStoreError as e:
                logger.error("unit_write_failed", unit=change.unit_id, error=str(e))
                self.reporter.failure(str(e))
                state = state.with_status(UpgradeStatus.ABORTED, error_message=str(e))
                break

            state = state.with_applied(change)

            if self.detect_cycles and cycles.observe(self.units.values()):
                logger.warning("upgrade_cycle_detected", iteration=state.iteration)
                state = state.with_status(
                    UpgradeStatus.CYCLE_DETECTED,
                    error_message="A previously seen source state recurred; no progress is possible.",
                )

        logger.info(
            "upgrade_finished",
            status=state.status.value,
            applied=len(state.applied),
            outstanding=len(state.blocking_diagnostics),
        )
        self.reporter.finished(state)
        return state

    # ========== Steps ==========

    def _compile(self) -> CompileResult:
        self.reporter.compiling()
        return self.front_end.compile(self.sources)

    def _register_discovered(self, discovered: Mapping[str, str]) -> None:
        for unit_id, text in discovered.items():
            if unit_id in self.units:
                continue
            self.units[unit_id] = SourceUnit(unit_id, text)
            logger.info("unit_discovered", unit=unit_id)

    def _report(self, state: UpgradeState, session: CompilationSession) -> UpgradeState:
        """REPORTING: 모든 unit의 findings 출력, 변경 없음"""
        state = state.with_phase(DriverPhase.REPORTING)
        findings: list[UpgradeChange] = []

        for unit_id in sorted(self.units):
            self.reporter.analyzing(unit_id, upgrading=False)
            if not session.has_tree(unit_id):
                continue

            changes = self.suite.analyze(session.tree(unit_id), session.source(unit_id))
            if changes:
                self.reporter.findings_found(unit_id, len(changes))
            for change in changes:
                self.reporter.change(change, session.source(change.unit_id), self.policy.verbose)
            findings.extend(changes)

        return state.with_findings(findings).with_status(UpgradeStatus.REPORTED)

    def _select_change(self, session: CompilationSession) -> UpgradeChange | None:
        """
        First eligible change: units in fixed order, then suite order.

        Eligible means enabled by policy, targeting a known unit, and
        actually changing its text.
        """
        for unit_id in sorted(self.units):
            if not session.has_tree(unit_id):
                continue

            self.reporter.analyzing(unit_id, upgrading=True)
            changes = self.suite.analyze(session.tree(unit_id), session.source(unit_id))

            for change in changes:
                if not self.policy.allows(change.level):
                    continue
                if change.unit_id not in self.units or not session.has_tree(change.unit_id):
                    continue
                if not change.changes(session.source(change.unit_id)):
                    continue
                self.reporter.change(change, session.source(change.unit_id), self.policy.verbose)
                return change

        return None

    def _apply(self, change: UpgradeChange, session: CompilationSession) -> None:
        """Splice, invalidate the session, persist the whole unit."""
        unit = self.units[change.unit_id]
        source = session.source(change.unit_id)
        session.invalidate()

        unit.text = apply_change(source, change)
        logger.info(
            "upgrade_change_applied",
            unit=unit.unit_id,
            rule=change.rule,
            level=change.level.value,
            range=str(change.range),
        )

        if self.store is not None:
            self.reporter.writing(unit.unit_id)
            self.store.write(unit.unit_id, unit.text)
