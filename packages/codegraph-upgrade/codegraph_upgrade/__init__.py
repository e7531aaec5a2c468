"""
Codegraph Upgrade

Rule 기반 소스 마이그레이션 엔진 (Solidity 0.6.0 breaking changes).

Architecture (Hexagonal):
- domain/: 순수 모델 (SourceRange, UpgradeChange, 트리, 상태)
- rules/: 업그레이드 rule + suite
- application/: Ports + 수렴 드라이버
- infrastructure/: solc, 파일 시스템, 콘솔, 설정
"""

__version__ = "0.1.0"

from .api import UpgradeAPI
from .application.driver import UpgradeDriver
from .domain.change import ChangeLevel, UpgradeChange, apply_change
from .domain.models import UpgradePolicy, UpgradeState, UpgradeStatus
from .rules.suite import UpgradeSuite, build_suite, upgrade_060_suite

__all__ = [
    "__version__",
    "UpgradeAPI",
    "UpgradeDriver",
    "UpgradeSuite",
    "build_suite",
    "upgrade_060_suite",
    "UpgradeChange",
    "ChangeLevel",
    "apply_change",
    "UpgradePolicy",
    "UpgradeState",
    "UpgradeStatus",
]
