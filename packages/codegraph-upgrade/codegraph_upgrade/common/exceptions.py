"""
Codegraph Upgrade Exception Hierarchy

업그레이드 엔진 전반에서 사용하는 표준 예외 계층.

사용 가이드:
    1. 외부 도구 실패 (solc) → FrontEndError로 래핑, 드라이버 경계에서 ABORTED 처리
    2. 입력 파일 문제 → SourceStoreError 계열, CLI가 종료 코드로 변환
    3. 프로그래밍 에러 (잘못된 패치 대상, 무효화된 트리 접근) → 복구하지 않음

예시:
    try:
        completed = subprocess.run(...)
    except subprocess.TimeoutExpired as e:
        raise FrontEndError("solc timed out", details={"timeout": timeout}) from e
"""

from typing import Any


class UpgradeError(Exception):
    """Base exception for all codegraph-upgrade errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize upgrade error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


# ============================================================
# Front End Errors
# ============================================================


class FrontEndError(UpgradeError):
    """The compiler front end failed unexpectedly (crash, timeout, garbage output)."""

    pass


class CompilerNotFoundError(FrontEndError):
    """The compiler binary could not be executed."""

    pass


# ============================================================
# Source Store Errors
# ============================================================


class SourceStoreError(UpgradeError):
    """Reading or writing source units failed."""

    pass


class InvalidInputError(SourceStoreError):
    """Input files are missing, not regular files, or not given at all."""

    pass


class PathNotAllowedError(SourceStoreError):
    """A path lies outside of the allowed directories."""

    pass


# ============================================================
# Configuration Errors
# ============================================================


class InvalidConfigurationError(UpgradeError):
    """Invalid configuration (unknown rule names, bad option values)."""

    pass


# ============================================================
# Programming Errors
# ============================================================


class PatchTargetError(UpgradeError):
    """A change was applied to text it was not computed against."""

    pass


class StaleTreeError(UpgradeError):
    """A tree handle was read after its compilation session was invalidated."""

    pass
