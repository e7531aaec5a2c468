"""
Infrastructure Configuration

pydantic-settings 기반 설정. 환경 변수는 CODEGRAPH_UPGRADE_ 접두사를 사용한다.
CLI 옵션이 지정되면 환경 변수보다 우선한다.
"""

from functools import cached_property

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from codegraph_upgrade.domain.models import UpgradePolicy


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# ========== Groups ==========


class SolcConfig(BaseModel):
    """solc front end 설정."""

    binary: str = Field(default="solc", description="solc 실행 파일 경로")
    timeout: float = Field(default=60.0, gt=0, description="컴파일 1회 제한 시간 (초)")
    allow_paths: list[str] = Field(default_factory=list, description="import 허용 디렉토리 (비어 있으면 제한 없음)")
    base_path: str | None = Field(default=None, description="solc --base-path")
    evm_version: str | None = Field(default=None, description="EVM 버전 (None = 컴파일러 기본값)")


class DriverConfig(BaseModel):
    """수렴 루프 설정."""

    accept_safe: bool = Field(default=False, description="safe 변경 자동 적용")
    accept_unsafe: bool = Field(default=False, description="unsafe 변경 자동 적용")
    short_log: bool = Field(default=False, description="변경 미리보기 축약")
    rules: list[str] = Field(default_factory=list, description="실행할 rule 이름 (비어 있으면 0.6.0 기본 suite)")
    max_iterations: int | None = Field(default=None, ge=1, description="적용 횟수 상한 (None = 무제한)")
    detect_cycles: bool = Field(default=True, description="텍스트 상태 순환 감지")
    ignore_missing: bool = Field(default=False, description="없는 입력 파일 건너뛰기")

    def policy(self) -> UpgradePolicy:
        return UpgradePolicy(
            apply_safe=self.accept_safe,
            apply_unsafe=self.accept_unsafe,
            verbose=not self.short_log,
        )


class LoggingConfig(BaseModel):
    """구조화 로깅 설정."""

    level: str = Field(default="WARNING", description="로그 레벨")
    json_format: bool = Field(default=False, description="JSON 로그 출력")


# ========== Settings ==========


class UpgradeSettings(BaseSettings):
    """
    Codegraph Upgrade Settings

    Environment variables should use CODEGRAPH_UPGRADE_ prefix.
    Example: CODEGRAPH_UPGRADE_SOLC_BINARY, CODEGRAPH_UPGRADE_ACCEPT_SAFE

    그룹화된 설정 접근:
        settings.solc       # SolcConfig
        settings.driver     # DriverConfig
        settings.logging    # LoggingConfig
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CODEGRAPH_UPGRADE_",
        extra="ignore",
    )

    # ========================================================================
    # Grouped Config Accessors
    # ========================================================================

    @cached_property
    def solc(self) -> SolcConfig:
        """solc 설정 그룹."""
        return SolcConfig(
            binary=self.solc_binary,
            timeout=self.solc_timeout,
            allow_paths=_split_list(self.allow_paths),
            base_path=self.solc_base_path,
            evm_version=self.solc_evm_version,
        )

    @cached_property
    def driver(self) -> DriverConfig:
        """수렴 루프 설정 그룹."""
        return DriverConfig(
            accept_safe=self.accept_safe,
            accept_unsafe=self.accept_unsafe,
            short_log=self.short_log,
            rules=_split_list(self.rules),
            max_iterations=self.max_iterations,
            detect_cycles=self.detect_cycles,
            ignore_missing=self.ignore_missing,
        )

    @cached_property
    def logging(self) -> LoggingConfig:
        """로깅 설정 그룹."""
        return LoggingConfig(level=self.log_level, json_format=self.log_json)

    # ========================================================================
    # Flat fields (environment)
    # ========================================================================

    # solc
    solc_binary: str = "solc"
    solc_timeout: float = 60.0
    solc_base_path: str | None = None
    solc_evm_version: str | None = None
    allow_paths: str = ""  # comma separated, "*" = no restriction

    # driver
    accept_safe: bool = False
    accept_unsafe: bool = False
    short_log: bool = False
    rules: str = ""  # comma separated rule names
    max_iterations: int | None = None
    detect_cycles: bool = True
    ignore_missing: bool = False

    # logging
    log_level: str = "WARNING"
    log_json: bool = False
