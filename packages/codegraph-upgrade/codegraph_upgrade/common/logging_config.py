"""
구조화 로깅 설정

structlog 기반. 콘솔 출력은 ConsoleReporter(rich)가 담당하고,
이 모듈의 로그는 진단/추적용 이벤트 로그입니다.

Usage:
    from codegraph_upgrade.common.logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("upgrade_change_applied", unit="a.sol", rule="abstract-contract")
"""

import logging
import os
import sys

import structlog
from structlog.processors import JSONRenderer

_CONFIGURED = False


def get_log_level() -> str:
    """환경 변수 기반 로그 레벨"""
    return os.getenv("CODEGRAPH_UPGRADE_LOG_LEVEL", "WARNING").upper()


def configure_logging(
    level: str | None = None,
    json_format: bool = False,
) -> None:
    """
    구조화 로깅 설정.

    Args:
        level: 로그 레벨 (None이면 환경변수 사용)
        json_format: JSON 포맷 (분석용)
    """
    global _CONFIGURED

    if level is None:
        level = get_log_level()
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors.append(JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout은 리포트 출력용이므로 로그는 stderr로 보낸다
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    _CONFIGURED = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    구조화 로거 가져오기.

    첫 호출 시 기본 설정으로 초기화.
    """
    if not _CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)

