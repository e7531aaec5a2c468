"""
Infrastructure Layer - Adapters

Port 구현체 (solc, 파일 시스템, 콘솔)
"""

from .config import UpgradeSettings
from .console_reporter import ConsoleReporter
from .solc_adapter import SolcFrontEnd
from .solc_ast import ByteOffsetMap, SolcAstReader
from .source_store import FileSourceStore

__all__ = [
    "UpgradeSettings",
    "SolcFrontEnd",
    "SolcAstReader",
    "ByteOffsetMap",
    "FileSourceStore",
    "ConsoleReporter",
]
