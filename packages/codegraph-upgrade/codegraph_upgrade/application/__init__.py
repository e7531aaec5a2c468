"""
Application Layer - Use Cases

Ports (인터페이스) + Convergence Driver
"""

from .driver import UpgradeDriver
from .ports import (
    CompileResult,
    Compiled,
    FrontEndPort,
    NullReporter,
    ParseFailed,
    SourceStorePort,
    UpgradeReporterPort,
)

__all__ = [
    "FrontEndPort",
    "SourceStorePort",
    "UpgradeReporterPort",
    "NullReporter",
    "CompileResult",
    "Compiled",
    "ParseFailed",
    "UpgradeDriver",
]
