"""
Common utilities: exception hierarchy and structured logging.
"""

from .exceptions import (
    CompilerNotFoundError,
    FrontEndError,
    InvalidConfigurationError,
    InvalidInputError,
    PatchTargetError,
    PathNotAllowedError,
    SourceStoreError,
    StaleTreeError,
    UpgradeError,
)
from .logging_config import configure_logging, get_logger

__all__ = [
    "UpgradeError",
    "FrontEndError",
    "CompilerNotFoundError",
    "SourceStoreError",
    "InvalidInputError",
    "PathNotAllowedError",
    "InvalidConfigurationError",
    "PatchTargetError",
    "StaleTreeError",
    "configure_logging",
    "get_logger",
]
