"""
Upgrade Rules

Built-in pattern catalogue + suite assembly.
"""

from .abstract_contract import AbstractContract
from .array_length import ArrayLength
from .base import AnalysisRule, Rule
from .override_function import OverridingFunction
from .suite import DEFAULT_060_RULES, RULE_REGISTRY, UpgradeSuite, build_suite, upgrade_060_suite
from .virtual_function import VirtualFunction

__all__ = [
    "Rule",
    "AnalysisRule",
    "AbstractContract",
    "OverridingFunction",
    "ArrayLength",
    "VirtualFunction",
    "UpgradeSuite",
    "RULE_REGISTRY",
    "DEFAULT_060_RULES",
    "build_suite",
    "upgrade_060_suite",
]
