"""
Upgrade Domain Models
"""

from .change import ChangeLevel, UpgradeChange, apply_change, shorten_source
from .models import DriverPhase, UpgradePolicy, UpgradeState, UpgradeStatus
from .oscillation import CycleDetector
from .source import Diagnostic, Severity, SourceRange, SourceUnit
from .tree import (
    Assignment,
    CompilationSession,
    ContractDefinition,
    ExpressionStatement,
    FunctionDefinition,
    GenericNode,
    MemberAccess,
    Node,
    SourceTree,
    SourceUnitNode,
    TreeVisitor,
)

__all__ = [
    # Change models
    "ChangeLevel",
    "UpgradeChange",
    "apply_change",
    "shorten_source",
    # Source models
    "SourceRange",
    "SourceUnit",
    "Severity",
    "Diagnostic",
    # Run state
    "UpgradePolicy",
    "UpgradeState",
    "UpgradeStatus",
    "DriverPhase",
    "CycleDetector",
    # Tree
    "Node",
    "GenericNode",
    "SourceUnitNode",
    "ContractDefinition",
    "FunctionDefinition",
    "ExpressionStatement",
    "Assignment",
    "MemberAccess",
    "TreeVisitor",
    "SourceTree",
    "CompilationSession",
]
