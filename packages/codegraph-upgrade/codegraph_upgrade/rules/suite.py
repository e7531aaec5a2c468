"""
Upgrade Suite

등록 순서대로 rule을 실행하고 결과를 이어 붙인다 (중복 제거 없음).
"""

from collections.abc import Callable, Iterable

from codegraph_upgrade.common.exceptions import InvalidConfigurationError
from codegraph_upgrade.common.logging_config import get_logger
from codegraph_upgrade.domain.change import UpgradeChange
from codegraph_upgrade.domain.tree import SourceTree

from .abstract_contract import AbstractContract
from .array_length import ArrayLength
from .base import Rule
from .override_function import OverridingFunction
from .virtual_function import VirtualFunction

logger = get_logger(__name__)

# name → factory, in catalogue order
RULE_REGISTRY: dict[str, Callable[[], Rule]] = {
    AbstractContract.name: AbstractContract,
    OverridingFunction.name: OverridingFunction,
    ArrayLength.name: ArrayLength,
    VirtualFunction.name: VirtualFunction,
}

DEFAULT_060_RULES: tuple[str, ...] = (
    AbstractContract.name,
    OverridingFunction.name,
    ArrayLength.name,
)


class UpgradeSuite:
    """
    Ordered rule collection for one target version.

    Output order is rule registration order, then traversal order within a
    rule. Trees built without semantic analysis only run parse-only rules.
    """

    def __init__(self, rules: Iterable[Rule], name: str = "custom"):
        self.name = name
        self.rules: tuple[Rule, ...] = tuple(rules)

    def analyze(self, tree: SourceTree, source: str) -> list[UpgradeChange]:
        changes: list[UpgradeChange] = []
        for rule in self.rules:
            if rule.requires_analysis and not tree.analyzed:
                continue
            found = rule.detect(tree, source)
            if found:
                logger.debug("rule_findings", suite=self.name, rule=rule.name, unit=tree.unit_id, count=len(found))
            changes.extend(found)
        return changes

    @property
    def rule_names(self) -> list[str]:
        return [rule.name for rule in self.rules]

    def __len__(self) -> int:
        return len(self.rules)


def build_suite(names: Iterable[str], suite_name: str = "custom") -> UpgradeSuite:
    """
    Build a suite from rule names, in the order given.

    Raises:
        InvalidConfigurationError: unknown rule name
    """
    rules = []
    for name in names:
        factory = RULE_REGISTRY.get(name)
        if factory is None:
            raise InvalidConfigurationError(
                f"Unknown upgrade rule: {name}",
                details={"available": sorted(RULE_REGISTRY)},
            )
        rules.append(factory())
    return UpgradeSuite(rules, name=suite_name)


def upgrade_060_suite() -> UpgradeSuite:
    """0.6.0 breaking changes (default suite)"""
    return build_suite(DEFAULT_060_RULES, suite_name="0.6.0")
