"""
Abstract Contract Upgrade (0.6.0, safe)

Contracts with unimplemented functions must be marked ``abstract``.
"""

from codegraph_upgrade.domain.change import ChangeLevel
from codegraph_upgrade.domain.text import place_before_keyword
from codegraph_upgrade.domain.tree import ContractDefinition

from .base import AnalysisRule


class AbstractContract(AnalysisRule):
    """
    미구현 함수가 있는 contract 앞에 ``abstract`` 삽입

    Purely additive: the marker makes existing incompleteness explicit.
    """

    name = "abstract-contract"
    summary = "abstract contracts (safe)"
    level = ChangeLevel.SAFE

    def end_visit_ContractDefinition(self, contract: ContractDefinition) -> None:
        # 분석 정보 없음 → skip
        if contract.fully_implemented is None:
            return
        if contract.fully_implemented or contract.abstract or contract.contract_kind != "contract":
            return

        start = contract.range.start
        header_end = self.source.find("{", start, contract.range.end)
        if header_end == -1:
            header_end = contract.range.end

        insertion = place_before_keyword(self.source, start, header_end, "contract", "abstract")
        if insertion is None:
            return

        self.emit_insertion(
            contract.range.unit_id,
            insertion,
            f"Contract '{contract.name}' has unimplemented functions and needs to be marked abstract.",
            context=contract.range,
        )
