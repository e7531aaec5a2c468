"""
Override / Virtual Upgrade (0.6.0, unsafe)

Overriding functions need ``override``; overridden functions need
``virtual``. Both change enforced dispatch semantics.
"""

from codegraph_upgrade.domain.change import ChangeLevel
from codegraph_upgrade.domain.semantics import is_effectively_virtual, overridden_functions
from codegraph_upgrade.domain.text import place_after_keyword
from codegraph_upgrade.domain.tree import ContractDefinition, FunctionDefinition

from .base import AnalysisRule


class OverridingFunction(AnalysisRule):
    """
    상속 그래프 기반 override/virtual 마커 삽입

    For every implemented function of a contract that shares name and
    parameter types with a base function:
    - ``override`` after its visibility keyword, unless already overriding
    - ``virtual`` after the base function's visibility keyword, unless the
      base function is virtual (interface functions implicitly are)
    """

    name = "override-function"
    summary = "override / virtual (unsafe)"
    level = ChangeLevel.UNSAFE

    def end_visit_ContractDefinition(self, contract: ContractDefinition) -> None:
        for function in contract.functions():
            if not function.implemented:
                continue

            overridden = overridden_functions(function, contract, self.session)
            if not overridden:
                continue

            if not function.overrides:
                base_names = ", ".join(base.name for base, _ in overridden)
                self._insert_marker(
                    function,
                    "override",
                    f"Function '{contract.name}.{function.name}' overrides a function of {base_names} "
                    "and needs to be marked override.",
                )

            for base, super_function in overridden:
                if is_effectively_virtual(super_function, base):
                    continue
                self._insert_marker(
                    super_function,
                    "virtual",
                    f"Function '{base.name}.{super_function.name}' is overridden by "
                    f"'{contract.name}.{function.name}' and needs to be marked virtual.",
                )

    def _insert_marker(self, function: FunctionDefinition, marker: str, description: str) -> None:
        if not function.visibility:
            return

        unit_id = function.range.unit_id
        source = self.source_of(unit_id)
        header = function.header_range
        insertion = place_after_keyword(source, header.start, header.end, function.visibility, marker)
        if insertion is None:
            return

        self.emit_insertion(unit_id, insertion, description, context=function.range)
