"""
Virtual Function Upgrade (0.6.0, unsafe, opt-in)

Marks every overridable function ``virtual`` so that derived contracts keep
compiling. Not part of the default suite.
"""

from codegraph_upgrade.domain.change import ChangeLevel
from codegraph_upgrade.domain.text import place_after_keyword
from codegraph_upgrade.domain.tree import ContractDefinition

from .base import AnalysisRule


class VirtualFunction(AnalysisRule):
    name = "virtual-function"
    summary = "virtual on all overridable functions (unsafe, opt-in)"
    level = ChangeLevel.UNSAFE

    def end_visit_ContractDefinition(self, contract: ContractDefinition) -> None:
        if contract.is_library or contract.is_interface:
            return

        for function in contract.functions():
            if function.virtual or function.is_constructor:
                continue
            if not function.visibility or function.visibility == "private":
                continue

            header = function.header_range
            insertion = place_after_keyword(self.source, header.start, header.end, function.visibility, "virtual")
            if insertion is None:
                continue

            self.emit_insertion(
                function.range.unit_id,
                insertion,
                f"Function '{contract.name}.{function.name}' is marked virtual.",
                context=function.range,
            )
