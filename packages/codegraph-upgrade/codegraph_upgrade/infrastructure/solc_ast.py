"""
Solc Compact JSON AST Reader

solc ``--standard-json`` 출력 → CompilationSession + Diagnostic

Solc reports ``src`` as ``"start:length:fileIndex"`` in UTF-8 bytes; every
offset is converted to code points before a SourceRange is built.
"""

from bisect import bisect_left
from collections.abc import Mapping
from typing import Any

from codegraph_upgrade.common.logging_config import get_logger
from codegraph_upgrade.domain.source import Diagnostic, Severity, SourceRange
from codegraph_upgrade.domain.tree import (
    Assignment,
    CompilationSession,
    ContractDefinition,
    ExpressionStatement,
    FunctionDefinition,
    GenericNode,
    MemberAccess,
    Node,
    SourceUnitNode,
)

logger = get_logger(__name__)


class ByteOffsetMap:
    """UTF-8 byte offset → code point offset for one text."""

    def __init__(self, text: str):
        self.text = text
        encoded = text.encode("utf-8")
        self.byte_length = len(encoded)
        self._ascii = self.byte_length == len(text)
        self._starts: list[int] = []
        if not self._ascii:
            offset = 0
            for char in text:
                self._starts.append(offset)
                offset += len(char.encode("utf-8"))

    def to_code_point(self, byte_offset: int) -> int:
        byte_offset = max(0, min(byte_offset, self.byte_length))
        if self._ascii:
            return byte_offset
        # offsets inside a multi-byte sequence round up to the next char
        return bisect_left(self._starts, byte_offset)


class SolcAstReader:
    """
    Compact JSON AST → node variants

    Node types without a dedicated variant become GenericNode; their
    children are every nested node object, ordered by source position.
    """

    def __init__(self):
        self._offsets: dict[str, ByteOffsetMap] = {}
        self._unit_id = ""
        self._synthetic_id = 0

    # ========== Output ==========

    def read_output(self, output: Mapping[str, Any], sources: Mapping[str, str]) -> tuple[
        dict[str, SourceUnitNode], list[Diagnostic]
    ]:
        """
        Standard JSON output → (trees, diagnostics)

        Args:
            output: Parsed solc standard JSON output
            sources: Texts that were compiled, {unit_id: text}

        Returns:
            Trees for the units solc produced an AST for, and all diagnostics
        """
        self._offsets = {unit_id: ByteOffsetMap(text) for unit_id, text in sources.items()}
        self._synthetic_id = 0

        trees: dict[str, SourceUnitNode] = {}
        for unit_id, entry in (output.get("sources") or {}).items():
            ast = entry.get("ast") if isinstance(entry, dict) else None
            if not ast or unit_id not in self._offsets:
                continue
            trees[unit_id] = self.read_unit(unit_id, ast)

        diagnostics = [self.read_error(error) for error in output.get("errors") or []]
        return trees, diagnostics

    def read_unit(self, unit_id: str, ast: Mapping[str, Any]) -> SourceUnitNode:
        if unit_id not in self._offsets:
            raise KeyError(f"No source text for unit: {unit_id}")
        self._unit_id = unit_id
        node = self._read(ast)
        if not isinstance(node, SourceUnitNode):
            raise ValueError(f"AST root of {unit_id} is {ast.get('nodeType')}, expected SourceUnit")
        return node

    def read_error(self, error: Mapping[str, Any]) -> Diagnostic:
        message = (error.get("formattedMessage") or "").strip()
        if not message:
            message = f"{error.get('type', 'Error')}: {error.get('message', '')}"

        return Diagnostic(
            severity=Severity.from_string(error.get("severity", "error")),
            message=message,
            range=self._error_range(error.get("sourceLocation")),
            error_type=error.get("type", ""),
        )

    def _error_range(self, location: Mapping[str, Any] | None) -> SourceRange | None:
        if not location:
            return None
        unit_id = location.get("file", "")
        offsets = self._offsets.get(unit_id)
        start, end = location.get("start", -1), location.get("end", -1)
        if offsets is None or start < 0 or end < start:
            return None
        return SourceRange(unit_id, offsets.to_code_point(start), offsets.to_code_point(end))

    # ========== Nodes ==========

    def _read(self, data: Mapping[str, Any]) -> Node:
        node_type = data.get("nodeType", "")
        reader = getattr(self, f"_read_{node_type}", None)
        if reader is None:
            return self._read_generic(data)
        return reader(data)

    def _read_SourceUnit(self, data: Mapping[str, Any]) -> SourceUnitNode:
        return SourceUnitNode(
            node_id=self._node_id(data),
            range=self._range(data),
            nodes=self._read_list(data.get("nodes")),
        )

    def _read_ContractDefinition(self, data: Mapping[str, Any]) -> ContractDefinition:
        return ContractDefinition(
            node_id=self._node_id(data),
            range=self._range(data),
            name=data.get("name", ""),
            contract_kind=data.get("contractKind", "contract"),
            abstract=bool(data.get("abstract", False)),
            fully_implemented=data.get("fullyImplemented"),
            linearized_base_ids=tuple(data.get("linearizedBaseContracts") or ()),
            nodes=self._read_list(data.get("nodes")),
        )

    def _read_FunctionDefinition(self, data: Mapping[str, Any]) -> FunctionDefinition:
        source_range = self._range(data)
        body = data.get("body")
        body_node = self._read(body) if body else None
        header_end = body_node.range.start if body_node is not None else source_range.end

        parameters = [
            self._read(data[key])
            for key in ("parameters", "returnParameters")
            if isinstance(data.get(key), dict)
        ]
        parameters.extend(self._read_list(data.get("modifiers")))
        if isinstance(data.get("overrides"), dict):
            parameters.append(self._read(data["overrides"]))

        return FunctionDefinition(
            node_id=self._node_id(data),
            range=source_range,
            name=data.get("name", ""),
            function_kind=self._function_kind(data),
            visibility=data.get("visibility", ""),
            virtual=bool(data.get("virtual", False)),
            overrides=data.get("overrides") is not None,
            implemented=bool(data.get("implemented", body is not None)),
            parameter_types=self._parameter_types(data.get("parameters")),
            header_end=header_end,
            body=body_node,
            parameters=tuple(sorted(parameters, key=_position)),
        )

    def _read_ExpressionStatement(self, data: Mapping[str, Any]) -> ExpressionStatement:
        expression = data.get("expression")
        return ExpressionStatement(
            node_id=self._node_id(data),
            range=self._range(data),
            expression=self._read(expression) if expression else None,
        )

    def _read_Assignment(self, data: Mapping[str, Any]) -> Assignment:
        left, right = data.get("leftHandSide"), data.get("rightHandSide")
        return Assignment(
            node_id=self._node_id(data),
            range=self._range(data),
            operator=data.get("operator", "="),
            left_hand_side=self._read(left) if left else None,
            right_hand_side=self._read(right) if right else None,
            type_identifier=_type_identifier(data),
        )

    def _read_MemberAccess(self, data: Mapping[str, Any]) -> MemberAccess:
        expression = data.get("expression")
        return MemberAccess(
            node_id=self._node_id(data),
            range=self._range(data),
            member_name=data.get("memberName", ""),
            expression=self._read(expression) if expression else None,
            lvalue_requested=data.get("lValueRequested"),
            type_identifier=_type_identifier(data),
        )

    def _read_generic(self, data: Mapping[str, Any]) -> GenericNode:
        children: list[Node] = []
        for key, value in data.items():
            if key == "typeDescriptions":
                continue
            if isinstance(value, dict) and "nodeType" in value:
                children.append(self._read(value))
            elif isinstance(value, list):
                children.extend(self._read_list(value))

        return GenericNode(
            node_id=self._node_id(data),
            range=self._range(data),
            node_type=data.get("nodeType", ""),
            nodes=tuple(sorted(children, key=_position)),
            type_identifier=_type_identifier(data),
        )

    def _read_list(self, values: Any) -> tuple[Node, ...]:
        if not isinstance(values, list):
            return ()
        return tuple(self._read(v) for v in values if isinstance(v, dict) and "nodeType" in v)

    # ========== Fields ==========

    def _node_id(self, data: Mapping[str, Any]) -> int:
        node_id = data.get("id")
        if isinstance(node_id, int):
            return node_id
        self._synthetic_id -= 1
        return self._synthetic_id

    def _range(self, data: Mapping[str, Any]) -> SourceRange:
        offsets = self._offsets[self._unit_id]
        try:
            start, length = (int(part) for part in str(data.get("src", "")).split(":")[:2])
        except ValueError:
            return SourceRange(self._unit_id, 0, 0)
        if start < 0 or length < 0:
            return SourceRange(self._unit_id, 0, 0)
        return SourceRange(
            self._unit_id,
            offsets.to_code_point(start),
            offsets.to_code_point(start + length),
        )

    @staticmethod
    def _function_kind(data: Mapping[str, Any]) -> str:
        kind = data.get("kind")
        if kind:
            return kind
        if data.get("isConstructor"):
            return "constructor"
        return "function" if data.get("name") else "fallback"

    @staticmethod
    def _parameter_types(parameter_list: Any) -> tuple[str, ...] | None:
        if not isinstance(parameter_list, dict):
            return None
        types = []
        for parameter in parameter_list.get("parameters") or []:
            type_string = (parameter.get("typeDescriptions") or {}).get("typeString")
            if type_string is None:
                return None
            types.append(type_string)
        return tuple(types)


def _type_identifier(data: Mapping[str, Any]) -> str | None:
    return (data.get("typeDescriptions") or {}).get("typeIdentifier")


def _position(node: Node) -> tuple[int, int]:
    return node.range.start, node.range.end
