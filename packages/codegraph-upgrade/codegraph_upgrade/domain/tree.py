"""
Annotated Syntax Tree

Front end가 생성하는 트리의 닫힌 노드 집합 + 방문자 + 컴파일 세션.

Node variants carry only what the rules consume: structure, source ranges
(code point offsets) and the semantic annotations the front end resolved.
Every other construct is a GenericNode that is traversed but never inspected.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from codegraph_upgrade.common.exceptions import StaleTreeError

from .source import SourceRange


@dataclass(frozen=True, eq=False)
class Node:
    """Base of all node variants (identity semantics)."""

    node_id: int
    range: SourceRange

    def children(self) -> tuple[Node, ...]:
        return ()

    @property
    def kind(self) -> str:
        return type(self).__name__


@dataclass(frozen=True, eq=False)
class GenericNode(Node):
    """Any construct without a dedicated variant."""

    node_type: str = ""
    nodes: tuple[Node, ...] = ()
    type_identifier: str | None = None

    def children(self) -> tuple[Node, ...]:
        return self.nodes

    @property
    def kind(self) -> str:
        return self.node_type or "GenericNode"


@dataclass(frozen=True, eq=False)
class SourceUnitNode(Node):
    nodes: tuple[Node, ...] = ()

    def children(self) -> tuple[Node, ...]:
        return self.nodes


@dataclass(frozen=True, eq=False)
class ContractDefinition(Node):
    """
    contract / interface / library 선언

    Attributes:
        contract_kind: "contract" | "interface" | "library"
        abstract: 이미 abstract로 표시되었는지
        fully_implemented: 미구현 멤버가 없는지 (None = 분석 정보 없음)
        linearized_base_ids: C3 선형화 결과 (자기 자신이 첫 원소)
    """

    name: str = ""
    contract_kind: str = "contract"
    abstract: bool = False
    fully_implemented: bool | None = None
    linearized_base_ids: tuple[int, ...] = ()
    nodes: tuple[Node, ...] = ()

    def children(self) -> tuple[Node, ...]:
        return self.nodes

    @property
    def is_interface(self) -> bool:
        return self.contract_kind == "interface"

    @property
    def is_library(self) -> bool:
        return self.contract_kind == "library"

    def functions(self) -> list[FunctionDefinition]:
        return [n for n in self.nodes if isinstance(n, FunctionDefinition)]


@dataclass(frozen=True, eq=False)
class FunctionDefinition(Node):
    """
    함수 선언

    Attributes:
        function_kind: "function" | "constructor" | "fallback" | "receive"
        parameter_types: 파라미터 타입 문자열 (None = 분석 정보 없음)
        header_end: 본문 `{` 직전 offset (본문이 없으면 range.end)
    """

    name: str = ""
    function_kind: str = "function"
    visibility: str = ""
    virtual: bool = False
    overrides: bool = False
    implemented: bool = True
    parameter_types: tuple[str, ...] | None = None
    header_end: int = 0
    body: Node | None = None
    parameters: tuple[Node, ...] = ()

    def children(self) -> tuple[Node, ...]:
        if self.body is None:
            return self.parameters
        return self.parameters + (self.body,)

    @property
    def is_constructor(self) -> bool:
        return self.function_kind == "constructor"

    @property
    def header_range(self) -> SourceRange:
        return SourceRange(self.range.unit_id, self.range.start, max(self.range.start, self.header_end))


@dataclass(frozen=True, eq=False)
class ExpressionStatement(Node):
    expression: Node | None = None

    def children(self) -> tuple[Node, ...]:
        return (self.expression,) if self.expression is not None else ()


@dataclass(frozen=True, eq=False)
class Assignment(Node):
    operator: str = "="
    left_hand_side: Node | None = None
    right_hand_side: Node | None = None
    type_identifier: str | None = None

    def children(self) -> tuple[Node, ...]:
        return tuple(n for n in (self.left_hand_side, self.right_hand_side) if n is not None)


@dataclass(frozen=True, eq=False)
class MemberAccess(Node):
    member_name: str = ""
    expression: Node | None = None
    lvalue_requested: bool | None = None
    type_identifier: str | None = None

    def children(self) -> tuple[Node, ...]:
        return (self.expression,) if self.expression is not None else ()


class TreeVisitor:
    """
    Depth-first visitor with name-based dispatch.

    For each node, ``visit_<Kind>`` runs before its children and
    ``end_visit_<Kind>`` after them; kinds without a handler are a no-op.
    Returning False from ``visit_<Kind>`` skips the node's children.
    While a handler runs, ``parent`` is the enclosing node.
    """

    def __init__(self):
        self._ancestors: list[Node] = []

    @property
    def parent(self) -> Node | None:
        return self._ancestors[-1] if self._ancestors else None

    def walk(self, node: Node) -> None:
        if self.dispatch("visit_", node) is not False:
            self._ancestors.append(node)
            try:
                for child in node.children():
                    self.walk(child)
            finally:
                self._ancestors.pop()
        self.dispatch("end_visit_", node)

    def dispatch(self, prefix: str, node: Node):
        handler = getattr(self, prefix + node.kind, None)
        if handler is None:
            return None
        return handler(node)


class CompilationSession:
    """
    One compilation's tree handles (disposable).

    Constructed fresh by the front end for every compile and invalidated by
    the driver as soon as any unit text changes; reading a tree afterwards
    raises StaleTreeError.
    """

    def __init__(
        self,
        trees: dict[str, SourceUnitNode],
        sources: dict[str, str],
        analyzed: bool = True,
    ):
        missing = set(trees) - set(sources)
        if missing:
            raise ValueError(f"trees without source text: {sorted(missing)}")
        self._roots = dict(trees)
        self._sources = dict(sources)
        self._analyzed = analyzed
        self._valid = True
        self._index: dict[int, Node] = {}
        for root in self._roots.values():
            for node in _iter_nodes(root):
                self._index[node.node_id] = node

    @property
    def analyzed(self) -> bool:
        return self._analyzed

    @property
    def unit_ids(self) -> list[str]:
        return sorted(self._roots)

    def invalidate(self) -> None:
        self._valid = False

    def has_tree(self, unit_id: str) -> bool:
        return unit_id in self._roots

    def tree(self, unit_id: str) -> SourceTree:
        self._check()
        if unit_id not in self._roots:
            raise KeyError(f"No tree for unit: {unit_id}")
        return SourceTree(unit_id=unit_id, session=self)

    def root(self, unit_id: str) -> SourceUnitNode:
        self._check()
        return self._roots[unit_id]

    def source(self, unit_id: str) -> str:
        """The text snapshot this session compiled for ``unit_id``."""
        self._check()
        return self._sources[unit_id]

    def node(self, node_id: int) -> Node | None:
        """Lookup across all units of this compilation."""
        self._check()
        return self._index.get(node_id)

    def _check(self) -> None:
        if not self._valid:
            raise StaleTreeError("compilation session was invalidated by a text change")


@dataclass(frozen=True)
class SourceTree:
    """Read-only handle on one unit's tree within a session."""

    unit_id: str
    session: CompilationSession = field(repr=False)

    @property
    def root(self) -> SourceUnitNode:
        return self.session.root(self.unit_id)

    @property
    def analyzed(self) -> bool:
        return self.session.analyzed


def _iter_nodes(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children()))
