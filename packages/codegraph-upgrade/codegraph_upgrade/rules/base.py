"""
Upgrade Rule Base

Rule = (tree, source text) → list[UpgradeChange] 순수 함수.

Rules never see diagnostics and never mutate text or tree. A node a rule
cannot classify (missing annotation, missing anchor keyword) is skipped.
"""

from abc import ABC, abstractmethod

from codegraph_upgrade.common.exceptions import StaleTreeError
from codegraph_upgrade.common.logging_config import get_logger
from codegraph_upgrade.domain.change import ChangeLevel, UpgradeChange
from codegraph_upgrade.domain.source import SourceRange
from codegraph_upgrade.domain.text import Insertion
from codegraph_upgrade.domain.tree import CompilationSession, Node, SourceTree, TreeVisitor

logger = get_logger(__name__)


class Rule(ABC):
    """
    업그레이드 rule 계약

    Attributes:
        name: 고유 이름 (CLI/설정에서 선택할 때 사용)
        summary: --help 목록용 한 줄 설명
        level: 이 rule이 만드는 변경의 안전 등급
        requires_analysis: semantic annotation 필요 여부 (False = parse-only rule)
    """

    name: str = ""
    summary: str = ""
    level: ChangeLevel = ChangeLevel.UNSAFE
    requires_analysis: bool = True

    @abstractmethod
    def detect(self, tree: SourceTree, source: str) -> list[UpgradeChange]:
        """
        Inspect one unit and propose changes.

        Args:
            tree: Read-only handle on the unit's tree
            source: The unit text the tree was built from

        Returns:
            Changes in traversal-encounter order
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class AnalysisRule(Rule, TreeVisitor):
    """
    Visitor-based rule (single depth-first pass per detect call).

    Subclasses implement ``visit_<Kind>`` / ``end_visit_<Kind>`` handlers and
    call ``emit``/``emit_insertion``. A handler that raises is treated as
    "no finding" for that node.
    """

    def __init__(self):
        super().__init__()
        self._tree: SourceTree | None = None
        self._source = ""
        self._changes: list[UpgradeChange] = []

    @property
    def tree(self) -> SourceTree:
        return self._tree

    @property
    def session(self) -> CompilationSession:
        return self._tree.session

    @property
    def source(self) -> str:
        return self._source

    def detect(self, tree: SourceTree, source: str) -> list[UpgradeChange]:
        self._tree = tree
        self._source = source
        self._changes = []
        try:
            self.walk(tree.root)
            return self._changes
        finally:
            self._tree = None
            self._source = ""
            self._changes = []

    def dispatch(self, prefix: str, node: Node):
        try:
            return super().dispatch(prefix, node)
        except StaleTreeError:
            raise
        except Exception as e:
            logger.debug(
                "rule_node_skipped",
                rule=self.name,
                node_kind=node.kind,
                node_id=node.node_id,
                error=str(e),
            )
            return None

    def emit(
        self,
        source_range: SourceRange,
        replacement: str,
        description: str,
        context: SourceRange | None = None,
    ) -> None:
        self._changes.append(
            UpgradeChange(
                range=source_range,
                replacement=replacement,
                level=self.level,
                description=description,
                rule=self.name,
                context=context,
            )
        )

    def emit_insertion(
        self,
        unit_id: str,
        insertion: Insertion,
        description: str,
        context: SourceRange | None = None,
    ) -> None:
        self.emit(
            SourceRange(unit_id, insertion.offset, insertion.offset),
            insertion.text,
            description,
            context=context,
        )

    def source_of(self, unit_id: str) -> str | None:
        """Text snapshot of any unit in the current session."""
        if unit_id == self._tree.unit_id:
            return self._source
        return self.session.source(unit_id)
