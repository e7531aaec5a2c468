"""
Array Length Upgrade (0.6.0, unsafe)

Assigning to ``.length`` of a storage array was removed; the statement is
deleted and has to be replaced by push/pop by hand.

How the statement goes away depends on where it sits:
    block:            statement and its ``;`` are deleted
    ``for`` header:   the initializer is emptied, ``for (; ...)``
    branch/loop body: replaced by ``{}`` so the next statement stays outside
"""

from codegraph_upgrade.domain.change import ChangeLevel
from codegraph_upgrade.domain.semantics import is_resizable_array_type
from codegraph_upgrade.domain.source import SourceRange
from codegraph_upgrade.domain.text import extend_over_terminator
from codegraph_upgrade.domain.tree import Assignment, ExpressionStatement, MemberAccess

from .base import AnalysisRule

BLOCK_KINDS = frozenset({"Block", "UncheckedBlock"})

DESCRIPTION = (
    "Assignment to array length is not allowed anymore; the statement is removed "
    "and needs to be replaced by push()/pop()."
)


class ArrayLength(AnalysisRule):
    """``xs.length = n;`` 문장 삭제"""

    name = "array-length"
    summary = "assignments to array length (unsafe)"
    level = ChangeLevel.UNSAFE

    def end_visit_ExpressionStatement(self, statement: ExpressionStatement) -> None:
        assignment = statement.expression
        if not isinstance(assignment, Assignment):
            return

        target = assignment.left_hand_side
        if not isinstance(target, MemberAccess) or target.member_name != "length":
            return
        if not target.lvalue_requested:
            return
        if not is_resizable_array_type(getattr(target.expression, "type_identifier", None)):
            return

        parent = self.parent
        if parent is None:
            return

        start, replacement = statement.range.start, ""
        if parent.kind in BLOCK_KINDS:
            end = extend_over_terminator(self.source, statement.range.end)
        elif self._is_for_initializer(statement):
            # ``;`` belongs to the for header
            end = statement.range.end
            if self.source[start:end].endswith(";"):
                end -= 1
        else:
            end = extend_over_terminator(self.source, statement.range.end)
            replacement = "{}"

        removed = SourceRange(statement.range.unit_id, start, end)
        self.emit(removed, replacement, DESCRIPTION, context=removed)

    def _is_for_initializer(self, statement: ExpressionStatement) -> bool:
        parent = self.parent
        if parent is None or parent.kind != "ForStatement":
            return False
        return self.source[parent.range.start : statement.range.start].rstrip().endswith("(")
