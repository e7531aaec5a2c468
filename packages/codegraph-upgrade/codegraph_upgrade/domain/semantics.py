"""
Semantic Queries

상속 그래프 / 타입 annotation 위의 순수 질의 함수.
annotation이 없으면 None/빈 결과를 돌려주고, 호출 측 rule이 노드를 skip한다.
"""

import re

from .tree import CompilationSession, ContractDefinition, FunctionDefinition

# Data location suffixes do not take part in parameter type equality
_DATA_LOCATION = re.compile(r"\s+(storage ref|storage pointer|storage|memory|calldata)\b")

OVERRIDABLE_KINDS = frozenset({"function", "fallback", "receive"})


def normalize_type(type_string: str) -> str:
    return _DATA_LOCATION.sub("", type_string).strip()


def has_equal_parameter_types(a: FunctionDefinition, b: FunctionDefinition) -> bool | None:
    """파라미터 타입 동일 여부 (annotation 없으면 None)"""
    if a.parameter_types is None or b.parameter_types is None:
        return None
    if len(a.parameter_types) != len(b.parameter_types):
        return False
    return all(normalize_type(x) == normalize_type(y) for x, y in zip(a.parameter_types, b.parameter_types, strict=True))


def base_contracts(contract: ContractDefinition, session: CompilationSession) -> list[ContractDefinition]:
    """
    선형화 순서의 base contract 목록 (자기 자신 제외)

    Returns an empty list when the linearization annotation is missing or
    references contracts the session does not know.
    """
    bases: list[ContractDefinition] = []
    for base_id in contract.linearized_base_ids:
        if base_id == contract.node_id:
            continue
        base = session.node(base_id)
        if not isinstance(base, ContractDefinition):
            return []
        bases.append(base)
    return bases


def overridden_functions(
    function: FunctionDefinition,
    contract: ContractDefinition,
    session: CompilationSession,
) -> list[tuple[ContractDefinition, FunctionDefinition]]:
    """
    Inherited functions that ``function`` overrides.

    A base function is overridden when it has the same name, the same kind
    and equal parameter types. Bases are visited in linearization order,
    nearest first.
    """
    if function.is_constructor or function.function_kind not in OVERRIDABLE_KINDS:
        return []

    found = []
    for base in base_contracts(contract, session):
        for candidate in base.functions():
            if candidate.name != function.name or candidate.function_kind != function.function_kind:
                continue
            if has_equal_parameter_types(function, candidate):
                found.append((base, candidate))
    return found


def is_effectively_virtual(function: FunctionDefinition, contract: ContractDefinition) -> bool:
    """interface 함수는 암묵적으로 virtual"""
    return function.virtual or contract.is_interface


def is_resizable_array_type(type_identifier: str | None) -> bool | None:
    """
    Dynamically-sized array or byte array type (None = no annotation).

    Uses solc type identifiers: ``t_array$_t_uint256_$dyn_storage_ptr``,
    ``t_bytes_storage_ptr``. Fixed-size arrays and ``bytesNN`` are not
    resizable.
    """
    if not type_identifier:
        return None
    if type_identifier.startswith("t_array"):
        return "$dyn" in type_identifier
    return type_identifier.startswith("t_bytes_")
