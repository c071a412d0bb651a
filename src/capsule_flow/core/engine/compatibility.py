# src/capsule_flow/core/engine/compatibility.py
"""
Tabela de compatibilidade entre tipos de porta.

Regras, avaliadas em ordem:
    1. Se qualquer um dos tipos for `any`, são compatíveis
    2. Tipos iguais são compatíveis
    3. Caso contrário, consulta-se a tabela estática dirigida por tipo de origem

A compatibilidade é **dirigida**: `user → object` é permitido,
`object → user` não é.
"""

from __future__ import annotations

from typing import Dict, FrozenSet

from capsule_flow.core.graph.types import PortType, PortTypeLike, port_type_id


COMPATIBILITY_RULES: Dict[str, FrozenSet[str]] = {
    PortType.USER.value: frozenset({PortType.OBJECT.value}),
    PortType.AUTH.value: frozenset({PortType.STRING.value}),
    PortType.DATA.value: frozenset({PortType.OBJECT.value, PortType.ARRAY.value}),
    PortType.MESSAGE.value: frozenset({PortType.OBJECT.value}),
    PortType.EVENT.value: frozenset({PortType.OBJECT.value}),
    PortType.JOB.value: frozenset({PortType.OBJECT.value}),
    PortType.EMAIL.value: frozenset({PortType.OBJECT.value}),
}

ALL_PORT_TYPES: FrozenSet[str] = frozenset(t.value for t in PortType)


def compatible(source_type: PortTypeLike, target_type: PortTypeLike) -> bool:
    """Indica se uma saída de `source_type` pode alimentar uma entrada de `target_type`."""
    source = port_type_id(source_type)
    target = port_type_id(target_type)

    if source == PortType.ANY.value or target == PortType.ANY.value:
        return True

    if source == target:
        return True

    return target in COMPATIBILITY_RULES.get(source, frozenset())


def compatible_targets(source_type: PortTypeLike) -> FrozenSet[str]:
    """
    Retorna os ids de tipo que `source_type` pode alimentar.

    Para `any`, retorna todos os tipos conhecidos. Tipos fora do enum são
    compatíveis apenas consigo mesmos (e com `any`, pela regra 1).
    """
    source = port_type_id(source_type)
    if source == PortType.ANY.value:
        return ALL_PORT_TYPES

    return frozenset({source}) | COMPATIBILITY_RULES.get(source, frozenset())
