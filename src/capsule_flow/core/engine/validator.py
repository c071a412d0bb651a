# src/capsule_flow/core/engine/validator.py
"""
Validador estrutural e de tipos de um Flow.

O validator confronta o Flow com o modelo de grafo e com a tabela de
compatibilidade, produzindo a lista completa de problemas encontrados.

Princípios fundamentais:
    - Função pura: nenhum efeito colateral, nenhuma exceção levantada
    - Todos os erros são coletados (sem curto-circuito)
    - O chamador decide se prossegue para a execução

Verificações:
    - Connections: Nodes existentes, portas existentes, tipos compatíveis
    - Entradas: no máximo uma Connection por `(to_node, to_port)`
    - Nodes: ids únicos e entradas obrigatórias satisfeitas

Limites explícitos:
    - Não detecta ciclos (responsabilidade do scheduler)
    - Não executa Capsules
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from capsule_flow.core.errors import (
    FlowErrorPayload,
    connection_duplicate_target,
    connection_incompatible_types,
    connection_node_not_found,
    connection_port_not_found,
    node_duplicate_id,
    node_required_input_missing,
)
from capsule_flow.core.graph.capsule import Port, find_port
from capsule_flow.core.graph.model import Flow, Node
from capsule_flow.core.graph.types import port_type_name

from .compatibility import compatible


@dataclass(frozen=True)
class ValidationReport:
    """
    Resultado da validação de um Flow.

    `errors` traz as mensagens legíveis, na ordem em que foram detectadas;
    `issues` traz os mesmos erros em forma estruturada (código, detalhes, hint).
    """

    valid: bool
    errors: List[str] = field(default_factory=list)
    issues: List[FlowErrorPayload] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}


def has_config_value(config: Optional[Mapping[str, Any]], key: str) -> bool:
    """
    Indica se a config do Node fornece um valor não vazio para `key`.

    `None`, string vazia e coleções vazias contam como ausentes;
    `0` e `False` são valores válidos. Difere do editor, que testa a
    config por truthiness (`0` ausente, `[]` presente).
    """
    if not config or key not in config:
        return False

    value = config[key]
    if value is None:
        return False
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) > 0
    return True


def _capsule_name(node: Node) -> str:
    return getattr(node.capsule, "name", None) or getattr(node.capsule, "id", node.id)


def _validate_connections(flow: Flow, nodes_by_id: Dict[str, Node]) -> List[FlowErrorPayload]:
    issues: List[FlowErrorPayload] = []

    for conn in flow.connections:
        from_node = nodes_by_id.get(conn.from_node)
        to_node = nodes_by_id.get(conn.to_node)

        if from_node is None:
            issues.append(connection_node_not_found(connection_id=conn.id, node_id=conn.from_node, side="source"))
            continue

        if to_node is None:
            issues.append(connection_node_not_found(connection_id=conn.id, node_id=conn.to_node, side="target"))
            continue

        from_port = find_port(list(getattr(from_node.capsule, "outputs", None) or []), conn.from_port)
        to_port = find_port(list(getattr(to_node.capsule, "inputs", None) or []), conn.to_port)

        if from_port is None:
            issues.append(
                connection_port_not_found(
                    connection_id=conn.id,
                    port_id=conn.from_port,
                    capsule_name=_capsule_name(from_node),
                    direction="output",
                )
            )

        if to_port is None:
            issues.append(
                connection_port_not_found(
                    connection_id=conn.id,
                    port_id=conn.to_port,
                    capsule_name=_capsule_name(to_node),
                    direction="input",
                )
            )

        if from_port is None or to_port is None:
            continue

        if not compatible(from_port.type, to_port.type):
            issues.append(
                connection_incompatible_types(
                    connection_id=conn.id,
                    from_port=from_port.name,
                    from_type=port_type_name(from_port.type),
                    to_port=to_port.name,
                    to_type=port_type_name(to_port.type),
                )
            )

    # uma entrada recebe de no máximo um produtor
    feeders: Dict[Tuple[str, str], List[str]] = {}
    for conn in flow.connections:
        if conn.to_node in nodes_by_id:
            feeders.setdefault((conn.to_node, conn.to_port), []).append(conn.id)

    for (node_id, port_id), conn_ids in feeders.items():
        if len(conn_ids) > 1:
            issues.append(connection_duplicate_target(node_id=node_id, port_id=port_id, connection_ids=conn_ids))

    return issues


def _validate_required_inputs(flow: Flow) -> List[FlowErrorPayload]:
    issues: List[FlowErrorPayload] = []
    connected: Set[Tuple[str, str]] = {(c.to_node, c.to_port) for c in flow.connections}

    for node in flow.nodes:
        inputs = getattr(node.capsule, "inputs", None) or []
        required: List[Port] = [p for p in inputs if getattr(p, "required", False)]
        for port in required:
            if (node.id, port.id) in connected:
                continue
            if has_config_value(node.config, port.id):
                continue
            issues.append(
                node_required_input_missing(
                    node_id=node.id,
                    capsule_name=_capsule_name(node),
                    port_id=port.id,
                    port_name=port.name,
                )
            )

    return issues


def validate(flow: Flow) -> ValidationReport:
    """
    Valida um Flow e retorna todos os erros estruturais e de tipo.

    Nunca levanta exceção para problemas do Flow: eles são reportados
    em `ValidationReport.errors` (texto) e `ValidationReport.issues`
    (estruturado). `valid` é verdadeiro apenas se nenhum erro for encontrado.

    Args:
        flow (Flow): Flow a validar.

    Returns:
        ValidationReport: Resultado com `valid`, `errors` e `issues`.
    """
    issues: List[FlowErrorPayload] = []

    nodes_by_id: Dict[str, Node] = {}
    reported_duplicates: Set[str] = set()
    for node in flow.nodes:
        if node.id in nodes_by_id:
            if node.id not in reported_duplicates:
                issues.append(node_duplicate_id(node_id=node.id))
                reported_duplicates.add(node.id)
            continue
        nodes_by_id[node.id] = node

    issues.extend(_validate_connections(flow, nodes_by_id))
    issues.extend(_validate_required_inputs(flow))

    return ValidationReport(
        valid=not issues,
        errors=[i.message for i in issues],
        issues=issues,
    )
