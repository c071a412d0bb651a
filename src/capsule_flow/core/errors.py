"""
Capsule Flow — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros reportados pelo engine.
Erros de validação e de execução são dados, não exceções: são coletados,
serializados e devolvidos ao chamador, que decide como prosseguir.

Todo erro deve ser:

- explícito
- serializável
- acionável
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlowErrorPayload:
    """
    Payload canônico de erro do Capsule Flow.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta e humana, a mesma exibida ao usuário
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao autor do Flow
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Estrutura / Tipos
CONNECTION_NODE_NOT_FOUND = "CONNECTION_NODE_NOT_FOUND"
CONNECTION_PORT_NOT_FOUND = "CONNECTION_PORT_NOT_FOUND"
CONNECTION_INCOMPATIBLE_TYPES = "CONNECTION_INCOMPATIBLE_TYPES"
CONNECTION_DUPLICATE_TARGET = "CONNECTION_DUPLICATE_TARGET"
NODE_DUPLICATE_ID = "NODE_DUPLICATE_ID"
NODE_REQUIRED_INPUT_MISSING = "NODE_REQUIRED_INPUT_MISSING"

# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def connection_node_not_found(
    *,
    connection_id: str,
    node_id: str,
    side: str,
    hint: str = "Remova a conexão ou adicione o Node referenciado ao Flow.",
) -> FlowErrorPayload:
    label = "Source" if side == "source" else "Target"
    return FlowErrorPayload(
        type=CONNECTION_NODE_NOT_FOUND,
        message=f"Connection {connection_id}: {label} node {node_id} not found",
        details={
            "connection_id": connection_id,
            "node_id": node_id,
            "side": side,
        },
        hint=hint,
    )


def connection_port_not_found(
    *,
    connection_id: str,
    port_id: str,
    capsule_name: str,
    direction: str,
    hint: str = "Conecte a uma porta declarada pela Capsule do Node.",
) -> FlowErrorPayload:
    label = "Output" if direction == "output" else "Input"
    return FlowErrorPayload(
        type=CONNECTION_PORT_NOT_FOUND,
        message=f"Connection {connection_id}: {label} port {port_id} not found on {capsule_name}",
        details={
            "connection_id": connection_id,
            "port_id": port_id,
            "capsule": capsule_name,
            "direction": direction,
        },
        hint=hint,
    )


def connection_incompatible_types(
    *,
    connection_id: str,
    from_port: str,
    from_type: str,
    to_port: str,
    to_type: str,
    hint: str = "Conecte portas de tipos compatíveis ou use uma porta do tipo Any.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=CONNECTION_INCOMPATIBLE_TYPES,
        message=(
            f"Connection {connection_id}: Incompatible types - "
            f"{from_port} ({from_type}) -> {to_port} ({to_type})"
        ),
        details={
            "connection_id": connection_id,
            "from_port": from_port,
            "from_type": from_type,
            "to_port": to_port,
            "to_type": to_type,
        },
        hint=hint,
    )


def connection_duplicate_target(
    *,
    node_id: str,
    port_id: str,
    connection_ids: list,
    hint: str = "Mantenha uma única conexão por entrada; o engine não combina produtores.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=CONNECTION_DUPLICATE_TARGET,
        message=(
            f"Node {node_id}: Input port {port_id} is fed by multiple connections "
            f"({', '.join(connection_ids)})"
        ),
        details={
            "node_id": node_id,
            "port_id": port_id,
            "connection_ids": list(connection_ids),
        },
        hint=hint,
    )


def node_duplicate_id(
    *,
    node_id: str,
    hint: str = "Renomeie um dos Nodes; ids devem ser únicos no Flow.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=NODE_DUPLICATE_ID,
        message=f"Node {node_id}: Duplicate node id",
        details={"node_id": node_id},
        hint=hint,
    )


def node_required_input_missing(
    *,
    node_id: str,
    capsule_name: str,
    port_id: str,
    port_name: str,
    hint: str = "Conecte a entrada a uma saída compatível ou defina o valor na config do Node.",
) -> FlowErrorPayload:
    return FlowErrorPayload(
        type=NODE_REQUIRED_INPUT_MISSING,
        message=(
            f"Node {node_id} ({capsule_name}): Required input \"{port_name}\" "
            f"({port_id}) is not connected or configured"
        ),
        details={
            "node_id": node_id,
            "capsule": capsule_name,
            "port_id": port_id,
            "port_name": port_name,
        },
        hint=hint,
    )
