# src/capsule_flow/serialization/flow_document.py
"""
Leitura e escrita de documentos de Flow (YAML ou JSON).

O documento segue o formato salvo pelo editor visual:

    id: checkout
    name: Checkout
    nodes:
      - id: pay
        capsule: payments
        position: {x: 120, y: 80}
        config: {currency: BRL}
    connections:
      - id: c1
        fromNode: cart
        fromPort: total
        toNode: pay
        toPort: amount
    metadata: {created: ..., updated: ..., author: ..., tags: [...]}

Capsules são referenciadas por `id` e resolvidas por um `CapsuleCatalog`
fornecido pelo chamador. Chaves em snake_case (`from_node`) também são aceitas.

Limites explícitos:
    - Não serializa Capsules (apenas a referência por id)
    - Não valida o Flow (ver `core.engine.validator`)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

import json

import yaml  # PyYAML

from capsule_flow.core.config.loader import read_document
from capsule_flow.core.graph.catalog import CapsuleCatalog
from capsule_flow.core.graph.model import Connection, Flow, Node


class InvalidFlowDocumentError(ValueError):
    """Documento de Flow estruturalmente inválido (campo ausente ou de tipo errado)."""


def _pick(data: Mapping[str, Any], *keys: str, required: bool = True, where: str = "") -> Any:
    for key in keys:
        if key in data:
            return data[key]
    if required:
        raise InvalidFlowDocumentError(f"Missing field '{keys[0]}' in {where or 'flow document'}")
    return None


def _capsule_ref(raw: Any, where: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("id"), str):
        return raw["id"]
    raise InvalidFlowDocumentError(f"Invalid capsule reference in {where}")


def _position(raw: Any) -> tuple:
    if raw is None:
        return (0, 0)
    if isinstance(raw, Mapping):
        return (raw.get("x", 0), raw.get("y", 0))
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return (raw[0], raw[1])
    raise InvalidFlowDocumentError(f"Invalid node position: {raw!r}")


def _node_from_dict(raw: Any, catalog: CapsuleCatalog, index: int) -> Node:
    where = f"nodes[{index}]"
    if not isinstance(raw, Mapping):
        raise InvalidFlowDocumentError(f"{where} must be a mapping")

    config = raw.get("config") or {}
    if not isinstance(config, Mapping):
        raise InvalidFlowDocumentError(f"{where}.config must be a mapping")

    return Node(
        id=str(_pick(raw, "id", where=where)),
        capsule=catalog.get(_capsule_ref(_pick(raw, "capsule", "capsule_id", "capsuleId", where=where), where)),
        position=_position(raw.get("position")),
        config=dict(config),
    )


def _connection_from_dict(raw: Any, index: int) -> Connection:
    where = f"connections[{index}]"
    if not isinstance(raw, Mapping):
        raise InvalidFlowDocumentError(f"{where} must be a mapping")

    from_node = str(_pick(raw, "fromNode", "from_node", where=where))
    from_port = str(_pick(raw, "fromPort", "from_port", where=where))
    to_node = str(_pick(raw, "toNode", "to_node", where=where))
    to_port = str(_pick(raw, "toPort", "to_port", where=where))

    conn_id = raw.get("id") or f"{from_node}.{from_port}->{to_node}.{to_port}"

    return Connection(
        id=str(conn_id),
        from_node=from_node,
        from_port=from_port,
        to_node=to_node,
        to_port=to_port,
        color=raw.get("color"),
    )


def flow_from_dict(data: Mapping[str, Any], *, catalog: CapsuleCatalog) -> Flow:
    """
    Constrói um Flow a partir do documento já carregado.

    Raises:
        InvalidFlowDocumentError: Se o documento for estruturalmente inválido.
        UnknownCapsuleError: Se um Node referenciar Capsule ausente do catálogo.
    """
    if not isinstance(data, Mapping):
        raise InvalidFlowDocumentError("Flow document root must be a mapping")

    raw_nodes = data.get("nodes") or []
    raw_connections = data.get("connections") or []
    if not isinstance(raw_nodes, list):
        raise InvalidFlowDocumentError("'nodes' must be a list")
    if not isinstance(raw_connections, list):
        raise InvalidFlowDocumentError("'connections' must be a list")

    metadata = data.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        raise InvalidFlowDocumentError("'metadata' must be a mapping")

    flow_id = data.get("id") or "flow"
    return Flow(
        id=str(flow_id),
        name=str(data.get("name") or flow_id),
        description=data.get("description"),
        nodes=[_node_from_dict(n, catalog, i) for i, n in enumerate(raw_nodes)],
        connections=[_connection_from_dict(c, i) for i, c in enumerate(raw_connections)],
        metadata=dict(metadata),
    )


def load_flow(path: Union[str, Path], *, catalog: CapsuleCatalog) -> Flow:
    """Lê um documento de Flow (.yaml, .yml ou .json) e resolve suas Capsules."""
    return flow_from_dict(read_document(path), catalog=catalog)


def flow_to_dict(flow: Flow) -> Dict[str, Any]:
    """Representação serializável do Flow no formato do editor."""
    nodes: List[Dict[str, Any]] = []
    for n in flow.nodes:
        x, y = n.position
        nodes.append(
            {
                "id": n.id,
                "capsule": n.capsule.id,
                "position": {"x": x, "y": y},
                "config": dict(n.config or {}),
            }
        )

    connections: List[Dict[str, Any]] = []
    for c in flow.connections:
        item: Dict[str, Any] = {
            "id": c.id,
            "fromNode": c.from_node,
            "fromPort": c.from_port,
            "toNode": c.to_node,
            "toPort": c.to_port,
        }
        if c.color is not None:
            item["color"] = c.color
        connections.append(item)

    out: Dict[str, Any] = {
        "id": flow.id,
        "name": flow.name,
        "nodes": nodes,
        "connections": connections,
        "metadata": dict(flow.metadata or {}),
    }
    if flow.description is not None:
        out["description"] = flow.description
    return out


def dump_flow(flow: Flow, path: Union[str, Path]) -> Path:
    """Grava o Flow em YAML ou JSON, conforme a extensão do caminho."""
    path = Path(path)
    data = flow_to_dict(flow)
    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    elif suffix == ".json":
        text = json.dumps(data, ensure_ascii=False, indent=2)
    else:
        raise InvalidFlowDocumentError(f"Unsupported flow document format: {path.suffix}")

    path.write_text(text, encoding="utf-8")
    return path
