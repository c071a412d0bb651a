# src/capsule_flow/core/graph/model.py
"""
Modelo de grafo do Flow: Nodes, Connections e o agregado Flow.

Um Flow é um grafo dirigido em que:
    - cada Node instancia exatamente uma Capsule
    - cada Connection liga uma porta de saída a uma porta de entrada
    - cada entrada recebe de no máximo uma Connection

Decisões arquiteturais:
    - As estruturas são dados simples, montados pelo editor ou por código
    - Nenhuma invariante é imposta na construção; o validator as reporta
    - Aciclicidade é descoberta no planejamento, não na construção

Limites explícitos:
    - Não valida tipos nem portas
    - Não ordena nem executa Nodes
    - Não define formato de persistência
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .capsule import Capsule


@dataclass
class Node:
    """
    Instância de uma Capsule dentro de um Flow.

    `position` é mantida apenas para o editor visual. `config` pode
    fornecer valores para entradas não alimentadas por Connection e pode
    ser alterada entre execuções.
    """
    id: str
    capsule: Capsule
    position: Tuple[float, float] = (0, 0)
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Connection:
    """Aresta dirigida `(from_node, from_port) → (to_node, to_port)`."""
    id: str
    from_node: str
    from_port: str
    to_node: str
    to_port: str
    color: Optional[str] = None


@dataclass
class Flow:
    """
    Agregado completo de um programa montado pelo usuário.

    `metadata` (timestamps, autor, tags, versão) é opaco para o engine.
    """
    id: str
    name: str
    nodes: List[Node] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def node(self, node_id: str) -> Optional[Node]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def incoming(self, node_id: str) -> List[Connection]:
        return [c for c in self.connections if c.to_node == node_id]
