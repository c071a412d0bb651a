# src/capsule_flow/core/engine/scheduler.py
"""
Planejador de execução de um Flow (ordem topológica).

Este módulo ordena os Nodes de um Flow de forma que todo Node apareça
depois de todos os Nodes cujas saídas ele consome, detectando ciclos.

O algoritmo é uma busca em profundidade "dependências primeiro":
    - cada Node visita antes os Nodes de origem das Connections que
      terminam nele
    - um Node reencontrado enquanto ainda está "em andamento" indica ciclo
    - o marcador "em andamento" é removido no retorno, de modo que grafos
      em diamante não são confundidos com ciclos

A busca parte primeiro das raízes naturais (Nodes que não são destino de
nenhuma Connection), na ordem de declaração, e depois dos Nodes restantes,
cobrindo subgrafos desconexos.

Decisões arquiteturais:
    - Pilha explícita em vez de recursão (sem limite de profundidade)
    - Empates entre Nodes independentes seguem a ordem de declaração
    - Connections cuja origem não existe são ignoradas aqui; o validator as reporta

Invariantes:
    - Nenhum Node aparece antes das suas dependências
    - Todo Node aparece exatamente uma vez

Limites explícitos:
    - Não executa Nodes
    - Não valida portas nem tipos
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Set, Tuple

from capsule_flow.core.graph.model import Connection, Node


class CycleDetectedError(ValueError):
    """
    Exceção levantada quando as Connections formam um ciclo.

    `node_id` identifica o Node em que o ciclo foi fechado. Nenhuma ordem
    parcial é produzida.
    """

    def __init__(self, node_id: str):
        super().__init__(f"Circular dependency detected at node {node_id}")
        self.node_id = node_id


def order(nodes: Sequence[Node], connections: Sequence[Connection]) -> List[Node]:
    """
    Produz uma ordem de execução topológica dos Nodes.

    Args:
        nodes (Sequence[Node]): Nodes do Flow, na ordem de declaração.
        connections (Sequence[Connection]): Connections do Flow.

    Returns:
        List[Node]: Nodes ordenados por dependência de dados.

    Raises:
        CycleDetectedError: Se as Connections formarem um ciclo.
    """
    by_id: Dict[str, Node] = {}
    for n in nodes:
        by_id.setdefault(n.id, n)

    upstream: Dict[str, List[str]] = {nid: [] for nid in by_id}
    targets: Set[str] = set()
    for c in connections:
        targets.add(c.to_node)
        if c.to_node in upstream and c.from_node in by_id:
            upstream[c.to_node].append(c.from_node)

    visited: Set[str] = set()
    in_progress: Set[str] = set()
    ordered: List[Node] = []

    def visit(root: str) -> None:
        if root in visited:
            return

        in_progress.add(root)
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(upstream[root]))]

        while stack:
            node_id, deps = stack[-1]

            descended = False
            for dep in deps:
                if dep in visited:
                    continue
                if dep in in_progress:
                    raise CycleDetectedError(dep)
                in_progress.add(dep)
                stack.append((dep, iter(upstream[dep])))
                descended = True
                break

            if descended:
                continue

            stack.pop()
            in_progress.discard(node_id)
            visited.add(node_id)
            ordered.append(by_id[node_id])

    roots = [nid for nid in by_id if nid not in targets]
    for nid in roots:
        visit(nid)

    for nid in by_id:
        if nid not in visited:
            visit(nid)

    return ordered
