# src/capsule_flow/__init__.py
"""
Capsule Flow — engine de execução de grafos de Capsules.

Um Flow é um grafo de Nodes (instâncias de Capsules com portas tipadas)
ligados por Connections dirigidas. Este pacote:
    - valida tipos e entradas obrigatórias (`validate`)
    - calcula a ordem de execução e detecta ciclos (`execution_order`)
    - executa os Nodes em sequência, isolando falhas por Node (`execute`)

Capsules concretas, editor visual e gerador de código ficam fora deste
pacote: o engine recebe Capsules como valores passados pelo chamador.
"""

from .core.engine import (
    CycleDetectedError,
    ExecutionResult,
    FlowExecutor,
    NodeError,
    ValidationReport,
    compatible,
    compatible_targets,
    execute,
    execute_sync,
    execution_order,
    validate,
)
from .core.graph import (
    Capsule,
    CapsuleCatalog,
    CapsuleCategory,
    CapsuleSpec,
    Connection,
    ExecutionContext,
    Flow,
    Node,
    Port,
    PortType,
    define_capsule,
)

__all__ = [
    "CycleDetectedError",
    "ExecutionResult",
    "FlowExecutor",
    "NodeError",
    "ValidationReport",
    "compatible",
    "compatible_targets",
    "execute",
    "execute_sync",
    "execution_order",
    "validate",
    "Capsule",
    "CapsuleCatalog",
    "CapsuleCategory",
    "CapsuleSpec",
    "Connection",
    "ExecutionContext",
    "Flow",
    "Node",
    "Port",
    "PortType",
    "define_capsule",
]
