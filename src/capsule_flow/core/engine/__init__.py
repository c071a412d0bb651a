# src/capsule_flow/core/engine/__init__.py
"""
Engine do Capsule Flow.

Este pacote contém a implementação responsável por **validar**,
**planejar** e **executar** Flows.

Componentes principais:
    - compatibility → regras dirigidas de compatibilidade entre tipos de porta
    - validator     → erros estruturais e de tipo, sempre reportados, nunca levantados
    - scheduler     → ordem topológica e detecção de ciclos
    - executor      → execução sequencial com isolamento de falhas por Node

Fluxo de controle: validator → (se válido) scheduler → executor.

Limites explícitos:
    - Não contém Capsules concretas
    - Não mantém registro de tipos de Capsule
    - Não executa Nodes em paralelo nem persiste resultados
"""

from .compatibility import compatible, compatible_targets
from .executor import (
    FLOW_ERROR_NODE_ID,
    ExecutionResult,
    FlowExecutor,
    NodeError,
    execute,
    execute_sync,
    execution_order,
)
from .scheduler import CycleDetectedError, order
from .validator import ValidationReport, validate

__all__ = [
    "compatible",
    "compatible_targets",
    "FLOW_ERROR_NODE_ID",
    "ExecutionResult",
    "FlowExecutor",
    "NodeError",
    "execute",
    "execute_sync",
    "execution_order",
    "CycleDetectedError",
    "order",
    "ValidationReport",
    "validate",
]
