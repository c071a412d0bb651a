# src/capsule_flow/core/graph/__init__.py
"""
# Graph Core — Capsule Flow

Este pacote define as **estruturas de dados** que descrevem um Flow.

## Componentes

- **types**: `PortType`, `CapsuleCategory`, metadados de apresentação
- **capsule**: `Port`, protocolo `Capsule`, `CapsuleSpec`, `define_capsule`
- **model**: `Node`, `Connection`, `Flow`
- **context**: `ExecutionContext` e logger padrão
- **catalog**: `CapsuleCatalog`, catálogo explícito mantido pelo chamador

## Limites Explícitos

- Não valida, não ordena e não executa Flows (ver `core.engine`)
- Não mantém estado global
"""

from .capsule import Capsule, CapsuleSpec, Port, define_capsule
from .catalog import CapsuleCatalog, DuplicateCapsuleIdError, UnknownCapsuleError
from .context import DefaultFlowLogger, ExecutionContext, FlowLogger
from .model import Connection, Flow, Node
from .types import PORT_TYPE_INFO, CapsuleCategory, PortType

__all__ = [
    "Capsule",
    "CapsuleSpec",
    "Port",
    "define_capsule",
    "CapsuleCatalog",
    "DuplicateCapsuleIdError",
    "UnknownCapsuleError",
    "DefaultFlowLogger",
    "ExecutionContext",
    "FlowLogger",
    "Connection",
    "Flow",
    "Node",
    "PORT_TYPE_INFO",
    "CapsuleCategory",
    "PortType",
]
