from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class CapsuleFlowException(Exception):
    """Base class para exceções internas do Capsule Flow.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana: é ela que vai para o resultado da run
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Capsules
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class CapsuleExecutionError(CapsuleFlowException):
    """Falha reportada por uma Capsule durante `execute`."""


@dataclass(frozen=True, eq=False)
class CapsuleOutputError(CapsuleFlowException):
    """Capsule retornou algo que não é um mapa de saídas."""


# ---------------------------------------------------------------------------
# Engine / Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class EngineConfigurationError(CapsuleFlowException):
    """Configuração inválida ou inconsistente para execução."""
