# src/capsule_flow/core/config/engine_config.py
"""
Políticas de execução do engine e seus defaults.

Seção `engine` da configuração:
    - on_dependency_failure: "continue" (padrão) executa Nodes a jusante de
      uma falha mesmo assim; "skip" não chama Nodes alimentados por um Node
      que falhou ou foi pulado
    - fail_fast: se verdadeiro, interrompe a run após a primeira falha de Node
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from capsule_flow.core.exceptions import EngineConfigurationError

from .errors import ConfigError
from .merge import deep_merge


ON_DEPENDENCY_FAILURE_CONTINUE = "continue"
ON_DEPENDENCY_FAILURE_SKIP = "skip"

DEPENDENCY_FAILURE_POLICIES = (ON_DEPENDENCY_FAILURE_CONTINUE, ON_DEPENDENCY_FAILURE_SKIP)

DEFAULT_ENGINE_CONFIG: Dict[str, Any] = {
    "engine": {
        "on_dependency_failure": ON_DEPENDENCY_FAILURE_CONTINUE,
        "fail_fast": False,
    },
}


@dataclass(frozen=True)
class EngineConfig:
    """Visão tipada e já validada da seção `engine`."""

    on_dependency_failure: str = ON_DEPENDENCY_FAILURE_CONTINUE
    fail_fast: bool = False

    @property
    def skip_failed_dependents(self) -> bool:
        return self.on_dependency_failure == ON_DEPENDENCY_FAILURE_SKIP


def resolve_engine_config(config: Optional[Mapping[str, Any]] = None) -> EngineConfig:
    """
    Aplica `config` sobre `DEFAULT_ENGINE_CONFIG` e valida as políticas.

    Raises:
        EngineConfigurationError: Se a configuração for estruturalmente
            inválida ou declarar uma política desconhecida.
    """
    try:
        effective = deep_merge(DEFAULT_ENGINE_CONFIG, dict(config or {}))
    except ConfigError as e:
        raise EngineConfigurationError(
            message=str(e),
            details={"section": "engine"},
            hint="A seção `engine` deve ser um mapa e cada chave deve manter o tipo do default",
        ) from e

    engine_cfg = effective["engine"]

    policy = engine_cfg.get("on_dependency_failure")
    if policy not in DEPENDENCY_FAILURE_POLICIES:
        raise EngineConfigurationError(
            message=f"Política on_dependency_failure desconhecida: {policy}",
            details={"received": policy, "allowed": list(DEPENDENCY_FAILURE_POLICIES)},
            hint="Use 'continue' ou 'skip'",
        )

    return EngineConfig(
        on_dependency_failure=policy,
        fail_fast=bool(engine_cfg.get("fail_fast", False)),
    )
