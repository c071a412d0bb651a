# src/capsule_flow/core/graph/context.py
"""
Contexto de execução de uma run de Flow.

Este módulo define o `ExecutionContext`, criado a cada execução e
descartado ao final, e o logger padrão usado quando o chamador não
fornece um.

O ExecutionContext reúne:
    - variáveis e ambiente da run (opacos para o engine)
    - um logger com três níveis (info, warn, error)
    - eventos de log estruturados da run

Invariantes:
    - Cada run possui seu próprio contexto
    - Eventos sempre incluem `run_id`, `node_id`, `level` e `timestamp`
    - Nenhum estado é persistido

Limites explícitos:
    - Não executa Nodes
    - Não decide políticas de execução
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


LOGGER_NAME = "capsule_flow"

LEVELS = ("info", "warn", "error")

DEFAULT_HANDLER_NAME = "capsule_flow.default"


@runtime_checkable
class FlowLogger(Protocol):
    """Logger mínimo aceito pelo engine: três métodos recebendo uma linha de texto."""

    def info(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class OneLineFormatter(logging.Formatter):
    """Colapsa espaços e quebras de linha para manter uma linha por evento."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        return " ".join(msg.split())


class DefaultFlowLogger:
    """
    Logger padrão baseado em `logging`, com o nível visível em cada linha.

    Instala um único StreamHandler (nomeado `DEFAULT_HANDLER_NAME`) no
    logger `capsule_flow`, sem tocar no logger raiz.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(LOGGER_NAME)
        if logger is None and not any(h.get_name() == DEFAULT_HANDLER_NAME for h in self._logger.handlers):
            handler = logging.StreamHandler()
            handler.set_name(DEFAULT_HANDLER_NAME)
            handler.setFormatter(OneLineFormatter(fmt="[%(levelname)s] %(message)s"))
            self._logger.addHandler(handler)
            self._logger.setLevel(logging.INFO)
            self._logger.propagate = False

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warn(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)


@dataclass
class ExecutionContext:
    """
    Entrada por run do executor.

    `variables` e `env` são repassados intactos; o engine não os
    interpreta. Quando `logger` é omitido, `DefaultFlowLogger` é usado.
    """
    variables: Dict[str, Any] = field(default_factory=dict)
    env: Dict[str, str] = field(default_factory=dict)
    logger: Optional[FlowLogger] = None
    flow_id: Optional[str] = None
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = DefaultFlowLogger()

    def log(self, *, node_id: Optional[str], level: str, message: str, **extra: Any) -> None:
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        event = {
            "run_id": self.run_id,
            "node_id": node_id,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

        getattr(self.logger, level)(message)
