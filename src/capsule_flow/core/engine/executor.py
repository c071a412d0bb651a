# src/capsule_flow/core/engine/executor.py
"""
Executor de Flows do Capsule Flow.

O executor consulta o scheduler e executa cada Node na ordem obtida,
repassando as saídas de cada produtor às entradas de cada consumidor.

Modelo de execução:
    - Uma única linha de controle por run: Nodes nunca rodam em paralelo
    - Cada chamada de Capsule é aguardada por completo antes da próxima
    - Falhas de Node são isoladas: registradas e a run continua
    - Ciclo ou erro inesperado do próprio executor encerram a run

Política de falhas (seção `engine` da configuração):
    - on_dependency_failure="continue" (padrão): Nodes a jusante de uma
      falha ainda são chamados e recebem o que a saída sintética do Node
      falho contiver (em geral, `None` nas chaves esperadas)
    - on_dependency_failure="skip": Nodes alimentados por um Node que
      falhou ou foi pulado não são chamados
    - fail_fast=True: nenhum Node é tentado após a primeira falha

Limites explícitos:
    - Não valida tipos (ver validator); o chamador decide se valida antes
    - Não aplica timeout, retry nem cancelamento
    - Não persiste estado intermediário
"""

from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from capsule_flow.core.config.engine_config import EngineConfig, resolve_engine_config
from capsule_flow.core.config.loader import load_config
from capsule_flow.core.exceptions import CapsuleOutputError
from capsule_flow.core.graph.context import ExecutionContext
from capsule_flow.core.graph.model import Flow, Node

from .scheduler import CycleDetectedError, order


FLOW_ERROR_NODE_ID = "flow"


@dataclass(frozen=True)
class NodeError:
    """Falha associada a um Node (ou ao Flow inteiro, com `node_id="flow"`)."""

    node_id: str
    error: str

    def to_dict(self) -> Dict[str, str]:
        return {"nodeId": self.node_id, "error": self.error}


@dataclass(frozen=True)
class ExecutionResult:
    """
    Resultado agregado de uma run.

    Campos:
        - success: verdadeiro apenas se nenhum erro foi registrado
        - node_results: mapa Node id → saídas produzidas (ou `{"error": msg}`)
        - errors: falhas por Node, na ordem em que ocorreram
        - execution_time: tempo de parede da run, em milissegundos
        - skipped: Nodes não chamados pela política de falhas
    """

    success: bool
    node_results: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    errors: List[NodeError] = field(default_factory=list)
    execution_time: float = 0.0
    skipped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "success": self.success,
            "nodeResults": {k: dict(v) for k, v in self.node_results.items()},
            "executionTime": self.execution_time,
        }
        if self.errors:
            out["errors"] = [e.to_dict() for e in self.errors]
        if self.skipped:
            out["skipped"] = list(self.skipped)
        return out


def _error_message(exc: BaseException) -> str:
    return str(exc) or exc.__class__.__name__


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0


class FlowExecutor:
    """Executor canônico (scheduler + chamada sequencial de Capsules)."""

    def __init__(self, *, config: Optional[Mapping[str, Any]] = None):
        self.config: EngineConfig = resolve_engine_config(config)

    @classmethod
    def from_config_files(cls, *, defaults_path, local_path=None) -> "FlowExecutor":
        """Executor configurado por um arquivo de defaults e um override local opcional (YAML/JSON)."""
        return cls(config=load_config(defaults_path=defaults_path, local_path=local_path))

    def execution_order(self, flow: Flow) -> List[str]:
        """Ids dos Nodes na ordem em que seriam executados. Levanta `CycleDetectedError`."""
        return [n.id for n in order(flow.nodes, flow.connections)]

    def _gather_inputs(
        self,
        flow: Flow,
        node: Node,
        node_results: Mapping[str, Mapping[str, Any]],
    ) -> Dict[str, Any]:
        inputs: Dict[str, Any] = {}
        for conn in flow.incoming(node.id):
            upstream = node_results.get(conn.from_node)
            if upstream is not None:
                inputs[conn.to_port] = upstream.get(conn.from_port)
        return inputs

    def _blocking_dependency(self, flow: Flow, node: Node, blocked: List[str]) -> Optional[str]:
        for conn in flow.incoming(node.id):
            if conn.from_node in blocked:
                return conn.from_node
        return None

    async def _call_capsule(self, node: Node, inputs: Dict[str, Any], config: Dict[str, Any]) -> Dict[str, Any]:
        result = node.capsule.execute(inputs, config)
        if inspect.isawaitable(result):
            result = await result

        if result is None:
            return {}
        if not isinstance(result, Mapping):
            raise CapsuleOutputError(
                message=f"Capsule {getattr(node.capsule, 'id', node.id)} must return a mapping of outputs",
                details={"node_id": node.id, "received": type(result).__name__},
            )
        return dict(result)

    async def execute(self, flow: Flow, context: Optional[ExecutionContext] = None) -> ExecutionResult:
        """
        Executa um Flow e retorna o resultado consolidado.

        Nunca levanta exceção: ciclos, falhas de Node e erros inesperados
        são registrados no `ExecutionResult`.

        Args:
            flow (Flow): Flow a executar.
            context (Optional[ExecutionContext]): Contexto da run; criado
                com o logger padrão quando omitido.

        Returns:
            ExecutionResult: Saídas por Node, erros e tempo de execução.
        """
        started = time.perf_counter()
        ctx = context or ExecutionContext(flow_id=flow.id)
        if ctx.flow_id is None:
            ctx.flow_id = flow.id

        node_results: Dict[str, Dict[str, Any]] = {}
        errors: List[NodeError] = []
        skipped: List[str] = []
        # Nodes cuja saída não deve alimentar ninguém sob a política "skip"
        blocked: List[str] = []

        try:
            try:
                ordered = order(flow.nodes, flow.connections)
            except CycleDetectedError as e:
                ctx.log(node_id=None, level="error", message=f"Flow execution failed: {e}", node=e.node_id)
                return ExecutionResult(
                    success=False,
                    node_results={},
                    errors=[NodeError(node_id=FLOW_ERROR_NODE_ID, error=str(e))],
                    execution_time=_elapsed_ms(started),
                )

            ctx.log(node_id=None, level="info", message=f'Executing flow "{flow.name}" with {len(ordered)} nodes')

            for node in ordered:
                capsule_name = getattr(node.capsule, "name", node.id)

                if self.config.skip_failed_dependents:
                    dep = self._blocking_dependency(flow, node, blocked)
                    if dep is not None:
                        reason = f"upstream node {dep} did not complete"
                        ctx.log(node_id=node.id, level="warn", message=f"Node {node.id} skipped: {reason}")
                        node_results[node.id] = {"skipped": reason}
                        skipped.append(node.id)
                        blocked.append(node.id)
                        continue

                ctx.log(node_id=node.id, level="info", message=f"Executing node: {capsule_name} ({node.id})")

                inputs = self._gather_inputs(flow, node, node_results)
                config = dict(node.config or {})

                if getattr(node.capsule, "execute", None) is None:
                    ctx.log(
                        node_id=node.id,
                        level="warn",
                        message=f"Node {node.id} has no execute function - skipping",
                    )
                    node_results[node.id] = {}
                    continue

                try:
                    node_results[node.id] = await self._call_capsule(node, inputs, config)
                except Exception as e:
                    message = _error_message(e)
                    ctx.log(
                        node_id=node.id,
                        level="error",
                        message=f"Node {node.id} failed: {message}",
                        exception_class=e.__class__.__name__,
                    )
                    errors.append(NodeError(node_id=node.id, error=message))
                    node_results[node.id] = {"error": message}
                    blocked.append(node.id)

                    if self.config.fail_fast:
                        ctx.log(node_id=None, level="warn", message="fail_fast enabled - stopping flow execution")
                        break
                    continue

                ctx.log(node_id=node.id, level="info", message=f"Node {node.id} completed successfully")

        except Exception as e:
            message = _error_message(e)
            ctx.log(node_id=None, level="error", message=f"Flow execution failed: {message}")
            return ExecutionResult(
                success=False,
                node_results=node_results,
                errors=[NodeError(node_id=FLOW_ERROR_NODE_ID, error=message)],
                execution_time=_elapsed_ms(started),
                skipped=skipped,
            )

        elapsed = _elapsed_ms(started)
        ctx.log(node_id=None, level="info", message=f"Flow execution completed in {elapsed:.0f}ms")

        return ExecutionResult(
            success=not errors,
            node_results=node_results,
            errors=errors,
            execution_time=elapsed,
            skipped=skipped,
        )


async def execute(
    flow: Flow,
    context: Optional[ExecutionContext] = None,
    *,
    config: Optional[Mapping[str, Any]] = None,
) -> ExecutionResult:
    """Atalho para `FlowExecutor(config=config).execute(flow, context)`."""
    return await FlowExecutor(config=config).execute(flow, context)


def execute_sync(
    flow: Flow,
    context: Optional[ExecutionContext] = None,
    *,
    config: Optional[Mapping[str, Any]] = None,
) -> ExecutionResult:
    """Executa o Flow num novo event loop. Não deve ser chamado de dentro de um loop ativo."""
    return asyncio.run(execute(flow, context, config=config))


def execution_order(flow: Flow) -> List[str]:
    return [n.id for n in order(flow.nodes, flow.connections)]
