# tests/conftest.py
"""
Fixtures compartilhados para testes do Capsule Flow.

Este módulo define fixtures reutilizáveis que fornecem:
- Capsules mínimas e determinísticas (fonte numérica, dobrador, falha)
- um logger que apenas grava as linhas recebidas
- um ExecutionContext controlado
- um construtor de Flows a partir de listas simples

Decisões arquiteturais:
    - Capsules de teste usam `define_capsule`, o mesmo caminho do usuário
    - Imports do core são feitos de forma lazy para melhorar a clareza
      de erros durante falhas de import

Invariantes:
    - Nenhuma fixture faz I/O de rede
    - Nenhuma fixture depende de estado global
"""

from datetime import datetime, timezone

import pytest


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def engine_defaults_yaml() -> str:
    """YAML de defaults do engine, no formato de um `capsule-flow.defaults.yaml`."""
    return """\
engine:
  on_dependency_failure: continue
  fail_fast: false
editor:
  grid: 16
  themes: [light, dark]
"""


@pytest.fixture
def engine_local_yaml() -> str:
    """Override local que endurece a política de falhas."""
    return """\
engine:
  on_dependency_failure: skip
editor:
  themes: [dark]
"""


# =====================================================
# Logging / context fixtures
# =====================================================

class RecordingLogger:
    """Logger duck-typed que guarda `(level, message)` em memória."""

    def __init__(self):
        self.lines = []

    def info(self, message):
        self.lines.append(("info", message))

    def warn(self, message):
        self.lines.append(("warn", message))

    def error(self, message):
        self.lines.append(("error", message))

    def messages(self, level):
        return [m for lvl, m in self.lines if lvl == level]


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def ctx(recording_logger):
    """
    ExecutionContext determinístico para testes do executor.

    `run_id` e `created_at` são fixos; o logger grava as linhas para
    inspeção posterior.
    """
    from capsule_flow.core.graph.context import ExecutionContext

    return ExecutionContext(
        variables={"tenant": "acme"},
        env={"STAGE": "test"},
        logger=recording_logger,
        run_id="run-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
    )


# =====================================================
# Capsule fixtures
# =====================================================

@pytest.fixture
def capsules():
    """
    Fábrica de Capsules de teste.

    Retorna um objeto com construtores:
        - number_source(value): sem entradas, saída `value: number`
        - doubler(): entrada obrigatória `amount: number`, saída `doubled`
        - failing(message): sem entradas, saída `value`, sempre falha
        - passthrough(port_type): entrada `in`, saída `out`, do tipo dado
    """
    from capsule_flow.core.graph.capsule import Port, define_capsule
    from capsule_flow.core.graph.types import PortType

    class _Capsules:
        @staticmethod
        def number_source(value=42, name="Number Source"):
            async def _execute(inputs, config):
                return {"value": config.get("value", value)}

            return define_capsule(
                name=name,
                outputs=[Port(id="value", name="Value", type=PortType.NUMBER)],
                execute=_execute,
            )

        @staticmethod
        def doubler(name="Doubler"):
            async def _execute(inputs, config):
                amount = inputs.get("amount", config.get("amount"))
                if amount is None:
                    return {"doubled": None}
                return {"doubled": amount * 2}

            return define_capsule(
                name=name,
                inputs=[Port(id="amount", name="Amount", type=PortType.NUMBER, required=True)],
                outputs=[Port(id="doubled", name="Doubled", type=PortType.NUMBER)],
                execute=_execute,
            )

        @staticmethod
        def failing(message="boom", name="Failing Source"):
            async def _execute(inputs, config):
                raise RuntimeError(message)

            return define_capsule(
                name=name,
                outputs=[Port(id="value", name="Value", type=PortType.NUMBER)],
                execute=_execute,
            )

        @staticmethod
        def passthrough(port_type=PortType.ANY, name="Passthrough", calls=None):
            async def _execute(inputs, config):
                if calls is not None:
                    calls.append(name)
                return {"out": inputs.get("in")}

            return define_capsule(
                name=name,
                inputs=[Port(id="in", name="In", type=port_type)],
                outputs=[Port(id="out", name="Out", type=port_type)],
                execute=_execute,
            )

    return _Capsules


@pytest.fixture
def make_flow():
    """
    Constrói um Flow a partir de `nodes` ({id: capsule} ou (id, capsule, config))
    e `edges` no formato `"a.port->b.port"`.
    """
    from capsule_flow.core.graph.model import Connection, Flow, Node

    def _make(nodes, edges=(), flow_id="flow-test", name="Test Flow"):
        built = []
        for item in nodes:
            if len(item) == 3:
                node_id, capsule, config = item
            else:
                node_id, capsule = item
                config = {}
            built.append(Node(id=node_id, capsule=capsule, config=dict(config)))

        connections = []
        for i, edge in enumerate(edges):
            src, dst = edge.split("->")
            from_node, from_port = src.split(".")
            to_node, to_port = dst.split(".")
            connections.append(
                Connection(
                    id=f"c{i + 1}",
                    from_node=from_node,
                    from_port=from_port,
                    to_node=to_node,
                    to_port=to_port,
                )
            )
        return Flow(id=flow_id, name=name, nodes=built, connections=connections)

    return _make
