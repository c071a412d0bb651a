# tests/e2e/test_flow_end_to_end.py
"""
Teste end-to-end: documento de Flow → validação → execução.

Cenário:
    - Um Flow de checkout é salvo em YAML no formato do editor
    - As Capsules são resolvidas por um catálogo montado no teste
    - O Flow é validado e, se válido, executado com a config do engine

Invariantes:
    - O caminho completo funciona sem rede e sem estado global
    - Os resultados por Node refletem a propagação das saídas
"""

from pathlib import Path

import pytest

from capsule_flow import (
    CapsuleCatalog,
    ExecutionContext,
    FlowExecutor,
    Port,
    PortType,
    define_capsule,
    execute,
    execution_order,
    validate,
)
from capsule_flow.core.config import load_config
from capsule_flow.serialization import load_flow


CHECKOUT_YAML = """\
id: checkout
name: Checkout
nodes:
  - id: login
    capsule: login
    config: {email: ana@example.com}
  - id: notify
    capsule: notify
  - id: cart
    capsule: cart
    config: {items: [10, 20, 12]}
  - id: pay
    capsule: payments
    config: {currency: BRL}
connections:
  - {id: c1, fromNode: login, fromPort: user, toNode: cart, toPort: user}
  - {id: c2, fromNode: cart, fromPort: total, toNode: pay, toPort: amount}
  - {id: c3, fromNode: pay, fromPort: receipt, toNode: notify, toPort: payload}
metadata:
  author: ana
"""


def _catalog(calls):
    async def _login(inputs, config):
        calls.append("login")
        return {"user": {"email": config["email"]}}

    async def _cart(inputs, config):
        calls.append("cart")
        return {"total": sum(config["items"]), "owner": inputs["user"]["email"]}

    def _pay(inputs, config):
        calls.append("payments")
        if not inputs.get("amount"):
            raise RuntimeError("nothing to charge")
        return {"receipt": {"amount": inputs["amount"], "currency": config["currency"]}}

    async def _notify(inputs, config):
        calls.append("notify")
        return {"sent": inputs.get("payload") is not None}

    return CapsuleCatalog.of(
        [
            define_capsule(
                name="Login",
                inputs=[Port(id="email", name="Email", type=PortType.EMAIL, required=True)],
                outputs=[Port(id="user", name="User", type=PortType.USER)],
                execute=_login,
            ),
            define_capsule(
                name="Cart",
                inputs=[
                    Port(id="user", name="User", type=PortType.OBJECT, required=True),
                    Port(id="items", name="Items", type=PortType.ARRAY, required=True),
                ],
                outputs=[Port(id="total", name="Total", type=PortType.NUMBER)],
                execute=_cart,
            ),
            define_capsule(
                id="payments",
                name="Stripe Payments",
                inputs=[
                    Port(id="amount", name="Amount", type=PortType.NUMBER, required=True),
                    Port(id="currency", name="Currency", type=PortType.STRING),
                ],
                outputs=[Port(id="receipt", name="Receipt", type=PortType.OBJECT)],
                execute=_pay,
            ),
            define_capsule(
                name="Notify",
                inputs=[Port(id="payload", name="Payload", type=PortType.ANY)],
                outputs=[Port(id="sent", name="Sent", type=PortType.EVENT)],
                execute=_notify,
            ),
        ]
    )


def _write(tmp_path: Path, name: str, content: str) -> Path:
    p = tmp_path / name
    p.write_text(content, encoding="utf-8")
    return p


@pytest.mark.asyncio
async def test_checkout_flow_runs_end_to_end(tmp_path: Path, recording_logger, engine_defaults_yaml):
    """
    Verifica o caminho completo com o Flow de checkout.

    Invariantes:
        - o documento é válido
        - a ordem respeita as dependências, mesmo declaradas fora de ordem
        - cada Node recebe as saídas do seu produtor
    """
    calls = []
    flow = load_flow(_write(tmp_path, "checkout.yaml", CHECKOUT_YAML), catalog=_catalog(calls))
    config = load_config(defaults_path=str(_write(tmp_path, "defaults.yaml", engine_defaults_yaml)))

    report = validate(flow)
    assert report.valid, report.errors

    assert execution_order(flow) == ["login", "cart", "pay", "notify"]

    result = await execute(flow, ExecutionContext(logger=recording_logger), config=config)

    assert result.success is True
    assert calls == ["login", "cart", "payments", "notify"]
    assert result.node_results["cart"] == {"total": 42, "owner": "ana@example.com"}
    assert result.node_results["pay"] == {"receipt": {"amount": 42, "currency": "BRL"}}
    assert result.node_results["notify"] == {"sent": True}


@pytest.mark.asyncio
async def test_checkout_failure_is_contained_with_skip_policy(
    tmp_path: Path, recording_logger, engine_defaults_yaml, engine_local_yaml
):
    """
    Com o carrinho vazio, o pagamento falha; sob `skip`, a notificação não é enviada.
    """
    calls = []
    document = CHECKOUT_YAML.replace("items: [10, 20, 12]", "items: []")
    flow = load_flow(_write(tmp_path, "checkout.yaml", document), catalog=_catalog(calls))
    executor = FlowExecutor.from_config_files(
        defaults_path=_write(tmp_path, "defaults.yaml", engine_defaults_yaml),
        local_path=_write(tmp_path, "local.yaml", engine_local_yaml),
    )

    report = validate(flow)
    assert report.valid is False
    assert report.errors == ['Node cart (Cart): Required input "Items" (items) is not connected or configured']

    result = await executor.execute(flow, ExecutionContext(logger=recording_logger))

    assert result.success is False
    assert result.node_results["cart"]["total"] == 0
    assert result.node_results["pay"] == {"error": "nothing to charge"}
    assert result.skipped == ["notify"]
    assert calls == ["login", "cart", "payments"]


def test_invalid_connection_is_caught_before_running(tmp_path: Path):
    calls = []
    document = CHECKOUT_YAML.replace("toNode: cart, toPort: user", "toNode: cart, toPort: items")
    flow = load_flow(_write(tmp_path, "checkout.yaml", document), catalog=_catalog(calls))

    report = validate(flow)

    assert report.valid is False
    assert "Connection c1: Incompatible types - User (User) -> Items (Array)" in report.errors
    assert calls == []
