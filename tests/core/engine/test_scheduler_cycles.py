import pytest

from capsule_flow.core.engine.scheduler import CycleDetectedError, order


def test_two_node_cycle_is_detected(capsules, make_flow):
    """
    Verifica que A → B → A é rejeitado com CycleDetectedError.

    Nenhuma ordem parcial é produzida; a exceção identifica o Node em que
    o ciclo foi fechado.
    """
    p = capsules.passthrough
    flow = make_flow([("a", p()), ("b", p())], ["a.out->b.in", "b.out->a.in"])

    with pytest.raises(CycleDetectedError) as exc_info:
        order(flow.nodes, flow.connections)

    assert exc_info.value.node_id in {"a", "b"}
    assert "Circular dependency detected at node" in str(exc_info.value)


def test_self_loop_is_a_cycle(capsules, make_flow):
    p = capsules.passthrough
    flow = make_flow([("a", p())], ["a.out->a.in"])

    with pytest.raises(CycleDetectedError) as exc_info:
        order(flow.nodes, flow.connections)

    assert exc_info.value.node_id == "a"


def test_cycle_reachable_from_a_root_is_detected(capsules, make_flow):
    """O ciclo fica a jusante de uma raiz natural: a → b → c → b."""
    p = capsules.passthrough
    merge_b = _merge()
    flow = make_flow(
        [("a", p()), ("b", merge_b), ("c", p())],
        ["a.out->b.left", "b.out->c.in", "c.out->b.right"],
    )

    with pytest.raises(CycleDetectedError):
        order(flow.nodes, flow.connections)


def test_cycle_detected_error_is_a_value_error():
    assert issubclass(CycleDetectedError, ValueError)


def _merge():
    from capsule_flow.core.graph.capsule import Port, define_capsule

    return define_capsule(
        name="Merge",
        inputs=[Port(id="left", name="Left"), Port(id="right", name="Right")],
        outputs=[Port(id="out", name="Out")],
    )
