#!/usr/bin/env python3
"""
Tests for the schematic model, node building and component stamps.
"""

import sys

from circuit_fixtures import CircuitBuilder, series_rl, voltage_divider
from circuitsim.components import MODEL_REGISTRY, get_model
from circuitsim.core.circuit import Component, ComponentType, Wire, coerce_circuit
from circuitsim.core.circuit_graph import (BRANCH_VARIABLE_TYPES, GROUND_NODE_ID, CircuitGraph, UnionFind,
                                           resolve_component_value)


def test_union_find():
    print("Testing union-find...")
    uf = UnionFind()
    for key in ("a", "b", "c", "d"):
        uf.add(key)
    uf.union("a", "b")
    uf.union("c", "d")
    assert uf.connected("a", "b")
    assert not uf.connected("a", "c")
    uf.union("b", "d")
    assert uf.connected("a", "c")
    assert uf.find("d") == uf.find("a")
    assert "a" in uf and "z" not in uf
    print("✅ Union-find working correctly")


def test_divider_nodes_and_branches():
    print("\nTesting node building...")
    circuit = voltage_divider()
    graph = circuit.graph()

    # V1+ and the divider midpoint; ground is not counted
    assert graph.node_count == 2
    assert graph.branch_count == 1
    assert graph.has_ground()
    assert circuit.node_of('V1.-') == GROUND_NODE_ID
    assert circuit.node_of('GND.gnd') == GROUND_NODE_ID
    assert circuit.node_of('R1.2') == circuit.node_of('R2.1')
    assert circuit.node_of('V1.+') == circuit.node_of('R1.1')
    assert graph.port_node_index('V1', '-') == -1
    assert graph.port_node_index('nope', 'x') == -1
    print("✅ Node building working correctly")


def test_graph_is_deterministic():
    print("\nTesting determinism...")
    first = voltage_divider().graph()
    second = voltage_divider().graph()
    assert first.node_index == second.node_index
    assert first.stamps == second.stamps
    print("✅ Same schematic builds the same graph")


def test_multiple_grounds_share_reference_node():
    print("\nTesting multiple grounds...")
    circuit = (CircuitBuilder()
               .add('V1', 'dc_source', 5)
               .add('R1', 'resistor', 100)
               .add('GND1', 'ground')
               .add('GND2', 'ground')
               .connect('V1.+', 'R1.1')
               .connect('V1.-', 'GND1.gnd')
               .connect('R1.2', 'GND2.gnd'))
    graph = circuit.graph()
    assert circuit.node_of('R1.2') == GROUND_NODE_ID
    assert circuit.node_of('V1.-') == GROUND_NODE_ID
    assert graph.node_count == 1
    print("✅ Ground components collapse into node 0")


def test_branch_variables():
    print("\nTesting branch variable allocation...")
    graph = series_rl().graph()
    stamps = {s.component_id: s for s in graph.stamps}
    assert stamps['V1'].current_var_index == 0
    assert stamps['L1'].current_var_index == 1
    assert stamps['R1'].current_var_index is None
    assert graph.branch_count == 2
    print("✅ Branch variables allocated for sources and inductors")


def test_registry_covers_every_type():
    """Every component type has a model, and branch unknowns exist exactly for BRANCH_VARIABLE_TYPES."""
    print("\nTesting model registry...")
    assert set(MODEL_REGISTRY) == set(ComponentType)
    for component_type in ComponentType:
        assert get_model(component_type) is MODEL_REGISTRY[component_type]

    circuit = CircuitBuilder().add('GND', 'ground')
    for component_type in ComponentType:
        if component_type != ComponentType.GROUND:
            circuit.add(f"X_{component_type.value}", component_type.value)
    graph = circuit.graph()
    for stamp in graph.stamps:
        has_branch = stamp.current_var_index is not None
        assert has_branch == (stamp.type in BRANCH_VARIABLE_TYPES), stamp.component_id
    print("✅ Model registry consistent")


def test_component_values_and_defaults():
    print("\nTesting component value resolution...")
    assert resolve_component_value(Component('R1', ComponentType.RESISTOR)) == 1000.0
    assert resolve_component_value(Component('R2', ComponentType.RESISTOR, value=47)) == 47.0
    assert resolve_component_value(Component('L1', ComponentType.LED, led_color='Blue')) == 3.1
    assert resolve_component_value(Component('L2', ComponentType.LED, led_color='green',
                                             vf_override=1.8)) == 1.8
    assert resolve_component_value(Component('L3', ComponentType.LED)) == 2.0

    circuit = CircuitBuilder().add('V1', 'ac_source', 5).add('GND', 'ground').connect('V1.-', 'GND.gnd')
    stamp = circuit.graph().stamps[0]
    assert stamp.frequency == 60.0
    assert stamp.phase == 0.0
    assert stamp.waveform_type.value == 'sine'
    print("✅ Component values resolved with defaults")


def test_gate_ports_resolved_by_name():
    print("\nTesting logic gate ports...")
    circuit = (CircuitBuilder()
               .add('V1', 'dc_source', 5)
               .add('G1', 'logic_and', logic_input_b=True)
               .add('R1', 'resistor', 1000)
               .add('GND', 'ground')
               .connect('V1.+', 'G1.A')
               .connect('G1.Y', 'R1.1')
               .connect('R1.2', 'GND.gnd')
               .connect('V1.-', 'GND.gnd'))
    graph = circuit.graph()
    gate = next(s for s in graph.stamps if s.component_id == 'G1')
    assert gate.node1_index == graph.port_node_index('V1', '+')
    assert gate.output_node_index == graph.port_node_index('R1', '1')
    assert gate.wired_inputs == ('A',)
    assert gate.logic_input_b is True
    print("✅ Logic gate ports resolved by name")


def test_dictionary_round_trip():
    """Editor dictionaries (camelCase) are accepted wherever model objects are."""
    print("\nTesting dictionary conversion...")
    data = {
        "id": "SW1", "type": "switch", "switchClosed": True,
        "ports": [{"id": "1", "name": "1", "offsetX": -20}, {"id": "2", "name": "2", "offsetX": 20}],
    }
    component = Component.from_dict(data)
    assert component.type == ComponentType.SWITCH
    assert component.switch_closed is True
    assert component.ports[0].offset_x == -20
    assert Component.from_dict(component.to_dict()).to_dict() == component.to_dict()

    wire = Wire.from_dict({"id": "w1", "fromComponentId": "SW1", "fromPortId": "1",
                           "toComponentId": "R1", "toPortId": "2"})
    assert wire.to_dict()["toPortId"] == "2"

    components, wires = coerce_circuit([data], [wire.to_dict()])
    assert isinstance(components[0], Component)
    assert isinstance(wires[0], Wire)
    graph = CircuitGraph.build([data], [])
    assert graph.stamps[0].switch_closed is True
    print("✅ Dictionary conversion working correctly")


def main():
    """Run all tests."""
    print("=" * 60)
    print("CIRCUIT GRAPH TESTS")
    print("=" * 60)

    tests = [
        test_union_find,
        test_divider_nodes_and_branches,
        test_graph_is_deterministic,
        test_multiple_grounds_share_reference_node,
        test_branch_variables,
        test_registry_covers_every_type,
        test_component_values_and_defaults,
        test_gate_ports_resolved_by_name,
        test_dictionary_round_trip,
    ]

    passed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"❌ {test.__name__} failed: {e}")

    print("\n" + "=" * 60)
    print(f"TEST RESULTS: {passed}/{len(tests)} tests passed")
    print("=" * 60)
    return passed == len(tests)


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
