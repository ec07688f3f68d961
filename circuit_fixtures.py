"""
Schematic builders shared by the test scripts.

Ports are named after their role ('+'/'-' on sources, 'A'/'B'/'Y' on
gates, '1'/'2' elsewhere) and use the name as their id, so a terminal is
addressed as "R1.2".
"""

import os
import sys

project_root = os.path.dirname(os.path.abspath(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from circuitsim.core.circuit import Component, ComponentType, LOGIC_GATE_TYPES, Port, SOURCE_TYPES, Wire
from circuitsim.core.circuit_graph import CircuitGraph


def default_port_names(component_type):
    if component_type == ComponentType.GROUND:
        return ['gnd']
    if component_type == ComponentType.LOGIC_NOT:
        return ['A', 'Y']
    if component_type in LOGIC_GATE_TYPES:
        return ['A', 'B', 'Y']
    if component_type in SOURCE_TYPES:
        return ['+', '-']
    return ['1', '2']


class CircuitBuilder:
    """Small fluent builder for component/wire lists"""

    def __init__(self):
        self.components = []
        self.wires = []

    def add(self, component_id, component_type, value=None, **fields):
        component_type = ComponentType(component_type)
        ports = [Port(id=name, name=name) for name in default_port_names(component_type)]
        self.components.append(Component(id=component_id, type=component_type, ports=ports,
                                         value=value, **fields))
        return self

    def connect(self, a, b):
        from_id, from_port = a.split('.', 1)
        to_id, to_port = b.split('.', 1)
        self.wires.append(Wire(id=f"w{len(self.wires) + 1}", from_component_id=from_id,
                               from_port_id=from_port, to_component_id=to_id, to_port_id=to_port))
        return self

    def component(self, component_id):
        return next(c for c in self.components if c.id == component_id)

    def graph(self):
        return CircuitGraph(self.components, self.wires)

    def node_of(self, terminal):
        component_id, port_id = terminal.split('.', 1)
        return self.graph().port_node_id(component_id, port_id)

    def circuit(self):
        return self.components, self.wires


def voltage_divider(v=10.0, r1=1000.0, r2=1000.0):
    """V1 -> R1 -> R2 -> ground"""
    return (CircuitBuilder()
            .add('V1', 'dc_source', v)
            .add('R1', 'resistor', r1)
            .add('R2', 'resistor', r2)
            .add('GND', 'ground')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', 'R2.1')
            .connect('R2.2', 'V1.-')
            .connect('V1.-', 'GND.gnd'))


def led_circuit(v=5.0, r=330.0, color='red', reversed_led=False):
    """V1 -> R1 -> LED1 -> ground; LED port 1 is the anode"""
    anode, cathode = ('LED1.2', 'LED1.1') if reversed_led else ('LED1.1', 'LED1.2')
    return (CircuitBuilder()
            .add('V1', 'dc_source', v)
            .add('R1', 'resistor', r)
            .add('LED1', 'led', led_color=color)
            .add('GND', 'ground')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', anode)
            .connect(cathode, 'V1.-')
            .connect('V1.-', 'GND.gnd'))


def series_rc(v=5.0, r=1000.0, c=1e-6, source='dc_source', **source_fields):
    """Source -> R1 -> C1 -> ground; the output is C1.1"""
    return (CircuitBuilder()
            .add('V1', source, v, **source_fields)
            .add('R1', 'resistor', r)
            .add('C1', 'capacitor', c)
            .add('GND', 'ground')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', 'C1.1')
            .connect('C1.2', 'V1.-')
            .connect('V1.-', 'GND.gnd'))


def series_rl(v=5.0, r=100.0, inductance=10e-3):
    """V1 -> R1 -> L1 -> ground"""
    return (CircuitBuilder()
            .add('V1', 'dc_source', v)
            .add('R1', 'resistor', r)
            .add('L1', 'inductor', inductance)
            .add('GND', 'ground')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', 'L1.1')
            .connect('L1.2', 'V1.-')
            .connect('V1.-', 'GND.gnd'))


def series_rlc(v=1.0, r=10.0, inductance=10e-3, c=10e-6, frequency=60.0):
    """AC V1 -> R1 -> L1 -> C1 -> ground"""
    return (CircuitBuilder()
            .add('V1', 'ac_source', v, frequency=frequency)
            .add('R1', 'resistor', r)
            .add('L1', 'inductor', inductance)
            .add('C1', 'capacitor', c)
            .add('GND', 'ground')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', 'L1.1')
            .connect('L1.2', 'C1.1')
            .connect('C1.2', 'V1.-')
            .connect('V1.-', 'GND.gnd'))


def parallel_sources(v1=5.0, v2=3.0, r=1000.0):
    """Two DC sources fighting over the same node, loaded by R1"""
    return (CircuitBuilder()
            .add('V1', 'dc_source', v1)
            .add('V2', 'dc_source', v2)
            .add('R1', 'resistor', r)
            .add('GND', 'ground')
            .connect('V1.+', 'V2.+')
            .connect('V1.+', 'R1.1')
            .connect('R1.2', 'V1.-')
            .connect('V2.-', 'V1.-')
            .connect('V1.-', 'GND.gnd'))
