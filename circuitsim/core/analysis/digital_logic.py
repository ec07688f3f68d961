"""
Digital Logic Simulator.

Stateless combinational evaluation of the logic gates in a schematic.
Each input resolves from its wired node voltage, then the gate's manual
input, then LOW; the output level is also reported as a synthetic voltage
so analog solvers can drive it as a source.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..circuit import Component, ComponentType, LOGIC_GATE_TYPES, coerce_circuit
from ..logic import (DigitalLogicOptions, LogicLevel, bool_to_logic, evaluate_and, evaluate_gate,
                     evaluate_nand, evaluate_nor, evaluate_not, evaluate_or, evaluate_xnor, evaluate_xor,
                     logic_to_voltage, resolve_input_level, voltage_to_logic)

PortVoltages = Dict[Tuple[str, str], float]


@dataclass
class GateState:
    component_id: str
    gate_type: ComponentType
    input_a: LogicLevel
    input_b: Optional[LogicLevel]
    output: LogicLevel
    output_voltage: float

    def to_dict(self) -> Dict:
        return {
            "componentId": self.component_id,
            "gateType": self.gate_type.value,
            "inputA": self.input_a.value,
            "inputB": self.input_b.value if self.input_b is not None else None,
            "output": self.output.value,
            "outputVoltage": self.output_voltage,
        }


@dataclass
class DigitalSimulationResult:
    success: bool = True
    gate_states: Dict[str, GateState] = field(default_factory=dict)
    node_voltages: Dict[str, float] = field(default_factory=dict)


class DigitalLogicSimulator:
    """Evaluates AND/OR/NOT/NAND/NOR/XOR/XNOR gates with three-valued logic"""

    def __init__(self, options: DigitalLogicOptions = None):
        self.options = options or DigitalLogicOptions()

    def voltage_to_logic(self, voltage: Optional[float]) -> LogicLevel:
        return voltage_to_logic(voltage, self.options)

    def logic_to_voltage(self, level: LogicLevel) -> float:
        return logic_to_voltage(level, self.options)

    @staticmethod
    def bool_to_logic(value: Optional[bool]) -> LogicLevel:
        return bool_to_logic(value)

    evaluate_and = staticmethod(evaluate_and)
    evaluate_or = staticmethod(evaluate_or)
    evaluate_not = staticmethod(evaluate_not)
    evaluate_nand = staticmethod(evaluate_nand)
    evaluate_nor = staticmethod(evaluate_nor)
    evaluate_xor = staticmethod(evaluate_xor)
    evaluate_xnor = staticmethod(evaluate_xnor)
    evaluate_gate = staticmethod(evaluate_gate)

    def _input_level(self, component: Component, port_name: str, manual: Optional[bool],
                     port_node_voltages: Optional[PortVoltages]) -> LogicLevel:
        port = component.get_port(port_name)
        voltage = None
        if port is not None and port_node_voltages:
            voltage = port_node_voltages.get((component.id, port.id))
        return resolve_input_level(voltage, manual, self.options)

    def simulate(self, components, wires=None,
                 port_node_voltages: Optional[PortVoltages] = None) -> DigitalSimulationResult:
        """
        Evaluate every gate once. port_node_voltages maps
        (component_id, port_id) to the voltage of the node the port is wired to.
        """
        components, _ = coerce_circuit(components, wires)
        result = DigitalSimulationResult(success=True)

        for component in components:
            if component.type not in LOGIC_GATE_TYPES:
                continue
            input_a = self._input_level(component, 'A', component.logic_input_a, port_node_voltages)
            input_b = None
            if component.type != ComponentType.LOGIC_NOT:
                input_b = self._input_level(component, 'B', component.logic_input_b, port_node_voltages)

            output = evaluate_gate(component.type, input_a, input_b)
            output_voltage = self.logic_to_voltage(output)
            result.gate_states[component.id] = GateState(component.id, component.type, input_a, input_b,
                                                         output, output_voltage)
            result.node_voltages[component.id] = output_voltage
        return result

    @staticmethod
    def get_and_truth_table() -> List[Tuple[LogicLevel, LogicLevel, LogicLevel]]:
        levels = (LogicLevel.LOW, LogicLevel.HIGH)
        return [(a, b, evaluate_and(a, b)) for a in levels for b in levels]

    @staticmethod
    def get_or_truth_table() -> List[Tuple[LogicLevel, LogicLevel, LogicLevel]]:
        levels = (LogicLevel.LOW, LogicLevel.HIGH)
        return [(a, b, evaluate_or(a, b)) for a in levels for b in levels]

    @staticmethod
    def format_logic_level(level: LogicLevel) -> str:
        if level == LogicLevel.HIGH:
            return "HIGH (1)"
        if level == LogicLevel.LOW:
            return "LOW (0)"
        return "UNKNOWN (X)"

    @staticmethod
    def is_logic_gate(component_type) -> bool:
        if isinstance(component_type, str):
            return component_type in {t.value for t in LOGIC_GATE_TYPES}
        return component_type in LOGIC_GATE_TYPES
