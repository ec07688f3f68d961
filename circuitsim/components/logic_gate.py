"""
Logic gate model for mixed-signal circuits.

Inputs load their nodes with a very large resistance to ground. The output
drives its node as a voltage source to ground at the gate's logic level,
re-evaluated from the solved input voltages until the levels settle.
In AC analysis the output is a 0 V source.
"""

from ..config import LOGIC_INPUT_RESISTANCE
from ..core.logic import evaluate_gate, logic_to_voltage, resolve_input_level
from ..core.mna import AnalysisMode
from .base import ComponentModel


class LogicGateModel(ComponentModel):

    def is_nonlinear(self) -> bool:
        return True

    def initial_state(self, stamp, context):
        context.gate_levels[stamp.component_id] = self.evaluate(stamp, None, context)

    def evaluate(self, stamp, solution, context):
        """Output level from wired input voltages, manual inputs, or LOW."""
        def input_voltage(name, node_index):
            if solution is None or name not in stamp.wired_inputs:
                return None
            return float(solution.voltage(node_index).real)

        level_a = resolve_input_level(input_voltage('A', stamp.node1_index),
                                      stamp.logic_input_a, context.logic_options)
        level_b = resolve_input_level(input_voltage('B', stamp.node2_index),
                                      stamp.logic_input_b, context.logic_options)
        return evaluate_gate(stamp.type, level_a, level_b)

    def _stamp_inputs(self, system, stamp):
        for node in (stamp.node1_index, stamp.node2_index):
            system.add_resistor(node, -1, LOGIC_INPUT_RESISTANCE, stamp.label)

    def _stamp_output(self, system, stamp, voltage):
        if stamp.output_node_index is None or stamp.output_node_index < 0:
            system.pin_branch(stamp.current_var_index)
            return
        system.add_voltage_source(stamp.output_node_index, -1, stamp.current_var_index, voltage)

    def output_voltage(self, stamp, context) -> float:
        return logic_to_voltage(context.gate_levels[stamp.component_id], context.logic_options)

    def stamp_dc(self, system, stamp, context):
        self._stamp_inputs(system, stamp)
        self._stamp_output(system, stamp, self.output_voltage(stamp, context))

    def stamp_ac(self, system, stamp, context):
        self._stamp_inputs(system, stamp)
        self._stamp_output(system, stamp, 0.0)

    def current(self, stamp, solution, context):
        return solution.branch_current(stamp.current_var_index)

    def update_state(self, stamp, solution, context) -> bool:
        if context.mode == AnalysisMode.AC:
            return False
        previous = context.gate_levels.get(stamp.component_id)
        level = self.evaluate(stamp, solution, context)
        context.gate_levels[stamp.component_id] = level
        return level != previous
