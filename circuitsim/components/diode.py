"""
Piecewise-linear diode and LED model.

OFF: leakage resistance with the branch current pinned to zero.
ON: forward voltage source in series with a small resistance.
The regime is re-evaluated after every solve until no diode changes state.
"""

from ..config import (DIODE_AC_RESISTANCE, DIODE_OFF_RESISTANCE, DIODE_ON_RESISTANCE,
                      DIODE_REVERSE_CURRENT_TOLERANCE)
from ..core.mna import AnalysisMode
from .base import ComponentModel


class DiodeModel(ComponentModel):

    def is_nonlinear(self) -> bool:
        return True

    def initial_state(self, stamp, context):
        context.diode_states[stamp.component_id] = False

    def stamp_dc(self, system, stamp, context):
        if context.diode_states.get(stamp.component_id, False):
            system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                      stamp.value, series_resistance=DIODE_ON_RESISTANCE)
        else:
            system.add_resistor(stamp.node1_index, stamp.node2_index, DIODE_OFF_RESISTANCE, stamp.label)
            system.pin_branch(stamp.current_var_index)

    def stamp_ac(self, system, stamp, context):
        # Fixed small-signal linearisation
        system.add_resistor(stamp.node1_index, stamp.node2_index, DIODE_AC_RESISTANCE, stamp.label)
        system.pin_branch(stamp.current_var_index)

    def current(self, stamp, solution, context):
        voltage = solution.voltage_across(stamp.node1_index, stamp.node2_index)
        if context.mode == AnalysisMode.AC:
            return voltage / DIODE_AC_RESISTANCE
        if context.diode_states.get(stamp.component_id, False):
            return solution.branch_current(stamp.current_var_index)
        return voltage / DIODE_OFF_RESISTANCE

    def update_state(self, stamp, solution, context) -> bool:
        if context.mode == AnalysisMode.AC:
            return False
        is_on = context.diode_states.get(stamp.component_id, False)
        if is_on:
            next_on = solution.branch_current(stamp.current_var_index) >= -DIODE_REVERSE_CURRENT_TOLERANCE
        else:
            next_on = solution.voltage_across(stamp.node1_index, stamp.node2_index) > stamp.value
        context.diode_states[stamp.component_id] = bool(next_on)
        return bool(next_on) != is_on
