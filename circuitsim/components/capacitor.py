"""
Capacitor model.

DC: open circuit, stamped as a very large resistance.
Transient: Backward Euler companion, conductance C/dt in parallel with a
current source carrying the previous step's voltage.
AC: admittance jwC.
"""

from ..config import CAPACITOR_DC_RESISTANCE
from ..core.complex_math import admittance_capacitor, impedance_capacitor
from ..core.mna import AnalysisMode
from .base import LinearComponentModel


class CapacitorModel(LinearComponentModel):

    def stamp_dc(self, system, stamp, context):
        system.add_resistor(stamp.node1_index, stamp.node2_index, CAPACITOR_DC_RESISTANCE, stamp.label)

    def stamp_transient(self, system, stamp, context):
        g_eq = stamp.value / context.dt
        v_prev = context.capacitor_voltages.get(stamp.component_id, 0.0)
        system.add_conductance(stamp.node1_index, stamp.node2_index, g_eq)
        system.inject_current(stamp.node1_index, g_eq * v_prev)
        system.inject_current(stamp.node2_index, -g_eq * v_prev)

    def stamp_ac(self, system, stamp, context):
        system.add_conductance(stamp.node1_index, stamp.node2_index,
                               admittance_capacitor(context.omega, stamp.value))

    def current(self, stamp, solution, context):
        voltage = solution.voltage_across(stamp.node1_index, stamp.node2_index)
        if context.mode == AnalysisMode.TRANSIENT:
            v_prev = context.capacitor_voltages.get(stamp.component_id, 0.0)
            return stamp.value * (voltage - v_prev) / context.dt
        if context.mode == AnalysisMode.AC:
            return admittance_capacitor(context.omega, stamp.value) * voltage
        return voltage / CAPACITOR_DC_RESISTANCE

    def commit_step(self, stamp, solution, context):
        context.capacitor_voltages[stamp.component_id] = float(
            solution.voltage_across(stamp.node1_index, stamp.node2_index))

    def impedance(self, stamp, omega):
        return impedance_capacitor(omega, stamp.value)
