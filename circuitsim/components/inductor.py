"""
Inductor model, always stamped through its branch-current unknown.

DC: short circuit as a 0 V source.
Transient: Backward Euler companion, V1 - V2 = (L/dt) * (i - i_prev).
AC: branch impedance jwL.
"""

from ..core.complex_math import impedance_inductor
from .base import LinearComponentModel


class InductorModel(LinearComponentModel):

    def stamp_dc(self, system, stamp, context):
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index, 0.0)

    def stamp_transient(self, system, stamp, context):
        r_eq = stamp.value / context.dt
        i_prev = context.inductor_currents.get(stamp.component_id, 0.0)
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                  -r_eq * i_prev, series_resistance=r_eq)

    def stamp_ac(self, system, stamp, context):
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                  0.0, series_resistance=impedance_inductor(context.omega, stamp.value))

    def current(self, stamp, solution, context):
        return solution.branch_current(stamp.current_var_index)

    def commit_step(self, stamp, solution, context):
        context.inductor_currents[stamp.component_id] = float(
            solution.branch_current(stamp.current_var_index))

    def impedance(self, stamp, omega):
        return impedance_inductor(omega, stamp.value)
