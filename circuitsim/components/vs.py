"""Independent DC and AC voltage sources."""

import cmath

from ..core.waveforms import generate_waveform
from .base import LinearComponentModel


class VoltageSourceModel(LinearComponentModel):
    """Ideal source between node1 (+) and node2 (-)"""

    def stamp_dc(self, system, stamp, context):
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                  self.dc_voltage(stamp))

    def stamp_transient(self, system, stamp, context):
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                  self.instantaneous_voltage(stamp, context.time))

    def stamp_ac(self, system, stamp, context):
        system.add_voltage_source(stamp.node1_index, stamp.node2_index, stamp.current_var_index,
                                  self.phasor(stamp))

    def current(self, stamp, solution, context):
        return solution.branch_current(stamp.current_var_index)

    def dc_voltage(self, stamp) -> float:
        return stamp.value

    def instantaneous_voltage(self, stamp, t: float) -> float:
        return stamp.value

    def phasor(self, stamp) -> complex:
        # A DC source is a short for small-signal analysis
        return complex(0, 0)


class ACVoltageSourceModel(VoltageSourceModel):
    """Periodic source: 0 V at DC, its waveform in transient, A*e^(j*phase) in AC"""

    def dc_voltage(self, stamp) -> float:
        return 0.0

    def instantaneous_voltage(self, stamp, t: float) -> float:
        return generate_waveform(t, stamp.value, stamp.frequency, stamp.phase or 0.0, stamp.waveform_type)

    def phasor(self, stamp) -> complex:
        return cmath.rect(stamp.value, stamp.phase or 0.0)
