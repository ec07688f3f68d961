"""Resistor model"""

from ..core.circuit_graph import ComponentStamp
from ..core.complex_math import impedance_resistor
from .base import ResistiveModel


class ResistorModel(ResistiveModel):
    """Ideal resistor; a non-positive value is skipped with a warning"""

    def resistance(self, stamp: ComponentStamp) -> float:
        return stamp.value

    def impedance(self, stamp, omega):
        return impedance_resistor(stamp.value)
