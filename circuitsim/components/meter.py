"""Measurement instruments modelled as near-ideal shorts and opens."""

from ..config import AMMETER_RESISTANCE, VOLTMETER_RESISTANCE
from .base import ResistiveModel


class AmmeterModel(ResistiveModel):
    """Series ammeter, a near-ideal short"""

    def resistance(self, stamp):
        return AMMETER_RESISTANCE


class VoltmeterModel(ResistiveModel):
    """Parallel voltmeter, a near-ideal open"""

    def resistance(self, stamp):
        return VOLTMETER_RESISTANCE
