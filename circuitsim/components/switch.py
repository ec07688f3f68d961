"""Switch model: a small resistance when closed and a near-open when open."""

from ..config import SWITCH_CLOSED_RESISTANCE, SWITCH_OPEN_RESISTANCE
from ..core.circuit_graph import ComponentStamp
from .base import ResistiveModel


class SwitchModel(ResistiveModel):

    def resistance(self, stamp: ComponentStamp) -> float:
        return SWITCH_CLOSED_RESISTANCE if stamp.switch_closed else SWITCH_OPEN_RESISTANCE
