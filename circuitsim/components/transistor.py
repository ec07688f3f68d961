"""
Placeholder for devices the engine does not model (transistors, op-amps).
They are stamped as an open circuit between their first two terminals so
the matrix stays well formed.
"""

import logging

from ..config import OPEN_CIRCUIT_RESISTANCE
from .base import ResistiveModel

logger = logging.getLogger(__name__)


class OpenCircuitModel(ResistiveModel):

    def initial_state(self, stamp, context):
        logger.warning(f"{stamp.label}: {stamp.type.value} is not modelled, treating it as an open circuit")

    def resistance(self, stamp):
        return OPEN_CIRCUIT_RESISTANCE
