"""Ground reference. Grounds collapse into node 0 and never produce a stamp."""

from .base import LinearComponentModel


class GroundModel(LinearComponentModel):

    def stamp_dc(self, system, stamp, context):
        pass

    def stamp_ac(self, system, stamp, context):
        pass

    def current(self, stamp, solution, context):
        return 0.0
