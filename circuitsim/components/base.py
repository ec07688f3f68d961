"""
Component model interface.

Each component type has one stateless model that knows how to stamp the
component into an MNA system for DC, transient and AC analysis, and how to
read its branch current back from a solution. Per-run state (diode
regimes, capacitor voltages, inductor currents) lives in the StampContext.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..core.circuit_graph import ComponentStamp
from ..core.mna import AnalysisMode, MNASolution, MNASystem, StampContext


class ComponentModel(ABC):
    """Abstract base class for component models"""

    def stamp(self, system: MNASystem, stamp: ComponentStamp, context: StampContext):
        if context.mode == AnalysisMode.AC:
            self.stamp_ac(system, stamp, context)
        elif context.mode == AnalysisMode.TRANSIENT:
            self.stamp_transient(system, stamp, context)
        else:
            self.stamp_dc(system, stamp, context)

    @abstractmethod
    def stamp_dc(self, system: MNASystem, stamp: ComponentStamp, context: StampContext):
        """Stamp the steady-state model"""
        pass

    def stamp_transient(self, system: MNASystem, stamp: ComponentStamp, context: StampContext):
        self.stamp_dc(system, stamp, context)

    @abstractmethod
    def stamp_ac(self, system: MNASystem, stamp: ComponentStamp, context: StampContext):
        """Stamp the small-signal phasor model"""
        pass

    @abstractmethod
    def current(self, stamp: ComponentStamp, solution: MNASolution, context: StampContext):
        """Current from node1 through the component to node2"""
        pass

    @abstractmethod
    def is_nonlinear(self) -> bool:
        """Return True if component switches regime between solves"""
        pass

    def initial_state(self, stamp: ComponentStamp, context: StampContext):
        """Seed per-run state for this component"""
        pass

    def update_state(self, stamp: ComponentStamp, solution: MNASolution, context: StampContext) -> bool:
        """Re-evaluate switching state after a solve; True when it changed"""
        return False

    def commit_step(self, stamp: ComponentStamp, solution: MNASolution, context: StampContext):
        """Store dynamic state after an accepted transient step"""
        pass

    def impedance(self, stamp: ComponentStamp, omega: float) -> Optional[complex]:
        """Impedance tracked by the AC sweep, None when not tracked"""
        return None


class LinearComponentModel(ComponentModel):
    """Base class for linear components"""

    def is_nonlinear(self) -> bool:
        return False


class ResistiveModel(LinearComponentModel):
    """Component that behaves as a fixed resistance in every analysis"""

    @abstractmethod
    def resistance(self, stamp: ComponentStamp) -> float:
        pass

    def stamp_dc(self, system, stamp, context):
        system.add_resistor(stamp.node1_index, stamp.node2_index, self.resistance(stamp), stamp.label)

    def stamp_ac(self, system, stamp, context):
        self.stamp_dc(system, stamp, context)

    def current(self, stamp, solution, context):
        resistance = self.resistance(stamp)
        if resistance <= 0:
            return 0.0
        return solution.voltage_across(stamp.node1_index, stamp.node2_index) / resistance
