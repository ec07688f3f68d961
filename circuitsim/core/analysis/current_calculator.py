"""
Current Calculator - Kirchhoff checks and power from solved DC results.
"""

from typing import Dict

from ..circuit import LOGIC_GATE_TYPES
from ..circuit_graph import CircuitGraph
from ...config import LOGIC_INPUT_RESISTANCE


class CurrentCalculator:
    """
    Works from node voltages and branch currents of a DC result. Branch
    currents flow from a component's first terminal to its second.
    """

    def __init__(self, graph: CircuitGraph, node_voltages: Dict[str, float], branch_currents: Dict[str, float]):
        self.graph = graph
        self.node_voltages = node_voltages
        self.branch_currents = branch_currents
        self._node_ids = {index: node_id for node_id, index in graph.node_index.items()}

    def _voltage(self, node_index: int) -> float:
        if node_index < 0:
            return 0.0
        return self.node_voltages.get(self._node_ids[node_index], 0.0)

    def _leave(self, residuals: Dict[str, float], node_index: int, current: float):
        if node_index >= 0:
            residuals[self._node_ids[node_index]] += current

    def kcl_residuals(self) -> Dict[str, float]:
        """Net current leaving each non-ground node; zero for a consistent solution."""
        residuals = {node_id: 0.0 for node_id in self.graph.node_index}
        for stamp in self.graph.stamps:
            current = self.branch_currents.get(stamp.component_id, 0.0)
            if stamp.type in LOGIC_GATE_TYPES:
                # Output drives its node against ground; inputs leak to ground
                self._leave(residuals, stamp.output_node_index, current)
                for node in (stamp.node1_index, stamp.node2_index):
                    self._leave(residuals, node, self._voltage(node) / LOGIC_INPUT_RESISTANCE)
                continue
            self._leave(residuals, stamp.node1_index, current)
            self._leave(residuals, stamp.node2_index, -current)
        return residuals

    def max_kcl_error(self) -> float:
        residuals = self.kcl_residuals()
        return max((abs(r) for r in residuals.values()), default=0.0)

    def power_dissipation(self) -> Dict[str, float]:
        """Power absorbed by each two-terminal component; negative for sources delivering power."""
        power = {}
        for stamp in self.graph.stamps:
            if stamp.type in LOGIC_GATE_TYPES:
                continue
            voltage = self._voltage(stamp.node1_index) - self._voltage(stamp.node2_index)
            power[stamp.component_id] = voltage * self.branch_currents.get(stamp.component_id, 0.0)
        return power
