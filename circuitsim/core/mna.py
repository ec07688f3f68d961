"""
Modified Nodal Analysis system.

The unknown vector holds node voltages followed by branch currents.
Component models write their contributions into an MNASystem through the
stamp helpers below; the solved vector is wrapped in an MNASolution.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Hashable, Optional

import numpy as np

from ..config import SimulationSettings
from .linalg import lu_decompose, lu_solve, solve_linear_system
from .logic import DigitalLogicOptions, LogicLevel

logger = logging.getLogger(__name__)


class ConvergenceError(Exception):
    """Raised when the switching-element iteration fails to settle"""
    pass


class SingularMatrixError(Exception):
    """Raised when circuit matrix is singular"""
    pass


class AnalysisMode(Enum):
    DC = "dc"
    TRANSIENT = "transient"
    AC = "ac"


@dataclass
class StampContext:
    """
    Everything a component model needs besides its own stamp: the analysis
    mode, the time or frequency point and the state carried between solves.
    """
    mode: AnalysisMode = AnalysisMode.DC
    time: float = 0.0
    dt: Optional[float] = None
    omega: float = 0.0
    diode_states: Dict[str, bool] = field(default_factory=dict)
    gate_levels: Dict[str, LogicLevel] = field(default_factory=dict)
    capacitor_voltages: Dict[str, float] = field(default_factory=dict)
    inductor_currents: Dict[str, float] = field(default_factory=dict)
    logic_options: DigitalLogicOptions = field(default_factory=DigitalLogicOptions)

    def copy(self, **changes) -> 'StampContext':
        values = dict(
            mode=self.mode,
            time=self.time,
            dt=self.dt,
            omega=self.omega,
            diode_states=dict(self.diode_states),
            gate_levels=dict(self.gate_levels),
            capacitor_voltages=dict(self.capacitor_voltages),
            inductor_currents=dict(self.inductor_currents),
            logic_options=self.logic_options,
        )
        values.update(changes)
        return StampContext(**values)

    def matrix_key(self) -> Hashable:
        """Key identifying the conductance matrix; only dt and diode states change it."""
        return self.dt, tuple(sorted(self.diode_states.items()))


class MNASystem:
    """Conductance matrix G and excitation vector I for one solve"""

    def __init__(self, node_count: int, branch_count: int, dtype=float):
        self.node_count = node_count
        self.branch_count = branch_count
        self.size = node_count + branch_count
        self.G = np.zeros((self.size, self.size), dtype=dtype)
        self.I = np.zeros(self.size, dtype=dtype)

    def branch_row(self, current_var_index: int) -> int:
        return self.node_count + current_var_index

    def add_conductance(self, n1: int, n2: int, conductance):
        if n1 >= 0:
            self.G[n1, n1] += conductance
        if n2 >= 0:
            self.G[n2, n2] += conductance
        if n1 >= 0 and n2 >= 0:
            self.G[n1, n2] -= conductance
            self.G[n2, n1] -= conductance

    def add_resistor(self, n1: int, n2: int, resistance: float, name: str = ""):
        if resistance <= 0:
            logger.warning(f"Skipping non-positive resistance {resistance} on {name or 'component'}")
            return
        self.add_conductance(n1, n2, 1.0 / resistance)

    def add_voltage_source(self, n1: int, n2: int, current_var_index: int, voltage,
                           series_resistance=0.0):
        """Enforce V(n1) - V(n2) - R*i = voltage using the branch unknown i."""
        k = self.branch_row(current_var_index)
        if n1 >= 0:
            self.G[k, n1] += 1
            self.G[n1, k] += 1
        if n2 >= 0:
            self.G[k, n2] -= 1
            self.G[n2, k] -= 1
        if series_resistance:
            self.G[k, k] -= series_resistance
        self.I[k] += voltage

    def pin_branch(self, current_var_index: int):
        """Force an unused branch current to zero."""
        k = self.branch_row(current_var_index)
        self.G[k, k] = 1
        self.I[k] = 0

    def inject_current(self, node: int, current):
        if node >= 0:
            self.I[node] += current

    def solve(self, settings: SimulationSettings, cache: Optional[Dict] = None,
              key: Hashable = None) -> 'MNASolution':
        if cache is not None and settings.solver == "lu":
            factors = cache.get(key)
            if factors is None:
                factors = lu_decompose(self.G, settings.pivot_tolerance)
                if factors is None:
                    raise SingularMatrixError("Circuit matrix is singular")
                cache[key] = factors
                logger.debug(f"Cached LU factorisation for {key}")
            return MNASolution(lu_solve(factors, self.I), self.node_count)

        x = solve_linear_system(self.G, self.I, settings.solver, settings.pivot_tolerance)
        if x is None:
            raise SingularMatrixError("Circuit matrix is singular")
        return MNASolution(x, self.node_count)


class MNASolution:
    """Solved unknown vector with ground-aware accessors"""

    def __init__(self, x: np.ndarray, node_count: int):
        self.x = x
        self.node_count = node_count

    def voltage(self, node_index: int):
        if node_index < 0:
            return 0.0
        return self.x[node_index]

    def voltage_across(self, n1: int, n2: int):
        return self.voltage(n1) - self.voltage(n2)

    def branch_current(self, current_var_index: int):
        return self.x[self.node_count + current_var_index]
