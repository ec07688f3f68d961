"""
Streaming transient solver for live animation.

Wraps the pure transient step with the one piece of state the caller
needs to own: the circuit graph and the TransientState advanced by each
step. Instances are single-owner and not thread safe.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ...config import SimulationSettings
from ..circuit_graph import CircuitGraph
from ..mna import ConvergenceError, SingularMatrixError
from .preflight import run_preflight
from .transient_analysis import (TransientOptions, TransientPoint, TransientState, find_max_frequency,
                                 initial_transient_state, select_time_step, transient_step)

logger = logging.getLogger(__name__)

StreamingPoint = TransientPoint


@dataclass
class InitializeResult:
    success: bool
    error: Optional[str] = None
    time_step: float = 0.0
    max_frequency: float = 0.0

    def to_dict(self) -> Dict:
        data = {"success": self.success, "timeStep": self.time_step, "maxFrequency": self.max_frequency}
        if self.error is not None:
            data["error"] = self.error
        return data


class StreamingTransientSolver:
    """Step-wise transient simulation"""

    def __init__(self, settings: SimulationSettings = None):
        self._base_settings = settings or SimulationSettings()
        self.settings = self._base_settings
        self.graph: Optional[CircuitGraph] = None
        self.state: Optional[TransientState] = None
        self.time_step = 0.0
        self.max_frequency = 0.0
        self.rule_violations = []
        self._cache = None

    def initialize(self, components, wires, options: TransientOptions = None) -> InitializeResult:
        """Validate the circuit and prepare the initial state at t = 0."""
        self.dispose()
        options = options or TransientOptions()

        preflight = run_preflight(components, wires, self._base_settings)
        self.rule_violations = preflight.violations
        if not preflight.ok:
            return InitializeResult(success=False, error=preflight.error)

        self.settings = dataclasses.replace(
            self._base_settings, max_iterations=options.max_iterations or self._base_settings.max_iterations)
        self.graph = preflight.graph
        self.time_step = select_time_step(preflight.components, options.time_step)
        self.max_frequency = find_max_frequency(preflight.components)
        self._cache = {} if self.settings.solver == "lu" else None
        self.state = initial_transient_state(self.graph, self.time_step)

        logger.debug(f"Streaming solver ready: dt={self.time_step}, f_max={self.max_frequency}")
        return InitializeResult(success=True, time_step=self.time_step, max_frequency=self.max_frequency)

    def step(self) -> Optional[StreamingPoint]:
        """Advance one time step; None when not initialized or the step fails."""
        if not self.is_initialized():
            return None
        try:
            self.state, point = transient_step(self.graph, self.state, self.settings, self._cache)
        except (SingularMatrixError, ConvergenceError) as e:
            logger.warning(f"Streaming step failed at t={self.state.time:.6f}s: {e}")
            return None
        return point

    def step_batch(self, count: int = 1) -> List[StreamingPoint]:
        """Advance up to count steps, stopping early at the first failure."""
        points = []
        for _ in range(count):
            point = self.step()
            if point is None:
                break
            points.append(point)
        return points

    def get_current_time(self) -> float:
        return self.state.time if self.state else 0.0

    def get_time_step(self) -> float:
        return self.time_step

    def is_initialized(self) -> bool:
        return self.graph is not None and self.state is not None

    def reset(self):
        """Rewind to t = 0 with discharged storage elements and all diodes OFF."""
        if self.graph is not None:
            self.state = initial_transient_state(self.graph, self.time_step)

    def dispose(self):
        self.settings = self._base_settings
        self.graph = None
        self.state = None
        self._cache = None
        self.time_step = 0.0
        self.max_frequency = 0.0
