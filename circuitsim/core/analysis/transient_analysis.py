"""
Transient Analysis Engine.

Time-stepped simulation with Backward Euler companion models for
capacitors and inductors. Each step reuses the DC switching-element
iteration before it is accepted; capacitor voltages and inductor currents
are the only memory threaded from one step to the next.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ...config import (AC_SOURCE_DEFAULTS, DC_TIME_STEP, DEFAULT_TRANSIENT_PERIODS, STEPS_PER_PERIOD,
                       SimulationSettings)
from ..circuit import Component, ComponentType
from ..circuit_graph import CircuitGraph
from ..mna import AnalysisMode, ConvergenceError, SingularMatrixError, StampContext
from ..rule_engine import CircuitRuleViolation
from ..stamping import (commit_dynamic_state, extract_branch_currents, extract_node_voltages,
                        initial_context, solve_operating_point)
from ..validation import ERROR_SINGULAR
from ..waveforms import generate_waveform
from .preflight import run_preflight

logger = logging.getLogger(__name__)

__all__ = [
    'TransientOptions', 'TransientState', 'TransientPoint', 'TransientSimulationResult',
    'generate_waveform', 'find_max_frequency', 'select_time_step', 'initial_transient_state',
    'transient_step', 'run_transient_analysis',
]


@dataclass
class TransientOptions:
    start_time: float = 0.0
    end_time: Optional[float] = None
    time_step: Optional[float] = None
    max_iterations: Optional[int] = None

    def to_dict(self) -> Dict:
        return {"startTime": self.start_time, "endTime": self.end_time,
                "timeStep": self.time_step, "maxIterations": self.max_iterations}


@dataclass
class TransientState:
    """Simulation time plus the per-component memory carried between steps"""
    time: float
    dt: float
    context: StampContext


@dataclass
class TransientPoint:
    time: float
    node_voltages: Dict[str, float]
    branch_currents: Dict[str, float]

    def to_dict(self) -> Dict:
        return {"time": self.time, "nodeVoltages": dict(self.node_voltages),
                "branchCurrents": dict(self.branch_currents)}


@dataclass
class TransientSimulationResult:
    """Container for transient analysis results"""
    success: bool = False
    time_points: List[float] = field(default_factory=list)
    node_voltage_history: Dict[str, List[float]] = field(default_factory=dict)
    branch_current_history: Dict[str, List[float]] = field(default_factory=dict)
    error: Optional[str] = None
    options: Optional[TransientOptions] = None
    rule_violations: List[CircuitRuleViolation] = field(default_factory=list)

    def to_dict(self) -> Dict:
        data = {
            "success": self.success,
            "timePoints": list(self.time_points),
            "nodeVoltageHistory": {k: list(v) for k, v in self.node_voltage_history.items()},
            "branchCurrentHistory": {k: list(v) for k, v in self.branch_current_history.items()},
            "options": self.options.to_dict() if self.options else None,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def find_max_frequency(components: List[Component]) -> float:
    """Highest AC source frequency, never below the 60 Hz default."""
    max_frequency = AC_SOURCE_DEFAULTS['frequency']
    for component in components:
        if component.type == ComponentType.AC_SOURCE:
            frequency = component.frequency if component.frequency is not None else AC_SOURCE_DEFAULTS['frequency']
            max_frequency = max(max_frequency, frequency)
    return max_frequency


def select_time_step(components: List[Component], override: Optional[float] = None) -> float:
    """
    Explicit override first; with AC sources a hundredth of the shortest
    period; otherwise the fixed display cadence.
    """
    if override:
        return override
    if any(c.type == ComponentType.AC_SOURCE for c in components):
        return (1.0 / find_max_frequency(components)) / STEPS_PER_PERIOD
    return DC_TIME_STEP


def initial_transient_state(graph: CircuitGraph, dt: float, start_time: float = 0.0) -> TransientState:
    """Discharged capacitors, zero inductor current, every diode OFF."""
    context = initial_context(graph, AnalysisMode.TRANSIENT, time=start_time, dt=dt)
    return TransientState(time=start_time, dt=dt, context=context)


def transient_step(graph: CircuitGraph, state: TransientState, settings: SimulationSettings = None,
                   cache: Optional[Dict] = None) -> Tuple[TransientState, TransientPoint]:
    """
    Solve one time point and return the advanced state with its results.
    Raises SingularMatrixError, or ConvergenceError under strict convergence.
    """
    context = state.context.copy(mode=AnalysisMode.TRANSIENT, time=state.time, dt=state.dt)
    op = solve_operating_point(graph, context, settings, cache)

    point = TransientPoint(
        time=state.time,
        node_voltages=extract_node_voltages(graph, op.solution),
        branch_currents=extract_branch_currents(graph, op.solution, op.context),
    )
    committed = commit_dynamic_state(graph, op.solution, op.context)
    return TransientState(time=state.time + state.dt, dt=state.dt, context=committed), point


def _time_points(start: float, end: float, dt: float) -> List[float]:
    steps = int((end - start) / dt + 1e-9)
    return [start + i * dt for i in range(steps + 1)]


def run_transient_analysis(components, wires, options: TransientOptions = None,
                           settings: SimulationSettings = None) -> TransientSimulationResult:
    """
    Simulate from start_time to end_time in one call. A singular step ends
    the run and the partial history is returned with the error.
    """
    settings = settings or SimulationSettings()
    options = options or TransientOptions()

    preflight = run_preflight(components, wires, settings)
    if not preflight.ok:
        return TransientSimulationResult(success=False, error=preflight.error, options=options,
                                         rule_violations=preflight.violations)

    dt = select_time_step(preflight.components, options.time_step)
    max_frequency = find_max_frequency(preflight.components)
    options = TransientOptions(
        start_time=options.start_time,
        end_time=(options.end_time if options.end_time is not None
                  else options.start_time + DEFAULT_TRANSIENT_PERIODS / max_frequency),
        time_step=dt,
        max_iterations=options.max_iterations or settings.max_iterations,
    )
    settings = dataclasses.replace(settings, max_iterations=options.max_iterations)

    graph = preflight.graph
    result = TransientSimulationResult(
        options=options,
        rule_violations=preflight.violations,
        node_voltage_history={node_id: [] for node_id in graph.nodes},
        branch_current_history={stamp.component_id: [] for stamp in graph.stamps},
    )
    cache = {} if settings.solver == "lu" else None
    state = initial_transient_state(graph, dt, options.start_time)
    logger.debug(f"Transient run: {options.start_time}..{options.end_time}s, dt={dt}")

    for t in _time_points(options.start_time, options.end_time, dt):
        state = dataclasses.replace(state, time=t)
        try:
            state, point = transient_step(graph, state, settings, cache)
        except (SingularMatrixError, ConvergenceError) as e:
            reason = ERROR_SINGULAR if isinstance(e, SingularMatrixError) else str(e)
            result.error = f"Solve failed at t={t:.6f}s: {reason}"
            logger.warning(result.error)
            return result

        result.time_points.append(t)
        for node_id, voltage in point.node_voltages.items():
            result.node_voltage_history[node_id].append(voltage)
        for component_id, current in point.branch_currents.items():
            result.branch_current_history[component_id].append(current)

    result.success = True
    return result
