"""
MNA assembly and the switching-element iteration shared by the DC,
transient and AC solvers.

These are plain functions over an explicit StampContext: each call takes
the current state and returns the solved state instead of mutating solver
objects.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..components import get_model
from ..config import SimulationSettings
from .circuit_graph import CircuitGraph
from .mna import (AnalysisMode, ConvergenceError, MNASolution, MNASystem, StampContext)

logger = logging.getLogger(__name__)


@dataclass
class OperatingPoint:
    """Result of one converged (or best-effort) solve"""
    solution: MNASolution
    context: StampContext
    iterations: int
    converged: bool


def initial_context(graph: CircuitGraph, mode: AnalysisMode = AnalysisMode.DC, **kwargs) -> StampContext:
    """Fresh state: diodes OFF, gates from their manual inputs, storage elements discharged."""
    context = StampContext(mode=mode, **kwargs)
    for stamp in graph.stamps:
        get_model(stamp.type).initial_state(stamp, context)
    return context


def assemble_system(graph: CircuitGraph, context: StampContext) -> MNASystem:
    dtype = complex if context.mode == AnalysisMode.AC else float
    system = MNASystem(graph.node_count, graph.branch_count, dtype=dtype)
    for stamp in graph.stamps:
        get_model(stamp.type).stamp(system, stamp, context)
    return system


def _solve(graph, context, settings, cache):
    system = assemble_system(graph, context)
    key = context.matrix_key() if cache is not None else None
    return system.solve(settings, cache=cache, key=key)


def _update_states(graph: CircuitGraph, solution: MNASolution, context: StampContext) -> bool:
    changed = False
    for stamp in graph.stamps:
        model = get_model(stamp.type)
        if model.is_nonlinear() and model.update_state(stamp, solution, context):
            changed = True
    return changed


def solve_operating_point(graph: CircuitGraph, context: StampContext,
                          settings: SimulationSettings = None,
                          cache: Optional[Dict] = None) -> OperatingPoint:
    """
    Stamp, solve and re-evaluate diode and gate states until none changes.

    When the iteration cap is reached the system is solved once more with
    the final states and that solution is returned with converged=False,
    unless strict convergence is requested.
    Raises SingularMatrixError (and ConvergenceError in strict mode).
    """
    settings = settings or SimulationSettings()
    context = context.copy()
    has_nonlinear = any(get_model(s.type).is_nonlinear() for s in graph.stamps)

    for iteration in range(1, settings.max_iterations + 1):
        solution = _solve(graph, context, settings, cache)
        if not has_nonlinear or not _update_states(graph, solution, context):
            logger.debug(f"Operating point settled after {iteration} iteration(s)")
            return OperatingPoint(solution, context, iteration, True)

    message = f"Switching elements did not converge after {settings.max_iterations} iterations"
    if settings.strict_convergence:
        raise ConvergenceError(message)
    logger.warning(f"{message}; using last state")
    solution = _solve(graph, context, settings, cache)
    return OperatingPoint(solution, context, settings.max_iterations, False)


def extract_node_voltages(graph: CircuitGraph, solution: MNASolution,
                          phasors: bool = False) -> Dict[str, float]:
    convert = complex if phasors else _real
    return {node_id: convert(v) for node_id, v in graph.node_voltages(solution.x).items()}


def extract_branch_currents(graph: CircuitGraph, solution: MNASolution,
                            context: StampContext) -> Dict[str, float]:
    convert = complex if context.mode == AnalysisMode.AC else _real
    return {
        stamp.component_id: convert(get_model(stamp.type).current(stamp, solution, context))
        for stamp in graph.stamps
    }


def commit_dynamic_state(graph: CircuitGraph, solution: MNASolution, context: StampContext) -> StampContext:
    """Return a context whose capacitor voltages and inductor currents follow the accepted step."""
    committed = context.copy()
    for stamp in graph.stamps:
        get_model(stamp.type).commit_step(stamp, solution, committed)
    return committed


def _real(value) -> float:
    return float(getattr(value, 'real', value))
