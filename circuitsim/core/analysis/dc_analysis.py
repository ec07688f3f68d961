"""
DC Analysis Engine.

Steady-state operating point by Modified Nodal Analysis. Capacitors are
opens, inductors are shorts, AC sources are 0 V and diodes/LEDs iterate
through their piecewise-linear regimes until no state changes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...config import SimulationSettings
from ..mna import AnalysisMode, ConvergenceError, SingularMatrixError
from ..rule_engine import CircuitRuleViolation, evaluate_led001_rule
from ..stamping import extract_branch_currents, extract_node_voltages, initial_context, solve_operating_point
from ..validation import ERROR_SINGULAR
from .preflight import run_preflight

logger = logging.getLogger(__name__)


@dataclass
class DCSimulationResult:
    """Container for DC analysis results"""
    success: bool = False
    node_voltages: Dict[str, float] = field(default_factory=dict)
    branch_currents: Dict[str, float] = field(default_factory=dict)
    error: Optional[str] = None
    rule_violations: List[CircuitRuleViolation] = field(default_factory=list)
    iterations: int = 0
    converged: bool = True
    solve_time: float = 0.0

    def to_dict(self) -> Dict:
        data = {
            "success": self.success,
            "nodeVoltages": dict(self.node_voltages),
            "branchCurrents": dict(self.branch_currents),
            "ruleViolations": [v.to_dict() for v in self.rule_violations],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def run_dc_analysis(components, wires, settings: SimulationSettings = None) -> DCSimulationResult:
    """
    Solve the DC operating point.
    Failures are reported through success/error, never raised.
    """
    settings = settings or SimulationSettings()
    start = time.perf_counter()

    preflight = run_preflight(components, wires, settings)
    if not preflight.ok:
        return DCSimulationResult(success=False, error=preflight.error,
                                  rule_violations=preflight.violations)

    graph = preflight.graph
    logger.debug(f"DC system: {graph.node_count} nodes, {graph.branch_count} branches")
    try:
        op = solve_operating_point(graph, initial_context(graph, AnalysisMode.DC), settings)
    except SingularMatrixError:
        return DCSimulationResult(success=False, error=ERROR_SINGULAR, rule_violations=preflight.violations)
    except ConvergenceError as e:
        return DCSimulationResult(success=False, error=str(e), rule_violations=preflight.violations)

    result = DCSimulationResult(
        success=True,
        node_voltages=extract_node_voltages(graph, op.solution),
        branch_currents=extract_branch_currents(graph, op.solution, op.context),
        iterations=op.iterations,
        converged=op.converged,
    )
    result.rule_violations = list(preflight.violations)
    if settings.check_rules:
        result.rule_violations += evaluate_led001_rule(preflight.components, result, settings.teaching_mode)
    result.solve_time = time.perf_counter() - start
    return result
