"""
Checks shared by every analysis before a matrix is built: structural
validation, then the design rules, then the node count of the built graph.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...config import SimulationSettings
from ..circuit import coerce_circuit
from ..circuit_graph import CircuitGraph
from ..rule_engine import (CircuitRuleEngineOptions, CircuitRuleViolation,
                           evaluate_circuit_design_rules, first_blocking_violation)
from ..validation import ERROR_NO_NODES, validate_circuit


@dataclass
class Preflight:
    components: list
    wires: list
    graph: Optional[CircuitGraph] = None
    violations: List[CircuitRuleViolation] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_preflight(components, wires, settings: SimulationSettings) -> Preflight:
    components, wires = coerce_circuit(components, wires)
    preflight = Preflight(components, wires)

    preflight.error = validate_circuit(components, wires)
    if preflight.error:
        return preflight

    if settings.check_rules:
        options = CircuitRuleEngineOptions(r_min_ohms=settings.r_min_ohms)
        preflight.violations = evaluate_circuit_design_rules(components, wires, options)
        blocking = first_blocking_violation(preflight.violations)
        if blocking is not None:
            preflight.error = blocking.message
            return preflight

    graph = CircuitGraph(components, wires)
    if graph.node_count == 0:
        preflight.error = ERROR_NO_NODES
        return preflight
    preflight.graph = graph
    return preflight
