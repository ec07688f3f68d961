"""
Circuit design-rule engine.

Static checks over the node/edge graph of a schematic; no matrix is ever
solved here. ERROR violations block simulation, WARNING and INFO are
advisory. LED-001 is the one post-simulation rule and inspects a DC result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

import networkx as nx

from ..config import DEFAULT_R_MIN_OHMS, I_EMIT_MIN, ZERO_OHM_THRESHOLD_OHMS, DEFAULT_COMPONENT_VALUES
from .circuit import (Component, ComponentType, DIODE_TYPES, SOURCE_TYPES, TRANSISTOR_TYPES, Wire,
                      coerce_circuit)
from .circuit_graph import GROUND_NODE_ID, CircuitGraph

NONLINEAR_DEVICE_TYPES = DIODE_TYPES + TRANSISTOR_TYPES

SERIES_RESISTOR_RECOMMENDATION = "Insert an explicit series resistor (e.g., >= 1Ω) or fix wiring."
FLOATING_NODE_RECOMMENDATION = ("Connect the node into a closed loop or reference network, "
                                "or remove dangling wiring.")


class RuleSeverity(Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


@dataclass(frozen=True)
class CircuitRuleViolation:
    rule_id: str
    severity: RuleSeverity
    component_ids: Tuple[str, ...]
    message: str
    recommendation: Optional[str] = None

    @property
    def is_blocking(self) -> bool:
        return self.severity == RuleSeverity.ERROR

    def to_dict(self) -> Dict:
        data = {
            "ruleId": self.rule_id,
            "severity": self.severity.value,
            "componentIds": list(self.component_ids),
            "message": self.message,
        }
        if self.recommendation is not None:
            data["recommendation"] = self.recommendation
        return data


@dataclass
class CircuitRuleEngineOptions:
    r_min_ohms: float = DEFAULT_R_MIN_OHMS


@dataclass
class ComponentEdge:
    component_id: str
    type: ComponentType
    n1: str
    n2: str
    effective_resistance: Optional[float] = None


def get_effective_resistance(component: Component) -> Optional[float]:
    """Static resistance used for rule checking, None for non-resistive parts."""
    if component.type == ComponentType.RESISTOR:
        return component.value if component.value is not None else DEFAULT_COMPONENT_VALUES['resistor']
    if component.type == ComponentType.SWITCH:
        return 0.01
    if component.type == ComponentType.AMMETER:
        return 0.001
    if component.type == ComponentType.VOLTMETER:
        return 1e12
    return None


def is_zero_ohm_edge(edge: ComponentEdge) -> bool:
    """Switches and ammeters always count as 0 Ω; inductors never do."""
    if edge.type == ComponentType.INDUCTOR:
        return False
    if edge.type in (ComponentType.SWITCH, ComponentType.AMMETER):
        return True
    return edge.effective_resistance is not None and edge.effective_resistance <= ZERO_OHM_THRESHOLD_OHMS


class CircuitRuleEngine:
    """Evaluates the CDRS v1 rule set over one schematic"""

    def __init__(self, components: List[Component], wires: List[Wire],
                 options: CircuitRuleEngineOptions = None):
        self.components = components
        self.wires = wires
        self.options = options or CircuitRuleEngineOptions()
        self.graph = CircuitGraph(components, wires)
        self.violations: List[CircuitRuleViolation] = []

        self.edges = self._build_component_edges()
        self.component_graph = self._build_multigraph(self.edges)
        self.zero_ohm_group = self._compute_zero_ohm_groups()
        self.sources = [c for c in components if c.type in SOURCE_TYPES and len(c.ports) >= 2]

    def _add(self, rule_id: str, severity: RuleSeverity, component_ids, message: str,
             recommendation: Optional[str] = None):
        self.violations.append(CircuitRuleViolation(rule_id, severity, tuple(component_ids),
                                                    message, recommendation))

    def _terminal_nodes(self, component: Component) -> Tuple[Optional[str], Optional[str]]:
        return (self.graph.port_node_id(component.id, component.ports[0].id),
                self.graph.port_node_id(component.id, component.ports[1].id))

    def _build_component_edges(self) -> List[ComponentEdge]:
        edges = []
        for component in self.components:
            if len(component.ports) < 2:
                continue
            n1, n2 = self._terminal_nodes(component)
            if n1 is None or n2 is None:
                continue
            edges.append(ComponentEdge(component.id, component.type, n1, n2,
                                       get_effective_resistance(component)))
        return edges

    def _build_multigraph(self, edges: List[ComponentEdge]) -> nx.MultiGraph:
        graph = nx.MultiGraph()
        graph.add_nodes_from(self.graph.nodes)
        for edge in edges:
            graph.add_edge(edge.n1, edge.n2, key=edge.component_id)
        return graph

    def _compute_zero_ohm_groups(self) -> Dict[str, int]:
        zero_ohm = nx.Graph()
        zero_ohm.add_nodes_from(self.graph.nodes)
        zero_ohm.add_edges_from((e.n1, e.n2) for e in self.edges if is_zero_ohm_edge(e))
        groups = {}
        for index, members in enumerate(nx.connected_components(zero_ohm)):
            for node_id in members:
                groups[node_id] = index
        return groups

    def _reachable(self, graph: nx.MultiGraph, start: str, skip_component_id: str = None) -> Set[str]:
        if skip_component_id is not None:
            skipped = [(u, v, k) for u, v, k in graph.edges(keys=True) if k == skip_component_id]
            graph = nx.restricted_view(graph, [], skipped)
        return nx.node_connected_component(graph, start)

    def evaluate(self) -> List[CircuitRuleViolation]:
        self.violations = []
        self.check_ground_reference()
        self.check_shorted_sources()
        self.check_source_return_path()
        self.check_reactive_loops()
        self.check_led_current_limiting()
        self.check_nonlinear_direct_connection()
        self.check_floating_nodes()
        return self.violations

    def check_ground_reference(self):
        """PWR-001"""
        if not any(c.type == ComponentType.GROUND for c in self.components):
            self._add("PWR-001", RuleSeverity.ERROR, [],
                      "Circuit has no ground reference node (nodeId = 0).",
                      "Add a Ground component and connect it to the circuit.")

    def check_shorted_sources(self):
        """PWR-002"""
        zero_ohm_edges = [e for e in self.edges if is_zero_ohm_edge(e)]
        zero_ohm_graph = self._build_multigraph(zero_ohm_edges)
        for source in self.sources:
            pos, neg = self._terminal_nodes(source)
            if pos is None or neg is None:
                continue
            if pos == neg:
                self._add("PWR-002", RuleSeverity.ERROR, [source.id],
                          "Ideal voltage source is shorted by a wire path between + and - terminals.",
                          SERIES_RESISTOR_RECOMMENDATION)
            elif neg in self._reachable(zero_ohm_graph, pos):
                self._add("PWR-002", RuleSeverity.ERROR, [source.id],
                          "Ideal voltage source is shorted by an equivalent 0Ω path between + and - terminals.",
                          SERIES_RESISTOR_RECOMMENDATION)

    def check_source_return_path(self):
        """TOP-002"""
        for source in self.sources:
            pos, neg = self._terminal_nodes(source)
            if pos is None or neg is None:
                continue
            if neg not in self._reachable(self.component_graph, pos, skip_component_id=source.id):
                self._add("TOP-002", RuleSeverity.ERROR, [source.id],
                          "Source has no closed loop (no return path from + to - terminals).",
                          "Check for broken wires, floating terminals, or missing return path.")

    def check_reactive_loops(self):
        """REA-001 / REA-002"""
        for source in self.sources:
            pos, neg = self._terminal_nodes(source)
            if pos is None or neg is None:
                continue
            g_pos, g_neg = self.zero_ohm_group[pos], self.zero_ohm_group[neg]

            for edge in self.edges:
                if edge.type not in (ComponentType.CAPACITOR, ComponentType.INDUCTOR):
                    continue
                g1, g2 = self.zero_ohm_group[edge.n1], self.zero_ohm_group[edge.n2]
                if (g1, g2) != (g_pos, g_neg) and (g1, g2) != (g_neg, g_pos):
                    continue
                if edge.type == ComponentType.CAPACITOR:
                    self._add("REA-001", RuleSeverity.WARNING, [source.id, edge.component_id],
                              "Capacitor forms a direct loop with an ideal voltage source "
                              "with no series impedance.",
                              "Add a series resistor/impedance to limit inrush current.")
                else:
                    self._add("REA-002", RuleSeverity.WARNING, [source.id, edge.component_id],
                              "Inductor forms a direct loop with an ideal voltage source "
                              "with no series impedance.",
                              "Add a series resistor/impedance to limit di/dt.")

    def check_led_current_limiting(self):
        """CUR-001"""
        r_min = self.options.r_min_ohms
        unlimited_edges = [e for e in self.edges
                           if e.effective_resistance is None or e.effective_resistance < r_min]
        unlimited = self._build_multigraph(unlimited_edges)
        leds = [c for c in self.components if c.type == ComponentType.LED and len(c.ports) >= 2]

        for source in self.sources:
            pos, neg = self._terminal_nodes(source)
            if pos is None or neg is None:
                continue
            for led in leds:
                a, b = self._terminal_nodes(led)
                if a is None or b is None:
                    continue
                reach_pos = self._reachable(unlimited, pos, skip_component_id=led.id)
                if a not in reach_pos and b not in reach_pos:
                    continue
                reach_neg = self._reachable(unlimited, neg, skip_component_id=led.id)
                on_unlimited_path = ((a in reach_pos and b in reach_neg) or
                                     (b in reach_pos and a in reach_neg))
                if on_unlimited_path:
                    self._add("CUR-001", RuleSeverity.ERROR, [led.id, source.id],
                              "LED has no computable current limiting element on all "
                              "source-to-LED paths.",
                              f"Add a series resistor with R >= {r_min:g}Ω between LED "
                              f"and the voltage source.")

    def check_nonlinear_direct_connection(self):
        """CUR-002"""
        for source in self.sources:
            pos, neg = self._terminal_nodes(source)
            if pos is None or neg is None:
                continue
            g_pos, g_neg = self.zero_ohm_group[pos], self.zero_ohm_group[neg]
            for component in self.components:
                if component.type not in NONLINEAR_DEVICE_TYPES or len(component.ports) < 2:
                    continue
                terminal_groups = set()
                for port in component.ports:
                    node_id = self.graph.port_node_id(component.id, port.id)
                    if node_id is not None:
                        terminal_groups.add(self.zero_ohm_group[node_id])
                if g_pos in terminal_groups and g_neg in terminal_groups:
                    self._add("CUR-002", RuleSeverity.WARNING, [component.id, source.id],
                              "Non-linear device is directly connected to an ideal voltage source "
                              "with no obvious current limiting element.",
                              f"Add a series resistor/impedance (e.g., R >= {self.options.r_min_ohms:g}Ω) "
                              f"in the device branch.")

    def nodes_in_closed_loops(self) -> Set[str]:
        """
        Nodes lying on at least one cycle of the component graph. Parallel
        components and self-loops form cycles on their own; any other edge
        that is a bridge of the simple graph is not part of a loop.
        """
        simple = nx.Graph()
        simple.add_nodes_from(self.graph.nodes)
        for edge in self.edges:
            if edge.n1 == edge.n2:
                continue
            if simple.has_edge(edge.n1, edge.n2):
                simple[edge.n1][edge.n2]['count'] += 1
            else:
                simple.add_edge(edge.n1, edge.n2, count=1)

        bridges = {frozenset(pair) for pair in nx.bridges(simple)
                   if simple[pair[0]][pair[1]]['count'] == 1}

        in_loop = set()
        for edge in self.edges:
            if edge.n1 == edge.n2:
                in_loop.add(edge.n1)
            elif frozenset((edge.n1, edge.n2)) not in bridges:
                in_loop.update((edge.n1, edge.n2))
        return in_loop

    def check_floating_nodes(self):
        """TOP-001"""
        in_loop = self.nodes_in_closed_loops()
        for node_id, node in self.graph.nodes.items():
            if node_id == GROUND_NODE_ID:
                continue
            component_ids = list(dict.fromkeys(component_id for component_id, _ in node.connected_ports))
            if len(component_ids) <= 1:
                self._add("TOP-001", RuleSeverity.WARNING, component_ids,
                          "Floating node detected (node connects to only one component).",
                          FLOATING_NODE_RECOMMENDATION)
            elif node_id not in in_loop:
                self._add("TOP-001", RuleSeverity.WARNING, component_ids,
                          "Floating node detected (node is not part of any closed loop).",
                          FLOATING_NODE_RECOMMENDATION)


def evaluate_circuit_design_rules(components, wires,
                                  options: CircuitRuleEngineOptions = None) -> List[CircuitRuleViolation]:
    """Run every static rule and return the violations found."""
    components, wires = coerce_circuit(components, wires)
    return CircuitRuleEngine(components, wires, options).evaluate()


def evaluate_led001_rule(components, result, teaching_mode: bool = False) -> List[CircuitRuleViolation]:
    """
    Post-simulation check: an LED carrying a small positive current is
    conducting but not visibly lit. INFO by default, WARNING in teaching mode.
    """
    if result is None or not result.success:
        return []
    components, _ = coerce_circuit(components, [])
    severity = RuleSeverity.WARNING if teaching_mode else RuleSeverity.INFO

    violations = []
    for component in components:
        if component.type != ComponentType.LED:
            continue
        current = result.branch_currents.get(component.id)
        if current is None or not 0 < current < I_EMIT_MIN:
            continue
        violations.append(CircuitRuleViolation(
            "LED-001", severity, (component.id,),
            f"LED is conducting ({current * 1e3:.3g} mA) but below visible emission threshold "
            f"({I_EMIT_MIN * 1e3:g} mA).",
            "Reduce the series resistance or raise the supply voltage to increase LED current.",
        ))
    return violations


def first_blocking_violation(violations: List[CircuitRuleViolation]) -> Optional[CircuitRuleViolation]:
    for violation in violations:
        if violation.is_blocking:
            return violation
    return None
