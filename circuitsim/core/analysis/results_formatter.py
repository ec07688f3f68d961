"""
Results Formatter - SI formatting and text reports for simulation results.

The label helpers produce the short overlay strings shown next to nodes
and components; ResultsFormatter builds the multi-line descriptions used
by the simulator facade.
"""

import math
from typing import List, Optional, Sequence, Tuple

from ...config import LABEL_SIGNIFICANT_DIGITS, LABEL_ZERO_THRESHOLD
from ..circuit_graph import GROUND_NODE_ID
from .digital_logic import DigitalLogicSimulator

SI_PREFIXES = [
    (1e9, 'G'),
    (1e6, 'M'),
    (1e3, 'k'),
    (1.0, ''),
    (1e-3, 'm'),
    (1e-6, 'μ'),
    (1e-9, 'n'),
]
VOLTAGE_LABEL_PREFIXES = [(1e3, 'k'), (1.0, ''), (1e-3, 'm')]
CURRENT_LABEL_PREFIXES = [(1.0, ''), (1e-3, 'm'), (1e-6, 'μ')]


def _clamp_tiny(value: float) -> float:
    return 0.0 if abs(value) < LABEL_ZERO_THRESHOLD else value


def format_significant(value: float, significant_digits: int = LABEL_SIGNIFICANT_DIGITS) -> str:
    value = _clamp_tiny(value)
    if value == 0:
        return "0"
    integer_digits = math.floor(math.log10(abs(value))) + 1
    decimals = max(0, significant_digits - integer_digits)
    text = f"{value:.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def format_si(value: float, unit: str, significant_digits: int = LABEL_SIGNIFICANT_DIGITS,
              prefixes: Optional[Sequence[Tuple[float, str]]] = None) -> str:
    """Scale value by the largest prefix it reaches; below the table it uses the smallest."""
    value = _clamp_tiny(value)
    if value == 0:
        return f"0 {unit}"
    table = prefixes or SI_PREFIXES
    factor, prefix = table[-1]
    for entry_factor, entry_prefix in table:
        if abs(value) >= entry_factor:
            factor, prefix = entry_factor, entry_prefix
            break
    return f"{format_significant(value / factor, significant_digits)} {prefix}{unit}"


def format_voltage_label(volts: float) -> str:
    return format_si(volts, 'V', prefixes=VOLTAGE_LABEL_PREFIXES)


def format_current_label(amps: float) -> str:
    return format_si(amps, 'A', prefixes=CURRENT_LABEL_PREFIXES)


class ResultsFormatter:
    """
    Handles formatting and presentation of simulation results.
    """

    def __init__(self, components=None):
        self.component_map = {c.id: c for c in (components or [])}

    def _component_name(self, component_id: str) -> str:
        component = self.component_map.get(component_id)
        return component.display_name if component else component_id

    def get_dc_description(self, result, power: dict = None) -> str:
        """Generate description of DC results."""
        if not result.success:
            return f"DC Simulation Failed: {result.error}\n"

        description = "DC Simulation Results:\n"
        description += self._format_node_voltages(result.node_voltages)
        description += self._format_component_currents(result.branch_currents)
        if power:
            description += self._format_power(power)
        if not result.converged:
            description += "Note: switching elements did not converge; showing last iterate.\n"
        description += self._format_violations(result.rule_violations)
        return description

    def get_transient_description(self, result) -> str:
        if not result.success:
            return f"Transient Simulation Failed: {result.error}\n"
        if not result.time_points:
            return "No simulation results available."

        description = "Transient Simulation Results:\n"
        description += (f"  {len(result.time_points)} time points, "
                        f"t = {result.time_points[0]:.6g} s to {result.time_points[-1]:.6g} s, "
                        f"dt = {result.options.time_step:.6g} s\n\n")
        final_voltages = {node_id: history[-1] for node_id, history in result.node_voltage_history.items()
                          if history}
        description += "Final " + self._format_node_voltages(final_voltages)
        return description

    def get_ac_description(self, result) -> str:
        if not result.success:
            return f"AC Sweep Failed: {result.error}\n"

        description = "AC Sweep Results:\n"
        if result.frequencies:
            description += (f"  {len(result.frequencies)} points from "
                            f"{format_si(result.frequencies[0], 'Hz')} to "
                            f"{format_si(result.frequencies[-1], 'Hz')}\n\n")
        description += self._format_resonances(result.resonances)
        return description

    def get_digital_description(self, result) -> str:
        description = "Digital Simulation Results:\n"
        for state in result.gate_states.values():
            description += (f"  {self._component_name(state.component_id)}: "
                            f"{DigitalLogicSimulator.format_logic_level(state.output)}\n")
        return description

    def _format_node_voltages(self, node_voltages: dict) -> str:
        """Format node voltage results."""
        description = "Node Voltages:\n"
        if not node_voltages:
            return description + "  No node voltage data.\n"

        for node_id in sorted(node_voltages):
            voltage = node_voltages[node_id]
            if self._is_invalid_value(voltage):
                continue
            ground_status = " (Ground)" if node_id == GROUND_NODE_ID else ""
            description += f"  Node {node_id}{ground_status}: {format_voltage_label(voltage)}\n"
        return description + "\n"

    def _format_component_currents(self, branch_currents: dict) -> str:
        """Format component current results; the arrow shows direction from port 1 to port 2."""
        description = "Component Currents:\n"
        if not branch_currents:
            return description + "  No component current data.\n"

        for component_id, current in branch_currents.items():
            if self._is_invalid_value(current):
                continue
            arrow = "→" if current >= 0 else "←"
            description += f"  {self._component_name(component_id)}: {format_current_label(abs(current))} {arrow}\n"
        return description + "\n"

    def _format_power(self, power: dict) -> str:
        description = "Power:\n"
        for component_id, watts in power.items():
            description += f"  {self._component_name(component_id)}: {format_si(watts, 'W')}\n"
        return description + "\n"

    def _format_resonances(self, resonances: List) -> str:
        if not resonances:
            return "Resonances: none detected\n"
        description = "Resonances:\n"
        for resonance in resonances:
            name = self._component_name(resonance.component_id) if resonance.component_id else ""
            description += (f"  {resonance.type} at {format_si(resonance.frequency, 'Hz')} "
                            f"(Q ≈ {resonance.q_factor:.3g}) {name}\n")
        return description

    def _format_violations(self, violations: List) -> str:
        if not violations:
            return ""
        description = "Design Rule Findings:\n"
        for violation in violations:
            description += f"  [{violation.severity.value}] {violation.rule_id}: {violation.message}\n"
        return description

    def _is_invalid_value(self, value) -> bool:
        """Check if value is invalid (None, NaN, or infinite)."""
        if value is None:
            return True
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return True
        return False
