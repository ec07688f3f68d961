"""
AC Sweep Analysis Engine.

Small-signal phasor analysis over a logarithmic or linear frequency sweep.
Produces node-voltage and branch-current phasors per frequency, impedance
curves for the reactive and resistive parts and for each AC source's input
impedance, and resonances detected from phase zero crossings.
"""

import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from ...config import (AC_NEGLIGIBLE_CURRENT, AC_SWEEP_END_FREQUENCY, AC_SWEEP_POINTS_PER_DECADE,
                       AC_SWEEP_START_FREQUENCY, OPEN_CIRCUIT_RESISTANCE, SimulationSettings)
from ...components import get_model
from ..circuit import ComponentType
from ..circuit_graph import CircuitGraph
from ..complex_math import magnitude, phase, phase_degrees
from ..mna import AnalysisMode, SingularMatrixError
from ..rule_engine import CircuitRuleViolation
from ..stamping import extract_branch_currents, extract_node_voltages, initial_context, solve_operating_point
from .preflight import run_preflight

logger = logging.getLogger(__name__)

TRACKED_IMPEDANCE_TYPES = (ComponentType.RESISTOR, ComponentType.CAPACITOR, ComponentType.INDUCTOR)


class SweepType(Enum):
    LOGARITHMIC = "logarithmic"
    LINEAR = "linear"


@dataclass
class ACSweepOptions:
    start_frequency: float = AC_SWEEP_START_FREQUENCY
    end_frequency: float = AC_SWEEP_END_FREQUENCY
    points_per_decade: int = AC_SWEEP_POINTS_PER_DECADE
    sweep_type: SweepType = SweepType.LOGARITHMIC

    def __post_init__(self):
        if not isinstance(self.sweep_type, SweepType):
            self.sweep_type = SweepType(self.sweep_type)

    def to_dict(self) -> Dict:
        return {"startFrequency": self.start_frequency, "endFrequency": self.end_frequency,
                "pointsPerDecade": self.points_per_decade, "sweepType": self.sweep_type.value}


@dataclass
class ACPhasor:
    magnitude: float
    phase: float
    phase_degrees: float
    complex_value: complex
    rms: float

    @classmethod
    def from_complex(cls, value: complex) -> 'ACPhasor':
        value = complex(value)
        mag = magnitude(value)
        return cls(magnitude=mag, phase=phase(value), phase_degrees=phase_degrees(value),
                   complex_value=value, rms=mag / math.sqrt(2))

    def to_dict(self) -> Dict:
        return {"magnitude": self.magnitude, "phase": self.phase, "phaseDegrees": self.phase_degrees,
                "complex": {"re": self.complex_value.real, "im": self.complex_value.imag},
                "rms": self.rms}


@dataclass
class ACFrequencyPoint:
    frequency: float
    omega: float
    node_voltages: Dict[str, ACPhasor] = field(default_factory=dict)
    branch_currents: Dict[str, ACPhasor] = field(default_factory=dict)
    component_impedances: Dict[str, ACPhasor] = field(default_factory=dict)


@dataclass
class ImpedanceData:
    component_id: str
    label: str
    frequencies: List[float] = field(default_factory=list)
    magnitude_ohms: List[float] = field(default_factory=list)
    phase_degrees: List[float] = field(default_factory=list)


@dataclass
class ResonanceInfo:
    frequency: float
    type: str  # series, parallel
    q_factor: float
    bandwidth: float
    lower_cutoff: float
    upper_cutoff: float
    component_id: Optional[str] = None


@dataclass
class ACSweepResult:
    """Container for AC sweep results"""
    success: bool = False
    frequency_points: List[ACFrequencyPoint] = field(default_factory=list)
    frequencies: List[float] = field(default_factory=list)
    impedance_data: List[ImpedanceData] = field(default_factory=list)
    resonances: List[ResonanceInfo] = field(default_factory=list)
    error: Optional[str] = None
    options: Optional[ACSweepOptions] = None
    rule_violations: List[CircuitRuleViolation] = field(default_factory=list)


def generate_frequency_points(options: ACSweepOptions = None) -> List[float]:
    """
    Logarithmic: points_per_decade points per decade from start to end.
    Linear: points_per_decade equal steps from start to end inclusive.
    """
    options = options or ACSweepOptions()
    start, end, ppd = options.start_frequency, options.end_frequency, options.points_per_decade
    if ppd < 1 or end < start:
        raise ValueError(f"Invalid sweep range {start}..{end} Hz with {ppd} points")

    if options.sweep_type == SweepType.LINEAR:
        if end == start:
            return [start]
        step = (end - start) / ppd
        return [start + i * step for i in range(ppd + 1)]

    if start <= 0:
        raise ValueError("Logarithmic sweep needs a positive start frequency")
    count = math.ceil(math.log10(end / start) * ppd)
    frequencies = []
    for i in range(count + 1):
        frequency = start * 10 ** (i / ppd)
        if frequency > end:
            if math.isclose(frequency, end, rel_tol=1e-9):
                frequencies.append(end)
            break
        frequencies.append(frequency)
    return frequencies


def source_input_impedance(voltage: complex, current: complex) -> complex:
    """Impedance seen by a source; current is the branch current from + to -."""
    if abs(current) < AC_NEGLIGIBLE_CURRENT:
        return complex(OPEN_CIRCUIT_RESISTANCE, 0)
    return voltage / -current


def detect_resonances(impedance_data: List[ImpedanceData]) -> List[ResonanceInfo]:
    """
    Phase zero crossings in each impedance curve: negative to non-negative
    is a series resonance, positive to non-positive a parallel one. Q and
    bandwidth are a coarse estimate from the sweep span.
    """
    resonances = []
    for data in impedance_data:
        freqs, phases = data.frequencies, data.phase_degrees
        if len(freqs) < 2:
            continue
        span = freqs[-1] - freqs[0]

        for i in range(1, len(phases)):
            prev, curr = phases[i - 1], phases[i]
            if not ((prev < 0 <= curr) or (prev > 0 >= curr)):
                continue
            ratio = abs(prev) / (abs(prev) + abs(curr))
            f_res = freqs[i - 1] + ratio * (freqs[i] - freqs[i - 1])

            q_factor = (f_res / span) if span else 0.0
            q_factor = q_factor or 1.0
            bandwidth = f_res / q_factor
            resonances.append(ResonanceInfo(
                frequency=f_res,
                type="series" if prev < 0 else "parallel",
                q_factor=max(1.0, q_factor),
                bandwidth=bandwidth,
                lower_cutoff=f_res - bandwidth / 2,
                upper_cutoff=f_res + bandwidth / 2,
                component_id=data.component_id,
            ))
    return resonances


def _solve_frequency(graph: CircuitGraph, frequency: float, settings: SimulationSettings) -> ACFrequencyPoint:
    omega = 2 * math.pi * frequency
    op = solve_operating_point(graph, initial_context(graph, AnalysisMode.AC, omega=omega), settings)

    voltages = extract_node_voltages(graph, op.solution, phasors=True)
    currents = extract_branch_currents(graph, op.solution, op.context)
    point = ACFrequencyPoint(
        frequency=frequency,
        omega=omega,
        node_voltages={k: ACPhasor.from_complex(v) for k, v in voltages.items()},
        branch_currents={k: ACPhasor.from_complex(v) for k, v in currents.items()},
    )

    for stamp in graph.stamps:
        if stamp.type in TRACKED_IMPEDANCE_TYPES:
            z = get_model(stamp.type).impedance(stamp, omega)
            point.component_impedances[stamp.component_id] = ACPhasor.from_complex(z)
        elif stamp.type == ComponentType.AC_SOURCE:
            v_source = get_model(stamp.type).phasor(stamp)
            z_in = source_input_impedance(v_source, currents[stamp.component_id])
            point.component_impedances[stamp.component_id] = ACPhasor.from_complex(z_in)
    return point


def _impedance_curves(graph: CircuitGraph, points: List[ACFrequencyPoint]) -> List[ImpedanceData]:
    curves = []
    for stamp in graph.stamps:
        if stamp.type in TRACKED_IMPEDANCE_TYPES:
            label = stamp.label
        elif stamp.type == ComponentType.AC_SOURCE:
            label = f"Zin({stamp.label})"
        else:
            continue
        data = ImpedanceData(component_id=stamp.component_id, label=label)
        for point in points:
            z = point.component_impedances[stamp.component_id]
            data.frequencies.append(point.frequency)
            data.magnitude_ohms.append(z.magnitude)
            data.phase_degrees.append(z.phase_degrees)
        curves.append(data)
    return curves


def run_ac_sweep_analysis(components, wires, options: ACSweepOptions = None,
                          settings: SimulationSettings = None) -> ACSweepResult:
    """Sweep the circuit's phasor response; any singular frequency point fails the sweep."""
    settings = settings or SimulationSettings()
    options = options or ACSweepOptions()

    preflight = run_preflight(components, wires, settings)
    if not preflight.ok:
        return ACSweepResult(success=False, error=preflight.error, options=options,
                             rule_violations=preflight.violations)

    try:
        frequencies = generate_frequency_points(options)
    except ValueError as e:
        return ACSweepResult(success=False, error=str(e), options=options,
                             rule_violations=preflight.violations)

    graph = preflight.graph
    points = []
    for frequency in frequencies:
        try:
            points.append(_solve_frequency(graph, frequency, settings))
        except SingularMatrixError:
            return ACSweepResult(success=False, error=f"Cannot solve circuit at frequency {frequency:g} Hz",
                                 frequencies=frequencies, options=options,
                                 rule_violations=preflight.violations)

    impedance_data = _impedance_curves(graph, points)
    logger.debug(f"AC sweep solved {len(points)} frequency points")
    return ACSweepResult(
        success=True,
        frequency_points=points,
        frequencies=frequencies,
        impedance_data=impedance_data,
        resonances=detect_resonances(impedance_data),
        options=options,
        rule_violations=preflight.violations,
    )
