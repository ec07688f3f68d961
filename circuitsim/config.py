"""
Simulation constants and default settings shared by the graph builder,
the MNA solvers and the design-rule engine.
"""

from dataclasses import dataclass

# Linear solver
SINGULAR_PIVOT_TOLERANCE = 1e-12
MAX_ITERATIONS = 20

# Piecewise-linear diode / LED model
DIODE_OFF_RESISTANCE = 1e9
DIODE_ON_RESISTANCE = 0.1
DIODE_REVERSE_CURRENT_TOLERANCE = 1e-9
DIODE_AC_RESISTANCE = 100.0

# Fixed resistances used in place of ideal opens and shorts
OPEN_CIRCUIT_RESISTANCE = 1e12
CAPACITOR_DC_RESISTANCE = 1e12
SWITCH_CLOSED_RESISTANCE = 0.01
SWITCH_OPEN_RESISTANCE = 1e12
AMMETER_RESISTANCE = 0.001
VOLTMETER_RESISTANCE = 1e12
LOGIC_INPUT_RESISTANCE = 1e12

DEFAULT_COMPONENT_VALUES = {
    'resistor': 1000.0,
    'dc_source': 5.0,
    'ac_source': 5.0,
    'capacitor': 100e-6,
    'inductor': 10e-3,
    'diode': 0.7,
    'led': 2.0,
}

LED_VF_DEFAULT = {
    'red': 2.0,
    'yellow': 2.1,
    'green': 2.2,
    'blue': 3.1,
    'white': 3.1,
}
LED_VF_FALLBACK = 2.0

AC_SOURCE_DEFAULTS = {
    'frequency': 60.0,
    'phase': 0.0,
    'waveform_type': 'sine',
}

# Transient time stepping
DC_TIME_STEP = 1.0 / 60.0
STEPS_PER_PERIOD = 100
DEFAULT_TRANSIENT_PERIODS = 3

# AC sweep defaults
AC_SWEEP_START_FREQUENCY = 1.0
AC_SWEEP_END_FREQUENCY = 1e6
AC_SWEEP_POINTS_PER_DECADE = 10
AC_NEGLIGIBLE_CURRENT = 1e-15

# Design rules
ZERO_OHM_THRESHOLD_OHMS = 0.01
DEFAULT_R_MIN_OHMS = 10.0
I_EMIT_MIN = 1e-3

# Digital logic levels
LOGIC_V_HIGH = 5.0
LOGIC_V_LOW = 0.0
LOGIC_THRESHOLD = 2.5

# Overlay label formatting
LABEL_ZERO_THRESHOLD = 1e-9
LABEL_SIGNIFICANT_DIGITS = 3


@dataclass
class SimulationSettings:
    """Configuration settings for simulation"""
    max_iterations: int = MAX_ITERATIONS
    pivot_tolerance: float = SINGULAR_PIVOT_TOLERANCE
    solver: str = "gaussian"  # gaussian, lu
    strict_convergence: bool = False
    check_rules: bool = True
    teaching_mode: bool = False
    r_min_ohms: float = DEFAULT_R_MIN_OHMS
    enable_debug: bool = False
