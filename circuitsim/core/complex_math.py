"""
Complex arithmetic and impedance helpers for AC analysis.

Values are plain Python ``complex`` numbers; the helpers add guarded
reciprocals for reactive elements and phasor formatting.
"""

import cmath
import math

from ..config import OPEN_CIRCUIT_RESISTANCE

ZERO_TOLERANCE = 1e-12


def complex_number(re: float, im: float = 0.0) -> complex:
    return complex(re, im)


def from_polar(magnitude: float, phase: float) -> complex:
    """Build a complex value from magnitude and phase (radians)."""
    return cmath.rect(magnitude, phase)


def add(a: complex, b: complex) -> complex:
    return a + b


def subtract(a: complex, b: complex) -> complex:
    return a - b


def multiply(a: complex, b: complex) -> complex:
    return a * b


def divide(a: complex, b: complex) -> complex:
    """Divide a by b, raising ZeroDivisionError when b is exactly zero."""
    if b.real == 0 and b.imag == 0:
        raise ZeroDivisionError("Complex division by zero")
    return a / b


def conjugate(a: complex) -> complex:
    return a.conjugate()


def magnitude(a: complex) -> float:
    return abs(a)


def phase(a: complex) -> float:
    return math.atan2(a.imag, a.real)


def phase_degrees(a: complex) -> float:
    return math.degrees(phase(a))


def negate(a: complex) -> complex:
    return -a


def scale(a: complex, factor: float) -> complex:
    return a * factor


def reciprocal(a: complex) -> complex:
    return divide(complex(1, 0), a)


def is_zero(a: complex, tolerance: float = ZERO_TOLERANCE) -> bool:
    return abs(a.real) < tolerance and abs(a.imag) < tolerance


# Impedances and admittances

def impedance_resistor(resistance: float) -> complex:
    return complex(resistance, 0)


def impedance_capacitor(omega: float, capacitance: float) -> complex:
    """Z = -j / (wC); a very large capacitive reactance at DC."""
    if omega == 0 or capacitance == 0:
        return complex(0, -OPEN_CIRCUIT_RESISTANCE)
    return complex(0, -1.0 / (omega * capacitance))


def impedance_inductor(omega: float, inductance: float) -> complex:
    return complex(0, omega * inductance)


def admittance_capacitor(omega: float, capacitance: float) -> complex:
    return complex(0, omega * capacitance)


def admittance_inductor(omega: float, inductance: float) -> complex:
    """Y = -j / (wL); treated as a very large admittance at DC."""
    if omega == 0 or inductance == 0:
        return complex(OPEN_CIRCUIT_RESISTANCE, 0)
    return complex(0, -1.0 / (omega * inductance))


def series_impedance(*impedances: complex) -> complex:
    total = complex(0, 0)
    for z in impedances:
        total += z
    return total


def parallel_impedance(*impedances: complex) -> complex:
    """Combine impedances in parallel; any zero impedance shorts the group."""
    admittance = complex(0, 0)
    for z in impedances:
        if is_zero(z):
            return complex(0, 0)
        admittance += reciprocal(z)
    if is_zero(admittance):
        return complex(OPEN_CIRCUIT_RESISTANCE, 0)
    return reciprocal(admittance)


def series_rlc_impedance(resistance: float, inductance: float, capacitance: float, omega: float) -> complex:
    xl = omega * inductance
    xc = 0.0 if omega == 0 or capacitance == 0 else 1.0 / (omega * capacitance)
    return complex(resistance, xl - xc)


def parallel_rlc_impedance(resistance: float, inductance: float, capacitance: float, omega: float) -> complex:
    return parallel_impedance(
        impedance_resistor(resistance),
        impedance_inductor(omega, inductance),
        impedance_capacitor(omega, capacitance),
    )


# Formatting

def format_complex(a: complex, precision: int = 4) -> str:
    """Rectangular form: '3', 'j 2', '-j 2', '3 + j 2' or '3 - j 2'."""
    re_zero = abs(a.real) < ZERO_TOLERANCE
    im_zero = abs(a.imag) < ZERO_TOLERANCE
    if im_zero:
        return f"{a.real:.{precision}f}"
    im_text = f"{abs(a.imag):.{precision}f}"
    if re_zero:
        return f"j {im_text}" if a.imag > 0 else f"-j {im_text}"
    sign = "+" if a.imag > 0 else "-"
    return f"{a.real:.{precision}f} {sign} j {im_text}"


def format_polar(a: complex, precision: int = 4) -> str:
    return f"{magnitude(a):.{precision}f} ∠ {phase_degrees(a):.2f}°"
