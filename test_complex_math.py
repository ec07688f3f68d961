#!/usr/bin/env python3
"""
Tests for the complex arithmetic and impedance helpers used by AC analysis.
"""

import cmath
import math
import sys

from circuit_fixtures import series_rlc
from circuitsim.components import get_model
from circuitsim.core import complex_math as cm


def test_basic_arithmetic():
    """Arithmetic helpers agree with Python complex numbers."""
    print("Testing complex arithmetic...")
    a = cm.complex_number(3, 4)
    b = cm.complex_number(1, -2)

    assert cm.add(a, b) == complex(4, 2)
    assert cm.subtract(a, b) == complex(2, 6)
    assert cm.multiply(a, b) == complex(11, -2)
    assert abs(cm.divide(a, b) - (a / b)) < 1e-12
    assert cm.conjugate(a) == complex(3, -4)
    assert cm.negate(a) == complex(-3, -4)
    assert cm.scale(a, 2) == complex(6, 8)
    assert cm.magnitude(a) == 5.0
    print("✅ Complex arithmetic working correctly")


def test_division_by_zero_raises():
    print("\nTesting division by zero...")
    try:
        cm.divide(complex(1, 1), complex(0, 0))
    except ZeroDivisionError:
        print("✅ Division by zero rejected")
        return
    raise AssertionError("divide() accepted a zero divisor")


def test_polar_and_phase():
    print("\nTesting polar conversion...")
    c = cm.from_polar(2.0, math.pi / 2)
    assert abs(c.real) < 1e-12
    assert abs(c.imag - 2.0) < 1e-12
    assert abs(cm.phase_degrees(complex(0, 1)) - 90.0) < 1e-12
    assert abs(cm.phase(complex(-1, 0)) - math.pi) < 1e-12
    assert cm.is_zero(complex(1e-13, -1e-13))
    assert not cm.is_zero(complex(1e-6, 0))
    print("✅ Polar conversion working correctly")


def test_reactive_impedances():
    """Capacitor and inductor impedances, including the large reactance at DC."""
    print("\nTesting reactive impedances...")
    omega = 2 * math.pi * 1000
    zc = cm.impedance_capacitor(omega, 1e-6)
    zl = cm.impedance_inductor(omega, 10e-3)

    assert abs(zc - complex(0, -1 / (omega * 1e-6))) < 1e-9
    assert abs(zl - complex(0, omega * 10e-3)) < 1e-9
    assert cm.impedance_capacitor(0, 1e-6) == complex(0, -1e12)
    assert abs(cm.admittance_capacitor(omega, 1e-6) * zc - 1) < 1e-12
    assert abs(cm.admittance_inductor(omega, 10e-3) * zl - 1) < 1e-12
    print("✅ Reactive impedances working correctly")


def test_component_models_use_shared_impedances():
    """The AC models report the same impedances as the helpers, at DC too."""
    print("\nTesting component model impedances...")
    stamps = {s.component_id: s for s in series_rlc(r=10.0, inductance=10e-3, c=10e-6).graph().stamps}
    for omega in (0.0, 2 * math.pi * 60, 2 * math.pi * 1000):
        assert get_model(stamps['R1'].type).impedance(stamps['R1'], omega) == cm.impedance_resistor(10.0)
        assert get_model(stamps['L1'].type).impedance(stamps['L1'], omega) == cm.impedance_inductor(omega, 10e-3)
        assert get_model(stamps['C1'].type).impedance(stamps['C1'], omega) == cm.impedance_capacitor(omega, 10e-6)

    assert get_model(stamps['C1'].type).impedance(stamps['C1'], 0.0) == complex(0, -1e12)
    print("✅ Component models share the impedance helpers")


def test_series_and_parallel_combination():
    print("\nTesting series/parallel combination...")
    assert cm.series_impedance(complex(1, 1), complex(2, -1), complex(3, 0)) == complex(6, 0)
    assert abs(cm.parallel_impedance(complex(100, 0), complex(100, 0)) - complex(50, 0)) < 1e-12
    assert cm.parallel_impedance(complex(100, 0), complex(0, 0)) == complex(0, 0)
    print("✅ Series/parallel combination working correctly")


def test_rlc_impedance_at_resonance():
    """A series RLC is purely resistive at its resonant frequency."""
    print("\nTesting RLC impedance at resonance...")
    inductance, capacitance = 10e-3, 10e-6
    omega0 = 1 / math.sqrt(inductance * capacitance)

    z_series = cm.series_rlc_impedance(10, inductance, capacitance, omega0)
    assert abs(z_series.real - 10) < 1e-9
    assert abs(z_series.imag) < 1e-9

    z_parallel = cm.parallel_rlc_impedance(10, inductance, capacitance, omega0)
    assert abs(z_parallel - complex(10, 0)) < 1e-6
    print("✅ RLC impedance working correctly")


def test_formatting():
    print("\nTesting complex formatting...")
    assert cm.format_complex(complex(3, 0), 1) == "3.0"
    assert cm.format_complex(complex(0, 2), 1) == "j 2.0"
    assert cm.format_complex(complex(0, -2), 1) == "-j 2.0"
    assert cm.format_complex(complex(3, -2), 1) == "3.0 - j 2.0"
    assert cm.format_polar(cmath.rect(2, 0), 2) == "2.00 ∠ 0.00°"
    print("✅ Complex formatting working correctly")


def main():
    """Run all tests."""
    print("=" * 60)
    print("COMPLEX MATH TESTS")
    print("=" * 60)

    tests = [
        test_basic_arithmetic,
        test_division_by_zero_raises,
        test_polar_and_phase,
        test_reactive_impedances,
        test_component_models_use_shared_impedances,
        test_series_and_parallel_combination,
        test_rlc_impedance_at_resonance,
        test_formatting,
    ]

    passed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"❌ {test.__name__} failed: {e}")

    print("\n" + "=" * 60)
    print(f"TEST RESULTS: {passed}/{len(tests)} tests passed")
    print("=" * 60)
    return passed == len(tests)


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
