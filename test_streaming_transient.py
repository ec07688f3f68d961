#!/usr/bin/env python3
"""
Tests for the step-wise streaming transient solver.
"""

import sys

from circuit_fixtures import CircuitBuilder, parallel_sources, series_rc
from circuitsim.config import SimulationSettings
from circuitsim.core.analysis.streaming_transient import StreamingTransientSolver
from circuitsim.core.analysis.transient_analysis import TransientOptions, run_transient_analysis
from circuitsim.core.validation import ERROR_NO_GROUND


def test_initialize_and_step():
    print("Testing initialize and step...")
    circuit = series_rc()
    solver = StreamingTransientSolver()
    assert not solver.is_initialized()
    assert solver.step() is None

    init = solver.initialize(*circuit.circuit(), TransientOptions(time_step=1e-5))
    assert init.success, init.error
    assert init.time_step == 1e-5
    assert init.max_frequency == 60.0
    assert solver.is_initialized()
    assert solver.get_current_time() == 0.0

    point = solver.step()
    assert point is not None
    assert point.time == 0.0
    assert abs(solver.get_current_time() - 1e-5) < 1e-15
    assert point.node_voltages[circuit.node_of('C1.1')] > 0
    print("✅ Streaming solver steps forward")


def test_matches_batch_run():
    """Stepping the streaming solver reproduces the batch history."""
    print("\nTesting agreement with batch analysis...")
    circuit = series_rc(v=5.0, r=1000.0, c=1e-6)
    options = TransientOptions(end_time=2e-4, time_step=1e-5)
    batch = run_transient_analysis(*circuit.circuit(), options)
    assert batch.success, batch.error

    solver = StreamingTransientSolver()
    assert solver.initialize(*circuit.circuit(), options).success
    points = solver.step_batch(len(batch.time_points))
    assert len(points) == len(batch.time_points)

    output = circuit.node_of('C1.1')
    for i, point in enumerate(points):
        assert abs(point.time - batch.time_points[i]) < 1e-12
        assert abs(point.node_voltages[output] - batch.node_voltage_history[output][i]) < 1e-12
        assert abs(point.branch_currents['R1'] - batch.branch_current_history['R1'][i]) < 1e-12
    print("✅ Streaming and batch runs agree")


def test_reset_and_dispose():
    print("\nTesting reset and dispose...")
    circuit = series_rc()
    solver = StreamingTransientSolver()
    solver.initialize(*circuit.circuit(), TransientOptions(time_step=1e-5))

    first = solver.step()
    solver.step_batch(10)
    assert abs(solver.get_current_time() - 11e-5) < 1e-15

    solver.reset()
    assert solver.get_current_time() == 0.0
    again = solver.step()
    assert again.node_voltages == first.node_voltages

    solver.dispose()
    assert not solver.is_initialized()
    assert solver.step() is None
    assert solver.step_batch(5) == []
    assert solver.get_current_time() == 0.0
    print("✅ Reset and dispose working correctly")


def test_reinitialize_restores_iteration_cap():
    print("\nTesting per-run iteration cap...")
    circuit = series_rc()
    solver = StreamingTransientSolver(SimulationSettings(max_iterations=20))
    solver.initialize(*circuit.circuit(), TransientOptions(time_step=1e-5, max_iterations=1))
    assert solver.settings.max_iterations == 1

    solver.initialize(*circuit.circuit(), TransientOptions(time_step=1e-5))
    assert solver.settings.max_iterations == 20

    solver.initialize(*circuit.circuit(), TransientOptions(time_step=1e-5, max_iterations=3))
    solver.dispose()
    assert solver.settings.max_iterations == 20
    print("✅ Options apply to one run only")


def test_lu_cache_matches_gaussian():
    print("\nTesting cached LU factorisation...")
    circuit = series_rc()
    options = TransientOptions(time_step=1e-5)

    gaussian = StreamingTransientSolver()
    gaussian.initialize(*circuit.circuit(), options)
    cached = StreamingTransientSolver(SimulationSettings(solver="lu"))
    cached.initialize(*circuit.circuit(), options)

    output = circuit.node_of('C1.1')
    for a, b in zip(gaussian.step_batch(20), cached.step_batch(20)):
        assert abs(a.node_voltages[output] - b.node_voltages[output]) < 1e-9
    assert len(cached._cache) == 1
    print("✅ LU cache reused across steps")


def test_initialize_failure():
    print("\nTesting initialization failure...")
    circuit = CircuitBuilder().add('V1', 'dc_source', 5).add('R1', 'resistor', 10).connect('V1.+', 'R1.1')
    solver = StreamingTransientSolver()
    init = solver.initialize(*circuit.circuit())
    assert not init.success
    assert init.error == ERROR_NO_GROUND
    assert not solver.is_initialized()
    assert init.to_dict()["error"] == ERROR_NO_GROUND
    print("✅ Initialization failure reported")


def test_singular_step_stops_batch():
    print("\nTesting singular step...")
    solver = StreamingTransientSolver()
    init = solver.initialize(*parallel_sources().circuit(), TransientOptions(time_step=1e-4))
    assert init.success, init.error
    assert solver.step() is None
    assert solver.step_batch(5) == []
    assert solver.get_current_time() == 0.0
    print("✅ Failed steps return no points")


def main():
    """Run all tests."""
    print("=" * 60)
    print("STREAMING TRANSIENT TESTS")
    print("=" * 60)

    tests = [
        test_initialize_and_step,
        test_matches_batch_run,
        test_reset_and_dispose,
        test_reinitialize_restores_iteration_cap,
        test_lu_cache_matches_gaussian,
        test_initialize_failure,
        test_singular_step_stops_batch,
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
