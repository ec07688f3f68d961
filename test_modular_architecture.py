#!/usr/bin/env python3
"""
Test script for the modular simulator architecture.
Validates the package layout, the analysis module imports, the results
formatter and the CircuitSimulator facade that ties the engines together.
"""

import os
import sys

from circuit_fixtures import CircuitBuilder, project_root, series_rc, voltage_divider


def test_file_structure():
    """Test that the package file structure is correct."""
    print("Testing file structure...")

    expected_files = [
        'circuitsim/__init__.py',
        'circuitsim/config.py',
        'circuitsim/simulator.py',
        'circuitsim/components/__init__.py',
        'circuitsim/components/base.py',
        'circuitsim/core/circuit_graph.py',
        'circuitsim/core/mna.py',
        'circuitsim/core/rule_engine.py',
        'circuitsim/core/analysis/__init__.py',
        'circuitsim/core/analysis/dc_analysis.py',
        'circuitsim/core/analysis/transient_analysis.py',
        'circuitsim/core/analysis/streaming_transient.py',
        'circuitsim/core/analysis/ac_sweep.py',
        'circuitsim/core/analysis/digital_logic.py',
        'circuitsim/core/analysis/results_formatter.py',
        'circuitsim/core/analysis/current_calculator.py',
    ]

    missing_files = [path for path in expected_files
                     if not os.path.exists(os.path.join(project_root, path))]
    assert not missing_files, f"Missing files: {missing_files}"
    print("✅ All expected files present")


def test_modular_analysis_imports():
    """Test that all modular analysis components can be imported."""
    print("\nTesting modular analysis imports...")

    import circuitsim
    from circuitsim.core.analysis import (CurrentCalculator, DigitalLogicSimulator, ResultsFormatter,
                                          StreamingTransientSolver, run_ac_sweep_analysis, run_dc_analysis,
                                          run_transient_analysis)

    for name in circuitsim.__all__:
        assert hasattr(circuitsim, name), name
    assert callable(run_dc_analysis) and callable(run_transient_analysis) and callable(run_ac_sweep_analysis)
    assert CurrentCalculator and DigitalLogicSimulator and ResultsFormatter and StreamingTransientSolver
    print("✅ All modular analysis components imported successfully")


def test_si_formatting():
    print("\nTesting SI formatting...")
    from circuitsim.core.analysis.results_formatter import (format_current_label, format_si,
                                                            format_voltage_label)

    assert format_si(1.63e-3, 'A') == "1.63 mA"
    assert format_si(4700, 'Ω') == "4.7 kΩ"
    assert format_si(0, 'V') == "0 V"
    assert format_si(1e-10, 'V') == "0 V"
    assert format_si(-2.5, 'W') == "-2.5 W"
    assert format_voltage_label(5.0) == "5 V"
    assert format_voltage_label(0.0123) == "12.3 mV"
    assert format_current_label(2.5e-7) == "0.25 μA"
    assert format_current_label(0.25) == "250 mA"
    print("✅ SI formatting working correctly")


def test_results_formatter():
    """Test the results formatter functionality."""
    print("\nTesting results formatter...")
    from circuitsim.core.analysis.dc_analysis import DCSimulationResult
    from circuitsim.core.analysis.digital_logic import DigitalSimulationResult, GateState
    from circuitsim.core.analysis.results_formatter import ResultsFormatter
    from circuitsim.core.circuit import ComponentType
    from circuitsim.core.logic import LogicLevel

    circuit = voltage_divider()
    result = DCSimulationResult(success=True, node_voltages={'0': 0.0, 'n1': 5.0},
                                branch_currents={'R1': 0.001, 'V1': -0.001})
    formatter = ResultsFormatter(circuit.components)

    description = formatter.get_dc_description(result)
    assert "DC Simulation Results:" in description
    assert "Node Voltages:" in description
    assert "Node 0 (Ground): 0 V" in description
    assert "Node n1: 5 V" in description
    assert "R1: 1 mA →" in description
    assert "V1: 1 mA ←" in description

    failed = formatter.get_dc_description(DCSimulationResult(success=False, error="Circuit is empty"))
    assert failed == "DC Simulation Failed: Circuit is empty\n"

    gates = CircuitBuilder().add('G1', 'logic_and', label='U1').add('G2', 'logic_not')
    digital = DigitalSimulationResult(gate_states={
        'G1': GateState('G1', ComponentType.LOGIC_AND, LogicLevel.HIGH, LogicLevel.HIGH, LogicLevel.HIGH, 5.0),
        'G2': GateState('G2', ComponentType.LOGIC_NOT, LogicLevel.HIGH, None, LogicLevel.LOW, 0.0),
    })
    assert ResultsFormatter(gates.components).get_digital_description(digital) == (
        "Digital Simulation Results:\n  U1: HIGH (1)\n  G2: LOW (0)\n")
    print("✅ Results formatter working correctly")


def test_simulator_facade():
    """Test that the simulator facade runs every analysis and keeps the results."""
    print("\nTesting simulator facade...")
    from circuitsim import AnalysisType, CircuitSimulator, TransientOptions
    from circuitsim.core.analysis.ac_sweep import ACSweepOptions

    simulator = CircuitSimulator(*voltage_divider().circuit())
    assert simulator.get_results_description(AnalysisType.AC) == "No ac analysis results available."
    assert simulator.evaluate_rules() == []

    dc = simulator.run_dc_analysis()
    assert dc.success, dc.error
    assert simulator.last_results[AnalysisType.DC] is dc
    description = simulator.get_results_description(AnalysisType.DC)
    assert "R1: 5 mA →" in description
    assert "Power:" in description

    transient = simulator.run_transient_analysis(TransientOptions(end_time=0.05))
    assert transient.success, transient.error
    assert "Transient Simulation Results:" in simulator.get_results_description(AnalysisType.TRANSIENT)

    rc = CircuitSimulator(*series_rc(source='ac_source').circuit())
    sweep = rc.run_ac_sweep(ACSweepOptions(start_frequency=10, end_frequency=1000, points_per_decade=5))
    assert sweep.success, sweep.error
    assert "AC Sweep Results:" in rc.get_results_description(AnalysisType.AC)

    solver = rc.create_streaming_solver(TransientOptions(time_step=1e-5))
    assert solver is not None and solver.is_initialized()
    print("✅ Simulator facade working correctly")


def test_simulator_digital_uses_dc_voltages():
    print("\nTesting facade digital simulation...")
    from circuitsim import AnalysisType, CircuitSimulator

    circuit = (CircuitBuilder()
               .add('V1', 'dc_source', 5)
               .add('R2', 'resistor', 1000)
               .add('G1', 'logic_and', logic_input_a=False, logic_input_b=True)
               .add('GND', 'ground')
               .connect('V1.+', 'R2.1')
               .connect('R2.2', 'V1.-')
               .connect('V1.+', 'G1.A')
               .connect('V1.-', 'GND.gnd'))
    simulator = CircuitSimulator(*circuit.circuit())

    # The wired 5 V input outranks the manual LOW
    digital = simulator.run_digital_simulation()
    assert digital.gate_states['G1'].output.name == "HIGH"
    assert AnalysisType.DC in simulator.last_results
    assert "G1: HIGH (1)" in simulator.get_results_description(AnalysisType.DIGITAL)

    manual_only = CircuitSimulator(*circuit.circuit()).run_digital_simulation(use_dc_voltages=False)
    assert manual_only.gate_states['G1'].output.name == "LOW"
    print("✅ Digital simulation reads solved node voltages")


def test_simulator_reports_crash():
    print("\nTesting crash handling...")
    from circuitsim import AnalysisType, CircuitSimulator, SimulationSettings

    simulator = CircuitSimulator(*voltage_divider().circuit(), SimulationSettings(solver="bogus"))
    result = simulator.run_dc_analysis()
    assert not result.success
    assert result.error.startswith("Analysis crashed:")
    assert "DC Simulation Failed" in simulator.get_results_description(AnalysisType.DC)
    print("✅ Crashes reported as failed results")


def main():
    """Run all tests."""
    print("=" * 60)
    print("CIRCUITSIM MODULAR ARCHITECTURE TESTS")
    print("=" * 60)

    tests = [
        test_file_structure,
        test_modular_analysis_imports,
        test_si_formatting,
        test_results_formatter,
        test_simulator_facade,
        test_simulator_digital_uses_dc_voltages,
        test_simulator_reports_crash,
    ]

    passed = 0
    total = len(tests)

    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"❌ {test.__name__} failed: {e}")

    print("\n" + "=" * 60)
    print(f"TEST RESULTS: {passed}/{total} tests passed")

    if passed == total:
        print("🎉 ALL TESTS PASSED - Modular architecture working correctly!")
    else:
        print("⚠️  Some tests failed - check the output above")

    print("=" * 60)

    return passed == total


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
