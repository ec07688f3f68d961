"""
Analysis engines for circuit simulation.

Each engine is a plain function (or, for streaming, a single-owner
solver object) over components and wires, returning a result object.
"""

from .dc_analysis import DCSimulationResult, run_dc_analysis
from .transient_analysis import (TransientOptions, TransientSimulationResult, TransientState,
                                 generate_waveform, run_transient_analysis, select_time_step, transient_step)
from .streaming_transient import InitializeResult, StreamingPoint, StreamingTransientSolver
from .ac_sweep import (ACPhasor, ACSweepOptions, ACSweepResult, ResonanceInfo, SweepType,
                       detect_resonances, generate_frequency_points, run_ac_sweep_analysis)
from .digital_logic import DigitalLogicSimulator, DigitalSimulationResult, GateState
from .current_calculator import CurrentCalculator
from .results_formatter import ResultsFormatter, format_current_label, format_si, format_voltage_label

__all__ = [
    'DCSimulationResult', 'run_dc_analysis',
    'TransientOptions', 'TransientSimulationResult', 'TransientState', 'generate_waveform',
    'run_transient_analysis', 'select_time_step', 'transient_step',
    'InitializeResult', 'StreamingPoint', 'StreamingTransientSolver',
    'ACPhasor', 'ACSweepOptions', 'ACSweepResult', 'ResonanceInfo', 'SweepType',
    'detect_resonances', 'generate_frequency_points', 'run_ac_sweep_analysis',
    'DigitalLogicSimulator', 'DigitalSimulationResult', 'GateState',
    'CurrentCalculator',
    'ResultsFormatter', 'format_current_label', 'format_si', 'format_voltage_label',
]
