"""
circuitsim - Modified Nodal Analysis engine for schematic circuits.

Provides DC, transient, streaming transient, AC sweep and digital logic
analyses over components and wires, plus a static design-rule engine.
"""

from .config import SimulationSettings
from .core.circuit import Component, ComponentType, Port, WaveformType, Wire
from .core.rule_engine import (CircuitRuleViolation, RuleSeverity, evaluate_circuit_design_rules,
                               evaluate_led001_rule)
from .core.analysis import (ACSweepOptions, ACSweepResult, DCSimulationResult, DigitalLogicSimulator,
                            StreamingTransientSolver, SweepType, TransientOptions, TransientSimulationResult,
                            run_ac_sweep_analysis, run_dc_analysis, run_transient_analysis)
from .simulator import AnalysisType, CircuitSimulator

__version__ = "1.0.0"

__all__ = [
    'SimulationSettings',
    'Component', 'ComponentType', 'Port', 'WaveformType', 'Wire',
    'CircuitRuleViolation', 'RuleSeverity', 'evaluate_circuit_design_rules', 'evaluate_led001_rule',
    'ACSweepOptions', 'ACSweepResult', 'DCSimulationResult', 'DigitalLogicSimulator',
    'StreamingTransientSolver', 'SweepType', 'TransientOptions', 'TransientSimulationResult',
    'run_ac_sweep_analysis', 'run_dc_analysis', 'run_transient_analysis',
    'AnalysisType', 'CircuitSimulator',
]
