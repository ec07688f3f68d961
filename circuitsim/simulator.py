"""
Circuit simulator facade.

Single entry point over the analysis engines: runs the design rules and
the DC, transient, AC sweep and digital analyses on one schematic, keeps
the most recent result of each kind and renders text reports.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from .config import SimulationSettings
from .core.analysis.ac_sweep import ACSweepOptions, ACSweepResult, run_ac_sweep_analysis
from .core.analysis.current_calculator import CurrentCalculator
from .core.analysis.dc_analysis import DCSimulationResult, run_dc_analysis
from .core.analysis.digital_logic import DigitalLogicSimulator, DigitalSimulationResult
from .core.analysis.results_formatter import ResultsFormatter
from .core.analysis.streaming_transient import StreamingTransientSolver
from .core.analysis.transient_analysis import TransientOptions, TransientSimulationResult, run_transient_analysis
from .core.circuit import coerce_circuit
from .core.circuit_graph import CircuitGraph
from .core.logic import DigitalLogicOptions
from .core.rule_engine import CircuitRuleEngineOptions, CircuitRuleViolation, evaluate_circuit_design_rules

logger = logging.getLogger(__name__)


class AnalysisType(Enum):
    """Types of circuit analysis supported"""
    DC = "dc"
    TRANSIENT = "transient"
    AC = "ac"
    DIGITAL = "digital"


class CircuitSimulator:
    """
    Runs every analysis on one schematic and keeps the latest result of
    each type in last_results.
    """

    def __init__(self, components, wires, settings: SimulationSettings = None):
        self.components, self.wires = coerce_circuit(components, wires)
        self.settings = settings or SimulationSettings()
        self.last_results: Dict[AnalysisType, object] = {}
        self.formatter = ResultsFormatter(self.components)

        if self.settings.enable_debug:
            logging.getLogger("circuitsim").setLevel(logging.DEBUG)

    def evaluate_rules(self) -> List[CircuitRuleViolation]:
        options = CircuitRuleEngineOptions(r_min_ohms=self.settings.r_min_ohms)
        return evaluate_circuit_design_rules(self.components, self.wires, options)

    def run_dc_analysis(self) -> DCSimulationResult:
        """Run DC analysis with error handling"""
        logger.info("Starting DC analysis...")
        try:
            result = run_dc_analysis(self.components, self.wires, self.settings)
        except Exception as e:
            logger.error(f"DC analysis crashed: {e}")
            result = DCSimulationResult(success=False, error=f"Analysis crashed: {e}")
        return self._record(AnalysisType.DC, result)

    def run_transient_analysis(self, options: TransientOptions = None) -> TransientSimulationResult:
        logger.info("Starting transient analysis...")
        try:
            result = run_transient_analysis(self.components, self.wires, options, self.settings)
        except Exception as e:
            logger.error(f"Transient analysis crashed: {e}")
            result = TransientSimulationResult(success=False, error=f"Analysis crashed: {e}", options=options)
        return self._record(AnalysisType.TRANSIENT, result)

    def run_ac_sweep(self, options: ACSweepOptions = None) -> ACSweepResult:
        """Run AC analysis over frequency range"""
        logger.info("Starting AC sweep...")
        try:
            result = run_ac_sweep_analysis(self.components, self.wires, options, self.settings)
        except Exception as e:
            logger.error(f"AC sweep crashed: {e}")
            result = ACSweepResult(success=False, error=f"Analysis crashed: {e}", options=options)
        return self._record(AnalysisType.AC, result)

    def run_digital_simulation(self, options: DigitalLogicOptions = None,
                               use_dc_voltages: bool = True) -> DigitalSimulationResult:
        """
        Evaluate the logic gates. With use_dc_voltages, wired gate inputs
        read the node voltages of a DC solve first.
        """
        logger.info("Starting digital simulation...")
        port_voltages = None
        if use_dc_voltages:
            dc = self.last_results.get(AnalysisType.DC)
            if dc is None:
                dc = self.run_dc_analysis()
            if dc.success:
                port_voltages = self._port_voltages(dc)
        result = DigitalLogicSimulator(options).simulate(self.components, self.wires, port_voltages)
        return self._record(AnalysisType.DIGITAL, result)

    def create_streaming_solver(self, options: TransientOptions = None) -> Optional[StreamingTransientSolver]:
        """Initialized streaming solver, or None when initialization fails."""
        solver = StreamingTransientSolver(self.settings)
        init = solver.initialize(self.components, self.wires, options)
        if not init.success:
            logger.warning(f"Streaming solver initialization failed: {init.error}")
            return None
        return solver

    def _port_voltages(self, dc: DCSimulationResult):
        graph = CircuitGraph(self.components, self.wires)
        voltages = {}
        for node_id, node in graph.nodes.items():
            if len(node.connected_ports) < 2:
                continue
            for port in node.connected_ports:
                voltages[port] = dc.node_voltages.get(node_id, 0.0)
        return voltages

    def _record(self, analysis_type: AnalysisType, result):
        self.last_results[analysis_type] = result
        if result.success:
            logger.info(f"{analysis_type.value.upper()} analysis completed successfully")
        else:
            logger.warning(f"{analysis_type.value.upper()} analysis failed: {getattr(result, 'error', '')}")
        return result

    def get_results_description(self, analysis_type: AnalysisType = AnalysisType.DC) -> str:
        """Get formatted description of analysis results"""
        if analysis_type not in self.last_results:
            return f"No {analysis_type.value} analysis results available."

        result = self.last_results[analysis_type]
        if analysis_type == AnalysisType.DC:
            power = None
            if result.success:
                graph = CircuitGraph(self.components, self.wires)
                power = CurrentCalculator(graph, result.node_voltages, result.branch_currents).power_dissipation()
            return self.formatter.get_dc_description(result, power)
        if analysis_type == AnalysisType.TRANSIENT:
            return self.formatter.get_transient_description(result)
        if analysis_type == AnalysisType.AC:
            return self.formatter.get_ac_description(result)

        return self.formatter.get_digital_description(result)
