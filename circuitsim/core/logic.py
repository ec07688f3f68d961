"""
Three-valued logic primitives shared by the digital evaluator and the
analog solvers that stamp gate outputs as voltage sources.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import LOGIC_THRESHOLD, LOGIC_V_HIGH, LOGIC_V_LOW
from .circuit import ComponentType


class LogicLevel(Enum):
    LOW = 0
    HIGH = 1
    UNKNOWN = -1


@dataclass
class DigitalLogicOptions:
    v_high: float = LOGIC_V_HIGH
    v_low: float = LOGIC_V_LOW
    threshold: float = LOGIC_THRESHOLD
    propagation_delay: float = 0.0


def voltage_to_logic(voltage: Optional[float], options: DigitalLogicOptions = None) -> LogicLevel:
    if voltage is None:
        return LogicLevel.UNKNOWN
    threshold = options.threshold if options else LOGIC_THRESHOLD
    return LogicLevel.HIGH if voltage >= threshold else LogicLevel.LOW


def logic_to_voltage(level: LogicLevel, options: DigitalLogicOptions = None) -> float:
    options = options or DigitalLogicOptions()
    if level == LogicLevel.HIGH:
        return options.v_high
    if level == LogicLevel.LOW:
        return options.v_low
    return 0.0


def bool_to_logic(value: Optional[bool]) -> LogicLevel:
    if value is None:
        return LogicLevel.UNKNOWN
    return LogicLevel.HIGH if value else LogicLevel.LOW


def evaluate_not(a: LogicLevel) -> LogicLevel:
    if a == LogicLevel.UNKNOWN:
        return LogicLevel.UNKNOWN
    return LogicLevel.LOW if a == LogicLevel.HIGH else LogicLevel.HIGH


def evaluate_and(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    if LogicLevel.UNKNOWN in (a, b):
        return LogicLevel.UNKNOWN
    both_high = a == LogicLevel.HIGH and b == LogicLevel.HIGH
    return LogicLevel.HIGH if both_high else LogicLevel.LOW


def evaluate_or(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    if LogicLevel.UNKNOWN in (a, b):
        return LogicLevel.UNKNOWN
    any_high = a == LogicLevel.HIGH or b == LogicLevel.HIGH
    return LogicLevel.HIGH if any_high else LogicLevel.LOW


def evaluate_xor(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    if LogicLevel.UNKNOWN in (a, b):
        return LogicLevel.UNKNOWN
    return LogicLevel.HIGH if a != b else LogicLevel.LOW


def evaluate_nand(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    return evaluate_not(evaluate_and(a, b))


def evaluate_nor(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    return evaluate_not(evaluate_or(a, b))


def evaluate_xnor(a: LogicLevel, b: LogicLevel) -> LogicLevel:
    return evaluate_not(evaluate_xor(a, b))


_BINARY_GATES = {
    ComponentType.LOGIC_AND: evaluate_and,
    ComponentType.LOGIC_OR: evaluate_or,
    ComponentType.LOGIC_NAND: evaluate_nand,
    ComponentType.LOGIC_NOR: evaluate_nor,
    ComponentType.LOGIC_XOR: evaluate_xor,
    ComponentType.LOGIC_XNOR: evaluate_xnor,
}


def evaluate_gate(gate_type: ComponentType, input_a: LogicLevel,
                  input_b: Optional[LogicLevel] = None) -> LogicLevel:
    """Evaluate one gate; a missing B input counts as UNKNOWN."""
    if gate_type == ComponentType.LOGIC_NOT:
        return evaluate_not(input_a)
    evaluator = _BINARY_GATES.get(gate_type)
    if evaluator is None:
        return LogicLevel.UNKNOWN
    return evaluator(input_a, input_b if input_b is not None else LogicLevel.UNKNOWN)


def resolve_input_level(voltage: Optional[float], manual: Optional[bool],
                        options: DigitalLogicOptions = None) -> LogicLevel:
    """Wired voltage wins, then the manual input, then LOW."""
    if voltage is not None:
        return voltage_to_logic(voltage, options)
    if manual is not None:
        return bool_to_logic(manual)
    return LogicLevel.LOW
