"""
Component models keyed by component type.

Every ComponentType must have a registered model; the registry is checked
at import time so a new type cannot silently fall through the solvers.
"""

from ..core.circuit import ComponentType
from .base import ComponentModel, LinearComponentModel, ResistiveModel
from .capacitor import CapacitorModel
from .diode import DiodeModel
from .ground import GroundModel
from .inductor import InductorModel
from .logic_gate import LogicGateModel
from .meter import AmmeterModel, VoltmeterModel
from .resistor import ResistorModel
from .switch import SwitchModel
from .transistor import OpenCircuitModel
from .vs import ACVoltageSourceModel, VoltageSourceModel

_logic_gate = LogicGateModel()
_diode = DiodeModel()
_open_circuit = OpenCircuitModel()

MODEL_REGISTRY = {
    ComponentType.RESISTOR: ResistorModel(),
    ComponentType.CAPACITOR: CapacitorModel(),
    ComponentType.INDUCTOR: InductorModel(),
    ComponentType.DC_SOURCE: VoltageSourceModel(),
    ComponentType.AC_SOURCE: ACVoltageSourceModel(),
    ComponentType.GROUND: GroundModel(),
    ComponentType.OPAMP: _open_circuit,
    ComponentType.DIODE: _diode,
    ComponentType.LED: _diode,
    ComponentType.TRANSISTOR_NPN: _open_circuit,
    ComponentType.TRANSISTOR_PNP: _open_circuit,
    ComponentType.SWITCH: SwitchModel(),
    ComponentType.AMMETER: AmmeterModel(),
    ComponentType.VOLTMETER: VoltmeterModel(),
    ComponentType.LOGIC_AND: _logic_gate,
    ComponentType.LOGIC_OR: _logic_gate,
    ComponentType.LOGIC_NOT: _logic_gate,
    ComponentType.LOGIC_NAND: _logic_gate,
    ComponentType.LOGIC_NOR: _logic_gate,
    ComponentType.LOGIC_XOR: _logic_gate,
    ComponentType.LOGIC_XNOR: _logic_gate,
}

_missing = set(ComponentType) - set(MODEL_REGISTRY)
if _missing:
    raise RuntimeError(f"No component model registered for: {sorted(t.value for t in _missing)}")


def get_model(component_type: ComponentType) -> ComponentModel:
    return MODEL_REGISTRY[component_type]


__all__ = [
    'ComponentModel', 'LinearComponentModel', 'ResistiveModel', 'MODEL_REGISTRY', 'get_model',
    'ResistorModel', 'CapacitorModel', 'InductorModel', 'VoltageSourceModel', 'ACVoltageSourceModel',
    'GroundModel', 'DiodeModel', 'SwitchModel', 'AmmeterModel', 'VoltmeterModel',
    'LogicGateModel', 'OpenCircuitModel',
]
