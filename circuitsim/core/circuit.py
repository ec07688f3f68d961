"""
Schematic data model consumed by every solver: components, their ports
and the wires joining them. Geometry fields are carried for the editor
and ignored by the simulation code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ComponentType(Enum):
    """Closed set of component kinds understood by the engine"""
    RESISTOR = "resistor"
    CAPACITOR = "capacitor"
    INDUCTOR = "inductor"
    DC_SOURCE = "dc_source"
    AC_SOURCE = "ac_source"
    GROUND = "ground"
    OPAMP = "opamp"
    DIODE = "diode"
    TRANSISTOR_NPN = "transistor_npn"
    TRANSISTOR_PNP = "transistor_pnp"
    SWITCH = "switch"
    LED = "led"
    AMMETER = "ammeter"
    VOLTMETER = "voltmeter"
    LOGIC_AND = "logic_and"
    LOGIC_OR = "logic_or"
    LOGIC_NOT = "logic_not"
    LOGIC_NAND = "logic_nand"
    LOGIC_NOR = "logic_nor"
    LOGIC_XOR = "logic_xor"
    LOGIC_XNOR = "logic_xnor"


SOURCE_TYPES = (ComponentType.DC_SOURCE, ComponentType.AC_SOURCE)
DIODE_TYPES = (ComponentType.DIODE, ComponentType.LED)
TRANSISTOR_TYPES = (ComponentType.TRANSISTOR_NPN, ComponentType.TRANSISTOR_PNP)
LOGIC_GATE_TYPES = (
    ComponentType.LOGIC_AND,
    ComponentType.LOGIC_OR,
    ComponentType.LOGIC_NOT,
    ComponentType.LOGIC_NAND,
    ComponentType.LOGIC_NOR,
    ComponentType.LOGIC_XOR,
    ComponentType.LOGIC_XNOR,
)


class WaveformType(Enum):
    """AC source waveform shapes"""
    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    SAWTOOTH = "sawtooth"


def _pick(data: Dict[str, Any], *keys, default=None):
    """Return the first key present in data (accepts snake_case and camelCase)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class Port:
    id: str
    name: str = ""
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Port':
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            offset_x=_pick(data, "offset_x", "offsetX", default=0.0),
            offset_y=_pick(data, "offset_y", "offsetY", default=0.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name,
                "offsetX": self.offset_x, "offsetY": self.offset_y}


@dataclass
class Component:
    """A placed schematic component"""
    id: str
    type: ComponentType
    ports: List[Port] = field(default_factory=list)
    value: Optional[float] = None
    label: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    # AC source
    frequency: Optional[float] = None
    phase: Optional[float] = None  # radians
    waveform_type: Optional[WaveformType] = None
    # Switch
    switch_closed: bool = False
    # Logic gates
    logic_input_a: Optional[bool] = None
    logic_input_b: Optional[bool] = None
    logic_output: Optional[bool] = None
    # LED
    led_color: Optional[str] = None
    vf_override: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.type, ComponentType):
            self.type = ComponentType(self.type)
        if self.waveform_type is not None and not isinstance(self.waveform_type, WaveformType):
            self.waveform_type = WaveformType(self.waveform_type)

    @property
    def display_name(self) -> str:
        return self.label or self.id

    def get_port(self, name: str) -> Optional[Port]:
        """Find a port by its name ('A', 'B', 'Y', '+', '-')."""
        for port in self.ports:
            if port.name == name:
                return port
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Component':
        """Create a component from the editor's dictionary form."""
        return cls(
            id=str(data["id"]),
            type=ComponentType(data["type"]),
            ports=[p if isinstance(p, Port) else Port.from_dict(p) for p in data.get("ports", [])],
            value=data.get("value"),
            label=data.get("label"),
            x=data.get("x", 0.0),
            y=data.get("y", 0.0),
            rotation=data.get("rotation", 0.0),
            frequency=data.get("frequency"),
            phase=data.get("phase"),
            waveform_type=_pick(data, "waveform_type", "waveformType"),
            switch_closed=bool(_pick(data, "switch_closed", "switchClosed", default=False)),
            logic_input_a=_pick(data, "logic_input_a", "logicInputA"),
            logic_input_b=_pick(data, "logic_input_b", "logicInputB"),
            logic_output=_pick(data, "logic_output", "logicOutput"),
            led_color=_pick(data, "led_color", "ledColor"),
            vf_override=_pick(data, "vf_override", "vfOverride"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize component to dictionary"""
        data = {
            "id": self.id,
            "type": self.type.value,
            "ports": [port.to_dict() for port in self.ports],
            "x": self.x,
            "y": self.y,
            "rotation": self.rotation,
        }
        optional = {
            "value": self.value,
            "label": self.label,
            "frequency": self.frequency,
            "phase": self.phase,
            "waveformType": self.waveform_type.value if self.waveform_type else None,
            "logicInputA": self.logic_input_a,
            "logicInputB": self.logic_input_b,
            "logicOutput": self.logic_output,
            "ledColor": self.led_color,
            "vfOverride": self.vf_override,
        }
        data.update({key: val for key, val in optional.items() if val is not None})
        if self.type == ComponentType.SWITCH:
            data["switchClosed"] = self.switch_closed
        return data


@dataclass
class Wire:
    """A wire joining two component ports"""
    id: str
    from_component_id: str
    from_port_id: str
    to_component_id: str
    to_port_id: str
    points: List[Dict[str, float]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Wire':
        return cls(
            id=str(data["id"]),
            from_component_id=str(_pick(data, "from_component_id", "fromComponentId")),
            from_port_id=str(_pick(data, "from_port_id", "fromPortId")),
            to_component_id=str(_pick(data, "to_component_id", "toComponentId")),
            to_port_id=str(_pick(data, "to_port_id", "toPortId")),
            points=list(data.get("points", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fromComponentId": self.from_component_id,
            "fromPortId": self.from_port_id,
            "toComponentId": self.to_component_id,
            "toPortId": self.to_port_id,
            "points": list(self.points),
        }


def port_key(component_id: str, port_id: str) -> str:
    """Key identifying a single component terminal."""
    return f"{component_id}:{port_id}"


def coerce_circuit(components, wires):
    """Accept components and wires either as model objects or editor dictionaries."""
    comps = [c if isinstance(c, Component) else Component.from_dict(c) for c in (components or [])]
    ws = [w if isinstance(w, Wire) else Wire.from_dict(w) for w in (wires or [])]
    return comps, ws
