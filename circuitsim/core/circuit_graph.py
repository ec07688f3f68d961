"""
Circuit graph builder.

Collapses wired component terminals into electrical nodes with a
union-find pass, then projects every component into a solver-facing
stamp with dense node indices and branch-current variable indices.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..config import AC_SOURCE_DEFAULTS, DEFAULT_COMPONENT_VALUES, LED_VF_DEFAULT, LED_VF_FALLBACK
from .circuit import (Component, ComponentType, LOGIC_GATE_TYPES, SOURCE_TYPES, DIODE_TYPES,
                      WaveformType, Wire, coerce_circuit, port_key)


GROUND_NODE_ID = "0"

# Components whose models stamp through a branch-current unknown
BRANCH_VARIABLE_TYPES = SOURCE_TYPES + DIODE_TYPES + LOGIC_GATE_TYPES + (ComponentType.INDUCTOR,)


class UnionFind:
    """Disjoint sets over string keys, stored as an arena of parent indices."""

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._keys: List[str] = []
        self._parent: List[int] = []

    def __contains__(self, key: str) -> bool:
        return key in self._index

    def add(self, key: str) -> int:
        if key not in self._index:
            self._index[key] = len(self._keys)
            self._keys.append(key)
            self._parent.append(len(self._parent))
        return self._index[key]

    def _find_index(self, i: int) -> int:
        root = i
        while self._parent[root] != root:
            root = self._parent[root]
        # Path compression
        while self._parent[i] != root:
            self._parent[i], i = root, self._parent[i]
        return root

    def find(self, key: str) -> str:
        return self._keys[self._find_index(self.add(key))]

    def union(self, a: str, b: str):
        """Attach the root of b under the root of a."""
        root_a = self._find_index(self.add(a))
        root_b = self._find_index(self.add(b))
        if root_a != root_b:
            self._parent[root_b] = root_a

    def connected(self, a: str, b: str) -> bool:
        return self.find(a) == self.find(b)


@dataclass
class CircuitNode:
    id: str
    connected_ports: List[Tuple[str, str]] = field(default_factory=list)
    is_ground: bool = False


@dataclass
class ComponentStamp:
    """Solver-facing projection of a component"""
    component_id: str
    type: ComponentType
    node1_index: int
    node2_index: int
    value: float
    current_var_index: Optional[int] = None
    frequency: Optional[float] = None
    phase: Optional[float] = None
    waveform_type: Optional[WaveformType] = None
    switch_closed: Optional[bool] = None
    output_node_index: Optional[int] = None
    wired_inputs: Tuple[str, ...] = ()
    logic_input_a: Optional[bool] = None
    logic_input_b: Optional[bool] = None
    label: str = ""


def resolve_component_value(component: Component) -> float:
    """Engineering value of a component, falling back to per-type defaults."""
    if component.type == ComponentType.LED:
        if component.vf_override is not None:
            return float(component.vf_override)
        if component.led_color and component.led_color.lower() in LED_VF_DEFAULT:
            return LED_VF_DEFAULT[component.led_color.lower()]
        if component.value is not None:
            return float(component.value)
        return LED_VF_FALLBACK
    if component.value is not None:
        return float(component.value)
    return DEFAULT_COMPONENT_VALUES.get(component.type.value, 0.0)


class CircuitGraph:
    """Electrical nodes and component stamps for one schematic"""

    def __init__(self, components: List[Component], wires: List[Wire]):
        self.components = components
        self.wires = wires
        self.component_map: Dict[str, Component] = {c.id: c for c in components}
        self.nodes: Dict[str, CircuitNode] = {}
        self.node_index: Dict[str, int] = {}
        self.port_nodes: Dict[str, str] = {}
        self.stamps: List[ComponentStamp] = []
        self.node_count = 0
        self.branch_count = 0

        self._build_nodes()
        self._build_stamps()

    @classmethod
    def build(cls, components, wires) -> 'CircuitGraph':
        components, wires = coerce_circuit(components, wires)
        return cls(components, wires)

    def _build_nodes(self):
        uf = UnionFind()
        for component in self.components:
            for port in component.ports:
                uf.add(port_key(component.id, port.id))

        for wire in self.wires:
            from_key = port_key(wire.from_component_id, wire.from_port_id)
            to_key = port_key(wire.to_component_id, wire.to_port_id)
            if from_key in uf and to_key in uf:
                uf.union(from_key, to_key)

        # Every ground component shares the single reference node
        ground_keys = [port_key(c.id, p.id) for c in self.components
                       if c.type == ComponentType.GROUND for p in c.ports]
        for key in ground_keys[1:]:
            uf.union(ground_keys[0], key)
        ground_root = uf.find(ground_keys[0]) if ground_keys else None

        for component in self.components:
            for port in component.ports:
                key = port_key(component.id, port.id)
                root = uf.find(key)
                is_ground = root == ground_root
                node_id = GROUND_NODE_ID if is_ground else root

                node = self.nodes.get(node_id)
                if node is None:
                    node = CircuitNode(id=node_id, is_ground=is_ground)
                    self.nodes[node_id] = node
                    if not is_ground:
                        self.node_index[node_id] = len(self.node_index)
                node.connected_ports.append((component.id, port.id))
                self.port_nodes[key] = node_id

        self.node_count = len(self.node_index)

    def _build_stamps(self):
        for component in self.components:
            if component.type == ComponentType.GROUND or len(component.ports) < 2:
                continue
            stamp = ComponentStamp(
                component_id=component.id,
                type=component.type,
                node1_index=self.port_node_index(component.id, component.ports[0].id),
                node2_index=self.port_node_index(component.id, component.ports[1].id),
                value=resolve_component_value(component),
                label=component.display_name,
            )

            if component.type == ComponentType.AC_SOURCE:
                stamp.frequency = (component.frequency if component.frequency is not None
                                   else AC_SOURCE_DEFAULTS['frequency'])
                stamp.phase = component.phase if component.phase is not None else AC_SOURCE_DEFAULTS['phase']
                stamp.waveform_type = component.waveform_type or WaveformType(AC_SOURCE_DEFAULTS['waveform_type'])
            elif component.type == ComponentType.SWITCH:
                stamp.switch_closed = component.switch_closed
            elif component.type in LOGIC_GATE_TYPES:
                self._resolve_gate_ports(component, stamp)

            if component.type in BRANCH_VARIABLE_TYPES:
                stamp.current_var_index = self.branch_count
                self.branch_count += 1

            self.stamps.append(stamp)

    def _resolve_gate_ports(self, component: Component, stamp: ComponentStamp):
        port_a = component.get_port('A') or component.ports[0]
        port_y = component.get_port('Y') or component.ports[-1]
        port_b = component.get_port('B') if component.type != ComponentType.LOGIC_NOT else None

        stamp.node1_index = self.port_node_index(component.id, port_a.id)
        stamp.node2_index = self.port_node_index(component.id, port_b.id) if port_b else -1
        stamp.output_node_index = self.port_node_index(component.id, port_y.id)
        stamp.wired_inputs = tuple(name for name, port in (('A', port_a), ('B', port_b))
                                   if port is not None and self.is_port_wired(component.id, port.id))
        stamp.logic_input_a = component.logic_input_a
        stamp.logic_input_b = component.logic_input_b

    def port_node_id(self, component_id: str, port_id: str) -> Optional[str]:
        return self.port_nodes.get(port_key(component_id, port_id))

    def port_node_index(self, component_id: str, port_id: str) -> int:
        """Dense index of the port's node; -1 for ground or an unknown port."""
        node_id = self.port_node_id(component_id, port_id)
        if node_id is None or node_id == GROUND_NODE_ID:
            return -1
        return self.node_index[node_id]

    def is_port_wired(self, component_id: str, port_id: str) -> bool:
        """True when the port shares its node with another terminal."""
        node_id = self.port_node_id(component_id, port_id)
        return node_id is not None and len(self.nodes[node_id].connected_ports) > 1

    def has_ground(self) -> bool:
        return GROUND_NODE_ID in self.nodes

    def node_voltages(self, x) -> Dict[str, float]:
        """Map node ids to their solved voltages; the ground node is exactly 0."""
        voltages = {node_id: x[index] for node_id, index in self.node_index.items()}
        if self.has_ground():
            voltages[GROUND_NODE_ID] = 0.0
        return voltages

    def port_voltages(self, x, wired_only: bool = True) -> Dict[Tuple[str, str], float]:
        """Voltage at every (component_id, port_id), optionally only for wired ports."""
        voltages = {}
        for node_id, node in self.nodes.items():
            if wired_only and len(node.connected_ports) < 2:
                continue
            voltage = 0.0 if node.is_ground else x[self.node_index[node_id]]
            for port in node.connected_ports:
                voltages[port] = voltage
        return voltages

    def stamps_of_type(self, *types: ComponentType) -> List[ComponentStamp]:
        return [stamp for stamp in self.stamps if stamp.type in types]


def build_circuit_graph(components, wires) -> CircuitGraph:
    return CircuitGraph.build(components, wires)
