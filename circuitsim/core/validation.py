"""
Structural pre-checks run before any matrix is built.

Each check returns an error message or None; the analyses stop at the
first failing check and report it as an unsuccessful result.
"""

from typing import List, Optional

import networkx as nx

from .circuit import Component, ComponentType, SOURCE_TYPES, Wire, port_key

ERROR_EMPTY_CIRCUIT = "Circuit is empty"
ERROR_NO_GROUND = "Circuit has no ground (Ground) component"
ERROR_GROUND_NOT_CONNECTED = "Ground component is not connected to the circuit"
ERROR_NO_SOURCE = "Circuit has no power source (DC/AC Source)"
ERROR_NO_WIRES = "Circuit components are not connected (no wires)"
ERROR_NO_NODES = "No analysable nodes in the circuit (check that components are wired together)"
ERROR_SINGULAR = "Cannot solve circuit (singular matrix, circuit may be open or shorted)"


class CircuitValidator:
    """Structural validation of a schematic"""

    def __init__(self, components: List[Component], wires: List[Wire]):
        self.components = components
        self.wires = wires
        self.component_map = {c.id: c for c in components}

    def validate(self) -> Optional[str]:
        """Run every pre-check in order; return the first error message."""
        checks = [
            self._check_not_empty,
            self._check_has_ground,
            self._check_ground_connected,
            self._check_has_source,
            self._check_has_wires,
            self.validate_closed_loop,
        ]
        for check in checks:
            error = check()
            if error:
                return error
        return None

    def _check_not_empty(self):
        if not self.components:
            return ERROR_EMPTY_CIRCUIT

    def _check_has_ground(self):
        if not any(c.type == ComponentType.GROUND for c in self.components):
            return ERROR_NO_GROUND

    def _is_ground(self, component_id: str) -> bool:
        component = self.component_map.get(component_id)
        return component is not None and component.type == ComponentType.GROUND

    def _check_ground_connected(self):
        for wire in self.wires:
            from_ground = self._is_ground(wire.from_component_id)
            to_ground = self._is_ground(wire.to_component_id)
            if from_ground != to_ground:
                return None
        return ERROR_GROUND_NOT_CONNECTED

    def _check_has_source(self):
        if not any(c.type in SOURCE_TYPES for c in self.components):
            return ERROR_NO_SOURCE

    def _check_has_wires(self):
        if not self.wires:
            return ERROR_NO_WIRES

    def build_port_graph(self) -> nx.Graph:
        """
        Port-level connectivity: wires join ports, and every conducting
        component joins its own ports. Sources and open switches do not.
        """
        graph = nx.Graph()
        for component in self.components:
            graph.add_nodes_from(port_key(component.id, port.id) for port in component.ports)

        for wire in self.wires:
            from_key = port_key(wire.from_component_id, wire.from_port_id)
            to_key = port_key(wire.to_component_id, wire.to_port_id)
            if graph.has_node(from_key) and graph.has_node(to_key):
                graph.add_edge(from_key, to_key)

        for component in self.components:
            if component.type in SOURCE_TYPES or len(component.ports) < 2:
                continue
            if component.type == ComponentType.SWITCH and not component.switch_closed:
                continue
            keys = [port_key(component.id, port.id) for port in component.ports]
            for i, key in enumerate(keys):
                for other in keys[i + 1:]:
                    graph.add_edge(key, other)
        return graph

    def validate_closed_loop(self) -> Optional[str]:
        """
        With open switches present, every source's first terminal must still
        reach a ground terminal through conducting components.
        """
        open_switches = [c for c in self.components
                         if c.type == ComponentType.SWITCH and not c.switch_closed]
        if not open_switches:
            return None

        sources = [c for c in self.components if c.type in SOURCE_TYPES]
        ground_keys = {port_key(c.id, p.id) for c in self.components
                       if c.type == ComponentType.GROUND for p in c.ports}
        if not sources or not ground_keys:
            return None

        graph = self.build_port_graph()
        for source in sources:
            if len(source.ports) < 2:
                continue
            reachable = nx.node_connected_component(graph, port_key(source.id, source.ports[0].id))
            if not reachable & ground_keys:
                names = ", ".join(s.display_name for s in open_switches)
                return f"Circuit is open: switch {names} is open, the circuit cannot form a closed loop"
        return None


def validate_circuit(components: List[Component], wires: List[Wire]) -> Optional[str]:
    return CircuitValidator(components, wires).validate()


def validate_closed_loop(components: List[Component], wires: List[Wire]) -> Optional[str]:
    return CircuitValidator(components, wires).validate_closed_loop()
