"""
Netlist extraction from schematic geometry.

Connectivity is derived purely from coordinates: wire endpoints, pin
positions, junctions, no-connect flags and labels that share a quantized
point are connected, and wires join their two endpoints.

Each connected group gets one name, chosen in priority order:

1. the Value of a power symbol on the net ("+15V", "GND")
2. the text of a local or global label on the net
3. ``{reference}_{pin}`` of every pin on the net joined with ``__``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from kicad_geometry.exceptions import LibraryNotFoundError
from kicad_geometry.geometry.resolver import pin_position
from kicad_geometry.schema.label import GlobalLabel, LocalLabel
from kicad_geometry.schema.point import PointKey, Pt, point_key
from kicad_geometry.schema.symbol import SymbolInstance
from kicad_geometry.schema.wire import Junction, NoConnect

if TYPE_CHECKING:
    from kicad_geometry.config import Config
    from kicad_geometry.schema.schematic import Schematic

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDED_PREFIXES = ("Mechanical:",)
DEFAULT_POWER_PREFIX = "power:"

NODE_PIN = "pin"
NODE_JUNCTION = "junction"
NODE_NO_CONNECT = "no_connect"
NODE_LABEL = "label"
NODE_GLOBAL_LABEL = "global_label"

LABEL_TYPES = (NODE_LABEL, NODE_GLOBAL_LABEL)


@dataclass(frozen=True)
class NetNode:
    """A connection point on a net."""

    point: Pt
    type: str  # pin, junction, no_connect, label, global_label
    reference: str = ""
    pin_number: str = ""
    text: str = ""  # label text, or symbol Value for pins
    lib_id: str = ""
    power: bool = False

    @property
    def is_pin(self) -> bool:
        return self.type == NODE_PIN

    @property
    def is_label(self) -> bool:
        return self.type in LABEL_TYPES

    def __str__(self) -> str:
        if self.is_pin:
            what = f"{self.reference}.{self.pin_number}"
        elif self.is_label:
            what = self.text
        else:
            what = self.type
        return f"{what} ({self.point.x:.2f}, {self.point.y:.2f})"


@dataclass
class Net:
    """One connected group with its name."""

    name: str
    nodes: List[NetNode] = field(default_factory=list)
    points: List[PointKey] = field(default_factory=list)

    @property
    def pins(self) -> List[NetNode]:
        return [n for n in self.nodes if n.is_pin]

    @property
    def pin_count(self) -> int:
        return len(self.pins)

    def __repr__(self) -> str:
        return f"Net({self.name!r}, {self.pin_count} pins)"


def build_wire_graph(schematic: Schematic) -> Dict[PointKey, List[PointKey]]:
    """Adjacency of wire endpoints; every wire adds an edge in both directions."""
    graph: Dict[PointKey, List[PointKey]] = {}
    for wire in schematic.wires:
        a, b = point_key(wire.pts[0]), point_key(wire.pts[1])
        graph.setdefault(a, []).append(b)
        graph.setdefault(b, []).append(a)
    return graph


def collect_connection_points(
    schematic: Schematic,
    excluded_prefixes: Sequence[str] = DEFAULT_EXCLUDED_PREFIXES,
    power_prefix: str = DEFAULT_POWER_PREFIX,
) -> Dict[PointKey, List[NetNode]]:
    """
    Map every connection point to the nodes sitting on it.

    Items are visited in document order, so the map's insertion order is
    stable for a given file.

    Raises:
        LibraryNotFoundError: A placed symbol's library definition is missing
    """
    points: Dict[PointKey, List[NetNode]] = {}

    def add(node: NetNode) -> None:
        points.setdefault(point_key(node.point), []).append(node)

    for item in schematic.items:
        if isinstance(item, SymbolInstance):
            for node in _pin_nodes(schematic, item, excluded_prefixes, power_prefix):
                add(node)
        elif isinstance(item, Junction):
            add(NetNode(item.pos.pt, NODE_JUNCTION))
        elif isinstance(item, NoConnect):
            add(NetNode(item.pos.pt, NODE_NO_CONNECT))
        elif isinstance(item, LocalLabel):
            add(NetNode(item.pos.pt, NODE_LABEL, text=item.text))
        elif isinstance(item, GlobalLabel):
            add(NetNode(item.pos.pt, NODE_GLOBAL_LABEL, text=item.text))

    return points


def _pin_nodes(
    schematic: Schematic,
    symbol: SymbolInstance,
    excluded_prefixes: Sequence[str],
    power_prefix: str,
) -> Iterable[NetNode]:
    if any(symbol.lib_id.startswith(prefix) for prefix in excluded_prefixes):
        logger.debug("Skipping %s (%s)", symbol.reference, symbol.lib_id)
        return []

    lib = schematic.library_symbol(symbol.lib_id)
    if lib is None:
        raise LibraryNotFoundError(
            "Library symbol not found",
            context={"reference": symbol.reference, "lib_id": symbol.lib_id},
            suggestions=["Embed the symbol in lib_symbols or add a library search path"],
        )

    power = symbol.lib_id.startswith(power_prefix)
    return [
        NetNode(
            pin_position(symbol, pin),
            NODE_PIN,
            reference=symbol.reference,
            pin_number=pin.number,
            text=symbol.value,
            lib_id=symbol.lib_id,
            power=power,
        )
        for pin in lib.pins(symbol.unit)
    ]


def _walk(
    seed: PointKey, graph: Dict[PointKey, List[PointKey]], visited: Set[PointKey]
) -> List[PointKey]:
    """Depth-first pre-order walk over wires from ``seed``, marking ``visited``."""
    order = []
    stack = [seed]
    while stack:
        key = stack.pop()
        if key in visited:
            continue
        visited.add(key)
        order.append(key)
        neighbors = [n for n in graph.get(key, ()) if n not in visited]
        stack.extend(reversed(neighbors))
    return order


def _pin_sort_key(node: NetNode) -> Tuple[str, int, str]:
    number = node.pin_number
    return (node.reference, int(number) if number.isdigit() else -1, number)


def net_group_name(nodes: Sequence[NetNode], sort_pins: bool = False) -> Optional[str]:
    """
    Name a connected group.

    Returns None for groups without pins or labels (e.g. a lone junction).
    """
    for node in nodes:
        if node.is_pin and node.power:
            return node.text
    for node in nodes:
        if node.is_label:
            return node.text

    pins = [n for n in nodes if n.is_pin]
    if not pins:
        return None
    if sort_pins:
        pins = sorted(pins, key=_pin_sort_key)
    return "__".join(f"{n.reference}_{n.pin_number}" for n in pins)


class Netlist:
    """
    Connected groups of a schematic and their names.

    Example::

        netlist = Netlist.from_schematic(sch)
        netlist.net_name(Pt(81.28, 102.87))   # "R7_2__R8_1__U4_3__RV3_2"
    """

    def __init__(self, nets: List[Net]):
        self._nets = nets
        self._names: Dict[PointKey, str] = {}
        for net in nets:
            for key in net.points:
                self._names[key] = net.name

    @classmethod
    def from_schematic(
        cls,
        schematic: Schematic,
        excluded_prefixes: Sequence[str] = DEFAULT_EXCLUDED_PREFIXES,
        power_prefix: str = DEFAULT_POWER_PREFIX,
        sort_pins: bool = False,
    ) -> Netlist:
        """
        Extract the netlist.

        Args:
            schematic: Source schematic, not modified
            excluded_prefixes: lib_id prefixes whose symbols have no pins on nets
            power_prefix: lib_id prefix of power symbols
            sort_pins: Order synthesized names by reference and pin number
                instead of encounter order
        """
        graph = build_wire_graph(schematic)
        points = collect_connection_points(schematic, excluded_prefixes, power_prefix)

        visited: Set[PointKey] = set()
        nets: List[Net] = []
        for seed in points:
            if seed in visited:
                continue
            touched = _walk(seed, graph, visited)
            nodes = [node for key in touched for node in points.get(key, ())]
            name = net_group_name(nodes, sort_pins=sort_pins)
            if name is None:
                logger.debug("Unnamed group at %s with %d nodes", seed, len(nodes))
                continue
            nets.append(Net(name=name, nodes=nodes, points=touched))

        logger.debug(
            "Extracted %d nets from %d connection points and %d wire ends",
            len(nets),
            len(points),
            len(graph),
        )
        return cls(nets)

    def net_name(self, pt: Pt) -> Optional[str]:
        """Name of the net through ``pt``, or None if nothing connects there."""
        return self._names.get(point_key(pt))

    @property
    def names(self) -> Dict[PointKey, str]:
        """Quantized point to net name, for every point on a named net."""
        return dict(self._names)

    @property
    def nets(self) -> List[Net]:
        return list(self._nets)

    def nets_named(self, name: str) -> List[Net]:
        """All groups carrying ``name``; separate groups may share a power name."""
        return [net for net in self._nets if net.name == name]

    def __len__(self) -> int:
        return len(self._nets)

    def __iter__(self):
        return iter(self._nets)

    def __str__(self) -> str:
        lines = []
        for net in self._nets:
            lines.append(net.name)
            lines.extend(f"  {node}" for node in net.nodes)
        return "\n".join(lines)


def extract_netlist(schematic: Schematic, config: Optional[Config] = None) -> Netlist:
    """Extract the netlist using the ``[netlist]`` config settings."""
    if config is None:
        return Netlist.from_schematic(schematic)
    return Netlist.from_schematic(
        schematic,
        excluded_prefixes=tuple(config.netlist.excluded_prefixes),
        power_prefix=config.netlist.power_prefix,
        sort_pins=config.netlist.sort_pins,
    )
