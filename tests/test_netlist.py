"""Tests for netlist extraction."""

import pytest

from kicad_geometry.config import Config
from kicad_geometry.exceptions import LibraryNotFoundError
from kicad_geometry.geometry import AtPin, resolve
from kicad_geometry.netlist import (
    Netlist,
    NetNode,
    build_wire_graph,
    collect_connection_points,
    extract_netlist,
    net_group_name,
)
from kicad_geometry.schema import (
    Junction,
    LocalLabel,
    Pos,
    Pt,
    Schematic,
    SymbolInstance,
    Wire,
    point_key,
)


@pytest.fixture
def sch(netlist_schematic):
    return Schematic.load(netlist_schematic)


@pytest.fixture
def netlist(sch):
    return extract_netlist(sch)


class TestNetNames:
    """Names chosen for each connected group."""

    @pytest.mark.parametrize(
        "pt,expected",
        [
            ((207.01, 52.07), "R33_2__U7_6__C9_2__R36_1"),
            ((199.39, 52.07), "R33_2__U7_6__C9_2__R36_1"),
            ((207.01, 69.85), "R33_2__U7_6__C9_2__R36_1"),
            ((81.28, 102.87), "R7_2__R8_1__U4_3__RV3_2"),
            ((88.9, 95.25), "R7_2__R8_1__U4_3__RV3_2"),
            ((153.67, 148.59), "+15V"),
            ((81.28, 95.25), "+15V"),
            ((153.67, 163.83), "GND"),
            ((81.28, 114.3), "GND"),
            ((191.77, 52.07), "IN"),
            ((184.15, 52.07), "IN"),
            ((222.25, 49.53), "OUT"),
            ((214.63, 62.23), "OUT"),
            ((214.63, 69.85), "OUT"),
            ((104.14, 105.41), "U4_1"),
            ((207.01, 46.99), "U7_5"),
            ((85.09, 91.44), "RV3_1"),
        ],
    )
    def test_names(self, netlist, pt, expected):
        assert netlist.net_name(Pt(*pt)) == expected

    def test_power_beats_pins(self, netlist):
        """R7 pin 1 shares its point with a +15V power symbol."""
        net = netlist.nets_named("+15V")
        assert len(net) == 2
        refs = {n.reference for group in net for n in group.pins}
        assert refs == {"R7", "#PWR01", "#PWR03", "U7"}

    def test_excluded_symbol_has_no_net(self, netlist):
        assert netlist.net_name(Pt(20.32, 22.86)) is None

    def test_excluded_prefixes_can_be_cleared(self, sch):
        netlist = Netlist.from_schematic(sch, excluded_prefixes=())
        assert netlist.net_name(Pt(20.32, 22.86)) == "H1_1"

    def test_unconnected_point(self, netlist):
        assert netlist.net_name(Pt(0, 0)) is None

    def test_resolved_pins_match(self, sch, netlist):
        """Resolving a pin and looking up its net agree."""
        assert netlist.net_name(resolve(AtPin("U7", "7"), sch)) == "OUT"
        assert netlist.net_name(resolve(AtPin("U7", "4"), sch)) == "GND"
        assert netlist.net_name(resolve(AtPin("C9", "1"), sch)) == "OUT"

    def test_sort_pins(self, sch):
        netlist = Netlist.from_schematic(sch, sort_pins=True)
        assert netlist.net_name(Pt(207.01, 52.07)) == "C9_2__R33_2__R36_1__U7_6"
        assert netlist.net_name(Pt(81.28, 102.87)) == "R7_2__R8_1__RV3_2__U4_3"

    def test_config_settings(self, sch):
        config = Config()
        config.netlist.sort_pins = True
        config.netlist.excluded_prefixes = []
        netlist = extract_netlist(sch, config)
        assert netlist.net_name(Pt(20.32, 22.86)) == "H1_1"
        assert netlist.net_name(Pt(207.01, 52.07)) == "C9_2__R33_2__R36_1__U7_6"

    def test_custom_power_prefix(self, sch):
        """Without power recognition the pins name the net."""
        netlist = Netlist.from_schematic(sch, power_prefix="nothing:")
        assert netlist.net_name(Pt(153.67, 148.59)) == "U7_8__#PWR01_1"


class TestNetlistProperties:
    """Invariants that hold for any schematic."""

    def test_every_point_has_its_net_name(self, netlist):
        for net in netlist:
            for key in net.points:
                assert netlist.names[key] == net.name

    def test_points_are_disjoint(self, netlist):
        seen = set()
        for net in netlist:
            assert not seen & set(net.points)
            seen.update(net.points)

    def test_idempotent(self, sch):
        assert extract_netlist(sch).names == extract_netlist(sch).names

    def test_does_not_modify_schematic(self, sch):
        before = list(sch.items)
        extract_netlist(sch)
        assert sch.items == before

    def test_wire_graph_is_symmetric(self, sch):
        graph = build_wire_graph(sch)
        for a, neighbors in graph.items():
            for b in neighbors:
                assert a in graph[b]

    def test_net_count(self, netlist):
        names = [net.name for net in netlist]
        assert len(netlist) == len(names)
        assert names.count("GND") == 2
        assert "IN" in names and "OUT" in names


class TestConnectivityRules:
    """Connection only happens at shared points."""

    def test_wire_midpoint_does_not_connect(self):
        sch = Schematic(
            items=[
                Wire((Pt(0, 0), Pt(10, 0))),
                LocalLabel("A", Pos(5, 0)),
                LocalLabel("B", Pos(10, 0)),
            ]
        )
        netlist = extract_netlist(sch)
        assert netlist.net_name(Pt(5, 0)) == "A"
        assert netlist.net_name(Pt(0, 0)) == "B"

    def test_lone_junction_is_unnamed(self):
        netlist = extract_netlist(Schematic(items=[Junction(Pos(1, 1))]))
        assert len(netlist) == 0
        assert netlist.net_name(Pt(1, 1)) is None

    def test_first_label_wins(self):
        sch = Schematic(
            items=[
                LocalLabel("FIRST", Pos(0, 0)),
                Wire((Pt(0, 0), Pt(5, 0))),
                LocalLabel("SECOND", Pos(5, 0)),
            ]
        )
        assert extract_netlist(sch).net_name(Pt(5, 0)) == "FIRST"

    def test_quantized_endpoints_connect(self):
        sch = Schematic(
            items=[
                Wire((Pt(0, 0), Pt(5.0000001, 0))),
                LocalLabel("N", Pos(5, 0)),
            ]
        )
        assert extract_netlist(sch).net_name(Pt(0, 0)) == "N"

    def test_missing_library(self):
        sch = Schematic(items=[SymbolInstance(lib_id="Nope:Part")])
        with pytest.raises(LibraryNotFoundError):
            extract_netlist(sch)

    def test_external_library(self, external_lib_schematic, library_dir):
        sch = Schematic.load(external_lib_schematic, library_paths=[library_dir])
        netlist = extract_netlist(sch)
        assert netlist.net_name(Pt(50.8, 48.26)) == "TOP"
        assert netlist.net_name(Pt(50.8, 53.34)) == "R5_2"

    def test_derived_library_symbol(self, derived_symbol_schematic, library_dir):
        """Pins of an ``extends`` symbol come from its parent and join nets."""
        sch = Schematic.load(derived_symbol_schematic, library_paths=[library_dir])
        netlist = extract_netlist(sch)
        assert resolve(AtPin("U1", "1"), sch) == Pt(58.42, 50.8)
        assert netlist.net_name(Pt(58.42, 50.8)) == "VOUT"
        assert netlist.net_name(Pt(43.18, 53.34)) == "U1_2"
        assert netlist.net_name(Pt(43.18, 48.26)) == "U1_3"


class TestHelpers:
    def test_collect_connection_points_document_order(self, sch):
        points = collect_connection_points(sch)
        first = next(iter(points))
        assert first == point_key(Pt(191.77, 52.07))
        assert points[point_key(Pt(81.28, 95.25))][0].reference == "R7"
        assert points[point_key(Pt(81.28, 95.25))][1].power

    def test_net_group_name_priority(self):
        pin = NetNode(Pt(0, 0), "pin", reference="R1", pin_number="1")
        label = NetNode(Pt(0, 0), "label", text="SIG")
        power = NetNode(Pt(0, 0), "pin", reference="#PWR1", pin_number="1", text="VCC", power=True)
        assert net_group_name([pin, label, power]) == "VCC"
        assert net_group_name([pin, label]) == "SIG"
        assert net_group_name([pin]) == "R1_1"
        assert net_group_name([NetNode(Pt(0, 0), "junction")]) is None

    def test_sort_numeric_pins(self):
        nodes = [
            NetNode(Pt(0, 0), "pin", reference="U1", pin_number="10"),
            NetNode(Pt(0, 0), "pin", reference="U1", pin_number="9"),
        ]
        assert net_group_name(nodes) == "U1_10__U1_9"
        assert net_group_name(nodes, sort_pins=True) == "U1_9__U1_10"

    def test_str(self, netlist):
        lines = str(netlist).splitlines()
        assert lines[0] == "IN"
        assert lines[1] == "  R33.1 (191.77, 52.07)"
        assert "  IN (184.15, 52.07)" in lines
