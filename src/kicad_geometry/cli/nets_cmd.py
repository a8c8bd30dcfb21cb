"""
List the nets of a schematic.

Usage:
    kicad-geometry nets amp.kicad_sch
    kicad-geometry nets amp.kicad_sch --net +15V --format json
"""

from __future__ import annotations

import argparse
import json
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kicad_geometry.cli.utils import parse_paths
from kicad_geometry.config import Config
from kicad_geometry.exceptions import NetNotFoundError
from kicad_geometry.netlist import Net, Netlist, extract_netlist
from kicad_geometry.schema import Schematic


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("schematic", help="Path to .kicad_sch file")
    parser.add_argument("--net", help="Only show nets with this name")
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument(
        "--lib-path",
        action="append",
        dest="lib_paths",
        help="Directory with .kicad_sym libraries (repeatable)",
    )


def run(args: argparse.Namespace, config: Config) -> int:
    sch = Schematic.load(args.schematic, library_paths=parse_paths(args.lib_paths))
    netlist = extract_netlist(sch, config)

    nets = netlist.nets_named(args.net) if args.net else netlist.nets
    if args.net and not nets:
        names = sorted({net.name for net in netlist})
        raise NetNotFoundError(
            f"Net '{args.net}' not found",
            context={"schematic": args.schematic, "nets": len(names)},
            suggestions=[f"Known nets: {', '.join(names[:10])}"] if names else None,
        )

    fmt = args.format or config.defaults.format
    if fmt == "json":
        print(json.dumps(nets_to_dict(nets), indent=2))
    else:
        output_table(netlist, nets, args.schematic)
    return 0


def nets_to_dict(nets: List[Net]) -> dict:
    return {
        "nets": [
            {
                "name": net.name,
                "nodes": [
                    {
                        "type": node.type,
                        "reference": node.reference,
                        "pin": node.pin_number,
                        "text": node.text,
                        "x": round(node.point.x, 4),
                        "y": round(node.point.y, 4),
                    }
                    for node in net.nodes
                ],
            }
            for net in nets
        ]
    }


def output_table(netlist: Netlist, nets: List[Net], filename: str) -> None:
    console = Console()
    table = Table(title=f"Nets: {escape(filename)}")
    table.add_column("Net", style="bold")
    table.add_column("Pins", justify="right")
    table.add_column("Members")

    for net in nets:
        members = ", ".join(
            f"{n.reference}.{n.pin_number}" if n.is_pin else n.type for n in net.nodes
        )
        table.add_row(escape(net.name), str(net.pin_count), escape(members))

    console.print(table)
    console.print(f"{len(nets)} of {len(netlist)} nets")
