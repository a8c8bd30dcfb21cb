"""
Show sheet positions of symbol pins.

Usage:
    kicad-geometry pins amp.kicad_sch U1
    kicad-geometry pins amp.kicad_sch U1 1 2 3 --format json
"""

from __future__ import annotations

import argparse
import json
from typing import List

from rich.console import Console
from rich.table import Table

from kicad_geometry.cli.utils import parse_paths
from kicad_geometry.config import Config
from kicad_geometry.exceptions import LibraryNotFoundError, SymbolNotFoundError
from kicad_geometry.geometry import AtPin, pin_position, resolve
from kicad_geometry.schema import Schematic


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("schematic", help="Path to .kicad_sch file")
    parser.add_argument("reference", help="Symbol reference (e.g. U1)")
    parser.add_argument("pins", nargs="*", help="Pin numbers (default: all pins)")
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument(
        "--lib-path",
        action="append",
        dest="lib_paths",
        help="Directory with .kicad_sym libraries (repeatable)",
    )


def collect_positions(sch: Schematic, reference: str, pins: List[str]) -> List[dict]:
    """Pin positions of ``reference``; all pins of every placed unit when ``pins`` is empty."""
    rows = []
    if pins:
        for number in pins:
            pt = resolve(AtPin(reference, number), sch)
            unit = sch.pin_unit(reference, number)
            rows.append({"pin": number, "unit": unit, "x": pt.x, "y": pt.y})
        return rows

    placements = sch.symbols_by_reference(reference)
    if not placements:
        raise SymbolNotFoundError("Symbol not found", context={"reference": reference})

    for sym in placements:
        lib = sch.library_symbol(sym.lib_id)
        if lib is None:
            raise LibraryNotFoundError(
                "Library symbol not found", context={"reference": reference, "lib_id": sym.lib_id}
            )
        for pin in lib.pins(sym.unit):
            pt = pin_position(sym, pin)
            rows.append({"pin": pin.number, "unit": sym.unit, "x": pt.x, "y": pt.y})
    return rows


def run(args: argparse.Namespace, config: Config) -> int:
    sch = Schematic.load(args.schematic, library_paths=parse_paths(args.lib_paths))
    rows = collect_positions(sch, args.reference, args.pins)

    fmt = args.format or config.defaults.format
    if fmt == "json":
        data = [
            {**row, "reference": args.reference, "x": round(row["x"], 4), "y": round(row["y"], 4)}
            for row in rows
        ]
        print(json.dumps(data, indent=2))
        return 0

    console = Console()
    table = Table(title=f"Pins of {args.reference}")
    table.add_column("Pin")
    table.add_column("Unit", justify="right")
    table.add_column("X", justify="right")
    table.add_column("Y", justify="right")
    for row in rows:
        table.add_row(row["pin"], str(row["unit"]), f"{row['x']:.2f}", f"{row['y']:.2f}")
    console.print(table)
    return 0
