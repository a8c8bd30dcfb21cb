"""
Print the bounding box of a schematic.

Usage:
    kicad-geometry bbox amp.kicad_sch
    kicad-geometry bbox amp.kicad_sch --items --format json
"""

from __future__ import annotations

import argparse
import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kicad_geometry.cli.utils import parse_paths
from kicad_geometry.config import Config
from kicad_geometry.geometry import OutlineEngine, PillowTextMetrics
from kicad_geometry.schema import Rect, Schematic, SymbolInstance


def add_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("schematic", help="Path to .kicad_sch file")
    parser.add_argument("--items", action="store_true", help="Also list every item's outline")
    parser.add_argument("--format", choices=["table", "json"], help="Output format")
    parser.add_argument(
        "--lib-path",
        action="append",
        dest="lib_paths",
        help="Directory with .kicad_sym libraries (repeatable)",
    )


def _rect_dict(rect: Rect) -> dict:
    return {
        "start": [round(rect.start.x, 4), round(rect.start.y, 4)],
        "end": [round(rect.end.x, 4), round(rect.end.y, 4)],
    }


def _describe(item) -> str:
    if isinstance(item, SymbolInstance):
        return f"symbol {item.reference}"
    text = getattr(item, "text", None)
    name = type(item).__name__.lower()
    return f"{name} {text}" if text else name


def run(args: argparse.Namespace, config: Config) -> int:
    sch = Schematic.load(args.schematic, library_paths=parse_paths(args.lib_paths))
    metrics = PillowTextMetrics(config.text.font_face, config.text.font_scale)
    engine = OutlineEngine.from_config(sch, metrics, config)

    outline = engine.schematic_outline()
    items = [(_describe(item), engine.outline(item)) for item in sch.items] if args.items else []

    fmt = args.format or config.defaults.format
    if fmt == "json":
        data = _rect_dict(outline)
        if args.items:
            data["items"] = [{"item": name, **_rect_dict(rect)} for name, rect in items]
        print(json.dumps(data, indent=2))
        return 0

    console = Console()
    console.print(
        f"[bold]{escape(args.schematic)}[/bold]: "
        f"({outline.start.x:.2f}, {outline.start.y:.2f}) - "
        f"({outline.end.x:.2f}, {outline.end.y:.2f})"
        f"  {outline.width:.2f} x {outline.height:.2f} mm"
    )
    if items:
        table = Table()
        table.add_column("Item")
        table.add_column("Start")
        table.add_column("End")
        for name, rect in items:
            table.add_row(
                escape(name),
                f"({rect.start.x:.2f}, {rect.start.y:.2f})",
                f"({rect.end.x:.2f}, {rect.end.y:.2f})",
            )
        console.print(table)
    return 0
