"""
kicad-geometry: placement geometry and connectivity for KiCad schematics.

Resolves where symbol pins land on the sheet, computes outlines of
schematic items, and extracts a named netlist from wires, junctions,
labels and power symbols, all without a running KiCad instance.

Modules:
    core: S-expression parsing and file loading
    schema: Typed schematic and symbol-library model
    geometry: Transforms, pin position resolution and outlines
    netlist: Connectivity extraction and net naming

Quick Start::

    from kicad_geometry import AtPin, Schematic, extract_netlist, resolve

    sch = Schematic.load("amp.kicad_sch")
    print(resolve(AtPin("U1", "3"), sch))

    netlist = extract_netlist(sch)
    print(netlist.net_name(resolve(AtPin("U1", "3"), sch)))
"""

__version__ = "0.1.0"

from kicad_geometry.config import Config
from kicad_geometry.core.sexp import SExp, parse_sexp
from kicad_geometry.exceptions import (
    KiCadGeometryError,
    LibraryNotFoundError,
    PinNotFoundError,
    PinUnitNotFoundError,
    ResolveError,
    SymbolNotFoundError,
    UnsupportedAngleError,
    UnsupportedPositionError,
)
from kicad_geometry.geometry import (
    AtDot,
    AtPin,
    AtPoint,
    OutlineEngine,
    PillowTextMetrics,
    Transform,
    outline,
    resolve,
)
from kicad_geometry.logging import disable_verbose, enable_verbose
from kicad_geometry.netlist import Net, Netlist, extract_netlist
from kicad_geometry.schema import Pos, Pt, Rect, Schematic, SymbolInstance

__all__ = [
    "__version__",
    "Config",
    "SExp",
    "parse_sexp",
    "Schematic",
    "SymbolInstance",
    "Pt",
    "Pos",
    "Rect",
    "Transform",
    "AtPoint",
    "AtPin",
    "AtDot",
    "resolve",
    "OutlineEngine",
    "PillowTextMetrics",
    "outline",
    "Net",
    "Netlist",
    "extract_netlist",
    "enable_verbose",
    "disable_verbose",
    "KiCadGeometryError",
    "ResolveError",
    "PinUnitNotFoundError",
    "SymbolNotFoundError",
    "LibraryNotFoundError",
    "PinNotFoundError",
    "UnsupportedPositionError",
    "UnsupportedAngleError",
]
