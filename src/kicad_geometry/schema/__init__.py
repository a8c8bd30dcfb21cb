"""
Typed schematic document model.
"""

from .effects import DEFAULT_FONT_SIZE, Effects, Font, Justify, Property
from .graphics import Arc, Circle, Curve, Graphic, GraphicText, Line, Polyline, Rectangle, Stroke
from .label import GlobalLabel, LocalLabel, Text
from .library import (
    LibraryPin,
    LibraryRepository,
    LibrarySymbol,
    LibraryUnit,
    SymbolLibrary,
    parse_unit_name,
)
from .point import PRECISION, Pos, Pt, Rect, bounding_rect, point_key, quantize
from .schematic import Schematic, SchematicItem
from .symbol import MIRROR_AXES, SymbolInstance, SymbolPin
from .wire import Junction, NoConnect, Wire

__all__ = [
    "Pt",
    "Pos",
    "Rect",
    "PRECISION",
    "quantize",
    "point_key",
    "bounding_rect",
    "Justify",
    "Font",
    "Effects",
    "Property",
    "DEFAULT_FONT_SIZE",
    "Stroke",
    "Arc",
    "Circle",
    "Curve",
    "Line",
    "Polyline",
    "Rectangle",
    "GraphicText",
    "Graphic",
    "LibraryPin",
    "LibraryUnit",
    "LibrarySymbol",
    "SymbolLibrary",
    "LibraryRepository",
    "parse_unit_name",
    "SymbolInstance",
    "SymbolPin",
    "MIRROR_AXES",
    "Wire",
    "Junction",
    "NoConnect",
    "LocalLabel",
    "GlobalLabel",
    "Text",
    "Schematic",
    "SchematicItem",
]
