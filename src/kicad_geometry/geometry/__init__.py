"""
Placement geometry: transforms, pin resolution and outlines.
"""

from .fonts import FONT_SCALE, PillowTextMetrics, TextMetrics
from .outline import JUNCTION_DIAMETER, NO_CONNECT_SIZE, OutlineEngine, outline
from .resolver import At, AtDot, AtPin, AtPoint, pin_position, resolve, symbol_transform
from .transform import MIRROR_MATRICES, Transform

__all__ = [
    "Transform",
    "MIRROR_MATRICES",
    "At",
    "AtPoint",
    "AtPin",
    "AtDot",
    "resolve",
    "pin_position",
    "symbol_transform",
    "OutlineEngine",
    "outline",
    "JUNCTION_DIAMETER",
    "NO_CONNECT_SIZE",
    "TextMetrics",
    "PillowTextMetrics",
    "FONT_SCALE",
]
