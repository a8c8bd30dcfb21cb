"""
Bounding rectangles of schematic items.

Each item kind has its own rule. Text boxes depend on the measured text
size, the rotation angle and the justification flags. Symbols are the
union of their active-unit graphics and pins after placement.

Example::

    from kicad_geometry.geometry import OutlineEngine, PillowTextMetrics

    engine = OutlineEngine(schematic, PillowTextMetrics())
    view = engine.schematic_outline()
    u1_box = engine.outline(schematic.symbol("U1", 1))
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, List, Optional, Union

from kicad_geometry.exceptions import LibraryNotFoundError, UnsupportedAngleError
from kicad_geometry.schema.effects import Effects, Justify, Property
from kicad_geometry.schema.graphics import (
    Arc,
    Circle,
    Curve,
    Graphic,
    Line,
    Polyline,
    Rectangle,
)
from kicad_geometry.schema.label import GlobalLabel, LocalLabel, Text
from kicad_geometry.schema.point import Pos, Pt, Rect, bounding_rect
from kicad_geometry.schema.symbol import SymbolInstance
from kicad_geometry.schema.wire import Junction, NoConnect, Wire

from .fonts import TextMetrics
from .resolver import pin_position, symbol_transform
from .transform import Transform

if TYPE_CHECKING:
    from kicad_geometry.config import Config
    from kicad_geometry.schema.schematic import Schematic, SchematicItem

logger = logging.getLogger(__name__)

JUNCTION_DIAMETER = 0.9144
NO_CONNECT_SIZE = 0.6096


def _arc_points(arc: Arc) -> List[Pt]:
    """
    Start, mid and end of an arc plus every axis extreme of its circle
    that the sweep passes through.
    """
    (x1, y1), (x2, y2), (x3, y3) = arc.start, arc.mid, arc.end
    d = 2 * (x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2))
    points = [arc.start, arc.mid, arc.end]
    if abs(d) < 1e-12:
        # collinear, drawn as a straight segment
        return points

    s1, s2, s3 = x1 * x1 + y1 * y1, x2 * x2 + y2 * y2, x3 * x3 + y3 * y3
    cx = (s1 * (y2 - y3) + s2 * (y3 - y1) + s3 * (y1 - y2)) / d
    cy = (s1 * (x3 - x2) + s2 * (x1 - x3) + s3 * (x2 - x1)) / d
    r = math.hypot(x1 - cx, y1 - cy)

    def ccw_from(origin: float, angle: float) -> float:
        return (angle - origin) % (2 * math.pi)

    a_start = math.atan2(y1 - cy, x1 - cx)
    a_mid = math.atan2(y2 - cy, x2 - cx)
    a_end = math.atan2(y3 - cy, x3 - cx)
    if ccw_from(a_start, a_mid) <= ccw_from(a_start, a_end):
        first, sweep = a_start, ccw_from(a_start, a_end)
    else:
        first, sweep = a_end, ccw_from(a_end, a_start)

    for quarter in range(4):
        angle = quarter * math.pi / 2
        if ccw_from(first, angle) <= sweep:
            points.append(Pt(cx + r * math.cos(angle), cy + r * math.sin(angle)))
    return points


def _graphic_points(graphic: Graphic) -> List[Pt]:
    """Local points whose bounding box covers a graphic primitive."""
    if isinstance(graphic, Circle):
        r = graphic.radius
        c = graphic.center
        return [Pt(c.x - r, c.y - r), Pt(c.x + r, c.y + r)]
    if isinstance(graphic, (Line, Polyline)):
        return list(graphic.pts)
    if isinstance(graphic, Rectangle):
        return [graphic.start, graphic.end]
    if isinstance(graphic, Arc):
        return _arc_points(graphic)
    if isinstance(graphic, Curve):
        # a bezier lies inside the hull of its control points
        return list(graphic.pts)
    return []


class OutlineEngine:
    """
    Computes outlines for the items of one schematic.

    Args:
        schematic: The schematic the items belong to (for library lookups)
        metrics: Text measurement service
        junction_diameter: Diameter used for junctions that declare 0
        no_connect_size: Half-size of the no-connect square
    """

    def __init__(
        self,
        schematic: Schematic,
        metrics: TextMetrics,
        junction_diameter: float = JUNCTION_DIAMETER,
        no_connect_size: float = NO_CONNECT_SIZE,
    ):
        self.schematic = schematic
        self.metrics = metrics
        self.junction_diameter = junction_diameter
        self.no_connect_size = no_connect_size

    @classmethod
    def from_config(
        cls, schematic: Schematic, metrics: TextMetrics, config: Config
    ) -> OutlineEngine:
        return cls(
            schematic,
            metrics,
            junction_diameter=config.outline.junction_diameter,
            no_connect_size=config.outline.no_connect_size,
        )

    def outline(self, item: Union[SchematicItem, Property]) -> Rect:
        """
        Outline of a single item.

        Raises:
            UnsupportedAngleError: Text rotated by a non-cardinal angle
            LibraryNotFoundError: A symbol's library definition is missing
            TypeError: For objects that have no outline
        """
        if isinstance(item, Junction):
            return self.junction_outline(item)
        if isinstance(item, NoConnect):
            return self.no_connect_outline(item)
        if isinstance(item, Wire):
            return Rect(item.pts[0], item.pts[1])
        if isinstance(item, (LocalLabel, GlobalLabel, Text)):
            return self.text_outline(item.text, item.pos, item.effects)
        if isinstance(item, Property):
            return self.text_outline(item.value, item.pos, item.effects)
        if isinstance(item, SymbolInstance):
            return self.symbol_outline(item)
        raise TypeError(f"No outline rule for {type(item).__name__}")

    def junction_outline(self, junction: Junction) -> Rect:
        diameter = junction.diameter or self.junction_diameter
        d = diameter / 2
        p = junction.pos
        return Rect(Pt(p.x - d, p.y - d), Pt(p.x + d, p.y + d))

    def no_connect_outline(self, no_connect: NoConnect) -> Rect:
        s = self.no_connect_size
        p = no_connect.pos
        return Rect(Pt(p.x - s, p.y - s), Pt(p.x + s, p.y + s))

    def text_outline(self, text: str, pos: Pos, effects: Optional[Effects] = None) -> Rect:
        """
        Box of a text anchored at ``pos``.

        The box is flush against the anchor on a justified side and
        centered on the anchor otherwise. At 180 degrees the measured size
        is first rotated into sheet space, which makes it negative; the box
        is then built backwards from the computed corner.
        """
        effects = effects or Effects()
        w, h = self.metrics.measure(text, effects.font.face, effects.font.height)
        justify = effects.justify
        right = Justify.RIGHT in justify
        left = Justify.LEFT in justify
        top = Justify.TOP in justify
        bottom = Justify.BOTTOM in justify

        if pos.angle == 0:
            x = pos.x - w if right else pos.x if left else pos.x - w / 2
            y = pos.y if top else pos.y - h if bottom else pos.y - h / 2
        elif pos.angle in (90, 270):
            x = pos.x if right else pos.x - w if left else pos.x - w / 2
            y = pos.y if top else pos.y - h if bottom else pos.y - h / 2
        elif pos.angle == 180:
            w, h = (float(v) for v in Transform().rotation(180).apply([(w, h)])[0])
            x = pos.x if right else pos.x - w if left else pos.x - w / 2
            y = pos.y + h if top else pos.y if bottom else pos.y - h / 2
        else:
            raise UnsupportedAngleError(pos.angle, context={"text": text})

        if w < 0 or h < 0:
            return Rect(Pt(x - abs(w), y - abs(h)), Pt(x, y))
        return Rect(Pt(x, y), Pt(x + w, y + h))

    def symbol_outline(self, symbol: SymbolInstance) -> Rect:
        """Union of the placed unit's graphics and pin positions."""
        lib = self.schematic.library_symbol(symbol.lib_id)
        if lib is None:
            raise LibraryNotFoundError(
                "Library symbol not found",
                context={"reference": symbol.reference, "lib_id": symbol.lib_id},
            )

        local: List[Pt] = []
        for graphic in lib.graphics(symbol.unit):
            local.extend(_graphic_points(graphic))

        points: List[Pt] = []
        if local:
            placed = symbol_transform(symbol).apply(local)
            points.extend(Pt(float(x), float(y)) for x, y in placed)
        points.extend(pin_position(symbol, pin) for pin in lib.pins(symbol.unit))

        if not points:
            logger.debug("%s has no graphics or pins in unit %d", symbol.reference, symbol.unit)
            return Rect(symbol.pos.pt, symbol.pos.pt)
        return bounding_rect(points)

    def item_outlines(self) -> List[Rect]:
        """Outlines of every item plus visible symbol properties."""
        rects = []
        for item in self.schematic.items:
            rects.append(self.outline(item))
            if isinstance(item, SymbolInstance):
                rects.extend(self.outline(prop) for prop in item.visible_properties())
        return rects

    def schematic_outline(self) -> Rect:
        """Tight normalized box around the whole sheet."""
        rects = self.item_outlines()
        if not rects:
            return Rect(Pt(), Pt())
        return bounding_rect(p for r in rects for p in (r.start, r.end))


def outline(
    item: Union[SchematicItem, Property, Schematic],
    schematic: Schematic,
    metrics: TextMetrics,
) -> Rect:
    """Outline of ``item``; passing the schematic itself outlines the whole sheet."""
    engine = OutlineEngine(schematic, metrics)
    if item is schematic:
        return engine.schematic_outline()
    return engine.outline(item)
