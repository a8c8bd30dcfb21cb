"""
Graphic primitives of library symbols, in local symbol coordinates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from .effects import Effects
from .point import Pos, Pt

if TYPE_CHECKING:
    from kicad_geometry.core.sexp import SExp


@dataclass(frozen=True)
class Stroke:
    """Line style. Primitives without a stroke node get the default."""

    width: float = 0.0
    type: str = "default"

    @classmethod
    def from_sexp(cls, sexp: Optional[SExp]) -> Stroke:
        if sexp is None:
            return cls()
        width = 0.0
        if w := sexp.find("width"):
            width = w.get_float(0) or 0.0
        stroke_type = "default"
        if t := sexp.find("type"):
            stroke_type = t.get_string(0) or "default"
        return cls(width=width, type=stroke_type)


def _fill(sexp: SExp) -> str:
    if fill := sexp.find("fill"):
        if t := fill.find("type"):
            return t.get_string(0) or "none"
    return "none"


def _pts(sexp: SExp) -> Tuple[Pt, ...]:
    if pts := sexp.find("pts"):
        return tuple(Pt.from_sexp(xy) for xy in pts.find_all("xy"))
    return ()


def _pt(sexp: SExp, tag: str) -> Pt:
    node = sexp.find(tag)
    return Pt.from_sexp(node) if node is not None else Pt()


@dataclass(frozen=True)
class Arc:
    """Three-point arc."""

    start: Pt
    mid: Pt
    end: Pt
    stroke: Stroke = field(default_factory=Stroke)
    fill: str = "none"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Arc:
        return cls(
            start=_pt(sexp, "start"),
            mid=_pt(sexp, "mid"),
            end=_pt(sexp, "end"),
            stroke=Stroke.from_sexp(sexp.find("stroke")),
            fill=_fill(sexp),
        )


@dataclass(frozen=True)
class Circle:
    center: Pt
    radius: float
    stroke: Stroke = field(default_factory=Stroke)
    fill: str = "none"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Circle:
        radius = 0.0
        if r := sexp.find("radius"):
            radius = r.get_float(0) or 0.0
        return cls(
            center=_pt(sexp, "center"),
            radius=radius,
            stroke=Stroke.from_sexp(sexp.find("stroke")),
            fill=_fill(sexp),
        )


@dataclass(frozen=True)
class Curve:
    """Cubic bezier given by its control points."""

    pts: Tuple[Pt, ...]
    stroke: Stroke = field(default_factory=Stroke)
    fill: str = "none"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Curve:
        return cls(pts=_pts(sexp), stroke=Stroke.from_sexp(sexp.find("stroke")), fill=_fill(sexp))


@dataclass(frozen=True)
class Line:
    """Straight segment between two or more points."""

    pts: Tuple[Pt, ...]
    stroke: Stroke = field(default_factory=Stroke)

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Line:
        return cls(pts=_pts(sexp), stroke=Stroke.from_sexp(sexp.find("stroke")))


@dataclass(frozen=True)
class Polyline:
    pts: Tuple[Pt, ...]
    stroke: Stroke = field(default_factory=Stroke)
    fill: str = "none"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Polyline:
        return cls(pts=_pts(sexp), stroke=Stroke.from_sexp(sexp.find("stroke")), fill=_fill(sexp))


@dataclass(frozen=True)
class Rectangle:
    start: Pt
    end: Pt
    stroke: Stroke = field(default_factory=Stroke)
    fill: str = "none"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Rectangle:
        return cls(
            start=_pt(sexp, "start"),
            end=_pt(sexp, "end"),
            stroke=Stroke.from_sexp(sexp.find("stroke")),
            fill=_fill(sexp),
        )


@dataclass(frozen=True)
class GraphicText:
    """Free text drawn as part of a library symbol."""

    text: str
    pos: Pos
    effects: Effects = field(default_factory=Effects)

    @classmethod
    def from_sexp(cls, sexp: SExp) -> GraphicText:
        return cls(
            text=sexp.get_string(0) or "",
            pos=Pos.from_sexp(sexp.find("at")),
            effects=Effects.from_sexp(sexp.find("effects")),
        )


Graphic = Union[Arc, Circle, Curve, Line, Polyline, Rectangle, GraphicText]

GRAPHIC_TYPES = {
    "arc": Arc,
    "circle": Circle,
    "bezier": Curve,
    "polyline": Polyline,
    "line": Line,
    "rectangle": Rectangle,
    "text": GraphicText,
}


def parse_graphics(sexp: SExp) -> List[Graphic]:
    """Parse every graphic primitive child of a symbol unit, in order."""
    graphics: List[Graphic] = []
    for child in sexp.iter_children():
        graphic_type = GRAPHIC_TYPES.get(child.tag)
        if graphic_type is not None:
            graphics.append(graphic_type.from_sexp(child))
    return graphics
