"""
Wire, junction and no-connect models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from ..core.sexp import SExp
from .graphics import Stroke
from .point import Pos, Pt


@dataclass(frozen=True)
class Wire:
    """
    A wire segment between two points.

    Wires only connect at their endpoints; a wire passing over a pin does
    not connect to it.
    """

    pts: Tuple[Pt, Pt]
    uuid: str = ""
    stroke: Stroke = field(default_factory=Stroke)

    @property
    def start(self) -> Pt:
        return self.pts[0]

    @property
    def end(self) -> Pt:
        return self.pts[1]

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Wire:
        start, end = Pt(), Pt()
        if pts := sexp.find("pts"):
            xy_nodes = pts.find_all("xy")
            if len(xy_nodes) >= 2:
                start, end = Pt.from_sexp(xy_nodes[0]), Pt.from_sexp(xy_nodes[1])
        return cls(
            pts=(start, end),
            uuid=sexp.child_string("uuid"),
            stroke=Stroke.from_sexp(sexp.find("stroke")),
        )


@dataclass(frozen=True)
class Junction:
    """
    A junction dot. A diameter of 0 means the default size.
    """

    pos: Pos
    diameter: float = 0.0
    uuid: str = ""

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Junction:
        diameter = 0.0
        if d := sexp.find("diameter"):
            diameter = d.get_float(0) or 0.0
        return cls(
            pos=Pos.from_sexp(sexp.find("at")),
            diameter=diameter,
            uuid=sexp.child_string("uuid"),
        )


@dataclass(frozen=True)
class NoConnect:
    """A no-connect flag on an unused pin."""

    pos: Pos
    uuid: str = ""

    @classmethod
    def from_sexp(cls, sexp: SExp) -> NoConnect:
        return cls(pos=Pos.from_sexp(sexp.find("at")), uuid=sexp.child_string("uuid"))
