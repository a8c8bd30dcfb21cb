"""
Points, positions and rectangles in schematic millimeters.

Coordinates are compared after rounding to ``PRECISION`` decimal places.
That rounding is the connectivity key: two wire ends that agree to the
hundredth of a millimeter are the same node.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

if TYPE_CHECKING:
    from kicad_geometry.core.sexp import SExp

PRECISION = 2

PointKey = Tuple[float, float]


def quantize(value: float) -> float:
    """Round a coordinate to the connectivity precision."""
    # +0.0 folds -0.0 into the same key
    return round(value, PRECISION) + 0.0


def point_key(pt: Pt) -> PointKey:
    """Quantized map key for a point."""
    return (quantize(pt.x), quantize(pt.y))


@dataclass(frozen=True, eq=False)
class Pt:
    """A 2D point in millimeters."""

    x: float = 0.0
    y: float = 0.0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pt):
            return NotImplemented
        return point_key(self) == point_key(other)

    def __hash__(self) -> int:
        return hash(point_key(self))

    def __add__(self, other: Pt) -> Pt:
        return Pt(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Pt) -> Pt:
        return Pt(self.x - other.x, self.y - other.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self) -> str:
        return f"Pt({self.x:g}, {self.y:g})"

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Pt:
        """Parse ``(xy x y)``, ``(start x y)`` or similar."""
        return cls(sexp.get_float(0) or 0.0, sexp.get_float(1) or 0.0)


@dataclass(frozen=True, eq=False)
class Pos:
    """A point plus a rotation angle in degrees."""

    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0

    @property
    def pt(self) -> Pt:
        return Pt(self.x, self.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pos):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def _key(self) -> Tuple[float, float, float]:
        return (quantize(self.x), quantize(self.y), quantize(self.angle))

    @classmethod
    def from_sexp(cls, sexp: Optional[SExp]) -> Pos:
        """Parse ``(at x y [angle])``; a missing node is the origin."""
        if sexp is None:
            return cls()
        return cls(
            sexp.get_float(0) or 0.0,
            sexp.get_float(1) or 0.0,
            sexp.get_float(2) or 0.0,
        )


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle between two corners.

    ``start`` is not guaranteed to be the top-left corner; wire outlines
    keep the wire's own endpoint order. Use ``normalized()`` when min/max
    ordering is required.
    """

    start: Pt
    end: Pt

    @property
    def width(self) -> float:
        return abs(self.end.x - self.start.x)

    @property
    def height(self) -> float:
        return abs(self.end.y - self.start.y)

    def normalized(self) -> Rect:
        return bounding_rect([self.start, self.end])

    def union(self, other: Rect) -> Rect:
        return bounding_rect([self.start, self.end, other.start, other.end])

    def contains(self, pt: Pt) -> bool:
        r = self.normalized()
        return r.start.x <= pt.x <= r.end.x and r.start.y <= pt.y <= r.end.y


def bounding_rect(points: Iterable[Pt]) -> Rect:
    """
    Componentwise min/max over a point set.

    Raises:
        ValueError: If no points are given
    """
    pts = list(points)
    if not pts:
        raise ValueError("Cannot compute bounding rectangle of no points")
    xs = [p.x for p in pts]
    ys = [p.y for p in pts]
    return Rect(Pt(min(xs), min(ys)), Pt(max(xs), max(ys)))
