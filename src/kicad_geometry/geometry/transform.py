"""
2D affine transform for placing library geometry on the sheet.

The pipeline is fixed: scale, mirror, rotate, translate. Points are row
vectors multiplied on the left of each matrix.

Library symbols are drawn with Y pointing up while the sheet has Y
pointing down, so the "no mirror" matrix flips Y. Mirroring about the X
axis cancels that flip and is therefore the identity.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from kicad_geometry.schema.point import Pt

MIRROR_MATRICES = {
    None: np.array([[1.0, 0.0], [0.0, -1.0]]),
    "x": np.array([[1.0, 0.0], [0.0, 1.0]]),
    "y": np.array([[-1.0, 0.0], [0.0, -1.0]]),
    "xy": np.array([[-1.0, 0.0], [0.0, 1.0]]),
}

PointsLike = Union[np.ndarray, Sequence[Pt], Sequence[Sequence[float]]]


class Transform:
    """
    Builder for the placement transform.

    Example::

        points = (
            Transform()
            .mirror(symbol.mirror)
            .translation(symbol.pos.pt)
            .rotation(symbol.pos.angle)
            .apply([(7.62, 0.0)])
        )

    The order of builder calls does not matter; ``apply`` always runs the
    stages in pipeline order.
    """

    def __init__(self):
        self._scale: Optional[float] = None
        self._mirror: Optional[str] = None
        self._angle: float = 0.0
        self._offset = np.zeros(2)

    def scale(self, factor: float) -> Transform:
        """Scale by ``factor``; the scale stage also flips Y."""
        self._scale = factor
        return self

    def mirror(self, axis: Optional[str]) -> Transform:
        """
        Select the mirror axis: None, "x", "y" or "xy".

        Raises:
            ValueError: For any other axis name
        """
        if axis == "":
            axis = None
        if axis not in MIRROR_MATRICES:
            raise ValueError(f"Invalid mirror axis: {axis!r}")
        self._mirror = axis
        return self

    def rotation(self, degrees: float) -> Transform:
        self._angle = degrees
        return self

    def translation(self, offset: Union[Pt, Sequence[float]]) -> Transform:
        if isinstance(offset, Pt):
            offset = (offset.x, offset.y)
        self._offset = np.array([offset[0], offset[1]], dtype=float)
        return self

    def matrix(self) -> np.ndarray:
        """The combined 2x2 linear part of the pipeline."""
        m = np.identity(2)
        if self._scale is not None:
            m = m @ np.array([[self._scale, 0.0], [0.0, -self._scale]])
        m = m @ MIRROR_MATRICES[self._mirror]
        theta = math.radians(self._angle)
        rot = np.array(
            [
                [math.cos(theta), -math.sin(theta)],
                [math.sin(theta), math.cos(theta)],
            ]
        )
        return m @ rot

    def apply(self, points: PointsLike) -> np.ndarray:
        """
        Transform a batch of points.

        Args:
            points: (N, 2) array-like or a sequence of ``Pt``

        Returns:
            (N, 2) float array in the same order
        """
        if len(points) and isinstance(points[0], Pt):
            arr = np.array([[p.x, p.y] for p in points], dtype=float)
        else:
            arr = np.asarray(points, dtype=float).reshape(-1, 2)
        return arr @ self.matrix() + self._offset

    def apply_point(self, pt: Pt) -> Pt:
        """Transform a single point."""
        x, y = self.apply([pt])[0]
        return Pt(float(x), float(y))
