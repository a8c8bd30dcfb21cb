"""
Text effects and symbol properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Optional, Tuple

from .point import Pos

if TYPE_CHECKING:
    from kicad_geometry.core.sexp import SExp

DEFAULT_FONT_SIZE = 1.27


class Justify(Enum):
    """Text alignment flag. An empty justify set means centered."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    MIRROR = "mirror"


@dataclass(frozen=True)
class Font:
    """Font face and size; ``size`` is (height, width) in mm."""

    face: Optional[str] = None
    size: Tuple[float, float] = (DEFAULT_FONT_SIZE, DEFAULT_FONT_SIZE)
    thickness: Optional[float] = None
    bold: bool = False
    italic: bool = False

    @property
    def height(self) -> float:
        return self.size[0]

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Font:
        """Parse ``(font (face "x") (size h w) [bold] [italic])``."""
        face = None
        if face_node := sexp.find("face"):
            face = face_node.get_string(0)

        size = (DEFAULT_FONT_SIZE, DEFAULT_FONT_SIZE)
        if size_node := sexp.find("size"):
            height = size_node.get_float(0)
            width = size_node.get_float(1)
            if height is not None:
                size = (height, width if width is not None else height)

        thickness = None
        if thick_node := sexp.find("thickness"):
            thickness = thick_node.get_float(0)

        return cls(
            face=face,
            size=size,
            thickness=thickness,
            bold=sexp.get_flag("bold"),
            italic=sexp.get_flag("italic"),
        )


@dataclass(frozen=True)
class Effects:
    """Text effects: font, justification and visibility."""

    font: Font = field(default_factory=Font)
    justify: FrozenSet[Justify] = frozenset()
    hide: bool = False

    @classmethod
    def from_sexp(cls, sexp: Optional[SExp]) -> Effects:
        if sexp is None:
            return cls()

        font = Font()
        if font_node := sexp.find("font"):
            font = Font.from_sexp(font_node)

        justify = set()
        if justify_node := sexp.find("justify"):
            for atom in justify_node.atoms():
                try:
                    justify.add(Justify(str(atom)))
                except ValueError:
                    # "center" and unknown flags leave the axis centered
                    pass

        return cls(font=font, justify=frozenset(justify), hide=sexp.get_flag("hide"))


@dataclass(frozen=True)
class Property:
    """A key/value property with its own placement and text effects."""

    key: str
    value: str
    pos: Pos = field(default_factory=Pos)
    effects: Effects = field(default_factory=Effects)
    hide: bool = False

    @property
    def visible(self) -> bool:
        return not (self.hide or self.effects.hide)

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Property:
        """Parse ``(property "Key" "Value" (at x y a) (effects ...))``."""
        return cls(
            key=sexp.get_string(0) or "",
            value=sexp.get_string(1) or "",
            pos=Pos.from_sexp(sexp.find("at")),
            effects=Effects.from_sexp(sexp.find("effects")),
            hide=sexp.get_flag("hide"),
        )
