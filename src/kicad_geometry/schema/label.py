"""
Label and text models.

Local labels connect wires on one sheet; global labels connect across
sheets. Both name the net they touch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..core.sexp import SExp
from .effects import Effects, Property
from .point import Pos


@dataclass(frozen=True)
class LocalLabel:
    text: str
    pos: Pos
    effects: Effects = field(default_factory=Effects)
    uuid: str = ""

    @classmethod
    def from_sexp(cls, sexp: SExp) -> LocalLabel:
        return cls(
            text=sexp.get_string(0) or "",
            pos=Pos.from_sexp(sexp.find("at")),
            effects=Effects.from_sexp(sexp.find("effects")),
            uuid=sexp.child_string("uuid"),
        )


@dataclass(frozen=True)
class GlobalLabel:
    """A global label; ``shape`` is input, output, bidirectional, ..."""

    text: str
    pos: Pos
    shape: str = "input"
    effects: Effects = field(default_factory=Effects)
    uuid: str = ""
    properties: List[Property] = field(default_factory=list, compare=False, hash=False)

    @classmethod
    def from_sexp(cls, sexp: SExp) -> GlobalLabel:
        shape = "input"
        if shape_node := sexp.find("shape"):
            shape = shape_node.get_string(0) or "input"
        return cls(
            text=sexp.get_string(0) or "",
            pos=Pos.from_sexp(sexp.find("at")),
            shape=shape,
            effects=Effects.from_sexp(sexp.find("effects")),
            uuid=sexp.child_string("uuid"),
            properties=[Property.from_sexp(p) for p in sexp.find_all("property")],
        )


@dataclass(frozen=True)
class Text:
    """Free text on the sheet. Not electrically meaningful."""

    text: str
    pos: Pos
    effects: Effects = field(default_factory=Effects)
    uuid: str = ""

    @classmethod
    def from_sexp(cls, sexp: SExp) -> Text:
        return cls(
            text=sexp.get_string(0) or "",
            pos=Pos.from_sexp(sexp.find("at")),
            effects=Effects.from_sexp(sexp.find("effects")),
            uuid=sexp.child_string("uuid"),
        )
