"""
Placed symbol model.

A placement stores only where and how a library symbol is drawn; pin and
graphic geometry come from the shared library definition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.sexp import SExp
from .effects import Property
from .point import Pos

MIRROR_AXES = ("x", "y", "xy")


@dataclass(frozen=True)
class SymbolPin:
    """Pin number and uuid recorded on a placement."""

    number: str
    uuid: str = ""

    @classmethod
    def from_sexp(cls, sexp: SExp) -> SymbolPin:
        return cls(number=sexp.get_string(0) or "", uuid=sexp.child_string("uuid"))


@dataclass
class SymbolInstance:
    """
    One placement of a library symbol in a schematic.

    Multi-unit parts appear once per placed unit, all sharing the same
    Reference.
    """

    lib_id: str
    pos: Pos = field(default_factory=Pos)
    mirror: Optional[str] = None
    unit: int = 1
    uuid: str = ""
    in_bom: bool = True
    on_board: bool = True
    dnp: bool = False
    pins: List[SymbolPin] = field(default_factory=list)
    properties: List[Property] = field(default_factory=list)

    @property
    def reference(self) -> str:
        return self.get_property("Reference") or ""

    @property
    def value(self) -> str:
        return self.get_property("Value") or ""

    @property
    def footprint(self) -> str:
        return self.get_property("Footprint") or ""

    def get_property(self, key: str) -> Optional[str]:
        for prop in self.properties:
            if prop.key == key:
                return prop.value
        return None

    def visible_properties(self) -> List[Property]:
        return [p for p in self.properties if p.visible]

    @property
    def property_map(self) -> Dict[str, str]:
        return {p.key: p.value for p in self.properties}

    @classmethod
    def from_sexp(cls, sexp: SExp) -> SymbolInstance:
        """Parse a placed ``(symbol (lib_id ..) (at ..) ...)`` node."""
        lib_id = ""
        if lib_node := sexp.find("lib_id"):
            lib_id = lib_node.get_string(0) or ""

        mirror = None
        if mirror_node := sexp.find("mirror"):
            mirror = mirror_node.get_string(0) or None

        unit = 1
        if unit_node := sexp.find("unit"):
            value = unit_node.get_int(0)
            if value is not None:
                unit = value

        return cls(
            lib_id=lib_id,
            pos=Pos.from_sexp(sexp.find("at")),
            mirror=mirror,
            unit=unit,
            uuid=sexp.child_string("uuid"),
            in_bom=sexp.get_flag("in_bom", default=True),
            on_board=sexp.get_flag("on_board", default=True),
            dnp=sexp.get_flag("dnp"),
            pins=[SymbolPin.from_sexp(p) for p in sexp.find_all("pin")],
            properties=[Property.from_sexp(p) for p in sexp.find_all("property")],
        )

    def __repr__(self) -> str:
        return f"SymbolInstance({self.reference!r}, {self.lib_id!r}, unit={self.unit})"
