"""
Library symbol models.

A library symbol is split into sub-units named ``{name}_{unit}_{style}``.
Unit 0 holds graphics and pins shared by every unit; units 1..n are the
individual gates of a multi-unit part. All geometry here is local to the
symbol and untransformed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..core.sexp import SExp
from ..core.sexp_file import load_symbol_lib
from .effects import Effects, Property
from .graphics import Graphic, parse_graphics
from .point import Pos

logger = logging.getLogger(__name__)

DEFAULT_PIN_LENGTH = 2.54


@dataclass(frozen=True)
class LibraryPin:
    """
    A pin of a library symbol.

    ``pos`` is the connection point (where wires attach) and its angle is
    the direction the pin body extends from there towards the symbol.
    """

    number: str
    name: str
    pos: Pos
    length: float = DEFAULT_PIN_LENGTH
    type: str = "passive"
    style: str = "line"
    hide: bool = False
    name_effects: Effects = field(default_factory=Effects)
    number_effects: Effects = field(default_factory=Effects)

    @classmethod
    def from_sexp(cls, sexp: SExp) -> LibraryPin:
        """Parse ``(pin type style (at x y a) (length l) (name ..) (number ..))``."""
        length = DEFAULT_PIN_LENGTH
        if ln := sexp.find("length"):
            length = ln.get_float(0) or 0.0

        name, name_effects = "", Effects()
        if name_node := sexp.find("name"):
            name = name_node.get_string(0) or ""
            name_effects = Effects.from_sexp(name_node.find("effects"))

        number, number_effects = "", Effects()
        if num_node := sexp.find("number"):
            number = num_node.get_string(0) or ""
            number_effects = Effects.from_sexp(num_node.find("effects"))

        return cls(
            number=number,
            name=name,
            pos=Pos.from_sexp(sexp.find("at")),
            length=length,
            type=sexp.get_string(0) or "passive",
            style=sexp.get_string(1) or "line",
            hide=sexp.get_flag("hide"),
            name_effects=name_effects,
            number_effects=number_effects,
        )


@dataclass(frozen=True)
class LibraryUnit:
    """One sub-drawing of a library symbol."""

    name: str
    unit: int
    style: int
    graphics: Tuple[Graphic, ...] = ()
    pins: Tuple[LibraryPin, ...] = ()

    @classmethod
    def from_sexp(cls, sexp: SExp) -> LibraryUnit:
        name = sexp.get_string(0) or ""
        unit, style = parse_unit_name(name)
        return cls(
            name=name,
            unit=unit,
            style=style,
            graphics=tuple(parse_graphics(sexp)),
            pins=tuple(LibraryPin.from_sexp(p) for p in sexp.find_all("pin")),
        )


def parse_unit_name(name: str) -> Tuple[int, int]:
    """
    Extract (unit, style) from a sub-unit name like ``LM2904_2_1``.

    Names that do not follow the pattern are treated as unit 0, style 1.
    """
    parts = name.split("_")
    if len(parts) >= 3:
        try:
            return int(parts[-2]), int(parts[-1])
        except ValueError:
            pass
    logger.warning("Unexpected library unit name %r, treating as shared unit", name)
    return 0, 1


@dataclass(frozen=True)
class LibrarySymbol:
    """
    A symbol definition: properties plus sub-units of graphics and pins.

    Instances are shared between every placement that refers to them and
    are never copied or modified per placement.
    """

    lib_id: str
    units: Tuple[LibraryUnit, ...] = ()
    properties: Tuple[Property, ...] = ()
    power: bool = False
    extends: Optional[str] = None

    @property
    def is_power(self) -> bool:
        return self.power

    @property
    def unit_count(self) -> int:
        return len({u.unit for u in self.units if u.unit != 0})

    def get_property(self, key: str) -> Optional[str]:
        for prop in self.properties:
            if prop.key == key:
                return prop.value
        return None

    def _active_units(self, unit: int) -> Iterator[LibraryUnit]:
        for lib_unit in self.units:
            if lib_unit.unit == 0 or lib_unit.unit == unit:
                yield lib_unit

    def pins(self, unit: int) -> List[LibraryPin]:
        """Pins of the shared unit 0 plus those of ``unit``."""
        return [pin for u in self._active_units(unit) for pin in u.pins]

    def graphics(self, unit: int) -> List[Graphic]:
        """Graphics of the shared unit 0 plus those of ``unit``."""
        return [g for u in self._active_units(unit) for g in u.graphics]

    def pin(self, number: str) -> Optional[LibraryPin]:
        """Find a pin by number in any unit."""
        for lib_unit in self.units:
            for pin in lib_unit.pins:
                if pin.number == number:
                    return pin
        return None

    def pin_unit(self, number: str) -> Optional[int]:
        """Return the unit that owns the pin with this number."""
        for lib_unit in self.units:
            if any(pin.number == number for pin in lib_unit.pins):
                return lib_unit.unit
        return None

    @classmethod
    def from_sexp(cls, sexp: SExp, lib_id: Optional[str] = None) -> LibrarySymbol:
        """
        Parse a ``(symbol "Lib:Name" ...)`` definition.

        Args:
            sexp: The symbol node
            lib_id: Override the identifier (used for symbols loaded from a
                .kicad_sym file whose names carry no library nickname)
        """
        extends = None
        if ext := sexp.find("extends"):
            extends = ext.get_string(0)

        return cls(
            lib_id=lib_id or sexp.get_string(0) or "",
            units=tuple(LibraryUnit.from_sexp(u) for u in sexp.find_all("symbol")),
            properties=tuple(Property.from_sexp(p) for p in sexp.find_all("property")),
            power=sexp.find("power") is not None,
            extends=extends,
        )


def _resolve_extends(
    name: str, symbols: Dict[str, LibrarySymbol], seen: Tuple[str, ...] = ()
) -> LibrarySymbol:
    """
    Fill in the units of a derived symbol from its parent.

    ``(extends "LM2904")`` symbols carry only properties; units, pins and
    the power flag come from the parent in the same library. Properties of
    the derived symbol override the parent's by key.
    """
    symbol = symbols[name]
    if not symbol.extends:
        return symbol
    if symbol.extends not in symbols or symbol.extends in seen:
        logger.warning("Cannot resolve parent %r of %s", symbol.extends, symbol.lib_id)
        return symbol

    parent = _resolve_extends(symbol.extends, symbols, seen + (name,))
    own_keys = {p.key for p in symbol.properties}
    inherited = tuple(p for p in parent.properties if p.key not in own_keys)
    return replace(
        symbol,
        units=parent.units,
        properties=inherited + symbol.properties,
        power=symbol.power or parent.power,
    )


@dataclass
class SymbolLibrary:
    """A KiCad symbol library (.kicad_sym file)."""

    name: str
    symbols: Dict[str, LibrarySymbol] = field(default_factory=dict)

    def get_symbol(self, name: str) -> Optional[LibrarySymbol]:
        return self.symbols.get(name)

    def __len__(self) -> int:
        return len(self.symbols)

    @classmethod
    def from_sexp(cls, sexp: SExp, name: str) -> SymbolLibrary:
        symbols = {}
        for sym_sexp in sexp.find_all("symbol"):
            sym_name = sym_sexp.get_string(0) or ""
            symbols[sym_name] = LibrarySymbol.from_sexp(sym_sexp, lib_id=f"{name}:{sym_name}")
        for sym_name in symbols:
            symbols[sym_name] = _resolve_extends(sym_name, symbols)
        return cls(name=name, symbols=symbols)

    @classmethod
    def load(cls, path: Union[str, Path], name: Optional[str] = None) -> SymbolLibrary:
        """Load a library; the nickname defaults to the file stem."""
        path = Path(path)
        library = cls.from_sexp(load_symbol_lib(path), name or path.stem)
        logger.debug("Loaded %d symbols from %s", len(library), path)
        return library


class LibraryRepository:
    """
    Lookup of library symbols by lib_id (e.g. ``"Device:R"``).

    Symbols embedded in a schematic's ``lib_symbols`` section are found
    first; external libraries are consulted next, loading ``{nickname}.kicad_sym``
    from the search paths on first use.
    """

    def __init__(self, embedded: Optional[Dict[str, LibrarySymbol]] = None):
        self.embedded: Dict[str, LibrarySymbol] = dict(embedded or {})
        self.libraries: Dict[str, SymbolLibrary] = {}
        self.search_paths: List[Path] = []

    def add(self, symbol: LibrarySymbol) -> None:
        self.embedded[symbol.lib_id] = symbol

    def add_library(self, library: SymbolLibrary) -> None:
        self.libraries[library.name] = library

    def add_search_path(self, path: Union[str, Path]) -> None:
        self.search_paths.append(Path(path))

    def lookup(self, lib_id: str) -> Optional[LibrarySymbol]:
        if symbol := self.embedded.get(lib_id):
            return symbol
        if ":" not in lib_id:
            return None

        nickname, name = lib_id.split(":", 1)
        if nickname not in self.libraries:
            for search_path in self.search_paths:
                lib_path = search_path / f"{nickname}.kicad_sym"
                if lib_path.exists():
                    self.add_library(SymbolLibrary.load(lib_path, nickname))
                    break
            else:
                return None
        return self.libraries[nickname].get_symbol(name)

    def __contains__(self, lib_id: str) -> bool:
        return self.lookup(lib_id) is not None

    def __len__(self) -> int:
        return len(self.embedded) + sum(len(lib) for lib in self.libraries.values())
