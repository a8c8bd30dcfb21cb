"""
Resolve symbolic positions to sheet coordinates.

A position is either an absolute point or a reference to a pin of a
placed symbol ("pin 2 of U1"). Pin references are resolved through the
library definition and the placement transform.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from kicad_geometry.exceptions import (
    LibraryNotFoundError,
    PinNotFoundError,
    PinUnitNotFoundError,
    SymbolNotFoundError,
    UnsupportedPositionError,
)
from kicad_geometry.schema.library import LibraryPin
from kicad_geometry.schema.point import Pt
from kicad_geometry.schema.symbol import SymbolInstance

from .transform import Transform

if TYPE_CHECKING:
    from kicad_geometry.schema.schematic import Schematic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AtPoint:
    """An absolute point."""

    pt: Pt


@dataclass(frozen=True)
class AtPin:
    """A pin of a placed symbol, by reference designator and pin number."""

    reference: str
    pin: str


@dataclass(frozen=True)
class AtDot:
    """A named dot. Not resolvable."""

    name: str


At = Union[AtPoint, AtPin, AtDot]


def symbol_transform(symbol: SymbolInstance) -> Transform:
    """The transform from library coordinates to sheet coordinates."""
    return Transform().mirror(symbol.mirror).translation(symbol.pos.pt).rotation(symbol.pos.angle)


def pin_position(symbol: SymbolInstance, pin: LibraryPin) -> Pt:
    """Sheet position of a library pin on a placed symbol."""
    return symbol_transform(symbol).apply_point(pin.pos.pt)


def resolve(at: At, schematic: Schematic) -> Pt:
    """
    Resolve a position reference to an absolute point.

    Raises:
        PinUnitNotFoundError: No placed unit of the reference has the pin
        SymbolNotFoundError: The owning unit is not placed
        LibraryNotFoundError: The placement's lib_id is unknown
        PinNotFoundError: The library symbol lacks the pin
        UnsupportedPositionError: For ``AtDot``
    """
    if isinstance(at, AtPoint):
        return at.pt

    if isinstance(at, AtDot):
        raise UnsupportedPositionError(
            "Dot positions cannot be resolved", context={"dot": at.name}
        )

    if not isinstance(at, AtPin):
        raise TypeError(f"Unknown position reference: {at!r}")

    context = {"reference": at.reference, "pin": at.pin}

    unit = schematic.pin_unit(at.reference, at.pin)
    if unit is None:
        raise PinUnitNotFoundError(
            "No placed unit exposes the pin",
            context=context,
            suggestions=[f"Check that {at.reference} is placed and has pin {at.pin}"],
        )

    symbol = schematic.symbol(at.reference, unit)
    if symbol is None:
        raise SymbolNotFoundError(
            "Symbol not found", context={**context, "unit": unit}
        )

    lib = schematic.library_symbol(symbol.lib_id)
    if lib is None:
        raise LibraryNotFoundError(
            "Library symbol not found",
            context={**context, "lib_id": symbol.lib_id},
            suggestions=["Check the schematic's lib_symbols section or the library search paths"],
        )

    pin = lib.pin(at.pin)
    if pin is None:
        raise PinNotFoundError(
            "Pin not found in library symbol", context={**context, "lib_id": symbol.lib_id}
        )

    pt = pin_position(symbol, pin)
    logger.debug("Resolved %s.%s (unit %d) to %s", at.reference, at.pin, unit, pt)
    return pt
