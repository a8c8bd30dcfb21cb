"""
Schematic document model.

Holds the typed items of one sheet in document order together with the
library symbols they reference. The geometry and netlist engines only
read from it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Type, TypeVar, Union

from ..core.sexp import SExp
from ..core.sexp_file import load_schematic
from ..exceptions import FileFormatError
from .label import GlobalLabel, LocalLabel, Text
from .library import LibraryRepository, LibrarySymbol, SymbolLibrary
from .symbol import SymbolInstance
from .wire import Junction, NoConnect, Wire

logger = logging.getLogger(__name__)

SchematicItem = Union[SymbolInstance, Wire, Junction, NoConnect, LocalLabel, GlobalLabel, Text]

ITEM_TYPES = {
    "symbol": SymbolInstance,
    "wire": Wire,
    "junction": Junction,
    "no_connect": NoConnect,
    "label": LocalLabel,
    "global_label": GlobalLabel,
    "text": Text,
}

T = TypeVar("T")


class Schematic:
    """
    A KiCad schematic sheet.

    Example::

        sch = Schematic.load("amp.kicad_sch")
        u1 = sch.symbol("U1", 1)
        lib = sch.library_symbol(u1.lib_id)
    """

    def __init__(
        self,
        items: Optional[Iterable[SchematicItem]] = None,
        library: Optional[LibraryRepository] = None,
        path: Optional[Path] = None,
        version: Optional[int] = None,
        uuid: str = "",
    ):
        self.items: List[SchematicItem] = list(items or [])
        self.library = library if library is not None else LibraryRepository()
        self.path = path
        self.version = version
        self.uuid = uuid

    @classmethod
    def from_sexp(cls, sexp: SExp, path: Optional[Path] = None) -> Schematic:
        """Build a schematic from a parsed ``(kicad_sch ...)`` tree."""
        if sexp.tag != "kicad_sch":
            raise FileFormatError(
                "Not a KiCad schematic",
                context={"expected": "kicad_sch", "got": sexp.tag},
            )

        library = LibraryRepository()
        if lib_symbols := sexp.find("lib_symbols"):
            for sym in lib_symbols.find_all("symbol"):
                library.add(LibrarySymbol.from_sexp(sym))

        items: List[SchematicItem] = []
        for child in sexp.iter_children():
            item_type = ITEM_TYPES.get(child.tag)
            if item_type is not None:
                items.append(item_type.from_sexp(child))

        version = None
        if version_node := sexp.find("version"):
            version = version_node.get_int(0)

        logger.debug(
            "Parsed schematic with %d items and %d library symbols", len(items), len(library)
        )
        return cls(
            items=items,
            library=library,
            path=path,
            version=version,
            uuid=sexp.child_string("uuid"),
        )

    @classmethod
    def load(
        cls,
        path: Union[str, Path],
        library_paths: Optional[Sequence[Union[str, Path]]] = None,
    ) -> Schematic:
        """
        Load a schematic from a .kicad_sch file.

        Args:
            path: Path to the schematic
            library_paths: Directories searched for ``{nickname}.kicad_sym``
                when a lib_id is not embedded in the schematic
        """
        path = Path(path)
        schematic = cls.from_sexp(load_schematic(path), path=path)
        for lib_path in library_paths or []:
            schematic.library.add_search_path(lib_path)
        return schematic

    def add_library(self, library: SymbolLibrary) -> None:
        self.library.add_library(library)

    def _of_type(self, item_type: Type[T]) -> List[T]:
        return [item for item in self.items if isinstance(item, item_type)]

    @property
    def symbols(self) -> List[SymbolInstance]:
        return self._of_type(SymbolInstance)

    @property
    def wires(self) -> List[Wire]:
        return self._of_type(Wire)

    @property
    def junctions(self) -> List[Junction]:
        return self._of_type(Junction)

    @property
    def no_connects(self) -> List[NoConnect]:
        return self._of_type(NoConnect)

    @property
    def labels(self) -> List[LocalLabel]:
        return self._of_type(LocalLabel)

    @property
    def global_labels(self) -> List[GlobalLabel]:
        return self._of_type(GlobalLabel)

    @property
    def texts(self) -> List[Text]:
        return self._of_type(Text)

    def library_symbol(self, lib_id: str) -> Optional[LibrarySymbol]:
        return self.library.lookup(lib_id)

    def symbol(self, reference: str, unit: int) -> Optional[SymbolInstance]:
        """Find the placement of ``reference`` for the given unit."""
        for sym in self.symbols:
            if sym.reference == reference and sym.unit == unit:
                return sym
        return None

    def symbols_by_reference(self, reference: str) -> List[SymbolInstance]:
        return [sym for sym in self.symbols if sym.reference == reference]

    def pin_unit(self, reference: str, pin_number: str) -> Optional[int]:
        """
        Find which unit of ``reference`` owns ``pin_number``.

        The library definitions of the placed units are searched in
        document order. The returned unit need not be placed itself. Pins
        of the shared unit 0 belong to whichever placement found them.
        """
        for sym in self.symbols_by_reference(reference):
            lib = self.library_symbol(sym.lib_id)
            if lib is None:
                logger.debug("No library symbol %s for %s", sym.lib_id, reference)
                continue
            unit = lib.pin_unit(pin_number)
            if unit is not None:
                return unit if unit != 0 else sym.unit
        return None

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        name = self.path.name if self.path else "<memory>"
        return f"Schematic({name!r}, items={len(self.items)})"
