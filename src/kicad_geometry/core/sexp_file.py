"""
File loaders for KiCad S-expression documents.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from kicad_geometry.core.sexp import SExp, parse_sexp
from kicad_geometry.exceptions import FileFormatError
from kicad_geometry.exceptions import FileNotFoundError as KiCadFileNotFoundError

logger = logging.getLogger(__name__)


def _load(path: Union[str, Path], root_tag: str, description: str, extension: str) -> SExp:
    path = Path(path)
    if not path.exists():
        raise KiCadFileNotFoundError(
            f"{description} not found",
            context={"file": str(path)},
            suggestions=[
                "Check that the file path is correct",
                f"Ensure the file has a {extension} extension",
            ],
        )

    logger.debug("Reading %s", path)
    sexp = parse_sexp(path.read_text(encoding="utf-8"), file_path=str(path))

    if sexp.tag != root_tag:
        raise FileFormatError(
            f"Not a KiCad {description.lower()}",
            context={"file": str(path), "expected": root_tag, "got": sexp.tag},
            suggestions=["This file appears to be a different KiCad file type"],
        )
    return sexp


def load_schematic(path: Union[str, Path]) -> SExp:
    """
    Load a KiCad schematic file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        FileFormatError: If the root node is not ``kicad_sch``
        ParseError: If the text is not a valid S-expression
    """
    return _load(path, "kicad_sch", "Schematic file", ".kicad_sch")


def load_symbol_lib(path: Union[str, Path]) -> SExp:
    """Load a KiCad symbol library (.kicad_sym) file."""
    return _load(path, "kicad_symbol_lib", "Symbol library", ".kicad_sym")
