"""
Core S-expression parsing and file loading.
"""

from .sexp import Atom, SExp, SExpParser, parse_sexp
from .sexp_file import load_schematic, load_symbol_lib

__all__ = [
    "Atom",
    "SExp",
    "SExpParser",
    "parse_sexp",
    "load_schematic",
    "load_symbol_lib",
]
