"""
S-expression reader for KiCad files.

Schematics (.kicad_sch) and symbol libraries (.kicad_sym) are nested
lists whose first element is a tag:

    (symbol (lib_id "Device:R") (at 100.33 50.8 90) (unit 1)
        (property "Reference" "R1" (at 100.33 46.99 0)))

Only reading is supported; the tree is converted into typed models by
``kicad_geometry.schema``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from kicad_geometry.exceptions import ParseError


class Atom(str):
    """A bare (unquoted) atom such as ``hide`` or ``yes``; quoted strings stay plain ``str``."""

    __slots__ = ()


SExpValue = Union[str, int, float, "SExp"]


@dataclass
class SExp:
    """
    One list node of an S-expression tree.

    Attributes:
        tag: First element of the list (e.g. "symbol", "at")
        values: Remaining elements, atoms or nested nodes
    """

    tag: str
    values: List[SExpValue] = field(default_factory=list)

    def find(self, tag: str) -> Optional[SExp]:
        """Find the first child node with the given tag."""
        for v in self.values:
            if isinstance(v, SExp) and v.tag == tag:
                return v
        return None

    def find_all(self, tag: str) -> List[SExp]:
        """Find all child nodes with the given tag."""
        return [v for v in self.values if isinstance(v, SExp) and v.tag == tag]

    def atoms(self) -> List[Union[str, int, float]]:
        """Return the atom values, skipping child nodes."""
        return [v for v in self.values if not isinstance(v, SExp)]

    def get_value(self, index: int = 0) -> Optional[SExpValue]:
        if 0 <= index < len(self.values):
            return self.values[index]
        return None

    def get_string(self, index: int = 0) -> Optional[str]:
        val = self.get_value(index)
        if val is None or isinstance(val, SExp):
            return None
        return str(val)

    def get_int(self, index: int = 0) -> Optional[int]:
        val = self.get_value(index)
        if isinstance(val, bool):
            return None
        if isinstance(val, int):
            return val
        if isinstance(val, float) and val.is_integer():
            return int(val)
        if isinstance(val, str):
            try:
                return int(val)
            except ValueError:
                return None
        return None

    def get_float(self, index: int = 0) -> Optional[float]:
        val = self.get_value(index)
        if isinstance(val, (int, float)):
            return float(val)
        if isinstance(val, str):
            try:
                return float(val)
            except ValueError:
                return None
        return None

    def child_string(self, tag: str, default: str = "") -> str:
        """Return the first value of child ``tag``, e.g. the text of ``(uuid "...")``."""
        if child := self.find(tag):
            value = child.get_string(0)
            if value is not None:
                return value
        return default

    def has_atom(self, atom: str) -> bool:
        """Check for a bare keyword such as ``hide``; quoted strings never match."""
        return any(isinstance(v, Atom) and v == atom for v in self.values)

    def get_flag(self, tag: str, default: bool = False) -> bool:
        """
        Read a yes/no flag.

        Handles both ``(hide yes)`` child nodes and the older bare
        ``hide`` keyword.
        """
        child = self.find(tag)
        if child is not None:
            value = child.get_string(0)
            if value is None:
                return True
            return value in ("yes", "true")
        if self.has_atom(tag):
            return True
        return default

    def iter_children(self) -> Iterator[SExp]:
        for v in self.values:
            if isinstance(v, SExp):
                yield v

    def __repr__(self) -> str:
        if not self.values:
            return f"SExp({self.tag!r})"
        return f"SExp({self.tag!r}, {self.values!r})"


class SExpParser:
    """Recursive-descent parser for the KiCad S-expression dialect."""

    def __init__(self, text: str, file_path: Optional[str] = None):
        self.text = text
        self.pos = 0
        self.length = len(text)
        self.file_path = file_path

    def parse(self) -> SExp:
        """Parse the entire text and return the root node."""
        self._skip_whitespace()
        if self.pos >= self.length or self.text[self.pos] != "(":
            self._fail("Expected '(' at start of document")
        result = self._parse_list()
        self._skip_whitespace()
        if self.pos < self.length:
            self._fail("Unexpected content after root expression")
        return result

    def _location(self) -> Tuple[int, int]:
        line = self.text.count("\n", 0, self.pos) + 1
        column = self.pos - (self.text.rfind("\n", 0, self.pos) + 1) + 1
        return line, column

    def _fail(self, message: str) -> None:
        line, column = self._location()
        raise ParseError(
            message,
            line=line,
            column=column,
            file_path=self.file_path,
            suggestions=["Check for unbalanced parentheses or unterminated strings"],
        )

    def _skip_whitespace(self) -> None:
        while self.pos < self.length:
            c = self.text[self.pos]
            if c in " \t\n\r":
                self.pos += 1
            elif c == ";":
                while self.pos < self.length and self.text[self.pos] != "\n":
                    self.pos += 1
            else:
                break

    def _parse_expr(self) -> SExpValue:
        self._skip_whitespace()

        if self.pos >= self.length:
            self._fail("Unexpected end of input")

        c = self.text[self.pos]
        if c == "(":
            return self._parse_list()
        if c == '"':
            return self._parse_string()
        if c == ")":
            self._fail("Unexpected ')'")
        return self._parse_atom()

    def _parse_list(self) -> SExp:
        self.pos += 1
        self._skip_whitespace()

        if self.pos >= self.length:
            self._fail("Unexpected end of input in list")

        if self.text[self.pos] == ")":
            self.pos += 1
            return SExp("")

        tag = self._parse_expr()
        if isinstance(tag, SExp):
            self._fail("List tag must be an atom")
        result = SExp(str(tag))

        while True:
            self._skip_whitespace()
            if self.pos >= self.length:
                self._fail(f"Unexpected end of input, expected ')' to close ({result.tag}")
            if self.text[self.pos] == ")":
                self.pos += 1
                break
            result.values.append(self._parse_expr())

        return result

    def _parse_string(self) -> str:
        self.pos += 1
        result = []
        escapes = {"n": "\n", "t": "\t", "r": "\r"}

        while self.pos < self.length:
            c = self.text[self.pos]
            if c == '"':
                self.pos += 1
                return "".join(result)
            if c == "\\":
                self.pos += 1
                if self.pos >= self.length:
                    break
                escaped = self.text[self.pos]
                result.append(escapes.get(escaped, escaped))
            else:
                result.append(c)
            self.pos += 1

        self._fail("Unterminated string")
        return ""

    def _parse_atom(self) -> Union[str, int, float]:
        start = self.pos
        while self.pos < self.length and self.text[self.pos] not in ' \t\n\r()"':
            self.pos += 1

        token = self.text[start : self.pos]
        try:
            if "." in token or "e" in token.lower():
                return float(token)
            return int(token)
        except ValueError:
            return Atom(token)


def parse_sexp(text: str, file_path: Optional[str] = None) -> SExp:
    """Parse S-expression text into an SExp tree."""
    return SExpParser(text, file_path=file_path).parse()
