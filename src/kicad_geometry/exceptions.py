"""
Exception hierarchy for kicad-geometry.

Every error carries a short ``kind`` tag, a message, optional context
(file, reference, pin, ...) and optional suggestions for fixing it.

Example::

    from kicad_geometry.exceptions import PinNotFoundError

    raise PinNotFoundError(
        "Pin not found in library symbol",
        context={"lib_id": "Device:R", "pin": "3"},
        suggestions=["Device:R only has pins 1 and 2"],
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class KiCadGeometryError(Exception):
    """
    Base exception for all kicad-geometry errors.

    Attributes:
        kind: Short tag identifying the error family
        context: Dictionary of contextual information
        suggestions: List of actionable suggestions
    """

    kind = "Error"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class ParseError(KiCadGeometryError):
    """
    S-expression text could not be parsed.

    Example::

        raise ParseError("Unbalanced parenthesis", line=12, column=4)
    """

    kind = "ParseError"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        if line is not None and "line" not in ctx:
            ctx["line"] = line
        if column is not None and "column" not in ctx:
            ctx["column"] = column
        self.line = line
        self.column = column

        super().__init__(message, ctx, suggestions)


class FileFormatError(KiCadGeometryError):
    """File parsed but is not the expected KiCad file type."""

    kind = "FileFormatError"


class FileNotFoundError(KiCadGeometryError):
    """Input file does not exist."""

    kind = "FileNotFound"


class ConfigurationError(KiCadGeometryError):
    """Invalid or unreadable configuration file."""

    kind = "ConfigurationError"


# Position resolver


class ResolveError(KiCadGeometryError):
    """A symbolic position could not be turned into a point."""

    kind = "ResolveError"


class PinUnitNotFoundError(ResolveError):
    """No placed unit of the reference exposes the requested pin."""

    kind = "PinUnitNotFound"


class SymbolNotFoundError(ResolveError):
    """No placed symbol matches the reference and unit."""

    kind = "SymbolNotFound"


class LibraryNotFoundError(ResolveError):
    """The placed symbol's lib_id has no library definition."""

    kind = "LibraryNotFound"


class PinNotFoundError(ResolveError):
    """The library symbol has no pin with the requested number."""

    kind = "PinNotFound"


class UnsupportedPositionError(ResolveError):
    """The position reference kind cannot be resolved."""

    kind = "DotUnsupported"


# Outline engine


class GeometryError(KiCadGeometryError):
    """An outline could not be computed."""

    kind = "GeometryError"


class UnsupportedAngleError(GeometryError):
    """
    Text is rotated by an angle the outline rules do not cover.

    Only 0, 90, 180 and 270 degrees are laid out.

    Attributes:
        angle: The rejected angle in degrees
    """

    kind = "UnsupportedAngle"

    def __init__(
        self,
        angle: float,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.angle = angle
        ctx = {"angle": angle}
        ctx.update(context or {})
        super().__init__(
            f"Unsupported text angle: {angle}",
            ctx,
            suggestions or ["Rotate the text to 0, 90, 180 or 270 degrees"],
        )


class FontError(KiCadGeometryError):
    """A font face could not be loaded for text measurement."""

    kind = "FontError"


# Netlist


class NetNotFoundError(KiCadGeometryError):
    """No net carries the requested name."""

    kind = "NetNotFound"


__all__ = [
    "KiCadGeometryError",
    "ParseError",
    "FileFormatError",
    "FileNotFoundError",
    "ConfigurationError",
    "ResolveError",
    "PinUnitNotFoundError",
    "SymbolNotFoundError",
    "LibraryNotFoundError",
    "PinNotFoundError",
    "UnsupportedPositionError",
    "GeometryError",
    "UnsupportedAngleError",
    "FontError",
    "NetNotFoundError",
]
