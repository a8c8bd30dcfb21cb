"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
import traceback
from typing import TYPE_CHECKING, List, Optional

from kicad_geometry.exceptions import KiCadGeometryError

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console", "parse_paths"]

_error_console: Optional[Console] = None


def get_error_console() -> Console:
    """Lazily created Rich console on stderr."""
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True)
    return _error_console


def print_error(e: Exception, verbose: bool = False, use_rich: Optional[bool] = None) -> None:
    """
    Print an exception for the user.

    Rich markup is used on a terminal; plain text otherwise.

    Args:
        e: The exception to print
        verbose: Print the full traceback instead
        use_rich: Override terminal detection
    """
    if verbose:
        print(traceback.format_exc(), file=sys.stderr)
        return

    console = get_error_console()
    if use_rich is None:
        use_rich = console.is_terminal

    if use_rich and isinstance(e, KiCadGeometryError):
        from rich.markup import escape

        console.print(f"[bold red]{e.kind}:[/bold red] {escape(str(e))}")
    else:
        print(format_error(e), file=sys.stderr)


def format_error(e: Exception) -> str:
    """Plain-text error line(s)."""
    if isinstance(e, KiCadGeometryError):
        return f"Error ({e.kind}): {e}"
    return f"Error: {type(e).__name__}: {e}"


def parse_paths(values: Optional[List[str]]) -> List[str]:
    """Flatten repeated and os.pathsep-separated path options."""
    import os

    paths: List[str] = []
    for value in values or []:
        paths.extend(p for p in value.split(os.pathsep) if p)
    return paths
